import os
from pathlib import Path

from vswhere.infra.search_path import list_search_path


def test_list_search_path_starts_with_working_directory(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PATH", "")

    assert list_search_path() == [Path.cwd()]


def test_list_search_path_keeps_path_order_and_skips_empty_entries(
    monkeypatch, tmp_path
) -> None:
    monkeypatch.chdir(tmp_path)
    first = tmp_path / "first"
    second = tmp_path / "second"
    monkeypatch.setenv("PATH", os.pathsep.join([str(first), "", f'"{second}"']))

    assert list_search_path() == [Path.cwd(), first, second]


def test_list_search_path_handles_missing_path_variable(monkeypatch, tmp_path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PATH", raising=False)

    assert list_search_path() == [Path.cwd()]
