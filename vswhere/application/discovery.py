"""Locating and running vswhere.

`locate()` tries an ordered list of strategies and stops at the first one that
finds the executable. A strategy that misses raises `ToolNotFoundError` and the
next one is tried; any other error ends the search immediately.
"""

import os
import stat
import uuid
from functools import partial
from pathlib import Path
from typing import Callable, Iterable, Sequence

from logly import logger

from vswhere.config import (
    INSTALLER_SUBDIR,
    OUTPUT_FORMAT_ARGS,
    PROGRAM_FILES_X86_FOLDER_ID,
    VSWHERE_EXE,
    vswhere_path_override,
)
from vswhere.core.args import Token
from vswhere.core.errors import ToolNotFoundError
from vswhere.core.instance_parser import decode_output
from vswhere.core.instance_types import InstallationRecord
from vswhere.core.selection import Selection
from vswhere.infra.known_folder import resolve_known_folder
from vswhere.infra.process import CompletedRun, spawn_and_capture
from vswhere.infra.search_path import list_search_path

Strategy = Callable[[], Path]
SpawnFn = Callable[[Path, Sequence[Token]], CompletedRun]


def _is_file(path: Path) -> bool:
    """Returns whether `path` is a regular file.

    Unlike `Path.is_file`, only "does not exist" conditions count as False; other
    errors such as permission denied propagate.
    """
    try:
        st = path.stat()
    except (FileNotFoundError, NotADirectoryError):
        return False
    return stat.S_ISREG(st.st_mode)


def locate_explicit(path: "str | os.PathLike[str]") -> Path:
    """Accepts a caller-supplied executable path if it exists."""
    candidate = Path(path)
    if not _is_file(candidate):
        raise ToolNotFoundError(f"{candidate} does not exist", [candidate])
    return candidate


def locate_on_search_path(
    search_path: Callable[[], Iterable[Path]] = list_search_path,
) -> Path:
    """Probes each search path directory for vswhere.exe, in order."""
    searched: list[Path] = []
    for directory in search_path():
        candidate = Path(directory) / VSWHERE_EXE
        searched.append(candidate)
        if _is_file(candidate):
            return candidate
    raise ToolNotFoundError(f"{VSWHERE_EXE} is not on the search path", searched)


def locate_in_installer_folder(
    resolve: Callable[[uuid.UUID], Path] | None = None,
) -> Path:
    """Looks for vswhere.exe in the Visual Studio Installer directory.

    Args:
        resolve: Known folder resolver. Defaults to the Windows shell lookup; on
            other platforms the strategy then reports "not found".
    """
    if resolve is None:
        if os.name != "nt":
            raise ToolNotFoundError("known folders are only available on Windows")
        resolve = resolve_known_folder
    candidate = resolve(PROGRAM_FILES_X86_FOLDER_ID) / INSTALLER_SUBDIR / VSWHERE_EXE
    if not _is_file(candidate):
        raise ToolNotFoundError(f"{candidate} does not exist", [candidate])
    return candidate


def locate(strategies: Iterable[Strategy]) -> Path:
    """Runs location strategies in order and returns the first hit.

    Args:
        strategies: Callables returning an executable path or raising
            `ToolNotFoundError`.

    Returns:
        The path found by the first successful strategy.

    Raises:
        ToolNotFoundError: If every strategy missed.
    """
    searched: list[Path] = []
    for strategy in strategies:
        try:
            path = strategy()
        except ToolNotFoundError as e:
            logger.debug(f"vswhere lookup missed: {e}")
            searched.extend(e.searched)
            continue
        logger.info(f"Found vswhere at {path}")
        return path
    raise ToolNotFoundError(f"could not find {VSWHERE_EXE}", searched)


def default_strategies(
    vswhere_path: "str | os.PathLike[str] | None" = None,
    *,
    search_path: Callable[[], Iterable[Path]] = list_search_path,
    resolve: Callable[[uuid.UUID], Path] | None = None,
) -> list[Strategy]:
    """Returns the lookup order used by `run()`.

    An explicit path, or the `VSWHERE_PATH` environment variable, replaces the
    search entirely.
    """
    if vswhere_path is None:
        vswhere_path = vswhere_path_override()
    if vswhere_path is not None:
        return [partial(locate_explicit, vswhere_path)]
    return [
        partial(locate_on_search_path, search_path),
        partial(locate_in_installer_folder, resolve),
    ]


def find_vswhere(
    vswhere_path: "str | os.PathLike[str] | None" = None,
    *,
    search_path: Callable[[], Iterable[Path]] = list_search_path,
    resolve: Callable[[uuid.UUID], Path] | None = None,
) -> Path:
    """Locates vswhere.exe without running it."""
    return locate(
        default_strategies(vswhere_path, search_path=search_path, resolve=resolve)
    )


def build_argv(selection: Selection) -> list[Token]:
    """Returns the full argument list for one vswhere invocation."""
    return [*selection.to_args(), *OUTPUT_FORMAT_ARGS]


def query(
    executable: Path,
    selection: Selection,
    spawn: SpawnFn = spawn_and_capture,
) -> list[InstallationRecord]:
    """Runs vswhere at `executable` and decodes the instances it reports.

    Raises:
        SpawnFailedError: If the process could not be started.
        NonZeroExitError: If vswhere reported failure.
        MalformedOutputError: If the output could not be decoded.
    """
    logger.debug(f"Querying {executable} with {selection!r}")
    completed = spawn(executable, build_argv(selection))
    return decode_output(completed.returncode, completed.stdout, completed.stderr)


def run(
    selection: Selection,
    vswhere_path: "str | os.PathLike[str] | None" = None,
    *,
    search_path: Callable[[], Iterable[Path]] = list_search_path,
    resolve: Callable[[uuid.UUID], Path] | None = None,
    spawn: SpawnFn = spawn_and_capture,
) -> list[InstallationRecord]:
    """Finds vswhere and returns the instances matching `selection`.

    Lookup order: `vswhere_path` (or `VSWHERE_PATH`) if given, otherwise the search
    path, then the Visual Studio Installer directory.

    Args:
        selection: What to query for.
        vswhere_path: Optional explicit executable path.
        search_path: Search path provider.
        resolve: Known folder resolver.
        spawn: Process runner.

    Returns:
        The decoded instances.

    Raises:
        ToolNotFoundError: If vswhere could not be found.
        KnownFolderError: If the installer directory could not be resolved.
        SpawnFailedError: If vswhere could not be started.
        NonZeroExitError: If vswhere reported failure.
        MalformedOutputError: If vswhere's output could not be decoded.
    """
    executable = find_vswhere(vswhere_path, search_path=search_path, resolve=resolve)
    return query(executable, selection, spawn)


def run_via_search_path(
    selection: Selection,
    *,
    search_path: Callable[[], Iterable[Path]] = list_search_path,
    spawn: SpawnFn = spawn_and_capture,
) -> list[InstallationRecord]:
    """Like `run()`, but only looks for vswhere on the search path."""
    executable = locate([partial(locate_on_search_path, search_path)])
    return query(executable, selection, spawn)


def run_at_path(
    vswhere_path: "str | os.PathLike[str]",
    selection: Selection,
    *,
    spawn: SpawnFn = spawn_and_capture,
) -> list[InstallationRecord]:
    """Like `run()`, but uses the vswhere executable at `vswhere_path`."""
    executable = locate([partial(locate_explicit, vswhere_path)])
    return query(executable, selection, spawn)
