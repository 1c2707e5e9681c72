import os
from pathlib import Path


def list_search_path() -> list[Path]:
    """Lists the directories searched for executables, in order.

    The current working directory comes first, followed by the non-empty `PATH`
    entries, matching how Windows resolves a bare program name.
    """
    entries = [Path.cwd()]
    for entry in os.environ.get("PATH", "").split(os.pathsep):
        entry = entry.strip().strip('"')
        if entry:
            entries.append(Path(entry))
    return entries
