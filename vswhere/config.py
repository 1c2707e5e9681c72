import os
import uuid
from pathlib import Path
from typing import Final

VSWHERE_EXE: Final[str] = "vswhere.exe"

# Relative to the "Program Files (x86)" known folder.
INSTALLER_SUBDIR: Final[Path] = Path("Microsoft Visual Studio") / "Installer"

# FOLDERID_ProgramFilesX86
PROGRAM_FILES_X86_FOLDER_ID: Final[uuid.UUID] = uuid.UUID(
    "7C5A40EF-A0FB-4BFC-874A-C0F2E0B9FA8E"
)

OUTPUT_FORMAT_ARGS: Final[tuple[str, ...]] = ("-utf8", "-format", "json")

VSWHERE_PATH_ENV: Final[str] = "VSWHERE_PATH"

LOG_DIR_PATH: Final[Path] = Path(__file__).parent.parent / "logs"


def vswhere_path_override() -> Path | None:
    """Returns the executable path configured through `VSWHERE_PATH`, if any."""
    value = os.environ.get(VSWHERE_PATH_ENV, "").strip()
    return Path(value) if value else None
