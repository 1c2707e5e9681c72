from os import PathLike
from pathlib import Path
from typing import Sequence


class VsWhereError(Exception):
    """Base class for every error raised while querying vswhere."""


class ToolNotFoundError(VsWhereError):
    """No candidate location held a vswhere executable.

    Attributes:
        searched: Locations that were probed, in order.
    """

    def __init__(self, message: str, searched: Sequence[Path] = ()):
        super().__init__(message)
        self.searched = tuple(searched)


class KnownFolderError(VsWhereError):
    """The OS could not resolve a known folder."""

    def __init__(self, folder_id: object, hresult: int | None = None):
        detail = f" (HRESULT 0x{hresult & 0xFFFFFFFF:08X})" if hresult is not None else ""
        super().__init__(f"failed to resolve known folder {folder_id}{detail}")
        self.folder_id = folder_id
        self.hresult = hresult


class SpawnFailedError(VsWhereError):
    """The OS refused to start the vswhere process."""

    def __init__(self, executable: str | PathLike, cause: OSError):
        super().__init__(f"failed to start {executable}: {cause}")
        self.executable = executable
        self.cause = cause


class NonZeroExitError(VsWhereError):
    """vswhere ran but reported failure through its exit code."""

    def __init__(self, code: int, stderr: bytes = b""):
        super().__init__(f"vswhere exited with code {code}")
        self.code = code
        self.stderr = stderr


class MalformedOutputError(VsWhereError):
    """vswhere succeeded but its output does not match the expected schema.

    Attributes:
        reason: Human-readable description of the problem.
        field: Dotted name of the offending field, if any.
        value: Raw value that failed to decode, if any.
    """

    def __init__(self, reason: str, field: str | None = None, value: object = None):
        message = reason if field is None else f"{field}: {reason} (got {value!r})"
        super().__init__(message)
        self.reason = reason
        self.field = field
        self.value = value


class VersionParseError(VsWhereError, ValueError):
    """A version string could not be parsed."""

    def __init__(self, text: object, reason: str):
        super().__init__(f"invalid version {text!r}: {reason}")
        self.text = text
        self.reason = reason
