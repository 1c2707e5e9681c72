import os
import subprocess
from dataclasses import dataclass
from typing import Final, Sequence

from logly import logger

from vswhere.core.args import Token
from vswhere.core.errors import SpawnFailedError

_CREATE_NO_WINDOW: Final[int] = 0x08000000


@dataclass(frozen=True, slots=True)
class CompletedRun:
    """Exit status and captured output of a finished process."""

    returncode: int
    stdout: bytes
    stderr: bytes = b""


def spawn_and_capture(
    executable: "str | os.PathLike[str]", args: Sequence[Token]
) -> CompletedRun:
    """Runs `executable` with `args` and waits for it to exit.

    There is no timeout; the call blocks until the process finishes.

    Args:
        executable: Path of the program to run.
        args: Arguments, passed without shell interpretation.

    Returns:
        The exit code together with the raw stdout and stderr bytes.

    Raises:
        SpawnFailedError: If the process could not be started.
    """
    argv = [executable, *args]
    logger.info(f"Starting subprocess argv={' '.join(os.fspath(a) for a in argv)}")
    kwargs: dict = {"capture_output": True}

    if os.name == "nt":
        kwargs["creationflags"] = _CREATE_NO_WINDOW

    try:
        result = subprocess.run(argv, **kwargs)
    except OSError as e:
        logger.error(f"Failed to start {os.fspath(executable)}: {e}")
        raise SpawnFailedError(executable, e) from e

    logger.info(f"Subprocess finished returncode={result.returncode}")
    return CompletedRun(result.returncode, result.stdout, result.stderr)
