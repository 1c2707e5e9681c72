from pathlib import Path

from logly import _LoggerProxy, logger

from vswhere.config import LOG_DIR_PATH


def init_logger(level: str = "INFO", log_dir: Path | None = LOG_DIR_PATH) -> _LoggerProxy:
    """Initialize the logger.

    Library modules only emit records; applications call this once at startup.

    Args:
        level: Minimum level written to the console and the log file.
        log_dir: Directory for the rotating `vswhere.log` file, or None for
            console output only.
    """
    logger.configure(
        level=level,
        color=True,
        console=True,
        auto_sink=True,
    )

    if log_dir is not None:
        logger.add(f"{log_dir}/vswhere.log", size_limit="10MB", retention=3)

    logger.success("logger initialized!")

    return logger
