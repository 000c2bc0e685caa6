"""
Logging setup for OmniVault.

Loguru handles all application logging. Modules get a logger bound to their
module name via get_logger(__name__), and pass structured context through
extra={...} so it lands in the serialized file sink.
"""

import logging
import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[module]}:{function}:{line} - {message}"

# Client libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "aiosqlite", "uvicorn.access")


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = True,
    log_dir: str = "logs",
    file_rotation: str = "10 MB",
    file_retention: str = "7 days",
    compression: str = "zip",
    serialize: bool = True,
) -> None:
    """
    Configure the vault's log sinks.

    Args:
        level: Minimum level for both sinks
        log_to_file: Also write a rotating file under log_dir
        log_dir: Directory for vault log files
        file_rotation: Loguru rotation policy for the file sink
        file_retention: How long rotated files are kept
        compression: Archive format for rotated files
        serialize: Write the file sink as JSON lines
    """
    logger.remove()
    logger.configure(extra={"module": "omnivault"})

    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path / "omnivault_{time:YYYY-MM-DD}.log",
            level=level,
            format=FILE_FORMAT,
            rotation=file_rotation,
            retention=file_retention,
            compression=compression,
            serialize=serialize,
            enqueue=True,
        )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str):
    """Get a logger bound to a module name."""
    return logger.bind(module=name)
