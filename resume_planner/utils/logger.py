"""
Session logger setup shared by all contexts.

Each planning run gets its own log directory: a DEBUG-level file sink that keeps
every solver decision, and a colorized console sink for INFO and above.
Context-specific prefixes live in contexts/{context}/logger.py.
"""

import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

load_dotenv()
CONSOLE_LOG_LEVEL = os.getenv("CONSOLE_LOG_LEVEL", "INFO")

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"
)

# Warnings stand out less than failures on the console
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: dict = None,
    console_level: str = None,
) -> Path:
    """
    Route loguru output for one session to a file and the console.

    Args:
        context_name: Context identifier, used as the log file stem (e.g., "target")
        log_dir: Directory for this session's log file (created if missing)
        extra_provenance: Additional key-value pairs for the provenance header
        console_level: Minimum console level (defaults to CONSOLE_LOG_LEVEL env var)

    Returns:
        Path to log file

    Example:
        log_file = setup_logger(
            context_name="target",
            log_dir=Path("outs/logs/plan_20260101_120000"),
            extra_provenance={"Max lines": 40},
        )
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(
        sys.stdout,
        format=CONSOLE_FORMAT,
        level=console_level or CONSOLE_LOG_LEVEL,
        colorize=True,
    )

    log_provenance(extra_provenance)
    return log_file


def log_provenance(extra_context: dict = None) -> None:
    """
    Write the provenance header (script, command, cwd, Python version) to the log.

    Args:
        extra_context: Additional key-value pairs, e.g. budgets for the run
    """
    logger.info("=" * 80)
    logger.info(f"Script: {sys.argv[0]}")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python: {sys.version.split()[0]}")

    for key, value in (extra_context or {}).items():
        logger.info(f"{key}: {value}")

    logger.info("=" * 80)
