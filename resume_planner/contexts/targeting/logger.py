"""
Targeting context logger.

Provides logging interface for targeting context with automatic [target] prefix.
All targeting modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from resume_planner.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[target]"


def setup_targeting_logger(log_dir: Path, budget: Optional[dict] = None) -> Path:
    """
    Setup logger for a planning session.

    Args:
        log_dir: Directory for this planning session
        budget: Space budget values to record in the provenance header

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="target",
        log_dir=log_dir,
        extra_provenance=budget,
    )


def _log_info(message: str) -> None:
    """Log info message with [target] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [target] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [target] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [target] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [target] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_selection_result(phase: str, result, lines_used: int) -> None:
    """
    Summarize the outcome of one selection phase.

    Args:
        phase: Phase label ("greedy", "knapsack", "hybrid")
        result: SelectionResult from the phase
        lines_used: Estimated printed lines consumed by the selection
    """
    bullet_count = sum(len(sel.bullet_ids) for sel in result.selections)
    _log_debug(
        f"{phase}: {len(result.selections)} stories, {bullet_count} bullets, "
        f"{lines_used} lines, score {result.score:.4f}"
    )
