"""
Shared utilities for Resume Planner.

Common functionality used across contexts:
- Logger setup with provenance tracking
"""

from resume_planner.utils.logger import log_provenance, setup_logger

__all__ = ["log_provenance", "setup_logger"]
