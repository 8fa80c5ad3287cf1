"""
Utility modules for commentguard.
"""

from commentguard.utils.logging import (
    get_logger,
    setup_logging,
    LogContext,
    log_file_analysis,
    log_phase_transition,
    log_error_with_context,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "LogContext",
    "log_file_analysis",
    "log_phase_transition",
    "log_error_with_context",
]
