"""
Utility modules for the Lua flowchart generator.
"""

from luaflow.utils.logging import (
    get_logger,
    setup_logging,
    LogContext,
    log_stage,
    log_error_with_context,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "LogContext",
    "log_stage",
    "log_error_with_context",
]
