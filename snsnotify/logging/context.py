"""Scoped logging context.

Fields pushed here (job name, build display name, phase) are merged into
every log record emitted while the scope is active. Backed by contextvars so
concurrent dispatches for unrelated builds never see each other's fields.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

_build_log_context: ContextVar[Dict[str, Any]] = ContextVar("build_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields active in the current scope."""
    return _build_log_context.get().copy()


def push_log_context(**fields) -> Token:
    """Layer new fields over the active context and return a reset token."""
    return _build_log_context.set({**_build_log_context.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the context captured by push_log_context()."""
    _build_log_context.reset(token)


def clear_log_context() -> None:
    """Drop every field. Mainly for tests."""
    _build_log_context.set({})


class log_context:
    """Context manager that scopes logging fields to a block.

    Example:
        >>> with log_context(job="deploy-api", build="deploy-api #42", phase="COMPLETED"):
        ...     logger.info("Dispatching notification")
    """

    def __init__(self, **fields):
        self.fields = fields
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
        return False
