"""Utility helpers shared across the notifier."""

from .redaction import REDACTED, clear_registered_secrets, redact, register_secret

__all__ = [
    "REDACTED",
    "redact",
    "register_secret",
    "clear_registered_secrets",
]
