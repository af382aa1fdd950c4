"""Secret redaction for log lines and user-visible error messages.

Secrets are registered once (typically when global settings are loaded or
swapped) and every string passed through redact() has them masked. The
logging redaction filter relies on the same registry.
"""

import threading
from typing import Iterable, Optional, Set

REDACTED = "****"

_registry_lock = threading.Lock()
_registered_secrets: Set[str] = set()


def register_secret(value: Optional[str]) -> None:
    """Add a secret value to the process-wide redaction registry.

    Blank values are ignored; masking an empty string would mangle every line.
    """
    if not value or not value.strip():
        return
    with _registry_lock:
        _registered_secrets.add(value)


def clear_registered_secrets() -> None:
    """Forget all registered secrets. Mainly for tests."""
    with _registry_lock:
        _registered_secrets.clear()


def redact(text: str, secrets: Optional[Iterable[Optional[str]]] = None) -> str:
    """Mask every known secret occurring in text.

    Args:
        text: Text that may contain secret values
        secrets: Extra secrets to mask in addition to the registered ones

    Returns:
        Text with each secret replaced by REDACTED
    """
    if not text:
        return text

    with _registry_lock:
        candidates = set(_registered_secrets)
    if secrets:
        candidates.update(s for s in secrets if s and s.strip())

    # Longest first so a secret that contains another is masked whole
    for secret in sorted(candidates, key=len, reverse=True):
        text = text.replace(secret, REDACTED)
    return text
