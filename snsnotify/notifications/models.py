"""Outcome types and exceptions for the notification pipeline.

A dispatch always ends in exactly one PublishOutcome. The exceptions below
are raised by the individual pipeline steps and converted to outcomes by the
dispatcher; none of them escapes it.
"""

from dataclasses import dataclass
from typing import ClassVar, Union


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class ConfigurationMissing(NotificationError):
    """Raised when no topic is configured or required credentials are absent."""

    pass


class ResolutionError(NotificationError):
    """Raised when a topic identifier is not a well-formed SNS topic ARN."""

    pass


class TransportError(NotificationError):
    """Raised when the publish call fails (network, auth, throttling, rejection)."""

    pass


class RenderError(NotificationError):
    """Raised when template variables cannot be resolved."""

    pass


@dataclass(frozen=True)
class Published:
    """The message was accepted by SNS."""

    subject: str
    topic: str
    message_id: str = ""

    status: ClassVar[str] = "published"

    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class Skipped:
    """No publish was attempted."""

    reason: str

    status: ClassVar[str] = "skipped"

    def is_success(self) -> bool:
        return False


@dataclass(frozen=True)
class Failed:
    """A publish was attempted and failed."""

    error: str

    status: ClassVar[str] = "failed"

    def is_success(self) -> bool:
        return False


PublishOutcome = Union[Published, Skipped, Failed]
