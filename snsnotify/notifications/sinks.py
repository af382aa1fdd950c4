"""Reporting sinks: where user-visible notification messages go.

The host passes a sink with each lifecycle event, typically backed by the
build's console log. Skips and failures are warnings there; a successful
publish is an informational line.
"""

import logging
from typing import List, Protocol, TextIO, Tuple


class ReportingSink(Protocol):
    """Destination for user-visible notifier messages."""

    def info(self, message: str) -> None:
        """Record a confirmation, such as a successful publish."""
        ...

    def warning(self, message: str) -> None:
        """Record a skipped or failed notification."""
        ...


class LoggerSink:
    """Sink that forwards to a logger."""

    def __init__(self, logger: logging.Logger):
        """Initialize with the logger that receives every message."""
        self.logger = logger

    def info(self, message: str) -> None:
        self.logger.info(message)

    def warning(self, message: str) -> None:
        self.logger.warning(message)


class StreamSink:
    """Sink that writes lines to a text stream, such as a build console."""

    def __init__(self, stream: TextIO):
        """Initialize with an open text stream; the sink never closes it."""
        self.stream = stream

    def info(self, message: str) -> None:
        self.stream.write(f"{message}\n")

    def warning(self, message: str) -> None:
        """Write message as a ``WARNING: `` prefixed line."""
        self.stream.write(f"WARNING: {message}\n")


class MemorySink:
    """Sink that keeps (level, message) pairs in memory."""

    def __init__(self):
        self.records: List[Tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.records.append(("info", message))

    def warning(self, message: str) -> None:
        self.records.append(("warning", message))

    @property
    def warnings(self) -> List[str]:
        """Messages reported at warning level, in order."""
        return [message for level, message in self.records if level == "warning"]
