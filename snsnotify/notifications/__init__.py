"""SNS notifications for build lifecycle events.

This package provides the complete notification pipeline:
- NotificationDispatcher: decides, renders and publishes one notification
- BuildListener / BuildEventSource: connect the dispatcher to the build host
- TemplateRenderer: ``${VAR}`` substitution for subjects and messages
- resolve_topic: topic ARN to regional endpoint
- should_notify / find_previous_result: the notification policy
- SNSClient: boto3 wrapper with guaranteed client release
"""

from .listener import BuildEventListener, BuildEventSource, BuildListener
from .models import (
    ConfigurationMissing,
    Failed,
    NotificationError,
    Published,
    PublishOutcome,
    RenderError,
    ResolutionError,
    Skipped,
    TransportError,
)
from .policy import find_previous_result, is_consecutive_success, should_notify
from .service import NotificationDispatcher
from .sinks import LoggerSink, MemorySink, ReportingSink, StreamSink
from .sns_client import SNSClient
from .templates import TemplateRenderer, build_url
from .topics import ResolvedTopic, resolve_topic

__all__ = [
    # Main service
    "NotificationDispatcher",
    "BuildListener",
    "BuildEventSource",
    "BuildEventListener",
    # Outcomes
    "PublishOutcome",
    "Published",
    "Skipped",
    "Failed",
    # Exceptions
    "NotificationError",
    "ConfigurationMissing",
    "ResolutionError",
    "TransportError",
    "RenderError",
    # Components
    "TemplateRenderer",
    "SNSClient",
    "ResolvedTopic",
    "ReportingSink",
    "LoggerSink",
    "StreamSink",
    "MemorySink",
    # Functions
    "resolve_topic",
    "build_url",
    "should_notify",
    "is_consecutive_success",
    "find_previous_result",
]
