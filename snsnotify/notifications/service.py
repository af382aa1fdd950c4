"""Notification dispatcher for build lifecycle events.

This module provides the NotificationDispatcher class that orchestrates the
notification pipeline: topic and credential checks, endpoint resolution,
template rendering, and a single SNS publish attempt. Every path ends in a
PublishOutcome; nothing raised here can fail the build.
"""

import logging
from typing import Optional

from snsnotify.config.models import GlobalSettings, NotificationConfig
from snsnotify.domain.models import BuildEvent, BuildPhase
from snsnotify.logging import get_logger
from snsnotify.logging.context import log_context
from snsnotify.utils.redaction import redact

from .models import (
    ConfigurationMissing,
    Failed,
    Published,
    PublishOutcome,
    ResolutionError,
    Skipped,
    TransportError,
)
from .policy import should_notify
from .sinks import LoggerSink, ReportingSink
from .sns_client import SNSClient
from .templates import TemplateRenderer, build_url
from .topics import ResolvedTopic, resolve_topic

logger = get_logger(__name__, component="dispatcher")

NO_TOPIC_REASON = "no topic configured"
NO_CREDENTIALS_REASON = "credentials not configured"
UNRESOLVABLE_REASON = "cannot resolve endpoint"
SUPPRESSED_REASON = "suppressed by notification policy"

# Stands in for the build console when the host passes no sink
CONSOLE_LOGGER_NAME = "snsnotify.console"


class NotificationDispatcher:
    """Sends SNS notifications about build lifecycle events.

    Coordinates the notification flow:
    1. Pick the job topic or the global default
    2. Check static credentials unless ambient credentials are used
    3. Resolve the topic's region and endpoint
    4. Render subject and message
    5. Publish once through a fresh SNS client
    6. Report the outcome to the sink and the log
    """

    def __init__(
        self,
        template_renderer: Optional[TemplateRenderer] = None,
        sns_client: Optional[SNSClient] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize dispatcher.

        Args:
            template_renderer: Template renderer instance (creates default if None)
            sns_client: SNS client wrapper (creates default if None)
            logger_instance: Logger instance (uses module logger if None)
        """
        self.template_renderer = template_renderer or TemplateRenderer()
        self.sns_client = sns_client or SNSClient()
        self.logger = logger_instance or logger

    def on_build_started(
        self,
        config: NotificationConfig,
        settings: GlobalSettings,
        event: BuildEvent,
        sink: Optional[ReportingSink] = None,
    ) -> PublishOutcome:
        """Handle a STARTED event."""
        if event.phase != BuildPhase.STARTED:
            return self._skip(f"expected a STARTED event, got {event.phase.value}", sink)
        return self.notify(config, settings, event, sink)

    def on_build_completed(
        self,
        config: NotificationConfig,
        settings: GlobalSettings,
        event: BuildEvent,
        sink: Optional[ReportingSink] = None,
    ) -> PublishOutcome:
        """Handle a COMPLETED event."""
        if event.phase != BuildPhase.COMPLETED:
            return self._skip(f"expected a COMPLETED event, got {event.phase.value}", sink)
        return self.notify(config, settings, event, sink)

    def notify(
        self,
        config: NotificationConfig,
        settings: GlobalSettings,
        event: BuildEvent,
        sink: Optional[ReportingSink] = None,
    ) -> PublishOutcome:
        """Apply the notification policy, then dispatch if it allows.

        Policy suppression is routine, so it is logged at info level and not
        reported to the sink.
        """
        if not should_notify(
            event.phase,
            settings.notify_on_consecutive_successes,
            event.result,
            event.previous_result,
            settings.send_on_start,
        ):
            self.logger.info(
                f"Skipping SNS notification for {event.display_name} - {SUPPRESSED_REASON}",
                extra={
                    "event": "notification.skip",
                    "reason": "policy",
                    "phase": event.phase.value,
                    "result": event.result_label,
                },
            )
            return Skipped(SUPPRESSED_REASON)

        self.logger.info(
            f"Preparing SNS notification for build {event.phase.value.lower()}",
            extra={"event": "notification.prepare"},
        )
        return self.dispatch(config, settings, event, sink)

    def dispatch(
        self,
        config: NotificationConfig,
        settings: GlobalSettings,
        event: BuildEvent,
        sink: Optional[ReportingSink] = None,
    ) -> PublishOutcome:
        """Publish a notification for event.

        Args:
            config: The job's notifier configuration
            settings: Settings snapshot used for the whole dispatch
            event: Build lifecycle event to report
            sink: Where user-visible messages go (defaults to the logger)

        Returns:
            Published, Skipped or Failed; never raises
        """
        sink = sink or LoggerSink(logging.getLogger(CONSOLE_LOGGER_NAME))

        with log_context(job=event.job_name, build=event.display_name, phase=event.phase.value):
            try:
                return self._dispatch(config, settings, event, sink)
            except Exception as e:
                # Unforeseen failures are reported like transport failures
                error_msg = redact(
                    f"Unexpected error sending SNS notification: {e}",
                    [settings.secret_key_value()],
                )
                self.logger.error(
                    error_msg,
                    exc_info=True,
                    extra={"event": "notification.failure", "error_type": type(e).__name__},
                )
                self._report(sink, "warning", error_msg)
                return Failed(error_msg)

    def _dispatch(
        self,
        config: NotificationConfig,
        settings: GlobalSettings,
        event: BuildEvent,
        sink: ReportingSink,
    ) -> PublishOutcome:
        # Step 1: Pick the topic
        try:
            topic_arn = self._select_topic(config, settings)
        except ConfigurationMissing as e:
            self.logger.warning(
                f"No global or project topic ARN set; cannot send SNS notification ({e})",
                extra={"event": "notification.skip", "reason": "no_topic"},
            )
            return self._skip(NO_TOPIC_REASON, sink)

        # Step 2: Credentials
        try:
            self._check_credentials(settings)
        except ConfigurationMissing as e:
            self.logger.warning(
                f"AWS credentials not configured; cannot send SNS notification ({e})",
                extra={"event": "notification.skip", "reason": "no_credentials"},
            )
            return self._skip(NO_CREDENTIALS_REASON, sink)

        # Step 3: Endpoint
        try:
            topic = resolve_topic(topic_arn)
        except ResolutionError as e:
            self.logger.warning(
                f"Could not determine SNS API endpoint from topic ARN {topic_arn}: {e}",
                extra={"event": "notification.skip", "reason": "unresolvable_topic"},
            )
            return self._skip(UNRESOLVABLE_REASON, sink, detail=topic_arn)

        # Step 4: Content
        extra_vars = {"BUILD_URL": build_url(settings.root_url, event.url)}
        subject = self.template_renderer.render_subject(
            config.subject_template, event, extra_vars
        )
        message = self.template_renderer.render_message(
            config.message_template,
            settings.effective_default_message_template,
            event,
            extra_vars,
        )

        # Steps 5 and 6: Client and publish
        summary = f"subject={subject} topic={topic.topic_arn}"
        self.logger.info(
            f"Publishing SNS notification: {summary}",
            extra={
                "event": "notification.publish.attempt",
                "endpoint": settings.endpoint_url or topic.endpoint,
                "region": topic.region,
            },
        )
        try:
            message_id = self.sns_client.publish(topic, settings, subject, message)
        except TransportError as e:
            return self._fail(e, topic, settings, sink)

        # Step 7: Success
        self.logger.info(
            f"Published SNS notification: {summary}",
            extra={"event": "notification.publish.success", "message_id": message_id},
        )
        self._report(sink, "info", f"Published SNS notification: {summary}")
        return Published(subject=subject, topic=topic.topic_arn, message_id=message_id)

    def _select_topic(self, config: NotificationConfig, settings: GlobalSettings) -> str:
        """Pick the job topic, falling back to the global default.

        Args:
            config: The job's notifier configuration
            settings: Settings snapshot holding the default topic

        Returns:
            Stripped topic ARN

        Raises:
            ConfigurationMissing: If neither scope names a topic
        """
        topic_arn = config.topic_arn or settings.default_topic_arn
        if not topic_arn or not topic_arn.strip():
            raise ConfigurationMissing("neither the job nor the global settings name a topic")
        return topic_arn.strip()

    def _check_credentials(self, settings: GlobalSettings) -> None:
        """Ensure the static key pair is complete unless ambient credentials are used.

        Raises:
            ConfigurationMissing: If the access key or secret key is blank
        """
        if settings.use_ambient_credentials:
            return
        if not settings.has_static_credentials():
            raise ConfigurationMissing("access key and secret key are both required")

    def _skip(
        self, reason: str, sink: Optional[ReportingSink], detail: Optional[str] = None
    ) -> Skipped:
        """Report a skipped notification.

        Args:
            reason: Short reason stored on the outcome
            sink: Where the warning goes; None reports nothing
            detail: Extra context shown to the user only, e.g. the offending ARN

        Returns:
            Skipped outcome carrying reason
        """
        if sink is not None:
            suffix = f" ({detail})" if detail else ""
            self._report(sink, "warning", f"SNS notification skipped: {reason}{suffix}")
        return Skipped(reason)

    def _fail(
        self,
        error: TransportError,
        topic: ResolvedTopic,
        settings: GlobalSettings,
        sink: ReportingSink,
    ) -> Failed:
        """Log and report a failed publish with the secret key masked.

        Args:
            error: Transport failure raised by the SNS client
            topic: Topic the publish was aimed at
            settings: Settings snapshot whose secret key is redacted
            sink: Where the warning goes

        Returns:
            Failed outcome carrying the redacted message
        """
        error_msg = redact(
            f"Failed to send SNS notification: {error}", [settings.secret_key_value()]
        )
        self.logger.warning(
            error_msg,
            extra={
                "event": "notification.publish.failure",
                "error_type": type(error.__cause__ or error).__name__,
                "topic": topic.topic_arn,
            },
        )
        self._report(sink, "warning", error_msg)
        return Failed(error_msg)

    def _report(self, sink: ReportingSink, level: str, message: str) -> None:
        """Send a message to the sink; a sink that raises is logged, never propagated.

        Args:
            sink: Host-supplied reporting sink
            level: "info" or "warning"
            message: User-visible message
        """
        try:
            getattr(sink, level)(message)
        except Exception as e:
            self.logger.error(
                f"Reporting sink failed while writing {level} message: {e}",
                exc_info=True,
                extra={"event": "notification.sink.failure", "error_type": type(e).__name__},
            )
