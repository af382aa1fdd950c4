"""Wiring between the build host and the dispatcher.

The host owns a BuildEventSource and emits STARTED and COMPLETED events into
it. BuildListener subscribes to the source, finds the job's notifier
configuration and hands the event to the dispatcher together with the
current settings snapshot.
"""

import logging
from typing import Callable, List, Optional, Protocol

from snsnotify.config.models import NotificationConfig
from snsnotify.config.store import SettingsStore
from snsnotify.domain.models import BuildEvent
from snsnotify.logging import get_logger

from .models import PublishOutcome
from .service import NotificationDispatcher
from .sinks import ReportingSink

logger = get_logger(__name__, component="listener")

JobConfigLookup = Callable[[str], Optional[NotificationConfig]]


class BuildEventListener(Protocol):
    """Receiver of build lifecycle events."""

    def on_started(
        self, event: BuildEvent, sink: Optional[ReportingSink] = None
    ) -> Optional[PublishOutcome]: ...

    def on_completed(
        self, event: BuildEvent, sink: Optional[ReportingSink] = None
    ) -> Optional[PublishOutcome]: ...


class BuildEventSource:
    """Fans lifecycle events out to subscribed listeners.

    A listener that raises is logged and skipped; the remaining listeners
    still run and the error never reaches the host.
    """

    def __init__(self):
        self._listeners: List[BuildEventListener] = []

    def subscribe(self, listener: BuildEventListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: BuildEventListener) -> None:
        self._listeners.remove(listener)

    def emit_started(
        self, event: BuildEvent, sink: Optional[ReportingSink] = None
    ) -> List[PublishOutcome]:
        return self._emit("on_started", event, sink)

    def emit_completed(
        self, event: BuildEvent, sink: Optional[ReportingSink] = None
    ) -> List[PublishOutcome]:
        return self._emit("on_completed", event, sink)

    def _emit(
        self, hook: str, event: BuildEvent, sink: Optional[ReportingSink]
    ) -> List[PublishOutcome]:
        outcomes = []
        for listener in list(self._listeners):
            try:
                outcome = getattr(listener, hook)(event, sink)
            except Exception as e:
                logger.error(
                    f"Build listener {type(listener).__name__}.{hook} failed: {e}",
                    exc_info=True,
                    extra={"event": "listener.failure", "hook": hook},
                )
                continue
            if outcome is not None:
                outcomes.append(outcome)
        return outcomes


class BuildListener:
    """Routes lifecycle events of jobs that have the notifier attached."""

    def __init__(
        self,
        job_configs: JobConfigLookup,
        settings_store: SettingsStore,
        dispatcher: Optional[NotificationDispatcher] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize listener.

        Args:
            job_configs: Returns a job's NotificationConfig, or None if it has none
            settings_store: Source of the global settings snapshot
            dispatcher: Dispatcher instance (creates default if None)
            logger_instance: Logger instance (uses module logger if None)
        """
        self.job_configs = job_configs
        self.settings_store = settings_store
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.logger = logger_instance or logger

    def on_started(
        self, event: BuildEvent, sink: Optional[ReportingSink] = None
    ) -> Optional[PublishOutcome]:
        config = self._config_for(event)
        if config is None:
            return None
        return self.dispatcher.on_build_started(
            config, self.settings_store.snapshot(), event, sink
        )

    def on_completed(
        self, event: BuildEvent, sink: Optional[ReportingSink] = None
    ) -> Optional[PublishOutcome]:
        config = self._config_for(event)
        if config is None:
            return None
        return self.dispatcher.on_build_completed(
            config, self.settings_store.snapshot(), event, sink
        )

    def _config_for(self, event: BuildEvent) -> Optional[NotificationConfig]:
        config = self.job_configs(event.job_name)
        if config is None:
            self.logger.debug(
                f"Job {event.job_name} has no SNS notifier attached",
                extra={"event": "listener.no_config"},
            )
        return config
