"""Command line entry point: send the notification for one build event."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from snsnotify.config.environment import EnvironmentOverrides
from snsnotify.config.exceptions import ConfigurationError
from snsnotify.config.loader import format_validation_errors, load_config
from snsnotify.config.models import AppConfig
from snsnotify.config.store import SettingsStore
from snsnotify.domain.models import BuildEvent, BuildPhase, PriorBuild
from snsnotify.logging import get_logger
from snsnotify.logging.config import configure_logging
from snsnotify.notifications.listener import BuildEventSource, BuildListener
from snsnotify.notifications.models import PublishOutcome
from snsnotify.notifications.policy import find_previous_result
from snsnotify.notifications.sinks import StreamSink

logger = get_logger(__name__, component="cli")


def resolve_log_level(
    cli_level: Optional[str], overrides: EnvironmentOverrides, app_config: AppConfig
) -> str:
    """Log level priority: CLI > environment > config file."""
    if cli_level:
        return cli_level
    if overrides.log_level:
        return overrides.log_level
    return app_config.logging.level or "INFO"


def load_build_event(event_path: Path) -> BuildEvent:
    """
    Read a build event from a YAML or JSON file.

    Besides the BuildEvent fields the file may list ``prior_builds``
    (newest first, each with ``result`` and ``building``); when
    ``previous_result`` is not given it is computed from them.

    Raises:
        ConfigurationError: If the file cannot be read or is not a valid event
    """
    try:
        with open(event_path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to read build event file {event_path}: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"Build event file {event_path} must contain a mapping")

    prior_builds: List[Dict[str, Any]] = data.pop("prior_builds", None) or []

    # YAML reads BUILD_NUMBER: 42 as an int; build variables are always strings
    for key in ("environment", "build_variables"):
        if isinstance(data.get(key), dict):
            data[key] = {
                str(name): "" if value is None else str(value)
                for name, value in data[key].items()
            }

    try:
        if "previous_result" not in data and prior_builds:
            history = [PriorBuild.model_validate(item) for item in prior_builds]
            data["previous_result"] = find_previous_result(history)
        return BuildEvent.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid build event in {event_path}",
            errors=format_validation_errors(e),
        )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Send the SNS notification for a single build event.

    Returns:
        Exit code. Notification outcomes never change it; only configuration
        and event-file problems return 1.
    """
    parser = argparse.ArgumentParser(
        description="SNS Build Notifier - publish build lifecycle notifications to Amazon SNS"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml)",
    )
    parser.add_argument(
        "--event",
        type=Path,
        required=True,
        help="Path to a YAML or JSON file describing the build event",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    args = parser.parse_args(argv)

    try:
        app_config, overrides = load_config(args.config)

        configure_logging(
            level=resolve_log_level(args.log_level, overrides, app_config),
            format_type=app_config.logging.format,
            environment=os.environ.get("ENVIRONMENT", "local"),
        )

        event = load_build_event(args.event)
    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1

    settings_store = SettingsStore(app_config.settings)
    source = BuildEventSource()
    source.subscribe(BuildListener(app_config.get_job_config, settings_store))

    logger.info(
        f"Dispatching {event.phase.value} event for {event.display_name}",
        extra={"event": "cli.dispatch", "job": event.job_name},
    )

    sink = StreamSink(sys.stderr)
    if event.phase == BuildPhase.STARTED:
        outcomes: List[PublishOutcome] = source.emit_started(event, sink)
    else:
        outcomes = source.emit_completed(event, sink)

    if not outcomes:
        logger.info(
            f"Job {event.job_name} has no SNS notifier configured",
            extra={"event": "cli.no_config"},
        )

    for outcome in outcomes:
        logger.info(
            f"Notification outcome: {outcome.status}",
            extra={"event": "cli.outcome", "status": outcome.status},
        )

    return 0


if __name__ == "__main__":
    sys.exit(main())
