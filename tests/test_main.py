"""Unit tests for the main entry point.

Tests the main() function including:
- CLI argument parsing
- Log level priority (CLI > env > config)
- Build event file loading and prior build history
- Exit code handling
"""

from unittest.mock import Mock, patch

import pytest

from snsnotify.config.environment import EnvironmentOverrides
from snsnotify.config.exceptions import ConfigurationError
from snsnotify.config.models import AppConfig, LoggingConfig
from snsnotify.domain.models import BuildPhase, BuildResult
from snsnotify.main import load_build_event, main, resolve_log_level
from snsnotify.notifications.models import TransportError

TOPIC_ARN = "arn:aws:sns:us-west-2:123456789012:my-topic"

CONFIG = f"""
settings:
  access_key: AKIATESTKEY
  secret_key: s3cr3t-value
  default_topic_arn: {TOPIC_ARN}
  root_url: https://ci.example.com/
jobs:
  MyJob: {{}}
"""

FAILED_EVENT = """
phase: COMPLETED
result: FAILURE
job_name: MyJob
display_name: "MyJob #42"
url: job/MyJob/42/
prior_builds:
  - result: ABORTED
  - result: NOT_BUILT
  - result: SUCCESS
  - result: null
    building: true
"""


@pytest.fixture
def files(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(CONFIG)
    event_file = tmp_path / "event.yaml"
    event_file.write_text(FAILED_EVENT)
    return config_file, event_file


@pytest.fixture
def mock_sns_class():
    """Replace the SNS client used by dispatchers created inside main()."""
    with patch("snsnotify.notifications.service.SNSClient") as sns_class:
        sns_class.return_value.publish.return_value = "msg-1"
        yield sns_class


class TestResolveLogLevel:
    """Test log level priority."""

    def test_cli_wins(self):
        overrides = EnvironmentOverrides(log_level="INFO")
        app_config = AppConfig(logging=LoggingConfig(level="WARNING"))

        assert resolve_log_level("DEBUG", overrides, app_config) == "DEBUG"

    def test_environment_over_config(self):
        overrides = EnvironmentOverrides(log_level="INFO")
        app_config = AppConfig(logging=LoggingConfig(level="WARNING"))

        assert resolve_log_level(None, overrides, app_config) == "INFO"

    def test_config_when_no_overrides(self):
        app_config = AppConfig(logging=LoggingConfig(level="WARNING"))

        assert resolve_log_level(None, EnvironmentOverrides(), app_config) == "WARNING"


class TestLoadBuildEvent:
    """Test reading build events from files."""

    def test_previous_result_from_prior_builds(self, files):
        """Test that aborted and not-built builds are skipped."""
        _, event_file = files

        event = load_build_event(event_file)

        assert event.phase is BuildPhase.COMPLETED
        assert event.result is BuildResult.FAILURE
        assert event.previous_result is BuildResult.SUCCESS

    def test_explicit_previous_result_wins(self, tmp_path):
        event_file = tmp_path / "event.yaml"
        event_file.write_text(
            "phase: COMPLETED\nresult: SUCCESS\njob_name: J\ndisplay_name: 'J #2'\n"
            "previous_result: FAILURE\nprior_builds:\n  - result: SUCCESS\n"
        )

        assert load_build_event(event_file).previous_result is BuildResult.FAILURE

    def test_json_event(self, tmp_path):
        event_file = tmp_path / "event.json"
        event_file.write_text('{"phase": "STARTED", "job_name": "J", "display_name": "J #3"}')

        event = load_build_event(event_file)

        assert event.phase is BuildPhase.STARTED
        assert event.previous_result is None

    def test_scalar_variables_become_strings(self, tmp_path):
        """Test that unquoted YAML numbers are accepted as variable values."""
        event_file = tmp_path / "event.yaml"
        event_file.write_text(
            "phase: COMPLETED\nresult: SUCCESS\njob_name: J\ndisplay_name: 'J #42'\n"
            "environment:\n  BUILD_NUMBER: 42\n  EMPTY:\nbuild_variables:\n  DEPLOY: true\n"
        )

        event = load_build_event(event_file)

        assert event.environment == {"BUILD_NUMBER": "42", "EMPTY": ""}
        assert event.build_variables == {"DEPLOY": "True"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Failed to read build event"):
            load_build_event(tmp_path / "missing.yaml")

    def test_not_a_mapping(self, tmp_path):
        event_file = tmp_path / "event.yaml"
        event_file.write_text("- one\n- two\n")

        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_build_event(event_file)

    def test_invalid_event(self, tmp_path):
        event_file = tmp_path / "event.yaml"
        event_file.write_text("phase: STARTED\nresult: SUCCESS\njob_name: J\ndisplay_name: 'J #1'\n")

        with pytest.raises(ConfigurationError, match="Invalid build event"):
            load_build_event(event_file)


@patch("snsnotify.main.configure_logging")
class TestMain:
    """Test suite for main() function."""

    def test_main_publishes(self, mock_configure_logging, mock_env_vars, mock_sns_class, files, capsys):
        """Test a full run that publishes a notification."""
        config_file, event_file = files

        exit_code = main(["--config", str(config_file), "--event", str(event_file)])

        assert exit_code == 0
        mock_configure_logging.assert_called_once()
        topic, settings, subject, message = mock_sns_class.return_value.publish.call_args.args
        assert topic.topic_arn == TOPIC_ARN
        assert subject == "Build FAILURE: MyJob #42"
        assert message == "https://ci.example.com/job/MyJob/42/"
        assert "Published SNS notification" in capsys.readouterr().err

    def test_main_publish_failure_still_exits_zero(
        self, mock_configure_logging, mock_env_vars, mock_sns_class, files, capsys
    ):
        """Test that a failed publish is reported but never fails the run."""
        config_file, event_file = files
        mock_sns_class.return_value.publish.side_effect = TransportError("SNS request failed")

        exit_code = main(["--config", str(config_file), "--event", str(event_file)])

        assert exit_code == 0
        assert "WARNING: Failed to send SNS notification" in capsys.readouterr().err

    def test_main_job_without_notifier(self, mock_configure_logging, mock_env_vars, mock_sns_class, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("jobs:\n  OtherJob: {}\n")
        event_file = tmp_path / "event.yaml"
        event_file.write_text(FAILED_EVENT)

        assert main(["--config", str(config_file), "--event", str(event_file)]) == 0
        mock_sns_class.return_value.publish.assert_not_called()

    def test_main_log_level_from_cli(self, mock_configure_logging, mock_env_vars, mock_sns_class, files):
        config_file, event_file = files
        mock_env_vars.setenv("LOG_LEVEL", "ERROR")

        main(["--config", str(config_file), "--event", str(event_file), "--log-level", "DEBUG"])

        assert mock_configure_logging.call_args.kwargs["level"] == "DEBUG"

    def test_main_configuration_error(self, mock_configure_logging, mock_env_vars, tmp_path, capsys):
        """Test that configuration errors exit with 1."""
        event_file = tmp_path / "event.yaml"
        event_file.write_text(FAILED_EVENT)

        exit_code = main(["--config", str(tmp_path / "missing.yaml"), "--event", str(event_file)])

        assert exit_code == 1
        assert "Configuration Error" in capsys.readouterr().err

    def test_main_bad_event_file(self, mock_configure_logging, mock_env_vars, files, tmp_path):
        config_file, _ = files

        exit_code = main(["--config", str(config_file), "--event", str(tmp_path / "nope.yaml")])

        assert exit_code == 1

    def test_main_requires_event(self, mock_configure_logging):
        with pytest.raises(SystemExit):
            main([])
