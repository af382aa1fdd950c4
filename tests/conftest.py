"""Shared fixtures for the notifier test suite."""

import pytest

from snsnotify.config.models import GlobalSettings, NotificationConfig
from snsnotify.domain.models import BuildEvent, BuildPhase, BuildResult
from snsnotify.logging.context import clear_log_context
from snsnotify.utils.redaction import clear_registered_secrets

TOPIC_ARN = "arn:aws:sns:us-west-2:123456789012:my-topic"

NOTIFIER_ENV_VARS = [
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "SNS_DEFAULT_TOPIC_ARN",
    "SNS_ENDPOINT_URL",
    "BUILD_SERVER_ROOT_URL",
    "SNS_USE_AMBIENT_CREDENTIALS",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_state():
    """Reset logging context and the secret registry around each test."""
    clear_log_context()
    clear_registered_secrets()
    yield
    clear_log_context()
    clear_registered_secrets()


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Remove notifier environment variables so only file values apply."""
    for name in NOTIFIER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def settings():
    """Global settings with static credentials and a default topic."""
    return GlobalSettings(
        access_key="AKIATESTKEY",
        secret_key="s3cr3t-value",
        default_topic_arn=TOPIC_ARN,
        root_url="https://ci.example.com/",
    )


@pytest.fixture
def job_config():
    """Job configuration that relies on the global defaults."""
    return NotificationConfig()


@pytest.fixture
def failed_event():
    """A completed, failed build."""
    return BuildEvent(
        phase=BuildPhase.COMPLETED,
        result=BuildResult.FAILURE,
        job_name="MyJob",
        display_name="MyJob #42",
        url="job/MyJob/42/",
        duration_millis=1234,
        artifact_paths=["a.zip", "b.log"],
        environment={"JOB_NAME": "MyJob", "BUILD_NUMBER": "42"},
        build_variables={"TARGET": "staging"},
        previous_result=BuildResult.SUCCESS,
    )


@pytest.fixture
def started_event():
    """A build that has just started."""
    return BuildEvent(
        phase=BuildPhase.STARTED,
        job_name="MyJob",
        display_name="MyJob #43",
        url="job/MyJob/43/",
    )


@pytest.fixture
def repeat_success_event():
    """A success following a success."""
    return BuildEvent(
        phase=BuildPhase.COMPLETED,
        result=BuildResult.SUCCESS,
        job_name="MyJob",
        display_name="MyJob #44",
        url="job/MyJob/44/",
        previous_result=BuildResult.SUCCESS,
    )
