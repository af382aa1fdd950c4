"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field, SecretStr, field_validator

DEFAULT_MESSAGE_TEMPLATE = "${BUILD_URL}"


def _blank_to_none(v):
    """Treat empty and whitespace-only values as not configured."""
    if isinstance(v, SecretStr):
        return v if v.get_secret_value().strip() else None
    if isinstance(v, str) and not v.strip():
        return None
    return v


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class GlobalSettings(BaseModel):
    """Process-wide notifier settings, owned by the administrator.

    Instances are immutable; a settings change produces a new object which
    SettingsStore swaps in whole.
    """

    access_key: Optional[str] = Field(None, description="AWS access key id")
    secret_key: Optional[SecretStr] = Field(None, description="AWS secret access key")
    default_topic_arn: Optional[str] = Field(
        None, description="Topic used when a job does not name its own"
    )
    default_message_template: Optional[str] = Field(
        None, description="Message template used when a job does not define one"
    )
    send_on_start: bool = Field(False, description="Also notify when builds start")
    notify_on_consecutive_successes: bool = Field(
        False, description="Notify on every success, not only on the first after a non-success"
    )
    use_ambient_credentials: bool = Field(
        False, description="Use the default AWS credential chain instead of the static key pair"
    )
    root_url: Optional[str] = Field(None, description="Build server root URL")
    endpoint_url: Optional[str] = Field(
        None, description="Explicit SNS endpoint URL overriding the one derived from the topic"
    )

    model_config = {"frozen": True}

    @field_validator(
        "access_key", "secret_key", "default_topic_arn", "root_url", "endpoint_url",
        mode="before",
    )
    @classmethod
    def strip_identifiers(cls, v):
        """Normalize blank values to None and strip identifiers."""
        v = _blank_to_none(v)
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("default_message_template", mode="before")
    @classmethod
    def blank_template_is_unset(cls, v):
        """Blank templates fall back to the built-in default."""
        return _blank_to_none(v)

    @property
    def effective_default_message_template(self) -> str:
        """The configured default message template, or ``${BUILD_URL}``."""
        return self.default_message_template or DEFAULT_MESSAGE_TEMPLATE

    def secret_key_value(self) -> Optional[str]:
        """Plain-text secret key, for handing to the AWS client only."""
        if self.secret_key is None:
            return None
        return self.secret_key.get_secret_value()

    def has_static_credentials(self) -> bool:
        """Whether both halves of the static key pair are configured."""
        return bool(self.access_key) and bool(self.secret_key_value())


class NotificationConfig(BaseModel):
    """Per-job notifier configuration, fixed when the job attaches the notifier."""

    topic_arn: Optional[str] = Field(None, description="Overrides the default topic")
    subject_template: Optional[str] = Field(None, description="Overrides the default subject")
    message_template: Optional[str] = Field(None, description="Overrides the default message")

    model_config = {"frozen": True}

    @field_validator("topic_arn", mode="before")
    @classmethod
    def strip_topic(cls, v):
        """Strip the topic ARN; blank means use the global default."""
        v = _blank_to_none(v)
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("subject_template", "message_template", mode="before")
    @classmethod
    def blank_template_is_unset(cls, v):
        """Blank templates fall back to the defaults."""
        return _blank_to_none(v)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the notifier."""

    settings: GlobalSettings = Field(
        default_factory=GlobalSettings, description="Process-wide notifier settings"
    )
    jobs: Dict[str, NotificationConfig] = Field(
        default_factory=dict, description="Notifier configuration keyed by job name"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @field_validator("jobs")
    @classmethod
    def strip_job_names(cls, v: Dict[str, NotificationConfig]) -> Dict[str, NotificationConfig]:
        """Job names are matched exactly after stripping whitespace."""
        normalized = {}
        for name, job_config in v.items():
            stripped = name.strip()
            if not stripped:
                raise ValueError("Job names cannot be empty or whitespace-only")
            if stripped in normalized:
                raise ValueError(f"Duplicate job: {stripped} appears multiple times")
            normalized[stripped] = job_config
        return normalized

    def get_job_config(self, job_name: str) -> Optional[NotificationConfig]:
        """Notifier configuration for a job, or None when the job has none."""
        return self.jobs.get(job_name.strip())
