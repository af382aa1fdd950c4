"""Environment variable overrides for notifier settings."""

import os
from typing import Any, Dict, Optional

from .exceptions import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EnvironmentOverrides:
    """Settings values supplied through the process environment."""

    def __init__(
        self,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        default_topic_arn: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        root_url: Optional[str] = None,
        use_ambient_credentials: Optional[bool] = None,
        log_level: Optional[str] = None,
    ):
        self.access_key = access_key
        self.secret_key = secret_key
        self.default_topic_arn = default_topic_arn
        self.endpoint_url = endpoint_url
        self.root_url = root_url
        self.use_ambient_credentials = use_ambient_credentials
        self.log_level = log_level

    def settings_changes(self) -> Dict[str, Any]:
        """GlobalSettings fields to overwrite; unset variables are left out."""
        candidates = {
            "access_key": self.access_key,
            "secret_key": self.secret_key,
            "default_topic_arn": self.default_topic_arn,
            "endpoint_url": self.endpoint_url,
            "root_url": self.root_url,
            "use_ambient_credentials": self.use_ambient_credentials,
        }
        return {key: value for key, value in candidates.items() if value is not None}


def load_environment_overrides() -> EnvironmentOverrides:
    """
    Read and validate notifier environment variables.

    Optional environment variables:
    - AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY: static key pair
    - SNS_DEFAULT_TOPIC_ARN: default topic for jobs without their own
    - SNS_ENDPOINT_URL: explicit SNS endpoint URL
    - BUILD_SERVER_ROOT_URL: root URL used to build BUILD_URL
    - SNS_USE_AMBIENT_CREDENTIALS: true/false
    - LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL

    Returns:
        EnvironmentOverrides holding the values that were set

    Raises:
        ConfigurationError: If a variable has an invalid value
    """
    errors = []

    access_key = os.getenv("AWS_ACCESS_KEY_ID") or None
    secret_key = os.getenv("AWS_SECRET_ACCESS_KEY") or None
    default_topic_arn = os.getenv("SNS_DEFAULT_TOPIC_ARN") or None
    endpoint_url = os.getenv("SNS_ENDPOINT_URL") or None
    root_url = os.getenv("BUILD_SERVER_ROOT_URL") or None
    ambient_str = os.getenv("SNS_USE_AMBIENT_CREDENTIALS")
    log_level = os.getenv("LOG_LEVEL") or None

    use_ambient_credentials = None
    if ambient_str:
        normalized = ambient_str.strip().lower()
        if normalized in _TRUE_VALUES:
            use_ambient_credentials = True
        elif normalized in _FALSE_VALUES:
            use_ambient_credentials = False
        else:
            errors.append(
                f"Invalid SNS_USE_AMBIENT_CREDENTIALS: '{ambient_str}'. Must be true or false."
            )

    if log_level and log_level.upper() not in _VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(_VALID_LOG_LEVELS)}"
        )

    if endpoint_url and not endpoint_url.startswith(("http://", "https://")):
        errors.append(
            f"Invalid SNS_ENDPOINT_URL: '{endpoint_url}'. Must start with http:// or https://"
        )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Check the values in your .env file",
                "Unset variables you do not need; the config file values are used instead",
            ],
        )

    return EnvironmentOverrides(
        access_key=access_key,
        secret_key=secret_key,
        default_topic_arn=default_topic_arn,
        endpoint_url=endpoint_url,
        root_url=root_url,
        use_ambient_credentials=use_ambient_credentials,
        log_level=log_level.upper() if log_level else None,
    )
