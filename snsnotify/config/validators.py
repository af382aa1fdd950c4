"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List


def _looks_like_sns_arn(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    parts = value.strip().split(":")
    return len(parts) >= 5 and parts[0] == "arn" and parts[2] == "sns"


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for likely mistakes that do not make it invalid.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    settings = config_dict.get("settings") or {}
    if isinstance(settings, dict):
        has_access = bool(settings.get("access_key"))
        has_secret = bool(settings.get("secret_key"))
        if has_access != has_secret:
            warning_messages.append(
                "Only one of access_key/secret_key is set; static credentials will be ignored"
            )

        if settings.get("use_ambient_credentials") and (has_access or has_secret):
            warning_messages.append(
                "use_ambient_credentials is enabled; the configured access_key/secret_key are not used"
            )

        default_topic = settings.get("default_topic_arn")
        if default_topic and not _looks_like_sns_arn(default_topic):
            warning_messages.append(
                f"default_topic_arn '{default_topic}' is not an SNS topic ARN; notifications will be skipped"
            )

    jobs = config_dict.get("jobs") or {}
    if isinstance(jobs, dict):
        for name, job in jobs.items():
            if not isinstance(job, dict):
                continue
            topic = job.get("topic_arn")
            if topic and not _looks_like_sns_arn(topic):
                warning_messages.append(
                    f"Job '{name}' topic_arn '{topic}' is not an SNS topic ARN; its notifications will be skipped"
                )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
