"""Topic ARN resolution.

Derives the regional SNS endpoint from a topic ARN of the form
``arn:aws:sns:<region>:<account>:<name>``.
"""

from dataclasses import dataclass

from .models import ResolutionError

CHINA_REGION_PREFIX = "cn-"


@dataclass(frozen=True)
class ResolvedTopic:
    """A topic ARN together with the endpoint and region serving it."""

    topic_arn: str
    endpoint: str
    region: str

    @property
    def endpoint_url(self) -> str:
        """HTTPS URL for the endpoint, as expected by boto3."""
        return f"https://{self.endpoint}"


def endpoint_for_region(region: str) -> str:
    """SNS API hostname for a region; China regions live under amazonaws.com.cn."""
    if region.startswith(CHINA_REGION_PREFIX):
        return f"sns.{region}.amazonaws.com.cn"
    return f"sns.{region}.amazonaws.com"


def resolve_topic(topic_arn: str) -> ResolvedTopic:
    """Resolve a topic ARN to its region and SNS endpoint.

    Args:
        topic_arn: Topic identifier, e.g. arn:aws:sns:us-west-2:123456789012:my-topic

    Returns:
        ResolvedTopic for the ARN

    Raises:
        ResolutionError: If the ARN is empty or malformed
    """
    if not topic_arn or not topic_arn.strip():
        raise ResolutionError("Topic ARN is empty")

    parts = topic_arn.split(":")
    if len(parts) < 5:
        raise ResolutionError(
            f"Topic ARN has {len(parts)} colon-delimited fields, expected at least 5: {topic_arn}"
        )
    if parts[0] != "arn":
        raise ResolutionError(f"Topic ARN must start with 'arn': {topic_arn}")
    if parts[2] != "sns":
        raise ResolutionError(f"Topic ARN is not an SNS resource ('{parts[2]}'): {topic_arn}")

    region = parts[3]
    if not region:
        raise ResolutionError(f"Topic ARN has no region: {topic_arn}")

    return ResolvedTopic(
        topic_arn=topic_arn,
        endpoint=endpoint_for_region(region),
        region=region,
    )
