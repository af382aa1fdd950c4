"""Unit tests for topic ARN resolution."""

import pytest

from snsnotify.notifications.models import ResolutionError
from snsnotify.notifications.topics import endpoint_for_region, resolve_topic


def test_resolve_standard_region():
    """Test endpoint derivation for a commercial region."""
    topic = resolve_topic("arn:aws:sns:us-west-2:123456789012:my-topic")

    assert topic.topic_arn == "arn:aws:sns:us-west-2:123456789012:my-topic"
    assert topic.region == "us-west-2"
    assert topic.endpoint == "sns.us-west-2.amazonaws.com"
    assert topic.endpoint_url == "https://sns.us-west-2.amazonaws.com"


def test_resolve_china_region():
    """Test that cn- regions use the amazonaws.com.cn domain."""
    topic = resolve_topic("arn:aws-cn:sns:cn-north-1:123456789012:builds")

    assert topic.region == "cn-north-1"
    assert topic.endpoint == "sns.cn-north-1.amazonaws.com.cn"


def test_resolve_accepts_exactly_five_fields():
    """Test that five colon-delimited fields are enough."""
    topic = resolve_topic("arn:aws:sns:eu-west-1:123456789012")

    assert topic.endpoint == "sns.eu-west-1.amazonaws.com"


def test_resolve_is_deterministic():
    """Test that resolving twice yields equal values."""
    arn = "arn:aws:sns:ap-southeast-2:123456789012:t"
    assert resolve_topic(arn) == resolve_topic(arn)


@pytest.mark.parametrize(
    "arn",
    [
        "",
        "   ",
        "aws:sns:us-west-2:123456789012:my-topic:extra",
        "urn:aws:sns:us-west-2:123456789012:my-topic",
        "arn:aws:sns:us-west-2",
        "arn:aws:sqs:us-west-2:123456789012:my-queue",
        "arn:aws:sns::123456789012:my-topic",
        "my-topic",
    ],
)
def test_resolve_rejects_malformed(arn):
    """Test that malformed identifiers raise ResolutionError."""
    with pytest.raises(ResolutionError):
        resolve_topic(arn)


def test_endpoint_for_region():
    """Test hostname derivation directly."""
    assert endpoint_for_region("us-east-1") == "sns.us-east-1.amazonaws.com"
    assert endpoint_for_region("cn-northwest-1") == "sns.cn-northwest-1.amazonaws.com.cn"
