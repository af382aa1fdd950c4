"""Unit tests for the SNS client wrapper.

Tests the SNSClient for:
- Client construction (region, endpoint, credentials)
- Publish request shape
- Error translation to TransportError
- Client release on every path
"""

from unittest.mock import MagicMock, Mock

import boto3
import pytest
from botocore.exceptions import ClientError, EndpointConnectionError
from botocore.stub import Stubber

from snsnotify.config.models import GlobalSettings
from snsnotify.notifications.models import TransportError
from snsnotify.notifications.sns_client import SNSClient
from snsnotify.notifications.topics import resolve_topic

TOPIC_ARN = "arn:aws:sns:us-west-2:123456789012:my-topic"


@pytest.fixture
def topic():
    return resolve_topic(TOPIC_ARN)


def test_sns_client_initialization():
    """Test SNSClient initialization with the default factory."""
    client = SNSClient()
    assert client.client_factory is not None


def test_client_kwargs_static_credentials(topic, settings):
    """Test that static keys, region and derived endpoint are passed."""
    kwargs = SNSClient().client_kwargs(topic, settings)

    assert kwargs["region_name"] == "us-west-2"
    assert kwargs["endpoint_url"] == "https://sns.us-west-2.amazonaws.com"
    assert kwargs["aws_access_key_id"] == "AKIATESTKEY"
    assert kwargs["aws_secret_access_key"] == "s3cr3t-value"


def test_client_kwargs_ambient_credentials(topic):
    """Test that no keys are passed when ambient credentials are used."""
    settings = GlobalSettings(use_ambient_credentials=True, access_key="ignored")
    kwargs = SNSClient().client_kwargs(topic, settings)

    assert "aws_access_key_id" not in kwargs
    assert "aws_secret_access_key" not in kwargs


def test_client_kwargs_custom_endpoint(topic, settings):
    """Test that an explicit endpoint overrides the derived one."""
    custom = settings.model_copy(update={"endpoint_url": "http://localhost:4566"})
    kwargs = SNSClient().client_kwargs(topic, custom)

    assert kwargs["endpoint_url"] == "http://localhost:4566"
    assert kwargs["region_name"] == "us-west-2"


def test_publish_success(topic, settings):
    """Test a successful publish and client release."""
    mock_sns = MagicMock()
    mock_sns.publish.return_value = {"MessageId": "msg-1"}
    mock_factory = Mock(return_value=mock_sns)

    client = SNSClient(client_factory=mock_factory)
    message_id = client.publish(topic, settings, "Subject", "Body")

    assert message_id == "msg-1"
    mock_factory.assert_called_once()
    assert mock_factory.call_args.args == ("sns",)
    mock_sns.publish.assert_called_once_with(
        TopicArn=TOPIC_ARN, Message="Body", Subject="Subject"
    )
    mock_sns.close.assert_called_once()


def test_publish_client_error(topic, settings):
    """Test that service rejections become TransportError and release the client."""
    mock_sns = MagicMock()
    mock_sns.publish.side_effect = ClientError(
        {"Error": {"Code": "AuthorizationError", "Message": "not allowed"}}, "Publish"
    )
    client = SNSClient(client_factory=Mock(return_value=mock_sns))

    with pytest.raises(TransportError) as exc_info:
        client.publish(topic, settings, "Subject", "Body")

    assert "AuthorizationError" in str(exc_info.value)
    assert "not allowed" in str(exc_info.value)
    mock_sns.close.assert_called_once()


def test_publish_network_error(topic, settings):
    """Test that connection failures become TransportError."""
    mock_sns = MagicMock()
    mock_sns.publish.side_effect = EndpointConnectionError(endpoint_url="https://sns.example")
    client = SNSClient(client_factory=Mock(return_value=mock_sns))

    with pytest.raises(TransportError):
        client.publish(topic, settings, "Subject", "Body")

    mock_sns.close.assert_called_once()


def test_publish_factory_error(topic, settings):
    """Test that client construction failures become TransportError."""
    client = SNSClient(client_factory=Mock(side_effect=ValueError("bad credentials")))

    with pytest.raises(TransportError) as exc_info:
        client.publish(topic, settings, "Subject", "Body")

    assert "bad credentials" in str(exc_info.value)


def test_close_error_does_not_mask_success(topic, settings):
    """Test that an error while closing is logged, not raised."""
    mock_sns = MagicMock()
    mock_sns.publish.return_value = {"MessageId": "msg-2"}
    mock_sns.close.side_effect = RuntimeError("already closed")
    client = SNSClient(client_factory=Mock(return_value=mock_sns))

    assert client.publish(topic, settings, "Subject", "Body") == "msg-2"


def test_publish_with_stubbed_boto3_client(topic, settings):
    """Test the request against botocore's SNS model using a Stubber."""
    sns = boto3.session.Session().client(
        "sns",
        region_name="us-west-2",
        aws_access_key_id="AKIATESTKEY",
        aws_secret_access_key="s3cr3t-value",
    )
    stubber = Stubber(sns)
    stubber.add_response(
        "publish",
        {"MessageId": "stubbed-id"},
        {"TopicArn": TOPIC_ARN, "Message": "Body", "Subject": "Subject"},
    )

    with stubber:
        message_id = SNSClient(client_factory=lambda *a, **kw: sns).publish(
            topic, settings, "Subject", "Body"
        )

    assert message_id == "stubbed-id"
    stubber.assert_no_pending_responses()
