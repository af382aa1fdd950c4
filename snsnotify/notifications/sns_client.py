"""SNS client wrapper for notification delivery.

Builds a boto3 SNS client bound to the topic's region and endpoint, publishes
a single message and always closes the client afterwards. One client is
created per publish; nothing is pooled or shared between dispatches.
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from snsnotify.config.models import GlobalSettings

from .models import TransportError
from .topics import ResolvedTopic

logger = logging.getLogger(__name__)

# One attempt per notification; the default connect/read timeouts still apply
_CLIENT_CONFIG = Config(retries={"max_attempts": 0})


def _session_client(service_name: str, **kwargs) -> Any:
    # A fresh session per client; boto3's default session is not thread-safe
    return boto3.session.Session().client(service_name, **kwargs)


class SNSClient:
    """Wrapper around the boto3 SNS client.

    Designed to be easily mockable: tests inject client_factory to hand back
    a stubbed or mocked client.
    """

    def __init__(self, client_factory: Optional[Callable[..., Any]] = None):
        """Initialize with an optional factory taking (service_name, **kwargs)."""
        self.client_factory = client_factory or _session_client

    def client_kwargs(self, topic: ResolvedTopic, settings: GlobalSettings) -> Dict[str, Any]:
        """Keyword arguments for creating the boto3 client.

        The explicit endpoint_url setting wins over the endpoint derived from
        the topic ARN. Static keys are passed only when ambient credentials
        are disabled; otherwise boto3's default credential chain applies.
        """
        kwargs: Dict[str, Any] = {
            "region_name": topic.region,
            "endpoint_url": settings.endpoint_url or topic.endpoint_url,
            "config": _CLIENT_CONFIG,
        }
        if not settings.use_ambient_credentials:
            kwargs["aws_access_key_id"] = settings.access_key
            kwargs["aws_secret_access_key"] = settings.secret_key_value()
        return kwargs

    @contextmanager
    def connect(self, topic: ResolvedTopic, settings: GlobalSettings) -> Iterator[Any]:
        """Yield a client for topic and close it on exit, whatever happens."""
        kwargs = self.client_kwargs(topic, settings)
        logger.debug(
            f"Creating SNS client for {kwargs['endpoint_url']} ({topic.region})",
            extra={
                "event": "sns.client.create",
                "ambient_credentials": settings.use_ambient_credentials,
            },
        )
        client = self.client_factory("sns", **kwargs)
        try:
            yield client
        finally:
            try:
                client.close()
            except Exception as e:
                logger.warning(f"Error closing SNS client: {e}")

    def publish(
        self,
        topic: ResolvedTopic,
        settings: GlobalSettings,
        subject: str,
        message: str,
    ) -> str:
        """Publish one message to topic.

        Args:
            topic: Resolved topic to publish to
            settings: Settings snapshot providing credentials and endpoint override
            subject: Subject line (at most 100 characters)
            message: Message body

        Returns:
            The SNS message id

        Raises:
            TransportError: If the client cannot be created or the publish fails
        """
        try:
            with self.connect(topic, settings) as client:
                response = client.publish(
                    TopicArn=topic.topic_arn,
                    Message=message,
                    Subject=subject,
                )
        except ClientError as e:
            error = e.response.get("Error", {})
            raise TransportError(
                f"SNS rejected the publish request ({error.get('Code', 'Unknown')}): "
                f"{error.get('Message', e)}"
            ) from e
        except BotoCoreError as e:
            raise TransportError(f"SNS request failed: {e}") from e
        except Exception as e:
            raise TransportError(f"Unexpected error during SNS publish: {e}") from e

        message_id = response.get("MessageId", "")
        logger.debug(
            f"SNS accepted message {message_id}",
            extra={"event": "sns.publish.accepted", "message_id": message_id},
        )
        return message_id
