"""
SQS service for queue operations.
"""
import threading
from typing import Any, List, Optional, TYPE_CHECKING

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from config import AWSCredentials, Config
from logger_config import get_logger
from queue_drainer import Message, QueueDrainer
from utils.decorators import get_process_lock, serialized, traced

if TYPE_CHECKING:
    from mypy_boto3_sqs import SQSClient
else:
    SQSClient = Any

logger = get_logger(__name__)


class SQSService:
    """Service for SQS send, receive, delete and drain."""

    def __init__(
        self,
        credentials: Optional[AWSCredentials] = None,
        lock: Optional[threading.Lock] = None,
        client: Optional[SQSClient] = None,
        max_messages: int = 1,
        max_iterations: Optional[int] = None
    ) -> None:
        """
        Initialize SQS service.

        Args:
            credentials: Credentials and region; boto3 defaults when omitted
            lock: Lock serializing calls; the shared process lock when omitted
            client: Pre-built SQS client, mainly for tests
            max_messages: MaxNumberOfMessages for each receive (1-10)
            max_iterations: Default bound on non-empty receives per drain
        """
        self.credentials = credentials or AWSCredentials()
        self.lock = lock or get_process_lock()
        self._client: Optional[SQSClient] = client
        self.max_messages = max_messages
        self.max_iterations = max_iterations

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> "SQSService":
        """Build a service from the environment configuration."""
        kwargs.setdefault('max_iterations', config.drain_max_iterations)
        return cls(config.credentials(), **kwargs)

    @property
    def client(self) -> SQSClient:
        """Lazy initialization of SQS client."""
        if self._client is None:
            self._client = boto3.client('sqs', **self.credentials.client_kwargs())
        return self._client

    @traced
    @serialized
    def send_message(
        self,
        queue_url: str,
        body: str,
        message_group_id: Optional[str] = None
    ) -> bool:
        """
        Send a message to a queue.

        Args:
            queue_url: SQS queue URL
            body: Message body
            message_group_id: Message group for FIFO queues

        Returns:
            True if SQS returned a message id, False otherwise

        Raises:
            ClientError: If SQS operation fails
        """
        request = {'QueueUrl': queue_url, 'MessageBody': body}
        if message_group_id is not None:
            request['MessageGroupId'] = message_group_id

        try:
            response = self.client.send_message(**request)
        except (ClientError, BotoCoreError) as e:
            logger.error(f'SQS send_message failed for queue {queue_url}: {str(e)}')
            raise

        return bool(response.get('MessageId'))

    @traced
    @serialized
    def receive_messages(self, queue_url: str) -> List[Message]:
        """
        Receive one batch of messages.

        Returns:
            Messages received; empty when the queue currently has none

        Raises:
            ClientError: If SQS operation fails
        """
        return self._receive_messages(queue_url)

    @traced
    @serialized
    def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        """
        Delete a single message by its receipt handle.

        Raises:
            ClientError: If SQS operation fails
        """
        self._delete_message(queue_url, receipt_handle)

    @traced
    @serialized
    def get_all_messages(
        self,
        queue_url: str,
        max_iterations: Optional[int] = None
    ) -> List[str]:
        """
        Drain a queue, deleting every message that is returned.

        The lock is held for the whole drain, so no other call on the
        same lock runs between a receive and its deletes.

        Args:
            queue_url: SQS queue URL
            max_iterations: Optional bound on non-empty receives; the
                service default when omitted

        Returns:
            Bodies of all drained messages in received order

        Raises:
            QueueDrainError: If a receive or delete fails mid-drain
        """
        if max_iterations is None:
            max_iterations = self.max_iterations
        queue = _LockedQueue(self)
        drainer = QueueDrainer(queue, queue, max_iterations=max_iterations)
        return drainer.drain(queue_url)

    def _receive_messages(self, queue_url: str) -> List[Message]:
        try:
            response = self.client.receive_message(
                QueueUrl=queue_url,
                MaxNumberOfMessages=self.max_messages
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f'SQS receive_message failed for queue {queue_url}: {str(e)}')
            raise

        return [Message.from_sqs(raw) for raw in response.get('Messages', [])]

    def _delete_message(self, queue_url: str, receipt_handle: str) -> None:
        try:
            self.client.delete_message(QueueUrl=queue_url, ReceiptHandle=receipt_handle)
        except (ClientError, BotoCoreError) as e:
            logger.error(f'SQS delete_message failed for queue {queue_url}: {str(e)}')
            raise


class _LockedQueue:
    """Source and sink for a drain whose caller already holds the service lock."""

    def __init__(self, service: SQSService) -> None:
        self.service = service

    def receive_messages(self, queue_url: str) -> List[Message]:
        return self.service._receive_messages(queue_url)

    def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        self.service._delete_message(queue_url, receipt_handle)
