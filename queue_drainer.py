"""
Queue draining: fetch and delete messages until the queue reports empty.

The drainer only knows two collaborators, a source that hands out batches of
messages and a sink that deletes a message by its receipt handle.
``services.sqs_service.SQSService`` plays both roles against SQS.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from logger_config import get_logger
from utils.exceptions import QueueDrainError

logger = get_logger(__name__)


@dataclass(frozen=True)
class Message:
    """A message received from a queue."""

    body: str
    receipt_handle: str
    message_id: Optional[str] = None

    @classmethod
    def from_sqs(cls, raw: Dict[str, Any]) -> "Message":
        """Build a Message from one entry of a ``receive_message`` response."""
        return cls(
            body=raw.get('Body', ''),
            receipt_handle=raw['ReceiptHandle'],
            message_id=raw.get('MessageId'),
        )


class MessageSource(Protocol):
    def receive_messages(self, queue_url: str) -> List[Message]:
        ...


class MessageSink(Protocol):
    def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        ...


class QueueDrainer:
    """Empties a queue into a list of message bodies."""

    def __init__(
        self,
        source: MessageSource,
        sink: MessageSink,
        max_iterations: Optional[int] = None
    ) -> None:
        """
        Args:
            source: Where batches of messages come from
            sink: Where receipt handles are sent for deletion
            max_iterations: Upper bound on non-empty fetches; None means
                keep going until a fetch comes back empty
        """
        if max_iterations is not None and max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got: {max_iterations}")
        self.source = source
        self.sink = sink
        self.max_iterations = max_iterations

    def drain(self, queue_url: str) -> List[str]:
        """
        Fetch and delete until a fetch returns no messages.

        Every message of a batch is deleted, in received order, before the
        next fetch is issued.

        Args:
            queue_url: Queue address, forwarded untouched to source and sink

        Returns:
            Message bodies in the order they were received

        Raises:
            QueueDrainError: If the source or sink fails. ``drained`` holds
                the bodies collected before the failure.
        """
        bodies: List[str] = []
        iterations = 0

        while True:
            if self.max_iterations is not None and iterations >= self.max_iterations:
                logger.warning(
                    f'Stopped draining {queue_url} after {iterations} batches '
                    f'with {len(bodies)} messages; queue may not be empty'
                )
                return bodies

            try:
                messages = self.source.receive_messages(queue_url)
            except Exception as e:
                logger.error(f'Receive failed while draining {queue_url}: {str(e)}')
                raise QueueDrainError(
                    f'Receive failed after {len(bodies)} messages: {str(e)}',
                    queue_url=queue_url,
                    drained=bodies,
                ) from e

            if not messages:
                break

            iterations += 1
            for message in messages:
                bodies.append(message.body)
                logger.debug(f'Message found: {message.body}')
                try:
                    self.sink.delete_message(queue_url, message.receipt_handle)
                except Exception as e:
                    logger.error(f'Delete failed while draining {queue_url}: {str(e)}')
                    raise QueueDrainError(
                        f'Delete failed after {len(bodies)} messages: {str(e)}',
                        queue_url=queue_url,
                        drained=bodies,
                    ) from e

        logger.info(f'Drained {len(bodies)} messages from {queue_url}')
        return bodies


def drain_queue(
    source: MessageSource,
    sink: MessageSink,
    queue_url: str,
    max_iterations: Optional[int] = None
) -> List[str]:
    """Convenience wrapper around ``QueueDrainer(...).drain(queue_url)``."""
    return QueueDrainer(source, sink, max_iterations=max_iterations).drain(queue_url)
