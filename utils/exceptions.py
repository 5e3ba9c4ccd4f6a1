"""
Custom exception classes for the queue, HTTP and XML utilities.
"""
from typing import List, Optional


class QueueDrainError(Exception):
    """Exception raised when a collaborator fails in the middle of a drain."""

    def __init__(
        self,
        message: str,
        queue_url: Optional[str] = None,
        drained: Optional[List[str]] = None
    ):
        """
        Initialize queue drain error.

        Args:
            message: Error message
            queue_url: Queue being drained
            drained: Bodies collected before the failure, in retrieval order
        """
        super().__init__(message)
        self.message = message
        self.queue_url = queue_url
        self.drained = list(drained or [])


class HTTPFetchError(Exception):
    """Exception raised when a URL cannot be fetched."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None
    ):
        """
        Initialize HTTP fetch error.

        Args:
            message: Error message
            url: Requested URL
            status_code: HTTP status code if a response was received
        """
        super().__init__(message)
        self.message = message
        self.url = url
        self.status_code = status_code


class XMLCodecError(Exception):
    """Exception raised for XML marshalling errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path
