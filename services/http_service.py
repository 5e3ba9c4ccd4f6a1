"""
HTTP service for fetching pages with browser-like headers.
"""
import re

import requests
from typing import Dict, Optional
from config import Config
from logger_config import get_logger
from utils.decorators import traced
from utils.exceptions import HTTPFetchError

logger = get_logger(__name__)

# Only CR, LF and CRLF end a line; other Unicode separators stay in the markup
_LINE_BREAK = re.compile(r'\r\n|\r|\n')


class HTTPService:
    """Service for plain HTTP page fetches."""

    # Some sites refuse requests that do not look like a desktop browser
    DEFAULT_HEADERS = {
        'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/78.0.3904.87 Safari/537.36',
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.9',
    }

    def __init__(
        self,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 30
    ) -> None:
        """
        Initialize HTTP service.

        Args:
            headers: Optional custom headers (defaults to DEFAULT_HEADERS)
            timeout: Seconds to wait for connect and read
        """
        self.headers: Dict[str, str] = dict(headers or self.DEFAULT_HEADERS)
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Config, headers: Optional[Dict[str, str]] = None) -> "HTTPService":
        """Build a service using the configured request timeout."""
        return cls(headers=headers, timeout=config.http_timeout)

    @traced
    def make_connection(self, url: str) -> requests.Response:
        """
        Open a connection to ``url``.

        The response status is not checked here; callers decide what an
        error status means to them.

        Raises:
            HTTPFetchError: If the connection cannot be made
        """
        try:
            return requests.get(url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f'Failed to connect to {url}: {str(e)}')
            raise HTTPFetchError(f'Failed to connect to {url}: {str(e)}', url=url) from e

    @traced
    def get_html(self, url: str) -> str:
        """
        Get the HTML markup of a page.

        The body is decoded as UTF-8 and its lines are joined with the
        line terminators removed.

        Raises:
            HTTPFetchError: If the request fails or returns an error status
        """
        response = self.make_connection(url)

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            logger.error(f'Failed to get HTML from {url}: {str(e)}')
            raise HTTPFetchError(
                f'Failed to get HTML from {url}: {response.status_code} {str(e)}',
                url=url,
                status_code=response.status_code,
            ) from e

        response.encoding = 'utf-8'
        markup = _LINE_BREAK.sub('', response.text)
        logger.info(f'Retrieved {len(markup)} characters of HTML from {url}')
        return markup
