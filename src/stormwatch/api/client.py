"""
Base HTTP client for upstream weather providers.

Handles HTTP requests, session management, and error handling.
"""

import logging
from typing import Dict, Any, Optional, TYPE_CHECKING

import requests  # type: ignore
from requests.adapters import HTTPAdapter  # type: ignore
from urllib3.util.retry import Retry  # type: ignore

from .exceptions import RateLimitedError

if TYPE_CHECKING:
    from .throttle import RequestQueue


class APIClient:
    """Base client for one upstream provider."""

    def __init__(
        self,
        base_url: str,
        timeout: int = 10,
        max_retries: int = 2,
        headers: Optional[Dict[str, str]] = None,
        request_queue: Optional["RequestQueue"] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize API client.

        Args:
            base_url: Base URL for the API
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts on server errors
            headers: Default headers sent with every request
            request_queue: Optional queue that serializes and paces requests
            logger: Logger instance
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.request_queue = request_queue
        self.logger = logger or logging.getLogger(__name__)

        # Setup session with retry strategy. 429 is left to the request queue.
        self.session = requests.Session()
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=1,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        if headers:
            self.session.headers.update(headers)

    def _build_url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        response = self.session.request(
            method=method,
            url=url,
            timeout=self.timeout,
            **kwargs
        )
        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitedError(
                f"Rate limited by {url}",
                source=self.base_url,
                retry_after=float(retry_after) if retry_after and retry_after.isdigit() else None
            )
        response.raise_for_status()
        return response

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make HTTP request to the provider.

        Args:
            method: HTTP method
            endpoint: API endpoint (relative to base URL) or absolute URL
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            RateLimitedError: When the provider keeps answering 429
            requests.exceptions.RequestException: On request failure
        """
        url = self._build_url(endpoint)

        self.logger.debug(f"{method} {url}")

        try:
            if self.request_queue is not None:
                return self.request_queue.call(self._send, method, url, **kwargs)
            return self._send(method, url, **kwargs)

        except requests.exceptions.RequestException as e:
            self.logger.error(f"API request failed: {method} {url} - {e}")
            raise

    def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Any:
        """
        Make GET request.

        Args:
            endpoint: API endpoint
            params: Query parameters
            headers: Extra headers for this request

        Returns:
            Decoded JSON response
        """
        response = self._make_request("GET", endpoint, params=params, headers=headers)
        return response.json()

    def get_text(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> str:
        """
        Make GET request for a text document (RSS, KML, bulletins).

        Args:
            endpoint: API endpoint
            params: Query parameters
            headers: Extra headers for this request

        Returns:
            Response body as text
        """
        response = self._make_request("GET", endpoint, params=params, headers=headers)
        return response.text

    def close(self) -> None:
        """Close the session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
