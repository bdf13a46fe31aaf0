"""
Base API Connector Class for the remote user service
Provides the HTTP plumbing and the error translation shared by connectors
"""
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any
from dataclasses import dataclass
import logging

import requests

from racf_core.errors import RemoteRequestError, RemoteUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class APIConfig:
    """Configuration for API connection"""
    api_name: str
    base_url: str
    api_key: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    timeout: float = 30
    health_timeout: float = 2.0


class BaseAPIConnector(ABC):
    """Abstract base class for all API connectors"""

    # Status codes that carry no body by definition
    NO_CONTENT_STATUSES = (204, 205)

    def __init__(self, config: APIConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

        self.session.headers.update({"Accept": "application/json"})
        if config.headers:
            self.session.headers.update(config.headers)

        if config.api_key:
            self._set_auth_header()

    def _set_auth_header(self):
        """Set authentication header based on API requirements"""
        self.session.headers.update({"Authorization": f"Bearer {self.config.api_key}"})

    @abstractmethod
    def health(self, timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Lightweight reachability check.

        Raises:
            RemoteUnavailableError: the service could not be reached
            RemoteRequestError: the service answered with a non-2xx status
        """
        pass

    def _build_url(self, endpoint: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    def _make_request(
        self,
        endpoint: str,
        method: str = "GET",
        params: Optional[Dict] = None,
        data: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Make HTTP request with error handling

        Args:
            endpoint: API endpoint (appended to base_url)
            method: HTTP method (GET, POST, etc.)
            params: Query parameters
            data: Request body, sent as JSON
            timeout: Overrides the configured timeout for this call

        Returns:
            Decoded JSON body, or None for empty / no-content / non-JSON bodies

        Raises:
            RemoteUnavailableError: network-level failure (unreachable, timeout)
            RemoteRequestError: the service answered with a non-2xx status
        """
        url = self._build_url(endpoint)

        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=data,
                timeout=timeout if timeout is not None else self.config.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise RemoteUnavailableError(
                f"API request failed for {self.config.api_name}: {str(e)}",
                url=url,
            ) from e

        body = self._parse_body(response)

        if not 200 <= response.status_code < 300:
            message = self._error_message(response.status_code, body)
            logger.debug(f"{method} {url} -> {response.status_code}: {message}")
            raise RemoteRequestError(response.status_code, message)

        return body

    def _parse_body(self, response) -> Any:
        """Decode a JSON body; anything empty or undecodable counts as no body."""
        if response.status_code in self.NO_CONTENT_STATUSES or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _error_message(status_code: int, body: Any) -> str:
        if isinstance(body, dict):
            message = body.get("message")
            if isinstance(message, str) and message.strip():
                return message
        return f"Request failed with status {status_code}"
