"""
HTTP request manager: URL building, header merging, dispatch and error mapping.
"""

import httpx
from typing import Dict, Any, Optional
from urllib.parse import quote
import logging

from .auth_manager import Authenticator
from .exceptions import ApiException
from .responses import DetailedResponse, extract_error_message

logger = logging.getLogger("iam_platform")


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_query_value(v) for v in value)
    return str(value)


def prepare_query(params: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Drop unset query parameters and serialize the rest."""
    if not params:
        return {}
    return {key: _query_value(value) for key, value in params.items() if value is not None}


def prepare_body(body: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Drop unset top-level body fields. An all-unset body is sent as no body."""
    if body is None:
        return None
    cleaned = {key: value for key, value in body.items() if value is not None}
    return cleaned or None


def merge_headers(*header_sets: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Merge header dicts left to right, later sets winning, unset values dropped."""
    merged: Dict[str, str] = {}
    for headers in header_sets:
        if not headers:
            continue
        for key, value in headers.items():
            # Header names are case-insensitive, replace any earlier spelling
            for existing in [k for k in merged if k.lower() == key.lower()]:
                del merged[existing]
            if value is not None:
                merged[key] = str(value)
    return merged


def build_path(path: str, path_params: Optional[Dict[str, Any]] = None) -> str:
    """Fill a '/v2/groups/{access_group_id}' style template with URL-encoded values."""
    if not path_params:
        return path
    encoded = {key: quote(str(value), safe="") for key, value in path_params.items()}
    return path.format(**encoded)


class RequestManager:
    """Manages HTTP requests to one service."""

    def __init__(self,
                 authenticator: Authenticator,
                 service_url: str,
                 request_timeout: int = 60,
                 default_headers: Optional[Dict[str, str]] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.authenticator = authenticator
        self.service_url = service_url.rstrip("/")
        self.request_timeout = request_timeout
        self.default_headers = default_headers or {}
        self.transport = transport

        # HTTP status codes that mean the cached token is no longer good
        self.auth_error_codes = {401}

    def set_service_url(self, service_url: str) -> None:
        if not service_url:
            raise ValueError("service_url must be provided")
        self.service_url = service_url.rstrip("/")

    def build_url(self, path: str, path_params: Optional[Dict[str, Any]] = None) -> str:
        return f"{self.service_url}{build_path(path, path_params)}"

    async def _make_request(self,
                            method: str,
                            url: str,
                            headers: Dict[str, str],
                            params: Dict[str, str],
                            json_data: Optional[Dict[str, Any]] = None) -> httpx.Response:
        """Make a single HTTP request."""

        auth_headers = await self.authenticator.get_auth_header()
        request_headers = merge_headers(headers, auth_headers)

        async with httpx.AsyncClient(timeout=self.request_timeout, transport=self.transport) as client:
            logger.debug(f"{method} {url}")

            response = await client.request(
                method=method,
                url=url,
                headers=request_headers,
                params=params or None,
                json=json_data
            )

            logger.debug(f"Response: {response.status_code}")
            return response

    async def request(self,
                      method: str,
                      path: str,
                      path_params: Optional[Dict[str, Any]] = None,
                      params: Optional[Dict[str, Any]] = None,
                      json_data: Optional[Dict[str, Any]] = None,
                      headers: Optional[Dict[str, Any]] = None) -> DetailedResponse:
        """
        Make one HTTP request and decode the response.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: Path template relative to the service URL
            path_params: Values for the path template
            params: Query parameters; None values are dropped
            json_data: JSON body; None fields are dropped
            headers: Request headers; None values are dropped

        Returns:
            DetailedResponse with the decoded body

        Raises:
            ApiException: If the service answers with a non-2xx status
            httpx.HTTPError: If the request could not be sent (timeout, connection error)
        """
        url = self.build_url(path, path_params)
        request_headers = merge_headers(self.default_headers, headers)

        response = await self._make_request(
            method.upper(),
            url,
            request_headers,
            prepare_query(params),
            prepare_body(json_data)
        )

        if not response.is_success:
            message = extract_error_message(response)
            logger.warning(f"{method.upper()} {url} failed with {response.status_code}: {message}")

            if response.status_code in self.auth_error_codes:
                logger.info("Auth error, invalidating cached token")
                self.authenticator.invalidate_token()

            raise ApiException(response.status_code, message, response)

        return DetailedResponse.from_httpx(response)
