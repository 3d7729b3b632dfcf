"""
Authenticators for IAM API access.
"""

import time
import logging
from typing import Optional, Dict
import httpx
from dataclasses import dataclass

from .config import ServiceConfig
from .exceptions import ApiException

logger = logging.getLogger("iam_platform")

APIKEY_GRANT_TYPE = "urn:ibm:params:oauth:grant-type:apikey"


@dataclass
class TokenInfo:
    """IAM access token information."""
    access_token: str
    token_type: str
    expires_at: float
    refresh_token: Optional[str] = None


class Authenticator:
    """Base authenticator. Subclasses supply the Authorization header."""

    auth_type = "noauth"

    async def get_auth_header(self) -> Dict[str, str]:
        return {}

    def invalidate_token(self) -> None:
        pass


class NoAuthAuthenticator(Authenticator):
    """Sends requests without credentials."""


class BearerTokenAuthenticator(Authenticator):
    """Sends a caller-managed bearer token."""

    auth_type = "bearertoken"

    def __init__(self, bearer_token: str):
        if not bearer_token:
            raise ValueError("bearer_token must be provided")
        self.bearer_token = bearer_token

    async def get_auth_header(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.bearer_token}"}


class IamAuthenticator(Authenticator):
    """Exchanges an API key for IAM access tokens and keeps them fresh."""

    auth_type = "iam"

    def __init__(self,
                 apikey: str,
                 url: str = "https://iam.cloud.ibm.com",
                 request_timeout: int = 60,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        if not apikey:
            raise ValueError("apikey must be provided")
        self.apikey = apikey
        self.url = url.rstrip("/")
        self.request_timeout = request_timeout
        self.transport = transport
        self.token_info: Optional[TokenInfo] = None
        self.token_buffer_seconds = 60  # Refresh token 60 seconds before expiry

    async def _request_token(self) -> TokenInfo:
        """Request a new access token using the API key grant."""
        token_url = f"{self.url}/identity/token"

        headers = {
            "Accept": "application/json",
            "Content-Type": "application/x-www-form-urlencoded"
        }

        data = {
            "grant_type": APIKEY_GRANT_TYPE,
            "apikey": self.apikey,
            "response_type": "cloud_iam"
        }

        async with httpx.AsyncClient(timeout=self.request_timeout, transport=self.transport) as client:
            response = await client.post(token_url, headers=headers, data=data)

            if response.status_code != 200:
                error_detail = ""
                try:
                    error_info = response.json()
                    error_detail = error_info.get("errorMessage") or error_info.get("error_description") or ""
                except ValueError:
                    error_detail = response.reason_phrase

                raise ApiException(response.status_code, f"Token request failed: {error_detail}", response)

            token_data = response.json()

            # Prefer the absolute expiration, fall back to expires_in
            if "expiration" in token_data:
                expires_at = float(token_data["expiration"])
            else:
                expires_at = time.time() + token_data.get("expires_in", 3600)

            logger.info("Obtained new IAM access token")

            return TokenInfo(
                access_token=token_data["access_token"],
                token_type=token_data.get("token_type", "Bearer"),
                expires_at=expires_at,
                refresh_token=token_data.get("refresh_token")
            )

    def _is_token_expired(self) -> bool:
        """Check if current token is expired or about to expire."""
        if not self.token_info:
            return True

        return time.time() >= (self.token_info.expires_at - self.token_buffer_seconds)

    async def get_access_token(self) -> str:
        """Get a valid access token, refreshing if necessary."""
        if self._is_token_expired():
            self.token_info = await self._request_token()

        return self.token_info.access_token

    async def get_auth_header(self) -> Dict[str, str]:
        token = await self.get_access_token()
        return {"Authorization": f"Bearer {token}"}

    def invalidate_token(self) -> None:
        """Invalidate current token to force refresh on next request."""
        self.token_info = None


def get_authenticator_from_config(config: ServiceConfig) -> Authenticator:
    """Build the authenticator named by config.auth_type."""
    if config.auth_type == "iam":
        return IamAuthenticator(config.apikey, url=config.auth_url, request_timeout=config.request_timeout)
    if config.auth_type == "bearertoken":
        return BearerTokenAuthenticator(config.bearer_token)
    if config.auth_type == "noauth":
        return NoAuthAuthenticator()
    raise ValueError(f"Unsupported auth type: {config.auth_type}")
