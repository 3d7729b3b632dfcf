"""
Base class for the IAM service clients: wires configuration, authentication and requests.
"""

import logging
import platform
from typing import Dict, Any, Optional

import httpx

from ..version import __version__
from .auth_manager import Authenticator, get_authenticator_from_config
from .config import ConfigManager, ServiceConfig
from .request_manager import RequestManager
from .responses import DetailedResponse

logger = logging.getLogger("iam_platform")

USER_AGENT = (
    f"iam-platform-python-sdk/{__version__} "
    f"(lang=python; lang.version={platform.python_version()}; "
    f"os.name={platform.system()}; os.version={platform.release()})"
)


def get_sdk_headers(service_name: str, service_version: str, operation_id: str) -> Dict[str, str]:
    """Headers identifying the SDK and the operation on every request."""
    return {
        "User-Agent": USER_AGENT,
        "X-IBMCloud-SDK-Analytics": (
            f"service_name={service_name};service_version={service_version};operation_id={operation_id}"
        ),
    }


def validate_required(**params: Any) -> None:
    """Raise ValueError naming the first required parameter that is None."""
    for name, value in params.items():
        if value is None:
            raise ValueError(f"{name} must be provided")


class BaseService:
    """Common plumbing for the IAM service clients."""

    DEFAULT_SERVICE_URL = ""
    DEFAULT_SERVICE_NAME = ""
    SERVICE_VERSION = ""

    def __init__(self,
                 authenticator: Authenticator,
                 service_url: Optional[str] = None,
                 request_timeout: int = 60,
                 headers: Optional[Dict[str, str]] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            authenticator: Supplies the Authorization header
            service_url: Base URL, defaults to DEFAULT_SERVICE_URL
            request_timeout: Per-request timeout in seconds
            headers: Default headers sent with every request
            transport: Optional httpx transport (used by tests)
        """
        if authenticator is None:
            raise ValueError("authenticator must be provided")

        self.authenticator = authenticator
        self.request_manager = RequestManager(
            authenticator=authenticator,
            service_url=service_url or self.DEFAULT_SERVICE_URL,
            request_timeout=request_timeout,
            default_headers=headers,
            transport=transport
        )

        logger.info(f"{type(self).__name__} initialized for {self.request_manager.service_url}")

    @classmethod
    def new_instance(cls,
                     service_name: Optional[str] = None,
                     config: Optional[ServiceConfig] = None,
                     **kwargs: Any):
        """
        Build a client from external configuration.

        Args:
            service_name: Prefix of the environment variables to read, defaults to DEFAULT_SERVICE_NAME
            config: Use this configuration instead of reading the environment

        Returns:
            A configured client
        """
        config = config or ConfigManager.load_config(service_name or cls.DEFAULT_SERVICE_NAME)
        logger.debug(f"Creating {cls.__name__} from {ConfigManager.describe(config)}")

        authenticator = get_authenticator_from_config(config)
        return cls(
            authenticator,
            service_url=config.url,
            request_timeout=config.request_timeout,
            **kwargs
        )

    @property
    def service_url(self) -> str:
        return self.request_manager.service_url

    def set_service_url(self, service_url: str) -> None:
        self.request_manager.set_service_url(service_url)

    def set_default_headers(self, headers: Dict[str, str]) -> None:
        self.request_manager.default_headers = dict(headers)

    async def _send(self,
                    operation_id: str,
                    method: str,
                    path: str,
                    path_params: Optional[Dict[str, Any]] = None,
                    params: Optional[Dict[str, Any]] = None,
                    body: Optional[Dict[str, Any]] = None,
                    headers: Optional[Dict[str, Any]] = None,
                    custom_headers: Optional[Dict[str, Any]] = None) -> DetailedResponse:
        """Dispatch one operation. Header precedence: SDK < operation defaults < caller."""
        request_headers = {}
        request_headers.update(get_sdk_headers(self.DEFAULT_SERVICE_NAME, self.SERVICE_VERSION, operation_id))
        request_headers.update(headers or {})
        if custom_headers:
            request_headers.update(custom_headers)

        return await self.request_manager.request(
            method,
            path,
            path_params=path_params,
            params=params,
            json_data=body,
            headers=request_headers
        )
