import os
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

logger = logging.getLogger("iam_platform")

DEFAULT_AUTH_URL = "https://iam.cloud.ibm.com"


@dataclass
class ServiceConfig:
    """Configuration for a single IAM service client."""
    service_name: str
    auth_type: str = "iam"
    apikey: Optional[str] = None
    bearer_token: Optional[str] = None
    url: Optional[str] = None
    auth_url: str = DEFAULT_AUTH_URL
    request_timeout: int = 60

    @property
    def env_prefix(self) -> str:
        return ConfigManager.env_prefix(self.service_name)


class ConfigManager:
    """Manages configuration loading and validation."""

    AUTH_TYPES = ("iam", "bearertoken", "noauth")

    # Credential each auth type cannot work without
    REQUIRED_CREDENTIALS = {
        "iam": "apikey",
        "bearertoken": "bearer_token",
    }

    @staticmethod
    def env_prefix(service_name: str) -> str:
        """IAM_ACCESS_GROUPS for service name 'iam_access_groups'."""
        return service_name.upper().replace("-", "_")

    @staticmethod
    def load_config(service_name: str) -> ServiceConfig:
        """Load configuration for a service from <SERVICE_NAME>_* environment variables."""
        prefix = ConfigManager.env_prefix(service_name)

        auth_type = (os.getenv(f"{prefix}_AUTH_TYPE") or "iam").lower().strip()
        apikey = os.getenv(f"{prefix}_APIKEY") or None
        bearer_token = os.getenv(f"{prefix}_BEARER_TOKEN") or None
        url = os.getenv(f"{prefix}_URL") or None
        auth_url = os.getenv(f"{prefix}_AUTH_URL") or DEFAULT_AUTH_URL

        timeout_str = os.getenv(f"{prefix}_REQUEST_TIMEOUT", "60")
        try:
            request_timeout = int(timeout_str)
        except ValueError:
            raise ValueError(f"{prefix}_REQUEST_TIMEOUT must be an integer, got '{timeout_str}'")

        config = ServiceConfig(
            service_name=service_name,
            auth_type=auth_type,
            apikey=apikey,
            bearer_token=bearer_token,
            url=url,
            auth_url=auth_url,
            request_timeout=request_timeout
        )

        ConfigManager.validate_config(config)

        logger.info(f"Loaded configuration for {service_name} (auth type: {auth_type})")
        return config

    @staticmethod
    def validate_config(config: ServiceConfig) -> None:
        """Validate configuration settings."""
        prefix = config.env_prefix

        if config.auth_type not in ConfigManager.AUTH_TYPES:
            raise ValueError(f"Invalid auth type '{config.auth_type}'. Valid auth types: {list(ConfigManager.AUTH_TYPES)}")

        required = ConfigManager.REQUIRED_CREDENTIALS.get(config.auth_type)
        if required and not getattr(config, required):
            raise ValueError(f"Missing required environment variable: {prefix}_{required.upper()}")

        if not 1 <= config.request_timeout <= 300:
            raise ValueError("request_timeout must be between 1 and 300 seconds")

        for name in ("url", "auth_url"):
            value = getattr(config, name)
            if value and not value.startswith(("http://", "https://")):
                raise ValueError(f"{prefix}_{name.upper()} must be an http(s) URL, got '{value}'")

    @staticmethod
    def missing_variables(service_name: str) -> List[str]:
        """Names of the environment variables still needed for a service to load."""
        prefix = ConfigManager.env_prefix(service_name)
        auth_type = (os.getenv(f"{prefix}_AUTH_TYPE") or "iam").lower().strip()
        required = ConfigManager.REQUIRED_CREDENTIALS.get(auth_type)
        if required and not os.getenv(f"{prefix}_{required.upper()}"):
            return [f"{prefix}_{required.upper()}"]
        return []

    @staticmethod
    def describe(config: ServiceConfig) -> Dict[str, str]:
        """Config summary safe for logging (no credentials)."""
        return {
            "service_name": config.service_name,
            "auth_type": config.auth_type,
            "url": config.url or "",
            "auth_url": config.auth_url,
        }
