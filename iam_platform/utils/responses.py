"""
Response envelope and IAM response-body helpers.
"""

from typing import Dict, Any, Optional
import logging

import httpx
from pydantic import BaseModel, ConfigDict

from .exceptions import ApiException

logger = logging.getLogger("iam_platform")


class DetailedResponse:
    """Result, status code and headers of one API call."""

    def __init__(self,
                 result: Any = None,
                 headers: Optional[Dict[str, str]] = None,
                 status_code: Optional[int] = None):
        self.result = result
        self.headers = headers or {}
        self.status_code = status_code

    def get_result(self) -> Any:
        return self.result

    def get_headers(self) -> Dict[str, str]:
        return self.headers

    def get_status_code(self) -> Optional[int]:
        return self.status_code

    def __repr__(self) -> str:
        return f"DetailedResponse(status_code={self.status_code}, result={self.result!r})"

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "DetailedResponse":
        """
        Decode an httpx response. Empty and non-JSON bodies give a None/text result.

        Raises:
            ApiException: If a JSON content type carries a body that does not decode
        """
        result = None
        if response.content:
            content_type = response.headers.get("Content-Type", "")
            if "json" in content_type:
                try:
                    result = response.json()
                except ValueError:
                    logger.warning(f"Undecodable JSON body in {response.status_code} response")
                    raise ApiException(response.status_code, "Invalid JSON response body", response)
            else:
                result = response.text

        return cls(result=result, headers=dict(response.headers), status_code=response.status_code)


class PageLink(BaseModel):
    """The `next` descriptor of a paginated list response. Fields are read one at a time."""

    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_result(cls, result: Any) -> Optional["PageLink"]:
        """
        Read result['next'], or None when it is absent or not an object.

        Args:
            result: Decoded response body

        Returns:
            The link, or None
        """
        if not isinstance(result, dict):
            return None

        next_link = result.get("next")
        if not isinstance(next_link, dict):
            return None

        return cls.model_validate(next_link)

    def field(self, name: str) -> Optional[str]:
        """
        One field of the link as a string token.

        Only strings and numbers count; an empty string or a zero is no token.
        """
        value = (self.model_extra or {}).get(name)
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            return None
        if not value:
            return None
        return str(value)


def extract_error_message(response: httpx.Response) -> str:
    """
    Extract a human readable message from an IAM error response.

    IAM services report errors in a few shapes:
    {"errors": [{"code": ..., "message": ...}], "trace": ...},
    {"error": "..."}, {"message": "..."} or {"errorMessage": "..."}.

    Args:
        response: The failed HTTP response

    Returns:
        The message, or the HTTP reason phrase when the body has none
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            message = errors[0].get("message")
            if message:
                return message

        for key in ("error", "message", "errorMessage"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value

    return response.reason_phrase or f"HTTP {response.status_code}"
