"""
Exception types raised by the IAM Platform client.
"""

from typing import Any, Dict, Optional
import httpx


class ApiException(Exception):
    """Raised when an IAM API call returns a non-2xx status."""

    def __init__(self,
                 code: int,
                 message: Optional[str] = None,
                 http_response: Optional[httpx.Response] = None):
        self.code = code
        self.message = message or f"HTTP {code}"
        self.http_response = http_response
        self.global_transaction_id = None

        if http_response is not None:
            headers = http_response.headers
            self.global_transaction_id = headers.get("X-Global-Transaction-Id") or headers.get("Transaction-Id")

        super().__init__(self.message)

    def __str__(self) -> str:
        msg = f"Error: {self.message}, Status code: {self.code}"
        if self.global_transaction_id:
            msg += f", Transaction-Id: {self.global_transaction_id}"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "transaction_id": self.global_transaction_id,
        }


class PaginationError(Exception):
    """Base class for pager misuse. These are programmer errors and never retried."""


class CursorPresetError(PaginationError, ValueError):
    """The parameters handed to a pager already set its cursor parameter."""


class PagerExhaustedError(PaginationError):
    """get_next() was called after the last page had been returned."""


class PageInFlightError(PaginationError):
    """get_next() was called while a previous call on the same pager was still pending."""
