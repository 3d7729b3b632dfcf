"""
Shared pytest fixtures for the IAM Platform tests.

Provides fixtures for:
- Canned list-operation responses
- Recording httpx mock transports
- Service clients wired to a mock transport
"""

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from iam_platform.services.access_groups_v2 import IamAccessGroupsV2
from iam_platform.services.policy_management_v1 import IamPolicyManagementV1
from iam_platform.utils.auth_manager import BearerTokenAuthenticator
from iam_platform.utils.responses import DetailedResponse


@pytest.fixture
def make_response() -> Callable[..., DetailedResponse]:
    """Build a DetailedResponse around a decoded body."""
    def _make(result: Any, status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        return DetailedResponse(result=result, headers=headers or {}, status_code=status_code)
    return _make


@pytest.fixture
def href_page(make_response) -> Callable[..., DetailedResponse]:
    """A page whose next link carries the offset inside an href."""
    def _make(items_key: str, items: List[Any], next_offset: Optional[str] = None) -> DetailedResponse:
        result = {items_key: items, "limit": len(items)}
        if next_offset is not None:
            result["next"] = {"href": f"https://iam.cloud.ibm.com/v2/groups?account_id=acct&limit=2&offset={next_offset}"}
        return make_response(result)
    return _make


@pytest.fixture
def start_page(make_response) -> Callable[..., DetailedResponse]:
    """A page whose next link carries the start token directly."""
    def _make(items_key: str, items: List[Any], next_start: Optional[str] = None) -> DetailedResponse:
        result = {items_key: items, "limit": len(items)}
        if next_start is not None:
            result["next"] = {"href": f"https://iam.cloud.ibm.com/v1/policies?start={next_start}", "start": next_start}
        return make_response(result)
    return _make


class RecordingTransport:
    """httpx.MockTransport that records requests and replays queued responses."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.responses: List[httpx.Response] = []
        self.transport = httpx.MockTransport(self._handle)

    def queue(self, status_code: int = 200, json_body: Any = None, headers: Optional[Dict[str, str]] = None,
              content: Optional[bytes] = None) -> "RecordingTransport":
        if json_body is not None:
            self.responses.append(httpx.Response(status_code, json=json_body, headers=headers))
        else:
            self.responses.append(httpx.Response(status_code, content=content or b"", headers=headers))
        return self

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            return httpx.Response(500, json={"errors": [{"message": "no response queued"}]})
        return self.responses.pop(0)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def recording_transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def access_groups(recording_transport) -> IamAccessGroupsV2:
    return IamAccessGroupsV2(
        BearerTokenAuthenticator("test-token"),
        service_url="https://iam.test.cloud.ibm.com",
        transport=recording_transport.transport
    )


@pytest.fixture
def policy_management(recording_transport) -> IamPolicyManagementV1:
    return IamPolicyManagementV1(
        BearerTokenAuthenticator("test-token"),
        service_url="https://iam.test.cloud.ibm.com",
        transport=recording_transport.transport
    )
