"""Tests for request preparation, dispatch and error mapping."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from iam_platform.utils.auth_manager import Authenticator
from iam_platform.utils.exceptions import ApiException
from iam_platform.utils.request_manager import (
    RequestManager,
    build_path,
    merge_headers,
    prepare_body,
    prepare_query,
)
from iam_platform.utils.responses import DetailedResponse, PageLink, extract_error_message


@pytest.fixture
def authenticator():
    auth = MagicMock(spec=Authenticator)
    auth.get_auth_header = AsyncMock(return_value={"Authorization": "Bearer abc"})
    return auth


def manager_for(authenticator, recording_transport, **kwargs):
    return RequestManager(
        authenticator=authenticator,
        service_url="https://iam.test.cloud.ibm.com/",
        transport=recording_transport.transport,
        **kwargs
    )


class TestPrepare:

    def test_query_drops_none_and_serializes(self):
        assert prepare_query({"a": None, "b": True, "c": False, "d": 5, "e": ["x", "y"], "f": "z"}) == {
            "b": "true",
            "c": "false",
            "d": "5",
            "e": "x,y",
            "f": "z",
        }

    def test_empty_query(self):
        assert prepare_query(None) == {}
        assert prepare_query({"a": None}) == {}

    def test_body_drops_unset_fields(self):
        assert prepare_body({"name": "n", "description": None}) == {"name": "n"}

    def test_all_unset_body_is_no_body(self):
        assert prepare_body({"members": None}) is None
        assert prepare_body(None) is None

    def test_body_keeps_falsy_values(self):
        assert prepare_body({"enabled": False, "count": 0, "items": []}) == {"enabled": False, "count": 0, "items": []}

    def test_merge_headers_is_case_insensitive(self):
        merged = merge_headers({"Accept": "application/json", "X-A": "1"}, {"accept": "text/plain"}, None)
        assert merged == {"X-A": "1", "accept": "text/plain"}

    def test_merge_headers_drops_none(self):
        assert merge_headers({"Transaction-Id": None, "Accept": "application/json"}) == {"Accept": "application/json"}

    def test_merge_headers_none_clears_earlier_value(self):
        assert merge_headers({"If-Match": "etag"}, {"if-match": None}) == {}

    def test_build_path_encodes_values(self):
        assert build_path("/v2/groups/{access_group_id}/rules/{rule_id}", {
            "access_group_id": "a/b",
            "rule_id": "r?1",
        }) == "/v2/groups/a%2Fb/rules/r%3F1"

    def test_build_path_without_params(self):
        assert build_path("/v2/groups") == "/v2/groups"


class TestResponses:

    def test_json_body_is_decoded(self):
        response = httpx.Response(200, json={"groups": []}, headers={"ETag": "e1"})
        detailed = DetailedResponse.from_httpx(response)
        assert detailed.get_result() == {"groups": []}
        assert detailed.get_headers()["etag"] == "e1"

    def test_text_body_is_kept_as_text(self):
        response = httpx.Response(200, text="plain", headers={"Content-Type": "text/plain"})
        assert DetailedResponse.from_httpx(response).get_result() == "plain"

    def test_empty_body_is_none(self):
        assert DetailedResponse.from_httpx(httpx.Response(204)).get_result() is None

    @pytest.mark.parametrize("body, expected", [
        ({"errors": [{"code": "c", "message": "first"}, {"message": "second"}]}, "first"),
        ({"error": "bad request"}, "bad request"),
        ({"message": "gone"}, "gone"),
        ({"errorMessage": "Provided API key could not be found"}, "Provided API key could not be found"),
        ({"errors": []}, "Bad Request"),
        ({"unrelated": 1}, "Bad Request"),
    ])
    def test_error_message_shapes(self, body, expected):
        assert extract_error_message(httpx.Response(400, json=body)) == expected

    def test_error_message_from_non_json_body(self):
        assert extract_error_message(httpx.Response(502, text="<html>")) == "Bad Gateway"

    def test_undecodable_json_body_raises_api_exception(self):
        response = httpx.Response(200, content=b"{not json", headers={"Content-Type": "application/json"})

        with pytest.raises(ApiException) as excinfo:
            DetailedResponse.from_httpx(response)

        assert excinfo.value.code == 200
        assert excinfo.value.message == "Invalid JSON response body"
        assert excinfo.value.http_response is response

    def test_page_link_keeps_extra_fields(self):
        link = PageLink.from_result({"next": {"href": "https://x?offset=1", "marker": "m1"}})
        assert link.field("href") == "https://x?offset=1"
        assert link.field("marker") == "m1"
        assert link.field("start") is None


class TestRequestManager:

    @pytest.mark.asyncio
    async def test_request_builds_url_and_headers(self, authenticator, recording_transport):
        recording_transport.queue(json_body={"ok": True})
        manager = manager_for(authenticator, recording_transport, default_headers={"X-Default": "d"})

        response = await manager.request(
            "get", "/v2/groups/{access_group_id}",
            path_params={"access_group_id": "g 1"},
            params={"show_federated": True, "unset": None},
            headers={"Accept": "application/json"}
        )

        request = recording_transport.last_request
        assert request.method == "GET"
        assert request.url.raw_path == b"/v2/groups/g%201?show_federated=true"
        assert request.headers["Authorization"] == "Bearer abc"
        assert request.headers["X-Default"] == "d"
        assert response.get_result() == {"ok": True}

    @pytest.mark.asyncio
    async def test_auth_header_wins_over_caller_headers(self, authenticator, recording_transport):
        recording_transport.queue(json_body={})
        manager = manager_for(authenticator, recording_transport)

        await manager.request("GET", "/v2/groups", headers={"authorization": "Bearer other"})

        assert recording_transport.last_request.headers["Authorization"] == "Bearer abc"

    @pytest.mark.asyncio
    async def test_json_body_is_sent(self, authenticator, recording_transport):
        recording_transport.queue(201, json_body={"id": "g1"})
        manager = manager_for(authenticator, recording_transport)

        await manager.request("POST", "/v2/groups", json_data={"name": "n", "description": None})

        assert recording_transport.last_json() == {"name": "n"}

    @pytest.mark.asyncio
    async def test_error_status_raises(self, authenticator, recording_transport):
        recording_transport.queue(409, json_body={"errors": [{"message": "Group name already exists"}]})
        manager = manager_for(authenticator, recording_transport)

        with pytest.raises(ApiException) as excinfo:
            await manager.request("POST", "/v2/groups", json_data={"name": "dup"})

        assert excinfo.value.code == 409
        assert str(excinfo.value) == "Error: Group name already exists, Status code: 409"
        assert excinfo.value.http_response.status_code == 409
        authenticator.invalidate_token.assert_not_called()

    @pytest.mark.asyncio
    async def test_unauthorized_invalidates_token(self, authenticator, recording_transport):
        recording_transport.queue(401, json_body={"errorMessage": "token expired"})
        manager = manager_for(authenticator, recording_transport)

        with pytest.raises(ApiException) as excinfo:
            await manager.request("GET", "/v2/groups")

        assert excinfo.value.message == "token expired"
        authenticator.invalidate_token.assert_called_once()
        assert len(recording_transport.requests) == 1

    @pytest.mark.asyncio
    async def test_transport_errors_propagate(self, authenticator):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        manager = RequestManager(authenticator, "https://iam.test.cloud.ibm.com", transport=httpx.MockTransport(fail))

        with pytest.raises(httpx.ConnectError):
            await manager.request("GET", "/v2/groups")

    @pytest.mark.asyncio
    async def test_undecodable_success_body_raises_api_exception(self, authenticator, recording_transport):
        recording_transport.queue(200, content=b"<html>oops", headers={"Content-Type": "application/json"})
        manager = manager_for(authenticator, recording_transport)

        with pytest.raises(ApiException, match="Invalid JSON response body"):
            await manager.request("GET", "/v2/groups")

    def test_service_url_trailing_slash_is_stripped(self, authenticator, recording_transport):
        manager = manager_for(authenticator, recording_transport)
        assert manager.build_url("/v2/groups") == "https://iam.test.cloud.ibm.com/v2/groups"
