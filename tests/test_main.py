"""Tests for the list-walking command line entry point."""

import json

import pytest

import main
from iam_platform.services.access_groups_v2 import AccessGroupsPager
from iam_platform.services.policy_management_v1 import IamPolicyManagementV1, PoliciesPager


class TestArguments:

    def test_parse_args(self):
        args = main.parse_args(["access-groups", "--param", "account_id=acct", "--param", "limit=2",
                                "--max-pages", "3", "--log-level", "DEBUG"])
        assert args.resource == "access-groups"
        assert args.param == ["account_id=acct", "limit=2"]
        assert args.max_pages == 3
        assert args.log_level == "DEBUG"

    def test_unknown_resource_exits(self):
        with pytest.raises(SystemExit):
            main.parse_args(["users"])

    def test_parse_params(self):
        assert main.parse_params(["account_id=acct", "search=a=b", "sort="]) == {
            "account_id": "acct",
            "search": "a=b",
            "sort": "",
        }

    @pytest.mark.parametrize("pair", ["account_id", "=acct"])
    def test_parse_params_rejects_bad_pairs(self, pair):
        with pytest.raises(ValueError, match="NAME=VALUE"):
            main.parse_params([pair])

    def test_every_resource_has_a_pager(self):
        assert len(main.RESOURCES) == 15
        assert main.RESOURCES["access-groups"][1] is AccessGroupsPager
        assert main.RESOURCES["policies"] == (IamPolicyManagementV1, PoliciesPager)


class TestWalk:

    @pytest.mark.asyncio
    async def test_prints_one_line_per_item(self, policy_management, recording_transport, capsys):
        recording_transport.queue(json_body={"policies": [{"id": "p1"}, {"id": "p2"}], "next": {"start": "s1"}})
        recording_transport.queue(json_body={"policies": [{"id": "p3", "type": "access"}]})

        count = await main.walk("policies", {"account_id": "acct"}, client=policy_management)

        assert count == 3
        lines = capsys.readouterr().out.splitlines()
        assert [json.loads(line) for line in lines] == [{"id": "p1"}, {"id": "p2"}, {"id": "p3", "type": "access"}]

    @pytest.mark.asyncio
    async def test_max_pages_stops_early(self, access_groups, recording_transport, capsys):
        recording_transport.queue(json_body={
            "groups": [{"id": "g1"}],
            "next": {"href": "https://iam.cloud.ibm.com/v2/groups?account_id=acct&offset=1"},
        })

        count = await main.walk("access-groups", {"account_id": "acct"}, max_pages=1, client=access_groups)

        assert count == 1
        assert len(recording_transport.requests) == 1


class TestMain:

    def test_missing_credentials_returns_1(self, monkeypatch):
        monkeypatch.setattr(main, "load_dotenv", lambda: None)
        monkeypatch.delenv("IAM_ACCESS_GROUPS_AUTH_TYPE", raising=False)
        monkeypatch.delenv("IAM_ACCESS_GROUPS_APIKEY", raising=False)

        assert main.main(["access-groups", "--param", "account_id=acct"]) == 1

    def test_bad_param_returns_2(self, monkeypatch):
        monkeypatch.setattr(main, "load_dotenv", lambda: None)
        monkeypatch.setenv("IAM_ACCESS_GROUPS_APIKEY", "key")

        assert main.main(["access-groups", "--param", "account_id"]) == 2

    def test_preset_cursor_returns_2(self, monkeypatch):
        monkeypatch.setattr(main, "load_dotenv", lambda: None)
        monkeypatch.setenv("IAM_POLICY_MANAGEMENT_AUTH_TYPE", "noauth")

        assert main.main(["policies", "--param", "account_id=acct", "--param", "start=tok"]) == 2
