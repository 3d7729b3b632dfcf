"""
IAM Access Groups API v2.

Manages access groups (create, read, update, delete), their memberships and dynamic
rules, account-level settings, and access group templates.
"""

from typing import Any, Dict, List, Optional

from ..utils.base_service import BaseService, validate_required
from ..utils.pagination_handler import Pager, UrlEmbeddedCursor
from ..utils.responses import DetailedResponse


class IamAccessGroupsV2(BaseService):
    """Client for the IAM Access Groups API."""

    DEFAULT_SERVICE_URL = "https://iam.cloud.ibm.com"
    DEFAULT_SERVICE_NAME = "iam_access_groups"
    SERVICE_VERSION = "v2"

    # ---------------------------------------------------------------------
    # Access group operations
    # ---------------------------------------------------------------------

    async def create_access_group(self,
                                  account_id: str,
                                  name: str,
                                  *,
                                  description: Optional[str] = None,
                                  transaction_id: Optional[str] = None,
                                  headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """
        Create an access group in the account.

        Args:
            account_id: Account to create the group in
            name: Group name, unique within the account, up to 100 characters
            description: Optional description, up to 250 characters
            transaction_id: Tracking ID sent as the Transaction-Id header
            headers: Custom request headers

        Returns:
            DetailedResponse whose result is the created Group
        """
        validate_required(account_id=account_id, name=name)

        return await self._send(
            "create_access_group", "POST", "/v2/groups",
            params={"account_id": account_id},
            body={"name": name, "description": description},
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "Transaction-Id": transaction_id,
            },
            custom_headers=headers
        )

    async def list_access_groups(self,
                                 account_id: str,
                                 *,
                                 transaction_id: Optional[str] = None,
                                 iam_id: Optional[str] = None,
                                 search: Optional[str] = None,
                                 membership_type: Optional[str] = None,
                                 limit: Optional[int] = None,
                                 offset: Optional[int] = None,
                                 sort: Optional[str] = None,
                                 show_federated: Optional[bool] = None,
                                 hide_public_access: Optional[bool] = None,
                                 headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """
        List the access groups the caller can see in an account.

        Args:
            account_id: Account to list groups from
            iam_id: Only groups this member (user, service ID or trusted profile) belongs to
            search: Match groups by name or description
            membership_type: With iam_id, one of 'static', 'dynamic' or 'all'
            limit: Page size, 0 to 100
            offset: Index of the first group to return
            sort: Sort by id, name, description or is_federated
            show_federated: Include the is_federated flag on each group
            hide_public_access: Leave out the Public Access group

        Returns:
            DetailedResponse whose result is a GroupsList ({"groups": [...], "next": {"href": ...}, ...})
        """
        validate_required(account_id=account_id)

        return await self._send(
            "list_access_groups", "GET", "/v2/groups",
            params={
                "account_id": account_id,
                "iam_id": iam_id,
                "search": search,
                "membership_type": membership_type,
                "limit": limit,
                "offset": offset,
                "sort": sort,
                "show_federated": show_federated,
                "hide_public_access": hide_public_access,
            },
            headers={"Accept": "application/json", "Transaction-Id": transaction_id},
            custom_headers=headers
        )

    async def get_access_group(self,
                               access_group_id: str,
                               *,
                               transaction_id: Optional[str] = None,
                               show_federated: Optional[bool] = None,
                               headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """Get an access group. The group's revision comes back in the ETag header."""
        validate_required(access_group_id=access_group_id)

        return await self._send(
            "get_access_group", "GET", "/v2/groups/{access_group_id}",
            path_params={"access_group_id": access_group_id},
            params={"show_federated": show_federated},
            headers={"Accept": "application/json", "Transaction-Id": transaction_id},
            custom_headers=headers
        )

    async def update_access_group(self,
                                  access_group_id: str,
                                  if_match: str,
                                  *,
                                  name: Optional[str] = None,
                                  description: Optional[str] = None,
                                  transaction_id: Optional[str] = None,
                                  headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """Update an access group's name or description. if_match is the ETag from get_access_group()."""
        validate_required(access_group_id=access_group_id, if_match=if_match)

        return await self._send(
            "update_access_group", "PATCH", "/v2/groups/{access_group_id}",
            path_params={"access_group_id": access_group_id},
            body={"name": name, "description": description},
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "If-Match": if_match,
                "Transaction-Id": transaction_id,
            },
            custom_headers=headers
        )

    async def delete_access_group(self,
                                  access_group_id: str,
                                  *,
                                  transaction_id: Optional[str] = None,
                                  force: Optional[bool] = None,
                                  headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """Delete an access group. Without force, groups that still have members or rules are kept."""
        validate_required(access_group_id=access_group_id)

        return await self._send(
            "delete_access_group", "DELETE", "/v2/groups/{access_group_id}",
            path_params={"access_group_id": access_group_id},
            params={"force": force},
            headers={"Transaction-Id": transaction_id},
            custom_headers=headers
        )

    # ---------------------------------------------------------------------
    # Membership operations
    # ---------------------------------------------------------------------

    async def is_member_of_access_group(self,
                                        access_group_id: str,
                                        iam_id: str,
                                        *,
                                        transaction_id: Optional[str] = None,
                                        headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """HEAD request: 204 if iam_id is a member, otherwise ApiException(404)."""
        validate_required(access_group_id=access_group_id, iam_id=iam_id)

        return await self._send(
            "is_member_of_access_group", "HEAD", "/v2/groups/{access_group_id}/members/{iam_id}",
            path_params={"access_group_id": access_group_id, "iam_id": iam_id},
            headers={"Transaction-Id": transaction_id},
            custom_headers=headers
        )

    async def add_members_to_access_group(self,
                                          access_group_id: str,
                                          *,
                                          members: Optional[List[Dict[str, Any]]] = None,
                                          transaction_id: Optional[str] = None,
                                          headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """Add members ({"iam_id": ..., "type": "user" | "service" | "profile"}) to a group."""
        validate_required(access_group_id=access_group_id)

        return await self._send(
            "add_members_to_access_group", "PUT", "/v2/groups/{access_group_id}/members",
            path_params={"access_group_id": access_group_id},
            body={"members": members},
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "Transaction-Id": transaction_id,
            },
            custom_headers=headers
        )

    async def list_access_group_members(self,
                                        access_group_id: str,
                                        *,
                                        transaction_id: Optional[str] = None,
                                        membership_type: Optional[str] = None,
                                        limit: Optional[int] = None,
                                        offset: Optional[int] = None,
                                        type: Optional[str] = None,
                                        verbose: Optional[bool] = None,
                                        sort: Optional[str] = None,
                                        headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """
        List the members of an access group.

        Args:
            access_group_id: The access group
            membership_type: 'static', 'dynamic' or 'all'
            limit: Page size, 0 to 100
            offset: Index of the first member to return
            type: Only members of this type (user, service, profile)
            verbose: Include member details such as name and email
            sort: Sort by a member field

        Returns:
            DetailedResponse whose result is a GroupMembersList ({"members": [...], "next": {"href": ...}, ...})
        """
        validate_required(access_group_id=access_group_id)

        return await self._send(
            "list_access_group_members", "GET", "/v2/groups/{access_group_id}/members",
            path_params={"access_group_id": access_group_id},
            params={
                "membership_type": membership_type,
                "limit": limit,
                "offset": offset,
                "type": type,
                "verbose": verbose,
                "sort": sort,
            },
            headers={"Accept": "application/json", "Transaction-Id": transaction_id},
            custom_headers=headers
        )

    async def remove_member_from_access_group(self,
                                              access_group_id: str,
                                              iam_id: str,
                                              *,
                                              transaction_id: Optional[str] = None,
                                              headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(access_group_id=access_group_id, iam_id=iam_id)

        return await self._send(
            "remove_member_from_access_group", "DELETE", "/v2/groups/{access_group_id}/members/{iam_id}",
            path_params={"access_group_id": access_group_id, "iam_id": iam_id},
            headers={"Transaction-Id": transaction_id},
            custom_headers=headers
        )

    async def remove_members_from_access_group(self,
                                               access_group_id: str,
                                               *,
                                               members: Optional[List[str]] = None,
                                               transaction_id: Optional[str] = None,
                                               headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """Remove several members (IAM IDs) from a group in one call."""
        validate_required(access_group_id=access_group_id)

        return await self._send(
            "remove_members_from_access_group", "POST", "/v2/groups/{access_group_id}/members/delete",
            path_params={"access_group_id": access_group_id},
            body={"members": members},
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "Transaction-Id": transaction_id,
            },
            custom_headers=headers
        )

    async def remove_member_from_all_access_groups(self,
                                                   account_id: str,
                                                   iam_id: str,
                                                   *,
                                                   transaction_id: Optional[str] = None,
                                                   headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(account_id=account_id, iam_id=iam_id)

        return await self._send(
            "remove_member_from_all_access_groups", "DELETE", "/v2/groups/_allgroups/members/{iam_id}",
            path_params={"iam_id": iam_id},
            params={"account_id": account_id},
            headers={"Accept": "application/json", "Transaction-Id": transaction_id},
            custom_headers=headers
        )

    async def add_member_to_multiple_access_groups(self,
                                                   account_id: str,
                                                   iam_id: str,
                                                   *,
                                                   type: Optional[str] = None,
                                                   groups: Optional[List[str]] = None,
                                                   transaction_id: Optional[str] = None,
                                                   headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(account_id=account_id, iam_id=iam_id)

        return await self._send(
            "add_member_to_multiple_access_groups", "PUT", "/v2/groups/_allgroups/members/{iam_id}",
            path_params={"iam_id": iam_id},
            params={"account_id": account_id},
            body={"type": type, "groups": groups},
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "Transaction-Id": transaction_id,
            },
            custom_headers=headers
        )

    # ---------------------------------------------------------------------
    # Rule operations
    # ---------------------------------------------------------------------

    async def add_access_group_rule(self,
                                    access_group_id: str,
                                    expiration: int,
                                    realm_name: str,
                                    conditions: List[Dict[str, Any]],
                                    *,
                                    name: Optional[str] = None,
                                    transaction_id: Optional[str] = None,
                                    headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """
        Add a dynamic membership rule to a group.

        Args:
            access_group_id: The access group
            expiration: Hours (1-24) a federated user keeps membership after the rule stops matching
            realm_name: Identity provider realm, e.g. 'https://idp.example.org/SAML2'
            conditions: [{"claim": ..., "operator": ..., "value": ...}], all must hold
            name: Rule name
        """
        validate_required(
            access_group_id=access_group_id,
            expiration=expiration,
            realm_name=realm_name,
            conditions=conditions
        )

        return await self._send(
            "add_access_group_rule", "POST", "/v2/groups/{access_group_id}/rules",
            path_params={"access_group_id": access_group_id},
            body={
                "expiration": expiration,
                "realm_name": realm_name,
                "conditions": conditions,
                "name": name,
            },
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "Transaction-Id": transaction_id,
            },
            custom_headers=headers
        )

    async def list_access_group_rules(self,
                                      access_group_id: str,
                                      *,
                                      transaction_id: Optional[str] = None,
                                      headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(access_group_id=access_group_id)

        return await self._send(
            "list_access_group_rules", "GET", "/v2/groups/{access_group_id}/rules",
            path_params={"access_group_id": access_group_id},
            headers={"Accept": "application/json", "Transaction-Id": transaction_id},
            custom_headers=headers
        )

    async def get_access_group_rule(self,
                                    access_group_id: str,
                                    rule_id: str,
                                    *,
                                    transaction_id: Optional[str] = None,
                                    headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(access_group_id=access_group_id, rule_id=rule_id)

        return await self._send(
            "get_access_group_rule", "GET", "/v2/groups/{access_group_id}/rules/{rule_id}",
            path_params={"access_group_id": access_group_id, "rule_id": rule_id},
            headers={"Accept": "application/json", "Transaction-Id": transaction_id},
            custom_headers=headers
        )

    async def replace_access_group_rule(self,
                                        access_group_id: str,
                                        rule_id: str,
                                        if_match: str,
                                        expiration: int,
                                        realm_name: str,
                                        conditions: List[Dict[str, Any]],
                                        *,
                                        name: Optional[str] = None,
                                        transaction_id: Optional[str] = None,
                                        headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """Replace a rule. if_match is the ETag returned by get_access_group_rule()."""
        validate_required(
            access_group_id=access_group_id,
            rule_id=rule_id,
            if_match=if_match,
            expiration=expiration,
            realm_name=realm_name,
            conditions=conditions
        )

        return await self._send(
            "replace_access_group_rule", "PUT", "/v2/groups/{access_group_id}/rules/{rule_id}",
            path_params={"access_group_id": access_group_id, "rule_id": rule_id},
            body={
                "expiration": expiration,
                "realm_name": realm_name,
                "conditions": conditions,
                "name": name,
            },
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "If-Match": if_match,
                "Transaction-Id": transaction_id,
            },
            custom_headers=headers
        )

    async def remove_access_group_rule(self,
                                       access_group_id: str,
                                       rule_id: str,
                                       *,
                                       transaction_id: Optional[str] = None,
                                       headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(access_group_id=access_group_id, rule_id=rule_id)

        return await self._send(
            "remove_access_group_rule", "DELETE", "/v2/groups/{access_group_id}/rules/{rule_id}",
            path_params={"access_group_id": access_group_id, "rule_id": rule_id},
            headers={"Transaction-Id": transaction_id},
            custom_headers=headers
        )

    # ---------------------------------------------------------------------
    # Account settings
    # ---------------------------------------------------------------------

    async def get_account_settings(self,
                                   account_id: str,
                                   *,
                                   transaction_id: Optional[str] = None,
                                   headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(account_id=account_id)

        return await self._send(
            "get_account_settings", "GET", "/v2/groups/settings",
            params={"account_id": account_id},
            headers={"Accept": "application/json", "Transaction-Id": transaction_id},
            custom_headers=headers
        )

    async def update_account_settings(self,
                                      account_id: str,
                                      *,
                                      public_access_enabled: Optional[bool] = None,
                                      transaction_id: Optional[str] = None,
                                      headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """Turn the Public Access group on or off for the account."""
        validate_required(account_id=account_id)

        return await self._send(
            "update_account_settings", "PATCH", "/v2/groups/settings",
            params={"account_id": account_id},
            body={"public_access_enabled": public_access_enabled},
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "Transaction-Id": transaction_id,
            },
            custom_headers=headers
        )

    # ---------------------------------------------------------------------
    # Template operations
    # ---------------------------------------------------------------------

    async def list_templates(self,
                             account_id: str,
                             *,
                             transaction_id: Optional[str] = None,
                             limit: Optional[int] = None,
                             offset: Optional[int] = None,
                             verbose: Optional[bool] = None,
                             headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """List access group templates. Result: {"group_templates": [...], "next": {"href": ...}}."""
        validate_required(account_id=account_id)

        return await self._send(
            "list_templates", "GET", "/v1/group_templates",
            params={
                "account_id": account_id,
                "limit": limit,
                "offset": offset,
                "verbose": verbose,
            },
            headers={"Accept": "application/json", "Transaction-Id": transaction_id},
            custom_headers=headers
        )

    async def get_template_version(self,
                                   template_id: str,
                                   version_num: str,
                                   *,
                                   transaction_id: Optional[str] = None,
                                   headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(template_id=template_id, version_num=version_num)

        return await self._send(
            "get_template_version", "GET", "/v1/group_templates/{template_id}/versions/{version_num}",
            path_params={"template_id": template_id, "version_num": version_num},
            headers={"Accept": "application/json", "Transaction-Id": transaction_id},
            custom_headers=headers
        )

    async def list_template_versions(self,
                                     template_id: str,
                                     *,
                                     limit: Optional[int] = None,
                                     offset: Optional[int] = None,
                                     headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """List the versions of a template. Result: {"group_template_versions": [...], "next": {"href": ...}}."""
        validate_required(template_id=template_id)

        return await self._send(
            "list_template_versions", "GET", "/v1/group_templates/{template_id}/versions",
            path_params={"template_id": template_id},
            params={"limit": limit, "offset": offset},
            headers={"Accept": "application/json"},
            custom_headers=headers
        )


# -------------------------------------------------------------------------
# Pagers
# -------------------------------------------------------------------------

class AccessGroupsPager(Pager):
    """Walks list_access_groups()."""

    def __init__(self, client: IamAccessGroupsV2, params: Optional[Dict[str, Any]] = None):
        super().__init__(client.list_access_groups, "groups", UrlEmbeddedCursor("offset"), params)


class AccessGroupMembersPager(Pager):
    """Walks list_access_group_members()."""

    def __init__(self, client: IamAccessGroupsV2, params: Optional[Dict[str, Any]] = None):
        super().__init__(client.list_access_group_members, "members", UrlEmbeddedCursor("offset"), params)


class TemplatesPager(Pager):
    """Walks list_templates()."""

    def __init__(self, client: IamAccessGroupsV2, params: Optional[Dict[str, Any]] = None):
        super().__init__(client.list_templates, "group_templates", UrlEmbeddedCursor("offset"), params)


class TemplateVersionsPager(Pager):
    """Walks list_template_versions()."""

    def __init__(self, client: IamAccessGroupsV2, params: Optional[Dict[str, Any]] = None):
        super().__init__(client.list_template_versions, "group_template_versions", UrlEmbeddedCursor("offset"), params)
