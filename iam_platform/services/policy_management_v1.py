"""
IAM Policy Management API v1.

Policies grant subjects access to resources through roles. Besides policies and custom
roles, the service manages policy, action control and role templates together with
their versions and the assignments that apply them to accounts.
"""

from typing import Any, Dict, List, Optional

from ..utils.base_service import BaseService, validate_required
from ..utils.pagination_handler import DirectTokenCursor, Pager
from ..utils.responses import DetailedResponse

# Assignment list APIs take an explicit API version query parameter
ASSIGNMENT_API_VERSION = "1.0"


class IamPolicyManagementV1(BaseService):
    """Client for the IAM Policy Management API."""

    DEFAULT_SERVICE_URL = "https://iam.cloud.ibm.com"
    DEFAULT_SERVICE_NAME = "iam_policy_management"
    SERVICE_VERSION = "v1"

    # ---------------------------------------------------------------------
    # Policies
    # ---------------------------------------------------------------------

    async def list_policies(self,
                            account_id: str,
                            *,
                            accept_language: Optional[str] = None,
                            iam_id: Optional[str] = None,
                            access_group_id: Optional[str] = None,
                            type: Optional[str] = None,
                            service_type: Optional[str] = None,
                            tag_name: Optional[str] = None,
                            tag_value: Optional[str] = None,
                            sort: Optional[str] = None,
                            format: Optional[str] = None,
                            state: Optional[str] = None,
                            limit: Optional[int] = None,
                            start: Optional[str] = None,
                            headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """
        Get policies by attributes.

        Only policies the caller can read are returned; with none readable the list is empty.

        Args:
            account_id: Account the policies belong to
            accept_language: Language code for translated display fields (default, de, en, es, fr, it, ja, ko, pt-br, zh-cn, zh-tw)
            iam_id: Only policies for this subject
            access_group_id: Only policies for this access group
            type: 'access' or 'authorization'
            service_type: 'service' or 'platform_service'
            tag_name: Access management tag name
            tag_value: Access management tag value
            sort: Top level field to sort by, prefix with '-' for descending
            format: 'include_last_permit' or 'display'
            state: 'active' or 'deleted'
            limit: Page size, 1 to 100
            start: Page token from a previous response's next.start

        Returns:
            DetailedResponse whose result is a PolicyCollection ({"policies": [...], "next": {"start": ...}})
        """
        validate_required(account_id=account_id)

        return await self._send(
            "list_policies", "GET", "/v1/policies",
            params={
                "account_id": account_id,
                "iam_id": iam_id,
                "access_group_id": access_group_id,
                "type": type,
                "service_type": service_type,
                "tag_name": tag_name,
                "tag_value": tag_value,
                "sort": sort,
                "format": format,
                "state": state,
                "limit": limit,
                "start": start,
            },
            headers={"Accept": "application/json", "Accept-Language": accept_language},
            custom_headers=headers
        )

    async def create_policy(self,
                            type: str,
                            subjects: List[Dict[str, Any]],
                            roles: List[Dict[str, Any]],
                            resources: List[Dict[str, Any]],
                            *,
                            description: Optional[str] = None,
                            accept_language: Optional[str] = None,
                            headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """
        Create an access or authorization policy.

        Args:
            type: 'access' or 'authorization'
            subjects: [{"attributes": [{"name": "iam_id", "value": ...}]}]
            roles: [{"role_id": "crn:v1:bluemix:public:iam::::role:Viewer"}]
            resources: [{"attributes": [{"name": "accountId", "value": ...}, ...]}]
            description: Customer-defined description
        """
        validate_required(type=type, subjects=subjects, roles=roles, resources=resources)

        return await self._send(
            "create_policy", "POST", "/v1/policies",
            body={
                "type": type,
                "subjects": subjects,
                "roles": roles,
                "resources": resources,
                "description": description,
            },
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "Accept-Language": accept_language,
            },
            custom_headers=headers
        )

    async def replace_policy(self,
                             policy_id: str,
                             if_match: str,
                             type: str,
                             subjects: List[Dict[str, Any]],
                             roles: List[Dict[str, Any]],
                             resources: List[Dict[str, Any]],
                             *,
                             description: Optional[str] = None,
                             headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """Replace a policy. if_match is the ETag returned by get_policy()."""
        validate_required(
            policy_id=policy_id,
            if_match=if_match,
            type=type,
            subjects=subjects,
            roles=roles,
            resources=resources
        )

        return await self._send(
            "replace_policy", "PUT", "/v1/policies/{policy_id}",
            path_params={"policy_id": policy_id},
            body={
                "type": type,
                "subjects": subjects,
                "roles": roles,
                "resources": resources,
                "description": description,
            },
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "If-Match": if_match,
            },
            custom_headers=headers
        )

    async def get_policy(self, policy_id: str, *, headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(policy_id=policy_id)

        return await self._send(
            "get_policy", "GET", "/v1/policies/{policy_id}",
            path_params={"policy_id": policy_id},
            headers={"Accept": "application/json"},
            custom_headers=headers
        )

    async def delete_policy(self, policy_id: str, *, headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(policy_id=policy_id)

        return await self._send(
            "delete_policy", "DELETE", "/v1/policies/{policy_id}",
            path_params={"policy_id": policy_id},
            custom_headers=headers
        )

    async def update_policy_state(self,
                                  policy_id: str,
                                  if_match: str,
                                  *,
                                  state: Optional[str] = None,
                                  headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """Restore a deleted policy or soft-delete an active one (state 'active' / 'deleted')."""
        validate_required(policy_id=policy_id, if_match=if_match)

        return await self._send(
            "update_policy_state", "PATCH", "/v1/policies/{policy_id}",
            path_params={"policy_id": policy_id},
            body={"state": state},
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "If-Match": if_match,
            },
            custom_headers=headers
        )

    # ---------------------------------------------------------------------
    # Roles
    # ---------------------------------------------------------------------

    async def list_roles(self,
                         *,
                         accept_language: Optional[str] = None,
                         account_id: Optional[str] = None,
                         service_name: Optional[str] = None,
                         source_service_name: Optional[str] = None,
                         policy_type: Optional[str] = None,
                         service_group_id: Optional[str] = None,
                         headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """Get system, service and custom roles matching the filters."""
        return await self._send(
            "list_roles", "GET", "/v2/roles",
            params={
                "account_id": account_id,
                "service_name": service_name,
                "source_service_name": source_service_name,
                "policy_type": policy_type,
                "service_group_id": service_group_id,
            },
            headers={"Accept": "application/json", "Accept-Language": accept_language},
            custom_headers=headers
        )

    async def create_role(self,
                          display_name: str,
                          actions: List[str],
                          name: str,
                          account_id: str,
                          service_name: str,
                          *,
                          description: Optional[str] = None,
                          accept_language: Optional[str] = None,
                          headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """
        Create a custom role for one service in an account.

        Args:
            display_name: Name shown in the console
            actions: Service-defined actions the role grants, at least one
            name: Alphanumeric, capitalized name used in the role CRN
            account_id: The account
            service_name: Service the role applies to
            description: Role description
        """
        validate_required(
            display_name=display_name,
            actions=actions,
            name=name,
            account_id=account_id,
            service_name=service_name
        )

        return await self._send(
            "create_role", "POST", "/v2/roles",
            body={
                "display_name": display_name,
                "actions": actions,
                "name": name,
                "account_id": account_id,
                "service_name": service_name,
                "description": description,
            },
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "Accept-Language": accept_language,
            },
            custom_headers=headers
        )

    async def replace_role(self,
                           role_id: str,
                           if_match: str,
                           display_name: str,
                           actions: List[str],
                           *,
                           description: Optional[str] = None,
                           headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(role_id=role_id, if_match=if_match, display_name=display_name, actions=actions)

        return await self._send(
            "replace_role", "PUT", "/v2/roles/{role_id}",
            path_params={"role_id": role_id},
            body={
                "display_name": display_name,
                "actions": actions,
                "description": description,
            },
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "If-Match": if_match,
            },
            custom_headers=headers
        )

    async def get_role(self, role_id: str, *, headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(role_id=role_id)

        return await self._send(
            "get_role", "GET", "/v2/roles/{role_id}",
            path_params={"role_id": role_id},
            headers={"Accept": "application/json"},
            custom_headers=headers
        )

    async def delete_role(self, role_id: str, *, headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(role_id=role_id)

        return await self._send(
            "delete_role", "DELETE", "/v2/roles/{role_id}",
            path_params={"role_id": role_id},
            custom_headers=headers
        )

    # ---------------------------------------------------------------------
    # V2 policies
    # ---------------------------------------------------------------------

    async def list_v2_policies(self,
                               account_id: str,
                               *,
                               accept_language: Optional[str] = None,
                               iam_id: Optional[str] = None,
                               access_group_id: Optional[str] = None,
                               type: Optional[str] = None,
                               service_type: Optional[str] = None,
                               service_name: Optional[str] = None,
                               service_group_id: Optional[str] = None,
                               sort: Optional[str] = None,
                               format: Optional[str] = None,
                               state: Optional[str] = None,
                               limit: Optional[int] = None,
                               start: Optional[str] = None,
                               headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """Get v2 policies by attributes. Result: {"policies": [...], "next": {"start": ...}}."""
        validate_required(account_id=account_id)

        return await self._send(
            "list_v2_policies", "GET", "/v2/policies",
            params={
                "account_id": account_id,
                "iam_id": iam_id,
                "access_group_id": access_group_id,
                "type": type,
                "service_type": service_type,
                "service_name": service_name,
                "service_group_id": service_group_id,
                "sort": sort,
                "format": format,
                "state": state,
                "limit": limit,
                "start": start,
            },
            headers={"Accept": "application/json", "Accept-Language": accept_language},
            custom_headers=headers
        )

    async def get_v2_policy(self,
                            id: str,
                            *,
                            format: Optional[str] = None,
                            headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(id=id)

        return await self._send(
            "get_v2_policy", "GET", "/v2/policies/{id}",
            path_params={"id": id},
            params={"format": format},
            headers={"Accept": "application/json"},
            custom_headers=headers
        )

    async def delete_v2_policy(self, id: str, *, headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(id=id)

        return await self._send(
            "delete_v2_policy", "DELETE", "/v2/policies/{id}",
            path_params={"id": id},
            custom_headers=headers
        )

    # ---------------------------------------------------------------------
    # Policy templates
    # ---------------------------------------------------------------------

    async def list_policy_templates(self,
                                    account_id: str,
                                    *,
                                    accept_language: Optional[str] = None,
                                    state: Optional[str] = None,
                                    name: Optional[str] = None,
                                    policy_service_type: Optional[str] = None,
                                    policy_service_name: Optional[str] = None,
                                    policy_service_group_id: Optional[str] = None,
                                    policy_type: Optional[str] = None,
                                    limit: Optional[int] = None,
                                    start: Optional[str] = None,
                                    headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """
        List policy templates in an account.

        Returns:
            DetailedResponse whose result is {"policy_templates": [...], "next": {"start": ...}}
        """
        validate_required(account_id=account_id)

        return await self._send(
            "list_policy_templates", "GET", "/v1/policy_templates",
            params={
                "account_id": account_id,
                "state": state,
                "name": name,
                "policy_service_type": policy_service_type,
                "policy_service_name": policy_service_name,
                "policy_service_group_id": policy_service_group_id,
                "policy_type": policy_type,
                "limit": limit,
                "start": start,
            },
            headers={"Accept": "application/json", "Accept-Language": accept_language},
            custom_headers=headers
        )

    async def get_policy_template(self,
                                  policy_template_id: str,
                                  *,
                                  state: Optional[str] = None,
                                  headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(policy_template_id=policy_template_id)

        return await self._send(
            "get_policy_template", "GET", "/v1/policy_templates/{policy_template_id}",
            path_params={"policy_template_id": policy_template_id},
            params={"state": state},
            headers={"Accept": "application/json"},
            custom_headers=headers
        )

    async def list_policy_template_versions(self,
                                            policy_template_id: str,
                                            *,
                                            state: Optional[str] = None,
                                            limit: Optional[int] = None,
                                            start: Optional[str] = None,
                                            headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """List versions of a policy template. Result: {"versions": [...], "next": {"start": ...}}."""
        validate_required(policy_template_id=policy_template_id)

        return await self._send(
            "list_policy_template_versions", "GET", "/v1/policy_templates/{policy_template_id}/versions",
            path_params={"policy_template_id": policy_template_id},
            params={"state": state, "limit": limit, "start": start},
            headers={"Accept": "application/json"},
            custom_headers=headers
        )

    async def list_policy_assignments(self,
                                      account_id: str,
                                      *,
                                      accept_language: Optional[str] = None,
                                      template_id: Optional[str] = None,
                                      template_version: Optional[str] = None,
                                      limit: Optional[int] = None,
                                      start: Optional[str] = None,
                                      headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """List policy template assignments. Result: {"assignments": [...], "next": {"start": ...}}."""
        validate_required(account_id=account_id)

        return await self._send(
            "list_policy_assignments", "GET", "/v1/policy_assignments",
            params={
                "version": ASSIGNMENT_API_VERSION,
                "account_id": account_id,
                "template_id": template_id,
                "template_version": template_version,
                "limit": limit,
                "start": start,
            },
            headers={"Accept": "application/json", "Accept-Language": accept_language},
            custom_headers=headers
        )

    # ---------------------------------------------------------------------
    # Action control templates
    # ---------------------------------------------------------------------

    async def list_action_control_templates(self,
                                            account_id: str,
                                            *,
                                            accept_language: Optional[str] = None,
                                            limit: Optional[int] = None,
                                            start: Optional[str] = None,
                                            headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """Result: {"action_control_templates": [...], "next": {"start": ...}}."""
        validate_required(account_id=account_id)

        return await self._send(
            "list_action_control_templates", "GET", "/v1/action_control_templates",
            params={"account_id": account_id, "limit": limit, "start": start},
            headers={"Accept": "application/json", "Accept-Language": accept_language},
            custom_headers=headers
        )

    async def list_action_control_template_versions(self,
                                                    action_control_template_id: str,
                                                    *,
                                                    state: Optional[str] = None,
                                                    limit: Optional[int] = None,
                                                    start: Optional[str] = None,
                                                    headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(action_control_template_id=action_control_template_id)

        return await self._send(
            "list_action_control_template_versions", "GET",
            "/v1/action_control_templates/{action_control_template_id}/versions",
            path_params={"action_control_template_id": action_control_template_id},
            params={"state": state, "limit": limit, "start": start},
            headers={"Accept": "application/json"},
            custom_headers=headers
        )

    async def list_action_control_assignments(self,
                                              account_id: str,
                                              *,
                                              accept_language: Optional[str] = None,
                                              template_id: Optional[str] = None,
                                              template_version: Optional[str] = None,
                                              limit: Optional[int] = None,
                                              start: Optional[str] = None,
                                              headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(account_id=account_id)

        return await self._send(
            "list_action_control_assignments", "GET", "/v1/action_control_assignments",
            params={
                "account_id": account_id,
                "template_id": template_id,
                "template_version": template_version,
                "limit": limit,
                "start": start,
            },
            headers={"Accept": "application/json", "Accept-Language": accept_language},
            custom_headers=headers
        )

    # ---------------------------------------------------------------------
    # Role templates
    # ---------------------------------------------------------------------

    async def list_role_templates(self,
                                  account_id: str,
                                  *,
                                  accept_language: Optional[str] = None,
                                  name: Optional[str] = None,
                                  role_name: Optional[str] = None,
                                  role_service_name: Optional[str] = None,
                                  state: Optional[str] = None,
                                  limit: Optional[int] = None,
                                  start: Optional[str] = None,
                                  headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        """Result: {"role_templates": [...], "next": {"start": ...}}."""
        validate_required(account_id=account_id)

        return await self._send(
            "list_role_templates", "GET", "/v1/role_templates",
            params={
                "account_id": account_id,
                "name": name,
                "role_name": role_name,
                "role_service_name": role_service_name,
                "state": state,
                "limit": limit,
                "start": start,
            },
            headers={"Accept": "application/json", "Accept-Language": accept_language},
            custom_headers=headers
        )

    async def list_role_template_versions(self,
                                          role_template_id: str,
                                          *,
                                          state: Optional[str] = None,
                                          limit: Optional[int] = None,
                                          start: Optional[str] = None,
                                          headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(role_template_id=role_template_id)

        return await self._send(
            "list_role_template_versions", "GET", "/v1/role_templates/{role_template_id}/versions",
            path_params={"role_template_id": role_template_id},
            params={"state": state, "limit": limit, "start": start},
            headers={"Accept": "application/json"},
            custom_headers=headers
        )

    async def list_role_assignments(self,
                                    account_id: str,
                                    *,
                                    accept_language: Optional[str] = None,
                                    template_id: Optional[str] = None,
                                    template_version: Optional[str] = None,
                                    limit: Optional[int] = None,
                                    start: Optional[str] = None,
                                    headers: Optional[Dict[str, str]] = None) -> DetailedResponse:
        validate_required(account_id=account_id)

        return await self._send(
            "list_role_assignments", "GET", "/v1/role_assignments",
            params={
                "account_id": account_id,
                "template_id": template_id,
                "template_version": template_version,
                "limit": limit,
                "start": start,
            },
            headers={"Accept": "application/json", "Accept-Language": accept_language},
            custom_headers=headers
        )


# -------------------------------------------------------------------------
# Pagers
# -------------------------------------------------------------------------

class PoliciesPager(Pager):
    """Walks list_policies()."""

    def __init__(self, client: IamPolicyManagementV1, params: Optional[Dict[str, Any]] = None):
        super().__init__(client.list_policies, "policies", DirectTokenCursor("start"), params)


class V2PoliciesPager(Pager):
    """Walks list_v2_policies()."""

    def __init__(self, client: IamPolicyManagementV1, params: Optional[Dict[str, Any]] = None):
        super().__init__(client.list_v2_policies, "policies", DirectTokenCursor("start"), params)


class PolicyTemplatesPager(Pager):
    """Walks list_policy_templates()."""

    def __init__(self, client: IamPolicyManagementV1, params: Optional[Dict[str, Any]] = None):
        super().__init__(client.list_policy_templates, "policy_templates", DirectTokenCursor("start"), params)


class PolicyTemplateVersionsPager(Pager):
    """Walks list_policy_template_versions()."""

    def __init__(self, client: IamPolicyManagementV1, params: Optional[Dict[str, Any]] = None):
        super().__init__(client.list_policy_template_versions, "versions", DirectTokenCursor("start"), params)


class PolicyAssignmentsPager(Pager):
    """Walks list_policy_assignments()."""

    def __init__(self, client: IamPolicyManagementV1, params: Optional[Dict[str, Any]] = None):
        super().__init__(client.list_policy_assignments, "assignments", DirectTokenCursor("start"), params)


class ActionControlTemplatesPager(Pager):
    """Walks list_action_control_templates()."""

    def __init__(self, client: IamPolicyManagementV1, params: Optional[Dict[str, Any]] = None):
        super().__init__(
            client.list_action_control_templates, "action_control_templates", DirectTokenCursor("start"), params
        )


class ActionControlTemplateVersionsPager(Pager):
    """Walks list_action_control_template_versions()."""

    def __init__(self, client: IamPolicyManagementV1, params: Optional[Dict[str, Any]] = None):
        super().__init__(client.list_action_control_template_versions, "versions", DirectTokenCursor("start"), params)


class ActionControlAssignmentsPager(Pager):
    """Walks list_action_control_assignments()."""

    def __init__(self, client: IamPolicyManagementV1, params: Optional[Dict[str, Any]] = None):
        super().__init__(client.list_action_control_assignments, "assignments", DirectTokenCursor("start"), params)


class RoleTemplatesPager(Pager):
    """Walks list_role_templates()."""

    def __init__(self, client: IamPolicyManagementV1, params: Optional[Dict[str, Any]] = None):
        super().__init__(client.list_role_templates, "role_templates", DirectTokenCursor("start"), params)


class RoleTemplateVersionsPager(Pager):
    """Walks list_role_template_versions()."""

    def __init__(self, client: IamPolicyManagementV1, params: Optional[Dict[str, Any]] = None):
        super().__init__(client.list_role_template_versions, "versions", DirectTokenCursor("start"), params)


class RoleAssignmentsPager(Pager):
    """Walks list_role_assignments()."""

    def __init__(self, client: IamPolicyManagementV1, params: Optional[Dict[str, Any]] = None):
        super().__init__(client.list_role_assignments, "assignments", DirectTokenCursor("start"), params)
