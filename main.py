"""
Command line entry point: walk one IAM list endpoint page by page and print its items.

Example:
    python main.py access-groups --param account_id=abc123 --param limit=50
"""
import sys
import json
import asyncio
import logging
import argparse
from typing import Dict, List, Optional
import httpx
from dotenv import load_dotenv

from iam_platform.services import access_groups_v2 as groups
from iam_platform.services import policy_management_v1 as policies
from iam_platform.utils.config import ConfigManager
from iam_platform.utils.exceptions import ApiException, PaginationError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("iam_platform")

# resource name -> (service client class, pager class)
RESOURCES = {
    "access-groups": (groups.IamAccessGroupsV2, groups.AccessGroupsPager),
    "access-group-members": (groups.IamAccessGroupsV2, groups.AccessGroupMembersPager),
    "group-templates": (groups.IamAccessGroupsV2, groups.TemplatesPager),
    "group-template-versions": (groups.IamAccessGroupsV2, groups.TemplateVersionsPager),
    "policies": (policies.IamPolicyManagementV1, policies.PoliciesPager),
    "v2-policies": (policies.IamPolicyManagementV1, policies.V2PoliciesPager),
    "policy-templates": (policies.IamPolicyManagementV1, policies.PolicyTemplatesPager),
    "policy-template-versions": (policies.IamPolicyManagementV1, policies.PolicyTemplateVersionsPager),
    "policy-assignments": (policies.IamPolicyManagementV1, policies.PolicyAssignmentsPager),
    "action-control-templates": (policies.IamPolicyManagementV1, policies.ActionControlTemplatesPager),
    "action-control-template-versions": (policies.IamPolicyManagementV1, policies.ActionControlTemplateVersionsPager),
    "action-control-assignments": (policies.IamPolicyManagementV1, policies.ActionControlAssignmentsPager),
    "role-templates": (policies.IamPolicyManagementV1, policies.RoleTemplatesPager),
    "role-template-versions": (policies.IamPolicyManagementV1, policies.RoleTemplateVersionsPager),
    "role-assignments": (policies.IamPolicyManagementV1, policies.RoleAssignmentsPager),
}


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="List IAM resources across all pages")

    parser.add_argument("resource", choices=sorted(RESOURCES),
                        help="List endpoint to walk")
    parser.add_argument("--param", action="append", default=[], metavar="NAME=VALUE",
                        help="List parameter, e.g. account_id=abc123 (repeatable)")
    parser.add_argument("--max-pages", type=int, default=None,
                        help="Stop after this many pages")

    # General configuration
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Set logging level (default: INFO)")

    return parser.parse_args(argv)


def parse_params(pairs: List[str]) -> Dict[str, str]:
    """Turn ['account_id=abc', 'limit=10'] into a parameter dict."""
    params = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Invalid --param '{pair}', expected NAME=VALUE")
        params[name.strip()] = value
    return params


async def walk(resource: str, params: Dict[str, str], max_pages: Optional[int] = None, client=None) -> int:
    """Print every item of a list endpoint as one JSON document per line. Returns the item count."""
    service_cls, pager_cls = RESOURCES[resource]
    client = client or service_cls.new_instance()

    pager = pager_cls(client, params)
    count = 0
    pages = 0
    async for page in pager:
        for item in page or []:
            print(json.dumps(item, sort_keys=True))
            count += 1
        pages += 1
        if max_pages is not None and pages >= max_pages:
            logger.info(f"Stopping after {pages} pages (--max-pages)")
            break

    logger.info(f"Listed {count} {resource} in {pages} pages")
    return count


def main(argv: Optional[List[str]] = None):
    """Walk the requested list endpoint."""
    # Parse arguments
    args = parse_args(argv)

    # Set logging level
    logging.getLogger().setLevel(getattr(logging, args.log_level))

    # Load environment variables
    load_dotenv()

    service_cls, _ = RESOURCES[args.resource]
    missing_vars = ConfigManager.missing_variables(service_cls.DEFAULT_SERVICE_NAME)
    if missing_vars:
        logger.error(f"Missing required environment variables: {', '.join(missing_vars)}")
        logger.error("Create a .env file with:")
        logger.error(f"{ConfigManager.env_prefix(service_cls.DEFAULT_SERVICE_NAME)}_APIKEY=your_api_key_here")
        return 1

    try:
        params = parse_params(args.param)
        asyncio.run(walk(args.resource, params, args.max_pages))
        return 0

    except (ValueError, PaginationError) as e:
        logger.error(f"Invalid request: {e}")
        return 2
    except ApiException as e:
        logger.error(f"IAM API error: {e}")
        return 1
    except httpx.HTTPError as e:
        logger.error(f"Request failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
