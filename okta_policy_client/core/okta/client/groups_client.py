from typing import Optional
from urllib.parse import quote

from okta_policy_client.core.okta.client.base_okta_api_client import OktaAPIClient
from okta_policy_client.core.okta.models import Group, GroupProfile
from okta_policy_client.utils.error_handling import ValidationError
from okta_policy_client.utils.logging import get_logger

logger = get_logger(__name__)

GROUPS_ENDPOINT = "/api/v1/groups"


class GroupsClient:
    """Minimal group operations, enough to build people conditions for policies."""

    def __init__(self, api_client: OktaAPIClient):
        self.api = api_client

    def _group_path(self, group_id: str) -> str:
        if not group_id:
            raise ValidationError("group_id is required", field="group_id")
        return f"{GROUPS_ENDPOINT}/{quote(group_id, safe='')}"

    async def create_group(self, name: str, description: Optional[str] = None) -> Group:
        group = Group(profile=GroupProfile(name=name, description=description))
        data = await self.api.request(GROUPS_ENDPOINT, method="POST", body=group.to_request_body())
        created = Group.model_validate(data)
        logger.info(f"Created group {created.id} ({name})")
        return created

    async def get_group(self, group_id: str) -> Group:
        data = await self.api.request(self._group_path(group_id))
        return Group.model_validate(data)

    async def delete_group(self, group_id: str) -> None:
        await self.api.request(self._group_path(group_id), method="DELETE")
        logger.info(f"Deleted group {group_id}")
