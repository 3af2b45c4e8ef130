"""
Policy Resource Client

CRUD and lifecycle operations for Okta policies and their rules:

    policy = await client.policies.create_policy(OktaSignOnPolicy(name="..."))
    await client.policies.deactivate_policy(policy.id)
    await client.policies.delete_policy(policy.id)

Every method performs exactly one HTTP call (listings: one per page) and
either returns a typed model or raises OktaApiError. Ordering such as
"deactivate before delete" is enforced by Okta, not here.
"""

from typing import Any, AsyncIterator, Dict, Optional, Type, TypeVar, Union
from urllib.parse import quote

from pydantic import ValidationError as PydanticValidationError

from okta_policy_client.core.okta.client.base_okta_api_client import OktaAPIClient
from okta_policy_client.core.okta.models import (
    BasePolicy,
    BasePolicyRule,
    LifecycleStatus,
    PolicyType,
    parse_policy,
    parse_policy_rule,
)
from okta_policy_client.utils.error_handling import (
    PolicyTypeMismatchError,
    UnsupportedResponseError,
    ValidationError,
)
from okta_policy_client.utils.logging import get_logger

logger = get_logger(__name__)

P = TypeVar("P", bound=BasePolicy)

POLICIES_ENDPOINT = "/api/v1/policies"


def _segment(value: Optional[str], field: str) -> str:
    """URL-quote a path id, rejecting empty ids before any request is made."""
    if not value or not str(value).strip():
        raise ValidationError(f"{field} is required", field=field, value=value)
    return quote(str(value), safe="")


def _unreadable(kind: str, data: Any, endpoint: str, method: str,
                error: PydanticValidationError) -> UnsupportedResponseError:
    resource_type = data.get("type") if isinstance(data, dict) else None
    resource_id = data.get("id") if isinstance(data, dict) else None
    return UnsupportedResponseError(
        f"Could not read {kind} {resource_id or '(no id)'} of type {resource_type}: "
        f"{error.error_count()} validation error(s)",
        endpoint=endpoint,
        method=method,
        original_exception=error,
        context={"resource_type": resource_type, "resource_id": resource_id},
    )


def _read_policy(data: Dict[str, Any], endpoint: str, method: str = "GET") -> BasePolicy:
    """parse_policy, raising UnsupportedResponseError for bodies outside the modelled types."""
    try:
        return parse_policy(data)
    except PydanticValidationError as e:
        raise _unreadable("policy", data, endpoint, method, e) from e


def _read_policy_rule(data: Dict[str, Any], endpoint: str, method: str = "GET") -> BasePolicyRule:
    try:
        return parse_policy_rule(data)
    except PydanticValidationError as e:
        raise _unreadable("policy rule", data, endpoint, method, e) from e


class PoliciesClient:
    """Operations on /api/v1/policies and /api/v1/policies/{id}/rules."""

    def __init__(self, api_client: OktaAPIClient):
        self.api = api_client

    # ------------------------------------------------------------------
    # Endpoint helpers
    # ------------------------------------------------------------------

    def _policy_path(self, policy_id: str) -> str:
        return f"{POLICIES_ENDPOINT}/{_segment(policy_id, 'policy_id')}"

    def _rules_path(self, policy_id: str) -> str:
        return f"{self._policy_path(policy_id)}/rules"

    def _rule_path(self, policy_id: str, rule_id: str) -> str:
        return f"{self._rules_path(policy_id)}/{_segment(rule_id, 'rule_id')}"

    # ------------------------------------------------------------------
    # Policies
    # ------------------------------------------------------------------

    async def create_policy(self, policy: BasePolicy, activate: bool = True) -> BasePolicy:
        """
        Create a policy.

        Args:
            policy: Policy variant to create; id and other read-only fields are ignored
            activate: Whether Okta should activate the policy on creation

        Returns:
            The created policy, including its server-assigned id
        """
        data = await self.api.request(
            POLICIES_ENDPOINT,
            method="POST",
            params={"activate": activate},
            body=policy.to_request_body(),
        )
        created = _read_policy(data, POLICIES_ENDPOINT, "POST")
        logger.info(f"Created {created.type} policy {created.id} ({created.name})")
        return created

    async def get_policy(self, policy_id: str, policy_class: Optional[Type[P]] = None) -> Union[BasePolicy, P]:
        """
        Fetch a policy by id.

        Args:
            policy_id: Policy id
            policy_class: Expected variant (e.g. OktaSignOnPolicy). When given, the
                result is guaranteed to be an instance of it.

        Raises:
            ResourceNotFoundError: If the policy does not exist
            PolicyTypeMismatchError: If the policy is not of ``policy_class``
        """
        endpoint = self._policy_path(policy_id)
        data = await self.api.request(endpoint)
        policy = _read_policy(data, endpoint)

        if policy_class is not None and not isinstance(policy, policy_class):
            raise PolicyTypeMismatchError(
                f"Policy {policy_id} is of type {policy.type}, not {policy_class.__name__}",
                expected_type=policy_class.__name__,
                actual_type=policy.type,
                endpoint=endpoint,
                method="GET",
            )
        return policy

    async def list_policies(self,
                            policy_type: Union[PolicyType, str],
                            status: Optional[Union[LifecycleStatus, str]] = None) -> AsyncIterator[BasePolicy]:
        """
        Iterate over the policies of one type.

        Okta requires the type filter. Pages are fetched lazily and every call
        starts from the first page.

        Args:
            policy_type: Policy type to list
            status: Optional ACTIVE/INACTIVE filter

        Raises:
            UnsupportedResponseError: When a listed policy cannot be read as one
                of the modelled types; iteration stops there
        """
        params = {
            "type": PolicyType(policy_type).value,
            "limit": self.api.settings.OKTA_POLICY_PAGE_LIMIT,
        }
        if status is not None:
            params["status"] = LifecycleStatus(status).value

        async for item in self.api.paginate(POLICIES_ENDPOINT, params=params):
            yield _read_policy(item, POLICIES_ENDPOINT)

    async def update_policy(self, policy: BasePolicy, policy_id: str) -> BasePolicy:
        """
        Replace a policy's mutable fields (name, description, conditions, settings).

        The id in the path wins; the policy's own id and type are not changed.
        """
        endpoint = self._policy_path(policy_id)
        data = await self.api.request(endpoint, method="PUT", body=policy.to_request_body())
        updated = _read_policy(data, endpoint, "PUT")
        logger.info(f"Updated policy {updated.id}")
        return updated

    async def activate_policy(self, policy_id: str) -> None:
        await self.api.request(f"{self._policy_path(policy_id)}/lifecycle/activate", method="POST")
        logger.debug(f"Activated policy {policy_id}")

    async def deactivate_policy(self, policy_id: str) -> None:
        await self.api.request(f"{self._policy_path(policy_id)}/lifecycle/deactivate", method="POST")
        logger.debug(f"Deactivated policy {policy_id}")

    async def delete_policy(self, policy_id: str) -> None:
        """Delete a policy. Okta refuses unless the policy is INACTIVE."""
        await self.api.request(self._policy_path(policy_id), method="DELETE")
        logger.info(f"Deleted policy {policy_id}")

    # ------------------------------------------------------------------
    # Policy rules
    # ------------------------------------------------------------------

    async def add_policy_rule(self, rule: BasePolicyRule, policy_id: str, activate: bool = True) -> BasePolicyRule:
        """Create a rule under ``policy_id`` and return it with its server-assigned id."""
        endpoint = self._rules_path(policy_id)
        data = await self.api.request(
            endpoint,
            method="POST",
            params={"activate": activate},
            body=rule.to_request_body(),
        )
        created = _read_policy_rule(data, endpoint, "POST")
        logger.info(f"Added {created.type} rule {created.id} to policy {policy_id}")
        return created

    async def get_policy_rule(self, policy_id: str, rule_id: str) -> BasePolicyRule:
        endpoint = self._rule_path(policy_id, rule_id)
        data = await self.api.request(endpoint)
        return _read_policy_rule(data, endpoint)

    async def list_policy_rules(self, policy_id: str) -> AsyncIterator[BasePolicyRule]:
        """Iterate over the rules of a policy, in priority order as returned by Okta."""
        endpoint = self._rules_path(policy_id)
        async for item in self.api.paginate(endpoint):
            yield _read_policy_rule(item, endpoint)

    async def update_policy_rule(self, rule: BasePolicyRule, policy_id: str, rule_id: str) -> BasePolicyRule:
        endpoint = self._rule_path(policy_id, rule_id)
        data = await self.api.request(endpoint, method="PUT", body=rule.to_request_body())
        updated = _read_policy_rule(data, endpoint, "PUT")
        logger.info(f"Updated rule {updated.id} of policy {policy_id}")
        return updated

    async def activate_policy_rule(self, policy_id: str, rule_id: str) -> None:
        await self.api.request(f"{self._rule_path(policy_id, rule_id)}/lifecycle/activate", method="POST")
        logger.debug(f"Activated rule {rule_id} of policy {policy_id}")

    async def deactivate_policy_rule(self, policy_id: str, rule_id: str) -> None:
        await self.api.request(f"{self._rule_path(policy_id, rule_id)}/lifecycle/deactivate", method="POST")
        logger.debug(f"Deactivated rule {rule_id} of policy {policy_id}")

    async def delete_policy_rule(self, policy_id: str, rule_id: str) -> None:
        """Delete a rule. Okta refuses unless the rule is INACTIVE."""
        await self.api.request(self._rule_path(policy_id, rule_id), method="DELETE")
        logger.info(f"Deleted rule {rule_id} of policy {policy_id}")
