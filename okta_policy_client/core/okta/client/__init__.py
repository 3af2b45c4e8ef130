"""
Okta Client Module

Exports:
- OktaAPIClient: Base API client for direct HTTP calls
- PoliciesClient: Policy and policy rule operations
- GroupsClient: Group operations used by policy conditions
- OktaClient / create_client: Facade bundling the above for one org
"""

from typing import Optional

from okta_policy_client.config.settings import Settings, get_settings
from okta_policy_client.utils.logging import configure_logging

from .base_okta_api_client import OktaAPIClient
from .groups_client import GroupsClient
from .policies_client import PoliciesClient


class OktaClient:
    """One Okta org: a shared HTTP layer plus the resource clients built on it."""

    def __init__(self, settings: Settings, timeout: Optional[int] = None):
        self.settings = settings
        configure_logging(settings.LOG_LEVEL, settings.LOG_DIR)
        self.api = OktaAPIClient(settings, timeout=timeout)
        self.policies = PoliciesClient(self.api)
        self.groups = GroupsClient(self.api)


def create_client(settings: Optional[Settings] = None, **overrides) -> OktaClient:
    """
    Build an OktaClient.

    Args:
        settings: Explicit settings; loaded from the environment when omitted
        **overrides: Setting values that take precedence over the environment
            (only used when ``settings`` is omitted)
    """
    if settings is None:
        settings = get_settings(**overrides)
    return OktaClient(settings)


__all__ = ['OktaAPIClient', 'PoliciesClient', 'GroupsClient', 'OktaClient', 'create_client']
