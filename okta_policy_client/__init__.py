"""
Async client for Okta policies and policy rules.
"""

__version__ = "0.1.0"

from okta_policy_client.core.okta.client import OktaClient, create_client  # noqa: E402
from okta_policy_client.utils.error_handling import OktaApiError, ResourceNotFoundError  # noqa: E402

__all__ = ["OktaClient", "create_client", "OktaApiError", "ResourceNotFoundError", "__version__"]
