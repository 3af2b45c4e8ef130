"""
Policy models.

A policy is a closed set of variants selected by the ``type`` field. Use
``parse_policy`` to turn a raw API payload into the matching variant.
"""

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from .common import (
    OktaModel,
    OktaResource,
    PasswordPolicyAuthenticationProviderCondition,
    PolicyPeopleCondition,
)


class OktaSignOnPolicyConditions(OktaModel):
    people: Optional[PolicyPeopleCondition] = None


class PasswordPolicyConditions(OktaModel):
    people: Optional[PolicyPeopleCondition] = None
    auth_provider: Optional[PasswordPolicyAuthenticationProviderCondition] = None


class MfaEnrollPolicyConditions(OktaModel):
    people: Optional[PolicyPeopleCondition] = None


class BasePolicy(OktaResource):
    type: str
    description: Optional[str] = None


class OktaSignOnPolicy(BasePolicy):
    type: Literal["OKTA_SIGN_ON"] = "OKTA_SIGN_ON"
    conditions: Optional[OktaSignOnPolicyConditions] = None


class PasswordPolicy(BasePolicy):
    type: Literal["PASSWORD"] = "PASSWORD"
    conditions: Optional[PasswordPolicyConditions] = None
    # Complexity, age, lockout and recovery settings are passed through as-is
    settings: Optional[Dict[str, Any]] = None


class MfaEnrollPolicy(BasePolicy):
    type: Literal["MFA_ENROLL"] = "MFA_ENROLL"
    conditions: Optional[MfaEnrollPolicyConditions] = None
    settings: Optional[Dict[str, Any]] = None


Policy = Annotated[
    Union[OktaSignOnPolicy, PasswordPolicy, MfaEnrollPolicy],
    Field(discriminator="type"),
]

_policy_adapter = TypeAdapter(Policy)


def parse_policy(data: Dict[str, Any]) -> BasePolicy:
    """Validate an API payload into the policy variant named by its type."""
    return _policy_adapter.validate_python(data)
