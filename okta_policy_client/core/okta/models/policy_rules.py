"""
Policy rule models.

Rules live under exactly one policy. Like policies they are a closed set of
variants keyed on ``type``; ``parse_policy_rule`` picks the right one.
"""

from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from .common import (
    OktaModel,
    OktaResource,
    PolicyAccess,
    PolicyNetworkCondition,
    PolicyPeopleCondition,
    PolicyRuleAuthContextCondition,
)


# ---------------------------------------------------------------------------
# Sign-on rules
# ---------------------------------------------------------------------------

class OktaSignOnPolicyRuleSignonSessionActions(OktaModel):
    use_persistent_cookie: Optional[bool] = None
    max_session_idle_minutes: Optional[int] = None
    max_session_lifetime_minutes: Optional[int] = None


class OktaSignOnPolicyRuleSignonActions(OktaModel):
    access: Optional[PolicyAccess] = None
    require_factor: Optional[bool] = None
    # ALWAYS, DEVICE, SESSION
    factor_prompt_mode: Optional[str] = None
    factor_lifetime: Optional[int] = None
    remember_device_by_default: Optional[bool] = None
    session: Optional[OktaSignOnPolicyRuleSignonSessionActions] = None


class OktaSignOnPolicyRuleActions(OktaModel):
    signon: Optional[OktaSignOnPolicyRuleSignonActions] = None


class OktaSignOnPolicyRuleConditions(OktaModel):
    people: Optional[PolicyPeopleCondition] = None
    network: Optional[PolicyNetworkCondition] = None
    auth_context: Optional[PolicyRuleAuthContextCondition] = None


# ---------------------------------------------------------------------------
# Password rules
# ---------------------------------------------------------------------------

class PasswordPolicyRuleAction(OktaModel):
    access: Optional[PolicyAccess] = None


class PasswordPolicyRuleActions(OktaModel):
    password_change: Optional[PasswordPolicyRuleAction] = None
    self_service_password_reset: Optional[PasswordPolicyRuleAction] = None
    self_service_unlock: Optional[PasswordPolicyRuleAction] = None


class PasswordPolicyRuleConditions(OktaModel):
    people: Optional[PolicyPeopleCondition] = None
    network: Optional[PolicyNetworkCondition] = None


# ---------------------------------------------------------------------------
# MFA enrollment rules
# ---------------------------------------------------------------------------

class MfaEnrollPolicyRuleEnrollAction(OktaModel):
    # CHALLENGE, LOGIN, NEVER
    self_: Optional[str] = Field(default=None, alias="self")


class MfaEnrollPolicyRuleActions(OktaModel):
    enroll: Optional[MfaEnrollPolicyRuleEnrollAction] = None


class MfaEnrollPolicyRuleConditions(OktaModel):
    people: Optional[PolicyPeopleCondition] = None
    network: Optional[PolicyNetworkCondition] = None


# ---------------------------------------------------------------------------
# Rule variants
# ---------------------------------------------------------------------------

class BasePolicyRule(OktaResource):
    type: str


class OktaSignOnPolicyRule(BasePolicyRule):
    type: Literal["SIGN_ON"] = "SIGN_ON"
    conditions: Optional[OktaSignOnPolicyRuleConditions] = None
    actions: Optional[OktaSignOnPolicyRuleActions] = None


class PasswordPolicyRule(BasePolicyRule):
    type: Literal["PASSWORD"] = "PASSWORD"
    conditions: Optional[PasswordPolicyRuleConditions] = None
    actions: Optional[PasswordPolicyRuleActions] = None


class MfaEnrollPolicyRule(BasePolicyRule):
    type: Literal["MFA_ENROLL"] = "MFA_ENROLL"
    conditions: Optional[MfaEnrollPolicyRuleConditions] = None
    actions: Optional[MfaEnrollPolicyRuleActions] = None


PolicyRule = Annotated[
    Union[OktaSignOnPolicyRule, PasswordPolicyRule, MfaEnrollPolicyRule],
    Field(discriminator="type"),
]

_policy_rule_adapter = TypeAdapter(PolicyRule)


def parse_policy_rule(data: Dict[str, Any]) -> BasePolicyRule:
    """Validate an API payload into the rule variant named by its type."""
    return _policy_rule_adapter.validate_python(data)
