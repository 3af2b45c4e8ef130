"""
Okta policy data model.

Exports the enums, condition/action value objects and the policy, policy rule
and group resources used by the client.
"""

from .common import (
    GroupCondition,
    LifecycleStatus,
    OktaModel,
    PasswordPolicyAuthenticationProviderCondition,
    PolicyAccess,
    PolicyNetworkCondition,
    PolicyPeopleCondition,
    PolicyRuleAuthContextCondition,
    PolicyRuleType,
    PolicyType,
    UserCondition,
)
from .groups import Group, GroupProfile
from .policies import (
    BasePolicy,
    MfaEnrollPolicy,
    MfaEnrollPolicyConditions,
    OktaSignOnPolicy,
    OktaSignOnPolicyConditions,
    PasswordPolicy,
    PasswordPolicyConditions,
    Policy,
    parse_policy,
)
from .policy_rules import (
    BasePolicyRule,
    MfaEnrollPolicyRule,
    MfaEnrollPolicyRuleActions,
    MfaEnrollPolicyRuleConditions,
    MfaEnrollPolicyRuleEnrollAction,
    OktaSignOnPolicyRule,
    OktaSignOnPolicyRuleActions,
    OktaSignOnPolicyRuleConditions,
    OktaSignOnPolicyRuleSignonActions,
    OktaSignOnPolicyRuleSignonSessionActions,
    PasswordPolicyRule,
    PasswordPolicyRuleAction,
    PasswordPolicyRuleActions,
    PasswordPolicyRuleConditions,
    PolicyRule,
    parse_policy_rule,
)

__all__ = [
    "BasePolicy",
    "BasePolicyRule",
    "Group",
    "GroupCondition",
    "GroupProfile",
    "LifecycleStatus",
    "MfaEnrollPolicy",
    "MfaEnrollPolicyConditions",
    "MfaEnrollPolicyRule",
    "MfaEnrollPolicyRuleActions",
    "MfaEnrollPolicyRuleConditions",
    "MfaEnrollPolicyRuleEnrollAction",
    "OktaModel",
    "OktaSignOnPolicy",
    "OktaSignOnPolicyConditions",
    "OktaSignOnPolicyRule",
    "OktaSignOnPolicyRuleActions",
    "OktaSignOnPolicyRuleConditions",
    "OktaSignOnPolicyRuleSignonActions",
    "OktaSignOnPolicyRuleSignonSessionActions",
    "PasswordPolicy",
    "PasswordPolicyAuthenticationProviderCondition",
    "PasswordPolicyConditions",
    "PasswordPolicyRule",
    "PasswordPolicyRuleAction",
    "PasswordPolicyRuleActions",
    "PasswordPolicyRuleConditions",
    "Policy",
    "PolicyAccess",
    "PolicyNetworkCondition",
    "PolicyPeopleCondition",
    "PolicyRule",
    "PolicyRuleAuthContextCondition",
    "PolicyRuleType",
    "PolicyType",
    "UserCondition",
    "parse_policy",
    "parse_policy_rule",
]
