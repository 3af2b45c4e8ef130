"""
Shared building blocks for Okta policy models.

Field names are snake_case in Python and camelCase on the wire. Fields Okta
adds that are not modelled here are kept (extra="allow") so an object fetched
from the API can be sent back in an update without losing anything.
"""

from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PolicyType(str, Enum):
    OKTA_SIGN_ON = "OKTA_SIGN_ON"
    PASSWORD = "PASSWORD"
    MFA_ENROLL = "MFA_ENROLL"


class PolicyRuleType(str, Enum):
    SIGN_ON = "SIGN_ON"
    PASSWORD = "PASSWORD"
    MFA_ENROLL = "MFA_ENROLL"


class LifecycleStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class PolicyAccess(str, Enum):
    ALLOW = "ALLOW"
    DENY = "DENY"


class OktaModel(BaseModel):
    """Base for every request/response object exchanged with Okta."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="allow",
    )

    # Assigned by the server; never sent back
    READ_ONLY_FIELDS: ClassVar[FrozenSet[str]] = frozenset()

    def to_request_body(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys, no None values and no read-only fields."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude=set(self.READ_ONLY_FIELDS),
        )


class OktaResource(OktaModel):
    """Fields shared by policies and policy rules."""

    READ_ONLY_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {"id", "created", "last_updated", "links", "system"}
    )

    id: Optional[str] = None
    # Okta rejects names longer than 50 characters
    name: str = Field(min_length=1, max_length=50)
    status: Optional[LifecycleStatus] = None
    priority: Optional[int] = None
    system: Optional[bool] = None
    created: Optional[datetime] = None
    last_updated: Optional[datetime] = None
    links: Optional[Dict[str, Any]] = Field(default=None, alias="_links")


# ---------------------------------------------------------------------------
# Conditions
# ---------------------------------------------------------------------------

class UserCondition(OktaModel):
    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None


class GroupCondition(OktaModel):
    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None


class PolicyPeopleCondition(OktaModel):
    users: Optional[UserCondition] = None
    groups: Optional[GroupCondition] = None


class PolicyNetworkCondition(OktaModel):
    # ANYWHERE, ZONE
    connection: Optional[str] = None
    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None


class PolicyRuleAuthContextCondition(OktaModel):
    # ANY, RADIUS
    auth_type: Optional[str] = None


class PasswordPolicyAuthenticationProviderCondition(OktaModel):
    # OKTA, ACTIVE_DIRECTORY, LDAP, ANY
    provider: Optional[str] = None
    include: Optional[List[str]] = None
