from datetime import datetime
from typing import Any, ClassVar, Dict, FrozenSet, Optional

from pydantic import Field

from .common import OktaModel


class GroupProfile(OktaModel):
    name: str
    description: Optional[str] = None


class Group(OktaModel):
    READ_ONLY_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {"id", "created", "last_updated", "links", "type"}
    )

    id: Optional[str] = None
    # OKTA_GROUP, APP_GROUP, BUILT_IN
    type: Optional[str] = None
    profile: GroupProfile
    created: Optional[datetime] = None
    last_updated: Optional[datetime] = None
    links: Optional[Dict[str, Any]] = Field(default=None, alias="_links")
