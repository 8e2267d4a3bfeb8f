"""
Actor capability for mutating calls on owned resources.

A caller relates to a resource in exactly one way, evaluated once per call:
it owns the resource, it is an administrator, or neither.
"""
from __future__ import annotations

import enum
import uuid

from inkwell.exceptions import Forbidden
from inkwell.shared.models import CurrentUser


class ActorCapability(str, enum.Enum):
    OWNER = "owner"
    ADMIN = "admin"
    OTHER = "other"


def resolve_capability(actor: CurrentUser, owner_id: uuid.UUID) -> ActorCapability:
    # Ownership is checked first: an admin acting on their own content is the owner.
    if actor.id == owner_id:
        return ActorCapability.OWNER
    if actor.is_admin:
        return ActorCapability.ADMIN
    return ActorCapability.OTHER


def ensure_can_modify(actor: CurrentUser, owner_id: uuid.UUID, action: str) -> ActorCapability:
    capability = resolve_capability(actor, owner_id)
    if capability is ActorCapability.OTHER:
        raise Forbidden(action)
    return capability
