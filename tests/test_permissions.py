import uuid

import pytest

from inkwell.auth.permissions import ActorCapability, ensure_can_modify, resolve_capability
from inkwell.exceptions import Forbidden
from inkwell.shared.constants import Role
from inkwell.shared.models import CurrentUser


def _user(*roles: Role) -> CurrentUser:
    return CurrentUser(id=uuid.uuid4(), email="x@example.com", roles=list(roles) or [Role.USER])


def test_owner_wins_over_admin() -> None:
    admin = _user(Role.USER, Role.ADMIN)
    assert resolve_capability(admin, admin.id) is ActorCapability.OWNER


def test_admin_roles() -> None:
    owner_id = uuid.uuid4()
    assert resolve_capability(_user(Role.ADMIN), owner_id) is ActorCapability.ADMIN
    assert resolve_capability(_user(Role.SUPER_ADMIN), owner_id) is ActorCapability.ADMIN


def test_other_is_forbidden() -> None:
    stranger = _user()
    assert resolve_capability(stranger, uuid.uuid4()) is ActorCapability.OTHER
    with pytest.raises(Forbidden) as exc:
        ensure_can_modify(stranger, uuid.uuid4(), "delete this post")
    assert exc.value.status_code == 403
    assert exc.value.detail == "Not authorized to delete this post."
