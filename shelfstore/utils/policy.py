"""Role-based authorization policy.

Every route declares the single :class:`Action` it performs; this module is
the only place that decides which roles may perform it.
"""
import enum
from typing import Union

from shelfstore.models.users import UserRole


class Action(str, enum.Enum):
    READ = "read"
    WRITE_PRODUCT = "write_product"
    DELETE_PRODUCT = "delete_product"
    WRITE_SHELF = "write_shelf"
    DELETE_SHELF = "delete_shelf"
    WRITE_ITEMS = "write_items"
    MANAGE_USERS = "manage_users"
    READ_LOGS = "read_logs"


_EDITOR_ACTIONS = frozenset({
    Action.READ,
    Action.WRITE_PRODUCT,
    Action.WRITE_SHELF,
    Action.WRITE_ITEMS,
})

ROLE_PERMISSIONS = {
    UserRole.VIEWER: frozenset({Action.READ}),
    UserRole.EDITOR: _EDITOR_ACTIONS,
    UserRole.ADMIN: frozenset(Action),
}


def is_allowed(role: Union[UserRole, str, None], action: Action) -> bool:
    try:
        resolved = UserRole((role or "").lower())
    except ValueError:
        return False
    return action in ROLE_PERMISSIONS[resolved]
