# core/authorization.py
"""
Access decisions for every route that needs one.

`authorize` is a pure function over an identity (anything with `id` and
`roles`, or None for anonymous callers), an action and an optional target.
It never raises; `enforce` turns a Deny into a ForbiddenError for routes.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
from core.exceptions import ForbiddenError
from services.user_service import has_franchise_role, is_admin_like
from utils.logger import get_logger

logger = get_logger("Authorization")


class Action(str, Enum):
    CREATE_FRANCHISE = "create_franchise"
    DELETE_FRANCHISE = "delete_franchise"
    CREATE_STORE = "create_store"
    DELETE_STORE = "delete_store"
    LIST_FRANCHISES = "list_franchises"
    VIEW_USER_FRANCHISES = "view_user_franchises"
    UPDATE_MENU = "update_menu"
    UPDATE_USER = "update_user"
    DELETE_USER = "delete_user"
    LIST_USERS = "list_users"
    PLACE_ORDER = "place_order"
    VIEW_ORDERS = "view_orders"


@dataclass(frozen=True)
class Allow:
    pass


@dataclass(frozen=True)
class Deny:
    reason: str


Decision = Union[Allow, Deny]


def _admin_only(reason: str):
    def rule(identity, target):
        return is_admin_like(identity), reason
    return rule


def _admin_or_franchisee(reason: str):
    def rule(identity, target):
        return is_admin_like(identity) or has_franchise_role(identity, target), reason
    return rule


def _self_or_admin(identity, target):
    return identity is not None and (str(identity.id) == str(target) or is_admin_like(identity)), "unauthorized"


def _authenticated(identity, target):
    return identity is not None, "unauthorized"


def _anyone(identity, target):
    return True, ""


_RULES = {
    Action.CREATE_FRANCHISE: _admin_only("unable to create a franchise"),
    # no check on franchise deletion; existing clients depend on it
    Action.DELETE_FRANCHISE: _anyone,
    Action.CREATE_STORE: _admin_or_franchisee("unable to create a store"),
    Action.DELETE_STORE: _admin_or_franchisee("unable to delete a store"),
    Action.LIST_FRANCHISES: _anyone,
    Action.VIEW_USER_FRANCHISES: _anyone,
    Action.UPDATE_MENU: _admin_only("unable to add menu item"),
    Action.UPDATE_USER: _self_or_admin,
    Action.DELETE_USER: _authenticated,
    Action.LIST_USERS: _authenticated,
    Action.PLACE_ORDER: _authenticated,
    Action.VIEW_ORDERS: _authenticated,
}


def authorize(identity, action: Action, target: Optional[str] = None) -> Decision:
    allowed, reason = _RULES[action](identity, target)
    if allowed:
        return Allow()
    return Deny(reason)


def enforce(identity, action: Action, target: Optional[str] = None) -> None:
    decision = authorize(identity, action, target)
    if isinstance(decision, Deny):
        who = identity.email if identity is not None else "anonymous"
        logger.warning(f"Forbidden: {who} denied {action.value} on {target}")
        raise ForbiddenError(decision.reason)


def can_see_franchise_admins(identity) -> bool:
    """Franchise listings include admin details only for admins."""
    return is_admin_like(identity)


def can_view_user_franchises(identity, user_id: str) -> bool:
    """
    Someone else's franchise list comes back empty rather than denied.
    """
    return identity is not None and (str(identity.id) == str(user_id) or is_admin_like(identity))
