"""Checks shared by services: existence, ownership, request parameters"""
from typing import Any, Optional, Type

from core.errors import Forbidden, NotFound, ValidationFailed
from core.models import User
from core.store import Store
from readmodel.identity import resolve_id
from readmodel.stages import SORT_DIRECTIONS


def require_viewer(viewer_id: Optional[str]) -> str:
    """Authenticated operations need a well-formed viewer id"""
    return resolve_id(viewer_id, "viewer_id")


def require_entity(store: Store, model: Type, entity_id: str, label: str) -> Any:
    entity = store.find_by_id(model, entity_id)
    if entity is None:
        raise NotFound(f"{label} not found")
    return entity


def require_viewer_account(store: Store, viewer_id: str) -> None:
    """Writes keyed by the viewer need the viewer's user row to exist"""
    if store.find_fields(User, viewer_id, "id") is None:
        raise NotFound("User not found")


def ensure_owner(owner_id: Any, viewer_id: str, label: str) -> None:
    """Ownership compares ids as strings; exists-but-not-yours is Forbidden, never NotFound"""
    if str(owner_id) != str(viewer_id):
        raise Forbidden(f"Only the owner can access this {label}")


def check_sort_direction(direction: str) -> str:
    direction = (direction or "").lower()
    if direction not in SORT_DIRECTIONS:
        raise ValidationFailed(f"sort direction must be one of {SORT_DIRECTIONS}")
    return direction
