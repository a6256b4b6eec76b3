"""Ownership guard — every task belongs to exactly one user.

Learn: "Not yours" and "doesn't exist" are the same answer. If a caller
could tell a 403 (exists, not yours) from a 404 (no such id), walking
task ids would map out everyone else's data. So both collapse to
Access.NOT_FOUND, which the API renders as one identical 404 body.

There is no admin override and no shared ownership.
"""

import enum
import uuid
from typing import Optional, Protocol, TypeVar, Union

from taskflow.errors import NotFoundError


class Owned(Protocol):
    owner_id: uuid.UUID


R = TypeVar("R", bound=Owned)


class Access(enum.Enum):
    ALLOWED = "allowed"
    NOT_FOUND = "not_found"


def _as_uuid(value: Union[str, uuid.UUID]) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError):
        return None


def authorize(caller_id: Union[str, uuid.UUID], resource: Optional[Owned]) -> Access:
    """Decide whether the caller may touch the resource."""
    if resource is None:
        return Access.NOT_FOUND
    caller = _as_uuid(caller_id)
    if caller is None or resource.owner_id != caller:
        return Access.NOT_FOUND
    return Access.ALLOWED


def require_owner(
    caller_id: Union[str, uuid.UUID],
    resource: Optional[R],
    message: str = "Task not found.",
) -> R:
    """Return the resource if the caller owns it, else raise NotFoundError."""
    if authorize(caller_id, resource) is not Access.ALLOWED:
        raise NotFoundError(message)
    return resource
