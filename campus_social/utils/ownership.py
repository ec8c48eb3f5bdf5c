# campus_social/utils/ownership.py
from typing import Optional

from .errors import AuthorizationError


def owns_resource(principal: Optional[dict], resource: Optional[dict], owner_field: str = "author_id") -> bool:
    """True when the authenticated principal is the resource's author/owner."""
    if not principal or not resource:
        return False
    owner = resource.get(owner_field)
    return owner is not None and str(owner) == str(principal.get("_id"))


def ensure_owner(
    principal: Optional[dict],
    resource: Optional[dict],
    owner_field: str = "author_id",
    action: str = "modify this resource",
) -> None:
    if not owns_resource(principal, resource, owner_field):
        raise AuthorizationError(f"Not authorized to {action}")
