"""Access Policy — role gate and ownership checks as pure functions.

Invariants:
    - check_roles: empty allowed set admits everyone; empty caller roles -> 401;
      no intersection -> 403
    - check_can_manage: caller needs a manager role AND (ownership OR elevated role)
    - Nothing here reads the database; callers pass the stored owner id in
"""

from collections.abc import Iterable

from examhub.core.errors import AuthorizationMissingError, PermissionDeniedError
from examhub.core.identity import Identity


def check_roles(identity: Identity, allowed: Iterable[str]) -> None:
    """Role gate: raise unless the caller holds one of `allowed`."""
    allowed = frozenset(allowed)
    if not allowed:
        return
    if not identity.roles:
        raise AuthorizationMissingError()
    if not identity.roles & allowed:
        raise PermissionDeniedError()


def ensure_any_role(identity: Identity, allowed: Iterable[str], message: str) -> None:
    """Controller-level role check; always 403 with a resource-specific message."""
    if not identity.has_any_role(allowed):
        raise PermissionDeniedError(message)


def is_owner(identity: Identity, owner_id: str | None) -> bool:
    return owner_id is not None and str(owner_id) == identity.user_id


def check_can_manage(
    identity: Identity,
    owner_id: str | None,
    manager_roles: Iterable[str],
    elevated_roles: Iterable[str],
    message: str,
) -> None:
    """Ownership gate for update/delete of owned rows."""
    if not identity.has_any_role(manager_roles):
        raise PermissionDeniedError(message)
    if not is_owner(identity, owner_id) and not identity.has_any_role(elevated_roles):
        raise PermissionDeniedError(message)
