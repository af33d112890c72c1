"""Identity — who is calling and with which roles, derived from trusted headers.

Invariants:
    - Roles: comma-separated list is the canonical encoding; a value starting
      with "[" is read as a JSON array. Entries trimmed, blanks dropped.
    - Absent/blank roles header -> empty role set (no implicit default role)
    - Absent/blank identity header -> ANONYMOUS_USER_ID
    - Identity is immutable; resolving it never touches IO

Design Decisions:
    - IdentityProvider as Protocol: controllers only see Identity, so a
      token-verifying provider replaces HeaderIdentityProvider without changes
"""

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from examhub.core.domain_types import ANONYMOUS_USER_ID, UserId


def parse_roles(raw: str | None) -> frozenset[str]:
    """Parse the roles header into a normalized role set."""
    if raw is None:
        return frozenset()
    raw = raw.strip()
    if not raw:
        return frozenset()

    entries: Iterable = ()
    if raw.startswith("["):
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError:
            decoded = None
        if isinstance(decoded, list):
            entries = (e for e in decoded if isinstance(e, str))
        else:
            entries = raw.strip("[]").replace('"', "").split(",")
    else:
        entries = raw.split(",")

    return frozenset(e.strip() for e in entries if e and e.strip())


def resolve_user_id(raw: str | None) -> UserId:
    """Read the caller id, substituting the anonymous sentinel."""
    if raw is None or not raw.strip():
        return ANONYMOUS_USER_ID
    return UserId(raw.strip())


@dataclass(frozen=True)
class Identity:
    """Per-request caller context."""
    user_id: UserId = ANONYMOUS_USER_ID
    roles: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_anonymous(self) -> bool:
        return self.user_id == ANONYMOUS_USER_ID

    def has_any_role(self, allowed: Iterable[str]) -> bool:
        return bool(self.roles & frozenset(allowed))


class IdentityProvider(Protocol):
    """Contract for turning request headers into an Identity."""
    def resolve(self, headers: Mapping[str, str]) -> Identity: ...


class HeaderIdentityProvider:
    """Trusts identity and roles set by an upstream gateway."""

    def __init__(
        self,
        identity_header: str = "x-user-id",
        roles_header: str = "x-user-roles",
    ):
        self.identity_header = identity_header
        self.roles_header = roles_header

    def resolve(self, headers: Mapping[str, str]) -> Identity:
        return Identity(
            user_id=resolve_user_id(headers.get(self.identity_header)),
            roles=parse_roles(headers.get(self.roles_header)),
        )
