"""User Service — idempotent profile upsert and profile reads/updates.

Invariants:
    - authenticate is an upsert keyed on user_id: same id twice -> one row
    - No credential check happens here; identity is trusted from the gateway
    - updateProfile only touches name, contact_number, dob, gender of the caller
"""

import logging

from examhub.core.domain_types import Table
from examhub.core.errors import AuthorizationMissingError, ResourceNotFoundError, ValidationError
from examhub.core.identity import Identity
from examhub.core.repository_protocols import Row, TableGateway
from examhub.services.common import first_or_none, remote_operation, require_fields

logger = logging.getLogger(__name__)

USERS = Table.USERS.value
PROFILE_FIELDS = ("name", "contact_number", "dob", "gender")


class UserService:

    def __init__(self, tables: TableGateway):
        self.tables = tables

    async def authenticate(self, profile: dict) -> Row:
        """Create the user row or update it in place."""
        require_fields(profile, ("user_id",))
        role = profile.get("role")
        if role is not None and (
            not isinstance(role, list) or not all(isinstance(r, str) for r in role)
        ):
            raise ValidationError("Role must be provided as an array of strings", field="role")

        user_id = profile["user_id"]
        with remote_operation("authenticate user"):
            existing = first_or_none(await self.tables.fetch(USERS, {"user_id": user_id}))
            if existing is None:
                rows = await self.tables.insert(USERS, profile)
                result = first_or_none(rows) or profile
                verb = "created"
            else:
                changes = {k: v for k, v in profile.items() if k != "user_id"}
                rows = (
                    await self.tables.update(USERS, changes, {"user_id": user_id})
                    if changes else [existing]
                )
                result = first_or_none(rows) or {**existing, **changes}
                verb = "updated"

        logger.info(f"User {user_id} {verb} on authenticate", extra={"user_id": user_id})
        return result

    async def get_profile(self, identity: Identity, requested_user_id: str | None) -> Row:
        target = requested_user_id or (None if identity.is_anonymous else identity.user_id)
        if not target:
            raise ValidationError("userId query parameter is required", field="userId")
        with remote_operation("retrieve user profile"):
            user = first_or_none(await self.tables.fetch(USERS, {"user_id": target}))
        if user is None:
            raise ResourceNotFoundError(f"User with ID {target} not found")
        return user

    async def list_profiles(self) -> list[Row]:
        with remote_operation("retrieve user profiles"):
            return await self.tables.fetch(USERS)

    async def update_profile(self, identity: Identity, patch: dict) -> Row:
        if identity.is_anonymous:
            raise AuthorizationMissingError(
                "Authentication required. Valid X-User-ID header is needed.",
            )
        changes = {k: v for k, v in patch.items() if k in PROFILE_FIELDS}
        if not changes:
            raise ValidationError(
                "No valid fields to update. Provide at least one of: "
                + ", ".join(PROFILE_FIELDS),
            )

        with remote_operation("update user profile"):
            existing = first_or_none(
                await self.tables.fetch(USERS, {"user_id": identity.user_id}),
            )
            if existing is None:
                raise ResourceNotFoundError(f"User with ID {identity.user_id} not found")
            updated = await self.tables.update(USERS, changes, {"user_id": identity.user_id})

        logger.info(
            f"User {identity.user_id} updated their profile",
            extra={"user_id": identity.user_id, "table": USERS},
        )
        return first_or_none(updated) or {**existing, **changes}
