"""Owned Resource Service — CRUD with soft delete and ownership for one table.

Invariants:
    - Active = is_active true AND is_deleted false; every read path filters on it
    - Soft delete writes is_deleted=true, is_active=false; deleted rows are
      terminal (update/delete on them -> 404)
    - Update/delete: row fetched first (404), then manager role + ownership (403)
    - Update applies only editable fields present in the patch; required
      fields cannot be blanked; an empty patch returns the stored row
    - Not transactional: fetch-then-write can interleave with other requests
"""

import logging

from examhub.core.access import check_can_manage, ensure_any_role
from examhub.core.domain_types import ACTIVE_FILTER
from examhub.core.errors import ConflictError, ResourceNotFoundError, ValidationError
from examhub.core.identity import Identity
from examhub.core.repository_protocols import Row, TableGateway
from examhub.core.resource_policy import ResourcePolicy
from examhub.services.common import first_or_none, is_blank, remote_operation, require_fields

logger = logging.getLogger(__name__)

SOFT_DELETE_PATCH = {"is_deleted": True, "is_active": False}


class OwnedResourceService:
    """Generic service parameterized by a ResourcePolicy."""

    def __init__(self, tables: TableGateway, policy: ResourcePolicy):
        self.tables = tables
        self.policy = policy

    @property
    def table(self) -> str:
        return self.policy.table.value

    # ─── Create ──────────────────────────────────────────────────

    async def create(self, identity: Identity, payload: dict) -> Row:
        policy = self.policy
        require_fields(payload, policy.required_on_create)
        ensure_any_role(
            identity, policy.creator_roles,
            f"Only {policy.roles_phrase} roles can create {policy.plural}",
        )
        if identity.is_anonymous:
            raise ValidationError(f"User ID is required to create {policy.a_noun}")

        row = {
            "name": payload["name"],
            "description": payload.get("description") or None,
            policy.owner_field: identity.user_id,
        }
        if policy.parent_field:
            row[policy.parent_field] = payload[policy.parent_field]

        conflict = self._duplicate_name_message(row)
        with remote_operation(f"create {policy.noun}", conflict_message=conflict):
            if policy.unique_within_parent:
                await self._reject_duplicate_name(row, conflict)
            created = first_or_none(await self.tables.insert(self.table, row)) or row

        logger.info(
            f"{policy.label} {created.get('id')} created by user {identity.user_id}",
            extra={"user_id": identity.user_id, "table": self.table},
        )
        return created

    async def _reject_duplicate_name(self, row: Row, message: str) -> None:
        parent = self.policy.parent_field
        existing = await self.tables.fetch(
            self.table, {"name": row["name"], parent: row[parent]},
        )
        if existing:
            raise ConflictError(message)

    def _duplicate_name_message(self, row: Row) -> str:
        parent = self.policy.parent_field
        scope = f"this {parent.removesuffix('_id')}" if parent else "this resource"
        return f'A {self.policy.noun} with the name "{row["name"]}" already exists for {scope}'

    # ─── Read ────────────────────────────────────────────────────

    async def list_active(self, **criteria) -> list[Row]:
        """Active rows, optionally narrowed by equality criteria."""
        with remote_operation(f"retrieve {self.policy.plural}"):
            return await self.tables.fetch(self.table, {**criteria, **ACTIVE_FILTER})

    async def get_active(self, row_id: str) -> Row:
        with remote_operation(f"retrieve {self.policy.noun}"):
            row = await self._find_active(row_id)
        if row is None:
            raise ResourceNotFoundError(
                f"{self.policy.label} with ID {row_id} not found or has been deleted",
            )
        return row

    async def _find_active(self, row_id: str) -> Row | None:
        return first_or_none(
            await self.tables.fetch(self.table, {"id": row_id, **ACTIVE_FILTER}),
        )

    # ─── Update / Delete ─────────────────────────────────────────

    async def update(self, identity: Identity, row_id: str, patch: dict) -> Row:
        policy = self.policy
        with remote_operation(f"update {policy.noun}"):
            existing = await self._find_active(row_id)
            if existing is None:
                raise ResourceNotFoundError(f"{policy.label} with ID {row_id} not found")
            self._check_can_manage(identity, existing, "update")

            changes = self._editable_changes(patch)
            if not changes:
                return existing
            updated = await self.tables.update(self.table, changes, {"id": row_id})

        logger.info(
            f"{policy.label} {row_id} updated by user {identity.user_id}",
            extra={"user_id": identity.user_id, "table": self.table},
        )
        return first_or_none(updated) or {**existing, **changes}

    async def soft_delete(self, identity: Identity, row_id: str) -> dict:
        policy = self.policy
        with remote_operation(f"delete {policy.noun}"):
            existing = await self._find_active(row_id)
            if existing is None:
                raise ResourceNotFoundError(
                    f"{policy.label} with ID {row_id} not found or already deleted",
                )
            self._check_can_manage(identity, existing, "delete")
            await self.tables.update(self.table, dict(SOFT_DELETE_PATCH), {"id": row_id})

        logger.info(
            f"{policy.label} {row_id} soft deleted by user {identity.user_id}",
            extra={"user_id": identity.user_id, "table": self.table},
        )
        return {"id": row_id}

    def _check_can_manage(self, identity: Identity, existing: Row, verb: str) -> None:
        check_can_manage(
            identity,
            existing.get(self.policy.owner_field),
            self.policy.manager_roles,
            self.policy.elevated_roles,
            f"You do not have permission to {verb} this {self.policy.noun}",
        )

    def _editable_changes(self, patch: dict) -> Row:
        required = set(self.policy.required_on_create)
        return {
            key: value for key, value in patch.items()
            if key in self.policy.editable_fields
            and not (key in required and is_blank(value))
        }
