"""Translation Service — CMS keys with per-language text, publish and soft-delete flags.

Invariants:
    - key is unique: checked before insert (check-then-insert; a racing
      duplicate still surfaces as 409 through the store's unique constraint)
    - Bulk create is all-or-nothing: any invalid item, in-batch duplicate or
      already-stored key rejects the whole batch before anything is written
    - Public language reads only see published, non-deleted rows
    - Delete is soft and also unpublishes
"""

import asyncio
import logging

from examhub.core.access import ensure_any_role
from examhub.core.domain_types import AUTHORING_ROLES, Language, Table
from examhub.core.envelope import utc_timestamp
from examhub.core.errors import (
    AuthorizationMissingError, ConflictError, ResourceNotFoundError, ValidationError,
)
from examhub.core.identity import Identity
from examhub.core.repository_protocols import Row, TableGateway
from examhub.services.common import first_or_none, is_blank, remote_operation, require_fields

logger = logging.getLogger(__name__)

TRANSLATIONS = Table.TRANSLATIONS.value
EDITABLE_FIELDS = ("key", "english", "hindi", "marathi", "is_published")


def _editor_check(identity: Identity, action: str) -> None:
    ensure_any_role(
        identity, AUTHORING_ROLES,
        f"Only admin, org, or teacher roles can {action} translations",
    )


def _new_row(item: dict, user_id: str) -> Row:
    published = item.get("is_published")
    return {
        "key": item["key"],
        "english": item["english"],
        "hindi": item.get("hindi") or None,
        "marathi": item.get("marathi") or None,
        "is_published": bool(published) if published is not None else False,
        "created_by": user_id,
        "updated_by": user_id,
    }


class TranslationService:

    def __init__(self, tables: TableGateway):
        self.tables = tables

    async def create(self, identity: Identity, payload: dict) -> Row:
        require_fields(payload, ("key", "english"))
        _editor_check(identity, "create")
        if identity.is_anonymous:
            raise ValidationError("User ID is required to create a translation")

        key = payload["key"]
        conflict = f"Translation with key '{key}' already exists"
        with remote_operation("create translation", conflict_message=conflict):
            if await self.tables.fetch(TRANSLATIONS, {"key": key}):
                raise ConflictError(conflict)
            row = _new_row(payload, identity.user_id)
            created = first_or_none(await self.tables.insert(TRANSLATIONS, row)) or row

        logger.info(
            f"Translation '{key}' created by user {identity.user_id}",
            extra={"user_id": identity.user_id, "table": TRANSLATIONS},
        )
        return created

    async def bulk_create(self, identity: Identity, items) -> list[Row]:
        if not isinstance(items, list) or not items:
            raise ValidationError(
                "Missing required field: translations array is required with at least one item",
                field="translations",
            )
        _editor_check(identity, "create")
        if identity.is_anonymous:
            raise ValidationError("User ID is required to create translations")
        if any(not isinstance(i, dict) or is_blank(i.get("key")) or is_blank(i.get("english"))
               for i in items):
            raise ValidationError("All translation items must have key and english fields")

        keys = [i["key"] for i in items]
        if len(set(keys)) != len(keys):
            raise ValidationError(
                "Duplicate keys found in the request. All keys must be unique.",
            )

        with remote_operation(
            "create translations",
            conflict_message="One or more translation keys already exist",
        ):
            lookups = await asyncio.gather(*(
                self.tables.fetch(TRANSLATIONS, {"key": k}) for k in keys
            ))
            existing = [k for k, rows in zip(keys, lookups) if rows]
            if existing:
                raise ConflictError(
                    f"The following keys already exist: {', '.join(existing)}",
                )
            rows = [_new_row(i, identity.user_id) for i in items]
            created = await self.tables.insert(TRANSLATIONS, rows)

        logger.info(
            f"{len(rows)} translations created by user {identity.user_id}",
            extra={"user_id": identity.user_id, "table": TRANSLATIONS},
        )
        return created or rows

    async def list_all(self, identity: Identity) -> list[Row]:
        """Every row, including unpublished and deleted ones."""
        _editor_check(identity, "view all")
        with remote_operation("retrieve translations"):
            return await self.tables.fetch(TRANSLATIONS)

    async def for_language(self, identity: Identity, language: str) -> list[Row]:
        if identity.is_anonymous:
            raise AuthorizationMissingError(
                "Authentication required. Valid X-User-ID header is needed.",
            )
        if language not in {lang.value for lang in Language}:
            raise ValidationError(
                "Invalid language parameter. Must be one of: "
                + ", ".join(lang.value for lang in Language),
                field="language",
            )
        with remote_operation("retrieve translations"):
            rows = await self.tables.fetch(
                TRANSLATIONS, {"is_published": True, "is_deleted": False},
            )
        return [{"key": r.get("key"), language: r.get(language)} for r in rows]

    async def update(self, identity: Identity, row_id: str, patch: dict) -> Row:
        _editor_check(identity, "update")
        changes = {k: v for k, v in patch.items() if k in EDITABLE_FIELDS}
        if "key" in changes and is_blank(changes["key"]):
            raise ValidationError("Translation key cannot be empty", field="key")
        if "english" in changes and is_blank(changes["english"]):
            raise ValidationError("English translation cannot be empty", field="english")

        with remote_operation(
            "update translation",
            conflict_message=f"Translation with key '{changes.get('key')}' already exists",
        ):
            existing = first_or_none(await self.tables.fetch(TRANSLATIONS, {"id": row_id}))
            if existing is None:
                raise ResourceNotFoundError(f"Translation with ID {row_id} not found")
            if "key" in changes and changes["key"] != existing.get("key"):
                await self._reject_taken_key(changes["key"], row_id)

            changes["updated_by"] = identity.user_id
            changes["updated_at"] = utc_timestamp()
            updated = await self.tables.update(TRANSLATIONS, changes, {"id": row_id})

        logger.info(
            f"Translation {row_id} updated by user {identity.user_id}",
            extra={"user_id": identity.user_id, "table": TRANSLATIONS},
        )
        return first_or_none(updated) or {**existing, **changes}

    async def soft_delete(self, identity: Identity, row_id: str) -> dict:
        _editor_check(identity, "delete")
        with remote_operation("delete translation"):
            existing = first_or_none(
                await self.tables.fetch(TRANSLATIONS, {"id": row_id, "is_deleted": False}),
            )
            if existing is None:
                raise ResourceNotFoundError(
                    f"Translation with ID {row_id} not found or already deleted",
                )
            await self.tables.update(
                TRANSLATIONS,
                {
                    "is_deleted": True,
                    "is_published": False,
                    "updated_at": utc_timestamp(),
                    "updated_by": identity.user_id,
                },
                {"id": row_id},
            )

        logger.info(
            f"Translation {row_id} soft deleted by user {identity.user_id}",
            extra={"user_id": identity.user_id, "table": TRANSLATIONS},
        )
        return {"id": row_id}

    async def _reject_taken_key(self, key: str, row_id: str) -> None:
        holders = await self.tables.fetch(TRANSLATIONS, {"key": key})
        if any(str(r.get("id")) != str(row_id) for r in holders):
            raise ConflictError(f"Translation with key '{key}' already exists")
