"""Enrollment Service — one row per user holding the set of enrolled exam ids.

Invariants:
    - enroll = ordered set union; unenroll = set difference; exam_ids never
      contains duplicates
    - Only active exams can be enrolled in; every requested id is checked first
    - Read-then-write on the whole exam_ids list: concurrent writers for the
      same user can lose updates (no atomic append/remove on the store)
    - Viewing another user's enrollments requires admin or teacher
"""

import asyncio
import logging

from examhub.core.domain_types import ACTIVE_FILTER, AUTHORING_ROLES, Role, Table
from examhub.core.errors import (
    AuthorizationMissingError, PermissionDeniedError,
    ResourceNotFoundError, ValidationError,
)
from examhub.core.identity import Identity
from examhub.core.repository_protocols import Row, TableGateway
from examhub.services.common import first_or_none, remote_operation, unique_in_order

logger = logging.getLogger(__name__)

ENROLLMENTS = Table.ENROLLMENTS.value
EXAMS = Table.EXAMS.value
USERS = Table.USERS.value

CROSS_USER_VIEWER_ROLES = frozenset({Role.ADMIN.value, Role.TEACHER.value})


def normalize_exam_ids(exam_ids, verb: str) -> list[str]:
    if not isinstance(exam_ids, list) or not exam_ids:
        raise ValidationError(
            f"Please provide an array of exam IDs to {verb}", field="examIds",
        )
    if any(e is None or isinstance(e, (dict, list, bool)) for e in exam_ids):
        raise ValidationError("Each exam ID must be a string or number", field="examIds")
    return unique_in_order(str(e) for e in exam_ids)


class EnrollmentService:

    def __init__(self, tables: TableGateway):
        self.tables = tables

    async def enroll(self, identity: Identity, exam_ids) -> Row:
        if identity.is_anonymous:
            raise AuthorizationMissingError("Authentication required to enroll in exams")
        requested = normalize_exam_ids(exam_ids, "enroll in")

        with remote_operation("enroll in exams"):
            found = await self._active_exams(requested)
            for exam_id, exam in zip(requested, found):
                if exam is None:
                    raise ResourceNotFoundError(f"Exam with ID {exam_id} not found")

            existing = await self._enrollment_of(identity.user_id)
            if existing is None:
                rows = await self.tables.insert(
                    ENROLLMENTS, {"user_id": identity.user_id, "exam_ids": requested},
                )
                result = first_or_none(rows) or {"user_id": identity.user_id, "exam_ids": requested}
            else:
                merged = unique_in_order([*(existing.get("exam_ids") or []), *requested])
                rows = await self.tables.update(
                    ENROLLMENTS, {"exam_ids": merged}, {"user_id": identity.user_id},
                )
                result = first_or_none(rows) or {**existing, "exam_ids": merged}

        logger.info(
            f"User {identity.user_id} enrolled in exams {requested}",
            extra={"user_id": identity.user_id, "table": ENROLLMENTS},
        )
        return result

    async def unenroll(self, identity: Identity, exam_ids) -> Row:
        if identity.is_anonymous:
            raise AuthorizationMissingError("Authentication required to manage enrollments")
        removed = set(normalize_exam_ids(exam_ids, "unenroll from"))

        with remote_operation("unenroll from exams"):
            existing = await self._enrollment_of(identity.user_id)
            if existing is None:
                raise ResourceNotFoundError("No enrollments found for this user")
            remaining = [e for e in existing.get("exam_ids") or [] if str(e) not in removed]
            rows = await self.tables.update(
                ENROLLMENTS, {"exam_ids": remaining}, {"user_id": identity.user_id},
            )

        logger.info(
            f"User {identity.user_id} unenrolled from exams {sorted(removed)}",
            extra={"user_id": identity.user_id, "table": ENROLLMENTS},
        )
        return first_or_none(rows) or {**existing, "exam_ids": remaining}

    async def view_for_user(self, identity: Identity, requested_user_id: str | None) -> dict:
        target = requested_user_id or identity.user_id
        if target != identity.user_id and not identity.has_any_role(CROSS_USER_VIEWER_ROLES):
            raise PermissionDeniedError(
                "You are not authorized to view enrollments for other users",
            )

        with remote_operation("retrieve enrollments"):
            enrollment = await self._enrollment_of(target)
            if enrollment is None:
                return {"userId": target, "enrollments": [], "count": 0}
            exams = [e for e in await self._active_exams(enrollment.get("exam_ids") or []) if e]
        return {"userId": target, "enrollments": exams, "count": len(exams)}

    async def view_all(self, identity: Identity) -> dict:
        if Role.STUDENT.value in identity.roles and not identity.has_any_role(AUTHORING_ROLES):
            raise PermissionDeniedError("Students cannot view all enrollments")

        with remote_operation("retrieve enrollments"):
            enrollments = await self.tables.fetch(ENROLLMENTS)
            detailed = await asyncio.gather(*(self._with_details(e) for e in enrollments))
        return {"enrollments": list(detailed), "count": len(detailed)}

    async def _with_details(self, enrollment: Row) -> Row:
        user = first_or_none(
            await self.tables.fetch(USERS, {"user_id": enrollment["user_id"]}),
        ) or {"user_id": enrollment["user_id"]}
        exams = [e for e in await self._active_exams(enrollment.get("exam_ids") or []) if e]
        return {
            **enrollment,
            "user": {
                "user_id": user.get("user_id"),
                "name": user.get("name"),
                "email": user.get("email"),
                "role": user.get("role"),
            },
            "exams": exams,
            "exam_count": len(exams),
        }

    async def _enrollment_of(self, user_id: str) -> Row | None:
        return first_or_none(await self.tables.fetch(ENROLLMENTS, {"user_id": user_id}))

    async def _active_exams(self, exam_ids: list) -> list[Row | None]:
        """One fetch per id, concurrently; None where the exam is missing or deleted."""
        results = await asyncio.gather(*(
            self.tables.fetch(EXAMS, {"id": exam_id, **ACTIVE_FILTER})
            for exam_id in exam_ids
        ))
        return [first_or_none(rows) for rows in results]
