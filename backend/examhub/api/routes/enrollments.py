"""Enrollment Routes — enroll/unenroll and enrollment views.

Invariants:
    - enroll, unenroll and view-own admit user|student|teacher|admin
    - view-all admits teacher|admin|org
"""

from fastapi import APIRouter, Depends, Query

from examhub.api.dependencies import get_enrollment_service, get_identity, require_roles
from examhub.api.responses import success
from examhub.config import get_settings
from examhub.core.domain_types import AUTHORING_ROLES, MEMBER_ROLES
from examhub.core.identity import Identity
from examhub.schemas.enrollment import EnrollmentRequest
from examhub.services.enrollments import EnrollmentService

router = APIRouter(prefix=f"{get_settings().api_prefix}/enrollments", tags=["enrollments"])

is_member = [Depends(require_roles(MEMBER_ROLES))]


@router.post("/enrollToExams", dependencies=is_member)
async def enroll_to_exams(
    body: EnrollmentRequest,
    identity: Identity = Depends(get_identity),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    enrollment = await service.enroll(identity, body.exam_ids)
    return success("Successfully enrolled in exams", enrollment)


@router.post("/unenrollFromExam", dependencies=is_member)
async def unenroll_from_exam(
    body: EnrollmentRequest,
    identity: Identity = Depends(get_identity),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    enrollment = await service.unenroll(identity, body.exam_ids)
    return success("Successfully unenrolled from exams", enrollment)


@router.get("/viewMyEnrollments", dependencies=is_member)
async def view_my_enrollments(
    user_id: str | None = Query(None, alias="userId"),
    identity: Identity = Depends(get_identity),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    view = await service.view_for_user(identity, user_id)
    if not view["count"]:
        return success("No enrollments found for this user", view)
    return success("Successfully retrieved enrollments", view)


@router.get(
    "/viewAllEnrollments",
    dependencies=[Depends(require_roles(AUTHORING_ROLES))],
)
async def view_all_enrollments(
    identity: Identity = Depends(get_identity),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    view = await service.view_all(identity)
    if not view["count"]:
        return success("No enrollments found", view)
    return success("Successfully retrieved all enrollments", view)
