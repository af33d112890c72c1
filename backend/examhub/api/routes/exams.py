"""Exam Routes — owned exam CRUD plus the nested subjects/topics read.

Invariants:
    - create/update/delete gated to teacher|admin|org; reads also admit student
    - Ownership is enforced in the service, after the role gate
"""

from fastapi import APIRouter, Depends, Query, status

from examhub.api.dependencies import get_exam_service, get_identity, require_roles
from examhub.api.responses import success
from examhub.config import get_settings
from examhub.core.domain_types import AUTHORING_ROLES, VIEWING_ROLES
from examhub.core.identity import Identity
from examhub.schemas.catalog import ExamBody
from examhub.services.exams import ExamService

router = APIRouter(prefix=f"{get_settings().api_prefix}/exams", tags=["exams"])

can_author = [Depends(require_roles(AUTHORING_ROLES))]
can_view = [Depends(require_roles(VIEWING_ROLES))]


@router.post("/createExam", dependencies=can_author)
async def create_exam(
    body: ExamBody,
    identity: Identity = Depends(get_identity),
    service: ExamService = Depends(get_exam_service),
):
    exam = await service.create(identity, body.model_dump(exclude_unset=True))
    return success("Exam created successfully", exam, status.HTTP_201_CREATED)


@router.get("/getAllExams", dependencies=can_view)
async def get_all_exams(service: ExamService = Depends(get_exam_service)):
    exams = await service.list_active()
    return success("Exams retrieved successfully", {"exams": exams, "count": len(exams)})


@router.get("/getExamsByUser", dependencies=can_view)
async def get_exams_by_user(
    user_id: str | None = Query(None, alias="userId"),
    identity: Identity = Depends(get_identity),
    service: ExamService = Depends(get_exam_service),
):
    exams = await service.list_active(user_id=user_id or identity.user_id)
    return success("Exams retrieved successfully", {"exams": exams, "count": len(exams)})


@router.get("/getExam/{exam_id}", dependencies=can_view)
async def get_exam(exam_id: str, service: ExamService = Depends(get_exam_service)):
    exam = await service.get_active(exam_id)
    return success("Exam retrieved successfully", exam)


@router.get("/getExamWithSubjectsAndTopics/{exam_id}", dependencies=can_view)
async def get_exam_with_subjects_and_topics(
    exam_id: str, service: ExamService = Depends(get_exam_service),
):
    exam = await service.get_with_subjects_and_topics(exam_id)
    return success("Exam with subjects and topics retrieved successfully", exam)


@router.put("/updateExam/{exam_id}", dependencies=can_author)
async def update_exam(
    exam_id: str,
    body: ExamBody,
    identity: Identity = Depends(get_identity),
    service: ExamService = Depends(get_exam_service),
):
    exam = await service.update(identity, exam_id, body.model_dump(exclude_unset=True))
    return success("Exam updated successfully", exam)


@router.delete("/deleteExam/{exam_id}", dependencies=can_author)
async def delete_exam(
    exam_id: str,
    identity: Identity = Depends(get_identity),
    service: ExamService = Depends(get_exam_service),
):
    deleted = await service.soft_delete(identity, exam_id)
    return success("Exam deleted successfully", deleted)
