"""Subject Routes — owned subject CRUD scoped by parent exam."""

from fastapi import APIRouter, Depends, status

from examhub.api.dependencies import get_identity, get_subject_service, require_roles
from examhub.api.responses import success
from examhub.config import get_settings
from examhub.core.domain_types import AUTHORING_ROLES, VIEWING_ROLES
from examhub.core.identity import Identity
from examhub.schemas.catalog import SubjectBody
from examhub.services.owned_resources import OwnedResourceService

router = APIRouter(prefix=f"{get_settings().api_prefix}/subjects", tags=["subjects"])

can_author = [Depends(require_roles(AUTHORING_ROLES))]
can_view = [Depends(require_roles(VIEWING_ROLES))]


def _listing(subjects: list) -> dict:
    return {"subjects": subjects, "count": len(subjects)}


@router.post("/createSubject", dependencies=can_author)
async def create_subject(
    body: SubjectBody,
    identity: Identity = Depends(get_identity),
    service: OwnedResourceService = Depends(get_subject_service),
):
    subject = await service.create(identity, body.model_dump(exclude_unset=True))
    return success("Subject created successfully", subject, status.HTTP_201_CREATED)


@router.get("/getAllSubjects", dependencies=can_view)
async def get_all_subjects(service: OwnedResourceService = Depends(get_subject_service)):
    subjects = await service.list_active()
    return success("Subjects retrieved successfully", _listing(subjects))


@router.get("/getSubjectsByUser", dependencies=can_view)
async def get_subjects_by_user(
    identity: Identity = Depends(get_identity),
    service: OwnedResourceService = Depends(get_subject_service),
):
    subjects = await service.list_active(user_id=identity.user_id)
    return success("Subjects retrieved successfully", _listing(subjects))


@router.get("/getSubjectsByExam/{exam_id}", dependencies=can_view)
async def get_subjects_by_exam(
    exam_id: str, service: OwnedResourceService = Depends(get_subject_service),
):
    subjects = await service.list_active(exam_id=exam_id)
    return success("Subjects retrieved successfully", _listing(subjects))


@router.get("/getSubject/{subject_id}", dependencies=can_view)
async def get_subject(
    subject_id: str, service: OwnedResourceService = Depends(get_subject_service),
):
    subject = await service.get_active(subject_id)
    return success("Subject retrieved successfully", subject)


@router.put("/updateSubject/{subject_id}", dependencies=can_author)
async def update_subject(
    subject_id: str,
    body: SubjectBody,
    identity: Identity = Depends(get_identity),
    service: OwnedResourceService = Depends(get_subject_service),
):
    subject = await service.update(
        identity, subject_id, body.model_dump(exclude_unset=True),
    )
    return success("Subject updated successfully", subject)


@router.delete("/deleteSubject/{subject_id}", dependencies=can_author)
async def delete_subject(
    subject_id: str,
    identity: Identity = Depends(get_identity),
    service: OwnedResourceService = Depends(get_subject_service),
):
    deleted = await service.soft_delete(identity, subject_id)
    return success("Subject deleted successfully", deleted)
