"""Topic Routes — owned topic CRUD; names unique within a subject."""

from fastapi import APIRouter, Depends, status

from examhub.api.dependencies import get_identity, get_topic_service, require_roles
from examhub.api.responses import success
from examhub.config import get_settings
from examhub.core.domain_types import AUTHORING_ROLES, VIEWING_ROLES
from examhub.core.identity import Identity
from examhub.schemas.catalog import TopicBody
from examhub.services.topics import TopicService

router = APIRouter(prefix=f"{get_settings().api_prefix}/topics", tags=["topics"])

can_author = [Depends(require_roles(AUTHORING_ROLES))]
can_view = [Depends(require_roles(VIEWING_ROLES))]


def _listing(topics: list) -> dict:
    return {"topics": topics, "count": len(topics)}


@router.post("/createTopic", dependencies=can_author)
async def create_topic(
    body: TopicBody,
    identity: Identity = Depends(get_identity),
    service: TopicService = Depends(get_topic_service),
):
    topic = await service.create(identity, body.model_dump(exclude_unset=True))
    return success("Topic created successfully", topic, status.HTTP_201_CREATED)


@router.get("/getAllTopics", dependencies=can_view)
async def get_all_topics(service: TopicService = Depends(get_topic_service)):
    topics = await service.list_active()
    return success("Topics retrieved successfully", _listing(topics))


@router.get("/getTopicsByUser", dependencies=can_view)
async def get_topics_by_user(
    identity: Identity = Depends(get_identity),
    service: TopicService = Depends(get_topic_service),
):
    topics = await service.list_active(user_id=identity.user_id)
    return success("Topics retrieved successfully", _listing(topics))


@router.get("/getTopicsBySubject/{subject_id}", dependencies=can_view)
async def get_topics_by_subject(
    subject_id: str, service: TopicService = Depends(get_topic_service),
):
    topics = await service.list_active(subject_id=subject_id)
    return success("Topics retrieved successfully", _listing(topics))


@router.get("/getTopicsByExam/{exam_id}", dependencies=can_view)
async def get_topics_by_exam(
    exam_id: str, service: TopicService = Depends(get_topic_service),
):
    topics = await service.list_by_exam(exam_id)
    return success("Topics retrieved successfully", _listing(topics))


@router.get("/getTopic/{topic_id}", dependencies=can_view)
async def get_topic(topic_id: str, service: TopicService = Depends(get_topic_service)):
    topic = await service.get_active(topic_id)
    return success("Topic retrieved successfully", topic)


@router.put("/updateTopic/{topic_id}", dependencies=can_author)
async def update_topic(
    topic_id: str,
    body: TopicBody,
    identity: Identity = Depends(get_identity),
    service: TopicService = Depends(get_topic_service),
):
    topic = await service.update(identity, topic_id, body.model_dump(exclude_unset=True))
    return success("Topic updated successfully", topic)


@router.delete("/deleteTopic/{topic_id}", dependencies=can_author)
async def delete_topic(
    topic_id: str,
    identity: Identity = Depends(get_identity),
    service: TopicService = Depends(get_topic_service),
):
    deleted = await service.soft_delete(identity, topic_id)
    return success("Topic deleted successfully", deleted)
