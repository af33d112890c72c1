"""Topic Service — owned topic CRUD plus topics across an exam's subjects."""

import asyncio

from examhub.core.domain_types import ACTIVE_FILTER, Table
from examhub.core.repository_protocols import Row, TableGateway
from examhub.core.resource_policy import TOPIC_POLICY
from examhub.services.common import remote_operation
from examhub.services.owned_resources import OwnedResourceService


class TopicService(OwnedResourceService):

    def __init__(self, tables: TableGateway):
        super().__init__(tables, TOPIC_POLICY)

    async def list_by_exam(self, exam_id: str) -> list[Row]:
        """Active topics of every active subject in the exam, each with its subject."""
        with remote_operation("retrieve topics"):
            subjects = await self.tables.fetch(
                Table.SUBJECTS.value, {"exam_id": exam_id, **ACTIVE_FILTER},
            )
            if not subjects:
                return []
            topic_lists = await asyncio.gather(*(
                self.tables.fetch(
                    self.table, {"subject_id": s["id"], **ACTIVE_FILTER},
                )
                for s in subjects
            ))
        return [
            {**topic, "subject": subject}
            for subject, topics in zip(subjects, topic_lists)
            for topic in topics
        ]
