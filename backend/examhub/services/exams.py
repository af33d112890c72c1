"""Exam Service — owned exam CRUD plus the exam → subjects → topics tree.

Invariants:
    - Nested read only includes active exam, active subjects, active topics
    - One fetch per subject for its topics (N+1 shape); the per-subject fetches
      run concurrently
"""

import asyncio

from examhub.core.domain_types import ACTIVE_FILTER, Table
from examhub.core.repository_protocols import Row, TableGateway
from examhub.core.resource_policy import EXAM_POLICY
from examhub.services.common import remote_operation
from examhub.services.owned_resources import OwnedResourceService


class ExamService(OwnedResourceService):

    def __init__(self, tables: TableGateway):
        super().__init__(tables, EXAM_POLICY)

    async def get_with_subjects_and_topics(self, exam_id: str) -> Row:
        exam = await self.get_active(exam_id)
        with remote_operation("retrieve exam with subjects and topics"):
            subjects = await self.tables.fetch(
                Table.SUBJECTS.value, {"exam_id": exam_id, **ACTIVE_FILTER},
            )
            topic_lists = await asyncio.gather(*(
                self.tables.fetch(
                    Table.TOPICS.value, {"subject_id": s["id"], **ACTIVE_FILTER},
                )
                for s in subjects
            ))
        return {
            **exam,
            "subjects": [
                {**subject, "topics": topics or []}
                for subject, topics in zip(subjects, topic_lists)
            ],
        }
