"""Catalog Schemas — request bodies for exams, subjects and topics.

Invariants:
    - Fields are optional at the schema level; the services report the first
      missing required field by name
    - Update bodies are applied as partial patches (exclude_unset)
"""

from pydantic import BaseModel

RowIdValue = str | int


class ExamBody(BaseModel):
    name: str | None = None
    description: str | None = None


class SubjectBody(ExamBody):
    exam_id: RowIdValue | None = None


class TopicBody(ExamBody):
    subject_id: RowIdValue | None = None
