"""Enrollment Schemas — exam id lists for enroll/unenroll."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EnrollmentRequest(BaseModel):
    """examIds is shape-checked by the service so the message stays specific."""
    model_config = ConfigDict(populate_by_name=True)

    exam_ids: Any = Field(None, alias="examIds")
