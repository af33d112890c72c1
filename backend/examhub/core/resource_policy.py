"""Resource Policy — the parameters of one owned, soft-deletable resource.

Invariants:
    - name is always required; parent_field (if any) is required on create
    - creator/manager role sets are checked inside the service, on top of the
      route-level role gate
    - elevated roles bypass ownership, never the manager-role requirement
"""

from dataclasses import dataclass

from examhub.core.domain_types import (
    AUTHORING_ROLES, ELEVATED_ROLES, Table,
)


@dataclass(frozen=True)
class ResourcePolicy:
    table: Table
    label: str                      # "Exam", used in messages
    plural: str                     # "exams", list payload key
    parent_field: str | None = None
    unique_within_parent: bool = False
    editable_fields: tuple[str, ...] = ("name", "description")
    creator_roles: frozenset[str] = AUTHORING_ROLES
    manager_roles: frozenset[str] = AUTHORING_ROLES
    elevated_roles: frozenset[str] = ELEVATED_ROLES
    owner_field: str = "user_id"

    @property
    def required_on_create(self) -> tuple[str, ...]:
        return ("name",) + ((self.parent_field,) if self.parent_field else ())

    @property
    def noun(self) -> str:
        return self.label.lower()

    @property
    def a_noun(self) -> str:
        return f"{'an' if self.noun[0] in 'aeiou' else 'a'} {self.noun}"

    @property
    def roles_phrase(self) -> str:
        """Manager roles as prose, e.g. admin, org, or teacher."""
        *head, last = sorted(self.manager_roles)
        return f"{', '.join(head)}, or {last}" if head else last


EXAM_POLICY = ResourcePolicy(
    table=Table.EXAMS, label="Exam", plural="exams",
)

SUBJECT_POLICY = ResourcePolicy(
    table=Table.SUBJECTS, label="Subject", plural="subjects",
    parent_field="exam_id",
    editable_fields=("name", "description", "exam_id"),
)

TOPIC_POLICY = ResourcePolicy(
    table=Table.TOPICS, label="Topic", plural="topics",
    parent_field="subject_id", unique_within_parent=True,
    editable_fields=("name", "description", "subject_id"),
)
