"""Domain Types — role, language and table vocabulary shared by every layer.

Invariants:
    - Roles are plain strings on the wire; Role enum values are the only names
      the access policy recognizes
    - ANONYMOUS_USER_ID is the identity of any caller without an identity header
    - Table names live here and nowhere else
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", str)

ANONYMOUS_USER_ID = UserId("anonymous")


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """Roles carried in the roles header."""
    ADMIN = "admin"
    TEACHER = "teacher"
    ORG = "org"
    STUDENT = "student"
    USER = "user"


class Language(str, Enum):
    """Translation columns; ENGLISH is the base text."""
    ENGLISH = "english"
    HINDI = "hindi"
    MARATHI = "marathi"


class Table(str, Enum):
    """Remote table names."""
    USERS = "users"
    EXAMS = "exams"
    SUBJECTS = "subjects"
    TOPICS = "topics"
    ENROLLMENTS = "enrollments"
    TRANSLATIONS = "translations"


# ─── Role Sets ───────────────────────────────────────────────────

AUTHORING_ROLES = frozenset({Role.TEACHER.value, Role.ADMIN.value, Role.ORG.value})
VIEWING_ROLES = AUTHORING_ROLES | {Role.STUDENT.value}
MEMBER_ROLES = frozenset({
    Role.USER.value, Role.STUDENT.value, Role.TEACHER.value, Role.ADMIN.value,
})
ELEVATED_ROLES = frozenset({Role.ADMIN.value})

# Soft-delete filter for every "active" read path
ACTIVE_FILTER = {"is_active": True, "is_deleted": False}
