"""Request Dependencies — identity resolution, role gate, and service wiring.

Invariants:
    - get_identity resolves once per request (FastAPI dependency cache) and
      stores the result on request.state.identity
    - require_roles(()) admits every caller, including callers with no roles
    - Services receive the table gateway through get_table_client, so tests
      override a single dependency
"""

from collections.abc import Iterable

from fastapi import Depends, Request

from examhub.config import get_settings
from examhub.core.access import check_roles
from examhub.core.identity import HeaderIdentityProvider, Identity, IdentityProvider
from examhub.core.resource_policy import SUBJECT_POLICY
from examhub.infrastructure.remote_tables import RemoteTableClient, get_table_client
from examhub.services.enrollments import EnrollmentService
from examhub.services.exams import ExamService
from examhub.services.owned_resources import OwnedResourceService
from examhub.services.topics import TopicService
from examhub.services.translations import TranslationService
from examhub.services.users import UserService


def get_identity_provider() -> IdentityProvider:
    settings = get_settings()
    return HeaderIdentityProvider(settings.identity_header, settings.roles_header)


def get_identity(
    request: Request,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> Identity:
    identity = provider.resolve(request.headers)
    request.state.identity = identity
    return identity


def require_roles(allowed: Iterable[str]):
    """Build a route dependency that admits callers holding any of `allowed`."""
    allowed = frozenset(allowed)

    def role_gate(identity: Identity = Depends(get_identity)) -> Identity:
        check_roles(identity, allowed)
        return identity

    return role_gate


# ─── Services ────────────────────────────────────────────────────

def get_exam_service(tables: RemoteTableClient = Depends(get_table_client)) -> ExamService:
    return ExamService(tables)


def get_subject_service(
    tables: RemoteTableClient = Depends(get_table_client),
) -> OwnedResourceService:
    return OwnedResourceService(tables, SUBJECT_POLICY)


def get_topic_service(tables: RemoteTableClient = Depends(get_table_client)) -> TopicService:
    return TopicService(tables)


def get_enrollment_service(
    tables: RemoteTableClient = Depends(get_table_client),
) -> EnrollmentService:
    return EnrollmentService(tables)


def get_translation_service(
    tables: RemoteTableClient = Depends(get_table_client),
) -> TranslationService:
    return TranslationService(tables)


def get_user_service(tables: RemoteTableClient = Depends(get_table_client)) -> UserService:
    return UserService(tables)
