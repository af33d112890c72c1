"""User Routes — profile read, admin listing, self update."""

from fastapi import APIRouter, Depends, Query

from examhub.api.dependencies import get_identity, get_user_service, require_roles
from examhub.api.responses import success
from examhub.config import get_settings
from examhub.core.domain_types import Role
from examhub.core.identity import Identity
from examhub.schemas.user import ProfileUpdateBody
from examhub.services.users import UserService

router = APIRouter(prefix=f"{get_settings().api_prefix}/users", tags=["users"])

PROFILE_ROLES = (Role.USER.value, Role.ADMIN.value, Role.TEACHER.value, Role.STUDENT.value)
ALL_PROFILES_ROLES = (Role.ADMIN.value, Role.TEACHER.value)


@router.get("/profile", dependencies=[Depends(require_roles(PROFILE_ROLES))])
async def get_profile(
    user_id: str | None = Query(None, alias="userId"),
    identity: Identity = Depends(get_identity),
    service: UserService = Depends(get_user_service),
):
    profile = await service.get_profile(identity, user_id)
    return success("User profile retrieved successfully", profile)


@router.get("/allUsers", dependencies=[Depends(require_roles(ALL_PROFILES_ROLES))])
async def get_all_profiles(service: UserService = Depends(get_user_service)):
    profiles = await service.list_profiles()
    return success(
        "All user profiles retrieved successfully",
        {"profiles": profiles, "count": len(profiles)},
    )


@router.put("/updateProfile", dependencies=[Depends(require_roles(PROFILE_ROLES))])
async def update_profile(
    body: ProfileUpdateBody,
    identity: Identity = Depends(get_identity),
    service: UserService = Depends(get_user_service),
):
    profile = await service.update_profile(identity, body.model_dump(exclude_unset=True))
    return success("User profile updated successfully", profile)
