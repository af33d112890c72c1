"""Auth Routes — profile upsert on login.

Invariants:
    - No role gate: authenticate is how a user row comes to exist
    - Same user_id twice updates the row in place
"""

from fastapi import APIRouter, Depends

from examhub.api.dependencies import get_user_service
from examhub.api.responses import success
from examhub.config import get_settings
from examhub.schemas.user import AuthenticateBody
from examhub.services.users import UserService

router = APIRouter(prefix=f"{get_settings().api_prefix}/auth", tags=["auth"])


@router.post("/authenticate")
async def authenticate(
    body: AuthenticateBody,
    service: UserService = Depends(get_user_service),
):
    user = await service.authenticate(body.model_dump(exclude_none=True))
    return success("User authenticated successfully", user)
