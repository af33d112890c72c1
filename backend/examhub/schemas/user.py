"""User Schemas — authenticate (upsert) and profile update bodies.

Invariants:
    - role, when present, must be a list of strings (pydantic rejects
      anything else with a 400 validation envelope)
"""

from pydantic import BaseModel


class AuthenticateBody(BaseModel):
    user_id: str | None = None
    name: str | None = None
    role: list[str] | None = None
    email: str | None = None
    login_platform: str | None = None
    mobile_no: str | None = None
    contact_number: str | None = None
    gender: str | None = None
    dob: str | None = None


class ProfileUpdateBody(BaseModel):
    name: str | None = None
    contact_number: str | None = None
    dob: str | None = None
    gender: str | None = None
