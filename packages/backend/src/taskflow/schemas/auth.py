"""Pydantic schemas for registration, login and the current user.

Learn: Request fields are Optional on purpose. Presence, shape and
strength rules live in taskflow.validators, which reports every bad
field at once with readable messages. The schemas only pin types.

UserPublic is the only user shape the API ever returns; it has no
password_hash field, so the hash can't leak through a response.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    username: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserPublic(BaseModel):
    id: uuid.UUID
    email: str
    username: Optional[str] = None

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserPublic


class ProfileRead(UserPublic):
    created_at: datetime
    task_count: int


class MeResponse(BaseModel):
    user: ProfileRead
