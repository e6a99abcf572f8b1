from typing import Optional

from pydantic import Field

from schema.base_schema import CamelModel, ModelBaseInfo


class User(ModelBaseInfo):
    email: str
    name: str
    avatar: Optional[str] = None
    google_id: str


class UpsertUser(CamelModel):
    email: str
    name: str
    avatar: Optional[str] = None
    google_id: str
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None


class GoogleSignIn(CamelModel):
    token: Optional[str] = Field(default=None)


class SignInResponse(CamelModel):
    user: User
    token: str


class CurrentUserResponse(CamelModel):
    user: User
