from typing import Optional

from sqlmodel import Field

from models.base_model import BaseModel


class User(BaseModel, table=True):
    email: str = Field(unique=True)
    name: str = Field()
    avatar: Optional[str] = Field(default=None)
    google_id: str = Field(unique=True, index=True)
    access_token: Optional[str] = Field(default=None)
    refresh_token: Optional[str] = Field(default=None)
