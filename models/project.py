from enum import Enum
from typing import Optional

from sqlmodel import Field

from models.base_model import BaseModel


class ProjectStatus(str, Enum):
    PENDING = "pending"
    CLONING = "cloning"
    SETTING_UP = "setting_up"
    READY = "ready"
    FAILED = "failed"


ACTIVE_STATUSES = frozenset({ProjectStatus.PENDING, ProjectStatus.CLONING, ProjectStatus.SETTING_UP})


class Project(BaseModel, table=True):
    owner_id: int = Field(foreign_key="user.id", index=True)
    source_url: str = Field()
    display_name: str = Field()
    status: str = Field(default=ProjectStatus.PENDING.value, index=True)
    result_url: Optional[str] = Field(default=None)
    error_message: Optional[str] = Field(default=None)

    # recorded for display, the simulated pipeline ignores them
    include_history: bool = Field(default=True)
    install_dependencies: bool = Field(default=True)
    create_replit: bool = Field(default=False)
