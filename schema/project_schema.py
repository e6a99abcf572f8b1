from typing import Optional

from pydantic import ConfigDict, Field, field_validator

from models.project import ProjectStatus
from schema.base_schema import CamelModel, ModelBaseInfo


class ImportOptions(CamelModel):
    include_history: bool = True
    install_dependencies: bool = True
    create_replit: bool = False


class CreateProject(ImportOptions):
    source_url: str = Field(min_length=1)


class Project(ModelBaseInfo, ImportOptions):
    owner_id: int
    source_url: str
    display_name: str
    status: ProjectStatus
    result_url: Optional[str] = None
    error_message: Optional[str] = None


class UpdateProject(CamelModel):
    """Administrative override of the pipeline-owned fields."""

    model_config = ConfigDict(extra="forbid")

    status: Optional[ProjectStatus] = None
    result_url: Optional[str] = None
    error_message: Optional[str] = None

    @field_validator("status")
    @classmethod
    def status_not_null(cls, value):
        if value is None:
            raise ValueError("status cannot be null")
        return value
