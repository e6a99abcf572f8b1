"""Schema package"""

from .project_schema import (
    CreateProject,
    ImportOptions,
    Project,
    UpdateProject,
)
from .user_schema import (
    CurrentUserResponse,
    GoogleSignIn,
    SignInResponse,
    UpsertUser,
    User,
)

__all__ = [
    "CreateProject",
    "ImportOptions",
    "Project",
    "UpdateProject",
    "CurrentUserResponse",
    "GoogleSignIn",
    "SignInResponse",
    "UpsertUser",
    "User",
]
