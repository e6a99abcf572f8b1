"""Models package"""

from models.user import User
from models.project import Project, ProjectStatus

__all__ = ["User", "Project", "ProjectStatus"]
