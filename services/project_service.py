from typing import List

from loguru import logger

from core.exceptions import NotFoundError
from models.project import Project, ProjectStatus
from models.user import User
from repository.project_repository import ProjectRepository
from schema.project_schema import CreateProject, UpdateProject
from services.base_service import BaseService
from services.import_service import ImportStatusEngine
from util.source_url import parse_source_url


class ProjectService(BaseService):
    def __init__(self, project_repository: ProjectRepository, import_engine: ImportStatusEngine):
        self.project_repository = project_repository
        self.import_engine = import_engine
        super().__init__(project_repository)

    def list_for(self, user: User) -> List[Project]:
        return self.project_repository.list_by_owner(user.id)

    def get_owned(self, project_id: int, user: User) -> Project:
        project = self.get_by_id(project_id)
        if project.owner_id != user.id:
            raise NotFoundError(detail="Project not found")
        return project

    def add(self, schema: CreateProject, user: User) -> Project:
        """Persist a pending project; the caller starts its import."""
        source_url = schema.source_url.strip()
        source = parse_source_url(source_url)

        project = self.project_repository.create(
            {
                "owner_id": user.id,
                "source_url": source_url,
                "display_name": source.display_name,
                "status": ProjectStatus.PENDING.value,
                "include_history": schema.include_history,
                "install_dependencies": schema.install_dependencies,
                "create_replit": schema.create_replit,
            }
        )
        logger.info(f"Created project {project.id} ({project.display_name}) for user {user.id}")
        return project

    def start_import(self, project: Project) -> None:
        # must run on the event loop that owns the import tasks
        self.import_engine.start_import(project)

    def patch(self, project_id: int, schema: UpdateProject, user: User) -> Project:
        self.get_owned(project_id, user)
        updated = self.project_repository.update(project_id, schema)
        if updated is None:
            raise NotFoundError(detail="Project not found")
        return updated

    def remove(self, project_id: int, user: User) -> None:
        self.get_owned(project_id, user)
        self.import_engine.cancel(project_id)
        if not self.project_repository.delete(project_id):
            raise NotFoundError(detail="Project not found")
        logger.info(f"Deleted project {project_id}")
