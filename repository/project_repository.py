from contextlib import AbstractContextManager
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from models.project import Project
from repository.base_repository import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    def __init__(self, session_factory: Callable[..., AbstractContextManager[Session]]):
        self.session_factory = session_factory
        super().__init__(session_factory, Project)

    def get(self, id: int) -> Optional[Project]:
        return self.read_by_id(id)

    def list_by_owner(self, owner_id: int) -> List[Project]:
        """Newest first."""
        with self.session_factory() as session:
            return (
                session.query(Project)
                .filter(Project.owner_id == owner_id)
                .order_by(Project.created_at.desc(), Project.id.desc())
                .all()
            )

    def delete(self, id: int) -> bool:
        return self.delete_by_id(id)
