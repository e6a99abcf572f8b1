from contextlib import AbstractContextManager
from typing import Callable, Optional

from sqlalchemy.orm import Session

from models.user import User
from repository.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, session_factory: Callable[..., AbstractContextManager[Session]]):
        self.session_factory = session_factory
        super().__init__(session_factory, User)

    def read_by_google_id(self, google_id: str) -> Optional[User]:
        with self.session_factory() as session:
            return session.query(User).filter(User.google_id == google_id).first()
