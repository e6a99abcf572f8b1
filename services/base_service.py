from typing import Any

from core.exceptions import NotFoundError
from repository.base_repository import BaseRepository


class BaseService:
    def __init__(self, repository: BaseRepository) -> None:
        self._repository = repository

    def get_by_id(self, id: int) -> Any:
        row = self._repository.read_by_id(id)
        if row is None:
            raise NotFoundError(detail=f"{self._repository.model.__name__} not found")
        return row
