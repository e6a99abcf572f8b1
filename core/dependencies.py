from typing import Optional

from dependency_injector.wiring import Provide
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.container import Container
from core.middleware import inject
from models.user import User
from services.user_service import UserService

bearer = HTTPBearer(auto_error=False)


def get_bearer_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer)) -> Optional[str]:
    return credentials.credentials if credentials else None


@inject
def get_current_user(
    token: Optional[str] = Depends(get_bearer_token),
    service: UserService = Depends(Provide[Container.user_service]),
) -> User:
    return service.authenticate(token)
