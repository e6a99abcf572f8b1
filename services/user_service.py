from loguru import logger

from core.exceptions import AuthError, ValidationError
from models.user import User
from repository.user_repository import UserRepository
from schema.user_schema import UpsertUser
from services.base_service import BaseService
from services.identity_service import IdentityProvider, InvalidTokenError, Principal


class UserService(BaseService):
    def __init__(self, user_repository: UserRepository, identity_provider: IdentityProvider):
        self.user_repository = user_repository
        self.identity_provider = identity_provider
        super().__init__(user_repository)

    def _verify(self, token: str) -> Principal:
        try:
            return self.identity_provider.verify_token(token)
        except InvalidTokenError as e:
            raise AuthError(detail=str(e) or "Invalid token")

    def sign_in(self, token: str | None) -> User:
        """Verify a Google token and create or refresh the local user."""
        if not token:
            raise ValidationError(detail="Token required")

        principal = self._verify(token)
        user = self.user_repository.read_by_google_id(principal.subject)
        if user is None:
            logger.info(f"Creating user for subject {principal.subject}")
            return self.user_repository.create(
                UpsertUser(
                    email=principal.email,
                    name=principal.name,
                    avatar=principal.picture,
                    google_id=principal.subject,
                    access_token=token,
                )
            )
        return self.user_repository.update_attr(user.id, "access_token", token)

    def authenticate(self, token: str | None) -> User:
        """Resolve a bearer token to an existing local user."""
        if not token:
            raise AuthError(detail="Authentication required")
        principal = self._verify(token)
        user = self.user_repository.read_by_google_id(principal.subject)
        if user is None:
            raise AuthError(detail="User not found")
        return user
