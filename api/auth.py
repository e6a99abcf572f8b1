from dependency_injector.wiring import Provide
from fastapi import APIRouter, Depends

from core.container import Container
from core.dependencies import get_current_user
from core.middleware import inject
from models.user import User
from schema.base_schema import Message
from schema.user_schema import CurrentUserResponse, GoogleSignIn, SignInResponse
from schema.user_schema import User as UserSchema
from services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/google", response_model=SignInResponse)
@inject
def sign_in_with_google(
       body: GoogleSignIn,
       service: UserService = Depends(Provide[Container.user_service])
):
    user = service.sign_in(body.token)
    return SignInResponse(user=UserSchema.model_validate(user), token=body.token)


@router.get("/me", response_model=CurrentUserResponse)
def me(user: User = Depends(get_current_user)):
    return CurrentUserResponse(user=UserSchema.model_validate(user))


@router.post("/logout", response_model=Message)
def logout(user: User = Depends(get_current_user)):
    # tokens are issued by the identity provider, nothing to revoke locally
    return Message(message="Logged out successfully")
