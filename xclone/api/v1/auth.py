from fastapi import APIRouter, Depends, status
from xclone.api.deps import get_auth_service
from xclone.schemas.token import Token
from xclone.schemas.user import LoginRequest, RegisterRequest
from xclone.services.auth import AuthService


router = APIRouter()


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(
    user_in: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    access_token = auth_service.register(user_in)
    return Token(access_token=access_token)


@router.post("/login", response_model=Token)
def login(
    credentials: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    access_token = auth_service.login(credentials.username, credentials.password)
    return Token(access_token=access_token)
