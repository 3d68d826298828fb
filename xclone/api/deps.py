from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from pydantic import ValidationError
from sqlalchemy.orm import Session

from xclone.core.config import Settings, get_settings
from xclone.core.exceptions import AuthError
from xclone.db.session import get_db
from xclone.schemas.token import TokenData
from xclone.services.auth import AuthService
from xclone.services.post import PostService
from xclone.services.user import UserService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


def get_auth_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> AuthService:
    return AuthService(db, settings)


def get_user_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
) -> UserService:
    return UserService(db, settings)


def get_post_service(db: Session = Depends(get_db)) -> PostService:
    return PostService(db)


def get_current_token(
    token: str = Depends(oauth2_scheme),
    auth_service: AuthService = Depends(get_auth_service)
) -> TokenData:
    claims = auth_service.validate_access_token(token)
    try:
        return TokenData(**claims)
    except ValidationError:
        raise AuthError("invalid token claims")


def get_current_user_id(
    request: Request,
    token_data: TokenData = Depends(get_current_token)
) -> int:
    """Bearer-token gate for protected routes.

    Missing headers are rejected by the OAuth2 scheme with 401; invalid
    tokens raise AuthError. The authenticated id is also left on
    ``request.state.user_id``.
    """
    request.state.user_id = token_data.user_id
    return token_data.user_id
