import logging
import time

from jose import JWTError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from xclone.core.config import Settings
from xclone.core.exceptions import AuthError, ConflictError, InternalError
from xclone.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from xclone.crud import user as user_crud
from xclone.db.models.user import User
from xclone.schemas.user import RegisterRequest

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def register(self, candidate: RegisterRequest) -> str:
        if user_crud.get_user_by_username(self.db, candidate.username):
            raise ConflictError("user already exists")

        fields = candidate.model_dump()
        fields["password"] = hash_password(candidate.password, self.settings.bcrypt_rounds)
        try:
            user = user_crud.create_user(self.db, **fields)
            self.db.commit()
        except IntegrityError:
            # lost a race against a concurrent registration
            self.db.rollback()
            raise ConflictError("user already exists")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error: {str(e)}")
            raise InternalError("failed to register user")

        self.db.refresh(user)
        logger.info("Registered user %s (id=%s)", user.username, user.id)
        return self.generate_access_token(user)

    def login(self, username: str, password: str) -> str:
        user = user_crud.get_user_by_username(self.db, username)
        # same message for both cases so usernames can't be probed
        if not user or not verify_password(password, user.password):
            raise AuthError("invalid username or password")
        return self.generate_access_token(user)

    def generate_access_token(self, user: User) -> str:
        claims = {
            "user_id": user.id,
            "username": user.username,
            "first_name": user.first_name,
            "last_name": user.last_name,
        }
        return create_access_token(claims, self.settings.jwt_secret, self.settings.access_token_ttl)

    def validate_access_token(self, token: str) -> dict:
        try:
            claims = decode_access_token(token, self.settings.jwt_secret)
        except JWTError:
            raise AuthError("invalid token")

        exp = claims.get("exp")
        if not isinstance(exp, (int, float)) or exp <= time.time():
            raise AuthError("invalid token")
        if not isinstance(claims.get("user_id"), int):
            raise AuthError("invalid token claims")
        return claims
