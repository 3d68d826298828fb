import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from xclone.core.config import Settings
from xclone.core.exceptions import (
    AuthError,
    ConflictError,
    InternalError,
    InvalidOperationError,
    NotFoundError,
    ValidationError,
)
from xclone.core.security import hash_password, verify_password
from xclone.crud import user as user_crud
from xclone.db.models.user import User
from xclone.schemas.user import ProfileUpdate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def get_user_by_id(self, user_id: int) -> User:
        user = user_crud.get_user_by_id(self.db, user_id)
        if not user:
            raise NotFoundError("user not found")
        return user

    def find_user_by_username(self, username: str) -> User:
        user = user_crud.get_user_by_username(self.db, username)
        if not user:
            raise NotFoundError("user not found")
        return user

    def follow_user(self, follower_id: int, following_id: int) -> None:
        if follower_id == following_id:
            raise InvalidOperationError("you cannot follow or stop following yourself")
        self.get_user_by_id(following_id)

        if user_crud.get_follow(self.db, follower_id, following_id):
            raise ConflictError("you are already following this user")
        try:
            user_crud.create_follow(self.db, follower_id, following_id)
            user_crud.increment_follow_counters(self.db, follower_id, following_id)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("you are already following this user")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error: {str(e)}")
            raise InternalError("failed to follow user")
        logger.info("User %s followed user %s", follower_id, following_id)

    def stop_following_user(self, follower_id: int, following_id: int) -> None:
        if follower_id == following_id:
            raise InvalidOperationError("you cannot follow or stop following yourself")

        if not user_crud.get_follow(self.db, follower_id, following_id):
            raise NotFoundError("you are not following this user")
        try:
            # a concurrent unfollow may have removed the edge already
            if user_crud.delete_follow(self.db, follower_id, following_id) == 0:
                self.db.rollback()
                raise NotFoundError("you are not following this user")
            user_crud.decrement_follow_counters(self.db, follower_id, following_id)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error: {str(e)}")
            raise InternalError("failed to stop following user")
        logger.info("User %s stopped following user %s", follower_id, following_id)

    def get_followers(self, user_id: int) -> list[User]:
        return user_crud.get_followers(self.db, user_id)

    def get_following(self, user_id: int) -> list[User]:
        return user_crud.get_following(self.db, user_id)

    def change_profile(self, user_id: int, patch: ProfileUpdate) -> User:
        user = self.get_user_by_id(user_id)
        fields = {
            key: value
            for key, value in patch.model_dump(exclude_unset=True).items()
            if value is not None
        }
        if not fields:
            return user

        new_username = fields.get("username")
        if new_username and new_username != user.username:
            if user_crud.get_user_by_username(self.db, new_username):
                raise ConflictError("username is already taken")
        try:
            user_crud.update_user_fields(self.db, user, fields)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("username is already taken")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error: {str(e)}")
            raise InternalError("failed to update profile")

        self.db.refresh(user)
        logger.info("Updated profile fields %s for user %s", sorted(fields), user_id)
        return user

    def change_password(self, user_id: int, old_password: str, new_password: str, confirm_password: str) -> None:
        if old_password == new_password:
            raise ValidationError("the new password cannot be equal to the old password")
        if new_password != confirm_password:
            raise ValidationError("failed password confirmation")

        user = self.get_user_by_id(user_id)
        if not verify_password(old_password, user.password):
            raise AuthError("invalid old_password")

        hashed = hash_password(new_password, self.settings.bcrypt_rounds)
        try:
            user_crud.update_password(self.db, user, hashed)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error: {str(e)}")
            raise InternalError("failed to change password")
        logger.info("Changed password for user %s", user_id)
