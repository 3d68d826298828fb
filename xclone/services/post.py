import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from xclone.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InternalError,
    InvalidOperationError,
    NotFoundError,
    ValidationError,
)
from xclone.crud import post as post_crud
from xclone.db.models.post import Post

logger = logging.getLogger(__name__)

MIN_CONTENT_LENGTH = 1
MAX_CONTENT_LENGTH = 1000


def validate_content(content: str) -> str:
    if content is None or not MIN_CONTENT_LENGTH <= len(content) <= MAX_CONTENT_LENGTH:
        raise ValidationError(
            f"content must be between {MIN_CONTENT_LENGTH} and {MAX_CONTENT_LENGTH} characters"
        )
    return content


class PostService:
    """Posts, quotes and the like/repost edges that point at them.

    Every edge insert or delete is committed together with the matching
    counter update, so ``likes_count`` and ``reposts_count`` always equal
    the number of edge rows.
    """

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"failed to {action}: conflicting record")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error: {str(e)}")
            raise InternalError(f"failed to {action}")

    def _get_post(self, post_id: int) -> Post:
        post = post_crud.get_post(self.db, post_id)
        if not post:
            raise NotFoundError("post not found")
        return post

    def _get_owned_post(self, caller_id: int, post_id: int) -> Post:
        post = self._get_post(post_id)
        if post.user_id != caller_id:
            raise ForbiddenError("you are not owner of this post")
        return post

    def create_post(self, author_id: int, content: str) -> Post:
        validate_content(content)
        try:
            post = post_crud.create_post(self.db, author_id, content)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error: {str(e)}")
            raise InternalError("failed to create post")
        self._commit("create post")
        self.db.refresh(post)
        logger.info("User %s created post %s", author_id, post.id)
        return post

    def get_user_posts(self, owner_id: int) -> list[Post]:
        return post_crud.get_user_posts(self.db, owner_id)

    def get_post_by_id(self, owner_id: int, post_id: int) -> Post:
        post = post_crud.get_user_post(self.db, owner_id, post_id)
        if not post:
            raise NotFoundError("post not found")
        return post

    def update_content(self, caller_id: int, post_id: int, content: str) -> Post:
        validate_content(content)
        post = self._get_owned_post(caller_id, post_id)
        post_crud.update_content(self.db, post, content)
        self._commit("update post")
        self.db.refresh(post)
        logger.info("User %s updated post %s", caller_id, post_id)
        return post

    def delete(self, caller_id: int, post_id: int) -> int:
        """Delete a post with its likes, reposts and quotes (recursively).

        Returns the number of post rows removed.
        """
        self._get_owned_post(caller_id, post_id)
        try:
            levels = post_crud.collect_quote_tree(self.db, post_id)
            deleted = post_crud.delete_posts_cascade(self.db, levels)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error: {str(e)}")
            raise InternalError("failed to delete post")
        self._commit("delete post")
        self.db.expire_all()
        logger.info("User %s deleted post %s (%s posts removed)", caller_id, post_id, deleted)
        return deleted

    def like_post(self, user_id: int, post_id: int) -> None:
        self._get_post(post_id)
        if post_crud.get_like(self.db, user_id, post_id):
            raise ConflictError("you've already liked this post")
        try:
            post_crud.create_like(self.db, user_id, post_id)
            post_crud.change_likes(self.db, post_id, 1)
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("you've already liked this post")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error: {str(e)}")
            raise InternalError("failed to like post")
        self._commit("like post")
        logger.debug("User %s liked post %s", user_id, post_id)

    def unlike_post(self, user_id: int, post_id: int) -> None:
        self._get_post(post_id)
        if not post_crud.get_like(self.db, user_id, post_id):
            raise InvalidOperationError("you already don't like this post")
        try:
            if post_crud.delete_like(self.db, user_id, post_id) == 0:
                self.db.rollback()
                raise InvalidOperationError("you already don't like this post")
            post_crud.change_likes(self.db, post_id, -1)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error: {str(e)}")
            raise InternalError("failed to unlike post")
        self._commit("unlike post")
        logger.debug("User %s unliked post %s", user_id, post_id)

    def repost_post(self, user_id: int, post_id: int) -> None:
        self._get_post(post_id)
        if post_crud.get_repost(self.db, user_id, post_id):
            raise ConflictError("you've already reposted this post")
        try:
            post_crud.create_repost(self.db, user_id, post_id)
            post_crud.change_reposts(self.db, post_id, 1)
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("you've already reposted this post")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error: {str(e)}")
            raise InternalError("failed to repost post")
        self._commit("repost post")
        logger.debug("User %s reposted post %s", user_id, post_id)

    def undo_repost_post(self, user_id: int, post_id: int) -> None:
        self._get_post(post_id)
        if not post_crud.get_repost(self.db, user_id, post_id):
            raise InvalidOperationError("you haven't reposted this post")
        try:
            if post_crud.delete_repost(self.db, user_id, post_id) == 0:
                self.db.rollback()
                raise InvalidOperationError("you haven't reposted this post")
            post_crud.change_reposts(self.db, post_id, -1)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error: {str(e)}")
            raise InternalError("failed to undo repost")
        self._commit("undo repost")
        logger.debug("User %s undid repost of post %s", user_id, post_id)

    def quote_post(self, user_id: int, original_post_id: int, content: str) -> Post:
        validate_content(content)
        self._get_post(original_post_id)
        try:
            quote = post_crud.create_post(self.db, user_id, content, original_post_id=original_post_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error: {str(e)}")
            raise InternalError("failed to quote post")
        self._commit("quote post")
        self.db.refresh(quote)
        logger.info("User %s quoted post %s as post %s", user_id, original_post_id, quote.id)
        return quote

    def get_user_reposts(self, user_id: int) -> list[Post]:
        post_ids = post_crud.get_repost_post_ids(self.db, user_id)
        return post_crud.get_posts_by_ids(self.db, post_ids)
