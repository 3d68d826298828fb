from typing import Optional
from sqlalchemy.orm import Session
from xclone.db.models.post import Post
from xclone.db.models.like import Like
from xclone.db.models.repost import Repost


def create_post(db: Session, user_id: int, content: str, original_post_id: Optional[int] = None) -> Post:
    post = Post(user_id=user_id, content=content, original_post_id=original_post_id)
    db.add(post)
    db.flush()
    return post


def get_post(db: Session, post_id: int) -> Optional[Post]:
    return db.query(Post).filter(Post.id == post_id).first()


def get_user_post(db: Session, user_id: int, post_id: int) -> Optional[Post]:
    return db.query(Post).filter(Post.id == post_id, Post.user_id == user_id).first()


def get_user_posts(db: Session, user_id: int) -> list[Post]:
    return db.query(Post)\
        .filter(Post.user_id == user_id)\
        .order_by(Post.created_at.desc(), Post.id.desc())\
        .all()


def update_content(db: Session, post: Post, content: str) -> Post:
    post.content = content
    db.flush()
    return post


# likes

def get_like(db: Session, user_id: int, post_id: int) -> Optional[Like]:
    return db.query(Like).filter(Like.user_id == user_id, Like.liked_post_id == post_id).first()


def create_like(db: Session, user_id: int, post_id: int) -> Like:
    like = Like(user_id=user_id, liked_post_id=post_id)
    db.add(like)
    db.flush()
    return like


def delete_like(db: Session, user_id: int, post_id: int) -> int:
    return db.query(Like)\
        .filter(Like.user_id == user_id, Like.liked_post_id == post_id)\
        .delete(synchronize_session=False)


def change_likes(db: Session, post_id: int, delta: int) -> None:
    query = db.query(Post).filter(Post.id == post_id)
    if delta < 0:
        query = query.filter(Post.likes_count >= -delta)
    query.update({Post.likes_count: Post.likes_count + delta}, synchronize_session=False)


# reposts

def get_repost(db: Session, user_id: int, post_id: int) -> Optional[Repost]:
    return db.query(Repost).filter(Repost.user_id == user_id, Repost.reposted_post_id == post_id).first()


def create_repost(db: Session, user_id: int, post_id: int) -> Repost:
    repost = Repost(user_id=user_id, reposted_post_id=post_id)
    db.add(repost)
    db.flush()
    return repost


def delete_repost(db: Session, user_id: int, post_id: int) -> int:
    return db.query(Repost)\
        .filter(Repost.user_id == user_id, Repost.reposted_post_id == post_id)\
        .delete(synchronize_session=False)


def change_reposts(db: Session, post_id: int, delta: int) -> None:
    query = db.query(Post).filter(Post.id == post_id)
    if delta < 0:
        query = query.filter(Post.reposts_count >= -delta)
    query.update({Post.reposts_count: Post.reposts_count + delta}, synchronize_session=False)


def get_repost_post_ids(db: Session, user_id: int) -> list[int]:
    rows = db.query(Repost.reposted_post_id)\
        .filter(Repost.user_id == user_id)\
        .order_by(Repost.created_at.desc())\
        .all()
    return [post_id for (post_id,) in rows]


def get_posts_by_ids(db: Session, post_ids: list[int]) -> list[Post]:
    if not post_ids:
        return []
    posts = db.query(Post).filter(Post.id.in_(post_ids)).all()
    # keep the order of post_ids
    by_id = {post.id: post for post in posts}
    return [by_id[post_id] for post_id in post_ids if post_id in by_id]


# cascade delete

def collect_quote_tree(db: Session, post_id: int) -> list[list[int]]:
    """Return the post and all of its transitive quotes, grouped by depth.

    Level 0 is ``[post_id]``, level 1 its direct quotes, and so on.
    """
    levels = [[post_id]]
    seen = {post_id}
    while True:
        rows = db.query(Post.id).filter(Post.original_post_id.in_(levels[-1])).all()
        next_level = [quote_id for (quote_id,) in rows if quote_id not in seen]
        if not next_level:
            return levels
        seen.update(next_level)
        levels.append(next_level)


def delete_posts_cascade(db: Session, levels: list[list[int]]) -> int:
    """Delete likes, reposts and posts for every level, deepest level first."""
    deleted = 0
    for post_ids in reversed(levels):
        db.query(Like).filter(Like.liked_post_id.in_(post_ids)).delete(synchronize_session=False)
        db.query(Repost).filter(Repost.reposted_post_id.in_(post_ids)).delete(synchronize_session=False)
        deleted += db.query(Post).filter(Post.id.in_(post_ids)).delete(synchronize_session=False)
    return deleted
