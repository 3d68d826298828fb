from typing import Optional
from sqlalchemy.orm import Session
from xclone.db.models.user import User
from xclone.db.models.follower import Follower


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def create_user(db: Session, **fields) -> User:
    user = User(**fields)
    db.add(user)
    db.flush()
    return user


def get_follow(db: Session, follower_id: int, following_id: int) -> Optional[Follower]:
    return db.query(Follower).filter(
        Follower.follower_id == follower_id,
        Follower.following_id == following_id
    ).first()


def create_follow(db: Session, follower_id: int, following_id: int) -> Follower:
    follow = Follower(follower_id=follower_id, following_id=following_id)
    db.add(follow)
    db.flush()
    return follow


def delete_follow(db: Session, follower_id: int, following_id: int) -> int:
    return db.query(Follower).filter(
        Follower.follower_id == follower_id,
        Follower.following_id == following_id
    ).delete(synchronize_session=False)


def increment_follow_counters(db: Session, follower_id: int, following_id: int) -> None:
    db.query(User).filter(User.id == following_id)\
        .update({User.followers_count: User.followers_count + 1}, synchronize_session=False)
    db.query(User).filter(User.id == follower_id)\
        .update({User.following_count: User.following_count + 1}, synchronize_session=False)


def decrement_follow_counters(db: Session, follower_id: int, following_id: int) -> None:
    db.query(User).filter(User.id == following_id, User.followers_count > 0)\
        .update({User.followers_count: User.followers_count - 1}, synchronize_session=False)
    db.query(User).filter(User.id == follower_id, User.following_count > 0)\
        .update({User.following_count: User.following_count - 1}, synchronize_session=False)


def get_followers(db: Session, user_id: int) -> list[User]:
    return db.query(User)\
        .join(Follower, Follower.follower_id == User.id)\
        .filter(Follower.following_id == user_id)\
        .order_by(Follower.created_at.desc(), User.id)\
        .all()


def get_following(db: Session, user_id: int) -> list[User]:
    return db.query(User)\
        .join(Follower, Follower.following_id == User.id)\
        .filter(Follower.follower_id == user_id)\
        .order_by(Follower.created_at.desc(), User.id)\
        .all()


def update_user_fields(db: Session, user: User, fields: dict) -> User:
    for key, value in fields.items():
        setattr(user, key, value)
    db.flush()
    return user


def update_password(db: Session, user: User, hashed_password: str) -> User:
    user.password = hashed_password
    db.flush()
    return user
