"""Service-level tests for cascades, transactions and counters."""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from xclone.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InternalError,
    InvalidOperationError,
    NotFoundError,
    ValidationError,
)
from xclone.crud import post as post_crud
from xclone.crud import user as user_crud
from xclone.db.models.follower import Follower
from xclone.db.models.like import Like
from xclone.db.models.post import Post
from xclone.db.models.repost import Repost
from xclone.db.models.user import User
from xclone.services.post import PostService
from xclone.services.user import UserService


@pytest.fixture
def service(db):
    return PostService(db)


@pytest.fixture
def users(make_user):
    return [make_user(name) for name in ("alice01", "bobby02", "carol03")]


def test_create_post_validates_content(service, users):
    with pytest.raises(ValidationError):
        service.create_post(users[0].id, "")
    with pytest.raises(ValidationError):
        service.create_post(users[0].id, "x" * 1001)


def test_update_checks_existence_before_ownership(service, users):
    post = service.create_post(users[0].id, "hello")
    with pytest.raises(NotFoundError):
        service.update_content(users[0].id, post.id + 100, "edited")
    with pytest.raises(ForbiddenError):
        service.update_content(users[1].id, post.id, "edited")


def test_delete_removes_deep_quote_chain(service, db, users):
    alice, bob, carol = users
    root = service.create_post(alice.id, "root")
    chain = [root]
    for depth in range(5):
        author = users[depth % 3]
        chain.append(service.quote_post(author.id, chain[-1].id, f"quote {depth}"))
    # a sibling branch off the first quote
    service.quote_post(carol.id, chain[1].id, "branch")
    unrelated = service.create_post(bob.id, "unrelated")

    for post in chain:
        service.like_post(carol.id, post.id)
        service.repost_post(bob.id, post.id)
    service.like_post(alice.id, unrelated.id)

    deleted = service.delete(alice.id, root.id)

    assert deleted == 7
    assert db.query(Post).all() == [unrelated]
    assert db.query(Like).count() == 1
    assert db.query(Repost).count() == 0


def test_delete_quote_leaves_original(service, db, users):
    alice, bob, _ = users
    root = service.create_post(alice.id, "root")
    quote = service.quote_post(bob.id, root.id, "quote")

    service.delete(bob.id, quote.id)

    assert [post.id for post in db.query(Post).all()] == [root.id]


def test_failed_delete_rolls_back_everything(service, db, users, monkeypatch):
    alice, bob, _ = users
    post = service.create_post(alice.id, "root")
    service.like_post(bob.id, post.id)
    service.repost_post(bob.id, post.id)

    def failing_cascade(session, levels):
        session.query(Like).delete(synchronize_session=False)
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(post_crud, "delete_posts_cascade", failing_cascade)

    with pytest.raises(InternalError):
        service.delete(alice.id, post.id)

    assert db.query(Like).count() == 1
    assert db.query(Repost).count() == 1
    assert db.query(Post).count() == 1


def test_like_missing_post(service, users):
    with pytest.raises(NotFoundError):
        service.like_post(users[0].id, 12345)


def test_like_conflict_and_unlike_without_like(service, db, users):
    alice, bob, _ = users
    post = service.create_post(alice.id, "root")

    with pytest.raises(InvalidOperationError):
        service.unlike_post(bob.id, post.id)

    service.like_post(bob.id, post.id)
    with pytest.raises(ConflictError):
        service.like_post(bob.id, post.id)

    db.expire_all()
    assert db.get(Post, post.id).likes_count == 1


def test_concurrent_duplicate_like_becomes_conflict(service, db, session_factory, users, monkeypatch):
    alice, bob, _ = users
    post = service.create_post(alice.id, "root")
    service.like_post(bob.id, post.id)

    # simulate losing the race: the existence check sees nothing
    monkeypatch.setattr(post_crud, "get_like", lambda *args: None)
    other_request = session_factory()
    with pytest.raises(ConflictError):
        PostService(other_request).like_post(bob.id, post.id)
    other_request.close()

    db.expire_all()
    assert db.get(Post, post.id).likes_count == 1
    assert db.query(Like).count() == 1


def test_counter_never_goes_negative(service, db, users):
    alice, bob, _ = users
    post = service.create_post(alice.id, "root")
    post_crud.change_likes(db, post.id, -1)
    post_crud.change_reposts(db, post.id, -1)
    db.commit()

    db.expire_all()
    assert db.get(Post, post.id).likes_count == 0
    assert db.get(Post, post.id).reposts_count == 0


def test_user_reposts_two_step_lookup(service, users):
    alice, bob, _ = users
    first = service.create_post(alice.id, "first")
    second = service.create_post(alice.id, "second")
    service.repost_post(bob.id, first.id)
    service.repost_post(bob.id, second.id)

    assert {post.id for post in service.get_user_reposts(bob.id)} == {first.id, second.id}
    assert service.get_user_reposts(alice.id) == []


def test_quote_missing_original(service, users):
    with pytest.raises(NotFoundError):
        service.quote_post(users[0].id, 999, "quote")


def test_concurrent_duplicate_follow_becomes_conflict(db, session_factory, settings, users, monkeypatch):
    alice, bob, _ = users
    UserService(db, settings).follow_user(alice.id, bob.id)

    monkeypatch.setattr(user_crud, "get_follow", lambda *args: None)
    other_request = session_factory()
    with pytest.raises(ConflictError):
        UserService(other_request, settings).follow_user(alice.id, bob.id)
    other_request.close()

    db.expire_all()
    assert db.query(Follower).count() == 1
    assert db.get(User, bob.id).followers_count == 1
    assert db.get(User, alice.id).following_count == 1
