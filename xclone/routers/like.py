from fastapi import APIRouter, Depends
from xclone.api.deps import get_current_user_id, get_post_service, get_user_service
from xclone.services.post import PostService
from xclone.services.user import UserService

router = APIRouter(dependencies=[Depends(get_current_user_id)])


def _resolve_post_id(username: str, post_id: int, user_service: UserService, post_service: PostService) -> int:
    user = user_service.find_user_by_username(username)
    return post_service.get_post_by_id(user.id, post_id).id


@router.post("/{username}/posts/{post_id}/like")
def like_post(
    username: str,
    post_id: int,
    post_service: PostService = Depends(get_post_service),
    user_service: UserService = Depends(get_user_service),
    current_user_id: int = Depends(get_current_user_id)
):
    post_id = _resolve_post_id(username, post_id, user_service, post_service)
    post_service.like_post(current_user_id, post_id)
    return {"message": "successfully liked the post", "post_id": post_id}


@router.delete("/{username}/posts/{post_id}/like")
def unlike_post(
    username: str,
    post_id: int,
    post_service: PostService = Depends(get_post_service),
    user_service: UserService = Depends(get_user_service),
    current_user_id: int = Depends(get_current_user_id)
):
    post_id = _resolve_post_id(username, post_id, user_service, post_service)
    post_service.unlike_post(current_user_id, post_id)
    return {"message": "successfully unliked the post", "post_id": post_id}


@router.post("/{username}/posts/{post_id}/repost")
def repost_post(
    username: str,
    post_id: int,
    post_service: PostService = Depends(get_post_service),
    user_service: UserService = Depends(get_user_service),
    current_user_id: int = Depends(get_current_user_id)
):
    post_id = _resolve_post_id(username, post_id, user_service, post_service)
    post_service.repost_post(current_user_id, post_id)
    return {"message": "successfully reposted the post", "post_id": post_id}


@router.delete("/{username}/posts/{post_id}/repost")
def undo_repost_post(
    username: str,
    post_id: int,
    post_service: PostService = Depends(get_post_service),
    user_service: UserService = Depends(get_user_service),
    current_user_id: int = Depends(get_current_user_id)
):
    post_id = _resolve_post_id(username, post_id, user_service, post_service)
    post_service.undo_repost_post(current_user_id, post_id)
    return {"message": "successfully cancelled repost of the post", "post_id": post_id}
