from fastapi import APIRouter, Depends, status
from xclone.api.deps import get_current_user_id, get_post_service, get_user_service
from xclone.schemas.post import ContentRequest, PostOut
from xclone.services.post import PostService
from xclone.services.user import UserService

router = APIRouter(dependencies=[Depends(get_current_user_id)])


@router.post("/compose/post", response_model=PostOut, status_code=status.HTTP_201_CREATED)
def create_post(
    post_in: ContentRequest,
    post_service: PostService = Depends(get_post_service),
    current_user_id: int = Depends(get_current_user_id)
):
    post = post_service.create_post(current_user_id, post_in.content)
    return PostOut.model_validate(post)


@router.get("/{username}/posts", response_model=list[PostOut])
def get_user_posts(
    username: str,
    post_service: PostService = Depends(get_post_service),
    user_service: UserService = Depends(get_user_service)
):
    user = user_service.find_user_by_username(username)
    posts = post_service.get_user_posts(user.id)
    return [PostOut.model_validate(post) for post in posts]


@router.get("/{username}/posts/{post_id}", response_model=PostOut)
def get_user_post_by_id(
    username: str,
    post_id: int,
    post_service: PostService = Depends(get_post_service),
    user_service: UserService = Depends(get_user_service)
):
    user = user_service.find_user_by_username(username)
    post = post_service.get_post_by_id(user.id, post_id)
    return PostOut.model_validate(post)


@router.patch("/{username}/posts/{post_id}", response_model=PostOut)
def update_post_content(
    username: str,
    post_id: int,
    post_in: ContentRequest,
    post_service: PostService = Depends(get_post_service),
    user_service: UserService = Depends(get_user_service),
    current_user_id: int = Depends(get_current_user_id)
):
    # the path addresses the post; ownership is checked against post.user_id
    user = user_service.find_user_by_username(username)
    post = post_service.get_post_by_id(user.id, post_id)
    updated_post = post_service.update_content(current_user_id, post.id, post_in.content)
    return PostOut.model_validate(updated_post)


@router.delete("/{username}/posts/{post_id}")
def delete_post(
    username: str,
    post_id: int,
    post_service: PostService = Depends(get_post_service),
    user_service: UserService = Depends(get_user_service),
    current_user_id: int = Depends(get_current_user_id)
):
    user = user_service.find_user_by_username(username)
    post = post_service.get_post_by_id(user.id, post_id)
    post_service.delete(current_user_id, post.id)
    return {"message": "successfully deleted the post", "post_id": post_id}


@router.post("/{username}/posts/{post_id}/quote", response_model=PostOut, status_code=status.HTTP_201_CREATED)
def quote_post(
    username: str,
    post_id: int,
    post_in: ContentRequest,
    post_service: PostService = Depends(get_post_service),
    user_service: UserService = Depends(get_user_service),
    current_user_id: int = Depends(get_current_user_id)
):
    user = user_service.find_user_by_username(username)
    original_post = post_service.get_post_by_id(user.id, post_id)
    quote = post_service.quote_post(current_user_id, original_post.id, post_in.content)
    return PostOut.model_validate(quote)


@router.get("/{username}/reposts", response_model=list[PostOut])
def get_user_reposts(
    username: str,
    post_service: PostService = Depends(get_post_service),
    user_service: UserService = Depends(get_user_service)
):
    user = user_service.find_user_by_username(username)
    posts = post_service.get_user_reposts(user.id)
    return [PostOut.model_validate(post) for post in posts]
