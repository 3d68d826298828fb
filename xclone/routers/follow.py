from fastapi import APIRouter, Depends
from xclone.api.deps import get_current_user_id, get_user_service
from xclone.schemas.user import UserOut
from xclone.services.user import UserService

router = APIRouter(dependencies=[Depends(get_current_user_id)])


@router.post("/{username}/follow")
def follow_user(
    username: str,
    user_service: UserService = Depends(get_user_service),
    current_user_id: int = Depends(get_current_user_id)
):
    following_user = user_service.find_user_by_username(username)
    user_service.follow_user(current_user_id, following_user.id)
    return {"message": f"successful follow user: {username}"}


@router.delete("/{username}/follow")
def stop_following_user(
    username: str,
    user_service: UserService = Depends(get_user_service),
    current_user_id: int = Depends(get_current_user_id)
):
    following_user = user_service.find_user_by_username(username)
    user_service.stop_following_user(current_user_id, following_user.id)
    return {"message": f"successful stop following user: {username}"}


@router.get("/{username}/followers", response_model=list[UserOut])
def get_followers(
    username: str,
    user_service: UserService = Depends(get_user_service)
):
    user = user_service.find_user_by_username(username)
    return [UserOut.model_validate(u) for u in user_service.get_followers(user.id)]


@router.get("/{username}/following", response_model=list[UserOut])
def get_following(
    username: str,
    user_service: UserService = Depends(get_user_service)
):
    user = user_service.find_user_by_username(username)
    return [UserOut.model_validate(u) for u in user_service.get_following(user.id)]
