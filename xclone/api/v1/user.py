from fastapi import APIRouter, Depends
from xclone.api.deps import get_current_user_id, get_user_service
from xclone.schemas.user import PasswordChangeRequest, ProfileUpdate, UserOut
from xclone.services.user import UserService


# Account settings of the authenticated user
settings_router = APIRouter(dependencies=[Depends(get_current_user_id)])

# Public profile lookup; included last so "/{username}" doesn't shadow other routes
router = APIRouter(dependencies=[Depends(get_current_user_id)])


@settings_router.patch("/profile", response_model=UserOut)
def change_profile(
    patch: ProfileUpdate,
    user_service: UserService = Depends(get_user_service),
    current_user_id: int = Depends(get_current_user_id)
):
    user = user_service.change_profile(current_user_id, patch)
    return UserOut.model_validate(user)


@settings_router.patch("/password")
def change_password(
    passwords: PasswordChangeRequest,
    user_service: UserService = Depends(get_user_service),
    current_user_id: int = Depends(get_current_user_id)
):
    user_service.change_password(
        current_user_id,
        passwords.old_password,
        passwords.new_password,
        passwords.confirm_password,
    )
    return {"message": "successful password change"}


@router.get("/{username}", response_model=UserOut)
def find_user_by_username(
    username: str,
    user_service: UserService = Depends(get_user_service)
):
    user = user_service.find_user_by_username(username)
    return UserOut.model_validate(user)
