"""Signed-in user profile routes."""

from fastapi import APIRouter

from storefront.api.dependencies import CurrentUserDep
from storefront.models.user import UserInDB, UserUpdate
from storefront.services.user_service import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserInDB)
async def get_profile(user: CurrentUserDep) -> UserInDB:
    return await user_service.get_user(user.id)


@router.patch("/me", response_model=UserInDB)
async def update_profile(update: UserUpdate, user: CurrentUserDep) -> UserInDB:
    return await user_service.update_profile(user.id, update)
