"""
User API Routes

- POST /register - Create an account
- POST /login - Exchange credentials for a bearer token
- GET /profile - Current user
- GET / - All users (admin)
"""
from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_current_user, require_admin
from app.models.user import User
from app.schemas.common import success_response
from app.schemas.user import UserLoginSchema, UserRegisterSchema
from app.services.user_service import UserService, get_user_service

router = APIRouter()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register user",
    description="Create a regular user account and return it with an access token."
)
async def register_user(
    data: UserRegisterSchema,
    service: UserService = Depends(get_user_service)
):
    user = await service.register(data)
    return success_response(data=user, message="User registered successfully")


@router.post(
    "/login",
    summary="Login",
    description="Authenticate with email and password."
)
async def login_user(
    data: UserLoginSchema,
    service: UserService = Depends(get_user_service)
):
    user = await service.login(data)
    return success_response(data=user)


@router.get("/profile", summary="Current user profile")
async def get_profile(
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    profile = await service.get_profile(current_user.id)
    return success_response(data=profile)


@router.get("", summary="List users (admin)")
async def list_users(
    admin: User = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    users = await service.list_users()
    return success_response(data=users, count=len(users))
