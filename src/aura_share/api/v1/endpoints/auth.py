# src/aura_share/api/v1/endpoints/auth.py
"""Authentication endpoints for regular users."""

from fastapi import APIRouter, status

from aura_share.api.v1.dependencies import CurrentUserDep, UserServiceDep
from aura_share.schemas.user import AuthResponse, SigninRequest, SignupRequest, UserResponse

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(payload: SignupRequest, users: UserServiceDep) -> AuthResponse:
    """Create an account and its default list, then return a bearer token."""
    user, token = users.signup(payload.username, payload.password, payload.name)
    return AuthResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/signin", response_model=AuthResponse)
async def signin(payload: SigninRequest, users: UserServiceDep) -> AuthResponse:
    user, token = users.signin(payload.username, payload.password)
    return AuthResponse(access_token=token, user=UserResponse.model_validate(user))


@router.get("/verify", response_model=UserResponse)
async def verify(current_user: CurrentUserDep) -> UserResponse:
    """Return the account behind the presented token."""
    return UserResponse.model_validate(current_user)
