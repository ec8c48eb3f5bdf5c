# campus_social/routes/auth.py
from fastapi import APIRouter, Depends, status

from ..controllers.auth_controller import login, me, register
from ..schemas.auth_schema import AuthResponse, LoginRequest, MeResponse, RegisterRequest
from ..utils.auth_utils import get_current_user

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register with a campus email",
)
async def register_user(payload: RegisterRequest):
    return await register(payload)


@router.post("/login", response_model=AuthResponse, summary="Login with email and password")
async def login_user(payload: LoginRequest):
    return await login(payload)


@router.get("/me", response_model=MeResponse, summary="Get authenticated user")
async def get_me(current_user: dict = Depends(get_current_user)):
    return await me(current_user)
