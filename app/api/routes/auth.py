from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.config import Settings
from ...core.database import get_db
from ...api.deps import get_settings, login_rate_limit
from ...services.auth_service import AuthService
from ...schemas.auth import UserLogin, UserRegister, LoginResponse, RegisterResponse

router = APIRouter(tags=["Authentication"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    user_data: UserRegister,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Register a new patient account."""
    user = AuthService(db, settings).register_user(user_data)
    return RegisterResponse(message="User created successfully", user_id=user.id)


@router.post(
    "/login",
    response_model=LoginResponse,
    dependencies=[Depends(login_rate_limit)],
)
def login(
    login_data: UserLogin,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Authenticate user and return a bearer token."""
    return AuthService(db, settings).authenticate_user(login_data)
