"""Authentication API v1 endpoints."""

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, EmailStr, Field

from taskreward.api.rate_limit import LOGIN_LIMIT, REGISTER_LIMIT, limiter
from taskreward.auth.local import LocalAuthService
from taskreward.auth.middleware import get_auth_service
from taskreward.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


# ==================== MODELS ====================


class RegisterRequest(BaseModel):
    """User registration request."""
    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=1, max_length=128)
    email: EmailStr | None = None
    refer_code: str | None = Field(default=None, max_length=32)  # Optional refer code


class RegisterResponse(BaseModel):
    """Registered user."""
    user_id: int
    username: str
    refer_code: str
    refer_from: int | None = None


class LoginRequest(BaseModel):
    """User login request."""
    username: str
    password: str


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


# ==================== ENDPOINTS ====================


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(REGISTER_LIMIT)
def register(
    request: Request,
    body: RegisterRequest,
    auth_service: LocalAuthService = Depends(get_auth_service),
):
    """Register a new user, optionally with another user's refer code."""
    user = auth_service.register(
        username=body.username,
        password=body.password,
        email=body.email,
        refer_code=body.refer_code,
    )
    return RegisterResponse(
        user_id=user.id,
        username=user.username,
        refer_code=user.refer_code,
        refer_from=user.refer_from,
    )


@router.post("/login", response_model=TokenResponse)
@limiter.limit(LOGIN_LIMIT)
def login(
    request: Request,
    body: LoginRequest,
    auth_service: LocalAuthService = Depends(get_auth_service),
):
    """Log in and receive a bearer token."""
    token = auth_service.authenticate(body.username, body.password)
    return TokenResponse(
        access_token=token,
        expires_in=auth_service.expire_hours * 3600,
    )
