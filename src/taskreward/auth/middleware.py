"""Authentication dependencies for FastAPI."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taskreward.auth.local import LocalAuthService
from taskreward.logging_config import get_logger
from taskreward.referral.service import ReferralService
from taskreward.storage.repo import UserRepository

logger = get_logger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> LocalAuthService:
    """Build the auth service on the application's database."""
    database = request.app.state.db
    users = UserRepository()
    return LocalAuthService(database, users, ReferralService(database, users))


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    auth_service: LocalAuthService = Depends(get_auth_service),
) -> int | None:
    """Get the ID of the authenticated user.

    Args:
        request: FastAPI request
        credentials: Bearer token
        auth_service: Token verifier

    Returns:
        User ID or None if not authenticated
    """
    if not credentials:
        return None

    user_id = auth_service.resolve_identity(credentials.credentials)
    if user_id is not None:
        # Store user in request state for later use
        request.state.user_id = user_id

    return user_id


def require_auth(user_id: int | None = Depends(get_current_user)) -> int:
    """Require authentication - raises 401 if not authenticated.

    Args:
        user_id: Current user from get_current_user

    Returns:
        Authenticated user ID

    Raises:
        HTTPException: 401 if not authenticated
    """
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id
