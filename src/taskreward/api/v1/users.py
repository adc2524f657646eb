"""User API v1 endpoints."""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from taskreward.api.deps import get_referral_service, get_user_service
from taskreward.auth.middleware import require_auth
from taskreward.referral.service import ReferralService
from taskreward.users.service import UserService

router = APIRouter(prefix="/users", tags=["users"])


# ==================== MODELS ====================


class UserInfoResponse(BaseModel):
    """User profile for API responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str | None = None
    balance: int
    refer_code: str | None = None
    refer_from: int | None = None
    tasks_completed: int


class LeaderboardEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    balance: int


class LeaderboardResponse(BaseModel):
    users: list[LeaderboardEntry]


class LinkReferrerRequest(BaseModel):
    """Request to attach the current user to a referrer."""
    refer_code: str = Field(..., min_length=1, max_length=32)


class LinkReferrerResponse(BaseModel):
    ok: bool = True
    referrer_id: int


# ==================== ENDPOINTS ====================


@router.get("/me", response_model=UserInfoResponse)
def get_me(
    user_id: int = Depends(require_auth),
    user_service: UserService = Depends(get_user_service),
):
    """Get the current user's profile."""
    return UserInfoResponse.model_validate(user_service.get_user_info(user_id))


@router.get("/leaderboard", response_model=LeaderboardResponse)
def leaderboard(
    limit: int = Query(default=100, ge=1, le=1000),
    _: int = Depends(require_auth),
    user_service: UserService = Depends(get_user_service),
):
    """Users ranked by balance."""
    users = user_service.leaderboard(limit)
    return LeaderboardResponse(users=[LeaderboardEntry.model_validate(u) for u in users])


@router.get("/{user_id}/status", response_model=UserInfoResponse)
def get_user_status(
    user_id: int,
    _: int = Depends(require_auth),
    user_service: UserService = Depends(get_user_service),
):
    """Get a user's balance and completion stats."""
    return UserInfoResponse.model_validate(user_service.get_user_info(user_id))


@router.post("/me/referrer", response_model=LinkReferrerResponse)
def link_referrer(
    body: LinkReferrerRequest,
    user_id: int = Depends(require_auth),
    referrals: ReferralService = Depends(get_referral_service),
):
    """Attach the current user to the owner of a refer code.

    Can only be done once per user.
    """
    referrer_id = referrals.link_referrer(user_id, body.refer_code)
    return LinkReferrerResponse(referrer_id=referrer_id)
