"""User profile and leaderboard queries."""

from dataclasses import dataclass

from taskreward.errors import NotFoundError
from taskreward.logging_config import get_logger
from taskreward.storage.db import Database
from taskreward.storage.models import User
from taskreward.storage.ports import CompletionStore, UserStore

logger = get_logger(__name__)

DEFAULT_LEADERBOARD_SIZE = 100


@dataclass(frozen=True)
class UserInfo:
    """User profile with completion stats."""
    id: int
    username: str
    email: str | None
    balance: int
    refer_code: str | None
    refer_from: int | None
    tasks_completed: int


class UserService:
    """Read-side queries over users."""

    def __init__(self, database: Database, users: UserStore, completions: CompletionStore):
        self.db = database
        self.users = users
        self.completions = completions

    def get_user_info(self, user_id: int) -> UserInfo:
        """Get a user's profile.

        Raises:
            NotFoundError: If the user does not exist
        """
        with self.db.session() as session:
            user = self.users.get(session, user_id)
            if user is None:
                logger.info("user_not_found", user_id=user_id)
                raise NotFoundError("user", f"user with id {user_id} not found")
            tasks_completed = self.completions.count_for_user(session, user_id)

        return UserInfo(
            id=user.id,
            username=user.username,
            email=user.email,
            balance=user.balance,
            refer_code=user.refer_code,
            refer_from=user.refer_from,
            tasks_completed=tasks_completed,
        )

    def leaderboard(self, limit: int = DEFAULT_LEADERBOARD_SIZE) -> list[User]:
        """Users ordered by balance, highest first."""
        with self.db.session() as session:
            users = list(self.users.leaderboard(session, limit))
        logger.debug("leaderboard_fetched", count=len(users))
        return users
