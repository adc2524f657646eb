"""Task completion settlement.

Completing a task runs in three stages:

1. Validating: the task and the user must exist.
2. Settling: one unit of work records the completion and credits the user
   with the task price. Either both persist or neither does.
3. Post-commit: if the user was referred, the referrer is credited with a
   bonus. This step is best effort. Its failures are logged and never undo
   or fail the settlement.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from taskreward.errors import DeadlineExceededError, InternalError, NotFoundError, RewardServiceError
from taskreward.logging_config import get_logger
from taskreward.referral.service import ReferralService
from taskreward.rewards.policy import compute_referral_bonus
from taskreward.storage.db import Database
from taskreward.storage.models import Task, User
from taskreward.storage.ports import CompletionStore, TaskStore, UserStore

logger = get_logger(__name__)


class SettlementState(str, Enum):
    """Settlement lifecycle states."""
    VALIDATING = "validating"
    SETTLING = "settling"
    COMMITTED = "committed"
    REJECTED = "rejected"    # Task or user missing
    FAILED = "failed"        # Rolled back


@dataclass(frozen=True)
class SettlementResult:
    """Outcome of a committed settlement."""
    user_id: int
    task_id: int
    reward: int
    referrer_id: int | None = None
    referral_bonus: int = 0
    state: SettlementState = SettlementState.COMMITTED


class SettlementService:
    """Records task completions and pays out rewards."""

    def __init__(
        self,
        database: Database,
        users: UserStore,
        tasks: TaskStore,
        completions: CompletionStore,
        referrals: ReferralService,
        reward_policy: Callable[[int], int] = compute_referral_bonus,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.db = database
        self.users = users
        self.tasks = tasks
        self.completions = completions
        self.referrals = referrals
        self.reward_policy = reward_policy
        self.clock = clock

    def complete_task(self, user_id: int, task_id: int, deadline: float | None = None) -> SettlementResult:
        """Complete a task for a user and credit the reward.

        Args:
            user_id: Trusted ID of the user completing the task
            task_id: Task ID
            deadline: Optional absolute ``clock()`` value after which the
                settlement is abandoned

        Returns:
            Settlement result

        Raises:
            NotFoundError: If the task or the user does not exist
            ConflictError: If the user already completed this task
            DeadlineExceededError: If the deadline passed before commit
            InternalError: If the store fails
        """
        log = logger.bind(user_id=user_id, task_id=task_id)
        log.info("settlement_started", state=SettlementState.VALIDATING.value)

        task, user = self._validate(user_id, task_id, log)

        log.debug("settlement_settling", state=SettlementState.SETTLING.value, price=task.price)
        try:
            remaining = self._check_deadline(deadline, "before_settle")
            # Lock waits inside the unit are capped by what is left of the deadline
            with self.db.session(timeout=remaining) as session:
                self.completions.record(session, user_id, task_id)
                self.users.adjust_balance(session, user_id, task.price)
                self._check_deadline(deadline, "before_commit")
        except RewardServiceError as exc:
            log.warning("settlement_failed", state=SettlementState.FAILED.value, error=exc.kind, reason=exc.message)
            raise
        except SQLAlchemyError as exc:
            if self._deadline_passed(deadline):
                log.warning("settlement_failed", state=SettlementState.FAILED.value, error="deadline_exceeded", reason=str(exc))
                raise DeadlineExceededError("settlement deadline exceeded (store call)") from exc
            log.error("settlement_failed", state=SettlementState.FAILED.value, error="internal", reason=str(exc))
            raise InternalError("failed to complete task") from exc

        log.info("task_completed", state=SettlementState.COMMITTED.value, reward=task.price)

        referrer_id, bonus = self.pay_referral_bonus(user, task, deadline)
        return SettlementResult(
            user_id=user_id,
            task_id=task_id,
            reward=task.price,
            referrer_id=referrer_id,
            referral_bonus=bonus,
        )

    def pay_referral_bonus(self, user: User, task: Task, deadline: float | None = None) -> tuple[int | None, int]:
        """Post-commit hook crediting the user's referrer.

        Never raises and is never retried. The settlement it follows has
        already committed.

        Returns:
            (referrer_id, bonus paid); bonus is 0 when nothing was paid
        """
        referrer_id = self.referrals.resolve_referrer(user)
        if referrer_id is None:
            return None, 0

        log = logger.bind(user_id=user.id, task_id=task.id, referrer_id=referrer_id)

        if self._deadline_passed(deadline):
            log.warning("referral_payout_skipped", reason="deadline_exceeded")
            return referrer_id, 0

        bonus = self.reward_policy(task.price)
        try:
            with self.db.session() as session:
                if self.users.get(session, referrer_id) is None:
                    log.warning("referral_payout_failed", reason="referrer_not_found")
                    return referrer_id, 0
                self.users.adjust_balance(session, referrer_id, bonus)
        except Exception:
            log.exception("referral_payout_failed", bonus=bonus)
            return referrer_id, 0

        log.info("referral_bonus_paid", bonus=bonus)
        return referrer_id, bonus

    def _validate(self, user_id: int, task_id: int, log) -> tuple[Task, User]:
        try:
            with self.db.session() as session:
                task = self.tasks.get(session, task_id)
                if task is None:
                    raise NotFoundError("task", f"task with id {task_id} not found")
                user = self.users.get(session, user_id)
                if user is None:
                    raise NotFoundError("user", f"user with id {user_id} not found")
                return task, user
        except NotFoundError as exc:
            log.info("settlement_rejected", state=SettlementState.REJECTED.value, missing=exc.resource)
            raise
        except SQLAlchemyError as exc:
            log.error("settlement_failed", state=SettlementState.FAILED.value, error="internal", reason=str(exc))
            raise InternalError("failed to load task or user") from exc

    def _deadline_passed(self, deadline: float | None) -> bool:
        return deadline is not None and self.clock() >= deadline

    def _check_deadline(self, deadline: float | None, stage: str) -> float | None:
        """Raise if the deadline passed, else return the seconds left (None without a deadline)."""
        if deadline is None:
            return None
        remaining = deadline - self.clock()
        if remaining <= 0:
            raise DeadlineExceededError(f"settlement deadline exceeded ({stage})")
        return remaining


def deadline_in(seconds: float | None, clock: Callable[[], float] = time.monotonic) -> float | None:
    """Turn a timeout in seconds into an absolute deadline."""
    if seconds is None:
        return None
    return clock() + seconds
