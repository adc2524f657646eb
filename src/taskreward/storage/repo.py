"""Repository layer for data access.

Repositories are stateless; each call works inside the session handed in by
the caller, so a single unit of work can span several repositories.
"""

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from taskreward.errors import ConflictError, InternalError, NotFoundError
from taskreward.logging_config import get_logger
from taskreward.storage.models import Task, TaskCompletion, User

logger = get_logger(__name__)


class UserRepository:
    """Repository for User entities."""

    def get(self, session: Session, user_id: int) -> User | None:
        """Get user by ID."""
        return session.get(User, user_id)

    def get_by_username(self, session: Session, username: str) -> User | None:
        """Get user by username."""
        return session.scalars(select(User).where(User.username == username)).first()

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Get user by email."""
        return session.scalars(select(User).where(User.email == email)).first()

    def get_by_refer_code(self, session: Session, refer_code: str) -> User | None:
        """Get the user owning a refer code."""
        return session.scalars(select(User).where(User.refer_code == refer_code)).first()

    def create(
        self,
        session: Session,
        *,
        username: str,
        password_hash: str,
        email: str | None,
        refer_code: str,
    ) -> User:
        """Create a new user with a zero balance.

        Raises:
            ConflictError: If username, email or refer code is taken
        """
        user = User(
            username=username,
            password_hash=password_hash,
            email=email,
            balance=0,
            refer_code=refer_code,
        )
        session.add(user)
        try:
            session.flush()
        except IntegrityError as exc:
            raise ConflictError("user already exists") from exc
        logger.info("user_created", user_id=user.id, username=username)
        return user

    def adjust_balance(self, session: Session, user_id: int, delta: int) -> None:
        """Atomically add ``delta`` to a user's balance.

        Issued as a single ``UPDATE ... SET balance = balance + :delta`` so
        concurrent adjustments on the same row never lose an update.

        Raises:
            NotFoundError: If the user does not exist
            InternalError: If the store fails
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(balance=User.balance + delta)
            .execution_options(synchronize_session=False)
        )
        try:
            result = session.execute(stmt)
        except SQLAlchemyError as exc:
            raise InternalError("failed to update user balance") from exc
        if result.rowcount == 0:
            raise NotFoundError("user", f"user with id {user_id} not found")

    def set_refer_from(self, session: Session, user_id: int, referrer_id: int) -> None:
        """Point a user at their referrer.

        The write only lands while ``refer_from`` is still empty, so a
        referrer linked by a concurrent request is never replaced.

        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If the user already has a referrer
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.refer_from.is_(None))
            .values(refer_from=referrer_id)
            .execution_options(synchronize_session=False)
        )
        result = session.execute(stmt)
        if result.rowcount == 0:
            exists = session.scalar(select(User.id).where(User.id == user_id))
            if exists is None:
                raise NotFoundError("user", f"user with id {user_id} not found")
            raise ConflictError("referrer already set")

    def leaderboard(self, session: Session, limit: int = 100) -> list[User]:
        """List users by balance, highest first."""
        stmt = select(User).order_by(User.balance.desc(), User.id.asc()).limit(limit)
        return list(session.scalars(stmt))


class TaskRepository:
    """Repository for Task entities."""

    def get(self, session: Session, task_id: int) -> Task | None:
        """Get task by ID."""
        return session.get(Task, task_id)

    def create(self, session: Session, *, title: str, description: str, price: int) -> Task:
        """Create a new task."""
        task = Task(title=title, description=description, price=price)
        session.add(task)
        session.flush()
        logger.info("task_created", task_id=task.id, title=title, price=price)
        return task

    def find_duplicate(self, session: Session, title: str, description: str) -> Task | None:
        """Find a task with the same title and description."""
        stmt = select(Task).where(Task.title == title, Task.description == description)
        return session.scalars(stmt).first()

    def list_all(self, session: Session) -> list[Task]:
        """List all tasks in creation order."""
        return list(session.scalars(select(Task).order_by(Task.id.asc())))


class CompletionRepository:
    """Repository for TaskCompletion records."""

    def exists(self, session: Session, user_id: int, task_id: int) -> bool:
        """Check whether the user already completed the task."""
        stmt = select(TaskCompletion.id).where(
            TaskCompletion.user_id == user_id,
            TaskCompletion.task_id == task_id,
        )
        return session.scalars(stmt).first() is not None

    def record(self, session: Session, user_id: int, task_id: int) -> TaskCompletion:
        """Record a completion for (user, task).

        The existence check runs in the caller's unit of work; the unique
        constraint on (user_id, task_id) catches a concurrent insert that
        slips past it.

        Raises:
            ConflictError: If the pair was already completed
            InternalError: If the store fails
        """
        if self.exists(session, user_id, task_id):
            raise ConflictError("already completed")

        completion = TaskCompletion(user_id=user_id, task_id=task_id)
        session.add(completion)
        try:
            session.flush()
        except IntegrityError as exc:
            raise ConflictError("already completed") from exc
        except SQLAlchemyError as exc:
            raise InternalError("failed to record completion") from exc
        return completion

    def count_for_user(self, session: Session, user_id: int) -> int:
        """Count tasks completed by a user."""
        stmt = select(func.count(TaskCompletion.id)).where(TaskCompletion.user_id == user_id)
        return session.scalar(stmt) or 0
