"""Database models for users, tasks and completions."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class User(Base):
    """User account with a task-reward balance.

    ``refer_from`` points at the user who referred this one. It is set at
    most once (see ``ReferralService.link_referrer``).
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(150), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)

    balance: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)

    # Referral
    refer_code: Mapped[str | None] = mapped_column(String(32), unique=True, nullable=True, index=True)
    refer_from: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )

    # Relationships
    completions: Mapped[list["TaskCompletion"]] = relationship(
        "TaskCompletion", back_populates="user"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', balance={self.balance})>"


class Task(Base):
    """A rewardable task. Immutable once created."""

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", server_default="", nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )

    completions: Mapped[list["TaskCompletion"]] = relationship(
        "TaskCompletion", back_populates="task"
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title='{self.title}', price={self.price})>"


class TaskCompletion(Base):
    """Fact that a user completed a task. Written once, never updated."""

    __tablename__ = "task_completions"
    __table_args__ = (
        UniqueConstraint("user_id", "task_id", name="uq_task_completions_user_task"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    task_id: Mapped[int] = mapped_column(Integer, ForeignKey("tasks.id"), nullable=False, index=True)

    completed_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )

    user: Mapped["User"] = relationship("User", back_populates="completions")
    task: Mapped["Task"] = relationship("Task", back_populates="completions")

    def __repr__(self) -> str:
        return f"<TaskCompletion(user={self.user_id}, task={self.task_id})>"
