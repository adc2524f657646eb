"""Persistence for users, tasks and completions."""

from taskreward.storage.models import Base, Task, TaskCompletion, User
from taskreward.storage.repo import CompletionRepository, TaskRepository, UserRepository

__all__ = [
    "Base",
    "Task",
    "TaskCompletion",
    "User",
    "CompletionRepository",
    "TaskRepository",
    "UserRepository",
]
