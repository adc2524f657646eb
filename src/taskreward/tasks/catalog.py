"""Task catalog: creation and listing."""

from sqlalchemy.exc import SQLAlchemyError

from taskreward.errors import ConflictError, InternalError, ValidationError
from taskreward.logging_config import get_logger
from taskreward.storage.db import Database
from taskreward.storage.models import Task
from taskreward.storage.ports import TaskStore

logger = get_logger(__name__)

MIN_TASK_PRICE = 1


def validate_task(title: str, price: int) -> None:
    """Validate task fields.

    Raises:
        ValidationError: If the title is empty or the price is below 1
    """
    if not title or not title.strip():
        raise ValidationError("task title cannot be empty")
    if isinstance(price, bool) or not isinstance(price, int):
        raise ValidationError("task price must be an integer")
    if price < MIN_TASK_PRICE:
        raise ValidationError(f"minimum value for the price field is {MIN_TASK_PRICE}")


class TaskCatalog:
    """Creates and lists tasks."""

    def __init__(self, database: Database, tasks: TaskStore):
        self.db = database
        self.tasks = tasks

    def create_task(self, title: str, description: str, price: int) -> int:
        """Create a new task.

        Tasks have no natural key, so (title, description) equality is
        treated as identity.

        Args:
            title: Task title
            description: Task description
            price: Reward paid on completion

        Returns:
            New task ID

        Raises:
            ValidationError: If the title is empty or the price is below 1
            ConflictError: If a task with the same title and description exists
            InternalError: If the store fails
        """
        description = description or ""
        validate_task(title, price)

        try:
            with self.db.session() as session:
                if self.tasks.find_duplicate(session, title, description) is not None:
                    logger.info("task_duplicate_rejected", title=title)
                    raise ConflictError("task with the same title and description already exists")
                task = self.tasks.create(session, title=title, description=description, price=price)
                return task.id
        except SQLAlchemyError as exc:
            logger.error("task_create_failed", title=title, error=str(exc))
            raise InternalError("cannot create task") from exc

    def list_tasks(self) -> list[Task]:
        """List all tasks in store order."""
        try:
            with self.db.session() as session:
                tasks = list(self.tasks.list_all(session))
        except SQLAlchemyError as exc:
            logger.error("task_list_failed", error=str(exc))
            raise InternalError("cannot fetch tasks") from exc

        logger.debug("tasks_listed", count=len(tasks))
        return tasks
