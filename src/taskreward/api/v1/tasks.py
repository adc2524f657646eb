"""Task API v1 endpoints."""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict

from taskreward.api.deps import get_settlement_service, get_task_catalog
from taskreward.auth.middleware import require_auth
from taskreward.logging_config import get_logger
from taskreward.settings import settings
from taskreward.tasks.catalog import TaskCatalog
from taskreward.tasks.settlement import SettlementService, deadline_in

logger = get_logger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


# ==================== MODELS ====================


class TaskCreateRequest(BaseModel):
    """Task creation request. Field checks live in TaskCatalog."""
    title: str
    description: str = ""
    price: int


class TaskCreatedResponse(BaseModel):
    task_id: int


class TaskResponse(BaseModel):
    """Task data for API responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    price: int


class TaskListResponse(BaseModel):
    tasks: list[TaskResponse]


class CompletionResponse(BaseModel):
    """Result of completing a task."""
    ok: bool = True
    task_id: int
    reward: int
    referral_bonus: int = 0


# ==================== ENDPOINTS ====================


@router.post("", response_model=TaskCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    body: TaskCreateRequest,
    user_id: int = Depends(require_auth),
    catalog: TaskCatalog = Depends(get_task_catalog),
):
    """Create a new task."""
    task_id = catalog.create_task(body.title, body.description, body.price)
    logger.info("task_create_requested", task_id=task_id, created_by=user_id)
    return TaskCreatedResponse(task_id=task_id)


@router.get("", response_model=TaskListResponse)
def list_tasks(catalog: TaskCatalog = Depends(get_task_catalog)):
    """List all tasks."""
    tasks = catalog.list_tasks()
    return TaskListResponse(tasks=[TaskResponse.model_validate(t) for t in tasks])


@router.post("/{task_id}/complete", response_model=CompletionResponse)
def complete_task(
    task_id: int,
    user_id: int = Depends(require_auth),
    settlement: SettlementService = Depends(get_settlement_service),
):
    """Mark a task completed by the current user and pay the reward."""
    result = settlement.complete_task(
        user_id,
        task_id,
        deadline=deadline_in(settings.completion_timeout_seconds),
    )
    return CompletionResponse(
        task_id=result.task_id,
        reward=result.reward,
        referral_bonus=result.referral_bonus,
    )
