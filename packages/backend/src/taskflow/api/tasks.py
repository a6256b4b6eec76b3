"""Task API routes.

Learn: These routes are the HTTP interface to owner-scoped task CRUD.
The service layer enforces ownership; routes just translate HTTP to
service calls. The caller's id always comes from get_current_user_id
(the verified token), never from the path or body.

Key patterns:
- POST creates, PUT replaces, PATCH partially updates
- Query params for filtering (status, priority)
- A task that isn't yours is a 404, exactly like one that doesn't exist
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.auth.dependencies import get_current_user_id
from taskflow.db.engine import get_db
from taskflow.errors import NotFoundError
from taskflow.schemas.task import (
    PRIORITY_PATTERN,
    STATUS_PATTERN,
    TaskCreate,
    TaskEnvelope,
    TaskList,
    TaskRead,
    TaskUpdate,
)
from taskflow.services.task_service import TaskService

router = APIRouter(prefix="/tasks")


def _task_svc(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(db)


MAX_TASK_ID = 2**31 - 1  # tasks.id is a 32-bit INTEGER


def _parse_task_id(task_id: str) -> int:
    """Path ids that can't be a tasks.id are just tasks that don't exist.

    Only plain ASCII digits are accepted, so " 7", "+7" and "0_7" are not
    aliases for 7, and out-of-range ids never reach the database.
    """
    if not (task_id.isascii() and task_id.isdigit()):
        raise NotFoundError("Task not found.")
    value = int(task_id)
    if not 1 <= value <= MAX_TASK_ID:
        raise NotFoundError("Task not found.")
    return value


@router.get("", response_model=TaskList)
async def list_tasks(
    status: Optional[str] = Query(None, pattern=STATUS_PATTERN),
    priority: Optional[str] = Query(None, pattern=PRIORITY_PATTERN),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    owner_id: uuid.UUID = Depends(get_current_user_id),
    svc: TaskService = Depends(_task_svc),
):
    """List the caller's tasks with optional filters."""
    tasks = await svc.list_tasks(
        owner_id, status=status, priority=priority, limit=limit, offset=offset
    )
    return TaskList(
        tasks=[TaskRead.model_validate(t) for t in tasks],
        count=len(tasks),
    )


@router.post("", response_model=TaskEnvelope, status_code=201)
async def create_task(
    body: TaskCreate,
    owner_id: uuid.UUID = Depends(get_current_user_id),
    svc: TaskService = Depends(_task_svc),
):
    """Create a task owned by the caller."""
    task = await svc.create_task(
        owner_id,
        title=body.title,
        description=body.description,
        status=body.status,
        priority=body.priority,
        due_date=body.due_date,
    )
    return TaskEnvelope(message="Task created.", task=TaskRead.model_validate(task))


@router.get("/{task_id}", response_model=TaskEnvelope)
async def get_task(
    task_id: str,
    owner_id: uuid.UUID = Depends(get_current_user_id),
    svc: TaskService = Depends(_task_svc),
):
    """Get a single task by ID."""
    task = await svc.get_task(owner_id, _parse_task_id(task_id))
    return TaskEnvelope(task=TaskRead.model_validate(task))


@router.put("/{task_id}", response_model=TaskEnvelope)
async def replace_task(
    task_id: str,
    body: TaskCreate,
    owner_id: uuid.UUID = Depends(get_current_user_id),
    svc: TaskService = Depends(_task_svc),
):
    """Replace every editable field of a task (title required)."""
    task = await svc.update_task(owner_id, _parse_task_id(task_id), body.model_dump())
    return TaskEnvelope(message="Task updated.", task=TaskRead.model_validate(task))


@router.patch("/{task_id}", response_model=TaskEnvelope)
async def update_task(
    task_id: str,
    body: TaskUpdate,
    owner_id: uuid.UUID = Depends(get_current_user_id),
    svc: TaskService = Depends(_task_svc),
):
    """Partially update a task."""
    task = await svc.update_task(owner_id, _parse_task_id(task_id), body.changes())
    return TaskEnvelope(message="Task updated.", task=TaskRead.model_validate(task))


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    owner_id: uuid.UUID = Depends(get_current_user_id),
    svc: TaskService = Depends(_task_svc),
):
    """Delete a task."""
    await svc.delete_task(owner_id, _parse_task_id(task_id))
    return {"message": "Task deleted."}
