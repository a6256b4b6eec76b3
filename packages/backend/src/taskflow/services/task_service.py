"""Task service — owner-scoped CRUD.

Learn: Every method takes the caller's id as its first argument and
never trusts a task id on its own:

- create: owner_id comes from the verified token, never from the body
- list:   the owner filter lives in the SQL WHERE clause
- get / update / delete: load by id, then require_owner(); a foreign
  task raises the same NotFoundError as a missing one

Only the fields in UPDATABLE_FIELDS can change; owner_id is not among
them, so there is no way to hand a task to someone else.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.auth.ownership import require_owner
from taskflow.db.models import Task

logger = structlog.get_logger()

UPDATABLE_FIELDS = frozenset({"title", "description", "status", "priority", "due_date"})


class TaskService:
    """Business logic for task CRUD."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Create ──────────────────────────────────────────

    async def create_task(
        self,
        owner_id: uuid.UUID,
        title: str,
        description: Optional[str] = None,
        status: str = "pending",
        priority: str = "medium",
        due_date: Optional[datetime] = None,
    ) -> Task:
        """Create a task owned by the caller."""
        task = Task(
            owner_id=owner_id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            due_date=due_date,
        )
        self.db.add(task)
        await self.db.commit()
        logger.info("task.created", task_id=task.id)
        return task

    # ─── Read ────────────────────────────────────────────

    async def _load(self, task_id: int) -> Optional[Task]:
        result = await self.db.execute(select(Task).where(Task.id == task_id))
        return result.scalars().first()

    async def get_task(self, owner_id: uuid.UUID, task_id: int) -> Task:
        """Fetch a task the caller owns. Raises NotFoundError otherwise."""
        return require_owner(owner_id, await self._load(task_id))

    async def list_tasks(
        self,
        owner_id: uuid.UUID,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Task]:
        """List the caller's tasks, newest first, with optional filters."""
        query = (
            select(Task)
            .where(Task.owner_id == owner_id)
            .order_by(Task.created_at.desc(), Task.id.desc())
            .limit(limit)
            .offset(offset)
        )
        if status:
            query = query.where(Task.status == status)
        if priority:
            query = query.where(Task.priority == priority)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    # ─── Update ──────────────────────────────────────────

    async def update_task(
        self, owner_id: uuid.UUID, task_id: int, changes: dict[str, Any]
    ) -> Task:
        """Apply field changes to a task the caller owns."""
        task = await self.get_task(owner_id, task_id)

        applied = []
        for field, value in changes.items():
            if field not in UPDATABLE_FIELDS:
                continue
            setattr(task, field, value)
            applied.append(field)

        await self.db.commit()
        logger.info("task.updated", task_id=task.id, fields=applied)
        return task

    # ─── Delete ──────────────────────────────────────────

    async def delete_task(self, owner_id: uuid.UUID, task_id: int) -> None:
        task = await self.get_task(owner_id, task_id)
        await self.db.delete(task)
        await self.db.commit()
        logger.info("task.deleted", task_id=task_id)
