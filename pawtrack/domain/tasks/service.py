"""Task service - staff agenda items shown alongside appointments"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import User
from ...models_records import Task
from ..appointments.service import parse_range
from .repository import TaskRepository
from .schemas import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

TASK_FIELD_MAP = {
    "title": "title",
    "description": "description",
    "type": "type",
    "assignedTo": "assigned_to",
    "startAt": "start_at",
    "endAt": "end_at",
    "status": "status",
    "priority": "priority",
    "notes": "notes",
}

# Columns that cannot be cleared once set
REQUIRED_FIELDS = {"title", "type", "startAt", "status", "priority"}


class TaskService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = TaskRepository()

    def _visible_to(self, user: User) -> Optional[int]:
        """Admins see every task, everyone else only the tasks assigned to them"""
        return None if user.role == "admin" else user.id

    def get_tasks(self, user: User, status: Optional[str] = None) -> list[Task]:
        return self.repo.get_tasks(self.db, user.business_id, self._visible_to(user), status)

    def get_tasks_in_range(
        self, user: User, start: Optional[datetime], end: Optional[datetime]
    ) -> list[Task]:
        start, end = parse_range(start, end)
        return self.repo.get_tasks_in_range(
            self.db, user.business_id, start, end, self._visible_to(user)
        )

    def get_task(self, task_id: int, user: User) -> Task:
        task = self.repo.get_task(self.db, task_id, user.business_id)
        if not task or (user.role != "admin" and task.assigned_to != user.id):
            raise HTTPException(status_code=404, detail="Task not found")
        return task

    def _check_assignee(self, user_id: Optional[int], business_id: int):
        if user_id is not None and not self.repo.get_user(self.db, user_id, business_id):
            raise HTTPException(status_code=404, detail="Assigned user not found")

    def create_task(self, data: TaskCreate, user: User) -> Task:
        self._check_assignee(data.assignedTo, user.business_id)
        fields = data.model_dump()
        task = self.repo.create_task(
            self.db,
            user.business_id,
            created_by=user.id,
            **{TASK_FIELD_MAP[k]: v for k, v in fields.items()},
        )
        logger.info(f"📝 Task {task.id} '{task.title}' created (assigned to {task.assigned_to})")
        return self.get_task(task.id, user)

    def update_task(self, task_id: int, data: TaskUpdate, user: User) -> Task:
        task = self.get_task(task_id, user)
        fields = data.model_dump(exclude_unset=True)

        if user.role != "admin" and set(fields) - {"status"}:
            raise HTTPException(
                status_code=403, detail="Teachers can only update the status of their tasks"
            )

        if "assignedTo" in fields:
            self._check_assignee(fields["assignedTo"], user.business_id)

        updates = {}
        for field, value in fields.items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            updates[TASK_FIELD_MAP[field]] = value

        start_at = updates.get("start_at", task.start_at)
        end_at = updates.get("end_at", task.end_at)
        if end_at is not None and end_at < start_at:
            raise HTTPException(status_code=400, detail="End time must be after start time")

        self.repo.update_task(self.db, task, **updates)
        if "status" in updates:
            logger.info(f"📝 Task {task.id} status -> {task.status}")
        return self.get_task(task.id, user)

    def delete_task(self, task_id: int, user: User) -> dict:
        task = self.get_task(task_id, user)
        self.repo.delete_task(self.db, task)
        logger.info(f"🗑️ Task {task_id} deleted")
        return {"message": "Task deleted"}
