from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin, require_staff
from ...database import get_db
from ...models import User
from .schemas import TaskCreate, TaskResponse, TaskUpdate
from .service import TaskService

router = APIRouter(prefix="/tasks", tags=["Tasks"])


def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    return TaskService(db)


@router.get("", response_model=list[TaskResponse])
async def get_tasks(
    status: Optional[str] = Query(None),
    current_user: User = Depends(require_staff),
    service: TaskService = Depends(get_task_service),
):
    return [TaskResponse.from_task(t) for t in service.get_tasks(current_user, status)]


@router.get("/range", response_model=list[TaskResponse])
async def get_tasks_in_range(
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    current_user: User = Depends(require_staff),
    service: TaskService = Depends(get_task_service),
):
    return [
        TaskResponse.from_task(t) for t in service.get_tasks_in_range(current_user, start, end)
    ]


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: int,
    current_user: User = Depends(require_staff),
    service: TaskService = Depends(get_task_service),
):
    return TaskResponse.from_task(service.get_task(task_id, current_user))


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    data: TaskCreate,
    current_user: User = Depends(require_admin),
    service: TaskService = Depends(get_task_service),
):
    return TaskResponse.from_task(service.create_task(data, current_user))


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    data: TaskUpdate,
    current_user: User = Depends(require_staff),
    service: TaskService = Depends(get_task_service),
):
    """Admins edit any field; a teacher may only move the status of a task assigned to them"""
    return TaskResponse.from_task(service.update_task(task_id, data, current_user))


@router.delete("/{task_id}")
async def delete_task(
    task_id: int,
    current_user: User = Depends(require_admin),
    service: TaskService = Depends(get_task_service),
):
    return service.delete_task(task_id, current_user)
