from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import User
from ...models_records import Task


class TaskRepository:
    @staticmethod
    def _query(db: Session, business_id: int):
        return (
            db.query(Task)
            .options(joinedload(Task.assignee))
            .filter(Task.business_id == business_id)
        )

    @staticmethod
    def get_tasks(
        db: Session,
        business_id: int,
        assigned_to: Optional[int] = None,
        status: Optional[str] = None,
    ) -> list[Task]:
        query = TaskRepository._query(db, business_id)
        if assigned_to is not None:
            query = query.filter(Task.assigned_to == assigned_to)
        if status:
            query = query.filter(Task.status == status)
        return query.order_by(Task.start_at.desc(), Task.id.desc()).all()

    @staticmethod
    def get_tasks_in_range(
        db: Session,
        business_id: int,
        start: datetime,
        end: datetime,
        assigned_to: Optional[int] = None,
    ) -> list[Task]:
        query = TaskRepository._query(db, business_id).filter(
            Task.start_at >= start, Task.start_at <= end
        )
        if assigned_to is not None:
            query = query.filter(Task.assigned_to == assigned_to)
        return query.order_by(Task.start_at.asc(), Task.id.asc()).all()

    @staticmethod
    def get_task(db: Session, task_id: int, business_id: int) -> Optional[Task]:
        return TaskRepository._query(db, business_id).filter(Task.id == task_id).first()

    @staticmethod
    def get_user(db: Session, user_id: int, business_id: int) -> Optional[User]:
        return (
            db.query(User)
            .filter(User.id == user_id, User.business_id == business_id)
            .first()
        )

    @staticmethod
    def create_task(db: Session, business_id: int, **data) -> Task:
        task = Task(business_id=business_id, **data)
        db.add(task)
        db.commit()
        return task

    @staticmethod
    def update_task(db: Session, task: Task, **updates) -> Task:
        for key, value in updates.items():
            setattr(task, key, value)
        db.commit()
        return task

    @staticmethod
    def delete_task(db: Session, task: Task) -> None:
        db.delete(task)
        db.commit()
