from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from ...models_records import TASK_PRIORITIES, TASK_STATUSES, TASK_TYPES, Task
from ...shared.validators import UTCDateTime, validate_choice, validate_required_text


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    type: str = "other"
    assignedTo: Optional[int] = None
    startAt: UTCDateTime
    endAt: Optional[UTCDateTime] = None
    status: str = "pending"
    priority: str = "medium"
    notes: Optional[str] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        return validate_required_text(v, "Title")

    @field_validator("type")
    @classmethod
    def check_type(cls, v):
        return validate_choice(v, TASK_TYPES, "Type")

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, TASK_STATUSES, "Status")

    @field_validator("priority")
    @classmethod
    def check_priority(cls, v):
        return validate_choice(v, TASK_PRIORITIES, "Priority")

    @model_validator(mode="after")
    def check_times(self):
        if self.endAt is not None and self.endAt < self.startAt:
            raise ValueError("End time must be after start time")
        return self


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    assignedTo: Optional[int] = None
    startAt: Optional[UTCDateTime] = None
    endAt: Optional[UTCDateTime] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        return None if v is None else validate_required_text(v, "Title")

    @field_validator("type")
    @classmethod
    def check_type(cls, v):
        return validate_choice(v, TASK_TYPES, "Type")

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, TASK_STATUSES, "Status")

    @field_validator("priority")
    @classmethod
    def check_priority(cls, v):
        return validate_choice(v, TASK_PRIORITIES, "Priority")


class TaskResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    type: str
    assignedTo: Optional[int] = None
    assigneeName: Optional[str] = None
    startAt: datetime
    endAt: Optional[datetime] = None
    status: str
    priority: str
    notes: Optional[str] = None
    createdBy: Optional[int] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            type=task.type,
            assignedTo=task.assigned_to,
            assigneeName=task.assignee.full_name if task.assignee else None,
            startAt=task.start_at,
            endAt=task.end_at,
            status=task.status,
            priority=task.priority,
            notes=task.notes,
            createdBy=task.created_by,
            createdAt=task.created_at,
        )
