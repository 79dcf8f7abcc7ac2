"""
Task and app setting schemas.
"""
import datetime as dt
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TaskPriority = Literal["low", "medium", "high", "urgent"]
TaskStatus = Literal["pending", "in_progress", "completed"]
StaffRole = Literal["admin", "staff"]


class TaskCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    due_date: Optional[dt.date] = None
    priority: TaskPriority = "medium"
    status: TaskStatus = "pending"
    assigned_to: StaffRole = "staff"
    created_by: StaffRole = "admin"


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[dt.date] = None
    priority: Optional[TaskPriority] = None
    assigned_to: Optional[StaffRole] = None


class TaskStatusUpdate(BaseModel):
    status: TaskStatus


class TaskResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    due_date: Optional[dt.date] = None
    priority: str
    status: str
    assigned_to: str
    created_by: str
    completed_at: Optional[dt.datetime] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)


class SettingValue(BaseModel):
    value: Any


class SettingResponse(BaseModel):
    key: str
    value: Any
