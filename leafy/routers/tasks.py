"""
Tasks router.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from leafy.core.deps import get_store
from leafy.db.row_store import RowStore
from leafy.schemas.task import TaskCreate, TaskResponse, TaskStatus, TaskStatusUpdate, TaskUpdate
from leafy.services.tasks import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=List[TaskResponse])
def list_tasks(
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    store: RowStore = Depends(get_store),
):
    return TaskService(store).list_tasks(status_filter)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(data: TaskCreate, store: RowStore = Depends(get_store)):
    return TaskService(store).add_task(data)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: str, store: RowStore = Depends(get_store)):
    return TaskService(store).get_task(task_id)


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(task_id: str, data: TaskUpdate, store: RowStore = Depends(get_store)):
    return TaskService(store).update_task(task_id, data)


@router.patch("/{task_id}/status", response_model=TaskResponse)
def update_task_status(task_id: str, data: TaskStatusUpdate, store: RowStore = Depends(get_store)):
    """Change status. Completing a task resolves its due/overdue alerts."""
    return TaskService(store).update_status(task_id, data.status)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, store: RowStore = Depends(get_store)):
    TaskService(store).delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
