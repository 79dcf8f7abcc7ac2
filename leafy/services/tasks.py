"""
Staff tasks. Completing or deleting a task closes its open TaskDue alerts.
"""
import logging
from typing import Optional

from leafy.core.errors import NotFoundError
from leafy.db.base import utcnow
from leafy.db.row_store import RowStore
from leafy.models.alert import Alert
from leafy.models.task import Task
from leafy.schemas.task import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

COMPLETED = "completed"


class TaskService:
    def __init__(self, store: RowStore):
        self.store = store

    def list_tasks(self, status: Optional[str] = None) -> list[Task]:
        criteria = [Task.status == status] if status else []
        return self.store.select(Task, *criteria, order_by=(Task.due_date, Task.created_at))

    def get_task(self, task_id: str) -> Task:
        task = self.store.get(Task, task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    def add_task(self, data: TaskCreate) -> Task:
        row = data.model_dump()
        if data.status == COMPLETED:
            row["completed_at"] = utcnow()
        task = self.store.insert(Task, [row])[0]
        return self.store.get(Task, task.id)

    def update_task(self, task_id: str, data: TaskUpdate) -> Task:
        self.get_task(task_id)
        patch = data.model_dump(exclude_unset=True)
        if patch:
            self.store.update(Task, patch, Task.id == task_id)
        return self.store.get(Task, task_id)

    def update_status(self, task_id: str, status: str) -> Task:
        """
        Move a task to ``status``.

        Completing sets completed_at and resolves the task's open TaskDue
        alerts in the same transaction; any other status clears completed_at.
        """
        self.get_task(task_id)
        with self.store.transaction():
            if status == COMPLETED:
                self.store.update(Task, {"status": status, "completed_at": utcnow()}, Task.id == task_id)
                resolved = self._resolve_task_alerts(task_id)
                if resolved:
                    logger.info(f"Task {task_id} completed; resolved {resolved} alerts")
            else:
                self.store.update(Task, {"status": status, "completed_at": None}, Task.id == task_id)
        return self.store.get(Task, task_id)

    def delete_task(self, task_id: str) -> None:
        self.get_task(task_id)
        with self.store.transaction():
            self._resolve_task_alerts(task_id)
            self.store.delete(Task, Task.id == task_id)

    def _resolve_task_alerts(self, task_id: str) -> int:
        return self.store.update(
            Alert,
            {"resolved_at": utcnow()},
            Alert.type == "TaskDue",
            Alert.related_entity_id == task_id,
            Alert.resolved_at.is_(None),
        )
