# taskrank/services/tasks.py
from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional

from core.errors import NotSignedInError
from core.log import get_logger
from core.priorities import Effort, Priority, Status, normalize_priority, score_task
from core.settings import PRIORITY, PrioritySettings
from models.task import Task
from services.importer import ImportReconciler, ImportReport
from services.ports import CardSource
from services.task_store import TaskStore
from utils.datetime_utils import ensure_utc, utc_now


class TaskService:
    """Manual task entry and lifecycle on top of :class:`TaskStore`.

    Every write goes through the priority engine so that ``priority`` and
    ``priority_score`` always match the stored deadline, effort and status.
    """

    def __init__(
        self,
        store: Optional[TaskStore] = None,
        *,
        clock: Callable[[], datetime] = utc_now,
        priority_settings: Optional[PrioritySettings] = None,
    ) -> None:
        self.store = store or TaskStore()
        self.clock = clock
        self.priority_settings = priority_settings or PRIORITY
        self.logger = get_logger("tasks")

    def _require_owner(self, action: str) -> str:
        owner_id = self.store.get_current_user()
        if not owner_id:
            raise NotSignedInError(f"please sign in to {action}")
        return owner_id

    def add(
        self,
        name: str,
        due_date: datetime,
        effort: Effort | str = Effort.MEDIUM,
        description: Optional[str] = None,
    ) -> Task:
        owner_id = self._require_owner("create tasks")
        title = (name or "").strip()
        if not title:
            raise ValueError("Task name must not be empty")
        effort_value = Effort.parse(effort)
        due = ensure_utc(due_date)
        result = score_task(
            due,
            effort_value,
            Status.PENDING,
            now=self.clock(),
            settings=self.priority_settings,
        )
        task = Task(
            name=title,
            description=(description or "").strip(),
            due_date=due,
            effort=effort_value.value,
            priority=result.priority.value,
            priority_score=result.score,
            status=Status.PENDING.value,
            owner_id=owner_id,
        )
        (stored,) = self.store.insert_tasks([task])
        self.logger.info("Task %s created with %s/%d", stored.id, stored.priority, stored.priority_score)
        return stored

    def _owned(self, task_id: int, action: str) -> Optional[Task]:
        owner_id = self._require_owner(action)
        task = self.store.get(task_id)
        if not task or task.owner_id != owner_id:
            return None
        return task

    def complete(self, task_id: int) -> Optional[Task]:
        task = self._owned(task_id, "complete tasks")
        if not task:
            return None
        result = score_task(
            task.due_date,
            task.effort,
            Status.COMPLETED,
            now=self.clock(),
            settings=self.priority_settings,
        )
        self.logger.info("Task %s completed", task_id)
        return self.store.update_status(
            task_id,
            Status.COMPLETED,
            priority=result.priority,
            priority_score=result.score,
        )

    def delete(self, task_id: int) -> bool:
        if not self._owned(task_id, "delete tasks"):
            return False
        deleted = self.store.delete(task_id)
        if deleted:
            self.logger.info("Task %s deleted", task_id)
        return deleted

    def list(self, priority: Priority | str | None = None) -> List[Task]:
        owner_id = self._require_owner("list tasks")
        return self.store.list_tasks(owner_id, normalize_priority(priority))

    def import_from(self, source: CardSource) -> ImportReport:
        reconciler = ImportReconciler(
            source,
            self.store,
            self.store.get_current_user(),
            priority_settings=self.priority_settings,
            clock=self.clock,
        )
        return reconciler.run()


__all__ = ["TaskService"]
