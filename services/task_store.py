from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from core.errors import StoreError
from core.priorities import Priority, Status
from models.task import Task
from storage.config import load_config
from storage.db import get_session


class TaskStore:
    """SQLModel-backed persistence for tasks.

    Each :meth:`insert_tasks` call is a single commit, so a batch is written
    entirely or not at all. Nothing spans several calls.
    """

    def __init__(
        self,
        session_factory=get_session,
        *,
        owner_id: Optional[str] = None,
        config_path: Optional[Path] = None,
    ) -> None:
        self._session_factory = session_factory
        self._owner_id = owner_id
        self._config_path = config_path

    def get_current_user(self) -> Optional[str]:
        if self._owner_id:
            return self._owner_id
        return load_config(self._config_path).owner_id

    def insert_tasks(self, records: Sequence[Task]) -> List[Task]:
        items = list(records)
        if not items:
            return []
        with self._session_factory() as session:
            try:
                session.add_all(items)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise StoreError(f"failed to insert {len(items)} task(s): {exc}") from exc
            for task in items:
                session.refresh(task)
        return items

    def get(self, task_id: int) -> Optional[Task]:
        with self._session_factory() as session:
            return session.get(Task, task_id)

    def list_tasks(self, owner_id: str, priority: Optional[Priority] = None) -> List[Task]:
        with self._session_factory() as session:
            stmt = select(Task).where(Task.owner_id == owner_id)
            if priority is not None:
                stmt = stmt.where(Task.priority == priority.value)
            stmt = stmt.order_by(Task.due_date.asc(), Task.priority_score.desc(), Task.id.asc())
            return list(session.exec(stmt))

    def update_status(
        self,
        task_id: int,
        status: Status,
        *,
        priority: Priority,
        priority_score: int,
    ) -> Optional[Task]:
        with self._session_factory() as session:
            task = session.get(Task, task_id)
            if not task:
                return None
            task.status = status.value
            task.priority = priority.value
            task.priority_score = priority_score
            try:
                session.add(task)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise StoreError(f"failed to update task {task_id}: {exc}") from exc
            session.refresh(task)
            return task

    def delete(self, task_id: int) -> bool:
        with self._session_factory() as session:
            task = session.get(Task, task_id)
            if not task:
                return False
            try:
                session.delete(task)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                raise StoreError(f"failed to delete task {task_id}: {exc}") from exc
            return True


__all__ = ["TaskStore"]
