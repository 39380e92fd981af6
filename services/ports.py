"""
Ports (interfaces) used by the import pipeline.

The reconciler depends on Protocols instead of concrete implementations, so the
board client and the task store can be swapped for fakes in tests.
"""
from __future__ import annotations

from typing import Optional, Protocol, Sequence

from models.card import ExternalCard
from models.task import Task
from services.trello import IdentityCheck


class CardSource(Protocol):
    def check_identity(self) -> IdentityCheck: ...

    def list_cards(self) -> list[ExternalCard]: ...


class TaskSink(Protocol):
    def insert_tasks(self, records: Sequence[Task]) -> Sequence[Task]: ...

    def get_current_user(self) -> Optional[str]: ...


__all__ = ["CardSource", "TaskSink"]
