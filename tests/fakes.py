# tests/fakes.py

from __future__ import annotations

from typing import List, Optional, Sequence

from core.errors import CardSourceError, MalformedResponseError, StoreError
from models.card import ExternalCard
from models.task import Task
from services.trello import IdentityCheck, IdentityState


class FakeCardSource:
    """In-memory card source recording which calls were made."""

    def __init__(
        self,
        cards: Optional[List[ExternalCard]] = None,
        *,
        identity: IdentityCheck = IdentityCheck(IdentityState.OK, 200),
        malformed: bool = False,
        fetch_status: Optional[int] = None,
    ) -> None:
        self.cards = cards or []
        self.identity = identity
        self.malformed = malformed
        self.fetch_status = fetch_status
        self.calls: list[str] = []

    def check_identity(self) -> IdentityCheck:
        self.calls.append("check_identity")
        return self.identity

    def list_cards(self) -> List[ExternalCard]:
        self.calls.append("list_cards")
        if self.malformed:
            raise MalformedResponseError("invalid response shape")
        if self.fetch_status is not None:
            raise CardSourceError("fetch failed", status=self.fetch_status)
        return list(self.cards)


class FakeSink:
    """Collects inserted batches; can be told to fail on the n-th insert call."""

    def __init__(self, *, fail_on_call: Optional[int] = None, owner_id: Optional[str] = "user-1") -> None:
        self.batches: list[list[Task]] = []
        self.fail_on_call = fail_on_call
        self.owner_id = owner_id
        self._calls = 0

    @property
    def inserted(self) -> list[Task]:
        return [task for batch in self.batches for task in batch]

    def insert_tasks(self, records: Sequence[Task]) -> Sequence[Task]:
        self._calls += 1
        if self.fail_on_call is not None and self._calls == self.fail_on_call:
            raise StoreError("database is locked")
        self.batches.append(list(records))
        return records

    def get_current_user(self) -> Optional[str]:
        return self.owner_id


def make_card(index: int = 0, **overrides) -> ExternalCard:
    fields = {
        "id": f"card-{index}",
        "title": f"Card {index}",
        "description": "",
        "due": None,
        "labels": (),
        "checklist_count": 0,
        "completed": False,
    }
    fields.update(overrides)
    return ExternalCard(**fields)
