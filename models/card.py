"""Transient card records fetched from an external board."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ExternalCard:
    """A task-like card as delivered by the board service, before normalization.

    ``due`` keeps the raw timestamp text; parsing happens during normalization
    so that a bad value only drops this one card. A payload that could not be
    read at all becomes a placeholder with ``defect`` set.
    """

    id: Optional[str] = None
    title: str = ""
    description: str = ""
    due: Optional[str] = None
    labels: tuple[str, ...] = field(default_factory=tuple)
    checklist_count: int = 0
    completed: bool = False
    defect: Optional[str] = None

    @classmethod
    def unreadable(cls, card_id: Any, reason: str) -> "ExternalCard":
        return cls(id=None if card_id is None else str(card_id), defect=reason)

    @classmethod
    def from_trello(cls, payload: Dict[str, Any]) -> "ExternalCard":
        labels = tuple(
            str(label.get("name") or "")
            for label in payload.get("labels") or []
            if isinstance(label, dict)
        )
        checklists = payload.get("idChecklists")
        if checklists is None:
            checklists = payload.get("checklists")
        return cls(
            id=payload.get("id"),
            title=str(payload.get("name") or ""),
            description=str(payload.get("desc") or ""),
            due=payload.get("due") or None,
            labels=labels,
            checklist_count=len(checklists) if isinstance(checklists, list) else 0,
            completed=bool(payload.get("dueComplete")),
        )


__all__ = ["ExternalCard"]
