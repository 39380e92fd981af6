"""Bulk import of board cards into scored tasks."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterator, List, Optional, Sequence, TypeVar

from core.errors import (
    CardNormalizationError,
    CardSourceError,
    ImportAuthError,
    ImportFetchError,
    ImportStoreError,
    ImportValidationError,
    MalformedResponseError,
    NoValidTasksError,
    NotSignedInError,
    StoreError,
)
from core.log import get_logger
from core.priorities import Effort, Status, score_task
from core.settings import IMPORT, PRIORITY, ImportSettings, PrioritySettings
from models.card import ExternalCard
from models.task import Task
from services.ports import CardSource, TaskSink
from services.trello import IdentityState
from utils.datetime_utils import parse_rfc3339, utc_now

T = TypeVar("T")

IMPORT_SOURCE = "trello"


def _batched(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    step = max(1, size)
    for start in range(0, len(items), step):
        yield items[start : start + step]


def _effort_label(labels: Sequence[str], cfg: ImportSettings) -> Optional[str]:
    for label in labels:
        name = str(label or "").strip().upper()
        if name.startswith(cfg.effort_label_prefix) or name in cfg.effort_vocabulary:
            return name
    return None


def infer_effort(card: ExternalCard, settings: Optional[ImportSettings] = None) -> Effort:
    """Effort from the first effort-like label, overridden by a long checklist list."""

    cfg = settings or IMPORT
    effort = Effort.parse(cfg.default_effort)
    label = _effort_label(card.labels, cfg)
    if label:
        if any(word in label for word in cfg.short_effort_words):
            effort = Effort.SHORT
        elif any(word in label for word in cfg.long_effort_words):
            effort = Effort.LONG
    if card.checklist_count > cfg.long_checklist_threshold:
        effort = Effort.LONG
    return effort


def resolve_due_date(card: ExternalCard, now: datetime, settings: Optional[ImportSettings] = None) -> datetime:
    cfg = settings or IMPORT
    if not card.due:
        return now + timedelta(hours=cfg.default_due_hours)
    parsed = parse_rfc3339(str(card.due))
    if parsed is None:
        raise CardNormalizationError(f"malformed due timestamp {card.due!r}", card_id=card.id)
    return parsed


def normalize_card(
    card: ExternalCard,
    owner_id: str,
    *,
    now: datetime,
    settings: Optional[ImportSettings] = None,
    priority_settings: Optional[PrioritySettings] = None,
) -> Task:
    cfg = settings or IMPORT
    if card.defect:
        raise CardNormalizationError(card.defect, card_id=card.id)
    effort = infer_effort(card, cfg)
    due_date = resolve_due_date(card, now, cfg)
    status = Status.COMPLETED if card.completed else Status.PENDING
    result = score_task(due_date, effort, status, now=now, settings=priority_settings or PRIORITY)
    return Task(
        name=(card.title or "").strip() or cfg.untitled_name,
        description=card.description or "",
        due_date=due_date,
        effort=effort.value,
        priority=result.priority.value,
        priority_score=result.score,
        status=status.value,
        owner_id=owner_id,
        source=IMPORT_SOURCE,
        external_id=card.id,
    )


@dataclass(frozen=True)
class CardOutcome:
    card: ExternalCard
    task: Optional[Task] = None
    error: Optional[CardNormalizationError] = None

    @property
    def ok(self) -> bool:
        return self.task is not None


@dataclass
class ImportReport:
    fetched: int = 0
    imported: int = 0
    dropped: int = 0
    batches_written: int = 0

    @property
    def nothing_to_import(self) -> bool:
        return self.fetched == 0


class ImportReconciler:
    """Fetch cards, normalize and score them in batches, then persist them.

    Cards inside one batch are normalized concurrently, batches run one after
    another. A card that fails normalization is dropped without aborting the
    run. Persisting is done batch by batch and is not transactional across
    batches: a store failure aborts the run but keeps earlier batches.
    """

    def __init__(
        self,
        source: CardSource,
        sink: TaskSink,
        owner_id: Optional[str],
        *,
        settings: Optional[ImportSettings] = None,
        priority_settings: Optional[PrioritySettings] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.source = source
        self.sink = sink
        self.owner_id = owner_id
        self.settings = settings or IMPORT
        self.priority_settings = priority_settings or PRIORITY
        self.clock = clock
        self.logger = get_logger("import")

    def run(self) -> ImportReport:
        if not self.owner_id:
            raise NotSignedInError("please sign in to import tasks")

        self._check_identity()
        cards = self._fetch()
        report = ImportReport(fetched=len(cards))
        if not cards:
            self.logger.info("Import: no cards to import")
            return report

        now = self.clock()
        outcomes = self._normalize_all(cards, now)
        tasks = [outcome.task for outcome in outcomes if outcome.ok]
        report.dropped = len(outcomes) - len(tasks)
        if not tasks:
            raise NoValidTasksError("no valid tasks found")

        self._persist(tasks, report)
        self.logger.info(
            "Import finished: %d fetched, %d imported, %d dropped",
            report.fetched,
            report.imported,
            report.dropped,
        )
        return report

    # ----- phases -----
    def _check_identity(self) -> None:
        check = self.source.check_identity()
        if check.state is IdentityState.UNAUTHORIZED:
            self.logger.warning("Import rejected: invalid credentials")
            raise ImportAuthError("invalid credentials")
        if check.state is not IdentityState.OK:
            self.logger.error("Import identity check failed: %s", check.status)
            raise ImportFetchError(f"fetch failed: {check.status}")

    def _fetch(self) -> List[ExternalCard]:
        try:
            cards = self.source.list_cards()
        except MalformedResponseError as exc:
            self.logger.error("Import fetch returned a malformed payload: %s", exc)
            raise ImportValidationError("invalid response shape") from exc
        except CardSourceError as exc:
            self.logger.error("Import fetch failed: %s", exc)
            raise ImportFetchError(f"fetch failed: {exc.status}") from exc
        if not isinstance(cards, (list, tuple)):
            raise ImportValidationError("invalid response shape")
        return list(cards)

    def _normalize_all(self, cards: Sequence[ExternalCard], now: datetime) -> List[CardOutcome]:
        outcomes: List[CardOutcome] = []
        workers = max(1, self.settings.batch_size)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="taskrank-import") as pool:
            for index, batch in enumerate(_batched(cards, self.settings.batch_size)):
                # map() blocks on every result, so batches never overlap
                batch_outcomes = list(pool.map(lambda card: self._normalize_one(card, now), batch))
                self.logger.debug(
                    "Normalized batch %d: %d ok of %d",
                    index,
                    sum(1 for outcome in batch_outcomes if outcome.ok),
                    len(batch_outcomes),
                )
                outcomes.extend(batch_outcomes)
        return outcomes

    def _normalize_one(self, card: ExternalCard, now: datetime) -> CardOutcome:
        try:
            task = normalize_card(
                card,
                self.owner_id or "",
                now=now,
                settings=self.settings,
                priority_settings=self.priority_settings,
            )
        except Exception as exc:
            self.logger.warning("Dropping card %s: %s", card.id, exc)
            if not isinstance(exc, CardNormalizationError):
                exc = CardNormalizationError(str(exc), card_id=card.id)
            return CardOutcome(card, error=exc)
        return CardOutcome(card, task=task)

    def _persist(self, tasks: Sequence[Task], report: ImportReport) -> None:
        for batch in _batched(tasks, self.settings.batch_size):
            try:
                written = self.sink.insert_tasks(batch)
            except StoreError as exc:
                self.logger.error(
                    "Import aborted after %d stored task(s): %s", report.imported, exc
                )
                raise ImportStoreError(f"failed to save tasks: {exc}", cause=exc) from exc
            report.imported += len(written) if written is not None else len(batch)
            report.batches_written += 1


def import_external_tasks(
    source: CardSource,
    sink: TaskSink,
    owner_id: Optional[str],
    *,
    now: Optional[datetime] = None,
    settings: Optional[ImportSettings] = None,
    priority_settings: Optional[PrioritySettings] = None,
) -> int:
    """Run one import and return the number of stored tasks (0 when nothing was fetched)."""

    clock = (lambda: now) if now is not None else utc_now
    reconciler = ImportReconciler(
        source,
        sink,
        owner_id,
        settings=settings,
        priority_settings=priority_settings,
        clock=clock,
    )
    return reconciler.run().imported


__all__ = [
    "CardOutcome",
    "ImportReconciler",
    "ImportReport",
    "import_external_tasks",
    "infer_effort",
    "normalize_card",
    "resolve_due_date",
]
