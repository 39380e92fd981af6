"""Exception hierarchy shared by the tracker services."""
from __future__ import annotations

from typing import Optional


class TaskrankError(Exception):
    """Base class for errors with a human readable message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class StoreError(TaskrankError):
    """Raised by the task store when a write cannot be committed."""


class CardSourceError(TaskrankError):
    """The external card source answered with a non-success status."""

    def __init__(self, message: str, status: Optional[int | str] = None) -> None:
        super().__init__(message)
        self.status = status


class MalformedResponseError(CardSourceError):
    """The external card source returned a payload of the wrong shape."""


class CardNormalizationError(TaskrankError):
    """A single external card could not be turned into a task."""

    def __init__(self, message: str, card_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.card_id = card_id


class TaskImportError(TaskrankError):
    """Base class for failures that abort an import run."""


class NotSignedInError(TaskImportError):
    pass


class ImportAuthError(TaskImportError):
    pass


class ImportFetchError(TaskImportError):
    pass


class ImportValidationError(TaskImportError):
    pass


class NoValidTasksError(TaskImportError):
    pass


class ImportStoreError(TaskImportError):
    def __init__(self, message: str, cause: Optional[StoreError] = None) -> None:
        super().__init__(message)
        self.cause = cause


__all__ = [
    "TaskrankError",
    "StoreError",
    "CardSourceError",
    "MalformedResponseError",
    "CardNormalizationError",
    "TaskImportError",
    "NotSignedInError",
    "ImportAuthError",
    "ImportFetchError",
    "ImportValidationError",
    "NoValidTasksError",
    "ImportStoreError",
]
