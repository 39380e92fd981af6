"""Minimal Trello REST client used by the task importer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

import requests

from core.errors import CardSourceError, MalformedResponseError
from core.log import get_logger
from core.settings import TRELLO, TrelloSettings
from models.card import ExternalCard
from storage.config import AppConfig


class IdentityState(str, Enum):
    OK = "ok"
    UNAUTHORIZED = "unauthorized"
    UNREACHABLE = "unreachable"


@dataclass(frozen=True)
class IdentityCheck:
    state: IdentityState
    status: Optional[int | str] = None

    @property
    def ok(self) -> bool:
        return self.state is IdentityState.OK


class TrelloClient:
    def __init__(
        self,
        api_key: Optional[str],
        token: Optional[str],
        *,
        settings: Optional[TrelloSettings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.token = token
        self.settings = settings or TRELLO
        self.session = session or requests.Session()
        self.logger = get_logger("trello")

    @classmethod
    def from_config(cls, config: AppConfig, **kwargs: Any) -> "TrelloClient":
        return cls(config.trello_api_key, config.trello_token, **kwargs)

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.token)

    # ------------------------------------------------------------------
    # Public API
    def check_identity(self) -> IdentityCheck:
        if not self.has_credentials:
            self.logger.warning("Trello key or token is not configured")
            return IdentityCheck(IdentityState.UNAUTHORIZED)
        try:
            response = self._get("/members/me")
        except requests.exceptions.RequestException as exc:
            self.logger.error("Trello identity check failed: %s", exc)
            return IdentityCheck(IdentityState.UNREACHABLE, type(exc).__name__)

        if response.status_code == 401:
            return IdentityCheck(IdentityState.UNAUTHORIZED, 401)
        if not response.ok:
            return IdentityCheck(IdentityState.UNREACHABLE, response.status_code)
        self.logger.debug("Trello identity check ok")
        return IdentityCheck(IdentityState.OK, response.status_code)

    def list_cards(self) -> List[ExternalCard]:
        try:
            response = self._get(
                "/members/me/cards",
                fields=",".join(self.settings.card_fields),
            )
        except requests.exceptions.RequestException as exc:
            raise CardSourceError(f"fetch failed: {exc}", status=type(exc).__name__) from exc

        if not response.ok:
            raise CardSourceError(
                f"fetch failed: {response.status_code} {response.reason or ''}".strip(),
                status=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise MalformedResponseError("invalid response shape") from exc

        if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
            raise MalformedResponseError("invalid response shape")
        self.logger.debug("Fetched %d Trello cards", len(payload))
        cards: List[ExternalCard] = []
        for item in payload:
            try:
                cards.append(ExternalCard.from_trello(item))
            except Exception as exc:
                self.logger.warning("Unreadable Trello card %s: %s", item.get("id"), exc)
                cards.append(ExternalCard.unreadable(item.get("id"), f"unreadable card: {exc}"))
        return cards

    # ------------------------------------------------------------------
    # helpers
    def _get(self, path: str, **params: Any) -> requests.Response:
        query: Dict[str, Any] = {"key": self.api_key, "token": self.token}
        query.update(params)
        return self.session.get(
            f"{self.settings.api_base}{path}",
            params=query,
            timeout=self.settings.timeout_sec,
        )


__all__ = ["IdentityCheck", "IdentityState", "TrelloClient"]
