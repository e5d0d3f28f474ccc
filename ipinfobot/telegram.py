"""Minimal Telegram Bot API client: login, long polling, inline answers."""

from __future__ import annotations

import logging
import threading
from typing import Callable

import requests

from .config import (
    ANSWER_CACHE_TIME,
    MAP_URL,
    POLL_RETRY_DELAY,
    POLL_TIMEOUT,
    REQUEST_TIMEOUT,
    TELEGRAM_API_URL,
    USER_AGENT,
)
from .models import Query, ReplyCandidate

logger = logging.getLogger(__name__)


class TelegramError(Exception):
    """The Bot API rejected a request or could not be reached."""


def serialize_result(candidate: ReplyCandidate) -> dict:
    """Convert a card into an InlineQueryResult object."""
    if candidate.point is not None:
        return {
            "type": "location",
            "id": candidate.id,
            "title": candidate.title,
            "latitude": candidate.point.latitude,
            "longitude": candidate.point.longitude,
        }

    result = {
        "type": "article",
        "id": candidate.id,
        "title": candidate.title,
        "input_message_content": candidate.document.to_message(),
    }
    if candidate.description:
        result["description"] = candidate.description
    point = candidate.document.point
    if point is not None:
        result["url"] = MAP_URL.format(
            latitude=point.latitude, longitude=point.longitude
        )
    return result


class TelegramClient:
    def __init__(
        self,
        token: str,
        base_url: str = TELEGRAM_API_URL,
        session: requests.Session | None = None,
    ):
        self._url = f"{base_url.rstrip('/')}/bot{token}"
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})
        self.username: str | None = None

    def call(
        self, method: str, params: dict | None = None, timeout: float = REQUEST_TIMEOUT
    ):
        """POST a Bot API method and return its ``result`` field."""
        try:
            resp = self.session.post(
                f"{self._url}/{method}", json=params or {}, timeout=timeout
            )
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise TelegramError(f"{method} failed: {exc}") from exc

        if not data.get("ok"):
            raise TelegramError(
                f"{method} failed: {data.get('description', resp.status_code)}"
            )
        return data.get("result")

    def get_me(self) -> dict:
        """Check the token and remember the bot's username."""
        me = self.call("getMe")
        self.username = me.get("username")
        return me

    def get_updates(
        self, offset: int | None = None, timeout: int = POLL_TIMEOUT
    ) -> list[dict]:
        params = {"timeout": timeout, "allowed_updates": ["inline_query"]}
        if offset is not None:
            params["offset"] = offset
        return self.call("getUpdates", params, timeout=timeout + REQUEST_TIMEOUT)

    def answer_inline_query(
        self,
        query_id: str,
        results: list[ReplyCandidate],
        cache_time: int = ANSWER_CACHE_TIME,
        is_personal: bool = False,
    ) -> None:
        self.call(
            "answerInlineQuery",
            {
                "inline_query_id": query_id,
                "results": [serialize_result(r) for r in results],
                "cache_time": cache_time,
                "is_personal": is_personal,
            },
        )

    def poll(
        self,
        on_query: Callable[[Query], None],
        stop: threading.Event | None = None,
        timeout: int = POLL_TIMEOUT,
    ) -> None:
        """Long-poll for inline queries until *stop* is set.

        *on_query* runs on this thread, so it must return quickly.
        """
        stop = stop or threading.Event()
        offset = None

        while not stop.is_set():
            try:
                updates = self.get_updates(offset, timeout=timeout)
            except TelegramError:
                logger.exception("Polling failed, retrying in %.0fs", POLL_RETRY_DELAY)
                stop.wait(POLL_RETRY_DELAY)
                continue

            for update in updates:
                offset = update["update_id"] + 1
                inline = update.get("inline_query")
                if inline is None:
                    continue
                on_query(Query(id=inline["id"], text=inline.get("query", "")))
