"""Wire the dispatcher, worker pool, and Telegram connection together.

Startup happens in two phases: the bot is constructed without a
connection, then ``login()`` authenticates and binds it. Workers only read
the connection through the ``PlatformHandle``.
"""

from __future__ import annotations

import logging
import threading

from .config import ANSWER_CACHE_TIME, MAX_PENDING_QUERIES, WORKER_COUNT
from .dispatch import Dispatcher
from .ipinfo import IPInfoClient
from .models import Query, ReplyCandidate
from .results import generic_message
from .telegram import TelegramClient, TelegramError
from .workers import OverflowPolicy, PlatformHandle, QueryPool

logger = logging.getLogger(__name__)


class IpInfoBot:
    def __init__(
        self,
        lookup: IPInfoClient,
        workers: int = WORKER_COUNT,
        max_pending: int = MAX_PENDING_QUERIES,
        policy: OverflowPolicy = OverflowPolicy.FALLBACK,
    ):
        self.dispatcher = Dispatcher(lookup)
        self.connection: PlatformHandle[TelegramClient] = PlatformHandle()
        self.pool = QueryPool(
            self.respond,
            workers=workers,
            max_pending=max_pending,
            policy=policy,
            on_overflow=self.reject,
        )
        self._stop = threading.Event()

    def login(self, client: TelegramClient) -> TelegramClient:
        """Authenticate *client* and bind it. Raises TelegramError on failure."""
        client.get_me()
        self.connection.bind(client)
        logger.info("Successfully logged in as %s", client.username)
        return client

    def on_inline_query(self, query: Query) -> None:
        """Called on the polling thread; only enqueues."""
        self.pool.submit(query)

    def respond(self, query: Query) -> None:
        """Worker side: build the cards for *query* and send them."""
        results = self.dispatcher.handle(query)
        try:
            self._answer(query, results)
        except TelegramError:
            logger.exception("Answer to query %s rejected, sending fallback", query.id)
            self._answer(query, [generic_message()])

    def reject(self, query: Query) -> None:
        self._answer(query, [generic_message()])

    def _answer(self, query: Query, results: list[ReplyCandidate]) -> None:
        self.connection.get().answer_inline_query(
            query.id,
            results,
            cache_time=ANSWER_CACHE_TIME,
            is_personal=False,
        )
        logger.debug("Answered query %s with %d result(s)", query.id, len(results))

    def run(self) -> None:
        """Poll until ``stop()`` is called. Requires a prior ``login()``."""
        client = self.connection.get(timeout=0)
        self.pool.start()
        try:
            client.poll(self.on_inline_query, stop=self._stop)
        finally:
            self.pool.shutdown()

    def stop(self) -> None:
        self._stop.set()
