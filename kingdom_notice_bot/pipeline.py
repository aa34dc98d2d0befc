"""One polling run: scrape new notices, deliver them, advance the cursor."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Callable, List, Optional

from .crawler import NOTICE_LIST_URL, fetch_html, parse_notice_datetime, parse_notice_list
from .models import Notice
from .notifier import DiscordNotifier
from .state import CursorStore

LOGGER = logging.getLogger(__name__)


class NoticePipeline:
    """Composes the crawler, the cursor store and the notifier.

    ``fetch`` is a blocking ``url -> text`` callable; it runs in a worker
    thread so the event loop stays free while waiting on the network. The
    cursor store is called the same way; runs are sequential, so it is never
    touched from two threads at once.
    """

    def __init__(
        self,
        store: CursorStore,
        notifier: DiscordNotifier,
        *,
        fetch: Callable[[str], str] = fetch_html,
        list_url: str = NOTICE_LIST_URL,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self.fetch = fetch
        self.list_url = list_url

    async def scrape(self, last_id: Optional[int]) -> List[Notice]:
        """Return notices above ``last_id``, newest first, with timestamps."""
        html = await asyncio.to_thread(self.fetch, self.list_url)
        candidates = parse_notice_list(html, last_id)

        notices: list[Notice] = []
        for candidate in candidates:
            detail = await asyncio.to_thread(self.fetch, candidate.url)
            timestamp = parse_notice_datetime(detail)
            notices.append(dataclasses.replace(candidate, timestamp=timestamp))
        return notices

    async def run_once(self) -> List[Notice]:
        """Deliver every unseen notice oldest first and return them.

        The cursor is written only after the whole batch went out, so a
        failure midway means the next run sends the batch again.
        """
        last_id = await asyncio.to_thread(self.store.get)
        notices = await self.scrape(last_id)
        LOGGER.info("prev_id: %s - %d items", last_id, len(notices))

        if not notices:
            return []

        new_last_id = notices[0].number
        delivered = list(reversed(notices))
        for notice in delivered:
            await self.notifier.send(notice)

        await asyncio.to_thread(self.store.set, new_last_id)
        return delivered
