# Per-turn driver: chat history -> query -> search -> reference block in the prompt.
# Registered with the host's ChatGenerator as a prompt modifier and as a
# message-received listener. Failures never block generation.

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from txtai_thinking.search import SearchClient, SearchResult
from .extractor import get_query_text
from .notify import Notifier
from .prompts import format_reference_block
from .sanitizer import strip_reference_blocks
from .session import AugmentationSession
from .types import ChatMessage, GenerationType

logger = logging.getLogger(__name__)


class ReferenceAugmenter:
    def __init__(self, client: Optional[SearchClient] = None):
        self.client = client or SearchClient()

    # -------------------------
    # Search (abortable)
    # -------------------------
    async def _search(self, text: str, session: AugmentationSession, abort: Optional[asyncio.Event]) -> str:
        if abort is not None and abort.is_set():
            logger.info("txtai Thinking: search skipped, generation already aborted")
            return ""

        # the worker reports into its own notifier; only a search that is
        # waited for hands its notifications on to the session
        notes = Notifier()
        task = asyncio.ensure_future(
            asyncio.to_thread(self.client.search, text, session.settings, notes)
        )
        if abort is None:
            try:
                return await task
            finally:
                session.notifier.merge(notes)

        waiter = asyncio.ensure_future(abort.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()

        if task in done:
            session.notifier.merge(notes)
            return task.result()

        # the worker thread finishes on its own; its result and notifications are discarded
        task.cancel()
        logger.info("txtai Thinking: search abandoned, generation aborted")
        return ""

    # -------------------------
    # Host hooks
    # -------------------------
    async def on_before_generation(
        self,
        chat: List[ChatMessage],
        context_size: int,
        abort: Optional[asyncio.Event],
        kind: str,
        session: AugmentationSession,
    ) -> List[ChatMessage]:
        """Install this turn's reference block in the session prompt slot. Returns `chat` as given."""
        settings = session.settings
        if not settings.enabled:
            # a block left over from an enabled turn must not reach the prompt
            session.clear_reference_prompt()
            session.current_results = None
            return chat

        try:
            session.clear_reference_prompt()
            session.current_results = None

            if kind == GenerationType.QUIET:
                return chat

            query_text = get_query_text(chat, settings.query_messages, session.variables)
            if not query_text:
                logger.debug("txtai Thinking: No text to query")
                return chat

            results = await self._search(query_text, session, abort)
            if not results:
                logger.debug("txtai Thinking: No results returned from API")
                return chat

            session.current_results = SearchResult(query=query_text, text=results)
            session.set_reference_prompt(format_reference_block(settings.template, results))

            logger.info(
                "txtai Thinking: Added search results to prompt (query_length=%d, results_length=%d, context_size=%s)",
                len(query_text),
                len(results),
                context_size,
            )

            if chat:
                chat[-1].augmented = True

        except Exception as e:
            logger.exception("txtai Thinking: Failed to rearrange chat")
            session.notifier.error(f"Failed to process txtai search: {e}")

        return chat

    async def on_message_received(self, message: Optional[ChatMessage], session: AugmentationSession) -> None:
        if not session.settings.enabled:
            return
        if message is None or not message.content:
            return
        message.content = strip_reference_blocks(message.content)

    # -------------------------
    # User actions
    # -------------------------
    def clear_search_results(self, session: AugmentationSession) -> None:
        session.current_results = None
        session.clear_reference_prompt()
        logger.info("txtai Thinking: Cleared search results")
        session.notifier.info("Cleared txtai search results")

    async def test_connection(self, session: AugmentationSession) -> bool:
        return await asyncio.to_thread(self.client.test_connection, session.settings, session.notifier)
