# Per-conversation state for the augmenter.
# Everything a turn reads or writes lives here instead of in module globals.

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Optional

from txtai_thinking.search.types import SearchResult
from txtai_thinking.settings import ThinkingSettings
from .notify import Notifier
from .prompts import EXTENSION_PROMPT_TAG, PromptSlots
from .types import Placement


@dataclass
class AugmentationSession:
    session_id: str
    settings: ThinkingSettings = field(default_factory=ThinkingSettings)
    slots: PromptSlots = field(default_factory=PromptSlots)
    notifier: Notifier = field(default_factory=Notifier)
    variables: Dict[str, str] = field(default_factory=dict)
    current_results: Optional[SearchResult] = None

    def set_reference_prompt(self, value: str) -> None:
        self.slots.set(EXTENSION_PROMPT_TAG, value, Placement.IN_PROMPT, 0, False)

    def clear_reference_prompt(self) -> None:
        self.slots.clear(EXTENSION_PROMPT_TAG)

    @property
    def reference_prompt(self) -> str:
        return self.slots.value(EXTENSION_PROMPT_TAG)


class SessionRegistry:
    """Sessions keyed by id; each new session starts from the current settings."""

    def __init__(self):
        self.sessions: Dict[str, AugmentationSession] = {}
        self._lock = asyncio.Lock()

    async def get(self, session_id: str, settings: ThinkingSettings) -> AugmentationSession:
        async with self._lock:
            session = self.sessions.get(session_id)
            if session is None:
                session = AugmentationSession(session_id=session_id, settings=settings)
                self.sessions[session_id] = session
            else:
                session.settings = settings
            return session

    async def drop(self, session_id: str) -> bool:
        async with self._lock:
            return self.sessions.pop(session_id, None) is not None
