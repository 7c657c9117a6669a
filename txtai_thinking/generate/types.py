# Simple, typed records shared across generator modules, plus the host's
# extension interfaces.

from __future__ import annotations
import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from txtai_thinking.augment.session import AugmentationSession
from txtai_thinking.augment.types import ChatMessage


@dataclass
class Message:
    """Single model-facing turn: system, user, or assistant."""
    role: str
    content: str


@dataclass
class ModelParams:
    """LLM parameters per request."""
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


@dataclass
class ChatResponse:
    """Final response from the generator."""
    text: str
    history: List[ChatMessage]
    meta: Dict[str, Any] = field(default_factory=dict)


class PromptModifier(Protocol):
    """Called once per generation turn, before the prompt is assembled."""

    async def on_before_generation(
        self,
        chat: List[ChatMessage],
        context_size: int,
        abort: Optional[asyncio.Event],
        kind: str,
        session: AugmentationSession,
    ) -> List[ChatMessage]: ...


class MessageListener(Protocol):
    async def on_message_received(self, message: ChatMessage, session: AugmentationSession) -> None: ...
