# Host-side generation pipeline.
# - accepts any model client (Ollama, Echo)
# - runs registered prompt modifiers once per turn
# - builds the prompt from system text + prompt slots + chat history
# - hands the reply to message-received listeners before it is stored

from __future__ import annotations
import asyncio
import os
from typing import List, Optional

import yaml

from txtai_thinking.augment.prompts import build_system_prompt
from txtai_thinking.augment.session import AugmentationSession
from txtai_thinking.augment.types import ChatMessage, GenerationType, Placement
from .types import ChatResponse, Message, MessageListener, ModelParams, PromptModifier


class ChatGenerator:
    def __init__(
        self,
        model_client,
        system_prompt: Optional[str] = None,
        context_size: int = 4096,
        config_path: Optional[str] = None,
    ):
        self.model_client = model_client
        self.config_path = config_path
        self.cfg = self._load_config()
        self.system_prompt = system_prompt if system_prompt is not None else self.cfg.get("system_prompt", "")
        self.context_size = context_size
        self._modifiers: List[PromptModifier] = []
        self._listeners: List[MessageListener] = []

    def _load_config(self):
        if not self.config_path or not os.path.exists(self.config_path):
            return {}
        with open(self.config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    # -------------------------
    # Extension points
    # -------------------------
    def register_prompt_modifier(self, modifier: PromptModifier) -> None:
        self._modifiers.append(modifier)

    def on_message_received(self, listener: MessageListener) -> None:
        self._listeners.append(listener)

    # -------------------------
    # Prompt assembly
    # -------------------------
    def _compose_messages(self, history: List[ChatMessage], session: AugmentationSession) -> List[Message]:
        turns = [Message(role="system" if m.is_system else m.role, content=m.content) for m in history]

        # in-chat slots sit `depth` turns from the end
        for slot in session.slots.active(Placement.IN_CHAT):
            pos = max(len(turns) - slot.depth, 0)
            turns.insert(pos, Message(role="system", content=slot.value))

        sys_msg = build_system_prompt(self.system_prompt, session.slots)
        return ([Message(role="system", content=sys_msg)] if sys_msg else []) + turns

    async def chat(
        self,
        session: AugmentationSession,
        user_message: str,
        history: List[ChatMessage],
        kind: str = GenerationType.NORMAL,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        abort: Optional[asyncio.Event] = None,
    ) -> ChatResponse:
        """Main entry point for one generation turn."""
        history = list(history)
        if user_message:
            history.append(ChatMessage(role="user", content=user_message))

        for modifier in self._modifiers:
            history = await modifier.on_before_generation(history, self.context_size, abort, kind, session)

        messages = self._compose_messages(history, session)
        params = ModelParams(
            temperature=temperature if temperature is not None else self.cfg.get("temperature", 0.3),
            max_tokens=max_tokens if max_tokens is not None else self.cfg.get("max_tokens", 1000),
        )

        response_text, meta = await asyncio.to_thread(self.model_client.generate, messages, params)

        reply = ChatMessage(role="assistant", content=response_text)
        for listener in self._listeners:
            await listener.on_message_received(reply, session)

        if kind != GenerationType.QUIET:
            history.append(reply)

        meta = {**meta, "augmented": bool(session.reference_prompt)}
        return ChatResponse(text=reply.content, history=history, meta=meta)
