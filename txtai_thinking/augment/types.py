# Typed records shared across the augment modules.

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class GenerationType(str, Enum):
    """Why the host is generating."""
    NORMAL = "normal"
    QUIET = "quiet"
    REGENERATE = "regenerate"
    SWIPE = "swipe"
    CONTINUE = "continue"
    IMPERSONATE = "impersonate"


class Placement(str, Enum):
    """Where a prompt slot lands in the assembled prompt."""
    IN_PROMPT = "in_prompt"
    IN_CHAT = "in_chat"


@dataclass
class ChatMessage:
    """Single chat turn. `augmented` is a display marker only."""
    role: str
    content: str
    is_system: bool = False
    augmented: bool = False


@dataclass
class PromptSlot:
    key: str
    value: str = ""
    placement: Placement = Placement.IN_PROMPT
    depth: int = 0
    scan: bool = False
