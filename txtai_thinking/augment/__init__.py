# Retrieval augmentation: query extraction, prompt injection, reply sanitizing.

from .augmenter import ReferenceAugmenter
from .extractor import get_query_text, substitute_params
from .notify import Notification, Notifier
from .prompts import EXTENSION_PROMPT_TAG, PromptSlots, build_system_prompt, format_reference_block
from .sanitizer import strip_reference_blocks
from .session import AugmentationSession, SessionRegistry
from .types import ChatMessage, GenerationType, Placement, PromptSlot

__all__ = [
    "ReferenceAugmenter",
    "AugmentationSession",
    "SessionRegistry",
    "ChatMessage",
    "GenerationType",
    "Placement",
    "PromptSlot",
    "PromptSlots",
    "Notification",
    "Notifier",
    "EXTENSION_PROMPT_TAG",
    "build_system_prompt",
    "format_reference_block",
    "get_query_text",
    "substitute_params",
    "strip_reference_blocks",
]
