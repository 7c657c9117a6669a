# Prompt fragments: the reference-block template and the named prompt slots
# the host assembles into the final system message.

from __future__ import annotations
from typing import Dict, List, Optional

from txtai_thinking.settings import DEFAULT_TEMPLATE, PLACEHOLDER
from .types import Placement, PromptSlot

EXTENSION_PROMPT_TAG = "3_txtai_thinking"

REFERENCE_OPEN = "<txtai_box>"
REFERENCE_CLOSE = "</txtai_box>"


def format_reference_block(template: str, text: str) -> str:
    """Put `text` into the first placeholder of `template`."""
    return (template or DEFAULT_TEMPLATE).replace(PLACEHOLDER, text, 1)


class PromptSlots:
    """Named prompt fragments. Setting a slot always replaces its value."""

    def __init__(self):
        self._slots: Dict[str, PromptSlot] = {}

    def set(
        self,
        key: str,
        value: str,
        placement: Placement = Placement.IN_PROMPT,
        depth: int = 0,
        scan: bool = False,
    ) -> None:
        self._slots[key] = PromptSlot(key=key, value=value, placement=placement, depth=depth, scan=scan)

    def clear(self, key: str) -> None:
        self.set(key, "")

    def get(self, key: str) -> Optional[PromptSlot]:
        return self._slots.get(key)

    def value(self, key: str) -> str:
        slot = self._slots.get(key)
        return slot.value if slot else ""

    def active(self, placement: Placement) -> List[PromptSlot]:
        """Non-empty slots for a placement, ordered by key."""
        return sorted(
            (s for s in self._slots.values() if s.value and s.placement == placement),
            key=lambda s: s.key,
        )


def build_system_prompt(base: str, slots: PromptSlots) -> str:
    parts = [base.strip()] if base and base.strip() else []
    parts.extend(s.value.strip() for s in slots.active(Placement.IN_PROMPT))
    return "\n\n".join(parts)
