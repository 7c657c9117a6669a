# Strip reference blocks out of generated text before it is stored.

from __future__ import annotations
import re

from .prompts import REFERENCE_CLOSE, REFERENCE_OPEN

_REFERENCE_BLOCK = re.compile(
    re.escape(REFERENCE_OPEN) + r".*?" + re.escape(REFERENCE_CLOSE),
    re.DOTALL,
)


def strip_reference_blocks(text: str) -> str:
    if not text:
        return text
    # removing an inner block can splice a new one together from its neighbours
    while True:
        stripped = _REFERENCE_BLOCK.sub("", text)
        if stripped == text:
            return stripped
        text = stripped
