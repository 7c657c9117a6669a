# Pull the query text for a turn out of the chat history.

from __future__ import annotations
import re
from typing import Mapping, Optional, Sequence

from .types import ChatMessage

# -------- regexes
_MULTI_NL = re.compile(r"\n+")
_MACRO = re.compile(r"\{\{\s*([A-Za-z_]\w*)\s*\}\}")


def collapse_newlines(text: str) -> str:
    return _MULTI_NL.sub("\n", text)


def substitute_params(text: str, variables: Optional[Mapping[str, str]] = None) -> str:
    """Replace {{name}} macros with session variables; unknown macros are left as-is."""
    if not variables:
        return text
    lookup = {k.lower(): str(v) for k, v in variables.items()}

    def _repl(m: re.Match) -> str:
        return lookup.get(m.group(1).lower(), m.group(0))

    return _MACRO.sub(_repl, text)


def get_query_text(
    chat: Sequence[ChatMessage],
    query_messages: int,
    variables: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Join the last `query_messages` non-system, non-empty messages
    (chronological order, one per line) into a single query string.
    Returns "" when nothing is eligible.
    """
    if query_messages <= 0:
        return ""

    texts = [substitute_params(m.content, variables) for m in chat if not m.is_system and m.content]
    texts = [t for t in texts if t]

    # most recent first while selecting, back to chronological for the join
    picked = texts[::-1][:query_messages]
    picked.reverse()

    return collapse_newlines("\n".join(picked)).strip()
