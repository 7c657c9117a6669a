# Split query text into auxiliary chunks for the search service.
# Stateless; the chunks ride along with the query, they never filter it.

from __future__ import annotations
from typing import List


def split_into_chunks(text: str, boundary: str = "") -> List[str]:
    if not text:
        return []

    if boundary:
        return [piece.strip() for piece in text.split(boundary) if piece.strip()]

    return [text]
