# Makes the folder importable as a package.
# Exports the search client, chunker and response types for convenience.

from .chunker import split_into_chunks
from .client import (
    SearchClient,
    SearchError,
    SearchHTTPError,
    UnexpectedResponseFormat,
    decode_response,
    join_hits,
)
from .types import HitList, ResultsEnvelope, SearchHit, SearchResult, SingleHit

__all__ = [
    "SearchClient",
    "SearchError",
    "SearchHTTPError",
    "UnexpectedResponseFormat",
    "decode_response",
    "join_hits",
    "split_into_chunks",
    "SearchHit",
    "HitList",
    "ResultsEnvelope",
    "SingleHit",
    "SearchResult",
]
