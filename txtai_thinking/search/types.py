# Data models for the search layer.
# A search response decodes into exactly one of three shapes (HitList,
# ResultsEnvelope, SingleHit); `kind` is the tag.

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Union


@dataclass
class SearchHit:
    """One passage returned by the search service."""
    text: str
    score: Optional[float] = None

    def passes(self, threshold: float) -> bool:
        return self.score is not None and self.score >= threshold


@dataclass
class HitList:
    """Bare JSON array of hits."""
    hits: List[SearchHit] = field(default_factory=list)
    kind: Literal["list"] = "list"


@dataclass
class ResultsEnvelope:
    """Object with a `results` array of hits."""
    hits: List[SearchHit] = field(default_factory=list)
    kind: Literal["envelope"] = "envelope"


@dataclass
class SingleHit:
    """A single {text, score} object."""
    hit: SearchHit
    kind: Literal["single"] = "single"


SearchResponse = Union[HitList, ResultsEnvelope, SingleHit]


@dataclass
class SearchResult:
    """Joined, score-filtered passage text and the query that produced it."""
    query: str
    text: str

    def __bool__(self) -> bool:
        return bool(self.text)
