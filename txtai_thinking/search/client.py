# HTTP client for a txtai-style semantic search endpoint.
#  - POSTs {query, threshold, limit, chunks} as JSON
#  - Decodes the three accepted response shapes into a tagged SearchResponse
#  - search() never raises: failures are logged, notified and become ""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import requests

from .chunker import split_into_chunks
from .types import HitList, ResultsEnvelope, SearchHit, SearchResponse, SingleHit

if TYPE_CHECKING:
    from txtai_thinking.augment.notify import Notifier
    from txtai_thinking.settings import ThinkingSettings

logger = logging.getLogger(__name__)

RESULT_LIMIT = 5
JSON_HEADERS = {"Content-Type": "application/json"}


class SearchError(Exception):
    """Base class for anything that stops a search from producing hits."""


class SearchConnectionError(SearchError):
    pass


class SearchHTTPError(SearchError):
    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = status_code
        self.reason = reason or ""
        super().__init__(f"HTTP error! status: {status_code}")


class SearchResponseError(SearchError):
    """Body was not valid JSON."""


class UnexpectedResponseFormat(SearchError):
    def __init__(self, data: Any):
        self.data = data
        super().__init__(f"Unexpected API response format: {type(data).__name__}")


# -------------------------
# Decoding
# -------------------------
def _decode_hit(item: Any) -> SearchHit:
    if not isinstance(item, dict):
        raise UnexpectedResponseFormat(item)
    text = item.get("text")
    score = item.get("score")
    if text is not None and not isinstance(text, str):
        raise UnexpectedResponseFormat(item)
    if score is not None and (isinstance(score, bool) or not isinstance(score, (int, float))):
        raise UnexpectedResponseFormat(item)
    return SearchHit(text=text or "", score=float(score) if score is not None else None)


def decode_response(data: Any) -> SearchResponse:
    """
    Decode a parsed JSON body, in priority order:
      1. [ {text, score}, ... ]
      2. { "results": [ {text, score}, ... ] }
      3. { "text": ..., "score": ... }
    Anything else raises UnexpectedResponseFormat.
    """
    if isinstance(data, list):
        return HitList(hits=[_decode_hit(x) for x in data])
    if isinstance(data, dict):
        if isinstance(data.get("results"), list):
            return ResultsEnvelope(hits=[_decode_hit(x) for x in data["results"]])
        if data.get("text"):
            return SingleHit(hit=_decode_hit(data))
    raise UnexpectedResponseFormat(data)


def join_hits(response: SearchResponse, threshold: float) -> str:
    """Keep hits scoring >= threshold and join their texts with a blank line."""
    if isinstance(response, SingleHit):
        return response.hit.text if response.hit.passes(threshold) else ""
    return "\n\n".join(h.text for h in response.hits if h.passes(threshold))


# -------------------------
# Client
# -------------------------
class SearchClient:
    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()

    def build_payload(self, text: str, settings: "ThinkingSettings") -> Dict[str, Any]:
        chunks: List[str] = split_into_chunks(text, settings.chunk_boundary)
        return {
            "query": text,
            "threshold": settings.score_threshold,
            "limit": RESULT_LIMIT,
            "chunks": chunks,
        }

    def _post(self, url: str, payload: Dict[str, Any], timeout: float) -> requests.Response:
        try:
            return self.session.post(url, json=payload, headers=JSON_HEADERS, timeout=timeout)
        except requests.RequestException as e:
            raise SearchConnectionError(str(e)) from e

    def fetch(self, text: str, settings: "ThinkingSettings") -> SearchResponse:
        """One request, decoded. Raises SearchError subclasses."""
        resp = self._post(settings.api_url, self.build_payload(text, settings), settings.request_timeout)
        if not 200 <= resp.status_code < 300:
            raise SearchHTTPError(resp.status_code, resp.reason)
        try:
            data = resp.json()
        except ValueError as e:
            raise SearchResponseError(f"Invalid JSON in response: {e}") from e

        logger.debug("txtai Thinking: API response %r", data)
        return decode_response(data)

    def search(
        self,
        text: str,
        settings: "ThinkingSettings",
        notifier: Optional["Notifier"] = None,
    ) -> str:
        """Return joined passage text for `text`, or "" on any failure."""
        if not settings.api_url:
            logger.warning("txtai Thinking: API URL not specified")
            return ""
        if not text:
            return ""

        try:
            response = self.fetch(text, settings)
        except UnexpectedResponseFormat as e:
            logger.warning("txtai Thinking: Unexpected API response format %r", e.data)
            return ""
        except SearchError as e:
            logger.error("txtai Thinking: Failed to query API: %s", e)
            if notifier is not None:
                notifier.error(f"txtai API query failed: {e}")
            return ""

        return join_hits(response, settings.score_threshold)

    def test_connection(self, settings: "ThinkingSettings", notifier: Optional["Notifier"] = None) -> bool:
        payload = {"query": "test connection", "threshold": 0, "limit": 1}
        try:
            resp = self._post(settings.api_url, payload, settings.request_timeout)
        except SearchConnectionError as e:
            message = f"Connection failed: {e}"
            ok = False
        else:
            ok = 200 <= resp.status_code < 300
            message = (
                "Connection to txtai API successful!"
                if ok
                else f"Connection failed: {resp.status_code} {resp.reason or ''}".rstrip()
            )

        logger.info("txtai Thinking: %s", message)
        if notifier is not None:
            if ok:
                notifier.success(message)
            else:
                notifier.error(message)
        return ok

    def close(self):
        self.session.close()
