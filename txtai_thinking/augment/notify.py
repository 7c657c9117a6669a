# User-facing notifications (the toast messages of the chat UI).
# Collected per session and drained into API responses.

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Dict, List

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    level: str
    message: str


class Notifier:
    def __init__(self):
        self._pending: List[Notification] = []

    def _push(self, level: str, message: str) -> None:
        self._pending.append(Notification(level=level, message=message))
        logger.debug("notify[%s] %s", level, message)

    def info(self, message: str) -> None:
        self._push("info", message)

    def success(self, message: str) -> None:
        self._push("success", message)

    def warning(self, message: str) -> None:
        self._push("warning", message)

    def error(self, message: str) -> None:
        self._push("error", message)

    @property
    def pending(self) -> List[Notification]:
        return list(self._pending)

    def merge(self, other: "Notifier") -> None:
        """Take over another notifier's pending notifications, in order."""
        self._pending.extend(other.pending)
        other._pending.clear()

    def drain(self) -> List[Dict[str, str]]:
        """Return pending notifications as dicts and forget them."""
        out = [asdict(n) for n in self._pending]
        self._pending.clear()
        return out
