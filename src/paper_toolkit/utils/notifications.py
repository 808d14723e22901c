"""User-facing notification queue.

Pipeline steps append short title/description notices; a front end drains
them in order and shows each one. Variants follow toast conventions:
"default" for information, "warning" for degraded results and
"destructive" for errors.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT = "default"
WARNING = "warning"
DESTRUCTIVE = "destructive"

VARIANTS = (DEFAULT, WARNING, DESTRUCTIVE)


@dataclass(frozen=True)
class Notification:
    """A single notice for the user."""

    title: str
    description: str = ""
    variant: str = DEFAULT

    def __post_init__(self) -> None:
        if self.variant not in VARIANTS:
            raise ValueError(f"Unknown notification variant: {self.variant!r}")

    @property
    def is_error(self) -> bool:
        return self.variant == DESTRUCTIVE

    def __str__(self) -> str:
        if self.description:
            return f"{self.title}: {self.description}"
        return self.title


class NotificationQueue:
    """Ordered notifications with an optional listener called on append.

    Usage:
        queue = NotificationQueue(listener=show_toast)
        queue.warning("Search Error", "Failed to fetch PYQs for Algebra")
        for note in queue.drain():
            ...
    """

    def __init__(self, listener: Optional[Callable[[Notification], None]] = None) -> None:
        self._items: List[Notification] = []
        self._listener = listener

    def append(self, notification: Notification) -> None:
        """Queue a notification and hand it to the listener, if any."""
        self._items.append(notification)
        log = logger.warning if notification.variant != DEFAULT else logger.info
        log(f"Notify [{notification.variant}] {notification}")
        if self._listener is not None:
            self._listener(notification)

    def info(self, title: str, description: str = "") -> None:
        self.append(Notification(title, description, DEFAULT))

    def warning(self, title: str, description: str = "") -> None:
        self.append(Notification(title, description, WARNING))

    def error(self, title: str, description: str = "") -> None:
        self.append(Notification(title, description, DESTRUCTIVE))

    def drain(self) -> List[Notification]:
        """Return all queued notifications in order and clear the queue."""
        items, self._items = self._items, []
        return items

    def peek(self) -> List[Notification]:
        """Queued notifications without clearing."""
        return list(self._items)

    @property
    def has_errors(self) -> bool:
        return any(n.is_error for n in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def clear(self) -> None:
        self._items.clear()
