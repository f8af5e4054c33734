"""
In-process notification bus.

Services publish toast-style notifications here; listeners (websocket
pushers, tests) subscribe explicitly. Delivery is synchronous and best
effort: a failing handler is logged and skipped, nothing is retried.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List
from uuid import UUID, uuid4

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MS = 5000
TRIO_FORMATION_DURATION_MS = 8000


class NotificationKind(str, Enum):
    TRIO_FORMATION = "trio_formation"
    TRIO_FORMATION_FAILED = "trio_formation_failed"
    VIDEO_CALL_REMINDER = "video_call_reminder"
    CHAT_MESSAGE = "chat_message"
    ACHIEVEMENT = "achievement"
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


def default_duration_ms(kind: NotificationKind) -> int:
    if kind == NotificationKind.TRIO_FORMATION:
        return TRIO_FORMATION_DURATION_MS
    return DEFAULT_DURATION_MS


@dataclass(frozen=True)
class Notification:
    title: str
    message: str
    kind: NotificationKind
    data: Dict[str, Any] = field(default_factory=dict)
    duration_ms: int = 0
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self):
        if not self.duration_ms:
            object.__setattr__(self, "duration_ms", default_duration_ms(self.kind))


NotificationHandler = Callable[[Notification], None]


class NotificationBus:
    """Explicit observer registry for notifications."""

    def __init__(self):
        self._handlers: List[NotificationHandler] = []

    def subscribe(self, handler: NotificationHandler) -> Callable[[], None]:
        """
        Register a handler.

        Returns:
            Callable that removes the handler again (safe to call twice)
        """
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def publish(self, notification: Notification) -> int:
        """
        Deliver a notification to every subscriber, in subscription order.

        Returns:
            Number of handlers that received it without raising
        """
        delivered = 0
        for handler in list(self._handlers):
            try:
                handler(notification)
                delivered += 1
            except Exception:
                logger.exception(
                    f"[NOTIFY] Handler failed for {notification.kind.value} "
                    f"notification {notification.id}"
                )
        return delivered

    def clear(self) -> None:
        self._handlers.clear()

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)


notification_bus = NotificationBus()
