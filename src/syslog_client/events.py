"""
Lifecycle event subscriptions ("error" and "close")
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)

EVENT_KINDS = ("error", "close")

_token_counter = itertools.count(1)


@dataclass(frozen=True)
class Subscription:
    """Token returned by ``subscribe``; pass it back to unsubscribe"""

    kind: str
    token: int


class EventBus:
    """Ordered subscriber lists, one per event kind"""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Tuple[int, Callable[..., Any]]]] = {
            kind: [] for kind in EVENT_KINDS
        }

    def subscribe(self, kind: str, handler: Callable[..., Any]) -> Subscription:
        """Register ``handler``; handlers run in subscription order"""
        if kind not in self._subscribers:
            raise ValueError(
                f"unknown event kind {kind!r}, expected one of {EVENT_KINDS}"
            )
        if not callable(handler):
            raise TypeError("handler must be callable")
        token = next(_token_counter)
        self._subscribers[kind].append((token, handler))
        return Subscription(kind, token)

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Remove a subscription, returns False if it was already gone"""
        handlers = self._subscribers.get(subscription.kind, [])
        for index, (token, _) in enumerate(handlers):
            if token == subscription.token:
                del handlers[index]
                return True
        return False

    def subscriber_count(self, kind: str) -> int:
        return len(self._subscribers.get(kind, []))

    def emit(self, kind: str, *args: Any) -> None:
        """Deliver an event to every current subscriber of ``kind``"""
        # Snapshot so handlers may unsubscribe while being called
        for _, handler in list(self._subscribers[kind]):
            try:
                handler(*args)
            except Exception:
                logger.exception("Unhandled exception in %r subscriber", kind)
