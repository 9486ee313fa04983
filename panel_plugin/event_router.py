"""Routing of host notifications to the panel's handlers.

EDMC calls every plugin hook unconditionally, so the router keeps its own
subscription book next to the host's: a delivery for a notification that is not
currently subscribed is dropped exactly like a delivery for an unknown name.
Handlers are plain functions that receive the router's target (the widget
controller) as their first argument, followed by whatever the host delivered.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Optional, Protocol, Set


_LOGGER = logging.getLogger("EDMC.GenericPanel.Router")

Handler = Callable[..., None]


class Notification(str, Enum):
    """Closed set of notifications the panel understands, keyed by wire name."""

    LOADED = "ADDON_LOADED"
    PORTRAIT_UPDATE = "UNIT_PORTRAIT_UPDATE"
    LOGOUT = "PLAYER_LOGOUT"


class SubscriptionError(RuntimeError):
    """Raised when handlers and subscriptions are wired inconsistently."""


class _SubscriptionHost(Protocol):
    def subscribe(self, name: str) -> None: ...
    def unsubscribe(self, name: str) -> None: ...
    def unsubscribe_all(self) -> None: ...


def parse_notification(name: object) -> Optional[Notification]:
    """Map a wire name onto :class:`Notification`; ``None`` when unknown."""

    if isinstance(name, Notification):
        return name
    if not isinstance(name, str):
        return None
    try:
        return Notification(name)
    except ValueError:
        return None


class EventRouter:
    """Dispatch host notifications to registered handlers, one at a time."""

    def __init__(self, host: _SubscriptionHost, target: Any, logger: Optional[logging.Logger] = None) -> None:
        self._host = host
        self._target = target
        self._logger = logger or _LOGGER
        self._handlers: Dict[Notification, Handler] = {}
        self._subscribed: Set[Notification] = set()

    # Handler table ------------------------------------------------------

    def register(self, notification: Notification, handler: Handler) -> None:
        self._handlers[notification] = handler

    def has_handler(self, notification: Notification) -> bool:
        return notification in self._handlers

    # Subscriptions ------------------------------------------------------

    @property
    def subscriptions(self) -> FrozenSet[Notification]:
        return frozenset(self._subscribed)

    def is_subscribed(self, notification: Notification) -> bool:
        return notification in self._subscribed

    def subscribe(self, notification: Notification) -> None:
        if notification not in self._handlers:
            raise SubscriptionError(f"No handler registered for {notification.value}")
        if notification in self._subscribed:
            raise SubscriptionError(f"{notification.value} is already subscribed")
        self._subscribed.add(notification)
        self._host.subscribe(notification.value)
        self._logger.debug("Subscribed to %s", notification.value)

    def subscribe_all(self) -> None:
        """Subscribe every notification that has a handler, in declaration order."""

        for notification in Notification:
            if notification in self._handlers:
                self.subscribe(notification)

    def unsubscribe(self, notification: Notification) -> None:
        if notification not in self._subscribed:
            return
        self._subscribed.discard(notification)
        self._host.unsubscribe(notification.value)
        self._logger.debug("Unsubscribed from %s", notification.value)

    def unsubscribe_all(self) -> None:
        self._subscribed.clear()
        self._host.unsubscribe_all()
        self._logger.debug("Unsubscribed from all notifications")

    # Delivery -----------------------------------------------------------

    def dispatch(self, name: object, *args: Any) -> bool:
        """Run the handler for ``name`` synchronously.

        Returns ``True`` when a handler ran. Unknown and unsubscribed names are
        ignored so an unexpected delivery can never take down the host.
        """

        notification = parse_notification(name)
        if notification is None:
            self._logger.debug("Ignoring unknown notification %r", name)
            return False
        if notification not in self._subscribed:
            self._logger.debug("Ignoring %s; not subscribed", notification.value)
            return False
        handler = self._handlers[notification]
        handler(self._target, *args)
        return True
