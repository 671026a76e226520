# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Change subscriptions for FormState."""

from __future__ import annotations

from typing import Any, Callable

SubscriberCallback = Callable[[Any, Any], None]


class SubscriptionMixin:
    """Registry of synchronous change observers, keyed by subscriber id.

    Subscribers receive ``(data, errors)`` after every committed update, in
    registration order. Registering an id again replaces its callback.
    """

    __slots__ = ()

    _subscribers: dict[str, SubscriberCallback]

    def subscribe(self, subscriber_id: str, callback: SubscriberCallback) -> None:
        """Register callback under subscriber_id.

        Raises:
            TypeError: If callback is not callable.
        """
        if not callable(callback):
            raise TypeError(f"callback must be callable, not {type(callback).__name__}")
        self._subscribers[subscriber_id] = callback

    def unsubscribe(self, subscriber_id: str) -> bool:
        """Remove a subscriber. Returns False if the id was not registered."""
        return self._subscribers.pop(subscriber_id, None) is not None

    @property
    def subscribers(self) -> list[str]:
        """Ids of the registered subscribers."""
        return list(self._subscribers)

    def _notify_subscribers(self, data: Any, errors: Any) -> None:
        # Copy: a callback may unsubscribe itself
        for callback in list(self._subscribers.values()):
            callback(data, errors)
