"""UI state container.

This is the only component allowed to replace the current
:class:`~ativmob.models.ui_state.UiSnapshot`.  Operations never assign
fields; they hand a merge function to :meth:`StateContainer.update`,
which applies it inside a single-writer critical section.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ativmob.models.ui_state import UiSnapshot
from ativmob.state.broadcast import Broadcaster, DeliveryPolicy, Subscription

_logger = logging.getLogger(__name__)

Merge = Callable[[UiSnapshot], UiSnapshot]


def _changed_fields(before: UiSnapshot, after: UiSnapshot) -> list[str]:
    return [name for name in UiSnapshot.model_fields if getattr(before, name) != getattr(after, name)]


class StateContainer:
    """Holds the current snapshot and publishes every replacement.

    Given the same sequence of merges, the container produces the same
    snapshots: updates issued concurrently (from tasks or threads) are
    serialized, none is lost, and every subscriber sees them in that
    serialized order.  Superseded snapshots are not retained.
    """

    def __init__(self, initial: UiSnapshot | None = None) -> None:
        self._broadcaster: Broadcaster[UiSnapshot] = Broadcaster(initial if initial is not None else UiSnapshot())

    def current(self) -> UiSnapshot:
        """Latest snapshot.  Never blocks."""
        return self._broadcaster.value

    @property
    def version(self) -> int:
        """Number of updates applied since creation."""
        return self._broadcaster.version

    def update(self, merge: Merge) -> UiSnapshot:
        """Apply ``merge(current) -> next`` atomically and publish the result.

        Returns the published snapshot.  If *merge* raises, the current
        snapshot is kept and the exception propagates to the caller.
        """

        def _apply(previous: UiSnapshot) -> UiSnapshot:
            following = merge(previous)
            if not isinstance(following, UiSnapshot):
                raise TypeError(f"merge must return a UiSnapshot, got {type(following).__name__}")
            if _logger.isEnabledFor(logging.DEBUG):
                _logger.debug(
                    "State v%d: %s",
                    self._broadcaster.version + 1,
                    ", ".join(_changed_fields(previous, following)) or "<no change>",
                )
            return following

        return self._broadcaster.publish_with(_apply)

    def merge(self, **changes: object) -> UiSnapshot:
        """Shorthand for ``update(lambda s: s.merge(**changes))``."""
        return self.update(lambda snapshot: snapshot.merge(**changes))

    def subscribe(self, policy: DeliveryPolicy = DeliveryPolicy.ALL) -> Subscription[UiSnapshot]:
        """Stream of snapshots: the current one, then every later update.

        Must be called from a running event loop; the subscription is read
        on that loop.  Close it (or use it with ``async with``) when done.
        See :class:`~ativmob.state.broadcast.DeliveryPolicy` for the
        slow-consumer behavior.
        """
        return self._broadcaster.subscribe(policy)

    def add_listener(self, listener: Callable[[UiSnapshot], None]) -> Callable[[], None]:
        """Synchronous callback for every update, in serialized order."""
        return self._broadcaster.add_listener(listener)

    @property
    def subscriber_count(self) -> int:
        return self._broadcaster.subscriber_count
