"""Fan-out of a single current value to many asynchronous subscribers.

A :class:`Broadcaster` owns one value and a lock.  Every change runs
inside that lock and is handed to every open :class:`Subscription`
before the lock is released, so all subscribers observe the same total
order of values.  Changes may come from any thread; subscribers are read
from the event loop that created them.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import weakref
from collections import deque
from collections.abc import Callable
from enum import StrEnum
from typing import Any, Generic, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class DeliveryPolicy(StrEnum):
    """What a subscription does when its consumer falls behind.

    ``ALL`` buffers without bound and yields every value in order.
    ``LATEST`` keeps only the newest pending value: order and the final
    value are preserved, intermediate values may be skipped.
    """

    ALL = "all"
    LATEST = "latest"


class Subscription(Generic[T]):
    """Async iterator over the values published after subscribing.

    The first value is the broadcaster's value at subscription time.
    Iteration never ends on its own.  Release it with :meth:`close` or by
    using the subscription as an async context manager.  The broadcaster
    holds subscriptions weakly, so one abandoned after ``break`` stops
    buffering once it is garbage collected.
    """

    def __init__(
        self,
        broadcaster: Broadcaster[T],
        policy: DeliveryPolicy,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        self._broadcaster = broadcaster
        self._policy = policy
        self._loop = loop
        # deque.append/popleft are thread-safe; only the wake-up hops threads.
        self._buffer: deque[T] = deque(maxlen=1 if policy is DeliveryPolicy.LATEST else None)
        self._ready = asyncio.Event()
        self._closed = False

    @property
    def policy(self) -> DeliveryPolicy:
        return self._policy

    @property
    def closed(self) -> bool:
        return self._closed

    def _deliver(self, value: T) -> None:
        """Buffer *value* and wake the reader.  Called with the broadcaster lock held."""
        if self._closed:
            return
        self._buffer.append(value)
        self._wake()

    def _wake(self) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            self._ready.set()
            return
        try:
            self._loop.call_soon_threadsafe(self._ready.set)
        except RuntimeError:
            # The subscriber's loop is closed; nobody can read this subscription anymore.
            _logger.debug("Dropping subscription bound to a closed event loop")
            self._closed = True
            self._broadcaster._discard(self)

    async def get(self) -> T:
        """Wait for and return the next value in publication order.

        Raises ``StopAsyncIteration`` once the subscription is closed.
        """
        while True:
            if self._buffer:
                return self._buffer.popleft()
            if self._closed:
                raise StopAsyncIteration
            self._ready.clear()
            if self._buffer or self._closed:
                continue
            await self._ready.wait()

    def close(self) -> None:
        """Stop receiving values and release any waiting reader."""
        if self._closed:
            return
        self._closed = True
        self._buffer.clear()
        self._broadcaster._discard(self)
        self._wake()

    def __aiter__(self) -> Subscription[T]:
        return self

    async def __anext__(self) -> T:
        return await self.get()

    async def __aenter__(self) -> Subscription[T]:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.close()


class Broadcaster(Generic[T]):
    """Single current value with serialized updates and fan-out delivery."""

    def __init__(self, initial: T) -> None:
        self._lock = threading.Lock()
        self._value = initial
        self._version = 0
        self._subscriptions: weakref.WeakSet[Subscription[T]] = weakref.WeakSet()
        self._listeners: list[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    @property
    def version(self) -> int:
        """Number of values published since creation."""
        return self._version

    def publish_with(self, transform: Callable[[T], T]) -> T:
        """Replace the value with ``transform(value)`` atomically and publish it.

        *transform* runs inside the lock: it sees every earlier change and
        no other change can interleave.  If it raises, nothing is published
        and the exception propagates.  A failing listener is logged and the
        remaining listeners still run.  Neither *transform* nor a listener may
        publish to the same broadcaster (the lock is not reentrant).
        """
        with self._lock:
            new_value = transform(self._value)
            self._value = new_value
            self._version += 1
            for subscription in list(self._subscriptions):
                subscription._deliver(new_value)
            for listener in list(self._listeners):
                try:
                    listener(new_value)
                except Exception:
                    _logger.exception("State listener %r failed", listener)
            return new_value

    def subscribe(self, policy: DeliveryPolicy = DeliveryPolicy.ALL) -> Subscription[T]:
        """Open a subscription on the running event loop.

        The current value is buffered first, atomically with registration,
        so no publish can fall between the two.
        """
        loop = asyncio.get_running_loop()
        with self._lock:
            subscription = Subscription(self, policy, loop)
            subscription._deliver(self._value)
            self._subscriptions.add(subscription)
        return subscription

    def add_listener(self, listener: Callable[[T], None]) -> Callable[[], None]:
        """Call *listener* synchronously with every published value.

        Returns a callable that removes the listener.
        """
        with self._lock:
            self._listeners.append(listener)

        def _remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _remove

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def _discard(self, subscription: Subscription[T]) -> None:
        # May be called while the lock is already held (from _deliver on this thread).
        self._subscriptions.discard(subscription)
