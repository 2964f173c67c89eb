"""Single-shot location retrieval.

The platform side is callback based: :class:`PositionProvider` starts one
request and later calls back exactly once (in theory) from any thread.
:class:`LocationSource` turns that into an awaitable that resolves at
most once, propagates cancellation to the platform through a
:class:`CancellationToken`, and maps failures onto the
:class:`~ativmob.exceptions.LocationError` taxonomy.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Callable
from typing import Any, Generic, Protocol, TypeVar

from ativmob._constants import LOCATION_GENERIC_ERROR, LOCATION_PERMISSION_DENIED, LOCATION_TIMEOUT, LOCATION_UNAVAILABLE
from ativmob.exceptions import (
    LocationError,
    LocationPermissionDeniedError,
    LocationTimeoutError,
    LocationUnavailableError,
    LocationUnknownError,
)
from ativmob.models.location import Coordinate

_logger = logging.getLogger(__name__)

T = TypeVar("T")

PositionCallback = Callable[[Coordinate | None, BaseException | None], None]
"""``callback(reading, error)``: a reading, an error, or ``(None, None)`` for "no fix"."""


class CancellationToken:
    """Thread-safe cancellation flag handed to the platform request."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cancelled = False
        self._callbacks: list[Callable[[], None]] = []

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def add_callback(self, callback: Callable[[], None]) -> None:
        """Run *callback* on cancellation (immediately if already cancelled)."""
        with self._lock:
            if not self._cancelled:
                self._callbacks.append(callback)
                return
        callback()

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()


class OneShot(Generic[T]):
    """Completion primitive that settles an asyncio future at most once.

    ``set_result``/``set_exception``/``cancel`` may be called from any
    thread; the first call wins and the others return ``False``.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._future: asyncio.Future[T] = loop.create_future()
        self._lock = threading.Lock()
        self._settled = False

    @property
    def future(self) -> asyncio.Future[T]:
        return self._future

    @property
    def settled(self) -> bool:
        return self._settled

    def _claim(self) -> bool:
        with self._lock:
            if self._settled:
                return False
            self._settled = True
            return True

    def _call_in_loop(self, fn: Callable[..., Any], *args: Any) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            fn(*args)
        else:
            self._loop.call_soon_threadsafe(fn, *args)

    def _resolve(self, value: T) -> None:
        if not self._future.done():
            self._future.set_result(value)

    def _reject(self, exc: BaseException) -> None:
        if not self._future.done():
            self._future.set_exception(exc)

    def set_result(self, value: T) -> bool:
        if not self._claim():
            return False
        self._call_in_loop(self._resolve, value)
        return True

    def set_exception(self, exc: BaseException) -> bool:
        if not self._claim():
            return False
        self._call_in_loop(self._reject, exc)
        return True

    def cancel(self) -> bool:
        """Settle as abandoned.  ``True`` if nothing had resolved it yet."""
        if not self._claim():
            return False
        self._call_in_loop(self._future.cancel)
        return True


class PositionProvider(Protocol):
    """Structural interface of the platform location capability."""

    def has_permission(self) -> bool:
        """Whether fine or coarse location permission is granted."""
        ...

    def request_current_position(self, callback: PositionCallback, token: CancellationToken) -> None:
        """Start one high-accuracy position request and report it through *callback*."""
        ...


def _classify(error: BaseException) -> LocationError:
    if isinstance(error, LocationError):
        return error
    if isinstance(error, PermissionError):
        classified: LocationError = LocationPermissionDeniedError(str(error) or LOCATION_PERMISSION_DENIED)
    elif isinstance(error, TimeoutError):
        classified = LocationTimeoutError(str(error) or LOCATION_TIMEOUT)
    else:
        classified = LocationUnknownError(str(error) or LOCATION_GENERIC_ERROR, cause=error)
    classified.__cause__ = error
    return classified


class LocationSource:
    """One-shot, cancellable current-position requests."""

    def __init__(self, provider: PositionProvider, *, timeout: float | None = None) -> None:
        self._provider = provider
        self._timeout = timeout if timeout else None

    def has_permission(self) -> bool:
        return self._provider.has_permission()

    async def request_once(self) -> Coordinate:
        """Request the current position once.

        Raises
        ------
        LocationPermissionDeniedError
            No permission; the platform is not called.
        LocationUnavailableError
            The platform answered without a position.
        LocationTimeoutError
            No answer within the configured timeout.
        LocationUnknownError
            Any other platform failure.

        Cancelling the awaiting task cancels the platform request; a
        callback arriving afterwards is ignored.
        """
        if not self.has_permission():
            raise LocationPermissionDeniedError(LOCATION_PERMISSION_DENIED)

        completion: OneShot[Coordinate] = OneShot(asyncio.get_running_loop())
        token = CancellationToken()

        def _on_complete(reading: Coordinate | None, error: BaseException | None) -> None:
            if token.is_cancelled:
                _logger.debug("Ignoring position callback after cancellation")
                return
            if error is not None:
                accepted = completion.set_exception(_classify(error))
            elif reading is None:
                accepted = completion.set_exception(LocationUnavailableError(LOCATION_UNAVAILABLE))
            else:
                accepted = completion.set_result(reading)
            if not accepted:
                _logger.debug("Ignoring duplicate position callback")

        _logger.debug("Requesting current position")
        try:
            self._provider.request_current_position(_on_complete, token)
        except Exception as exc:
            completion.set_exception(_classify(exc))

        try:
            return await asyncio.wait_for(completion.future, self._timeout)
        except TimeoutError as exc:
            raise LocationTimeoutError(LOCATION_TIMEOUT) from exc
        finally:
            # Still unsettled here means the caller gave up (cancel or timeout).
            if completion.cancel():
                _logger.debug("Position request abandoned; cancelling platform request")
                token.cancel()


class FixedPositionProvider:
    """Provider that answers with a fixed coordinate after *delay* seconds.

    Stands in for the device GPS on machines without one.  The default
    coordinate is Varginha, MG.
    """

    DEFAULT_COORDINATE = Coordinate(latitude=-21.5590, longitude=-45.4394, accuracy=10.0)

    def __init__(
        self,
        coordinate: Coordinate | None = None,
        *,
        permission_granted: bool = True,
        delay: float = 0.0,
    ) -> None:
        self._coordinate = coordinate if coordinate is not None else self.DEFAULT_COORDINATE
        self.permission_granted = permission_granted
        self._delay = delay
        self.requests = 0

    def has_permission(self) -> bool:
        return self.permission_granted

    def request_current_position(self, callback: PositionCallback, token: CancellationToken) -> None:
        self.requests += 1
        reading = self._coordinate.merge(timestamp=int(time.time() * 1000))
        handle = asyncio.get_running_loop().call_later(self._delay, callback, reading, None)
        token.add_callback(handle.cancel)
