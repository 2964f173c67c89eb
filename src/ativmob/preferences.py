"""Persisted boolean preferences (the dark-theme flag).

A :class:`PreferenceStore` is the injected key-value persistence;
:class:`BooleanPreference` wraps one key of it with asynchronous
read/write and change notification.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import threading
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any, Protocol

from ativmob.exceptions import PreferenceError
from ativmob.state.broadcast import Broadcaster, DeliveryPolicy

_logger = logging.getLogger(__name__)


class PreferenceStore(Protocol):
    """Structural interface of the key-value preference persistence."""

    async def get(self, key: str, default: bool = False) -> bool:
        ...

    async def set(self, key: str, value: bool) -> None:
        ...


class InMemoryPreferenceStore:
    """Non-persistent store, for tests and for runs without a preferences file."""

    def __init__(self, initial: dict[str, bool] | None = None) -> None:
        self._values: dict[str, bool] = dict(initial or {})

    async def get(self, key: str, default: bool = False) -> bool:
        # Suspend like a real store would.
        await asyncio.sleep(0)
        return self._values.get(key, default)

    async def set(self, key: str, value: bool) -> None:
        await asyncio.sleep(0)
        self._values[key] = bool(value)


class JsonFilePreferenceStore:
    """Store preferences as a flat JSON object in *path*.

    File I/O runs in the default executor.  Writes go to a temporary file
    that replaces the original, so a crash never leaves a truncated file.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise PreferenceError(f"Cannot read preferences from {self._path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise PreferenceError(f"Preferences file {self._path} is not valid UTF-8") from exc
        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise PreferenceError(f"Preferences file {self._path} is not valid JSON") from exc
        if not isinstance(data, dict):
            raise PreferenceError(f"Preferences file {self._path} must hold a JSON object")
        return data

    def _get_sync(self, key: str, default: bool) -> bool:
        with self._lock:
            value = self._load().get(key, default)
        if not isinstance(value, bool):
            raise PreferenceError(f"Preference {key!r} is not a boolean: {value!r}")
        return value

    def _set_sync(self, key: str, value: bool) -> None:
        with self._lock:
            data = self._load()
            data[key] = bool(value)
            tmp = self._path.with_name(f"{self._path.name}.tmp")
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
                os.replace(tmp, self._path)
            except OSError as exc:
                raise PreferenceError(f"Cannot write preferences to {self._path}: {exc}") from exc

    async def get(self, key: str, default: bool = False) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._get_sync, key, default)

    async def set(self, key: str, value: bool) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._set_sync, key, value)


class BooleanPreference:
    """One boolean key of a :class:`PreferenceStore` with change notification.

    ``read``/``write`` are independent suspension points; a read followed
    by a write is not atomic against another writer (last write wins).
    """

    def __init__(self, store: PreferenceStore, key: str, *, default: bool = False) -> None:
        self._store = store
        self._key = key
        self._default = default
        self._loaded = False
        self._broadcaster: Broadcaster[bool] = Broadcaster(default)

    @property
    def key(self) -> str:
        return self._key

    async def read(self) -> bool:
        value = await self._store.get(self._key, self._default)
        self._seed(value)
        return value

    async def write(self, value: bool) -> None:
        await self._store.set(self._key, value)
        self._loaded = True
        _logger.debug("Preference %s = %s", self._key, value)
        self._broadcaster.publish_with(lambda _previous: value)

    def _seed(self, value: bool) -> None:
        # A write that landed while the read was suspended takes precedence.
        if self._loaded:
            return
        self._loaded = True
        self._broadcaster.publish_with(lambda _previous: value)

    async def observe(self, policy: DeliveryPolicy = DeliveryPolicy.ALL) -> AsyncIterator[bool]:
        """Yield the current persisted value, then the value of every committed write."""
        if not self._loaded:
            self._seed(await self._store.get(self._key, self._default))
        async with self._broadcaster.subscribe(policy) as subscription:
            async for value in subscription:
                yield value
