"""Wiring of collaborators into a running :class:`MainViewModel`."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from ativmob._transport import JsonTransport
from ativmob.config import AtivMobConfig
from ativmob.exceptions import AtivMobError
from ativmob.location import FixedPositionProvider, LocationSource, PositionProvider
from ativmob.models.ui_state import UiSnapshot
from ativmob.preferences import BooleanPreference, InMemoryPreferenceStore, JsonFilePreferenceStore, PreferenceStore
from ativmob.state.store import StateContainer
from ativmob.states import StatesSource
from ativmob.viewmodel import MainViewModel

_logger = logging.getLogger(__name__)


class AtivMobApp:
    """Owns the HTTP session and the view model for one run.

    Usage::

        async with AtivMobApp(config) as app:
            app.view_model.launch_fetch_states()
            async with app.state.subscribe() as updates:
                async for snapshot in updates:
                    ...
    """

    def __init__(
        self,
        config: AtivMobConfig | None = None,
        *,
        provider: PositionProvider | None = None,
        store: PreferenceStore | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config or AtivMobConfig()
        self._provider = provider or FixedPositionProvider()
        self._store = store
        self._external_session = session is not None
        self._http_session = session
        self._view_model: MainViewModel | None = None

    @property
    def config(self) -> AtivMobConfig:
        return self._config

    @property
    def view_model(self) -> MainViewModel:
        if self._view_model is None:
            raise AtivMobError("App not started. Use 'async with AtivMobApp(...) as app:'")
        return self._view_model

    @property
    def state(self) -> StateContainer:
        return self.view_model.state

    def _build_store(self) -> PreferenceStore:
        if self._store is not None:
            return self._store
        if self._config.preferences_path:
            return JsonFilePreferenceStore(self._config.preferences_path)
        return InMemoryPreferenceStore()

    async def __aenter__(self) -> AtivMobApp:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        transport = JsonTransport(self._http_session, timeout=self._config.request_timeout)
        self._view_model = MainViewModel(
            StateContainer(UiSnapshot(greeting=self._config.default_greeting)),
            LocationSource(self._provider, timeout=self._config.location_timeout),
            StatesSource(transport, url=self._config.states_url),
            BooleanPreference(self._build_store(), self._config.theme_key),
            config=self._config,
        )
        self._view_model.start()
        _logger.debug("App started (states_url=%s)", self._config.states_url)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._view_model is not None:
            await self._view_model.aclose()
            self._view_model = None
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
