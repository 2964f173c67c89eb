"""Operations that drive the UI state.

Each operation talks to one collaborator and merges its outcome into the
:class:`~ativmob.state.store.StateContainer`.  Collaborator failures are
turned into field-scoped messages (``location_error``/``remote_error``);
an operation never raises them to its caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from ativmob._constants import (
    LOCATION_GENERIC_ERROR,
    LOCATION_PERMISSION_REQUIRED,
    STATES_EMPTY_ERROR,
    STATES_EMPTY_TITLE,
    STATES_FAILED_TITLE,
    STATES_LOADING_TITLE,
    connection_error,
    greeting_title,
    states_loaded_title,
)
from ativmob.config import AtivMobConfig
from ativmob.exceptions import LocationError, PreferenceError, RemoteListError
from ativmob.location import LocationSource
from ativmob.models.states import sort_by_name
from ativmob.preferences import BooleanPreference
from ativmob.state.broadcast import DeliveryPolicy
from ativmob.state.store import StateContainer
from ativmob.states import StatesSource

_logger = logging.getLogger(__name__)


class MainViewModel:
    """Greeting, location, states list and theme operations over one container.

    Usage::

        vm = MainViewModel(StateContainer(), location, states, theme)
        vm.start()
        vm.launch_fetch_states()
        async with vm.state.subscribe() as updates:
            async for snapshot in updates:
                ...
        await vm.aclose()
    """

    def __init__(
        self,
        container: StateContainer,
        location: LocationSource,
        states: StatesSource,
        theme: BooleanPreference,
        *,
        config: AtivMobConfig | None = None,
    ) -> None:
        self._container = container
        self._location = location
        self._states = states
        self._theme = theme
        self._config = config or AtivMobConfig()
        self._tasks: set[asyncio.Task[Any]] = set()
        self._location_task: asyncio.Task[None] | None = None
        self._theme_task: asyncio.Task[None] | None = None
        # Bumped whenever the in-flight location request is cancelled or superseded.
        self._location_generation = 0
        self._closed = False

    @property
    def state(self) -> StateContainer:
        return self._container

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Mirror the persisted theme flag into ``is_dark_theme``."""
        if self._theme_task is None or self._theme_task.done():
            self._theme_task = self._launch(self._mirror_theme(), "ativmob-theme")

    async def aclose(self) -> None:
        """Cancel every in-flight operation.  No update follows a cancelled task."""
        self._closed = True
        self._location_generation += 1
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    def _launch(self, coro: Coroutine[Any, Any, None], name: str) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # ------------------------------------------------------------------
    # Greeting
    # ------------------------------------------------------------------

    def update_greeting(self, name: str) -> None:
        self._container.merge(greeting=name, display_title=greeting_title(name))

    # ------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------

    async def get_current_location(self) -> None:
        """Request the position once and merge the coordinate or the error.

        Without permission the platform is not called: ``location_error``
        is set and ``is_loading_location`` stays (or becomes) ``False``; a
        request still in flight from before is superseded.
        """
        if not self._location.has_permission():
            self._location_generation += 1
            self._container.merge(location_error=LOCATION_PERMISSION_REQUIRED, is_loading_location=False)
            return

        self._location_generation += 1
        generation = self._location_generation
        self._container.merge(is_loading_location=True, location_error=None)

        try:
            coordinate = await self._location.request_once()
        except LocationError as exc:
            if generation != self._location_generation:
                return
            _logger.warning("Location request failed: %s", exc)
            self._container.merge(is_loading_location=False, location_error=str(exc) or LOCATION_GENERIC_ERROR)
            return
        except Exception as exc:
            if generation != self._location_generation:
                return
            _logger.warning("Unexpected location failure", exc_info=True)
            self._container.merge(is_loading_location=False, location_error=str(exc) or LOCATION_GENERIC_ERROR)
            return

        if generation != self._location_generation:
            _logger.debug("Discarding position from a cancelled request")
            return
        self._container.merge(location=coordinate, is_loading_location=False, location_error=None)

    def launch_get_current_location(self) -> asyncio.Task[None]:
        """Run :meth:`get_current_location` as a task, superseding one in flight."""
        self._cancel_location_task()
        self._location_task = self._launch(self.get_current_location(), "ativmob-location")
        return self._location_task

    def cancel_location(self) -> None:
        """Abandon the in-flight location request and clear the loading flag.

        The cancelled request itself never merges anything.
        """
        self._location_generation += 1
        if self._cancel_location_task() or self._container.current().is_loading_location:
            self._container.merge(is_loading_location=False)

    def _cancel_location_task(self) -> bool:
        task, self._location_task = self._location_task, None
        if task is None or task.done():
            return False
        task.cancel()
        return True

    def clear_location_error(self) -> None:
        self._container.merge(location_error=None)

    # ------------------------------------------------------------------
    # Remote states list
    # ------------------------------------------------------------------

    async def fetch_states(self) -> None:
        """Fetch the states list and merge it sorted by name, or the error.

        Overlapping calls are not coalesced: each one merges its own
        outcome, so the first to finish clears ``is_loading_remote`` while
        a later one may still be running.  Callers that need a single
        fetch deduplicate (see ``skip_states_if_loaded``).
        """
        if self._config.skip_states_if_loaded:
            current = self._container.current()
            if current.is_loading_remote or current.remote_items:
                _logger.debug("States already loading or loaded; skipping fetch")
                return

        self._container.merge(is_loading_remote=True, remote_error=None, display_title=STATES_LOADING_TITLE)

        try:
            states = await self._states.fetch()
        except RemoteListError as exc:
            _logger.warning("States fetch failed: %s", exc)
            self._merge_states_failure(str(exc))
            return
        except Exception as exc:
            _logger.warning("Unexpected states fetch failure", exc_info=True)
            self._merge_states_failure(str(exc))
            return

        ordered = sort_by_name(states)
        if not ordered:
            self._container.merge(
                is_loading_remote=False,
                remote_items=(),
                remote_error=STATES_EMPTY_ERROR,
                display_title=STATES_EMPTY_TITLE,
            )
            return
        self._container.merge(
            is_loading_remote=False,
            remote_items=tuple(ordered),
            remote_error=None,
            display_title=states_loaded_title([state.name for state in ordered]),
        )

    def _merge_states_failure(self, message: str) -> None:
        self._container.merge(
            is_loading_remote=False,
            remote_items=(),
            remote_error=connection_error(message),
            display_title=STATES_FAILED_TITLE,
        )

    def launch_fetch_states(self) -> asyncio.Task[None]:
        return self._launch(self.fetch_states(), "ativmob-states")

    # ------------------------------------------------------------------
    # Theme
    # ------------------------------------------------------------------

    async def toggle_theme(self) -> None:
        """Write the negation of the persisted flag.

        Read and write are separate steps: two concurrent toggles may
        both read the same value, so either final value is possible.
        """
        try:
            current = await self._theme.read()
            await self._theme.write(not current)
        except PreferenceError as exc:
            _logger.warning("Theme toggle failed: %s", exc)

    def launch_toggle_theme(self) -> asyncio.Task[None]:
        return self._launch(self.toggle_theme(), "ativmob-theme-toggle")

    async def set_dark_theme(self, value: bool) -> None:
        try:
            await self._theme.write(value)
        except PreferenceError as exc:
            _logger.warning("Theme update failed: %s", exc)

    async def _mirror_theme(self) -> None:
        try:
            async for is_dark in self._theme.observe(DeliveryPolicy.LATEST):
                if self._closed:
                    return
                if self._container.current().is_dark_theme != is_dark:
                    self._container.merge(is_dark_theme=is_dark)
        except PreferenceError as exc:
            _logger.warning("Cannot read theme preference: %s", exc)
