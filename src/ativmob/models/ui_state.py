"""Aggregated UI state snapshot."""

from __future__ import annotations

from pydantic import model_validator

from ativmob._constants import DEFAULT_GREETING, WELCOME_TITLE
from ativmob.models._base import AtivMobBaseModel
from ativmob.models.location import Coordinate
from ativmob.models.states import BrazilianState


class UiSnapshot(AtivMobBaseModel):
    """Immutable point-in-time value of everything the screens render.

    Three groups of fields are updated by independent operations:
    greeting (``greeting``, ``display_title``), location
    (``location``, ``is_loading_location``, ``location_error``) and
    remote list (``remote_items``, ``is_loading_remote``,
    ``remote_error``).  ``is_dark_theme`` mirrors the persisted theme
    flag.  A request that is loading never carries an error.
    """

    greeting: str = DEFAULT_GREETING
    display_title: str = WELCOME_TITLE

    location: Coordinate | None = None
    is_loading_location: bool = False
    location_error: str | None = None

    remote_items: tuple[BrazilianState, ...] = ()
    is_loading_remote: bool = False
    remote_error: str | None = None

    is_dark_theme: bool = False

    @model_validator(mode="after")
    def _loading_clears_error(self) -> UiSnapshot:
        if self.is_loading_location and self.location_error is not None:
            raise ValueError("location_error must be None while is_loading_location is True")
        if self.is_loading_remote and self.remote_error is not None:
            raise ValueError("remote_error must be None while is_loading_remote is True")
        return self

