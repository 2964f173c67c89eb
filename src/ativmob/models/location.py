"""Coordinate model."""

from __future__ import annotations

from pydantic import AliasChoices, Field

from ativmob.models._base import AtivMobBaseModel


class Coordinate(AtivMobBaseModel):
    """A single position reading.

    Values are stored exactly as the provider reported them: no
    normalization and no range check, so ``0``, negative and
    out-of-range degrees pass through unchanged.

    Parameters
    ----------
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    accuracy : float or None
        Estimated horizontal accuracy in meters, when reported.
    timestamp : int or None
        Reading time as epoch milliseconds, when reported.
    """

    latitude: float = Field(validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(validation_alias=AliasChoices("longitude", "lng", "lon"))
    accuracy: float | None = None
    timestamp: int | None = None
