"""ativmob - async UI state core of the AtivMob demo app."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("ativmob")
except PackageNotFoundError:
    __version__ = "0+local"
from ativmob.app import AtivMobApp
from ativmob.config import AtivMobConfig
from ativmob.exceptions import (
    AtivMobConfigError,
    AtivMobError,
    DecodeError,
    HttpStatusError,
    LocationError,
    LocationPermissionDeniedError,
    LocationTimeoutError,
    LocationUnavailableError,
    LocationUnknownError,
    PreferenceError,
    RemoteListError,
    TransportError,
)
from ativmob.location import CancellationToken, FixedPositionProvider, LocationSource, OneShot, PositionProvider
from ativmob.models import BrazilianState, Coordinate, Product, Region, UiSnapshot, sort_by_name
from ativmob.preferences import BooleanPreference, InMemoryPreferenceStore, JsonFilePreferenceStore, PreferenceStore
from ativmob.state import DeliveryPolicy, StateContainer, Subscription
from ativmob.states import StatesSource
from ativmob.viewmodel import MainViewModel

__all__ = [
    "__version__",
    "AtivMobApp",
    "AtivMobConfig",
    "AtivMobConfigError",
    "AtivMobError",
    "BooleanPreference",
    "BrazilianState",
    "CancellationToken",
    "Coordinate",
    "DecodeError",
    "DeliveryPolicy",
    "FixedPositionProvider",
    "HttpStatusError",
    "InMemoryPreferenceStore",
    "JsonFilePreferenceStore",
    "LocationError",
    "LocationPermissionDeniedError",
    "LocationSource",
    "LocationTimeoutError",
    "LocationUnavailableError",
    "LocationUnknownError",
    "MainViewModel",
    "OneShot",
    "PositionProvider",
    "PreferenceError",
    "PreferenceStore",
    "Product",
    "Region",
    "RemoteListError",
    "StateContainer",
    "StatesSource",
    "Subscription",
    "TransportError",
    "UiSnapshot",
    "sort_by_name",
]
