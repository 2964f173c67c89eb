"""Data models for ativmob."""

from ativmob.models._base import AtivMobBaseModel
from ativmob.models.catalog import Product
from ativmob.models.location import Coordinate
from ativmob.models.states import STATE_LIST_ADAPTER, BrazilianState, Region, sort_by_name
from ativmob.models.ui_state import UiSnapshot

__all__ = [
    "AtivMobBaseModel",
    "BrazilianState",
    "Coordinate",
    "Product",
    "Region",
    "STATE_LIST_ADAPTER",
    "UiSnapshot",
    "sort_by_name",
]
