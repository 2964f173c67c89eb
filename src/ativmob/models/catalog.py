"""Embedded product catalog model."""

from __future__ import annotations

from ativmob.models._base import AtivMobBaseModel


class Product(AtivMobBaseModel):
    id: int
    name: str
    description: str
