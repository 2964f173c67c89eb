"""IBGE federative unit models.

Wire format of ``/api/v1/localidades/estados``::

    {"id": 35, "sigla": "SP", "nome": "São Paulo",
     "regiao": {"id": 3, "sigla": "SE", "nome": "Sudeste"}}
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import AliasChoices, Field, TypeAdapter

from ativmob.models._base import AtivMobBaseModel


class Region(AtivMobBaseModel):
    """Macro-region a state belongs to (``regiao``)."""

    id: int
    code: str = Field(validation_alias=AliasChoices("sigla", "code"))
    name: str = Field(validation_alias=AliasChoices("nome", "name"))


class BrazilianState(AtivMobBaseModel):
    """One record of the remote states list."""

    id: int
    code: str = Field(validation_alias=AliasChoices("sigla", "code"))
    name: str = Field(validation_alias=AliasChoices("nome", "name"))
    region: Region = Field(validation_alias=AliasChoices("regiao", "region"))


STATE_LIST_ADAPTER: TypeAdapter[list[BrazilianState]] = TypeAdapter(list[BrazilianState])


def sort_by_name(states: Iterable[BrazilianState]) -> list[BrazilianState]:
    """Sort for display by ``name``, ascending.

    Plain ``str`` comparison (Unicode code points): locale independent and
    case sensitive, so ``"Acre" < "Bahia" < "acre"``.  The sort is stable:
    equal names keep their incoming order.
    """
    return sorted(states, key=lambda state: state.name)
