from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from ativmob.models import BrazilianState, Coordinate, UiSnapshot, sort_by_name
from ativmob.models.states import STATE_LIST_ADAPTER

SAO_PAULO = {"id": 1, "sigla": "SP", "nome": "São Paulo", "regiao": {"id": 3, "sigla": "SE", "nome": "Sudeste"}}
ACRE = {"id": 2, "sigla": "AC", "nome": "Acre", "regiao": {"id": 1, "sigla": "N", "nome": "Norte"}}


def _state(name: str, state_id: int = 1) -> BrazilianState:
    return BrazilianState.model_validate(
        {"id": state_id, "sigla": name[:2].upper(), "nome": name, "regiao": {"id": 1, "sigla": "N", "nome": "Norte"}}
    )


# ---------------------------------------------------------------------------
# Coordinate
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("latitude", "longitude", "accuracy"),
    [
        (0.0, 0.0, 0.0),
        (-21.559, -45.4394, 10.0),
        (-91.5, 200.25, None),
        (1e9, -1e9, -3.0),
    ],
)
def test_coordinate_values_pass_through_unchanged(latitude: float, longitude: float, accuracy: float | None) -> None:
    coordinate = Coordinate(latitude=latitude, longitude=longitude, accuracy=accuracy)

    assert coordinate.latitude == latitude
    assert coordinate.longitude == longitude
    assert coordinate.accuracy == accuracy


def test_coordinate_accepts_short_aliases_and_nan() -> None:
    coordinate = Coordinate.model_validate({"lat": -23.55, "lng": -46.63})
    assert (coordinate.latitude, coordinate.longitude) == (-23.55, -46.63)

    odd = Coordinate(latitude=float("nan"), longitude=float("inf"))
    assert math.isnan(odd.latitude)
    assert math.isinf(odd.longitude)


def test_coordinate_is_frozen() -> None:
    coordinate = Coordinate(latitude=1.0, longitude=2.0)
    with pytest.raises(ValidationError):
        coordinate.latitude = 3.0  # type: ignore[misc]


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------


def test_state_parses_wire_names() -> None:
    state = BrazilianState.model_validate(SAO_PAULO)

    assert state.id == 1
    assert state.code == "SP"
    assert state.name == "São Paulo"
    assert state.region.id == 3
    assert state.region.code == "SE"
    assert state.region.name == "Sudeste"


def test_state_ignores_unknown_keys() -> None:
    payload = dict(ACRE, extra="ignored", regiao=dict(ACRE["regiao"], pais="BR"))  # type: ignore[arg-type]
    state = BrazilianState.model_validate(payload)
    assert state.name == "Acre"


def test_state_missing_region_is_rejected() -> None:
    with pytest.raises(ValidationError):
        BrazilianState.model_validate({"id": 1, "sigla": "SP", "nome": "São Paulo"})


def test_sort_by_name_gives_display_order() -> None:
    states = STATE_LIST_ADAPTER.validate_python([SAO_PAULO, ACRE])

    assert [state.name for state in sort_by_name(states)] == ["Acre", "São Paulo"]


def test_sort_by_name_is_code_point_order() -> None:
    names = ["bahia", "Bahia", "Ácre", "Acre", "Zeta"]
    ordered = [state.name for state in sort_by_name(_state(name, n) for n, name in enumerate(names))]

    # Upper case before lower case, accented letters after ASCII.
    assert ordered == ["Acre", "Bahia", "Zeta", "bahia", "Ácre"]


# ---------------------------------------------------------------------------
# UiSnapshot
# ---------------------------------------------------------------------------


def test_snapshot_rejects_error_while_loading() -> None:
    with pytest.raises(ValidationError):
        UiSnapshot(is_loading_location=True, location_error="x")
    with pytest.raises(ValidationError):
        UiSnapshot(is_loading_remote=True, remote_error="x")


def test_snapshot_merge_touches_only_given_fields() -> None:
    coordinate = Coordinate(latitude=1.0, longitude=2.0)
    before = UiSnapshot(greeting="Ana", location=coordinate, remote_error="old", is_dark_theme=True)

    after = before.merge(remote_error=None, is_loading_remote=True)

    assert after.is_loading_remote
    assert after.remote_error is None
    assert after.greeting == "Ana"
    assert after.location == coordinate
    assert after.is_dark_theme
    assert before.remote_error == "old"


def test_snapshot_merge_coerces_remote_items_to_tuple() -> None:
    states = [BrazilianState.model_validate(ACRE)]
    snapshot = UiSnapshot().merge(remote_items=states)
    assert isinstance(snapshot.remote_items, tuple)
    assert snapshot.remote_items[0].code == "AC"
