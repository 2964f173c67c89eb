from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from aiohttp import test_utils, web

from ativmob.app import AtivMobApp
from ativmob.config import AtivMobConfig
from ativmob.exceptions import AtivMobError
from ativmob.location import FixedPositionProvider
from ativmob.preferences import JsonFilePreferenceStore

SAO_PAULO = {"id": 35, "sigla": "SP", "nome": "São Paulo", "regiao": {"id": 3, "sigla": "SE", "nome": "Sudeste"}}
ACRE = {"id": 12, "sigla": "AC", "nome": "Acre", "regiao": {"id": 1, "sigla": "N", "nome": "Norte"}}


async def _serve_states() -> test_utils.TestServer:
    async def handler(_request: web.Request) -> web.Response:
        return web.json_response([SAO_PAULO, ACRE])

    app = web.Application()
    app.router.add_get("/api/v1/localidades/estados", handler)
    server = test_utils.TestServer(app)
    await server.start_server()
    return server


def test_view_model_requires_context() -> None:
    app = AtivMobApp()
    with pytest.raises(AtivMobError):
        _ = app.view_model


@pytest.mark.asyncio
async def test_app_runs_every_operation_end_to_end(tmp_path: Path) -> None:
    server = await _serve_states()
    prefs = tmp_path / "prefs.json"
    config = AtivMobConfig(
        states_url=str(server.make_url("/api/v1/localidades/estados")),
        default_greeting="Visitante",
        preferences_path=str(prefs),
    )
    try:
        async with AtivMobApp(config, provider=FixedPositionProvider()) as app:
            assert app.state.current().greeting == "Visitante"
            vm = app.view_model

            vm.update_greeting("João")
            await asyncio.gather(
                vm.launch_get_current_location(),
                vm.launch_fetch_states(),
                vm.launch_toggle_theme(),
            )

            snapshot = app.state.current()
            assert snapshot.greeting == "João"
            assert snapshot.location is not None
            assert snapshot.location.latitude == -21.5590
            assert [state.code for state in snapshot.remote_items] == ["AC", "SP"]
            assert await JsonFilePreferenceStore(prefs).get("dark_theme") is True
    finally:
        await server.close()


@pytest.mark.asyncio
async def test_denied_permission_end_to_end() -> None:
    async with AtivMobApp(provider=FixedPositionProvider(permission_granted=False)) as app:
        await app.view_model.get_current_location()

        snapshot = app.state.current()
        assert snapshot.location_error == "Permissão de localização necessária"
        assert snapshot.location is None
        assert not snapshot.is_loading_location
