from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from ativmob.exceptions import PreferenceError
from ativmob.preferences import BooleanPreference, InMemoryPreferenceStore, JsonFilePreferenceStore


@pytest.mark.asyncio
async def test_read_returns_default_then_written_value() -> None:
    preference = BooleanPreference(InMemoryPreferenceStore(), "dark_theme")

    assert await preference.read() is False
    await preference.write(True)
    assert await preference.read() is True


@pytest.mark.asyncio
async def test_observe_starts_with_persisted_value_then_each_write() -> None:
    preference = BooleanPreference(InMemoryPreferenceStore({"dark_theme": True}), "dark_theme")
    seen: list[bool] = []
    first_value = asyncio.Event()

    async def _observe() -> None:
        async for value in preference.observe():
            seen.append(value)
            first_value.set()
            if len(seen) == 4:
                return

    observer = asyncio.create_task(_observe())
    await asyncio.wait_for(first_value.wait(), timeout=1.0)

    await preference.write(False)
    await preference.write(False)
    await preference.write(True)
    await asyncio.wait_for(observer, timeout=1.0)

    # Every committed write is reported, even one that does not change the value.
    assert seen == [True, False, False, True]


@pytest.mark.asyncio
async def test_two_observers_see_the_same_writes() -> None:
    preference = BooleanPreference(InMemoryPreferenceStore(), "k")

    async def _collect(count: int) -> list[bool]:
        values: list[bool] = []
        async for value in preference.observe():
            values.append(value)
            if len(values) == count:
                break
        return values

    first = asyncio.create_task(_collect(3))
    second = asyncio.create_task(_collect(3))
    for _ in range(5):
        await asyncio.sleep(0)
    await preference.write(True)
    await preference.write(False)

    assert await asyncio.wait_for(first, timeout=1.0) == [False, True, False]
    assert await asyncio.wait_for(second, timeout=1.0) == [False, True, False]


@pytest.mark.asyncio
async def test_json_store_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "prefs" / "settings.json"

    await JsonFilePreferenceStore(path).set("dark_theme", True)

    assert json.loads(path.read_text(encoding="utf-8")) == {"dark_theme": True}
    assert await JsonFilePreferenceStore(path).get("dark_theme") is True
    assert await JsonFilePreferenceStore(path).get("missing", default=True) is True


@pytest.mark.asyncio
async def test_json_store_keeps_other_keys(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"other": False}), encoding="utf-8")
    store = JsonFilePreferenceStore(path)

    await store.set("dark_theme", True)

    assert json.loads(path.read_text(encoding="utf-8")) == {"dark_theme": True, "other": False}


@pytest.mark.asyncio
async def test_json_store_rejects_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PreferenceError):
        await JsonFilePreferenceStore(path).get("dark_theme")


@pytest.mark.asyncio
async def test_json_store_rejects_non_boolean_value(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"dark_theme": "yes"}), encoding="utf-8")

    with pytest.raises(PreferenceError):
        await JsonFilePreferenceStore(path).get("dark_theme")


@pytest.mark.asyncio
async def test_json_store_rejects_undecodable_file(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_bytes(b"\xff\xfe{}")

    store = JsonFilePreferenceStore(path)
    with pytest.raises(PreferenceError):
        await store.get("dark_theme")
    with pytest.raises(PreferenceError):
        await store.set("dark_theme", True)
