#!/usr/bin/env python3
"""Run every ativmob operation once and print each UI snapshot.

Greeting update, single-shot location (fixed provider), IBGE states
fetch and a theme toggle run concurrently; the snapshot stream shows how
their results are merged in order.

Configuration comes from ``ATIVMOB_*`` environment variables (see
``AtivMobConfig.from_env``).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from ativmob import AtivMobApp, AtivMobConfig, FixedPositionProvider, UiSnapshot  # noqa: E402
from ativmob.catalog import build_sample_products, filter_products, summary  # noqa: E402


def _format(snapshot: UiSnapshot) -> str:
    location = "-"
    if snapshot.location is not None:
        location = f"{snapshot.location.latitude:.4f}, {snapshot.location.longitude:.4f}"
    if snapshot.is_loading_location:
        location = "carregando..."
    return (
        f"[{snapshot.display_title}] greeting={snapshot.greeting!r} location={location} "
        f"location_error={snapshot.location_error!r} states={len(snapshot.remote_items)} "
        f"loading_states={snapshot.is_loading_remote} remote_error={snapshot.remote_error!r} "
        f"dark={snapshot.is_dark_theme}"
    )


async def _run(args: argparse.Namespace) -> int:
    config = AtivMobConfig.from_env()
    provider = FixedPositionProvider(permission_granted=not args.deny_location, delay=args.location_delay)

    async with AtivMobApp(config, provider=provider) as app:
        vm = app.view_model
        subscription = app.state.subscribe()

        vm.update_greeting(args.name)
        tasks = [
            vm.launch_get_current_location(),
            vm.launch_fetch_states(),
            vm.launch_toggle_theme(),
        ]
        done = asyncio.gather(*tasks, return_exceptions=True)

        async with subscription:
            while True:
                try:
                    snapshot = await asyncio.wait_for(subscription.get(), timeout=0.5)
                except TimeoutError:
                    if done.done():
                        break
                    continue
                print(_format(snapshot))

        final = app.state.current()
        for state in final.remote_items:
            print(f"  {state.code} - {state.name} (Região: {state.region.name})")

    if args.filter is not None:
        products = build_sample_products()
        shown = filter_products(products, args.filter)
        print(summary(len(shown), len(products)))
        for product in shown:
            print(f"  {product.name}: {product.description}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--name", default="Visitante", help="Name for the greeting")
    parser.add_argument("--deny-location", action="store_true", help="Simulate a missing location permission")
    parser.add_argument("--location-delay", type=float, default=0.2, help="Seconds before the fixed position arrives")
    parser.add_argument("--filter", default=None, help="Also list sample products matching this text")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
