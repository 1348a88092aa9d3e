#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging

from quakemap.data.api import RetrievalFacade
from quakemap.data.clients import QuakeFeed


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Quickstart for QuakeFeed filter-driven refreshes")
    p.add_argument("periods", nargs="*", type=int, default=[7, 30, 90], help="Time periods in days")
    p.add_argument("--min-magnitude", type=float, default=4.0)
    p.add_argument("--debug", action="store_true", help="Show retrieval telemetry")
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    def on_render(records, stats):
        strongest = stats.strongest
        label = f"M{strongest.magnitude:.1f} {strongest.place}" if strongest else "-"
        print(f"RENDER {stats.count:>6} events | strongest: {label}")

    def on_error(message):
        print(f"ERROR  {message}")

    def on_loading(visible):
        print("LOADING ..." if visible else "LOADING done")

    def on_progress(event):
        print(f"       [{event.percent_complete:>3}%] {event.label}")

    facade = RetrievalFacade(on_progress=on_progress, on_loading=on_loading)
    async with QuakeFeed(facade, on_render=on_render, on_error=on_error) as feed:
        await feed.load_initial()
        await feed.update_filters(min_magnitude=args.min_magnitude)
        for days in args.periods:
            print(f"--- last {days} days ---")
            await feed.update_filters(time_period=days)
        await feed.reset_filters()


if __name__ == "__main__":
    asyncio.run(main())
