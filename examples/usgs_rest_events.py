#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
from datetime import date, timedelta

from quakemap.data.api import RetrievalFacade
from quakemap.data.models import FilterPredicate, Query
from quakemap.data.models.filters import utc_today


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Fetch USGS earthquakes for a date range")
    p.add_argument("days", nargs="?", type=int, default=60, help="Days to look back from today")
    p.add_argument("min_magnitude", nargs="?", type=float, default=4.5)
    p.add_argument("--start", type=date.fromisoformat, help="Explicit start date (YYYY-MM-DD)")
    p.add_argument("--end", type=date.fromisoformat, help="Explicit end date (YYYY-MM-DD)")
    p.add_argument("--top", type=int, default=10, help="Rows to print")
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    end = args.end or utc_today()
    start = args.start or end - timedelta(days=args.days)
    query = Query(
        start_date=start,
        end_date=end,
        filters=FilterPredicate(min_magnitude=args.min_magnitude),
    )

    def on_progress(event):
        print(f"[{event.percent_complete:>3}%] {event.label}")

    async with RetrievalFacade(on_progress=on_progress) as facade:
        result = await facade.retrieve(query)

    stats = result.stats
    print("=" * 65)
    print(f"Range      : {start.isoformat()} to {end.isoformat()}")
    print(f"Path       : {result.path.value}")
    print(f"Chunks     : {result.chunks_used} ({result.attempts} attempts)")
    print(f"Events     : {stats.count}")
    if not stats.is_empty:
        print(f"Depth (km) : {stats.min_depth:.1f} .. {stats.max_depth:.1f}")
    if stats.strongest is not None:
        print(f"Magnitude  : {stats.min_magnitude:.1f} .. {stats.max_magnitude:.1f}")
        print(f"Strongest  : M{stats.strongest.magnitude:.1f} {stats.strongest.place}")
    print("=" * 65)
    print(f"{'Time (UTC)':25} | {'Mag':>5} | {'Depth':>7} | Place")
    print("-" * 65)
    rated = [r for r in result.records if r.magnitude is not None]
    strongest_first = sorted(rated, key=lambda r: r.magnitude, reverse=True)
    for r in strongest_first[: args.top]:
        print(f"{r.time.isoformat():25} | {r.magnitude:>5.1f} | {r.depth:>7.1f} | {r.place}")


if __name__ == "__main__":
    asyncio.run(main())
