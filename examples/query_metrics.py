#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging
import os

from relic.data import MetricDataAPI, QueryConfig


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Fetch New Relic application metrics via REST")
    p.add_argument("app_id", nargs="?", type=int, default=-1, help="-1 uses the mock endpoint")
    p.add_argument("--duration", type=float, default=3600, help="window length in seconds")
    p.add_argument("--period", type=float, default=300, help="timeslice length in seconds")
    p.add_argument("--metric", action="append", dest="metrics", default=None)
    p.add_argument("--value", action="append", dest="values", default=None)
    p.add_argument("--no-cache", action="store_true")
    p.add_argument("--list-apps", action="store_true", help="list busy applications and exit")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = QueryConfig.from_env(use_cache=not args.no_cache)
    api_key = os.environ.get("NEW_RELIC_API_KEY")

    async with MetricDataAPI(api_key, config=config) as api:
        if args.list_apps:
            for app in await api.fetch_applications():
                print(f"{app.id:>12} | {app.throughput:>10.1f} rpm | {app.name}")
            return

        table = await api.query_metrics(
            args.app_id,
            duration=args.duration,
            period=args.period,
            metrics=args.metrics or ["HttpDispatcher"],
            values=args.values or ["average_response_time"],
            progress=lambda done, total: print(f"chunk {done}/{total}"),
        )

    print("=" * 65)
    print(f"Metrics    : {', '.join(table.metric_names)}")
    print(f"Rows       : {len(table)}")
    print("=" * 65)
    print(" | ".join(f"{c:>22}" for c in table.columns))
    print("-" * 65)
    for record in table.to_records():
        cells = [record["name"], record["start"].isoformat()]
        cells += ["" if record[v] is None else f"{record[v]:.3f}" for v in table.value_names]
        print(" | ".join(f"{c:>22}" for c in cells))


if __name__ == "__main__":
    asyncio.run(main())
