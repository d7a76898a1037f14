"""
European Physician Workforce Monitor — Main Entry Point

Modes:
1. sync   Fetch the five Eurostat indicators, score them, upsert the store
2. show   Print the current snapshot (store → curated fallback) with a summary
3. probe  Report whether the Eurostat API is reachable

Usage:
    python main.py --mode sync
    python main.py --mode show --risk HIGH --sort retirement_cliff_score
    python main.py --mode show --country GR
    python main.py --mode probe

    # Keep going on malformed cubes instead of reporting them:
    python main.py --mode sync --lenient
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import polars as pl

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from config.countries import get_country
from config.settings import STRICT_CUBES, WORKFORCE_DATA_DIR, WORKFORCE_STORE_FILE
from ingestion.fetchers.eurostat import EurostatFetcher
from ingestion.pipeline import WorkforcePipeline
from models.workforce import SHORTAGE_RISKS
from processing.workforce_service import (
    NoWorkforceDataError,
    WorkforceService,
    sync_workforce,
)
from processing.workforce_summary import (
    SORT_KEYS,
    country_detail,
    filter_by_risk,
    sort_records,
    summarize,
    to_frame,
)
from storage.workforce_store import WorkforceStore

logger = logging.getLogger("main")


async def run_sync(store: WorkforceStore, strict: bool) -> int:
    pipeline = WorkforcePipeline(fetcher=EurostatFetcher(), strict=strict)
    try:
        result = await sync_workforce(pipeline, store)
    except NoWorkforceDataError as exc:
        logger.error("Sync aborted: %s", exc)
        return 1

    logger.info(
        "Synced %d countries for %d at %s (%d indicator failures)",
        result.countries, result.year, result.synced_at, len(result.errors),
    )
    return 0


def print_country_detail(detail: dict) -> None:
    metrics = detail["metrics"]
    comparison = detail["comparison"]
    print(f"\n{detail['name']} ({detail['code']}) · {detail['region'] or 'unknown'} Europe · {metrics['year']}")
    for key, value in metrics.items():
        if key not in ("code", "year"):
            print(f"  {key:<24} {'—' if value is None else value}")
    print("  vs European average (average = 50):")
    for key, value in comparison.items():
        print(f"  {key:<24} {value}")


async def run_show(
    store: WorkforceStore,
    risk: str,
    sort_key: str,
    descending: bool,
    country: Optional[str] = None,
) -> int:
    service = WorkforceService(store=store, fetcher=EurostatFetcher())
    snapshot = await service.get_workforce()

    if country:
        detail = country_detail(country, snapshot.records)
        if detail is None:
            print(f"No data for {country.upper()} (source: {snapshot.source})")
            return 1
        print(f"\nSource: {snapshot.source}   synced at: {snapshot.synced_at}")
        print_country_detail(detail)
        return 0

    records = sort_records(
        filter_by_risk(snapshot.records, risk), key=sort_key, descending=descending
    )
    summary = summarize(snapshot.records)

    print(f"\nSource: {snapshot.source}   synced at: {snapshot.synced_at}")
    print(
        f"Countries: {summary['countries']}   CRITICAL: {summary['critical']}   "
        f"HIGH: {summary['high']}   avg retirement cliff: {summary['avg_cliff_score']}%"
    )

    df = to_frame(records)
    if df.is_empty():
        print("No countries match.")
        return 0

    df = df.with_columns(
        pl.col("code")
        .map_elements(lambda c: get_country(c).name if get_country(c) else c, return_dtype=pl.Utf8)
        .alias("country")
    ).select([
        "code", "country", "totalPhysicians", "physiciansOver55", "medicalGraduates",
        "retirementCliffScore", "pipelineRatio", "projectedShortfall10yr", "shortageRisk",
    ])
    with pl.Config(tbl_rows=-1, tbl_cols=-1):
        print(df)
    return 0


async def run_probe() -> int:
    ok = await EurostatFetcher().health_check()
    print("Eurostat reachable" if ok else "Eurostat unreachable")
    return 0 if ok else 1


def main() -> None:
    parser = argparse.ArgumentParser(description="European physician workforce monitor")
    parser.add_argument(
        "--mode", choices=["sync", "show", "probe"], default="show",
        help="sync: fetch + store; show: print snapshot; probe: API availability",
    )
    parser.add_argument(
        "--data-dir", type=Path, default=WORKFORCE_DATA_DIR,
        help="Directory holding the workforce store",
    )
    parser.add_argument(
        "--risk", choices=["ALL", *SHORTAGE_RISKS], default="ALL",
        help="Only show countries with this shortage risk",
    )
    parser.add_argument("--sort", choices=SORT_KEYS, default="shortage_risk")
    parser.add_argument("--desc", action="store_true", help="Sort descending")
    parser.add_argument(
        "--country", metavar="CODE",
        help="Show one country's metrics and its comparison with the European average",
    )
    parser.add_argument(
        "--lenient", action="store_true",
        help="Treat malformed cubes as empty instead of reporting them",
    )
    args = parser.parse_args()

    store = WorkforceStore(args.data_dir / WORKFORCE_STORE_FILE)

    if args.mode == "sync":
        code = asyncio.run(run_sync(store, strict=STRICT_CUBES and not args.lenient))
    elif args.mode == "probe":
        code = asyncio.run(run_probe())
    else:
        code = asyncio.run(run_show(store, args.risk, args.sort, args.desc, args.country))

    sys.exit(code)


if __name__ == "__main__":
    main()
