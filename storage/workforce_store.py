"""
Parquet-backed cache of scored workforce rows.

One row per (country_code, year); a sync replaces the rows it touches and
leaves the others alone. Schema:

    country_code              str
    year                      pl.Int64
    total_physicians          pl.Float64  (per 100k)
    physicians_under35        pl.Float64
    physicians_35to54         pl.Float64
    physicians_over55         pl.Float64
    medical_graduates         pl.Float64
    retirement_cliff_score    pl.Int64
    pipeline_ratio            pl.Float64
    shortage_risk             str
    projected_shortfall_10yr  pl.Int64
    synced_at                 str         (ISO UTC timestamp)
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

import polars as pl

from config.settings import WORKFORCE_DATA_DIR, WORKFORCE_STORE_FILE
from models.workforce import ScoredWorkforceRecord

logger = logging.getLogger(__name__)

KEY_COLUMNS = ["country_code", "year"]

STORE_SCHEMA: dict[str, pl.DataType] = {
    "country_code": pl.Utf8,
    "year": pl.Int64,
    "total_physicians": pl.Float64,
    "physicians_under35": pl.Float64,
    "physicians_35to54": pl.Float64,
    "physicians_over55": pl.Float64,
    "medical_graduates": pl.Float64,
    "retirement_cliff_score": pl.Int64,
    "pipeline_ratio": pl.Float64,
    "shortage_risk": pl.Utf8,
    "projected_shortfall_10yr": pl.Int64,
    "synced_at": pl.Utf8,
}

_FLOAT_COLUMNS = [name for name, dtype in STORE_SCHEMA.items() if dtype == pl.Float64]


def _normalise_row(row: dict) -> dict:
    """Coerce integer indicator values so every column keeps one dtype."""
    for col in _FLOAT_COLUMNS:
        if row[col] is not None:
            row[col] = float(row[col])
    return row


class WorkforceStore:
    """
    Upsert/read access to workforce_metrics.parquet.

    Usage:
        store = WorkforceStore()
        store.upsert(records)
        rows = store.load()
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = path or (WORKFORCE_DATA_DIR / WORKFORCE_STORE_FILE)

    def read_frame(self) -> pl.DataFrame:
        """Raw table; an empty frame with the store schema if nothing is cached."""
        if not self.path.exists():
            return pl.DataFrame(schema=STORE_SCHEMA)
        return pl.read_parquet(self.path)

    def is_empty(self) -> bool:
        return self.read_frame().is_empty()

    def upsert(
        self,
        records: Iterable[ScoredWorkforceRecord],
        synced_at: Optional[str] = None,
    ) -> int:
        """
        Insert or replace rows keyed on (country_code, year).

        Returns the number of rows written by this call.
        """
        synced_at = synced_at or datetime.now(timezone.utc).isoformat()
        rows = [_normalise_row(r.to_row(synced_at)) for r in records]
        if not rows:
            return 0

        incoming = pl.DataFrame(rows, schema=STORE_SCHEMA)
        if incoming.select(KEY_COLUMNS).is_duplicated().any():
            raise ValueError("duplicate (country_code, year) pairs in upsert batch")

        existing = self.read_frame()
        if not existing.is_empty():
            existing = existing.join(
                incoming.select(KEY_COLUMNS), on=KEY_COLUMNS, how="anti"
            )
            merged = pl.concat([existing.select(list(STORE_SCHEMA)), incoming])
        else:
            merged = incoming

        self.path.parent.mkdir(parents=True, exist_ok=True)
        merged.sort(KEY_COLUMNS).write_parquet(self.path, compression="zstd")
        logger.info(
            "Workforce store: upserted %d rows (%d total) → %s",
            len(incoming), len(merged), self.path,
        )
        return len(incoming)

    def load(self) -> list[ScoredWorkforceRecord]:
        """All cached rows, densest workforce first (missing totals last)."""
        df = self.read_frame()
        if df.is_empty():
            return []
        df = df.sort("total_physicians", descending=True, nulls_last=True)
        return [ScoredWorkforceRecord.from_row(row) for row in df.iter_rows(named=True)]

    def latest_synced_at(self) -> Optional[str]:
        df = self.read_frame()
        if df.is_empty():
            return None
        return df.get_column("synced_at").max()
