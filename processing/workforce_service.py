"""
Sync and read paths over the pipeline, the store and the curated fallback.

Read precedence:
  1. "database"         — the store has rows from a previous sync
  2. "curated-live-ok"  — store empty, Eurostat answers the probe; curated values served
  3. "curated"          — store empty and Eurostat unreachable
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from config.curated_workforce import CURATED_SYNCED_AT, CURATED_WORKFORCE, CURATED_YEAR
from ingestion.fetchers.base import BaseFetcher
from ingestion.pipeline import WorkforcePipeline
from models.workforce import RawWorkforceRecord, ScoredWorkforceRecord
from processing.workforce_scorer import score_workforce_data
from storage.workforce_store import WorkforceStore

logger = logging.getLogger(__name__)

SOURCE_DATABASE = "database"
SOURCE_CURATED_LIVE = "curated-live-ok"
SOURCE_CURATED = "curated"


class NoWorkforceDataError(RuntimeError):
    """A sync produced no records, so nothing was written."""


@dataclass
class SyncResult:
    countries: int
    synced_at: str
    year: int
    errors: list[dict] = field(default_factory=list)


@dataclass
class WorkforceSnapshot:
    source: str
    synced_at: Optional[str]
    records: list[ScoredWorkforceRecord]

    def to_payload(self) -> dict:
        return {
            "source": self.source,
            "syncedAt": self.synced_at,
            "data": [r.to_payload() for r in self.records],
        }


def curated_records() -> list[ScoredWorkforceRecord]:
    """Curated Eurostat values run through the live scorer."""
    raw = [
        RawWorkforceRecord(
            code=code,
            year=CURATED_YEAR,
            total_physicians=total,
            physicians_under35=under35,
            physicians_35to54=mid,
            physicians_over55=over55,
            medical_graduates=graduates,
        )
        for code, total, under35, mid, over55, graduates in CURATED_WORKFORCE
    ]
    return score_workforce_data(raw)


async def sync_workforce(
    pipeline: WorkforcePipeline,
    store: WorkforceStore,
) -> SyncResult:
    """Run the pipeline and upsert the scored rows. Store errors propagate."""
    result = await pipeline.run()
    if not result.records:
        raise NoWorkforceDataError("No data returned from Eurostat")

    synced_at = datetime.now(timezone.utc).isoformat()
    written = store.upsert(result.records, synced_at=synced_at)
    return SyncResult(
        countries=written,
        synced_at=synced_at,
        year=result.year,
        errors=result.errors,
    )


class WorkforceService:
    """Read path used by the CLI."""

    def __init__(self, store: WorkforceStore, fetcher: Optional[BaseFetcher] = None):
        self._store = store
        self._fetcher = fetcher

    async def get_workforce(self) -> WorkforceSnapshot:
        try:
            records = self._store.load()
            if records:
                return WorkforceSnapshot(
                    source=SOURCE_DATABASE,
                    synced_at=self._store.latest_synced_at(),
                    records=records,
                )
        except Exception as exc:
            logger.warning("Workforce store unreadable, falling back: %s", exc)

        source = SOURCE_CURATED
        if self._fetcher is not None and await self._fetcher.health_check():
            source = SOURCE_CURATED_LIVE

        return WorkforceSnapshot(
            source=source,
            synced_at=CURATED_SYNCED_AT,
            records=curated_records(),
        )
