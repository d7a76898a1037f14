from __future__ import annotations
import asyncio

import pytest

from config.curated_workforce import CURATED_SYNCED_AT, CURATED_WORKFORCE
from ingestion.fetchers.base import BaseFetcher
from ingestion.pipeline import PipelineResult
from models.workforce import RawWorkforceRecord
from processing.workforce_scorer import score_workforce_data
from processing.workforce_service import (
    NoWorkforceDataError,
    WorkforceService,
    curated_records,
    sync_workforce,
)
from storage.workforce_store import WorkforceStore


class StubPipeline:
    def __init__(self, records, errors=None):
        self._result = PipelineResult(records=records, year=2023, errors=errors or [])

    async def run(self) -> PipelineResult:
        return self._result


class ReachabilityFetcher(BaseFetcher):
    provider_name = "reachability"

    def __init__(self, reachable: bool):
        self.reachable = reachable

    async def fetch_cube(self, dataset, params=None):
        return None

    async def health_check(self) -> bool:
        return self.reachable


def _records():
    return score_workforce_data([
        RawWorkforceRecord(code="AT", year=2023, total_physicians=528,
                           physicians_over55=219, medical_graduates=27),
        RawWorkforceRecord(code="TR", year=2023, total_physicians=192,
                           physicians_over55=46, medical_graduates=28),
    ])


@pytest.fixture
def store(tmp_path) -> WorkforceStore:
    return WorkforceStore(tmp_path / "workforce_metrics.parquet")


# ── Sync ──────────────────────────────────────────────────────────────────────

def test_sync_writes_store(store):
    errors = [{"indicator": "medical_graduates", "error": "no data returned"}]
    result = asyncio.run(sync_workforce(StubPipeline(_records(), errors), store))

    assert result.countries == 2
    assert result.year == 2023
    assert result.errors == errors
    assert {r.code for r in store.load()} == {"AT", "TR"}
    assert store.latest_synced_at() == result.synced_at


def test_sync_without_records_raises_and_leaves_store(store):
    with pytest.raises(NoWorkforceDataError):
        asyncio.run(sync_workforce(StubPipeline([]), store))
    assert store.is_empty()


# ── Read path ─────────────────────────────────────────────────────────────────

def test_read_prefers_database(store):
    store.upsert(_records(), synced_at="2025-03-01T00:00:00+00:00")
    service = WorkforceService(store=store, fetcher=ReachabilityFetcher(reachable=False))

    snapshot = asyncio.run(service.get_workforce())

    assert snapshot.source == "database"
    assert snapshot.synced_at == "2025-03-01T00:00:00+00:00"
    assert [r.code for r in snapshot.records] == ["AT", "TR"]


def test_read_curated_when_live_reachable(store):
    service = WorkforceService(store=store, fetcher=ReachabilityFetcher(reachable=True))
    snapshot = asyncio.run(service.get_workforce())

    assert snapshot.source == "curated-live-ok"
    assert snapshot.synced_at == CURATED_SYNCED_AT
    assert len(snapshot.records) == len(CURATED_WORKFORCE)


def test_read_curated_when_unreachable(store):
    service = WorkforceService(store=store, fetcher=ReachabilityFetcher(reachable=False))
    assert asyncio.run(service.get_workforce()).source == "curated"


def test_read_curated_without_fetcher(store):
    assert asyncio.run(WorkforceService(store=store).get_workforce()).source == "curated"


def test_read_falls_back_when_store_unreadable(tmp_path):
    path = tmp_path / "workforce_metrics.parquet"
    path.write_text("not parquet")
    service = WorkforceService(store=WorkforceStore(path))
    assert asyncio.run(service.get_workforce()).source == "curated"


def test_snapshot_payload_shape(store):
    snapshot = asyncio.run(WorkforceService(store=store).get_workforce())
    payload = snapshot.to_payload()

    assert payload["source"] == "curated"
    assert payload["syncedAt"] == CURATED_SYNCED_AT
    assert set(payload["data"][0]) == {
        "code", "year", "totalPhysicians", "physiciansUnder35", "physicians35to54",
        "physiciansOver55", "medicalGraduates", "retirementCliffScore",
        "pipelineRatio", "shortageRisk", "projectedShortfall10yr",
    }


# ── Curated fallback ──────────────────────────────────────────────────────────

def test_curated_records_are_scored():
    by_code = {r.code: r for r in curated_records()}
    assert len(by_code) == 31
    assert by_code["AT"].shortage_risk == "HIGH"
    assert by_code["TR"].shortage_risk == "LOW"
    assert by_code["GR"].shortage_risk == "CRITICAL"
    assert all(r.year == 2023 for r in by_code.values())
