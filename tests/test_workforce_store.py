from __future__ import annotations
import pytest

from models.workforce import RawWorkforceRecord
from processing.workforce_scorer import score_record
from storage.workforce_store import WorkforceStore


def _scored(code, total, over55=100, graduates=20, year=2023):
    return score_record(RawWorkforceRecord(
        code=code, year=year,
        total_physicians=total,
        physicians_over55=over55,
        medical_graduates=graduates,
    ))


def test_empty_store(tmp_path):
    store = WorkforceStore(tmp_path / "workforce_metrics.parquet")
    assert store.is_empty()
    assert store.load() == []
    assert store.latest_synced_at() is None


def test_upsert_round_trips_records(tmp_path):
    store = WorkforceStore(tmp_path / "cache" / "workforce_metrics.parquet")
    records = [_scored("AT", 528, 219, 27), _scored("PL", 248, 102, 14)]

    written = store.upsert(records, synced_at="2025-03-01T00:00:00+00:00")

    assert written == 2
    assert store.load() == records
    assert store.latest_synced_at() == "2025-03-01T00:00:00+00:00"


def test_upsert_replaces_same_country_year(tmp_path):
    store = WorkforceStore(tmp_path / "workforce_metrics.parquet")
    store.upsert([_scored("AT", 500), _scored("BE", 319)], synced_at="2025-01-01T00:00:00+00:00")
    store.upsert([_scored("AT", 528)], synced_at="2025-02-01T00:00:00+00:00")

    df = store.read_frame()
    assert len(df) == 2
    at = df.filter(df["country_code"] == "AT").to_dicts()[0]
    assert at["total_physicians"] == 528.0
    assert at["synced_at"] == "2025-02-01T00:00:00+00:00"


def test_upsert_keeps_other_years(tmp_path):
    store = WorkforceStore(tmp_path / "workforce_metrics.parquet")
    store.upsert([_scored("AT", 500, year=2022)])
    store.upsert([_scored("AT", 528, year=2023)])
    assert sorted(r.year for r in store.load()) == [2022, 2023]


def test_load_orders_by_total_desc_with_missing_last(tmp_path):
    store = WorkforceStore(tmp_path / "workforce_metrics.parquet")
    store.upsert([_scored("PL", 248), _scored("SE", None), _scored("GR", 622)])
    assert [r.code for r in store.load()] == ["GR", "PL", "SE"]


def test_missing_values_survive_storage(tmp_path):
    store = WorkforceStore(tmp_path / "workforce_metrics.parquet")
    store.upsert([_scored("SE", None, over55=132, graduates=None)])
    (record,) = store.load()
    assert record.total_physicians is None
    assert record.medical_graduates is None
    assert record.physicians_over55 == 132.0
    assert record.retirement_cliff_score is None
    assert record.shortage_risk == "UNKNOWN"


def test_duplicate_keys_in_batch_rejected(tmp_path):
    store = WorkforceStore(tmp_path / "workforce_metrics.parquet")
    with pytest.raises(ValueError):
        store.upsert([_scored("AT", 500), _scored("AT", 528)])
    assert store.is_empty()


def test_upsert_nothing(tmp_path):
    store = WorkforceStore(tmp_path / "workforce_metrics.parquet")
    assert store.upsert([]) == 0
    assert not store.path.exists()
