from __future__ import annotations
import pytest

from models.workforce import RawWorkforceRecord
from processing.workforce_scorer import score_workforce_data
from processing.workforce_summary import (
    compare_to_average,
    country_detail,
    filter_by_risk,
    sort_records,
    summarize,
    to_frame,
)


def _records():
    # GR CRITICAL, AT HIGH, TR LOW, SE UNKNOWN (no graduates)
    return score_workforce_data([
        RawWorkforceRecord(code="AT", year=2023, total_physicians=528, physicians_under35=68,
                           physicians_over55=219, medical_graduates=27),
        RawWorkforceRecord(code="TR", year=2023, total_physicians=192, physicians_under35=48,
                           physicians_over55=46, medical_graduates=28),
        RawWorkforceRecord(code="GR", year=2023, total_physicians=622, physicians_under35=58,
                           physicians_over55=323, medical_graduates=16),
        RawWorkforceRecord(code="SE", year=2023, total_physicians=None,
                           physicians_over55=132, medical_graduates=None),
    ])


def test_sort_by_risk_severity():
    assert [r.code for r in sort_records(_records())] == ["GR", "AT", "TR", "SE"]


def test_sort_numeric_puts_missing_first_ascending():
    ordered = sort_records(_records(), key="total_physicians")
    assert [r.code for r in ordered] == ["SE", "TR", "AT", "GR"]


def test_sort_numeric_descending():
    ordered = sort_records(_records(), key="retirement_cliff_score", descending=True)
    assert [r.code for r in ordered][:3] == ["GR", "AT", "TR"]


def test_sort_unknown_key():
    with pytest.raises(ValueError):
        sort_records(_records(), key="code")


def test_filter_by_risk():
    assert [r.code for r in filter_by_risk(_records(), "HIGH")] == ["AT"]
    assert len(filter_by_risk(_records(), "ALL")) == 4


def test_summarize():
    summary = summarize(_records())
    assert summary["countries"] == 4
    assert summary["critical"] == 1
    assert summary["high"] == 1
    # (41 + 24 + 52) / 3 = 39
    assert summary["avg_cliff_score"] == 39
    assert summary["top_cliff"] == [("GR", 52), ("AT", 41), ("TR", 24)]


def test_summarize_empty():
    summary = summarize([])
    assert summary["countries"] == 0
    assert summary["avg_cliff_score"] is None
    assert summary["top_cliff"] == []


def test_compare_to_average():
    records = _records()
    at = records[0]
    comparison = compare_to_average(at, records)
    # average total (528 + 192 + 622) / 3 = 447.33 → 528 / 447.33 * 50 = 59
    assert comparison["density"] == 59
    # 68 / 528 = 12.9%
    assert comparison["young_doctors"] == 13
    assert comparison["cliff_safety"] == 59


def test_compare_missing_metrics():
    records = _records()
    se = records[3]
    comparison = compare_to_average(se, records)
    assert comparison["density"] == 0
    assert comparison["cliff_safety"] == 50


def test_to_frame_uses_payload_columns():
    df = to_frame(_records())
    assert df.height == 4
    assert "shortageRisk" in df.columns
    assert df["code"].to_list() == ["AT", "TR", "GR", "SE"]


def test_country_detail_joins_identity_metrics_and_comparison():
    records = _records()
    detail = country_detail("at", records)
    assert detail["code"] == "AT"
    assert detail["name"] == "Austria"
    assert detail["region"] == "Western"
    assert detail["metrics"] == records[0].to_payload()
    assert detail["comparison"] == compare_to_average(records[0], records)


def test_country_detail_without_data():
    assert country_detail("FR", _records()) is None


def test_country_detail_unlisted_code_falls_back_to_code():
    records = _records() + score_workforce_data([
        RawWorkforceRecord(code="ZZ", year=2023, total_physicians=300),
    ])
    detail = country_detail("ZZ", records)
    assert detail["name"] == "ZZ"
    assert detail["region"] is None
