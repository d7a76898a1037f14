"""
Dashboard-style views over scored records: ordering, filtering, headline
numbers and a per-country comparison against the European average.
"""
from __future__ import annotations

from typing import Iterable, Optional

import polars as pl

from config.countries import get_country
from models.workforce import ScoredWorkforceRecord
from processing.workforce_scorer import round_half_away

RISK_ORDER: dict[str, int] = {
    "CRITICAL": 0,
    "HIGH": 1,
    "MODERATE": 2,
    "LOW": 3,
    "UNKNOWN": 4,
}

SORT_KEYS = ("total_physicians", "retirement_cliff_score", "pipeline_ratio", "shortage_risk")

TOP_CLIFF_LIMIT = 20


def sort_records(
    records: Iterable[ScoredWorkforceRecord],
    key: str = "shortage_risk",
    descending: bool = False,
) -> list[ScoredWorkforceRecord]:
    """Order by risk severity or a numeric metric; missing values count as -inf."""
    if key not in SORT_KEYS:
        raise ValueError(f"unknown sort key '{key}', expected one of {SORT_KEYS}")

    if key == "shortage_risk":
        def sort_value(r: ScoredWorkforceRecord) -> float:
            return RISK_ORDER[r.shortage_risk]
    else:
        def sort_value(r: ScoredWorkforceRecord) -> float:
            value = getattr(r, key)
            return float("-inf") if value is None else value

    return sorted(records, key=sort_value, reverse=descending)


def filter_by_risk(
    records: Iterable[ScoredWorkforceRecord], risk: str = "ALL"
) -> list[ScoredWorkforceRecord]:
    if risk == "ALL":
        return list(records)
    return [r for r in records if r.shortage_risk == risk]


def _mean(values: list[float]) -> Optional[float]:
    return sum(values) / len(values) if values else None


def summarize(records: list[ScoredWorkforceRecord]) -> dict:
    """Headline counts, average cliff score and the top retirement cliffs."""
    cliffs = [r.retirement_cliff_score for r in records if r.retirement_cliff_score is not None]
    avg_cliff = _mean(cliffs)
    top = sorted(
        (r for r in records if r.retirement_cliff_score is not None),
        key=lambda r: r.retirement_cliff_score,
        reverse=True,
    )[:TOP_CLIFF_LIMIT]

    return {
        "countries": len(records),
        "critical": sum(1 for r in records if r.shortage_risk == "CRITICAL"),
        "high": sum(1 for r in records if r.shortage_risk == "HIGH"),
        "avg_cliff_score": None if avg_cliff is None else round_half_away(avg_cliff),
        "top_cliff": [(r.code, r.retirement_cliff_score) for r in top],
    }


def compare_to_average(
    record: ScoredWorkforceRecord,
    records: list[ScoredWorkforceRecord],
) -> dict[str, int]:
    """
    Index one country against the European average (average = 50).

    density       total physicians relative to the average
    pipeline      pipeline ratio relative to the average
    young_doctors share of physicians under 35, in %
    cliff_safety  100 minus the retirement cliff score
    """
    # Zero values are left out of the averages
    avg_total = _mean([r.total_physicians for r in records if r.total_physicians])
    avg_pipeline = _mean([r.pipeline_ratio for r in records if r.pipeline_ratio])

    return {
        "density": round_half_away((record.total_physicians or 0) / (avg_total or 1) * 50),
        "pipeline": round_half_away((record.pipeline_ratio or 0) / (avg_pipeline or 1) * 50),
        "young_doctors": round_half_away(
            (record.physicians_under35 or 0) / (record.total_physicians or 1) * 100
        ),
        "cliff_safety": max(
            0,
            100 - (50 if record.retirement_cliff_score is None else record.retirement_cliff_score),
        ),
    }


def country_detail(code: str, records: list[ScoredWorkforceRecord]) -> Optional[dict]:
    """Drill-down for one country: identity, metrics and average comparison."""
    code = code.upper()
    record = next((r for r in records if r.code == code), None)
    if record is None:
        return None

    country = get_country(code)
    return {
        "code": code,
        "name": country.name if country else code,
        "region": country.region if country else None,
        "metrics": record.to_payload(),
        "comparison": compare_to_average(record, records),
    }


def to_frame(records: Iterable[ScoredWorkforceRecord]) -> pl.DataFrame:
    """Payload rows as a polars DataFrame for printing or export."""
    rows = [r.to_payload() for r in records]
    if not rows:
        return pl.DataFrame()
    return pl.DataFrame(rows, infer_schema_length=None)
