"""
Workforce scoring — derived risk metrics for one country-year.

For T = total physicians, O = physicians 55+, G = medical graduates:

  retirement_cliff_score    round(O / T * 100)              % of workforce 55+
  pipeline_ratio            round(G / T * 1000) / 10        grads per 100 physicians
  projected_shortfall_10yr  round((O - 10 * G) / T * 100)   % unreplaced after 10y

The shortfall assumes the whole 55+ cohort retires within ten years while
graduates join at a constant annual rate G. Positive means net loss.

Any missing input makes the dependent metric None; the risk label then
degrades to UNKNOWN. Nothing here raises for well-typed input.
"""
from __future__ import annotations

import math
from dataclasses import asdict
from typing import Iterable, Optional

from models.workforce import RawWorkforceRecord, ScoredWorkforceRecord, ShortageRisk

# (label, cliff above, pipeline below, both required) — first match wins
RISK_LADDER: list[tuple[str, float, float, bool]] = [
    ("CRITICAL", 40, 5, True),
    ("HIGH",     35, 6, False),
    ("MODERATE", 25, 8, False),
]

SHORTFALL_HORIZON_YEARS = 10


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 → 3, -2.5 → -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _round_ratio(value: float) -> Optional[int]:
    """round_half_away, or None when NaN or infinity reached the ratio."""
    if not math.isfinite(value):
        return None
    return round_half_away(value)


def compute_retirement_cliff(
    total: Optional[float], over55: Optional[float]
) -> Optional[int]:
    if total is None or over55 is None or total == 0:
        return None
    return _round_ratio(over55 / total * 100)


def compute_pipeline_ratio(
    total: Optional[float], graduates: Optional[float]
) -> Optional[float]:
    if total is None or graduates is None or total <= 0:
        return None
    scaled = _round_ratio(graduates / total * 100 * 10)
    return None if scaled is None else scaled / 10


def compute_projected_shortfall(
    total: Optional[float],
    over55: Optional[float],
    graduates: Optional[float],
) -> Optional[int]:
    if total is None or over55 is None or graduates is None or total == 0:
        return None
    replaced = graduates * SHORTFALL_HORIZON_YEARS
    return _round_ratio((over55 - replaced) / total * 100)


def classify_shortage_risk(
    cliff: Optional[float], pipeline: Optional[float]
) -> ShortageRisk:
    """Map (cliff, pipeline) → CRITICAL / HIGH / MODERATE / LOW / UNKNOWN."""
    if cliff is None or pipeline is None:
        return "UNKNOWN"
    for label, cliff_above, pipeline_below, both in RISK_LADDER:
        cliff_hit = cliff > cliff_above
        pipeline_hit = pipeline < pipeline_below
        if (cliff_hit and pipeline_hit) if both else (cliff_hit or pipeline_hit):
            return label  # type: ignore[return-value]
    return "LOW"


def score_record(raw: RawWorkforceRecord) -> ScoredWorkforceRecord:
    """Return a new scored record; `raw` is left untouched."""
    total = raw.total_physicians
    over55 = raw.physicians_over55
    graduates = raw.medical_graduates

    cliff = compute_retirement_cliff(total, over55)
    pipeline = compute_pipeline_ratio(total, graduates)

    base = asdict(raw)
    # Scored records passed back in are re-derived from their raw fields
    for derived in (
        "retirement_cliff_score", "pipeline_ratio",
        "shortage_risk", "projected_shortfall_10yr",
    ):
        base.pop(derived, None)

    return ScoredWorkforceRecord(
        **base,
        retirement_cliff_score=cliff,
        pipeline_ratio=pipeline,
        shortage_risk=classify_shortage_risk(cliff, pipeline),
        projected_shortfall_10yr=compute_projected_shortfall(total, over55, graduates),
    )


def score_workforce_data(
    records: Iterable[RawWorkforceRecord],
) -> list[ScoredWorkforceRecord]:
    """Score every record, preserving input order."""
    return [score_record(r) for r in records]
