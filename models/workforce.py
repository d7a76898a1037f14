"""
Workforce record types shared by the pipeline, scorer, store and read path.

Two wire shapes are produced from the same record:
  to_payload()  camelCase dict rendered by readers as-is
  to_row()      snake_case row upserted on (country_code, year)
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Literal, Optional

ShortageRisk = Literal["CRITICAL", "HIGH", "MODERATE", "LOW", "UNKNOWN"]

SHORTAGE_RISKS: tuple[str, ...] = ("CRITICAL", "HIGH", "MODERATE", "LOW", "UNKNOWN")

# attribute → payload key
_PAYLOAD_KEYS: dict[str, str] = {
    "code": "code",
    "year": "year",
    "total_physicians": "totalPhysicians",
    "physicians_under35": "physiciansUnder35",
    "physicians_35to54": "physicians35to54",
    "physicians_over55": "physiciansOver55",
    "medical_graduates": "medicalGraduates",
    "retirement_cliff_score": "retirementCliffScore",
    "pipeline_ratio": "pipelineRatio",
    "shortage_risk": "shortageRisk",
    "projected_shortfall_10yr": "projectedShortfall10yr",
}

# attribute → storage column (only the key column differs)
_ROW_COLUMNS: dict[str, str] = {
    attr: ("country_code" if attr == "code" else attr) for attr in _PAYLOAD_KEYS
}


@dataclass(frozen=True)
class RawWorkforceRecord:
    """Merged indicators for one country-year. None means no data, never zero."""
    code: str
    year: int
    total_physicians: Optional[float] = None
    physicians_under35: Optional[float] = None
    physicians_35to54: Optional[float] = None
    physicians_over55: Optional[float] = None
    medical_graduates: Optional[float] = None


@dataclass(frozen=True)
class ScoredWorkforceRecord(RawWorkforceRecord):
    retirement_cliff_score: Optional[int] = None
    pipeline_ratio: Optional[float] = None
    shortage_risk: ShortageRisk = "UNKNOWN"
    projected_shortfall_10yr: Optional[int] = None

    def to_raw(self) -> RawWorkforceRecord:
        """Strip the derived metrics back off."""
        raw_names = {f.name for f in fields(RawWorkforceRecord)}
        return RawWorkforceRecord(
            **{k: v for k, v in asdict(self).items() if k in raw_names}
        )

    def to_payload(self) -> dict:
        return {key: getattr(self, attr) for attr, key in _PAYLOAD_KEYS.items()}

    def to_row(self, synced_at: str) -> dict:
        row = {col: getattr(self, attr) for attr, col in _ROW_COLUMNS.items()}
        row["synced_at"] = synced_at
        return row

    @classmethod
    def from_row(cls, row: dict) -> "ScoredWorkforceRecord":
        """Rebuild a record from a storage row (extra columns ignored)."""
        kwargs = {attr: row.get(col) for attr, col in _ROW_COLUMNS.items()}
        kwargs["year"] = int(kwargs["year"])
        if kwargs["shortage_risk"] is None:
            kwargs["shortage_risk"] = "UNKNOWN"
        return cls(**kwargs)
