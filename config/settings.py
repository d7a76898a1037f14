"""
European Physician Workforce Monitor — Configuration

Maps the five workforce indicators to Eurostat datasets and filters.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
import logging
import os

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)

# ─── Storage Paths ───────────────────────────────────────────────────────────

DEV_DATA_ROOT = Path(__file__).parent.parent / "data"
WORKFORCE_DATA_DIR = Path(
    os.environ.get("WORKFORCE_DATA_DIR", str(DEV_DATA_ROOT / "workforce"))
)
WORKFORCE_STORE_FILE = "workforce_metrics.parquet"


# ─── Eurostat API ────────────────────────────────────────────────────────────

EUROSTAT_BASE_URL = os.environ.get(
    "EUROSTAT_BASE_URL",
    "https://ec.europa.eu/eurostat/api/dissemination/statistics/1.0/data",
)

# Per-request timeout for the dataset fetches
EUROSTAT_TIMEOUT = float(os.environ.get("EUROSTAT_TIMEOUT", "15"))

# The availability probe only labels the read path, so it gives up quickly
EUROSTAT_PROBE_TIMEOUT = float(os.environ.get("EUROSTAT_PROBE_TIMEOUT", "5"))

# Dataset + filter used by the availability probe
PROBE_DATASET = "hlth_rs_phys"
PROBE_PARAMS = {"unit": "P_HTHAB", "isco08": "OC221"}

# "0" restores the lenient extractor: malformed cubes become empty maps
STRICT_CUBES = os.environ.get("STRICT_CUBES", "1").strip() != "0"


# ─── Indicator Definitions ───────────────────────────────────────────────────

@dataclass
class IndicatorDefinition:
    """One of the five workforce indicators fetched per sync."""
    indicator_id: int
    field: str            # attribute on RawWorkforceRecord
    dataset: str          # Eurostat dataset code
    params: dict = field(default_factory=dict)  # dimension filters
    unit: str = "per_100k"
    description: str = ""


INDICATOR_REGISTRY: list[IndicatorDefinition] = [
    IndicatorDefinition(
        indicator_id=1, field="total_physicians", dataset="hlth_rs_phys",
        params={"unit": "P_HTHAB", "isco08": "OC221"},
        description="Practising physicians per 100k inhabitants",
    ),
    IndicatorDefinition(
        indicator_id=2, field="physicians_under35", dataset="hlth_rs_physage",
        params={"unit": "P_HTHAB", "age": "Y_LT35"},
        description="Physicians aged under 35 per 100k inhabitants",
    ),
    IndicatorDefinition(
        indicator_id=3, field="physicians_35to54", dataset="hlth_rs_physage",
        params={"unit": "P_HTHAB", "age": "Y35-54"},
        description="Physicians aged 35-54 per 100k inhabitants",
    ),
    IndicatorDefinition(
        indicator_id=4, field="physicians_over55", dataset="hlth_rs_physage",
        params={"unit": "P_HTHAB", "age": "Y_GE55"},
        description="Physicians aged 55 and over per 100k inhabitants",
    ),
    IndicatorDefinition(
        indicator_id=5, field="medical_graduates", dataset="hlth_rs_physcases",
        params={"unit": "P_HTHAB", "isco08": "OC221"},
        description="Medical graduates per 100k inhabitants",
    ),
]


def get_indicator_fields() -> list[str]:
    """Record fields in registry order."""
    return [i.field for i in INDICATOR_REGISTRY]
