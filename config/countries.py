"""
Static reference data for the 31 European geographies tracked.

Codes are Eurostat geo codes (EL is not used; Greece appears as GR in the
physician datasets).
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Literal, Optional

Region = Literal["Northern", "Southern", "Eastern", "Western", "Candidate"]


@dataclass(frozen=True)
class Country:
    code: str
    name: str
    region: Region


COUNTRIES: dict[str, Country] = {
    c.code: c for c in [
        Country("AT", "Austria", "Western"),
        Country("BE", "Belgium", "Western"),
        Country("BG", "Bulgaria", "Eastern"),
        Country("HR", "Croatia", "Eastern"),
        Country("CY", "Cyprus", "Southern"),
        Country("CZ", "Czechia", "Eastern"),
        Country("DK", "Denmark", "Northern"),
        Country("EE", "Estonia", "Northern"),
        Country("FI", "Finland", "Northern"),
        Country("FR", "France", "Western"),
        Country("DE", "Germany", "Western"),
        Country("GR", "Greece", "Southern"),
        Country("HU", "Hungary", "Eastern"),
        Country("IS", "Iceland", "Northern"),
        Country("IE", "Ireland", "Northern"),
        Country("IT", "Italy", "Southern"),
        Country("LV", "Latvia", "Northern"),
        Country("LT", "Lithuania", "Northern"),
        Country("LU", "Luxembourg", "Western"),
        Country("MT", "Malta", "Southern"),
        Country("NL", "Netherlands", "Western"),
        Country("NO", "Norway", "Northern"),
        Country("PL", "Poland", "Eastern"),
        Country("PT", "Portugal", "Southern"),
        Country("RO", "Romania", "Eastern"),
        Country("SK", "Slovakia", "Eastern"),
        Country("SI", "Slovenia", "Eastern"),
        Country("ES", "Spain", "Southern"),
        Country("SE", "Sweden", "Northern"),
        Country("CH", "Switzerland", "Western"),
        Country("TR", "Türkiye", "Candidate"),
    ]
}

# Allow-list applied when merging indicator maps; aggregates like EU27_2020
# and non-European geographies in the cubes are dropped
EUROPEAN_CODES: frozenset[str] = frozenset(COUNTRIES)


def get_country(code: str) -> Optional[Country]:
    """Look up a country by geo code (case-insensitive)."""
    return COUNTRIES.get(code.upper())
