"""
Workforce pipeline — concurrent cube fetch, flatten, merge and score.

One sync run issues the five indicator queries concurrently. Each query
ends up as a geo → value map for the latest period; a failed fetch or a
malformed cube leaves that map empty and the other four carry on.

Usage:
    pipeline = WorkforcePipeline()
    result = await pipeline.run()
    result.records   # list[ScoredWorkforceRecord]
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, fields as dataclass_fields
from datetime import datetime, timezone
from typing import Mapping, Optional

from config.countries import EUROPEAN_CODES
from config.settings import (
    INDICATOR_REGISTRY,
    STRICT_CUBES,
    IndicatorDefinition,
    get_indicator_fields,
)
from ingestion.cube import MalformedCubeError, extract_latest_by_geo, latest_year, parse_cube
from ingestion.fetchers.base import BaseFetcher
from ingestion.fetchers.eurostat import EurostatFetcher
from models.workforce import RawWorkforceRecord, ScoredWorkforceRecord
from processing.workforce_scorer import score_workforce_data

logger = logging.getLogger(__name__)

# Record attributes an indicator can fill
RECORD_INDICATOR_FIELDS = frozenset(
    f.name for f in dataclass_fields(RawWorkforceRecord)
) - {"code", "year"}


@dataclass
class PipelineResult:
    """Output of one run: scored records plus what went wrong on the way."""
    records: list[ScoredWorkforceRecord]
    year: int
    indicator_counts: dict[str, int] = field(default_factory=dict)
    errors: list[dict] = field(default_factory=list)


def default_data_year() -> int:
    """Eurostat health statistics trail the calendar by at least a year."""
    return datetime.now(timezone.utc).year - 1


def assemble_raw_records(
    indicator_maps: Mapping[str, Mapping[str, float]],
    year: int,
    allowed_codes: frozenset[str] = EUROPEAN_CODES,
    fields: Optional[list[str]] = None,
) -> list[RawWorkforceRecord]:
    """
    Merge per-indicator geo maps into one raw record per country.

    Codes are the union across all maps, restricted to `allowed_codes`.
    An indicator with no value for a code stays None. `fields` defaults to
    the registry's record fields.
    """
    fields = fields if fields is not None else get_indicator_fields()
    codes: set[str] = set()
    for name in fields:
        codes.update(indicator_maps.get(name, {}))

    records = []
    for code in sorted(codes & allowed_codes):
        values = {name: indicator_maps.get(name, {}).get(code) for name in fields}
        records.append(RawWorkforceRecord(code=code, year=year, **values))
    return records


class WorkforcePipeline:
    """Fetch → flatten → merge → score, with per-indicator failure isolation."""

    def __init__(
        self,
        fetcher: Optional[BaseFetcher] = None,
        indicators: Optional[list[IndicatorDefinition]] = None,
        strict: bool = STRICT_CUBES,
    ):
        self._fetcher = fetcher or EurostatFetcher()
        self._indicators = indicators or INDICATOR_REGISTRY
        unknown = [i.field for i in self._indicators if i.field not in RECORD_INDICATOR_FIELDS]
        if unknown:
            raise ValueError(
                f"indicator fields {unknown} are not workforce record fields; "
                f"expected one of {sorted(RECORD_INDICATOR_FIELDS)}"
            )
        self._strict = strict

    async def _fetch_one(
        self, indicator: IndicatorDefinition
    ) -> tuple[dict[str, float], Optional[int], Optional[dict]]:
        """Returns (geo map, latest year, error entry)."""
        try:
            document = await self._fetcher.fetch_cube(indicator.dataset, indicator.params)
        except Exception as exc:
            logger.error("FAIL: %s fetch raised — %s", indicator.field, exc)
            return {}, None, {"indicator": indicator.field, "error": str(exc)}

        if document is None:
            return {}, None, {"indicator": indicator.field, "error": "no data returned"}

        try:
            cube = parse_cube(document)
            values = extract_latest_by_geo(cube)
        except MalformedCubeError as exc:
            if not self._strict:
                logger.warning("%s: malformed cube treated as empty: %s", indicator.field, exc)
                return {}, None, None
            logger.error("FAIL: %s — malformed cube: %s", indicator.field, exc)
            return {}, None, {"indicator": indicator.field, "error": str(exc)}

        return values, latest_year(cube), None

    async def fetch_indicator_maps(self) -> tuple[dict[str, dict[str, float]], Optional[int], list[dict]]:
        """Run every indicator query concurrently."""
        results = await asyncio.gather(
            *(self._fetch_one(ind) for ind in self._indicators)
        )

        maps: dict[str, dict[str, float]] = {}
        years: list[int] = []
        errors: list[dict] = []
        for indicator, (values, year, error) in zip(self._indicators, results):
            maps[indicator.field] = values
            if year is not None:
                years.append(year)
            if error is not None:
                errors.append(error)
            logger.info("  %-20s %3d geographies", indicator.field, len(values))

        return maps, (max(years) if years else None), errors

    async def run(self) -> PipelineResult:
        logger.info("=" * 70)
        logger.info(
            "WORKFORCE PIPELINE START: %d indicators via %s",
            len(self._indicators), self._fetcher.provider_name,
        )
        logger.info("=" * 70)

        start_ts = datetime.now(timezone.utc)
        maps, year, errors = await self.fetch_indicator_maps()
        if year is None:
            year = default_data_year()

        raw = assemble_raw_records(
            maps, year, fields=[i.field for i in self._indicators]
        )
        scored = score_workforce_data(raw)
        elapsed = (datetime.now(timezone.utc) - start_ts).total_seconds()

        if errors:
            logger.warning("%d indicator(s) failed: %s", len(errors),
                           ", ".join(e["indicator"] for e in errors))
        logger.info(
            "WORKFORCE PIPELINE COMPLETE: %d countries for %d in %.1f seconds",
            len(scored), year, elapsed,
        )

        return PipelineResult(
            records=scored,
            year=year,
            indicator_counts={name: len(values) for name, values in maps.items()},
            errors=errors,
        )
