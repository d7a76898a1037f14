"""
Eurostat dissemination API fetcher.

Endpoint: https://ec.europa.eu/eurostat/api/dissemination/statistics/1.0/data/{dataset}
Docs: https://wikis.ec.europa.eu/display/EUROSTATHELP/API+Statistics+-+data+query

No API key required. Responses are JSON-stat 2.0 cubes; dimension filters
(unit, isco08, age, ...) are passed as query parameters. On overload the
API sometimes answers 200 with an HTML error page, so the body is checked
before decoding.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from config.settings import (
    EUROSTAT_BASE_URL,
    EUROSTAT_PROBE_TIMEOUT,
    EUROSTAT_TIMEOUT,
    PROBE_DATASET,
    PROBE_PARAMS,
)
from ingestion.fetchers.base import BaseFetcher

logger = logging.getLogger(__name__)

_DEFAULT_PARAMS = {"format": "JSON", "lang": "EN"}


def _looks_like_json(text: str) -> bool:
    return text.lstrip().startswith("{")


class EurostatFetcher(BaseFetcher):
    """Fetches JSON-stat cubes from the Eurostat dissemination API."""

    provider_name = "eurostat"

    def __init__(
        self,
        timeout: float = EUROSTAT_TIMEOUT,
        probe_timeout: float = EUROSTAT_PROBE_TIMEOUT,
        base_url: str = EUROSTAT_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._timeout = timeout
        self._probe_timeout = probe_timeout
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    def dataset_url(self, dataset: str) -> str:
        return f"{self._base_url}/{dataset}"

    async def health_check(self) -> bool:
        """Probe one small query; True only if a JSON body comes back in time."""
        try:
            async with self._client(self._probe_timeout) as client:
                resp = await client.get(
                    self.dataset_url(PROBE_DATASET),
                    params={**_DEFAULT_PARAMS, **PROBE_PARAMS},
                )
                if not resp.is_success:
                    logger.info("Eurostat probe returned HTTP %s", resp.status_code)
                    return False
                return _looks_like_json(resp.text)
        except Exception as exc:
            logger.warning("Eurostat health check failed: %s", exc)
            return False

    async def fetch_cube(
        self,
        dataset: str,
        params: Optional[dict[str, str]] = None,
    ) -> Optional[dict]:
        """
        Fetch a Eurostat dataset filtered by `params`.

        Args:
            dataset: Eurostat dataset code (e.g., "hlth_rs_phys")
            params:  Dimension filters (e.g., {"unit": "P_HTHAB", "age": "Y_LT35"})
        """
        url = self.dataset_url(dataset)
        query = {**_DEFAULT_PARAMS, **(params or {})}

        try:
            async with self._client(self._timeout) as client:
                resp = await client.get(url, params=query)
                resp.raise_for_status()

                if not _looks_like_json(resp.text):
                    logger.error(
                        "Eurostat: non-JSON body for %s %s", dataset, params or {}
                    )
                    return None

                data = resp.json()
                logger.info(
                    "Eurostat: %s %s → %d values",
                    dataset, params or {}, len(data.get("value") or {}),
                )
                return data

        except httpx.HTTPStatusError as exc:
            logger.error(
                "Eurostat HTTP error for %s %s: %s",
                dataset, params or {}, exc.response.status_code,
            )
        except Exception as exc:
            logger.error("Eurostat fetch failed for %s %s: %s", dataset, params or {}, exc)

        return None
