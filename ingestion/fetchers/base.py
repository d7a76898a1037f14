"""
Base fetcher interface for statistical cube providers.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class BaseFetcher(ABC):
    """Abstract base for cube fetchers."""

    provider_name: str = "base"

    @abstractmethod
    async def fetch_cube(
        self,
        dataset: str,
        params: Optional[dict[str, str]] = None,
    ) -> Optional[dict]:
        """
        Fetch one dataset+filter query and return the decoded JSON document.
        Returns None when the source could not deliver a JSON body.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Verify the API is reachable and responding."""
        ...
