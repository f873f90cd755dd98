"""GTFS-Realtime feed source over HTTP."""

from __future__ import annotations

from typing import Optional

import httpx

from transit_tracker.core.config import settings
from transit_tracker.core.errors import FeedError
from transit_tracker.core.logging import get_logger
from .base import BaseSource

log = get_logger("ingestion.gtfs")


class GtfsRealtimeSource(BaseSource):
    """Fetches the binary vehicle positions feed."""

    name = "gtfs_realtime"

    def __init__(self, url: str, timeout: float = 10.0):
        self.url = url
        self.timeout = timeout

    async def fetch(self) -> bytes:
        log.info("Fetching data from API...")
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            resp = await client.get(self.url)
            resp.raise_for_status()
            payload = resp.content

        log.debug(f"Fetched {len(payload)} bytes from {self.url}")
        return payload


def build_default_source(url: Optional[str] = None) -> GtfsRealtimeSource:
    """Source configured from FEED_URL (or the legacy API_URL)."""
    url = url or settings.feed_url
    if not url:
        raise FeedError("FEED_URL is not configured")
    return GtfsRealtimeSource(url, timeout=settings.FEED_TIMEOUT_SECONDS)
