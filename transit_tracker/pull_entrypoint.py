"""Pull entrypoint - Standalone script for a single feed pull.

Usage:
    python -m transit_tracker.pull_entrypoint               # Pull FEED_URL
    python -m transit_tracker.pull_entrypoint <feed-url>    # Pull another feed
"""

import asyncio
import sys
from typing import Any, Dict, Optional

from transit_tracker.core.db import session_scope
from transit_tracker.core.errors import FeedError
from transit_tracker.core.logging import get_logger
from transit_tracker.ingestion.gtfs_source import build_default_source
from transit_tracker.services.pull_service import PullService

logger = get_logger("pull_entrypoint")


async def run_pull(url: Optional[str] = None) -> Dict[str, Any]:
    """Run one pull against ``url`` (or the configured feed)."""
    source = build_default_source(url)
    with session_scope() as db:
        return await PullService(db, source=source).run()


def main():
    """Main entry point for a one-off pull."""
    url = sys.argv[1] if len(sys.argv) > 1 else None
    logger.info("Feed pull starting...")

    try:
        result = asyncio.run(run_pull(url))
    except FeedError as exc:
        logger.error(str(exc))
        sys.exit(1)
    except Exception as exc:
        logger.exception(f"Feed pull failed: {exc}")
        sys.exit(1)

    logger.info(f"Feed pull completed: {result}")
    if not result.get("success", False):
        sys.exit(1)
    return result


if __name__ == "__main__":
    main()
