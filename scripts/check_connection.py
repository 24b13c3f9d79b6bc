#!/usr/bin/env python3
# =============================================================================
# scripts/check_connection.py - Storage Connectivity Probe
# =============================================================================
# Checks that the configured Supabase project and submissions table are
# reachable, without starting the API.
#
# Usage:
#   poetry run python scripts/check_connection.py
#
# Exit codes:
#   0 - table reachable
#   1 - missing configuration, probe failed, or no answer within 15 seconds
# =============================================================================

import asyncio
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import settings  # noqa: E402  (exits if config is missing)
from lib.supabase_client import SubmissionStore  # noqa: E402

OVERALL_TIMEOUT_SECONDS = 15

logger = logging.getLogger("check_connection")


async def probe() -> bool:
    """Connect once and report the outcome."""
    store = SubmissionStore(
        url=settings.SUPABASE_URL,
        key=settings.SUPABASE_SERVICE_KEY,
        table=settings.SUBMISSIONS_TABLE,
        connect_timeout=settings.STORAGE_CONNECT_TIMEOUT_SECONDS,
        socket_timeout=settings.STORAGE_SOCKET_TIMEOUT_SECONDS,
    )
    try:
        return await asyncio.wait_for(store.connect(), timeout=OVERALL_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.error(f"Connection timeout after {OVERALL_TIMEOUT_SECONDS} seconds")
        return False
    finally:
        await store.close()


def main():
    """Run the probe and exit with its status."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    logger.info("Testing storage connection...")
    logger.info(f"Supabase URL: {settings.SUPABASE_URL}")
    logger.info(f"Table: {settings.SUBMISSIONS_TABLE}")

    if asyncio.run(probe()):
        logger.info("Storage connection successful!")
        sys.exit(0)

    logger.error("Storage connection failed")
    sys.exit(1)


if __name__ == "__main__":
    main()
