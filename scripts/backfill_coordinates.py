#!/usr/bin/env python3
"""
Backfill latitude/longitude for listings that were saved without them.

Listings created from a free-typed address (no suggestion picked) have no
stored coordinates, so every detail view geocodes them again. This script
resolves them once and writes the result back.

Usage:
    # Show what would be updated
    python -m scripts.backfill_coordinates --dry-run

    # Backfill at most 100 listings
    python -m scripts.backfill_coordinates --limit 100

Exit codes:
    0 - Success (every listing resolved, or nothing to do)
    1 - Partial failure (some addresses could not be geocoded)
    2 - Complete failure or invalid configuration
"""

import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime

# Make app package importable when run from scripts/ or repo root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import httpx

from app.core.backend import DataBackend
from app.core.config import get_settings
from app.core.exceptions import AppException
from app.geocoding.service import GeocodingService


# Configure logging for cron-friendly output
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

# Nominatim usage policy: at most one request per second
REQUEST_INTERVAL_SECONDS = 1.0


def connect_service_role(url: str, service_key: str) -> httpx.AsyncClient:
    """Backend client that bypasses row-level policies."""
    return httpx.AsyncClient(
        base_url=f"{url.rstrip('/')}/rest/v1",
        headers={"apikey": service_key, "Authorization": f"Bearer {service_key}"},
        timeout=30.0,
    )


async def get_listings_without_coordinates(limit: int) -> list[dict]:
    return await DataBackend.select(
        "properties",
        {
            "select": "id,address",
            "latitude": "is.null",
            "order": "created_at.asc",
            "limit": str(limit),
        },
    )


async def backfill(limit: int, dry_run: bool) -> tuple[int, int]:
    """
    Geocode listings missing coordinates.

    Returns:
        Tuple of (success_count, failure_count)
    """
    listings = await get_listings_without_coordinates(limit)
    if not listings:
        logger.info("All listings already have coordinates")
        return 0, 0

    logger.info(f"Backfilling coordinates for {len(listings)} listings")
    geocoder = GeocodingService()

    success = 0
    failure = 0

    for listing in listings:
        address = (listing.get("address") or "").strip()
        coords = await geocoder.geocode(address) if address else None

        if coords is None:
            logger.warning(f"Could not geocode listing {listing['id']}: {address!r}")
            failure += 1
        elif dry_run:
            logger.info(f"[dry-run] {listing['id']} -> {coords.latitude}, {coords.longitude}")
            success += 1
        else:
            try:
                await DataBackend.update(
                    "properties",
                    {"latitude": coords.latitude, "longitude": coords.longitude},
                    {"id": f"eq.{listing['id']}"},
                )
                logger.info(f"Updated {listing['id']} -> {coords.latitude}, {coords.longitude}")
                success += 1
            except AppException as e:
                logger.error(f"Failed to update listing {listing['id']}: {e.detail}")
                failure += 1

        await asyncio.sleep(REQUEST_INTERVAL_SECONDS)

    return success, failure


async def main():
    parser = argparse.ArgumentParser(
        description="Backfill listing coordinates from their addresses",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=500,
        help="Maximum number of listings to process (default: 500)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Geocode but do not write coordinates back",
    )

    args = parser.parse_args()

    if args.limit < 1:
        parser.error("--limit must be positive")

    settings = get_settings()
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        logger.error("SUPABASE_SERVICE_ROLE_KEY is not configured")
        sys.exit(2)

    DataBackend.client = connect_service_role(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)

    start_time = datetime.utcnow()
    logger.info(f"Coordinate backfill started at {start_time.isoformat()}")

    try:
        try:
            success_count, failure_count = await backfill(args.limit, args.dry_run)
        except AppException as e:
            logger.error(f"Could not load listings: {e.detail}")
            sys.exit(2)

        elapsed = (datetime.utcnow() - start_time).total_seconds()
        logger.info(
            f"Backfill complete: {success_count} updated, {failure_count} failed, "
            f"elapsed {elapsed:.1f}s"
        )

        if failure_count > 0 and success_count > 0:
            # Partial failure
            sys.exit(1)
        elif failure_count > 0 and success_count == 0:
            # Complete failure
            sys.exit(2)
        else:
            sys.exit(0)

    finally:
        await DataBackend.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
