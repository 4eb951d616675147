"""Seed default site settings. Run from project root: python scripts/seed_site_settings.py

Existing keys are left untouched. Exits 0 on success, 1 if any step fails.
"""
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path so backend imports work
_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_root))

import config
from backend.models import init_db
from backend.models.base import dispose_db
from backend.services.settings_seed import seed_site_settings

logger = logging.getLogger("nbm.seed")


async def run() -> int:
    try:
        await init_db()
        result = await seed_site_settings()
    except Exception:
        logger.exception("Seeding failed")
        return 1
    finally:
        await dispose_db()

    logger.info(
        "Summary: created=%d skipped=%d total=%d", result.created, result.skipped, result.total
    )
    logger.info("Site settings seeding completed successfully")
    return 0


def main() -> None:
    logging.basicConfig(level=config.LOG_LEVEL)
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
