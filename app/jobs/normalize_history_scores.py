"""
History migration job.
- Rewrites stored trust scores onto the canonical 0-100 scale
- Rows already marked score_scale=100 are left alone
- NO FastAPI imports
- SAFE to re-run via cron
"""

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from app.core.config import AnalysisType
from app.services.history_store import iter_history_rows, update_history_row
from app.services.normalizer import normalize_stored_record

# ------------------------
# ENV
# ------------------------

BASE_DIR = Path(__file__).resolve().parent.parent.parent
load_dotenv(BASE_DIR / ".env")

logger = logging.getLogger(__name__)


# ------------------------
# MIGRATION
# ------------------------

def migrate_analysis_type(analysis_type: AnalysisType, dry_run: bool = False) -> dict:
    scanned = 0
    updated = 0
    failed = 0

    # materialized first so updates don't shift the pages being read
    rows = list(iter_history_rows(analysis_type))

    for row in rows:
        scanned += 1
        changes = normalize_stored_record(row)
        if not changes:
            continue

        if row.get("id") is None:
            logger.warning("Skipping history row without id: %s", row)
            failed += 1
            continue

        if dry_run:
            updated += 1
            continue

        try:
            update_history_row(row["id"], changes)
            updated += 1
        except Exception:
            logger.exception("Failed to normalize history row id=%s", row["id"])
            failed += 1

    return {
        "analysis_type": analysis_type.value,
        "scanned": scanned,
        "updated": updated,
        "failed": failed,
    }


# ------------------------
# MAIN
# ------------------------

def run(analysis_types: Optional[list[AnalysisType]] = None, dry_run: bool = False) -> list[dict]:
    logger.info("History score normalization started (dry_run=%s)", dry_run)

    results = []
    for analysis_type in analysis_types or list(AnalysisType):
        result = migrate_analysis_type(analysis_type, dry_run=dry_run)
        logger.info(
            "%s: scanned=%s updated=%s failed=%s",
            result["analysis_type"],
            result["scanned"],
            result["updated"],
            result["failed"],
        )
        results.append(result)

    logger.info("History score normalization completed")
    return results


if __name__ == "__main__":
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s"
    )

    parser = argparse.ArgumentParser(description="Normalize stored trust scores to 0-100")
    parser.add_argument("--dry-run", action="store_true")
    args = parser.parse_args()

    run(dry_run=args.dry_run)
