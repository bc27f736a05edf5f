#!/usr/bin/env python3
"""
Run the attraction expiry functions from a workstation.

Uses the same library code as the Lambdas, against the real table/bucket
named in the environment (or a .env file at the repo root).

Usage:
    python3 backend/scripts/run_expiry_check.py sweep
    python3 backend/scripts/run_expiry_check.py sweep --dry-run
    python3 backend/scripts/run_expiry_check.py sweep --now 2025-01-01T00:00:00Z
    python3 backend/scripts/run_expiry_check.py classify --bucket my-uploads --key attractions/x1/ticket.pdf
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

# Load env from root
load_dotenv(Path(__file__).parent.parent.parent / '.env')

# Add repo root to path to allow importing backend.lib
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from backend.lib.attractions.attraction_store import AttractionStore
from backend.lib.attractions.config import get_settings
from backend.lib.attractions.date_extraction import GeminiDateExtractor
from backend.lib.attractions.expiry_sweeper import find_due_records, sweep
from backend.lib.attractions.timestamps import ensure_utc
from backend.lib.attractions.upload_classifier import UploadEvent, classify_upload

# Setup logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def parse_now(value: str) -> datetime:
    """argparse type for --now (ISO-8601, naive means UTC)."""
    try:
        return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid ISO timestamp: {value}")


def run_sweep(args) -> int:
    """Handle the sweep subcommand."""
    store = AttractionStore(get_settings().table_name)

    if args.dry_run:
        record_ids = find_due_records(store, args.now)
        logger.info(f"Dry run: {len(record_ids)} attractions would be expired")
        print(json.dumps({"dry_run": True, "record_ids": record_ids}, indent=2))
        return 0

    result = sweep(store, args.now)
    print(json.dumps(result.to_dict(), indent=2))
    return 0


def run_classify(args) -> int:
    """Handle the classify subcommand."""
    settings = get_settings()
    result = classify_upload(
        UploadEvent(name=args.key, bucket=args.bucket, content_type=args.content_type),
        store=AttractionStore(settings.table_name),
        extractor=GeminiDateExtractor(),
    )
    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.status == "classified" else 1


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run attraction expiry functions locally")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sweep_parser = subparsers.add_parser("sweep", help="Expire attractions whose expiry date has passed")
    sweep_parser.add_argument("--dry-run", action="store_true", help="List due attractions without updating them")
    sweep_parser.add_argument("--now", type=parse_now, default=None, help="Sweep time (ISO-8601, default: now)")
    sweep_parser.set_defaults(func=run_sweep)

    classify_parser = subparsers.add_parser("classify", help="Extract the expiry date of one uploaded document")
    classify_parser.add_argument("--bucket", required=True, help="S3 bucket of the upload")
    classify_parser.add_argument("--key", required=True, help="S3 key of the upload")
    classify_parser.add_argument("--content-type", default=None, help="Override the document content type")
    classify_parser.set_defaults(func=run_classify)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
