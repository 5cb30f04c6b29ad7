"""
Seed script for the Civic Report Hub mock DB or Firestore.

Usage:
  - Dry run (default): python scripts/seed_db.py
  - Apply to configured DB: python scripts/seed_db.py --apply
  - Force mock DB even if FIREBASE configured: python scripts/seed_db.py --apply --force-mock

Behavior:
  - Loads `db_seed.json` from repo root.
  - Every report is validated with ReportCreate before it is written.
  - Seeded reports start as `reported` unless the seed entry sets `status`.
"""

import argparse
import json
import os
from datetime import datetime, timezone

from pydantic import ValidationError

from app.config.firebase import get_db, reset_db
from app.core.settings import settings
from app.models.report import ReportCreate
from app.services.status_workflow import ReportStatus


def load_seed(path: str = "./db_seed.json") -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def build_report(data: dict) -> dict:
    report = ReportCreate(**data)
    now = datetime.now(timezone.utc)
    return {
        **report.model_dump(),
        "status": ReportStatus(data.get("status", ReportStatus.REPORTED.value)).value,
        "timestamps": [now],
        "created_at": now,
    }


def write_to_db(db, seed: dict, apply: bool = False):
    for doc_id, data in seed.get("reports", {}).items():
        try:
            report = build_report(data)
        except (ValidationError, ValueError) as e:
            print(f"Skipping invalid report {doc_id}: {e}")
            continue

        print(f"Preparing: reports/{doc_id} ({report['status']})")
        if not apply:
            continue
        db.collection("reports").document(doc_id).set(report)
        print(f"Wrote: reports/{doc_id}")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write seed to the DB instead of dry-run")
    parser.add_argument("--force-mock", action="store_true", help="Force use of mock DB even if FIREBASE configured")
    parser.add_argument("--seed", default=os.path.join(os.getcwd(), "db_seed.json"), help="Path to the seed file")
    args = parser.parse_args()

    if not os.path.exists(args.seed):
        print(f"Seed file not found: {args.seed}")
        return

    seed = load_seed(args.seed)

    if args.force_mock:
        print("Forcing mock DB usage for this run.")
        settings.USE_MOCK_DB = True
        reset_db()

    db = get_db()

    write_to_db(db, seed, apply=args.apply)

    if args.apply:
        print("Seeding completed.")
    else:
        print("Dry run complete. Re-run with --apply to write to DB.")


if __name__ == "__main__":
    main()
