#!/usr/bin/env python3
# scripts/reconcile.py - Report student and service request balances that disagree with their assignments
import sys
import os
import argparse
import json

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from service_hours.core.db import db_manager
from service_hours.services.reconciliation import find_inconsistencies


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Audit hour balances against committed assignments")
    parser.add_argument("--json", action="store_true", help="Print issues as JSON")
    args = parser.parse_args(argv)

    with db_manager.transaction() as session:
        issues = find_inconsistencies(session)

        if args.json:
            print(json.dumps([issue.model_dump(mode="json") for issue in issues], indent=2))
        elif not issues:
            print("✅ All balances match their assignments")
        else:
            print(f"⚠️  {len(issues)} balance issue(s) need manual reconciliation:")
            for issue in issues:
                print(
                    f"  - {issue.entity} {issue.label} ({issue.id}): {issue.problem}; "
                    f"stored {issue.stored_remaining:g}, expected {issue.expected_remaining:g}"
                )

    return 1 if issues else 0


if __name__ == "__main__":
    sys.exit(main())
