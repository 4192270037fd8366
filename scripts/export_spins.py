#!/usr/bin/env python3
"""
Spin Export Script

Exports recorded spins from the JSON spin store to CSV, in the same format
as the /api/export endpoint.

Usage:
    python export_spins.py --output spins_export.csv
    python export_spins.py --domain Websites --output website_spins.csv
    python export_spins.py --store /var/data/spins.json --output spins.csv
"""

from __future__ import annotations

import argparse
import sys
from collections import Counter
from pathlib import Path
from typing import List, Optional

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import load_settings
from domain.spin import SpinRecord
from domain.wheel import ServiceDomain
from repositories.spin_repository import SpinRepository
from services.csv_export_service import CSV_COLUMNS, sort_newest_first, write_spins_csv


def filter_spins(records: List[SpinRecord], domain: Optional[str]) -> List[SpinRecord]:
    if domain is None:
        return list(records)
    return [record for record in records if record.domain == domain]


def export_spins_to_csv(records: List[SpinRecord], output_path: str) -> None:
    """
    Export spins to a CSV file, newest first.

    Raises:
        ValueError: If records list is empty
    """
    if not records:
        raise ValueError("No spins to export")

    print(f"Exporting {len(records)} spins to {output_path}")
    print(f"CSV will contain {len(CSV_COLUMNS)} columns")

    with open(output_path, "w", newline="", encoding="utf-8") as f:
        write_spins_csv(sort_newest_first(records), f)

    print(f"✓ Successfully exported {len(records)} spins")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Export recorded spins to CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export all spins
  python export_spins.py --output all_spins.csv

  # Export only Chatbots spins
  python export_spins.py --domain Chatbots --output chatbot_spins.csv

  # Export from a specific store file
  python export_spins.py --store data/spins.json --output spins.csv
        """
    )

    parser.add_argument(
        "--output",
        "-o",
        required=True,
        help="Path to output CSV file"
    )

    parser.add_argument(
        "--store",
        help="Path to the spin store JSON file (default: SPINS_FILE setting)"
    )

    parser.add_argument(
        "--domain",
        "-d",
        choices=[d.value for d in ServiceDomain],
        help="Filter by service domain"
    )

    args = parser.parse_args(argv)

    try:
        store_path = Path(args.store) if args.store else load_settings().spins_file

        print(f"Reading spins from {store_path}...")
        print(f"  Domain filter: {args.domain or 'None (all)'}")
        print()

        records = filter_spins(SpinRepository(store_path).load_all(), args.domain)

        if not records:
            print("No spins found matching the specified filters")
            return 1

        export_spins_to_csv(records, args.output)

        print()
        print("=" * 60)
        print("EXPORT SUMMARY")
        print("=" * 60)
        print(f"Total spins exported: {len(records)}")

        by_coupon = Counter(record.coupon_code for record in records)
        for coupon_code, count in sorted(by_coupon.items()):
            print(f"  {coupon_code:<12} {count}")
        print()
        print(f"Output file: {args.output}")
        print("=" * 60)

        return 0

    except KeyboardInterrupt:
        print("\n\nExport interrupted by user")
        return 130

    except Exception as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
