#!/usr/bin/env python3
"""
Create an empty rundown dataset file.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from rundown.core.store import FileRepo, PersistenceError


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create an empty rundown dataset")
    parser.add_argument("path", help="Dataset JSON file to create")
    parser.add_argument(
        "--segment", "-s",
        action="append",
        default=[],
        help="Default segment name, in rundown order (repeatable)"
    )
    parser.add_argument(
        "--presenter", "-p",
        action="append",
        default=[],
        help="Presenter name (repeatable)"
    )
    parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Overwrite an existing file"
    )
    args = parser.parse_args(argv)

    if Path(args.path).exists() and not args.force:
        print(f"❌ {args.path} already exists; use --force to overwrite", file=sys.stderr)
        return 1

    try:
        FileRepo.create(args.path, args.segment, args.presenter)
    except PersistenceError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    print(f"✅ Created {args.path} with {len(args.segment)} segment(s) and {len(args.presenter)} presenter(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
