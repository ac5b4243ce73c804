#!/usr/bin/env python3
"""
Export a rundown dataset to a Markdown document.

The dataset file is only read; it is neither migrated nor rewritten.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from rundown.core.export import export_file
from rundown.core.store import PersistenceError


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Render a rundown dataset as Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s rundown.json rundown.md
        """
    )
    parser.add_argument("source", help="Dataset JSON file")
    parser.add_argument("destination", help="Markdown file to write")
    args = parser.parse_args(argv)

    try:
        count = export_file(args.source, args.destination)
    except PersistenceError as e:
        print(f"❌ Can't open the source file: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"❌ Can't create the output file: {e}", file=sys.stderr)
        return 1

    print(f"✅ Exported {count} episode(s) to {args.destination}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
