#!/usr/bin/env python3
"""
Migrate an unversioned rundown dataset file in place.

Every story gets an ID equal to its position in its segment and the file is
marked with the current DBVersion. Files that are already current are left
untouched. The server performs the same migration on load; this script is
for upgrading files ahead of time.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from rundown.core.store import FileRepo, PersistenceError


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: migrate_dataset.py <dataset.json>")
        return 2

    print(f"🚀 Migrating {argv[0]}...")
    try:
        migrated = FileRepo.migrate_file(argv[0])
    except PersistenceError as e:
        print(f"❌ Migration error: {e}")
        return 1

    if migrated:
        print("✅ Migration completed")
    else:
        print("✅ Dataset is already current")
    return 0


if __name__ == "__main__":
    sys.exit(main())
