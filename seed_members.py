#!/usr/bin/env python3
"""
Seed the Members API SQLite database with sample members.

The schema is created (or migrated) first, then a few members with
fixed join dates are inserted.  Members whose email already exists are
skipped, so the script can be run more than once.

Usage:
    python seed_members.py --db ./members_api/members.db
    python seed_members.py --db ./members_api/members.db --reset
"""

import argparse
import os
import sys

from members_api.app.core.db import get_cursor, init_db

SAMPLE_MEMBERS = [
    ("Alice Johnson", "alice@example.com", "2024-01-15"),
    ("Bob Smith", "bob@example.com", "2024-02-20"),
    ("Carol White", "carol@example.com", "2024-03-10"),
]


def seed(db_path: str, reset: bool = False) -> int:
    """Insert ``SAMPLE_MEMBERS`` into the database at ``db_path``.

    Returns the number of rows inserted.
    """
    init_db(db_path)
    inserted = 0
    with get_cursor(db_path) as cur:
        if reset:
            cur.execute("DELETE FROM members")
        for name, email, joined_date in SAMPLE_MEMBERS:
            cur.execute(
                "INSERT OR IGNORE INTO members (name, email, joined_date) VALUES (?, ?, ?)",
                (name, email, joined_date),
            )
            inserted += cur.rowcount
    return inserted


def main():
    ap = argparse.ArgumentParser(description="Seed the Members API database (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./members_api/members.db)")
    ap.add_argument("--reset", action="store_true", help="Delete all existing members before seeding")
    args = ap.parse_args()

    # Relative paths are taken from the current directory, not the project root.
    inserted = seed(os.path.abspath(args.db), reset=args.reset)
    if not inserted:
        print("[!] No members inserted; sample emails already exist.", file=sys.stderr)
        sys.exit(1)
    print(f"[+] Inserted {inserted} member(s) into {args.db}")


if __name__ == "__main__":
    main()
