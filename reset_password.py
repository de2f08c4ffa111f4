#!/usr/bin/env python3
"""
Reset an account's password in the certificate registry database.

This script DOES NOT read or reveal any existing passwords.  It stores
a new PBKDF2 hash for the account with the given email.

Usage:
    python reset_password.py --email admin@example.com --password "NewStrongPass!234"
    python reset_password.py --db ./certificates.db --email admin@example.com

If --password is omitted, you will be prompted to enter it securely.
If --db is omitted, the DATABASE_URL setting is used.
"""

import argparse
import getpass
import os
import sqlite3
import sys
from typing import Optional, Sequence

from certificate_registry_api.app.core.db import get_database_path
from certificate_registry_api.app.core.security import hash_password


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Reset an account password (SQLite).")
    ap.add_argument("--db", help="Path to SQLite DB file (default: DATABASE_URL)")
    ap.add_argument("--email", required=True, help="Account email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args(argv)

    db_path = args.db or get_database_path()
    if not os.path.exists(db_path):
        print(f"[!] DB not found: {db_path}", file=sys.stderr)
        return 1

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        return 1

    hashed = hash_password(new_password)

    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        row = cur.execute("SELECT id FROM users WHERE email = ?", (args.email,)).fetchone()
        if not row:
            print(f"[!] No user found with email: {args.email}", file=sys.stderr)
            return 2

        cur.execute(
            "UPDATE users SET password = ?, updated_at = CURRENT_TIMESTAMP WHERE email = ?",
            (hashed, args.email),
        )
        conn.commit()
        print(f"[+] Password updated for user: {args.email}")
    finally:
        conn.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
