#!/usr/bin/env python3
"""
Print a signed session token for an existing account id.

Useful for integrations and manual testing of protected routes.  The
token is signed with the ``JWT_SECRET`` the server uses, so run this
with the same environment.

Usage:
    python create_token.py --user-id 1 --expires 86400
"""

import argparse
from typing import Optional, Sequence

from certificate_registry_api.app.core.security import create_access_token


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Issue a session token for an account id.")
    ap.add_argument("--user-id", type=int, required=True, help="Account id to embed in the token")
    ap.add_argument(
        "--expires",
        type=int,
        default=None,
        help="Lifetime in seconds (default: ACCESS_TOKEN_EXPIRE_MINUTES)",
    )
    args = ap.parse_args(argv)

    token = create_access_token({"sub": str(args.user_id)}, expires_delta=args.expires)
    print(token)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
