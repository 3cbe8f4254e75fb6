#!/usr/bin/env python3
"""
Issue a development access token for the cart service.

Signs a token shaped like the identity provider's, using the same
JWT_SECRET the cart service verifies with (or a PEM private key).

Usage:
    python scripts/issue_token.py user-123 --email ada@example.com
    python scripts/issue_token.py user-123 --private-key config/keys/jwt_private.pem --algorithm ES256
"""

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from storefront_shared.auth import TokenIssuer, UserRole

PROJECT_ROOT = Path(__file__).parent.parent


def build_issuer(args: argparse.Namespace) -> TokenIssuer:
    if args.private_key:
        with open(args.private_key, "r") as f:
            return TokenIssuer(
                private_key_pem=f.read(),
                algorithm=args.algorithm,
                audience=args.audience,
                ttl_seconds=args.ttl,
            )

    secret = os.getenv("JWT_SECRET")
    if not secret:
        print("✗ JWT_SECRET is not set (and no --private-key given)")
        sys.exit(1)

    return TokenIssuer(
        secret=secret,
        algorithm=args.algorithm,
        audience=args.audience,
        ttl_seconds=args.ttl,
    )


def main():
    load_dotenv(PROJECT_ROOT / ".env")

    parser = argparse.ArgumentParser(description="Issue a development access token")
    parser.add_argument("user_id", help="Value for the sub claim")
    parser.add_argument("--email")
    parser.add_argument("--name")
    parser.add_argument("--admin", action="store_true", help="Issue an ADMIN token")
    parser.add_argument("--private-key", help="PEM private key file (ES256/RS256)")
    parser.add_argument("--algorithm", default="HS256")
    parser.add_argument("--audience", default=os.getenv("JWT_AUDIENCE"))
    parser.add_argument("--ttl", type=int, default=3600, help="Lifetime in seconds")
    args = parser.parse_args()

    issuer = build_issuer(args)
    token = issuer.issue(
        args.user_id,
        email=args.email,
        name=args.name,
        role=UserRole.ADMIN if args.admin else UserRole.USER,
    )

    print(token)


if __name__ == "__main__":
    main()
