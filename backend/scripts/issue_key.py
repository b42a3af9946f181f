"""
Issue an API key for a data consumer.

Usage:
    python -m scripts.issue_key --email dev@example.com --name "Dev User" \
        [--key-name default] [--rate-limit 60] [--expires-in-days 30]

This will:
  1. Create the API user (or reuse the one with this email)
  2. Generate an API key with the requested rate limit / expiry
  3. Print the raw key ONCE (it is never stored)

The raw key is shown exactly once — copy it immediately.
"""

import argparse
import asyncio
import datetime
import sys

# Ensure the project root is on the path
sys.path.insert(0, ".")

from cricket_api.core.clock import utc_now
from cricket_api.core.database import async_session_factory, engine
from cricket_api.services.credentials import create_api_user, issue_api_key


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Issue a cricket data API key.")
    parser.add_argument("--email", required=True, help="Owner email (users are unique by email)")
    parser.add_argument("--name", default="Dev User", help="Owner display name")
    parser.add_argument("--key-name", default="default", help="Label for the key")
    parser.add_argument("--rate-limit", type=int, default=None, help="Requests per minute")
    parser.add_argument("--expires-in-days", type=int, default=None, help="Key lifetime")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    expires_at = None
    if args.expires_in_days is not None:
        expires_at = utc_now() + datetime.timedelta(days=args.expires_in_days)

    async with async_session_factory() as session:
        user = await create_api_user(session, args.name, args.email)
        api_key, raw_key = await issue_api_key(
            session,
            user.id,
            name=args.key_name,
            rate_limit_per_minute=args.rate_limit,
            expires_at=expires_at,
        )

    # ── Print results ───────────────────────────────────────
    print()
    print("=" * 60)
    print("  API Key Issued")
    print("=" * 60)
    print()
    print(f"  User:       {user.name} <{user.email}>")
    print(f"  Key ID:     {api_key.id}")
    print(f"  Rate limit: {api_key.rate_limit_per_minute}/min")
    print(f"  Expires:    {api_key.expires_at or 'never'}")
    print()
    print(f"  API Key:    {raw_key}")
    print()
    print("  ⚠  Copy this key now — it will NEVER be shown again.")
    print("=" * 60)
    print()

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
