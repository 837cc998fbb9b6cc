#!/usr/bin/env python3
"""
Prune refresh token bookkeeping that can no longer affect validation.

Deletes revocation entries whose token has expired and refresh records that
expired more than the retention window ago.

Usage:
    python scripts/cleanup_tokens.py [--retention-days N]

Options:
    --retention-days N  Override REFRESH_TOKEN_RETENTION_DAYS for this run
"""

import asyncio
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from identity.config import settings
from identity.container import get_container
from identity.logging_config import configure_logging

# Color codes
GREEN = "\033[92m"
RED = "\033[91m"
BLUE = "\033[94m"
RESET = "\033[0m"


def print_success(text):
    print(f"{GREEN}✅ {text}{RESET}")


def print_error(text):
    print(f"{RED}❌ {text}{RESET}")


def print_header(text):
    print(f"\n{BLUE}{'=' * 80}{RESET}")
    print(f"{BLUE}{text.center(80)}{RESET}")
    print(f"{BLUE}{'=' * 80}{RESET}\n")


async def main():
    """Main cleanup function"""
    import argparse

    parser = argparse.ArgumentParser(description="Prune expired refresh token data")
    parser.add_argument(
        "--retention-days",
        type=int,
        default=None,
        help="Days to keep expired refresh records (default: REFRESH_TOKEN_RETENTION_DAYS)",
    )
    args = parser.parse_args()

    configure_logging()
    retention_days = args.retention_days
    if retention_days is None:
        retention_days = settings.refresh_tokens.retention_days
    if retention_days < 0:
        print_error("--retention-days must not be negative")
        sys.exit(2)

    print_header("REFRESH TOKEN CLEANUP")

    engine = create_async_engine(settings.db.url, echo=False)
    session_factory = async_sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
    container = get_container()

    try:
        async with session_factory() as session:
            use_case = container.cleanup_tokens_use_case(session=session, retention_days=retention_days)
            result = await use_case.execute()
    except Exception as e:
        print_error(f"Cleanup failed: {e}")
        raise
    finally:
        await engine.dispose()

    print_success(f"Revocation entries deleted: {result['revoked_tokens_deleted']}")
    print_success(f"Refresh records deleted: {result['refresh_tokens_deleted']} (retention {retention_days} days)")


if __name__ == "__main__":
    asyncio.run(main())
