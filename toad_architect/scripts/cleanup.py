"""
Session cleanup sweep.

Deletes sessions not accessed within the retention window.
Run: python -m toad_architect.scripts.cleanup [--days N]

Dependencies: toad_architect.application, toad_architect.boundary.db
"""

import argparse
import asyncio
import logging
import sys

from toad_architect.application.services.session_service import SessionService
from toad_architect.boundary.db import dispose_engine, get_async_session_factory
from toad_architect.configs import get_settings
from toad_architect.observability import configure_logging
from toad_architect.observability.correlation import bind_correlation_id

logger = logging.getLogger(__name__)


async def run_cleanup(days_old: int) -> int:
    """
    Run one cleanup sweep against the configured database.

    Args:
        days_old: Retention window in days

    Returns:
        int: Number of sessions deleted
    """
    SessionFactory = get_async_session_factory()
    with bind_correlation_id():
        try:
            async with SessionFactory() as db:
                service = SessionService(db=db, retention_days=days_old)
                deleted_count = await service.cleanup_old_sessions(days_old)
        finally:
            await dispose_engine()

        logger.info(
            f"Deleted {deleted_count} sessions older than {days_old} days",
            extra={"deleted_count": deleted_count, "days_old": days_old},
        )
    return deleted_count


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Delete sessions past the retention window")
    parser.add_argument(
        "--days",
        type=int,
        default=settings.session.cleanup_days,
        help="Delete sessions not accessed in this many days (default: SESSION_CLEANUP_DAYS)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point; returns the process exit code."""
    args = parse_args(argv)
    configure_logging(get_settings().log_level)

    try:
        asyncio.run(run_cleanup(args.days))
    except Exception as e:
        logger.error(f"Cleanup failed: {type(e).__name__}: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
