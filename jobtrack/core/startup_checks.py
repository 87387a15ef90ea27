"""Startup validation checks for the application."""

import logging
from pathlib import Path

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from jobtrack.config import settings

logger = logging.getLogger(__name__)

DEFAULT_SECRET_KEY = "change-this-secret-key-in-production"


async def check_database() -> bool:
    """Run a trivial query against the configured database."""
    from jobtrack.db.session import engine

    try:
        logger.info("Checking database connection...")
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("✅ Database reachable")
        return True
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database check failed: {e}", exc_info=True)
        return False


def check_storage() -> bool:
    """Make sure the resume upload directory exists and is writable."""
    try:
        logger.info("Checking storage configuration...")
        resume_dir = Path(settings.resume_storage_dir)
        if not resume_dir.exists():
            resume_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created resume storage directory: {resume_dir}")

        check_file = resume_dir / ".write_check"
        check_file.touch()
        check_file.unlink()

        logger.info(f"✅ Storage ready: {resume_dir}")
        return True
    except OSError as e:
        logger.error(f"Storage check failed: {e}", exc_info=True)
        return False


def check_environment() -> bool:
    logger.info("Checking environment configuration...")

    if settings.SECRET_KEY == DEFAULT_SECRET_KEY:
        if settings.ENVIRONMENT == "production":
            logger.error("SECRET_KEY is still the default value in production")
            return False
        logger.warning("SECRET_KEY is the default value; set it before deploying")

    if not settings.SENTRY_DSN:
        logger.warning("Optional variable not set: SENTRY_DSN (error tracking)")

    logger.info("✅ Environment configuration checked")
    return True


async def run_all_startup_checks() -> bool:
    """
    Run all startup validation checks.

    Failures are logged; the application still starts so /health can
    report on it.
    """
    logger.info("=" * 60)
    logger.info("Running startup validation checks...")
    logger.info("=" * 60)

    results = {
        "Environment": check_environment(),
        "Database": await check_database(),
        "Storage": check_storage(),
    }

    logger.info("Startup checks complete:")
    for name, passed in results.items():
        logger.info(f"  {name}: {'✅ PASS' if passed else '❌ FAIL'}")

    all_passed = all(results.values())
    if not all_passed:
        logger.error("Some startup checks failed. Please fix issues before proceeding.")
    return all_passed
