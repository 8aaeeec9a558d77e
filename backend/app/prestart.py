"""
Backend — Prestart (Database Wait + Initial Data)
===================================================

What:  Runs before the API server in the backend container:
       1. Wait until the database accepts connections
       2. (Alembic migrations run between the two steps, from the shell script)
       3. Create the first superuser from FIRST_SUPERUSER / FIRST_SUPERUSER_PASSWORD
Why:   `docker compose up` starts the backend while PostgreSQL is still booting.
How:   tenacity retries a `SELECT 1` with a fixed wait, logging each attempt.

Usage:
    app-prestart wait-db        # step 1 only
    app-prestart initial-data   # step 3 only
    app-prestart                # both
"""

import argparse
import asyncio
import logging
from typing import Optional, Sequence

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from tenacity import after_log, before_log, retry, stop_after_attempt, wait_fixed

from app.config import settings
from app.database import async_session_factory, engine
from app.models.user import User
from app.schemas.user import UserCreate
from app.services.user_service import user_service

logger = logging.getLogger(__name__)


async def check_database(db_engine: AsyncEngine) -> None:
    """Raise if the database cannot answer a trivial query."""
    async with db_engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def wait_for_database(
    db_engine: AsyncEngine,
    max_tries: int = settings.db_connect_max_tries,
    wait_seconds: int = settings.db_connect_wait_seconds,
) -> None:
    """
    Block until the database is reachable.

    Raises:
        tenacity.RetryError: Still unreachable after `max_tries` attempts.
    """
    probe = retry(
        stop=stop_after_attempt(max_tries),
        wait=wait_fixed(wait_seconds),
        before=before_log(logger, logging.INFO),
        after=after_log(logger, logging.WARNING),
    )(check_database)
    await probe(db_engine)
    logger.info("Database is reachable")


async def init_first_superuser(session: AsyncSession) -> Optional[User]:
    """
    Create the first superuser if it does not exist yet.

    Idempotent: returns None and changes nothing on later runs.
    """
    existing = await user_service.get_user_by_email(session, settings.first_superuser)
    if existing is not None:
        logger.info("First superuser %s already exists", settings.first_superuser)
        return None

    user = await user_service.create_user(
        session,
        UserCreate(
            email=settings.first_superuser,
            password=settings.first_superuser_password,
            is_superuser=True,
        ),
    )
    await session.commit()
    logger.info("Created first superuser %s", user.email)
    return user


async def create_initial_data(
    session_factory: async_sessionmaker = async_session_factory,
) -> None:
    async with session_factory() as session:
        await init_first_superuser(session)


async def _run(command: str) -> None:
    try:
        if command in ("all", "wait-db"):
            await wait_for_database(engine)
        if command in ("all", "initial-data"):
            await create_initial_data()
    finally:
        await engine.dispose()


def main(argv: Optional[Sequence[str]] = None) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    parser = argparse.ArgumentParser(
        prog="app-prestart",
        description="Wait for the database and seed initial data.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="all",
        choices=["all", "wait-db", "initial-data"],
    )
    args = parser.parse_args(argv)
    asyncio.run(_run(args.command))


if __name__ == "__main__":
    main()
