"""
Initialize Database Script
Creates the schema on a fresh database and brings Alembic to head.
Usage: python -m userdir.scripts.initialize_db
"""

import asyncio
import logging
import subprocess
import sys
from sqlalchemy import inspect
from alembic.config import Config
from alembic import command

from userdir.database import engine, Base

# Import all models to register them with Base.metadata
from userdir.models import User

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

BASELINE_REVISION = "3f1a9c2d7b10"


async def initialize_db():
    """
    If the database is empty, create all tables and stamp Alembic to the
    baseline revision. Then run migrations to reach head.
    """
    logger.info("Starting database initialization...")

    async with engine.begin() as conn:
        def check_if_fresh(sync_conn):
            inspector = inspect(sync_conn)
            return User.__tablename__ not in inspector.get_table_names()

        is_fresh_install = await conn.run_sync(check_if_fresh)
        logger.info(f"Is fresh install? {is_fresh_install}")

        if is_fresh_install:
            logger.info("No users table detected. Creating baseline schema...")
            await conn.run_sync(Base.metadata.create_all)
            logger.info("All tables created successfully.")

    # Alembic runs outside the transaction so it sees the committed tables
    alembic_cfg = Config("alembic.ini")
    if is_fresh_install:
        logger.info(f"Stamping database with baseline revision '{BASELINE_REVISION}'...")
        try:
            subprocess.run([sys.executable, "-m", "alembic", "stamp", BASELINE_REVISION], check=True)
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            logger.warning(f"Failed to stamp via subprocess, trying internal: {e}")
            await asyncio.to_thread(command.stamp, alembic_cfg, BASELINE_REVISION)

    logger.info("Running migrations to reach latest 'head'...")
    try:
        subprocess.run([sys.executable, "-m", "alembic", "upgrade", "head"], check=True)
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        logger.warning(f"Failed to upgrade via subprocess, trying internal: {e}")
        await asyncio.to_thread(command.upgrade, alembic_cfg, "head")

    await engine.dispose()
    logger.info("Database initialization complete!")


if __name__ == "__main__":
    asyncio.run(initialize_db())
