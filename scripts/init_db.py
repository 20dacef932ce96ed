#!/usr/bin/env python3
"""
Database initialization script for the coffee POS backend.

This script handles:
- Database creation (for PostgreSQL)
- Creating the catalog tables
- Optional sample catalog seeding

Usage:
    python scripts/init_db.py [--seed-data] [--force-recreate] [--check-only]
"""

import sys
import argparse
import logging
from pathlib import Path
from urllib.parse import urlparse

# add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError

from coffee_pos.core.config import settings
from coffee_pos.db.init_db import create_tables, drop_tables, seed_catalog
from coffee_pos.db.session import engine, session_scope

# configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_database_if_not_exists():
    """create db if it doesn't exist (PostgreSQL only)."""
    database_url = settings.DATABASE_URL

    if not database_url.startswith("postgresql"):
        logger.info("Database URL is not PostgreSQL, skipping database creation")
        return True

    try:
        parsed = urlparse(database_url)
        database_name = parsed.path[1:]  # Remove leading '/'

        # connect to the maintenance db to create ours
        postgres_engine = create_engine(f"{parsed.scheme}://{parsed.netloc}/postgres", isolation_level="AUTOCOMMIT")
        with postgres_engine.connect() as conn:
            result = conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = :db_name"),
                {"db_name": database_name}
            )
            if result.fetchone() is None:
                logger.info(f"Creating database: {database_name}")
                conn.execute(text(f'CREATE DATABASE "{database_name}"'))
            else:
                logger.info(f"Database {database_name} already exists")

        postgres_engine.dispose()
        return True

    except SQLAlchemyError as e:
        logger.error(f"Error creating database: {e}")
        return False


def check_database_connection():
    """check if db connection is working."""
    try:
        logger.info("Testing database connection...")
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        logger.info("Database connection successful")
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database connection failed: {e}")
        return False


def main():
    parser = argparse.ArgumentParser(description="Initialize coffee POS database")
    parser.add_argument(
        "--seed-data",
        action="store_true",
        help="Seed the sample catalog (products, options, promotions)"
    )
    parser.add_argument(
        "--force-recreate",
        action="store_true",
        help="Drop and recreate all catalog tables (DESTRUCTIVE)"
    )
    parser.add_argument(
        "--check-only",
        action="store_true",
        help="Only check database connection, don't create tables"
    )

    args = parser.parse_args()

    logger.info("Starting database initialization...")

    if args.force_recreate:
        logger.warning("Force recreate requested - this will DELETE existing catalog data!")
        confirm = input("Are you sure? Type 'yes' to continue: ")
        if confirm.lower() != 'yes':
            logger.info("Operation cancelled")
            return False

    if not args.check_only and not create_database_if_not_exists():
        logger.error("Failed to create database")
        return False

    if not check_database_connection():
        logger.error("Database connection failed")
        return False

    if args.check_only:
        logger.info("Database check completed successfully")
        return True

    if args.force_recreate:
        drop_tables(engine)
    create_tables(engine)
    logger.info("Catalog tables ready")

    if args.seed_data:
        with session_scope() as db:
            seed_catalog(db)

    logger.info("Database initialization completed successfully!")
    return True


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
