#!/usr/bin/env python3
"""
Initialize the closure tree database.

Creates the node and closure tables of every managed tree type.
"""
import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import configure_logging
from data.database import DatabaseManager
from data.db_models import Base

logger = logging.getLogger('init_db')


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Initialize closure tree database'
    )
    parser.add_argument(
        '--database-url',
        type=str,
        default=None,
        help='Database URL (default: DATABASE_URL setting)'
    )
    parser.add_argument(
        '--drop-existing',
        action='store_true',
        help='Drop existing tables before creating new ones (WARNING: destroys data!)'
    )
    parser.add_argument(
        '--yes',
        action='store_true',
        help='Do not ask for confirmation before dropping tables'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        default=None,
        help='Logging level (default: LOG_LEVEL setting)'
    )

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    db_manager = DatabaseManager(args.database_url)
    logger.info("Database URL: %s", db_manager.database_url)

    if args.drop_existing:
        confirm = 'yes' if args.yes else input(
            "Drop existing tables? This will DELETE ALL DATA! (yes/no): "
        )
        if confirm.lower() != 'yes':
            logger.info("Aborted.")
            return 1
        db_manager.drop_tables()

    db_manager.create_tables()
    logger.info("Tables created: %s", ', '.join(sorted(Base.metadata.tables)))
    return 0


if __name__ == '__main__':
    sys.exit(main())
