"""
Create the accounting table described by the configured attribute mapping
"""

import logging
import sys

from sqlalchemy import MetaData
from sqlalchemy.exc import SQLAlchemyError

from core.config import settings
from core.database import create_backend_engine, masked_url
from core.exceptions import ConfigurationError
from core.logging import setup_logging
from models.accounting import build_accounting_table

logger = logging.getLogger(__name__)


def init_database(config) -> None:
    logger.info(f"Connecting to {masked_url(config.database_url)}...")
    engine = create_backend_engine(config)

    metadata = MetaData()
    build_accounting_table(config.db_table, config.columns, metadata)

    try:
        with engine.begin() as conn:
            logger.info(f"Creating table {config.db_table}...")
            metadata.create_all(conn)
            logger.info("Table created successfully.")
    finally:
        engine.dispose()


def main() -> int:
    setup_logging()
    try:
        init_database(settings.to_spool_config())
    except (ConfigurationError, SQLAlchemyError) as e:
        logger.error(f"Database initialisation failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
