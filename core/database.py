"""
Database engine management with SQLAlchemy
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.pool import NullPool
from core.config import SpoolConfig
import logging

logger = logging.getLogger(__name__)


def create_backend_engine(config: SpoolConfig) -> Engine:
    """
    Create the engine for one run.

    The run uses a single connection, so no pool is kept around it.
    """
    return create_engine(
        config.database_url,
        echo=config.echo_sql,
        poolclass=NullPool,
        future=True
    )


def masked_url(database_url: str) -> str:
    """Render a database URL with the password hidden, for logs."""
    try:
        return make_url(database_url).render_as_string(hide_password=True)
    except ArgumentError:
        return "<unparseable database url>"
