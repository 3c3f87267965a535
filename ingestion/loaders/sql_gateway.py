"""
SQLAlchemy implementation of the backend gateway
"""

from typing import Mapping, Optional
from sqlalchemy import insert
from sqlalchemy.engine import Connection, Engine, RootTransaction
from sqlalchemy.exc import SQLAlchemyError
from core.config import SpoolConfig
from core.database import create_backend_engine, masked_url
from core.exceptions import BackendUnavailableError, InsertError, TransactionError
from ingestion.base import BackendGateway
from models.accounting import build_accounting_table
import logging

logger = logging.getLogger(__name__)


class SQLBackendGateway(BackendGateway):
    """
    Insert accounting rows through one SQLAlchemy connection.

    Ensures:
    - Values are always bound parameters
    - Every insert names the full, sorted column set
    - At most one transaction is open at a time
    """

    def __init__(self, config: SpoolConfig, engine: Optional[Engine] = None):
        self.config = config
        self.table = build_accounting_table(config.db_table, config.columns)
        self._engine = engine
        self._owns_engine = engine is None
        self._connection: Optional[Connection] = None
        self._transaction: Optional[RootTransaction] = None
        self._insert_stmt = insert(self.table)

    @property
    def connected(self) -> bool:
        return self._connection is not None

    @property
    def in_transaction(self) -> bool:
        return self._transaction is not None

    def connect(self) -> None:
        if self._connection is not None:
            return

        try:
            if self._engine is None:
                self._engine = create_backend_engine(self.config)
            self._connection = self._engine.connect()
        except (SQLAlchemyError, ImportError) as e:
            # Also an unparseable URL or a missing DBAPI driver
            raise BackendUnavailableError(
                "Cannot connect to backend",
                context={"database_url": masked_url(self.config.database_url)},
                original_exception=e
            )

        logger.info(f"Connected to {masked_url(self.config.database_url)}")

    def begin_transaction(self) -> None:
        connection = self._require_connection()
        if self._transaction is not None:
            raise TransactionError(
                "A transaction is already open",
                context={"operation": "BEGIN"}
            )
        try:
            self._transaction = connection.begin()
        except SQLAlchemyError as e:
            raise TransactionError(
                "Failed to begin transaction",
                context={"operation": "BEGIN"},
                original_exception=e
            )

    def insert(self, row: Mapping[str, str]) -> int:
        connection = self._require_connection()
        if self._transaction is None:
            raise TransactionError(
                "Insert outside of a transaction",
                context={"operation": "INSERT", "table_name": self.config.db_table}
            )
        try:
            result = connection.execute(self._insert_stmt, dict(row))
        except SQLAlchemyError as e:
            raise InsertError(
                "Insert failed",
                context={"operation": "INSERT", "table_name": self.config.db_table},
                original_exception=e
            )
        return result.rowcount

    def commit(self) -> None:
        transaction = self._require_transaction("COMMIT")
        try:
            transaction.commit()
        except SQLAlchemyError as e:
            # Left in place so the caller's rollback() still reaches it
            raise TransactionError(
                "Commit failed",
                context={"operation": "COMMIT"},
                original_exception=e
            )
        self._transaction = None

    def rollback(self) -> None:
        if self._transaction is None:
            return
        transaction, self._transaction = self._transaction, None
        try:
            transaction.rollback()
        except SQLAlchemyError as e:
            raise TransactionError(
                "Rollback failed",
                context={"operation": "ROLLBACK"},
                original_exception=e
            )

    def disconnect(self) -> None:
        if self._connection is not None:
            try:
                if self._transaction is not None:
                    logger.warning("Disconnecting with an open transaction, rolling back")
                    self._transaction.rollback()
            except SQLAlchemyError as e:
                logger.error(f"Rollback on disconnect failed: {e}")
            finally:
                self._transaction = None
                self._connection.close()
                self._connection = None
                logger.info("Disconnected from backend")

        if self._owns_engine and self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def _require_connection(self) -> Connection:
        if self._connection is None:
            raise TransactionError(
                "Gateway is not connected",
                context={"operation": "CONNECT"}
            )
        return self._connection

    def _require_transaction(self, operation: str) -> RootTransaction:
        if self._transaction is None:
            raise TransactionError(
                "No transaction is open",
                context={"operation": operation}
            )
        return self._transaction
