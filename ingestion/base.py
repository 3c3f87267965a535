"""
Abstract backend gateway used by the file transaction coordinator
"""

from abc import ABC, abstractmethod
from typing import Mapping


class BackendGateway(ABC):
    """
    Capability boundary between the coordinator and the relational backend.

    Responsibilities:
    - Own the single connection for the run
    - Scope one transaction at a time
    - Insert one fully-populated row per call, with bound parameters

    Implementations wrap driver failures in core.exceptions: connect()
    raises BackendUnavailableError, insert() raises InsertError, and
    begin/commit/rollback raise TransactionError.
    """

    @abstractmethod
    def connect(self) -> None:
        """Open the run's connection."""
        pass

    @abstractmethod
    def begin_transaction(self) -> None:
        pass

    @abstractmethod
    def insert(self, row: Mapping[str, str]) -> int:
        """
        Insert one row inside the current transaction.

        Returns:
            Number of rows written
        """
        pass

    @abstractmethod
    def commit(self) -> None:
        pass

    @abstractmethod
    def rollback(self) -> None:
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Close the run's connection. Safe to call more than once."""
        pass

    def __enter__(self) -> "BackendGateway":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()
