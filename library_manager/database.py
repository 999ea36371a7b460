"""Thin wrapper around one SQLAlchemy session.

Every statement issued by the builders goes through a ``DatabaseConnection``.
The connection is handed to services and builders explicitly; there is no
process-wide accessor.
"""
import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from library_manager.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class DatabaseConnection:
    def __init__(self, session):
        self._session = session
        self.last_insert_id = None

    @staticmethod
    def _prepare(statement):
        if statement is None or not statement.strip():
            raise ValueError("Statement cannot be empty")
        return text(statement)

    def execute_query(self, statement, params=None):
        """Run a SELECT and return its rows as a list of column -> value dicts."""
        query = self._prepare(statement)
        try:
            result = self._session.execute(query, params or {})
            return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            logger.exception("Failed to execute query: %s", statement)
            raise DatabaseError(f"Failed to execute query: {e}") from e

    def execute_update(self, statement, params=None):
        """Run one INSERT/UPDATE/DELETE in its own transaction.

        Returns the number of rows affected. On failure the transaction is
        rolled back and ``DatabaseError`` is raised.
        """
        query = self._prepare(statement)
        try:
            result = self._session.execute(query, params or {})
            rows_affected = result.rowcount
            last_insert_id = result.lastrowid
            self._session.commit()
        except SQLAlchemyError as e:
            logger.exception("Failed to execute update: %s", statement)
            try:
                self._session.rollback()
            except SQLAlchemyError as ex:
                logger.exception("Failed to rollback transaction")
                raise DatabaseError(f"Failed to rollback transaction: {ex}") from ex
            raise DatabaseError(f"Failed to execute update: {e}") from e

        self.last_insert_id = last_insert_id
        return rows_affected

    def close(self):
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
