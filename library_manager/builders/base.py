"""Shared machinery for the fluent query builders.

A builder accumulates ``column <op> :column`` fragments together with their
bound values, then a terminal call (``insert``/``read``/``update``/``delete``)
joins them into one parameterized statement and runs it through a
``DatabaseConnection``.
"""
import datetime
import logging
import re

from library_manager.exceptions import BuilderStateError

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r'^\d+$')


class QueryBuilder:
    table = None

    def __init__(self, connection):
        self._connection = connection
        self._statements = []
        self._columns = []
        self._values = {}

    def _set_field(self, column, value, operator='='):
        self._statements.append(f"{column} {operator} :{column}")
        self._columns.append(column)
        self._values[column] = value
        return self

    def _ensure_unset(self, column, label):
        if column in self._values:
            raise BuilderStateError(f"{label} has already been set")

    def _require_set(self, column, label, action):
        if column not in self._values:
            raise BuilderStateError(f"{label} must be set before {action}")

    @property
    def values(self):
        return dict(self._values)

    def compile(self):
        """Return the ``(sql, params)`` pair this builder would execute."""
        raise NotImplementedError

    def _log(self, verb, sql):
        logger.debug("%s on %s: %s", verb, self.table, sql)


# --- validation helpers shared by every entity ---

def require_text(value, label, max_length=None):
    if value is None or not str(value).strip():
        raise ValueError(f"{label} cannot be null or empty")
    if max_length is not None and len(value) > max_length:
        raise ValueError(f"{label} cannot exceed {max_length} characters")
    return value


def require_positive_id(value, label):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{label} must be an integer")
    if value <= 0:
        raise ValueError(f"{label} must be positive")
    return value


def require_non_negative(value, label):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{label} must be an integer")
    if value < 0:
        raise ValueError(f"{label} cannot be negative")
    return value


def require_date(value, label):
    if value is None:
        raise ValueError(f"{label} must be provided")
    if isinstance(value, datetime.datetime):
        value = value.date()
    if not isinstance(value, datetime.date):
        raise ValueError(f"{label} must be a date")
    # Bound as ISO text so every driver stores the same representation
    return value.isoformat()


def require_contact_num(value, label='Contact number'):
    require_text(value, label)
    if len(value) != 11:
        raise ValueError(f"{label} must be exactly 11 digits")
    if not _DIGITS.match(value):
        raise ValueError(f"{label} must contain only digits")
    return value


# --- statement shapes shared by every entity ---

class InsertBuilder(QueryBuilder):
    def __init__(self, connection):
        super().__init__(connection)
        self.inserted_id = None

    def compile(self):
        columns = ', '.join(self._columns)
        placeholders = ', '.join(f":{c}" for c in self._columns)
        sql = f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})"
        return sql, dict(self._values)

    def _execute_insert(self):
        sql, params = self.compile()
        self._log('Insert', sql)
        rows_affected = self._connection.execute_update(sql, params)
        self.inserted_id = self._connection.last_insert_id if rows_affected > 0 else None
        return rows_affected > 0


class ReadBuilder(QueryBuilder):
    def compile(self):
        sql = f"SELECT * FROM {self.table}"
        if self._statements:
            sql += " WHERE " + " AND ".join(self._statements)
        return sql, dict(self._values)

    def read(self):
        sql, params = self.compile()
        self._log('Read', sql)
        results = self._connection.execute_query(sql, params)
        logger.debug("Read on %s returned %d row(s)", self.table, len(results))
        return results


class UpdateBuilder(QueryBuilder):
    key_label = 'ID'

    def __init__(self, connection):
        super().__init__(connection)
        self._record_id = None

    def _set_record_id(self, record_id):
        require_positive_id(record_id, self.key_label)
        if self._record_id is not None:
            raise BuilderStateError(f"{self.key_label} has already been set")
        self._record_id = record_id
        return self

    def compile(self):
        if self._record_id is None:
            raise BuilderStateError(f"{self.key_label} must be set for update")
        if not self._statements:
            raise BuilderStateError("At least one field must be set for update")
        sql = f"UPDATE {self.table} SET " + ", ".join(self._statements) + " WHERE id = :id"
        params = dict(self._values)
        params['id'] = self._record_id
        return sql, params

    def update(self):
        sql, params = self.compile()
        self._log('Update', sql)
        return self._connection.execute_update(sql, params) > 0


class DeleteBuilder(QueryBuilder):
    def compile(self):
        if not self._statements:
            raise BuilderStateError("At least one field must be set for deletion")
        sql = f"DELETE FROM {self.table} WHERE " + " AND ".join(self._statements)
        return sql, dict(self._values)

    def delete(self):
        sql, params = self.compile()
        self._log('Delete', sql)
        return self._connection.execute_update(sql, params) > 0
