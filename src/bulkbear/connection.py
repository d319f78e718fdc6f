from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence

import sqlalchemy as sa

from .dataset import TableMetadata

logger = logging.getLogger(__name__)


class Metadata(Protocol):
    def get_table_metadata(self, table_name: str) -> TableMetadata: ...


class Connection(Protocol):
    """What a bulk load needs from a database connection."""

    @property
    def paramstyle(self) -> str: ...

    def quote_identifier(self, name: str) -> str: ...

    def quote_schema_object(self, name: str) -> str: ...

    def create_metadata(self) -> Metadata: ...

    def disable_primary_keys(self, table_name: str) -> None: ...

    def enable_primary_keys(self, table_name: str) -> None: ...

    def execute(self, sql: str, args: Sequence[Any]) -> None: ...


class DatabaseMetadata:
    """Destination table metadata introspected through sqlalchemy, cached per table."""

    def __init__(self, conn: sa.Connection, schema: str | None = None):
        self._inspector = sa.inspect(conn)
        self._schema = schema
        self._tables: dict[str, TableMetadata] = {}

    def get_table_metadata(self, table_name: str) -> TableMetadata:
        if table_name not in self._tables:
            # raises NoSuchTableError for unknown tables
            columns = [c['name'] for c in self._inspector.get_columns(table_name, schema=self._schema)]
            pk = self._inspector.get_pk_constraint(table_name, schema=self._schema) or {}
            self._tables[table_name] = TableMetadata.of(table_name, columns, pk.get('constrained_columns') or ())
        return self._tables[table_name]


def _identity_insert_sql(quoted_table: str, enabled: bool) -> str:
    return f'SET IDENTITY_INSERT {quoted_table} {"ON" if enabled else "OFF"}'


# dialect name -> builder for the statement that relaxes (True) or restores (False) key enforcement
_PRIMARY_KEY_TOGGLES = {
    'mssql': _identity_insert_sql,
}


class DatabaseConnection:
    """Bulk load adapter over a sqlalchemy connection.

    The connection is borrowed: transactions stay with the caller, nothing here commits
    or closes it.

    Parameters:
        conn : sqlalchemy.Connection
            Live connection to the destination database.
        schema : str | None
            Optional schema for introspection and for qualifying table names.
    """

    def __init__(self, conn: sa.Connection, schema: str | None = None):
        if not isinstance(conn, sa.Connection):
            raise TypeError('conn must be a sqlalchemy Connection')
        self._conn = conn
        self._schema = schema
        self._identity_tables: dict[str, bool] = {}

    @property
    def connection(self) -> sa.Connection:
        return self._conn

    @property
    def dialect_name(self) -> str:
        return self._conn.dialect.name

    @property
    def paramstyle(self) -> str:
        return self._conn.dialect.paramstyle

    def quote_identifier(self, name: str) -> str:
        """Quote ``name`` as a single identifier, dots included; used for column names."""
        return self._conn.dialect.identifier_preparer.quote_identifier(name)

    def quote_schema_object(self, name: str) -> str:
        """Quote a table name; each part of a dotted ``schema.table`` is quoted separately."""
        parts = name.split('.')
        if self._schema and len(parts) == 1:
            parts = [self._schema, name]
        return '.'.join(self.quote_identifier(p) for p in parts)

    def create_metadata(self) -> DatabaseMetadata:
        return DatabaseMetadata(self._conn, self._schema)

    def _has_identity_column(self, table_name: str) -> bool:
        if table_name not in self._identity_tables:
            columns = sa.inspect(self._conn).get_columns(table_name, schema=self._schema)
            self._identity_tables[table_name] = any(c.get('identity') is not None for c in columns)
        return self._identity_tables[table_name]

    def _toggle_primary_keys(self, table_name: str, relax: bool) -> None:
        toggle = _PRIMARY_KEY_TOGGLES.get(self.dialect_name)
        if toggle is None:
            logger.debug('primary key toggle is a no-op on %s for %s', self.dialect_name, table_name)
            return
        # IDENTITY_INSERT is rejected for tables without an identity column
        if not self._has_identity_column(table_name):
            logger.debug('%s has no identity column, leaving keys enforced', table_name)
            return
        self._conn.exec_driver_sql(toggle(self.quote_schema_object(table_name), relax))

    def disable_primary_keys(self, table_name: str) -> None:
        self._toggle_primary_keys(table_name, True)

    def enable_primary_keys(self, table_name: str) -> None:
        self._toggle_primary_keys(table_name, False)

    def execute(self, sql: str, args: Sequence[Any]) -> None:
        self._conn.exec_driver_sql(sql, tuple(args))
