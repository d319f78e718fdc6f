from __future__ import annotations

import enum
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from .connection import Connection
from .dataset import DataSet, ITable, TableMetadata
from .exceptions import ConfigurationError, OperationError
from .planner import DEFAULT_CHUNK_SIZE, check_chunk_size, plan_chunks
from .statement import build_arguments, build_insert_statement

logger = logging.getLogger(__name__)


class IteratorDirection(enum.Enum):
    FORWARD = 'forward'
    REVERSE = 'reverse'


@dataclass(frozen=True)
class TableLoad:
    table_name: str
    row_count: int
    statement_count: int
    primary_keys_disabled: bool


@contextmanager
def primary_key_guard(connection: Connection, table_metadata: TableMetadata) -> Iterator[bool]:
    """Relax primary key enforcement for the duration of the block.

    Yields whether keys were disabled. Tables without primary keys cost no round-trips.
    Keys are re-enabled on every exit, including when the block raises.
    """
    if not table_metadata.primary_keys:
        yield False
        return
    table_name = table_metadata.table_name
    connection.disable_primary_keys(table_name)
    logger.debug('disabled primary keys on %s', table_name)
    try:
        yield True
    finally:
        connection.enable_primary_keys(table_name)
        logger.debug('re-enabled primary keys on %s', table_name)


class BulkInsert:
    """Insert every row of a dataset using multi-row INSERT statements.

    Each table is written in chunks of at most ``max_chunk_size`` rows, one statement per
    chunk. Statements are built from the destination table's columns as introspected from
    the database, not from the source table.

    Parameters:
        max_chunk_size : int, default 100
            Row ceiling per generated statement.
        direction : IteratorDirection, default FORWARD
            Order in which the dataset's tables are loaded.
    """

    operation_name = 'BULKINSERT'

    def __init__(
            self,
            max_chunk_size: int = DEFAULT_CHUNK_SIZE,
            direction: IteratorDirection = IteratorDirection.FORWARD,
    ):
        check_chunk_size(max_chunk_size)
        self.max_chunk_size = max_chunk_size
        self.direction = IteratorDirection(direction)

    def _tables(self, dataset: DataSet) -> Iterable[ITable]:
        if self.direction is IteratorDirection.REVERSE:
            return dataset.reverse_iterator()
        return iter(dataset)

    def execute(self, connection: Connection, dataset: DataSet) -> list[TableLoad]:
        """Load ``dataset`` through ``connection``.

        Stops at the first failing chunk; rows already sent are left for the caller's
        transaction to commit or roll back.
        """
        database_metadata = connection.create_metadata()
        loads: list[TableLoad] = []
        for table in self._tables(dataset):
            row_count = table.row_count
            if row_count == 0:
                logger.debug('skipping empty table %s', table.metadata.table_name)
                continue
            destination = database_metadata.get_table_metadata(table.metadata.table_name)
            with primary_key_guard(connection, destination) as disabled:
                statement_count = self._load_table(connection, destination, table)
            loads.append(TableLoad(destination.table_name, row_count, statement_count, disabled))
            logger.info('%s loaded %d rows into %s with %d statements',
                        self.operation_name, row_count, destination.table_name, statement_count)
        return loads

    def _load_table(self, connection: Connection, destination: TableMetadata, table: ITable) -> int:
        statement_count = 0
        for chunk in plan_chunks(table.row_count, self.max_chunk_size):
            query = build_insert_statement(
                destination.table_name,
                destination.columns,
                chunk.size,
                quote=connection.quote_identifier,
                quote_table=connection.quote_schema_object,
                paramstyle=connection.paramstyle,
            )
            if query is None:
                raise ConfigurationError(
                    self.operation_name, table, 'Rows requested for insert, but no columns provided!'
                )
            args: list[Any] = []
            try:
                build_arguments(destination.columns, table, chunk, into=args)
                connection.execute(query, args)
            except Exception as exc:
                logger.error('%s failed on %s at rows %d-%d',
                             self.operation_name, destination.table_name, chunk.start, chunk.stop - 1)
                raise OperationError(self.operation_name, query, args, table, str(exc)) from exc
            statement_count += 1
            logger.debug('inserted rows %d-%d into %s', chunk.start, chunk.stop - 1, destination.table_name)
        return statement_count
