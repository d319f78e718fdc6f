from __future__ import annotations

from typing import Any, Sequence


class BulkLoadError(Exception):
    """Base class for errors raised while loading a dataset."""


def _table_name(table: Any) -> str:
    metadata = getattr(table, 'metadata', None)
    if metadata is not None:
        return metadata.table_name
    return str(table)


class ConfigurationError(BulkLoadError):
    """The destination table cannot receive the rows requested for it."""

    def __init__(self, operation: str, table: Any, message: str):
        self.operation = operation
        self.table = table
        self.message = message
        super().__init__(f'{operation} operation failed on table {_table_name(table)!r}: {message}')


class OperationError(BulkLoadError):
    """A generated statement failed.

    Carries the exact sql text and flattened argument list so the failing batch can be
    replayed by hand.
    """

    def __init__(self, operation: str, query: str, args: Sequence[Any], table: Any, message: str):
        self.operation = operation
        self.query = query
        self.arguments = list(args)
        self.table = table
        self.message = message
        super().__init__(str(self))

    @property
    def table_name(self) -> str:
        return _table_name(self.table)

    def __str__(self) -> str:
        return (
            f'{self.operation} operation failed on query: {self.query}'
            f' using args: {self.arguments!r} [{self.message}]'
        )


class MissingColumnError(BulkLoadError, KeyError):
    def __init__(self, table_name: str, column: str, available: Sequence[str] = ()):
        self.table_name = table_name
        self.column = column
        self.available = list(available)
        super().__init__(f'Column {column!r} not found in table {table_name!r}. Available: {sorted(self.available)}')

    def __str__(self) -> str:
        # KeyError would repr() the message
        return self.args[0]
