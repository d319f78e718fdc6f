from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Protocol

import polars as pl

from .exceptions import MissingColumnError


@dataclass(frozen=True)
class TableMetadata:
    """Name, ordered columns and primary keys of a table.

    Describes both a source table in a DataSet and the destination table as introspected
    from the database.
    """
    table_name: str
    columns: tuple[str, ...] = ()
    primary_keys: tuple[str, ...] = ()

    @classmethod
    def of(cls, table_name: str, columns: Iterable[str], primary_keys: Iterable[str] = ()) -> 'TableMetadata':
        return cls(table_name=table_name, columns=tuple(columns), primary_keys=tuple(primary_keys))


class ITable(Protocol):
    @property
    def metadata(self) -> TableMetadata: ...

    @property
    def row_count(self) -> int: ...

    def get_value(self, row: int, column: str) -> Any: ...


class Table:
    """A named, read-only table backed by a polars DataFrame.

    Parameters:
        table_name : str
            Name of the destination table the rows belong to.
        frame : polars.DataFrame
            The rows. Column order defines the table's column metadata.
    """

    def __init__(self, table_name: str, frame: pl.DataFrame):
        if not isinstance(frame, pl.DataFrame):
            raise TypeError(f'frame must be a polars DataFrame, got {type(frame).__name__}')
        self._frame = frame
        self._metadata = TableMetadata.of(table_name, frame.columns)

    @property
    def metadata(self) -> TableMetadata:
        return self._metadata

    @property
    def table_name(self) -> str:
        return self._metadata.table_name

    @property
    def frame(self) -> pl.DataFrame:
        return self._frame

    @property
    def row_count(self) -> int:
        return self._frame.height

    def get_value(self, row: int, column: str) -> Any:
        """Return the value at ``row`` for ``column``; nulls come back as ``None``."""
        if column not in self._metadata.columns:
            raise MissingColumnError(self.table_name, column, self._metadata.columns)
        if not 0 <= row < self._frame.height:
            raise IndexError(f'row {row} out of range for table {self.table_name!r} with {self._frame.height} rows')
        return self._frame.item(row, column)

    def __repr__(self) -> str:
        return f'Table({self.table_name!r}, rows={self.row_count}, columns={list(self._metadata.columns)})'


class DataSet:
    """Ordered collection of tables.

    Iterating yields tables in insertion order; ``reverse_iterator()`` walks them backwards,
    which suits deleting or loading children before parents.
    """

    def __init__(self, tables: Iterable[ITable] = ()):
        self._tables: list[ITable] = []
        seen: set[str] = set()
        for table in tables:
            name = table.metadata.table_name
            if name in seen:
                raise ValueError(f'duplicate table {name!r} in dataset')
            seen.add(name)
            self._tables.append(table)

    @classmethod
    def from_frames(cls, frames: Mapping[str, pl.DataFrame]) -> 'DataSet':
        return cls(Table(name, frame) for name, frame in frames.items())

    @property
    def table_names(self) -> list[str]:
        return [t.metadata.table_name for t in self._tables]

    def get_table(self, table_name: str) -> ITable:
        for table in self._tables:
            if table.metadata.table_name == table_name:
                return table
        raise KeyError(f'Table {table_name!r} not found. Available: {sorted(self.table_names)}')

    def __iter__(self) -> Iterator[ITable]:
        return iter(self._tables)

    def reverse_iterator(self) -> Iterator[ITable]:
        return reversed(self._tables)

    def __reversed__(self) -> Iterator[ITable]:
        return self.reverse_iterator()

    def __len__(self) -> int:
        return len(self._tables)
