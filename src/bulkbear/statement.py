from __future__ import annotations

from typing import Any, Callable, Sequence

from .dataset import ITable, Table
from .planner import Chunk


def placeholder(paramstyle: str, position: int) -> str:
    """Positional bind marker for a DB-API ``paramstyle``.

    ``position`` is zero-based; numeric styles render it one-based (``:1``, ``:2``, ...).
    ``named`` drivers such as oracledb also accept numeric markers, so they get the same.
    """
    if paramstyle == 'qmark':
        return '?'
    if paramstyle in ('format', 'pyformat'):
        return '%s'
    if paramstyle in ('numeric', 'named'):
        return f':{position + 1}'
    raise ValueError(f'Unsupported paramstyle for positional binds: {paramstyle!r}')


def build_insert_statement(
        table_name: str,
        columns: Sequence[str],
        row_count: int,
        *,
        quote: Callable[[str], str],
        quote_table: Callable[[str], str] | None = None,
        paramstyle: str = 'qmark',
) -> str | None:
    """Build one INSERT carrying ``row_count`` value groups.

    Parameters:
        table_name : str
            Destination table, quoted with ``quote_table``.
        columns : Sequence[str]
            Destination columns in the order arguments will be supplied.
        row_count : int
            Observed size of the chunk; one ``(...)`` group is emitted per row.
        quote : callable
            Quotes a single identifier of the target dialect; applied to every column.
        quote_table : callable | None
            Quotes the (possibly schema-qualified) table name. Defaults to ``quote``.
        paramstyle : str
            DB-API paramstyle of the driver.

    Returns None when there are no columns to insert into.
    """
    if row_count < 1:
        raise ValueError('row_count must be at least 1')
    if not columns:
        return None
    if quote_table is None:
        quote_table = quote

    width = len(columns)
    col_list = ', '.join(quote(c) for c in columns)
    groups = []
    for row in range(row_count):
        markers = ', '.join(placeholder(paramstyle, row * width + i) for i in range(width))
        groups.append(f'({markers})')
    return f'INSERT INTO {quote_table(table_name)} ({col_list}) VALUES {", ".join(groups)}'


def build_arguments(
        columns: Sequence[str],
        table: ITable,
        chunk: Chunk,
        *,
        into: list[Any] | None = None,
) -> list[Any]:
    """Flatten the chunk's cells row by row, in destination column order.

    Values are appended to ``into`` when given, so a caller still holds the values
    gathered before a lookup failed.
    """
    args: list[Any] = [] if into is None else into
    if isinstance(table, Table) and all(c in table.metadata.columns for c in columns):
        # stream the slice out of polars instead of one lookup per cell
        for row in table.frame.slice(chunk.start, chunk.size).select(list(columns)).iter_rows():
            args.extend(row)
        return args
    for row in chunk.rows:
        for column in columns:
            args.append(table.get_value(row, column))
    return args
