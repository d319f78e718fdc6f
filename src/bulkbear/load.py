from __future__ import annotations

from typing import Mapping

import polars as pl
import sqlalchemy as sa
from sqlalchemy import Engine

from .connection import DatabaseConnection
from .dataset import DataSet
from .operation import BulkInsert, IteratorDirection, TableLoad
from .planner import DEFAULT_CHUNK_SIZE


def bulk_insert(
        bind: Engine | sa.Connection,
        dataset: DataSet | Mapping[str, pl.DataFrame],
        *,
        max_chunk_size: int = DEFAULT_CHUNK_SIZE,
        reverse: bool = False,
        schema: str | None = None,
) -> list[TableLoad]:
    """Insert every table of ``dataset`` into the database behind ``bind``.

    Parameters:
        bind : sqlalchemy.Engine | sqlalchemy.Connection
            With an Engine the load runs in its own transaction, committed on success and
            rolled back on error. A Connection is used as-is and left uncommitted.
        dataset : DataSet | Mapping[str, polars.DataFrame]
            Tables to load; a mapping is read as table name -> rows.
        max_chunk_size : int, default 100
            Row ceiling per INSERT statement.
        reverse : bool, default False
            Load tables in reverse dataset order.
        schema : str | None
            Optional schema of the destination tables.
    """
    if not isinstance(dataset, DataSet):
        dataset = DataSet.from_frames(dataset)
    direction = IteratorDirection.REVERSE if reverse else IteratorDirection.FORWARD
    operation = BulkInsert(max_chunk_size=max_chunk_size, direction=direction)

    if isinstance(bind, sa.Connection):
        return operation.execute(DatabaseConnection(bind, schema=schema), dataset)
    if isinstance(bind, Engine):
        with bind.begin() as conn:
            return operation.execute(DatabaseConnection(conn, schema=schema), dataset)
    raise TypeError('bind must be a sqlalchemy Engine or Connection')
