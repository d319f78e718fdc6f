from .connection import Connection, DatabaseConnection, DatabaseMetadata
from .dataset import DataSet, Table, TableMetadata
from .exceptions import BulkLoadError, ConfigurationError, MissingColumnError, OperationError
from .load import bulk_insert
from .operation import BulkInsert, IteratorDirection, TableLoad, primary_key_guard
from .planner import DEFAULT_CHUNK_SIZE, Chunk, next_chunk, plan_chunks
from .statement import build_arguments, build_insert_statement, placeholder

__all__ = [
    'BulkInsert',
    'BulkLoadError',
    'Chunk',
    'ConfigurationError',
    'Connection',
    'DEFAULT_CHUNK_SIZE',
    'DataSet',
    'DatabaseConnection',
    'DatabaseMetadata',
    'IteratorDirection',
    'MissingColumnError',
    'OperationError',
    'Table',
    'TableLoad',
    'TableMetadata',
    'build_arguments',
    'build_insert_statement',
    'bulk_insert',
    'next_chunk',
    'placeholder',
    'plan_chunks',
    'primary_key_guard',
]
