import polars as pl
import pytest
import sqlalchemy as sa

from bulkbear import TableMetadata


class RecordingConnection:
    """In-memory stand-in for a database connection that records every call."""

    paramstyle = 'qmark'

    def __init__(self, tables, fail_on_statement=None):
        self._tables = {t.table_name: t for t in tables}
        self.fail_on_statement = fail_on_statement
        self.calls = []
        self.statements = []

    def quote_identifier(self, name):
        return f'"{name}"'

    def quote_schema_object(self, name):
        return '.'.join(self.quote_identifier(p) for p in name.split('.'))

    def create_metadata(self):
        self.calls.append(('create_metadata', None))
        return self

    def get_table_metadata(self, table_name):
        return self._tables[table_name]

    def disable_primary_keys(self, table_name):
        self.calls.append(('disable', table_name))

    def enable_primary_keys(self, table_name):
        self.calls.append(('enable', table_name))

    def execute(self, sql, args):
        self.calls.append(('execute', sql))
        self.statements.append((sql, list(args)))
        if len(self.statements) == self.fail_on_statement:
            raise RuntimeError('duplicate key value violates unique constraint')

    def toggles(self):
        return [c for c in self.calls if c[0] in ('disable', 'enable')]


@pytest.fixture()
def recording_connection():
    return RecordingConnection


@pytest.fixture()
def users_df():
    return pl.DataFrame({
        'id': list(range(1, 251)),
        'name': [f'user{i}' for i in range(1, 251)],
        'age': [20 + i % 50 for i in range(1, 251)],
    })


@pytest.fixture()
def users_meta():
    return TableMetadata.of('users', ['id', 'name', 'age'])


@pytest.fixture()
def accounts_df():
    return pl.DataFrame({
        'id': [1, 2, 3, 4, 5],
        'owner': ['Ahti', 'Kalma', 'Tellervo', 'Ukko', None],
    })


@pytest.fixture()
def accounts_meta():
    return TableMetadata.of('accounts', ['id', 'owner'], primary_keys=['id'])


@pytest.fixture()
def sqlite_engine():
    eng = sa.create_engine('sqlite:///:memory:')
    meta = sa.MetaData()

    sa.Table(
        'users', meta,
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('name', sa.String),
        sa.Column('age', sa.Integer),
    )

    sa.Table(
        'accounts', meta,
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('owner', sa.String),
    )

    sa.Table(
        'events', meta,
        sa.Column('kind', sa.String),
        sa.Column('weight', sa.Float),
    )

    meta.create_all(eng)
    yield eng


@pytest.fixture()
def fetch_all():
    def _fetch(engine, query):
        with engine.connect() as conn:
            return [tuple(r) for r in conn.execute(sa.text(query)).fetchall()]
    return _fetch
