from contextlib import contextmanager

import sqlalchemy as sa


# A table with a non-unique sort key (ts) and a unique tie-breaker (id)
metadata = sa.MetaData()

events = sa.Table(
    'events', metadata,
    sa.Column('id', sa.Integer, primary_key=True, autoincrement=False),
    sa.Column('ts', sa.Integer, nullable=False),
    sa.Column('kind', sa.String, nullable=False),
)


# (ts, id) of every row, sorted
EVENT_KEYS = [
    (1, 1),
    (1, 2),
    (2, 3),
    (2, 4),
    (2, 5),
    (3, 6),
    (4, 7),
]


@contextmanager
def created_tables(connection: sa.engine.Connection, metadata: sa.MetaData):
    """ Temporarily create tables, drop them when the context is quit """
    metadata.create_all(connection)
    try:
        yield
    finally:
        metadata.drop_all(connection)


def insert_events(connection: sa.engine.Connection):
    connection.execute(events.insert(), [
        dict(id=id, ts=ts, kind='click' if id % 2 else 'view')
        for ts, id in EVENT_KEYS
    ])
