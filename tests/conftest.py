import os
import pytest
import sqlalchemy as sa


@pytest.fixture(scope='function')
def engine() -> sa.engine.Engine:
    return sa.engine.create_engine(DATABASE_URL)


@pytest.fixture(scope='function')
def connection(engine: sa.engine.Engine) -> sa.engine.Connection:
    with engine.connect() as conn:
        yield conn


# URL of the database to connect to.
# Any database with row value comparisons will do: sqlite 3.15+, postgres
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite://')
