import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pricedesk.db import init_db


def _memory_engine():
    # one shared connection so every session sees the same in-memory DB
    return create_engine(
        "sqlite://",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def engine():
    eng = _memory_engine()
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def broken_session_factory():
    # no tables at all: every query fails inside the driver
    eng = _memory_engine()
    yield sessionmaker(bind=eng, future=True)
    eng.dispose()
