# backend/tests/integration/conftest.py
"""File-backed SQLite for tests that need several connections at once."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from servicebooking.database import Base


@pytest.fixture
def file_sessionmaker(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'concurrency.db'}",
        connect_args={"check_same_thread": False, "timeout": 15},
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
    yield factory
    engine.dispose()
