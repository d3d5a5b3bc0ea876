# tests/conftest.py
"""Shared fixtures: a throwaway SQLite database per test."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("DISPATCH_SIMULATION_ENABLED", "false")
os.environ.setdefault("ONBOARDING_SIMULATION_ENABLED", "false")
os.environ.setdefault("COMPLIANCE_CHECK_ENABLED", "false")
os.environ.setdefault("NOTIFICATION_READ_DELAY_SECONDS", "0")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.database import Base
import app.models  # noqa: F401  registers every table on Base.metadata


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'fleet.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
