"""
Shared fixtures: an in-memory SQLite database and a TestClient wired to it.
"""

from collections.abc import Iterator
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from health_tracker import models
from health_tracker.database import Base, get_db
from health_tracker.main import app


@pytest.fixture
def engine():
    """A fresh in-memory database per test; StaticPool keeps a single connection."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory) -> Iterator[TestClient]:
    """TestClient whose requests use the in-memory database."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    # Not used as a context manager, so startup (tables, scheduler) does not run
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_patient(db_session: Session):
    """Factory that inserts a patient directly into the database."""

    def _make(first_name="Jane", last_name="Doe", date_of_birth=date(1980, 1, 1), **kwargs):
        patient = models.Patient(
            first_name=first_name,
            last_name=last_name,
            date_of_birth=date_of_birth,
            **kwargs,
        )
        db_session.add(patient)
        db_session.commit()
        db_session.refresh(patient)
        return patient

    return _make
