# backend/tests/conftest.py
import os

# Point the app at SQLite before any backend module builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from unittest.mock import MagicMock
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.app.db.session import Base
from backend.app.models import site, observation # noqa: F401  registers tables
from backend.app.schemas.site import SiteRead
from backend.app.schemas.weather import WeatherRecord


@pytest.fixture
def engine():
    # One shared in-memory database, usable from worker threads
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def broken_session_factory():
    """Sessions whose every database call fails as if the server were down."""
    error = OperationalError("SELECT 1", {}, Exception("connection refused"))

    def factory():
        session = MagicMock()
        session.query.side_effect = error
        session.get.side_effect = error
        session.commit.side_effect = error
        return session

    return factory


@pytest.fixture
def fargo():
    return SiteRead(id="a", name="Fargo West", state="ND", latitude=46.877, longitude=-96.789)


@pytest.fixture
def mankato():
    return SiteRead(id="b", name="Mankato", state="MN", latitude=44.0, longitude=-93.0)


@pytest.fixture
def sample_record():
    return WeatherRecord(
        precip_24hr_in=0.06,
        temp_f=68.0,
        humidity=81.0,
        dew_point_f=62.1,
        wind_speed_mph=6.2,
        wind_dir=23.0,
    )
