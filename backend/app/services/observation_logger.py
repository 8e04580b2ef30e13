# backend/app/services/observation_logger.py
import logging

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from backend.app.db.session import SessionLocal
from backend.app.core.exceptions import ObservationLogError
from backend.app.models.observation import Observation
from backend.app.schemas.weather import WeatherRecord

logger = logging.getLogger(__name__)


def write_observation(db: Session, site_id: str, record: WeatherRecord) -> Observation:
    """Inserts one Observation row. The capture timestamp is set by the database."""
    try:
        observation = Observation(site_id=site_id, **record.model_dump())
        db.add(observation)
        db.commit()
        return observation
    except SQLAlchemyError as e:
        db.rollback()
        raise ObservationLogError(site_id, str(e)) from e


def log_observation(site_id: str, record: WeatherRecord, session_factory=SessionLocal) -> bool:
    """
    Best-effort append of a fetched record to the observation history.
    Never raises; returns False when the write did not happen.
    """
    db: Session | None = None
    try:
        db = session_factory()
        write_observation(db, site_id, record)
        logger.debug("Logged observation for site %s", site_id)
        return True
    except ObservationLogError as e:
        logger.error("Failed to log observation for %s: %s", site_id, e)
    except Exception:
        logger.exception("Unexpected error while logging observation for %s", site_id)
    finally:
        if db is not None:
            db.close()
    return False
