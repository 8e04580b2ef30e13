# backend/app/models/observation.py
from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.sql import func

from backend.app.db.session import Base


class Observation(Base):
    __tablename__ = "observations" # Append-only weather history

    id = Column(Integer, primary_key=True, index=True)
    # Plain reference, no foreign key: history is kept after a site is deleted
    site_id = Column(String(32), nullable=False, index=True)

    precip_24hr_in = Column(Float, nullable=False)
    temp_f = Column(Float, nullable=True)
    humidity = Column(Float, nullable=True)
    dew_point_f = Column(Float, nullable=True)
    wind_speed_mph = Column(Float, nullable=True)
    wind_dir = Column(Float, nullable=True)

    # Capture timestamp assigned by the database server
    captured_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return (
            f"<Observation(id={self.id}, site_id='{self.site_id}', "
            f"precip={self.precip_24hr_in}in, time={self.captured_at})>"
        )
