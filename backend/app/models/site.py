# backend/app/models/site.py
import uuid

from sqlalchemy import Column, String, DateTime, Numeric
from sqlalchemy.sql import func

from backend.app.db.session import Base


def _new_site_id() -> str:
    return uuid.uuid4().hex


class Site(Base):
    __tablename__ = "sites" # One row per monitored location

    id = Column(String(32), primary_key=True, default=_new_site_id) # Opaque ID assigned on insert
    name = Column(String(255), nullable=False)
    state = Column(String(2), nullable=False, index=True) # Uppercase state/region code, e.g. 'ND'
    latitude = Column(Numeric(10, 7, asdecimal=False), nullable=False)
    longitude = Column(Numeric(10, 7, asdecimal=False), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return (
            f"<Site(id='{self.id}', name='{self.name}', state='{self.state}', "
            f"lat={self.latitude}, lon={self.longitude})>"
        )
