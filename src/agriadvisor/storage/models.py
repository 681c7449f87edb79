"""SQLAlchemy ORM models for farm-profile history."""

from sqlalchemy import Column, DateTime, Integer, Text, func
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class UserInput(Base):
    """One submitted farm profile. Rows are only ever inserted."""

    __tablename__ = "user_inputs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text)
    location = Column(Text)
    land_size = Column(Text)
    land_type = Column(Text)
    land_health = Column(Text)
    season = Column(Text)
    water_facility = Column(Text)
    duration = Column(Text)
    language = Column(Text, server_default="en")
    created_at = Column(DateTime, server_default=func.current_timestamp())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "location": self.location,
            "land_size": self.land_size,
            "land_type": self.land_type,
            "land_health": self.land_health,
            "season": self.season,
            "water_facility": self.water_facility,
            "duration": self.duration,
            "language": self.language,
            "created_at": self.created_at.isoformat(sep=" ") if self.created_at else None,
        }
