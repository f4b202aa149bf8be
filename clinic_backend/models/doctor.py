"""Doctor model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Time
from sqlalchemy.orm import relationship

from clinic_backend.database import Base


class Doctor(Base):
    """A doctor and the weekly window in which they can be booked.

    Weekdays use 0 for Sunday through 6 for Saturday. The range is inclusive
    and wraps across the end of the week when ``available_from_weekday`` is
    greater than ``available_to_weekday``.
    """
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    clinic_id = Column(Integer, ForeignKey("clinics.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    speciality = Column(String, nullable=False)
    avatar_image_url = Column(String)
    appointment_price_in_cents = Column(Integer, nullable=False)
    available_from_weekday = Column(Integer, nullable=False)
    available_to_weekday = Column(Integer, nullable=False)
    available_from_time = Column(Time, nullable=False)
    available_to_time = Column(Time, nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    appointments = relationship("Appointment", back_populates="doctor", cascade="all, delete-orphan")
