"""Clinic and clinic membership model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from clinic_backend.database import Base


class Clinic(Base):
    """Tenant boundary owning doctors, patients and appointments."""
    __tablename__ = "clinics"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    user_links = relationship("UserClinic", back_populates="clinic", cascade="all, delete-orphan")


class UserClinic(Base):
    __tablename__ = "users_to_clinics"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    clinic_id = Column(Integer, ForeignKey("clinics.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime, default=datetime.now)

    user = relationship("User", back_populates="clinic_links")
    clinic = relationship("Clinic", back_populates="user_links")
