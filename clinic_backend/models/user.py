"""User model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from clinic_backend.database import Base


class User(Base):
    """Represents an authenticated application user."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String)
    # Billing fields are written by the payment provider's webhook only.
    plan = Column(String, nullable=True)
    stripe_customer_id = Column(String, nullable=True)
    stripe_subscription_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.now)

    clinic_links = relationship("UserClinic", back_populates="user", cascade="all, delete-orphan")
