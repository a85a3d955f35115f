"""
System entities - webhook subscriptions and per-staff preferences
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean, JSON, UniqueConstraint
from innsync.database import Base


class WebhookEndpoint(Base):
    """External URL that receives reservation and stay events"""
    __tablename__ = "webhook_endpoints"

    id = Column(Integer, primary_key=True, index=True)
    url = Column(String(500), nullable=False)
    events = Column(JSON, default=list)
    secret = Column(String(255), nullable=False)
    active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class UserPreference(Base):
    """Small key/value UI preference stored per staff member"""
    __tablename__ = "user_preferences"
    __table_args__ = (UniqueConstraint("staff_id", "key", name="uq_staff_preference"),)

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False)
    key = Column(String(50), nullable=False)
    value = Column(JSON)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
