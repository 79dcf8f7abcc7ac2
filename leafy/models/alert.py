"""
Alert and alert rule models.
"""
from sqlalchemy import Column, String, Text, Boolean, DateTime, Index

from leafy.db.base import Base, JSONType, new_id, utcnow


class AlertRule(Base):
    """A configured check evaluated by the alert engine."""
    __tablename__ = "alert_rules"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    type = Column(String(30), nullable=False)  # LowStock, RentDue, RevenueThreshold, ...
    condition = Column(String(50), nullable=False)  # stock_below_threshold, monthly_rent_due, ...
    parameters = Column(JSONType, nullable=False, default=dict)  # {"dayOfMonth": 1, ...}
    is_active = Column(Boolean, nullable=False, default=True)
    last_triggered = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class Alert(Base):
    """An alert raised by the engine. Open while resolved_at is NULL."""
    __tablename__ = "alerts"

    id = Column(String(36), primary_key=True, default=new_id)
    type = Column(String(30), nullable=False)
    severity = Column(String(10), nullable=False)  # low, medium, high, critical
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    related_entity_id = Column(String(36))
    related_entity_type = Column(String(50))  # ingredient, task
    is_read = Column(Boolean, nullable=False, default=False)
    resolved_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_alerts_open", "resolved_at"),
    )
