"""
Staff task model.
"""
from sqlalchemy import Column, String, Text, Date, DateTime

from leafy.db.base import Base, new_id, utcnow


class Task(Base):
    """A to-do item with an optional due date."""
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    due_date = Column(Date)
    priority = Column(String(10), nullable=False, default="medium")  # low, medium, high, urgent
    status = Column(String(20), nullable=False, default="pending")  # pending, in_progress, completed
    assigned_to = Column(String(20), nullable=False, default="staff")  # admin, staff
    created_by = Column(String(20), nullable=False, default="admin")
    completed_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
