"""
Global key/value settings and the applied data migrations record.
"""
from sqlalchemy import Column, String, Text, DateTime

from leafy.db.base import Base, new_id, utcnow


class AppSetting(Base):
    """Global configuration. value holds a JSON-encoded string."""
    __tablename__ = "app_settings"

    id = Column(String(36), primary_key=True, default=new_id)
    key = Column(String(100), nullable=False, unique=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class AppliedMigration(Base):
    """Names of startup data migrations that have already run."""
    __tablename__ = "applied_migrations"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False, unique=True)
    applied_at = Column(DateTime(timezone=True), default=utcnow)
