"""Database model for the site mode flag."""

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# The table only ever holds this one row
SITE_MODE_ROW_ID = 1


class SiteModeRow(Base):
    """Current site visibility mode."""
    __tablename__ = "site_mode"

    id = Column(Integer, primary_key=True, default=SITE_MODE_ROW_ID)
    mode = Column(String, nullable=False)  # 'group_only' or 'full_access'
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_by = Column(String, nullable=False)
