from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.sql import func

from baronda.core.database import Base


class AdminLog(Base):
    __tablename__ = "admin_logs"

    id = Column(String(36), primary_key=True, index=True)
    action = Column(String(100), nullable=False, index=True)
    actor_id = Column(String(36), nullable=True, index=True)
    actor_name = Column(String(100), nullable=True)
    resource_type = Column(String(50), nullable=True)
    resource_id = Column(String(64), nullable=True, index=True)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
