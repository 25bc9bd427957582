from sqlalchemy import Column, String, DateTime, Integer
from sqlalchemy.sql import func

from baronda.core.database import Base


class ShortLink(Base):
    __tablename__ = "shortlinks"

    slug = Column(String(64), primary_key=True)
    target_url = Column(String(1024), nullable=False)
    clicks = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
