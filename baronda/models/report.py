import enum

from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from baronda.core.database import Base


class ReportCategory(str, enum.Enum):
    theft = "theft"
    vandalism = "vandalism"
    suspicious_person = "suspicious_person"
    other = "other"


class ReportStatus(str, enum.Enum):
    new = "new"
    in_progress = "in_progress"
    resolved = "resolved"


class ThreatLevel(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"


class Report(Base):
    __tablename__ = "reports"

    id = Column(String(36), primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    reporter_name = Column(String(100), nullable=False)
    reporter_email = Column(String(255), nullable=True)
    report_text = Column(Text, nullable=False)
    category = Column(String(32), nullable=False, default=ReportCategory.other.value)
    status = Column(String(20), nullable=False, default=ReportStatus.new.value, index=True)
    threat_level = Column(String(10), nullable=True)
    triage_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    replies = relationship(
        "ReportReply",
        back_populates="report",
        cascade="all, delete-orphan",
        order_by="ReportReply.created_at",
    )


class ReportReply(Base):
    __tablename__ = "report_replies"

    id = Column(String(36), primary_key=True, index=True)
    report_id = Column(String(36), ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True)
    message = Column(Text, nullable=False)
    replier_role = Column(String(20), nullable=False)  # Admin, Petugas
    replier_id = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    report = relationship("Report", back_populates="replies")
