import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from baronda.core.errors import FlowReason, FlowResult
from baronda.models.report import Report, ReportReply, ReportStatus
from baronda.models.staff import Staff
from baronda.models.user import User
from baronda.services import email as mail
from baronda.services import triage
from baronda.services.notifications import notify

logger = logging.getLogger(__name__)


def create_report(
    db: Session,
    *,
    report_text: str,
    category: str,
    reporter: Optional[User] = None,
    reporter_name: Optional[str] = None,
    provider: Optional[triage.TriageProvider] = None,
) -> Report:
    """Store a report with its threat triage. Triage failure leaves the level empty."""
    report = Report(
        id=str(uuid.uuid4()),
        user_id=reporter.id if reporter else None,
        reporter_name=(reporter.display_name if reporter else reporter_name) or "Anonim",
        reporter_email=reporter.email if reporter else None,
        report_text=report_text.strip(),
        category=category,
        status=ReportStatus.new.value,
    )
    assessed = triage.triage_report(report.report_text, category, provider=provider)
    if assessed is not None:
        report.threat_level = assessed.threat_level.value
        report.triage_reason = assessed.reason
    db.add(report)
    db.commit()
    db.refresh(report)
    logger.info("Report %s filed (threat=%s)", report.id, report.threat_level)
    return report


def reply_to_report(db: Session, report_id: str, message: str, replier: Staff) -> FlowResult:
    report = db.query(Report).filter(Report.id == report_id).first()
    if not report:
        return FlowResult.fail(FlowReason.not_found, "Laporan tidak ditemukan.")
    role = "Admin" if replier.is_admin else "Petugas"
    reply = ReportReply(
        id=str(uuid.uuid4()),
        report_id=report.id,
        message=message.strip(),
        replier_role=role,
        replier_id=replier.id,
    )
    db.add(reply)
    if report.status == ReportStatus.new.value:
        report.status = ReportStatus.in_progress.value
    if report.user_id:
        notify(
            db,
            report.user_id,
            f"Balasan untuk laporan Anda dari {role}",
            message.strip(),
            link="/profile",
        )
    db.commit()

    if report.reporter_email and not mail.send_report_reply_email(
        report.reporter_email, report.reporter_name, report.report_text, message.strip(), role
    ):
        logger.warning("Reply email for report %s was not sent", report.id)
    return FlowResult.ok("Balasan berhasil dikirim.", reply_id=reply.id)
