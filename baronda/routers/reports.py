from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from baronda.core.auth import get_current_admin, get_current_staff, get_current_user, get_optional_user
from baronda.core.deps import get_db
from baronda.core.errors import not_found, raise_for_result
from baronda.models.report import Report, ReportStatus
from baronda.models.staff import Staff
from baronda.models.user import User
from baronda.schemas.auth import MessageResponse
from baronda.schemas.reports import ReportCreate, ReportReplyCreate, ReportResponse, ReportStatusUpdate
from baronda.services import reports as report_service
from baronda.services.audit import record_admin_action

router = APIRouter()


@router.post("", response_model=ReportResponse, status_code=201)
def create_report(
    body: ReportCreate,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    return report_service.create_report(
        db,
        report_text=body.report_text,
        category=body.category.value,
        reporter=user,
        reporter_name=body.reporter_name,
    )


@router.get("/mine", response_model=list[ReportResponse])
def my_reports(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return db.query(Report).filter(Report.user_id == user.id).order_by(Report.created_at.desc()).all()


@router.get("", response_model=list[ReportResponse])
def list_reports(
    status_filter: Optional[ReportStatus] = None,
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
):
    q = db.query(Report)
    if status_filter is not None:
        q = q.filter(Report.status == status_filter.value)
    return q.order_by(Report.created_at.desc()).all()


@router.patch("/{report_id}/status", response_model=ReportResponse)
def update_status(
    report_id: str,
    body: ReportStatusUpdate,
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
):
    report = db.query(Report).filter(Report.id == report_id).first()
    if not report:
        raise not_found("Laporan tidak ditemukan.")
    report.status = body.status.value
    db.commit()
    db.refresh(report)
    return report


@router.post("/{report_id}/replies", response_model=MessageResponse)
def reply(
    report_id: str,
    body: ReportReplyCreate,
    db: Session = Depends(get_db),
    staff: Staff = Depends(get_current_staff),
):
    result = raise_for_result(report_service.reply_to_report(db, report_id, body.message, staff))
    return MessageResponse(message=result.message)


@router.delete("/{report_id}", status_code=204)
def delete_report(report_id: str, db: Session = Depends(get_db), admin: Staff = Depends(get_current_admin)):
    report = db.query(Report).filter(Report.id == report_id).first()
    if not report:
        raise not_found("Laporan tidak ditemukan.")
    if report.status != ReportStatus.resolved.value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Hanya laporan yang sudah selesai yang dapat dihapus.",
        )
    record_admin_action(db, admin, "report.delete", "report", report.id)
    db.delete(report)
    db.commit()
