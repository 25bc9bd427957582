from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from baronda.core.auth import get_current_admin, get_current_recipient
from baronda.core.deps import get_db
from baronda.core.errors import not_found
from baronda.models.notification import Notification
from baronda.models.staff import Staff
from baronda.schemas.content import NotificationCreate, NotificationResponse
from baronda.services.audit import record_admin_action
from baronda.services.notifications import notifications_for, notify

router = APIRouter()


@router.get("", response_model=list[NotificationResponse])
def my_notifications(
    db: Session = Depends(get_db),
    recipient: tuple[str, bool] = Depends(get_current_recipient),
):
    recipient_id, is_staff = recipient
    return notifications_for(db, recipient_id, is_staff=is_staff)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
    notification_id: str,
    db: Session = Depends(get_db),
    recipient: tuple[str, bool] = Depends(get_current_recipient),
):
    """Only personal notifications carry a read flag; broadcasts are shared."""
    n = db.query(Notification).filter(Notification.id == notification_id).first()
    if not n:
        raise not_found("Notifikasi tidak ditemukan.")
    if n.recipient != recipient[0]:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Notifikasi ini bukan milik Anda.")
    n.read = True
    db.commit()
    db.refresh(n)
    return n


@router.post("", response_model=NotificationResponse, status_code=201)
def send_notification(
    body: NotificationCreate,
    db: Session = Depends(get_db),
    admin: Staff = Depends(get_current_admin),
):
    """Send to one resident or staff id, or broadcast with ``all_users`` / ``all_staff``."""
    n = notify(db, body.recipient, body.title, body.message, link=body.link)
    record_admin_action(db, admin, "notification.send", "notification", n.id, {"recipient": body.recipient})
    db.commit()
    db.refresh(n)
    return n
