import uuid
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from baronda.models.notification import ALL_STAFF, ALL_USERS, Notification


def notify(db: Session, recipient: str, title: str, message: str, link: Optional[str] = None) -> Notification:
    """Add a notification to the current transaction; the caller commits."""
    n = Notification(
        id=str(uuid.uuid4()),
        recipient=recipient,
        title=title,
        message=message,
        link=link,
        read=False,
    )
    db.add(n)
    return n


def notifications_for(db: Session, recipient_id: str, *, is_staff: bool, limit: int = 50) -> list:
    broadcast = ALL_STAFF if is_staff else ALL_USERS
    return (
        db.query(Notification)
        .filter(or_(Notification.recipient == recipient_id, Notification.recipient == broadcast))
        .order_by(Notification.created_at.desc())
        .limit(limit)
        .all()
    )
