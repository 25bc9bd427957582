import uuid
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from baronda.core.auth import get_current_admin, get_current_user
from baronda.core.deps import get_db
from baronda.core.errors import not_found
from baronda.models.announcement import Announcement, AnnouncementTarget
from baronda.models.notification import ALL_STAFF, ALL_USERS
from baronda.models.staff import Staff
from baronda.models.user import User
from baronda.schemas.content import (
    AnnouncementCreate,
    AnnouncementReaction,
    AnnouncementResponse,
    AnnouncementUpdate,
)
from baronda.services.audit import record_admin_action
from baronda.services.notifications import notify

router = APIRouter()


@router.get("", response_model=list[AnnouncementResponse])
def list_announcements(audience: Optional[AnnouncementTarget] = None, db: Session = Depends(get_db)):
    """Public list; ``audience`` keeps announcements for everyone plus that group."""
    q = db.query(Announcement)
    if audience is not None and audience != AnnouncementTarget.all:
        q = q.filter(Announcement.target.in_([AnnouncementTarget.all.value, audience.value]))
    return q.order_by(Announcement.created_at.desc()).all()


@router.post("", response_model=AnnouncementResponse, status_code=201)
def create_announcement(
    body: AnnouncementCreate,
    db: Session = Depends(get_db),
    admin: Staff = Depends(get_current_admin),
):
    ann = Announcement(
        id=str(uuid.uuid4()),
        title=body.title,
        content=body.content,
        target=body.target.value,
        likes=0,
        dislikes=0,
    )
    db.add(ann)
    if body.target in (AnnouncementTarget.all, AnnouncementTarget.users):
        notify(db, ALL_USERS, f"Pengumuman: {body.title}", body.content[:200], link="/announcements")
    if body.target in (AnnouncementTarget.all, AnnouncementTarget.staff):
        notify(db, ALL_STAFF, f"Pengumuman: {body.title}", body.content[:200], link="/announcements")
    record_admin_action(db, admin, "announcement.create", "announcement", ann.id)
    db.commit()
    db.refresh(ann)
    return ann


@router.patch("/{announcement_id}", response_model=AnnouncementResponse)
def update_announcement(
    announcement_id: str,
    body: AnnouncementUpdate,
    db: Session = Depends(get_db),
    admin: Staff = Depends(get_current_admin),
):
    ann = db.query(Announcement).filter(Announcement.id == announcement_id).first()
    if not ann:
        raise not_found("Pengumuman tidak ditemukan.")
    data = body.model_dump(exclude_unset=True)
    if data.get("target") is not None:
        data["target"] = data["target"].value
    for k, v in data.items():
        setattr(ann, k, v)
    record_admin_action(db, admin, "announcement.update", "announcement", ann.id)
    db.commit()
    db.refresh(ann)
    return ann


@router.delete("/{announcement_id}", status_code=204)
def delete_announcement(
    announcement_id: str,
    db: Session = Depends(get_db),
    admin: Staff = Depends(get_current_admin),
):
    ann = db.query(Announcement).filter(Announcement.id == announcement_id).first()
    if not ann:
        raise not_found("Pengumuman tidak ditemukan.")
    record_admin_action(db, admin, "announcement.delete", "announcement", ann.id)
    db.delete(ann)
    db.commit()


@router.post("/{announcement_id}/react", response_model=AnnouncementResponse)
def react(
    announcement_id: str,
    body: AnnouncementReaction,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ann = db.query(Announcement).filter(Announcement.id == announcement_id).first()
    if not ann:
        raise not_found("Pengumuman tidak ditemukan.")
    column = Announcement.likes if body.reaction == "like" else Announcement.dislikes
    db.query(Announcement).filter(Announcement.id == ann.id).update(
        {column: column + 1}, synchronize_session=False
    )
    db.commit()
    db.refresh(ann)
    return ann
