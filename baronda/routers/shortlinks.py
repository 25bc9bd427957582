from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from baronda.core.auth import get_current_admin
from baronda.core.deps import get_db
from baronda.core.errors import not_found
from baronda.models.shortlink import ShortLink
from baronda.models.staff import Staff
from baronda.schemas.content import ShortLinkCreate, ShortLinkResponse
from baronda.services.audit import record_admin_action

router = APIRouter()
redirect_router = APIRouter()


@router.get("", response_model=list[ShortLinkResponse])
def list_shortlinks(db: Session = Depends(get_db), admin: Staff = Depends(get_current_admin)):
    return db.query(ShortLink).order_by(ShortLink.created_at.desc()).all()


@router.post("", response_model=ShortLinkResponse, status_code=201)
def create_shortlink(body: ShortLinkCreate, db: Session = Depends(get_db), admin: Staff = Depends(get_current_admin)):
    if db.query(ShortLink).filter(ShortLink.slug == body.slug).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Slug sudah digunakan.")
    link = ShortLink(slug=body.slug, target_url=body.target_url, clicks=0)
    db.add(link)
    record_admin_action(db, admin, "shortlink.create", "shortlink", body.slug, {"target_url": body.target_url})
    db.commit()
    db.refresh(link)
    return link


@router.delete("/{slug}", status_code=204)
def delete_shortlink(slug: str, db: Session = Depends(get_db), admin: Staff = Depends(get_current_admin)):
    link = db.query(ShortLink).filter(ShortLink.slug == slug).first()
    if not link:
        raise not_found("Tautan tidak ditemukan.")
    record_admin_action(db, admin, "shortlink.delete", "shortlink", slug)
    db.delete(link)
    db.commit()


@redirect_router.get("/{slug}")
def follow_shortlink(slug: str, db: Session = Depends(get_db)):
    link = db.query(ShortLink).filter(ShortLink.slug == slug).first()
    if not link:
        raise not_found("Tautan tidak ditemukan.")
    db.query(ShortLink).filter(ShortLink.slug == slug).update(
        {ShortLink.clicks: ShortLink.clicks + 1}, synchronize_session=False
    )
    db.commit()
    return RedirectResponse(url=link.target_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
