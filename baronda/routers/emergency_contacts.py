import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from baronda.core.auth import get_current_admin
from baronda.core.deps import get_db
from baronda.core.errors import not_found
from baronda.models.emergency_contact import EmergencyContact
from baronda.models.staff import Staff
from baronda.schemas.content import EmergencyContactCreate, EmergencyContactResponse
from baronda.services.audit import record_admin_action

router = APIRouter()


@router.get("", response_model=list[EmergencyContactResponse])
def list_contacts(db: Session = Depends(get_db)):
    return db.query(EmergencyContact).order_by(EmergencyContact.name).all()


@router.post("", response_model=EmergencyContactResponse, status_code=201)
def create_contact(
    body: EmergencyContactCreate,
    db: Session = Depends(get_db),
    admin: Staff = Depends(get_current_admin),
):
    contact = EmergencyContact(id=str(uuid.uuid4()), name=body.name, number=body.number, type=body.type)
    db.add(contact)
    record_admin_action(db, admin, "emergency_contact.create", "emergency_contact", contact.id)
    db.commit()
    db.refresh(contact)
    return contact


@router.put("/{contact_id}", response_model=EmergencyContactResponse)
def update_contact(
    contact_id: str,
    body: EmergencyContactCreate,
    db: Session = Depends(get_db),
    admin: Staff = Depends(get_current_admin),
):
    contact = db.query(EmergencyContact).filter(EmergencyContact.id == contact_id).first()
    if not contact:
        raise not_found("Kontak darurat tidak ditemukan.")
    contact.name = body.name
    contact.number = body.number
    contact.type = body.type
    record_admin_action(db, admin, "emergency_contact.update", "emergency_contact", contact.id)
    db.commit()
    db.refresh(contact)
    return contact


@router.delete("/{contact_id}", status_code=204)
def delete_contact(contact_id: str, db: Session = Depends(get_db), admin: Staff = Depends(get_current_admin)):
    contact = db.query(EmergencyContact).filter(EmergencyContact.id == contact_id).first()
    if not contact:
        raise not_found("Kontak darurat tidak ditemukan.")
    record_admin_action(db, admin, "emergency_contact.delete", "emergency_contact", contact.id)
    db.delete(contact)
    db.commit()
