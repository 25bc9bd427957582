from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from baronda.core.auth import get_current_admin
from baronda.core.deps import get_db
from baronda.core.errors import not_found
from baronda.models.app_setting import AppSetting
from baronda.models.staff import Staff
from baronda.schemas.content import AppSettingResponse, AppSettingUpdate
from baronda.services.audit import record_admin_action

router = APIRouter()


@router.get("", response_model=list[AppSettingResponse])
def list_settings(db: Session = Depends(get_db)):
    return db.query(AppSetting).order_by(AppSetting.key).all()


@router.get("/{key}", response_model=AppSettingResponse)
def get_setting(key: str, db: Session = Depends(get_db)):
    setting = db.query(AppSetting).filter(AppSetting.key == key).first()
    if not setting:
        raise not_found("Pengaturan tidak ditemukan.")
    return setting


@router.put("/{key}", response_model=AppSettingResponse)
def put_setting(
    key: str,
    body: AppSettingUpdate,
    db: Session = Depends(get_db),
    admin: Staff = Depends(get_current_admin),
):
    """Create or replace a setting such as ``maintenance_mode``."""
    setting = db.query(AppSetting).filter(AppSetting.key == key).first()
    if setting is None:
        setting = AppSetting(key=key)
        db.add(setting)
    setting.value = body.value
    record_admin_action(db, admin, "setting.update", "app_setting", key, {"value": body.value})
    db.commit()
    db.refresh(setting)
    return setting
