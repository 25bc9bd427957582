import json
import logging
import uuid
from typing import Any, Optional

from sqlalchemy.orm import Session

from baronda.models.admin_log import AdminLog
from baronda.models.staff import Staff

logger = logging.getLogger(__name__)


def record_admin_action(
    db: Session,
    actor: Optional[Staff],
    action: str,
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None,
    details: Any = None,
) -> AdminLog:
    """Add an admin_logs row to the current transaction; the caller commits."""
    if details is not None and not isinstance(details, str):
        details = json.dumps(details, default=str, ensure_ascii=False)
    entry = AdminLog(
        id=str(uuid.uuid4()),
        action=action,
        actor_id=actor.id if actor else None,
        actor_name=actor.name if actor else "system",
        resource_type=resource_type,
        resource_id=resource_id,
        details=details,
    )
    db.add(entry)
    logger.info("Admin action %s by %s on %s/%s", action, entry.actor_name, resource_type, resource_id)
    return entry
