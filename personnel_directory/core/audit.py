from sqlalchemy.orm import Session
from typing import Any

from personnel_directory.models.audit_event import AuditEvent


def log_event(
    *,
    db: Session,
    actor: str,
    action: str,
    entity_type: str,
    entity_id: str,
    metadata: dict[str, Any] | None = None,
):
    event = AuditEvent(
        actor=actor,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id),
        event_metadata=metadata,
    )
    db.add(event)
