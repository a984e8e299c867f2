"""
Audit trail helpers.

``record`` appends one AuditLog row; callers run it inside the same
transaction as the change it describes so both land or neither does.
"""
import logging
from datetime import date, datetime
from typing import Dict, Iterable, Optional

from .models import AuditLog

logger = logging.getLogger(__name__)

EXPERIENCE_FIELDS = (
    'status',
    'organization_id',
    'verified_at',
    'verified_by_id',
    'verification_note',
    'rejection_reason',
    'is_public',
)

REQUEST_FIELDS = (
    'status',
    'assigned_to_id',
    'processed_at',
    'processed_by_id',
    'response_note',
)


def _json_value(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def snapshot(instance, fields: Iterable[str] = EXPERIENCE_FIELDS) -> Dict:
    """JSON-safe copy of ``fields`` on ``instance``."""
    return {name: _json_value(getattr(instance, name)) for name in fields}


def record(
    action: str,
    entity: str,
    entity_id,
    actor=None,
    old_values: Optional[Dict] = None,
    new_values: Optional[Dict] = None,
    details: Optional[Dict] = None,
) -> AuditLog:
    """
    Append an audit entry.

    Args:
        action: Upper-case verb, e.g. ``EXPERIENCE_APPROVED``
        entity: Entity name, e.g. ``experience``
        entity_id: Primary key of the entity
        actor: ``ActorContext`` of whoever triggered the change
        old_values: Snapshot before the change
        new_values: Snapshot after the change
        details: Free-form context (request id, note, ...)
    """
    entry = AuditLog.objects.create(
        action=action,
        entity=entity,
        entity_id=str(entity_id),
        actor_id=getattr(actor, 'user_id', None),
        old_values=old_values,
        new_values=new_values,
        details=details or {},
        ip_address=getattr(actor, 'ip_address', None),
        user_agent=getattr(actor, 'user_agent', '') or '',
    )
    logger.debug("Audit %s on %s#%s by %s", action, entity, entity_id, entry.actor_id)
    return entry


def history(entity: str, entity_id):
    """Audit entries for one entity, oldest first."""
    return AuditLog.objects.filter(entity=entity, entity_id=str(entity_id)).select_related('actor')
