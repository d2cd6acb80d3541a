# hospital_core/audit/services.py
from __future__ import annotations

import logging
from typing import Any, Optional
from uuid import UUID

from django.db.models import QuerySet

from hospital_core.audit.models import AuditEvent

logger = logging.getLogger(__name__)


class AuditService:
    """
    Append-only trail of writes: who did what to which record.

    Services call log() inside their own transaction, so a rolled-back
    write leaves no event behind.
    """

    @staticmethod
    def log(
        *,
        event_code: str,
        entity_type: str,
        entity_id: UUID,
        actor_user_id: int | None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> AuditEvent:
        event = AuditEvent.objects.create(
            event_code=event_code,
            entity_type=entity_type,
            entity_id=entity_id,
            actor_user_id=actor_user_id,
            metadata=metadata or {},
        )
        logger.debug("audit %s %s:%s actor=%s", event_code, entity_type, entity_id, actor_user_id)
        return event

    @staticmethod
    def history(*, entity_type: str, entity_id: UUID) -> QuerySet[AuditEvent]:
        return AuditEvent.objects.filter(entity_type=entity_type, entity_id=entity_id).order_by("occurred_at")
