# hospital_core/audit/models.py
from django.db import models

from hospital_core.common.models import UUIDModel


class AuditEvent(UUIDModel):
    """
    Immutable audit record written by every mutating service call.
    """
    event_code = models.CharField(max_length=128, db_index=True)  # e.g. "appointment.created"
    entity_type = models.CharField(max_length=128, db_index=True)  # e.g. "Appointment"
    entity_id = models.UUIDField(db_index=True)

    actor_user_id = models.BigIntegerField(null=True, blank=True, db_index=True)

    occurred_at = models.DateTimeField(auto_now_add=True, db_index=True)
    metadata = models.JSONField(default=dict)

    class Meta:
        db_table = "audit_audit_event"
        indexes = [
            models.Index(fields=["entity_type", "entity_id"]),
            models.Index(fields=["event_code", "occurred_at"]),
        ]

    def __str__(self) -> str:
        return f"{self.event_code} {self.entity_type}:{self.entity_id}"
