"""
Value objects returned by the fostering engine
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from foster_app.business.fostering.errors import DegradedSuccess


@dataclass(frozen=True)
class ConflictCheck:
    conflict: bool
    group_id: Optional[str] = None
    group_foster_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'conflict': self.conflict,
            'group_id': self.group_id,
            'group_foster_id': self.group_foster_id,
        }


@dataclass(frozen=True)
class NotificationOutcome:
    SENT = 'sent'
    SKIPPED = 'skipped'
    DEGRADED = 'degraded'

    status: str
    conversation_id: Optional[str] = None
    message_id: Optional[str] = None
    degraded: Optional[DegradedSuccess] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status,
            'conversation_id': self.conversation_id,
            'message_id': self.message_id,
            'degraded': self.degraded.to_dict() if self.degraded else None,
        }


@dataclass(frozen=True)
class TransitionResult:
    operation: str
    entity_type: str
    entity_id: str
    foster_id: Optional[str] = None
    request_id: Optional[str] = None
    affected_animal_ids: tuple = ()
    notification: Optional[NotificationOutcome] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_degraded(self) -> bool:
        return self.notification is not None and self.notification.degraded is not None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'operation': self.operation,
            'entity_type': self.entity_type,
            'entity_id': self.entity_id,
            'foster_id': self.foster_id,
            'request_id': self.request_id,
            'affected_animal_ids': list(self.affected_animal_ids),
            'notification': self.notification.to_dict() if self.notification else None,
        }
        data.update(self.extra)
        return data
