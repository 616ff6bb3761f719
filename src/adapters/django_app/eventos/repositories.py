"""
Event Store usando Django ORM.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from django.db.models import Max

from src.core.shared.events import DomainEvent, EventMetadata
from src.core.shared.interfaces import EventStore

from .mappers import DomainEventMapper
from .models import DomainEventModel

logger = logging.getLogger(__name__)


class DjangoEventStore(EventStore):
    """
    Persiste Domain Events para auditoria e replay.

    A sequência é por agregado e começa em 1.
    """

    def append(
        self,
        event: DomainEvent,
        sequence: int,
        metadata: Optional[EventMetadata] = None,
    ) -> None:
        DomainEventMapper.to_model(event, sequence, metadata).save()
        logger.debug(f"Event stored: {event.event_type} for {event.aggregate_id}")

    def get_last_sequence(self, aggregate_id: str) -> int:
        ultima = (
            DomainEventModel.objects
            .filter(aggregate_id=aggregate_id)
            .aggregate(ultima=Max('sequence'))['ultima']
        )
        return ultima or 0

    def get_events_for_aggregate(
        self,
        aggregate_id: str,
        since_sequence: int = 0,
    ) -> List[Dict[str, Any]]:
        events = (
            DomainEventModel.objects
            .filter(aggregate_id=aggregate_id, sequence__gt=since_sequence)
            .order_by('sequence')
        )
        return [DomainEventMapper.to_dict(e) for e in events]

    def list_recentes(self, aggregate_type: Optional[str] = None, limite: int = 50) -> List[Dict[str, Any]]:
        """Últimos eventos gravados (auditoria), mais recentes primeiro."""
        qs = DomainEventModel.objects.all()
        if aggregate_type:
            qs = qs.filter(aggregate_type=aggregate_type)
        return [DomainEventMapper.to_dict(e) for e in qs.order_by('-recorded_at')[:limite]]

    def delete_anteriores(self, limite: datetime) -> int:
        """Remove eventos ocorridos antes de ``limite``."""
        deleted, _ = DomainEventModel.objects.filter(occurred_at__lt=limite).delete()
        return deleted
