"""
Mapper entre DomainEvent (Core) e DomainEventModel (Event Store).
"""

from typing import Any, Dict, Optional

from src.core.shared.events import DomainEvent, EventMetadata

from .models import DomainEventModel


class DomainEventMapper:
    """Usado para persistir e ler eventos do Event Store."""

    @staticmethod
    def to_model(
        event: DomainEvent,
        sequence: int = 0,
        metadata: Optional[EventMetadata] = None,
    ) -> DomainEventModel:
        """
        Args:
            event: Evento de domínio
            sequence: Número de sequência no agregado
            metadata: Correlation/causation/user (opcional)

        Returns:
            Model pronto para persistência
        """
        return DomainEventModel(
            event_id=event.event_id,
            event_type=event.event_type,
            aggregate_type=event.aggregate_type,
            aggregate_id=event.aggregate_id,
            event_data=event.to_dict()["data"],
            version=event.version,
            sequence=sequence,
            occurred_at=event.occurred_at,
            correlation_id=metadata.correlation_id if metadata else None,
            causation_id=metadata.causation_id if metadata else None,
            user_id=metadata.user_id if metadata else None,
        )

    @staticmethod
    def to_dict(model: DomainEventModel) -> Dict[str, Any]:
        """Formato de ``DomainEvent.to_dict`` acrescido da sequência."""
        return {
            "event_id": model.event_id,
            "event_type": model.event_type,
            "aggregate_id": model.aggregate_id,
            "aggregate_type": model.aggregate_type,
            "occurred_at": model.occurred_at.isoformat(),
            "version": model.version,
            "sequence": model.sequence,
            "data": model.event_data,
        }
