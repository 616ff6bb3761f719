"""
Event Publishers - Publicadores de Eventos de Domínio.

Responsável por entregar os eventos confirmados pelo Unit of Work
aos handlers assíncronos.

Implementações:
- LoggingEventPublisher: Apenas loga (desenvolvimento)
- CeleryEventPublisher: Publica via Celery (produção)
- InMemoryEventPublisher: Para testes
- CompositeEventPublisher: Vários destinos

Modo escolhido por ``settings.EVENT_PUBLISHER_MODE``.
"""

from typing import Callable, Dict, List, Optional
import json
import logging

from kombu.exceptions import OperationalError

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class _HandlerRegistry:
    """Handlers síncronos locais, por tipo de evento."""

    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = {}

    def register_handler(self, event_type: str, handler: EventHandler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def _dispatch_to_handlers(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Erro em handler para {event.event_type}: {e}", exc_info=True)


class LoggingEventPublisher(_HandlerRegistry, EventPublisher):
    """
    Publisher que apenas loga eventos.

    Usado em desenvolvimento para visualizar eventos sem
    infraestrutura de mensageria.
    """

    def __init__(self, log_level: int = logging.INFO):
        super().__init__()
        self._log_level = log_level

    def publish(self, event: DomainEvent) -> None:
        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(event.to_dict()['data'], default=str)}"
        )
        self._dispatch_to_handlers(event)

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


class CeleryEventPublisher(EventPublisher):
    """
    Publisher que envia eventos para o Celery.

    Falha do broker não interrompe a operação de negócio: o evento
    já está gravado no Event Store.
    """

    def __init__(self, also_log: bool = True):
        self._also_log = also_log

    def publish(self, event: DomainEvent) -> None:
        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )

        from src.adapters.django_app.events.handlers import dispatch_domain_event

        try:
            dispatch_domain_event.delay(event.event_type, event.to_dict(include_sensitive=True))
        except OperationalError as e:
            logger.error(
                f"Falha ao publicar {event.event_type} ({event.event_id}) no Celery: {e}",
                exc_info=True,
            )

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


class InMemoryEventPublisher(_HandlerRegistry, EventPublisher):
    """
    Publisher em memória para testes.

    Armazena eventos publicados para verificação.
    """

    def __init__(self):
        super().__init__()
        self._published_events: List[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        self._dispatch_to_handlers(event)

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()

    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        return [e for e in self._published_events if e.event_type == event_type]

    def clear(self) -> None:
        self._published_events.clear()


class CompositeEventPublisher(EventPublisher):
    """
    Publisher que delega para múltiplos publishers.

    Erro em um destino não impede a entrega aos demais.
    """

    def __init__(self, publishers: Optional[List[EventPublisher]] = None):
        self._publishers = list(publishers or [])

    def add_publisher(self, publisher: EventPublisher) -> None:
        self._publishers.append(publisher)

    def publish(self, event: DomainEvent) -> None:
        for publisher in self._publishers:
            try:
                publisher.publish(event)
            except Exception as e:
                logger.error(f"Erro ao publicar em {publisher.__class__.__name__}: {e}")

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for publisher in self._publishers:
            try:
                publisher.publish_batch(events)
            except Exception as e:
                logger.error(f"Erro ao publicar batch em {publisher.__class__.__name__}: {e}")


PUBLISHER_MODES = ("logging", "celery", "memory")


def get_event_publisher(mode: str = "logging") -> EventPublisher:
    """
    Factory do publisher configurado.

    Args:
        mode: ``logging`` (padrão), ``celery`` ou ``memory``

    Raises:
        ValueError: Se modo desconhecido
    """
    mode = (mode or "logging").lower()
    if mode == "celery":
        return CeleryEventPublisher()
    if mode == "memory":
        return InMemoryEventPublisher()
    if mode == "logging":
        return LoggingEventPublisher()
    raise ValueError(f"EVENT_PUBLISHER_MODE inválido: {mode}. Use um de {PUBLISHER_MODES}")
