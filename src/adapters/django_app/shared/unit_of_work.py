"""
Unit of Work - Implementação Django.

Gerencia transações atômicas entre múltiplos repositórios,
garantindo consistência de dados.

Responsabilidades:
- Iniciar/finalizar transações
- Commit/Rollback coordenado
- Persistir eventos no Event Store (auditoria)
- Publicar eventos após commit bem-sucedido

Os services guardam a mesma instância de UoW e podem abrir
vários blocos ``with`` em sequência; o estado é reiniciado a cada
nova transação.
"""

from typing import Dict, List, Optional
from contextlib import contextmanager
import logging

from django.db import transaction

from src.core.shared.interfaces import EventPublisher, EventStore, UnitOfWork
from src.core.shared.events import DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Usa ``transaction.atomic`` (savepoint quando já existe transação
    externa, como nos testes). Eventos são persistidos no Event Store
    dentro da transação e publicados apenas após o commit.

    Example:
        with DjangoUnitOfWork() as uow:
            custodiado_repo.save(custodiado)
            endereco_repo.save(endereco)
            uow.publish_event(CustodiadoCadastradoEvent(...))
        # Commit automático + eventos publicados

    Example com rollback:
        with DjangoUnitOfWork() as uow:
            repo.save(entity)
            raise BusinessRuleViolationError("...")
        # Rollback automático, eventos descartados
    """

    def __init__(
        self,
        event_publisher: Optional[EventPublisher] = None,
        event_store: Optional[EventStore] = None,
        using: Optional[str] = None,
    ):
        """
        Args:
            event_publisher: Publicador de eventos (log, Celery, composto)
            event_store: Store para persistência de eventos
            using: Alias do banco (default do Django se None)
        """
        super().__init__()
        self._event_publisher = event_publisher
        self._event_store = event_store
        self._using = using
        self._atomic = None
        self._committed = False
        self._rolled_back = False
        self._sequence_counters: Dict[str, int] = {}

    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False
        self._sequence_counters = {}
        self.clear_events()

        self._atomic = transaction.atomic(using=self._using)
        self._atomic.__enter__()
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Ordem de execução:
        1. Persistir eventos no Event Store (dentro da transação)
        2. Commit da transação
        3. Publicar eventos para handlers assíncronos

        Raises:
            Exception: Se a persistência ou o commit falharem
        """
        if self._committed or self._rolled_back:
            logger.warning("Transaction already finalized")
            return

        try:
            if self._event_store and self._events:
                self._persist_events()
        except Exception as e:
            logger.error(f"Commit failed: {e}")
            self.rollback()
            raise

        if self._atomic is not None:
            atomic, self._atomic = self._atomic, None
            atomic.__exit__(None, None, None)
            logger.debug("Transaction committed")

        self._committed = True

        if self._events:
            self._publish_events()

    def rollback(self) -> None:
        """Desfaz todas as mudanças e descarta eventos."""
        if self._committed or self._rolled_back:
            return

        try:
            if self._atomic is not None:
                atomic, self._atomic = self._atomic, None
                # __exit__ com exceção marca o bloco atômico para rollback
                atomic.__exit__(RuntimeError, RuntimeError("rollback"), None)
                logger.debug("Transaction rolled back")
        finally:
            self._rolled_back = True
            self.clear_events()

    def _persist_events(self) -> None:
        for event in self._events:
            self._event_store.append(
                event=event,
                sequence=self._get_next_sequence(event.aggregate_id),
            )

    def _publish_events(self) -> None:
        """
        Publica eventos após commit.

        Falha na publicação não desfaz a operação: o evento já está
        gravado no Event Store e pode ser reprocessado.
        """
        for event in self._events:
            logger.info(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )
            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    logger.error(f"Failed to publish event {event.event_type}: {e}")

        self.clear_events()

    def _get_next_sequence(self, aggregate_id: str) -> int:
        if aggregate_id not in self._sequence_counters:
            self._sequence_counters[aggregate_id] = self._event_store.get_last_sequence(aggregate_id)
        self._sequence_counters[aggregate_id] += 1
        return self._sequence_counters[aggregate_id]

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.

    Não persiste nada - apenas simula comportamento
    para testes unitários sem banco de dados.

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False
        self.clear_events()

    def commit(self) -> None:
        self._committed = True
        if self._event_publisher:
            self._event_publisher.publish_batch(list(self._events))
        self._published_events.extend(self._events)
        self.clear_events()

    def rollback(self) -> None:
        self._rolled_back = True
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        """Eventos 'publicados' por todas as transações comitadas."""
        return self._published_events

    def events_of_type(self, event_class: type) -> List[DomainEvent]:
        return [e for e in self._published_events if isinstance(e, event_class)]

    def reset(self) -> None:
        """Reset para próximo teste."""
        self._committed = False
        self._rolled_back = False
        self._published_events.clear()
        self.clear_events()


# =============================================================================
# Context Manager Helper
# =============================================================================

@contextmanager
def atomic_operation(
    uow: Optional[UnitOfWork] = None,
    event_publisher: Optional[EventPublisher] = None,
    event_store: Optional[EventStore] = None,
):
    """
    Context manager para operações atômicas fora dos services
    (scripts e tasks).

    Example:
        with atomic_operation(event_store=DjangoEventStore()) as uow:
            repo.save(entity)
            uow.publish_event(event)

    Yields:
        UnitOfWork configurado
    """
    if uow is None:
        uow = DjangoUnitOfWork(
            event_publisher=event_publisher,
            event_store=event_store,
        )

    with uow:
        yield uow
