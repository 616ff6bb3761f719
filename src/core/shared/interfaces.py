"""
Interfaces (Ports) - Contratos entre Core e Adapters.

Este módulo define as interfaces que os Adapters devem implementar.
São os "Ports" da Arquitetura Hexagonal.

Tipos de Ports:
- Driven Ports: Repository, UnitOfWork, EventPublisher, EventStore
- Driving Ports: os Services de cada domínio (use_cases.py)

Princípio: Core define interfaces; Adapters implementam.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, TypeVar, Generic, Protocol

from .events import DomainEvent, EventMetadata


T = TypeVar("T")


class UnitOfWork(ABC):
    """
    Unit of Work - Coordena transações atômicas.

    Garante que as operações de um caso de uso (ex: cadastrar custodiado,
    endereço inicial e comparecimento de cadastro) sejam persistidas
    juntas ou não sejam persistidas.

    Pattern: Context Manager
        with uow:
            custodiado_repo.save(custodiado)
            endereco_repo.save(endereco)
            uow.publish_event(event)
        # Commit ao sair sem erro, rollback se exceção

    Eventos enfileirados só são publicados após commit bem-sucedido.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    @abstractmethod
    def _begin_transaction(self) -> None:
        """Inicia uma nova transação."""
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """
        Persiste todas as mudanças e publica eventos.

        Ordem de execução:
        1. Commit da transação no banco
        2. Publicação de eventos enfileirados
        3. Limpeza de estado interno
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz todas as mudanças e descarta eventos."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """
        Enfileira evento para publicação após commit.

        Args:
            event: Evento de domínio a ser publicado
        """
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        """Retorna eventos enfileirados."""
        return list(self._events)

    def clear_events(self) -> None:
        """Limpa fila de eventos."""
        self._events.clear()


class Repository(Protocol, Generic[T]):
    """
    Interface genérica para repositórios.

    Os repositórios de cada domínio (ports.py) seguem este contrato
    mínimo e acrescentam suas consultas específicas.
    """

    def save(self, entity: T) -> None:
        ...

    def get_by_id(self, entity_id: str) -> Optional[T]:
        ...

    def list_all(self) -> List[T]:
        ...


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.

    Implementações: log estruturado, Celery, memória (testes) e composta.
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """
        Publica evento para consumidores.

        Args:
            event: Evento de domínio a ser publicado
        """
        raise NotImplementedError

    @abstractmethod
    def publish_batch(self, events: List[DomainEvent]) -> None:
        """
        Publica múltiplos eventos em batch.

        Args:
            events: Lista de eventos a serem publicados
        """
        raise NotImplementedError


class EventStore(ABC):
    """
    Interface para persistência do histórico de eventos (auditoria).
    """

    @abstractmethod
    def append(
        self,
        event: DomainEvent,
        sequence: int,
        metadata: Optional[EventMetadata] = None,
    ) -> None:
        """
        Adiciona evento ao store.

        Args:
            event: Evento a ser persistido
            sequence: Número de sequência do evento no agregado
            metadata: Correlation/user id da operação
        """
        raise NotImplementedError

    @abstractmethod
    def get_last_sequence(self, aggregate_id: str) -> int:
        """Última sequência gravada para o agregado (0 se nenhuma)."""
        raise NotImplementedError

    @abstractmethod
    def get_events_for_aggregate(
        self,
        aggregate_id: str,
        since_sequence: int = 0
    ) -> List[Dict[str, Any]]:
        """
        Recupera eventos de um agregado.

        Args:
            aggregate_id: ID do agregado
            since_sequence: Sequência inicial (exclusiva)

        Returns:
            Lista de eventos serializados, ordenados por sequência
        """
        raise NotImplementedError


UoW = UnitOfWork
