"""
Domain Events - Comunicação Assíncrona entre Domínios.

Infraestrutura base para os eventos de domínio do ACLP. Um evento
registra algo que já aconteceu (custodiado cadastrado, comparecimento
registrado, convite criado) e é publicado somente após o commit do
Unit of Work.

Características:
- Auto-geração de ID e timestamp
- Serializáveis para persistência (Event Store) e transporte (Celery)
- Rastreáveis via aggregate_id
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Dict, FrozenSet, Optional
import uuid


@dataclass
class DomainEvent(ABC):
    """
    Classe base abstrata para Domain Events.

    Subclasses declaram seus campos com valor default (dataclass exige
    defaults após os campos da base) e implementam ``aggregate_type``.

    Attributes:
        event_id: Identificador único do evento
        aggregate_id: ID do agregado que gerou o evento
        occurred_at: Momento em que o evento ocorreu
        version: Versão do schema do evento

    Example:
        @dataclass
        class CustodiadoArquivadoEvent(DomainEvent):
            processo: str = ""

            @property
            def aggregate_type(self) -> str:
                return "Custodiado"
    """

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aggregate_id: str = ""
    occurred_at: datetime = field(default_factory=datetime.now)
    version: int = 1

    # Campos que só seguem para o transporte (Celery), nunca para log ou Event Store
    sensitive_fields: ClassVar[FrozenSet[str]] = frozenset()

    def __post_init__(self):
        if not self.aggregate_id:
            raise ValueError("aggregate_id é obrigatório")

    @property
    @abstractmethod
    def aggregate_type(self) -> str:
        """Nome do agregado que gerou o evento (ex: "Custodiado")."""
        ...

    @property
    def event_type(self) -> str:
        """Nome da classe do evento."""
        return self.__class__.__name__

    def to_dict(self, include_sensitive: bool = False) -> Dict[str, Any]:
        """
        Serializa evento para dicionário.

        Usado pelo Event Store, pelo publisher Celery e pelo log
        estruturado. Campos de ``sensitive_fields`` só são incluídos
        com ``include_sensitive=True``.
        """
        data = self._get_event_data()
        if not include_sensitive:
            data = {k: v for k, v in data.items() if k not in self.sensitive_fields}
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "data": data,
        }

    def _get_event_data(self) -> Dict[str, Any]:
        """Campos específicos do evento (tudo que não é da classe base)."""
        base_fields = {"event_id", "aggregate_id", "occurred_at", "version"}
        return {
            key: value
            for key, value in self.__dict__.items()
            if key not in base_fields and not key.startswith("_")
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomainEvent":
        """
        Reconstrói evento a partir do formato de ``to_dict``.

        Args:
            data: Dicionário com dados do evento

        Returns:
            Instância do evento
        """
        event_data = data.get("data", {})
        return cls(
            event_id=data.get("event_id", str(uuid.uuid4())),
            aggregate_id=data["aggregate_id"],
            occurred_at=datetime.fromisoformat(data["occurred_at"]),
            version=data.get("version", 1),
            **event_data,
        )

    def __repr__(self) -> str:
        return (
            f"{self.event_type}("
            f"event_id={self.event_id[:8]}..., "
            f"aggregate_id={self.aggregate_id}, "
            f"occurred_at={self.occurred_at.isoformat()}"
            f")"
        )


class EventMetadata:
    """
    Metadata de rastreamento gravada junto com os eventos.

    Attributes:
        correlation_id: ID que agrupa os eventos de uma mesma operação
        causation_id: ID do evento que causou este
        user_id: ID do usuário que iniciou a ação
        timestamp: Momento do registro
    """

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        causation_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ):
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.causation_id = causation_id
        self.user_id = user_id
        self.timestamp = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "correlation_id": self.correlation_id,
            "causation_id": self.causation_id,
            "user_id": self.user_id,
            "timestamp": self.timestamp.isoformat(),
        }
