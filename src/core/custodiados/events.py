"""
Domain Events do Domínio de Custodiados.

Eventos:
- CustodiadoCadastradoEvent: Novo custodiado cadastrado
- CustodiadoAtualizadoEvent: Dados cadastrais alterados
- CustodiadoArquivadoEvent: Custodiado arquivado (exclusão lógica)
- CustodiadoReativadoEvent: Custodiado arquivado voltou a ser ativo
- StatusCustodiadoAlteradoEvent: Verificação de status mudou conformidade
- EnderecoAlteradoEvent: Nova entrada no histórico de endereços

Datas trafegam como string ISO para que os eventos possam ser
serializados em JSON (Event Store e Celery).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.core.shared.events import DomainEvent


@dataclass
class CustodiadoCadastradoEvent(DomainEvent):
    """
    Evento: Custodiado foi cadastrado.

    Handlers típicos:
    - Registrar métrica de cadastros
    - Auditoria
    """

    nome: str = ""
    processo: str = ""
    comarca: str = ""
    periodicidade: int = 0
    proximo_comparecimento: Optional[str] = None
    cadastrado_por: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Custodiado"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "nome": self.nome,
            "processo": self.processo,
            "comarca": self.comarca,
            "periodicidade": self.periodicidade,
            "proximo_comparecimento": self.proximo_comparecimento,
            "cadastrado_por": self.cadastrado_por,
        }


@dataclass
class CustodiadoAtualizadoEvent(DomainEvent):
    """Evento: Dados cadastrais do custodiado foram alterados."""

    campos_alterados: List[str] = field(default_factory=list)
    endereco_alterado: bool = False
    atualizado_por: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Custodiado"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "campos_alterados": list(self.campos_alterados),
            "endereco_alterado": self.endereco_alterado,
            "atualizado_por": self.atualizado_por,
        }


@dataclass
class CustodiadoArquivadoEvent(DomainEvent):
    """
    Evento: Custodiado foi arquivado.

    Custodiado arquivado sai da agenda de comparecimentos.
    """

    processo: str = ""
    arquivado_por: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Custodiado"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "processo": self.processo,
            "arquivado_por": self.arquivado_por,
        }


@dataclass
class CustodiadoReativadoEvent(DomainEvent):
    """Evento: Custodiado arquivado foi reativado."""

    processo: str = ""
    status: str = ""
    proximo_comparecimento: Optional[str] = None
    reativado_por: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Custodiado"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "processo": self.processo,
            "status": self.status,
            "proximo_comparecimento": self.proximo_comparecimento,
            "reativado_por": self.reativado_por,
        }


@dataclass
class StatusCustodiadoAlteradoEvent(DomainEvent):
    """
    Evento: Status de comparecimento mudou na verificação periódica.

    Handlers típicos:
    - Alertar sobre novos inadimplentes
    - Métricas de conformidade
    """

    status_anterior: str = ""
    status_novo: str = ""
    dias_atraso: int = 0
    proximo_comparecimento: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Custodiado"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "status_anterior": self.status_anterior,
            "status_novo": self.status_novo,
            "dias_atraso": self.dias_atraso,
            "proximo_comparecimento": self.proximo_comparecimento,
        }


@dataclass
class EnderecoAlteradoEvent(DomainEvent):
    """
    Evento: Custodiado mudou de endereço.

    aggregate_id é o ID do custodiado.
    """

    endereco_anterior_id: Optional[str] = None
    endereco_novo_id: str = ""
    cidade: str = ""
    estado: str = ""
    motivo: Optional[str] = None
    historico_comparecimento_id: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Custodiado"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "endereco_anterior_id": self.endereco_anterior_id,
            "endereco_novo_id": self.endereco_novo_id,
            "cidade": self.cidade,
            "estado": self.estado,
            "motivo": self.motivo,
            "historico_comparecimento_id": self.historico_comparecimento_id,
        }
