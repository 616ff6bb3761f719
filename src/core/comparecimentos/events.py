"""
Domain Events do Domínio de Comparecimentos.

Eventos:
- ComparecimentoRegistradoEvent: Comparecimento registrado
- CadastrosIniciaisMigradosEvent: Migração de cadastros iniciais concluída
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from src.core.shared.events import DomainEvent


@dataclass
class ComparecimentoRegistradoEvent(DomainEvent):
    """
    Evento: Comparecimento foi registrado.

    aggregate_id é o ID do comparecimento.

    Handlers típicos:
    - Métricas de comparecimento por tipo
    - Auditoria
    """

    custodiado_id: str = ""
    data_comparecimento: str = ""
    tipo_validacao: str = ""
    validado_por: str = ""
    mudanca_endereco: bool = False
    status_custodiado: Optional[str] = None
    proximo_comparecimento: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "HistoricoComparecimento"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "custodiado_id": self.custodiado_id,
            "data_comparecimento": self.data_comparecimento,
            "tipo_validacao": self.tipo_validacao,
            "validado_por": self.validado_por,
            "mudanca_endereco": self.mudanca_endereco,
            "status_custodiado": self.status_custodiado,
            "proximo_comparecimento": self.proximo_comparecimento,
        }


@dataclass
class CadastrosIniciaisMigradosEvent(DomainEvent):
    """
    Evento: Migração de cadastros iniciais executada.

    aggregate_id identifica a execução da migração.
    """

    total_custodiados: int = 0
    custodiados_migrados: int = 0
    validado_por: str = ""

    @property
    def aggregate_type(self) -> str:
        return "MigracaoCadastroInicial"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "total_custodiados": self.total_custodiados,
            "custodiados_migrados": self.custodiados_migrados,
            "validado_por": self.validado_por,
        }
