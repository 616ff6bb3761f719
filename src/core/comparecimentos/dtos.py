"""
Data Transfer Objects (DTOs) do Domínio de Comparecimentos.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import List, Optional

from src.core.custodiados.dtos import EnderecoInputDTO
from .entities import HistoricoComparecimento


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class RegistrarComparecimentoInputDTO:
    """
    DTO de entrada para registrar comparecimento.

    Attributes:
        custodiado_id: Custodiado que compareceu
        data_comparecimento: Data (datas futuras são ajustadas para hoje)
        tipo_validacao: PRESENCIAL, ONLINE ou CADASTRO_INICIAL
        validado_por: Servidor responsável pela validação
        hora_comparecimento: Hora (opcional)
        observacoes: Observações (opcional)
        anexos: Referências de anexos (opcional)
        mudanca_endereco: Se houve mudança de endereço
        motivo_mudanca_endereco: Motivo da mudança (opcional)
        novo_endereco: Obrigatório quando mudanca_endereco=True
    """

    custodiado_id: str
    data_comparecimento: Optional[date]
    tipo_validacao: str
    validado_por: str
    hora_comparecimento: Optional[time] = None
    observacoes: Optional[str] = None
    anexos: Optional[str] = None
    mudanca_endereco: bool = False
    motivo_mudanca_endereco: Optional[str] = None
    novo_endereco: Optional[EnderecoInputDTO] = None

    def to_dict(self) -> dict:
        return {
            "custodiado_id": self.custodiado_id,
            "data_comparecimento": self.data_comparecimento.isoformat() if self.data_comparecimento else None,
            "hora_comparecimento": self.hora_comparecimento.isoformat() if self.hora_comparecimento else None,
            "tipo_validacao": self.tipo_validacao,
            "validado_por": self.validado_por,
            "observacoes": self.observacoes,
            "anexos": self.anexos,
            "mudanca_endereco": self.mudanca_endereco,
            "motivo_mudanca_endereco": self.motivo_mudanca_endereco,
            "novo_endereco": self.novo_endereco.to_dict() if self.novo_endereco else None,
        }


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class ComparecimentoOutputDTO:
    """DTO de saída de um comparecimento."""

    id: str
    custodiado_id: str
    data_comparecimento: date
    hora_comparecimento: Optional[time]
    tipo_validacao: str
    validado_por: str
    observacoes: Optional[str]
    anexos: Optional[str]
    mudanca_endereco: bool
    motivo_mudanca_endereco: Optional[str]
    resumo: str
    criado_em: datetime
    enderecos_alterados: List[str] = field(default_factory=list)

    @classmethod
    def from_entity(cls, entity: HistoricoComparecimento) -> "ComparecimentoOutputDTO":
        return cls(
            id=entity.id,
            custodiado_id=entity.custodiado_id,
            data_comparecimento=entity.data_comparecimento,
            hora_comparecimento=entity.hora_comparecimento,
            tipo_validacao=entity.tipo_validacao.name,
            validado_por=entity.validado_por,
            observacoes=entity.observacoes,
            anexos=entity.anexos,
            mudanca_endereco=entity.mudanca_endereco,
            motivo_mudanca_endereco=entity.motivo_mudanca_endereco,
            resumo=entity.resumo,
            criado_em=entity.criado_em,
            enderecos_alterados=list(entity.enderecos_alterados),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "custodiado_id": self.custodiado_id,
            "data_comparecimento": self.data_comparecimento.isoformat(),
            "hora_comparecimento": (
                self.hora_comparecimento.strftime("%H:%M:%S") if self.hora_comparecimento else None
            ),
            "tipo_validacao": self.tipo_validacao,
            "validado_por": self.validado_por,
            "observacoes": self.observacoes,
            "anexos": self.anexos,
            "mudanca_endereco": self.mudanca_endereco,
            "motivo_mudanca_endereco": self.motivo_mudanca_endereco,
            "enderecos_alterados": self.enderecos_alterados,
            "resumo": self.resumo,
            "criado_em": self.criado_em.isoformat(),
        }


# =============================================================================
# QUERY DTOs (Filtros de Busca)
# =============================================================================

@dataclass(frozen=True)
class ListarComparecimentosQueryDTO:
    """
    Filtros e paginação da listagem de comparecimentos.

    Attributes:
        custodiado_id: Filtrar por custodiado
        data_inicio: Data inicial (inclusive)
        data_fim: Data final (inclusive)
        tipo_validacao: Filtrar por tipo (nome do enum)
        mudanca_endereco: Apenas com (True) ou sem (False) mudança
        pagina: Número da página (1-indexed)
        por_pagina: Itens por página
    """

    custodiado_id: Optional[str] = None
    data_inicio: Optional[date] = None
    data_fim: Optional[date] = None
    tipo_validacao: Optional[str] = None
    mudanca_endereco: Optional[bool] = None
    pagina: int = 1
    por_pagina: int = 20

    def to_dict(self) -> dict:
        return {
            "custodiado_id": self.custodiado_id,
            "data_inicio": self.data_inicio.isoformat() if self.data_inicio else None,
            "data_fim": self.data_fim.isoformat() if self.data_fim else None,
            "tipo_validacao": self.tipo_validacao,
            "mudanca_endereco": self.mudanca_endereco,
            "pagina": self.pagina,
            "por_pagina": self.por_pagina,
        }
