"""
Domínio de Comparecimentos.

Registro dos comparecimentos periódicos em juízo:
- Entidades (HistoricoComparecimento, TipoValidacao)
- Use Cases (registro, histórico, estatísticas, resumo do sistema)
- Domain Events (ComparecimentoRegistrado)
- DTOs e Ports (repositório)

O registro de um comparecimento regular atualiza a agenda e o
status do custodiado; mudanças de endereço informadas no
comparecimento alimentam o histórico de endereços.
"""

from .entities import HistoricoComparecimento, TipoValidacao
from .events import ComparecimentoRegistradoEvent, CadastrosIniciaisMigradosEvent
from .dtos import (
    RegistrarComparecimentoInputDTO,
    ComparecimentoOutputDTO,
    ListarComparecimentosQueryDTO,
)
from .ports import ComparecimentoRepository

__all__ = [
    # Entities
    "HistoricoComparecimento",
    "TipoValidacao",
    # Events
    "ComparecimentoRegistradoEvent",
    "CadastrosIniciaisMigradosEvent",
    # DTOs
    "RegistrarComparecimentoInputDTO",
    "ComparecimentoOutputDTO",
    "ListarComparecimentosQueryDTO",
    # Ports
    "ComparecimentoRepository",
]
