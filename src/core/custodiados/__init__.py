"""
Domínio de Custodiados - Acompanhamento de Liberdade Provisória.

Este módulo contém a lógica de negócio de custodiados:
- Entidades (Custodiado, HistoricoEndereco, EstadoBrasil)
- Use Cases (cadastro, atualização, arquivamento, agenda, status)
- Domain Events (CustodiadoCadastrado, EnderecoAlterado, ...)
- DTOs e Ports (repositórios)

Características do Domínio:
- Próximo comparecimento calculado pela periodicidade
- Inadimplência detectada por data
- Histórico temporal de endereços com um único endereço ativo
"""

from .entities import (
    Custodiado,
    HistoricoEndereco,
    SituacaoCustodiado,
    StatusComparecimento,
    EstadoBrasil,
)
from .events import (
    CustodiadoCadastradoEvent,
    CustodiadoAtualizadoEvent,
    CustodiadoArquivadoEvent,
    CustodiadoReativadoEvent,
    StatusCustodiadoAlteradoEvent,
    EnderecoAlteradoEvent,
)
from .dtos import (
    EnderecoInputDTO,
    CadastrarCustodiadoInputDTO,
    AtualizarCustodiadoInputDTO,
    CustodiadoOutputDTO,
    CustodiadoListItemDTO,
    EnderecoOutputDTO,
)
from .ports import CustodiadoRepository, HistoricoEnderecoRepository

__all__ = [
    # Entities
    "Custodiado",
    "HistoricoEndereco",
    "SituacaoCustodiado",
    "StatusComparecimento",
    "EstadoBrasil",
    # Events
    "CustodiadoCadastradoEvent",
    "CustodiadoAtualizadoEvent",
    "CustodiadoArquivadoEvent",
    "CustodiadoReativadoEvent",
    "StatusCustodiadoAlteradoEvent",
    "EnderecoAlteradoEvent",
    # DTOs
    "EnderecoInputDTO",
    "CadastrarCustodiadoInputDTO",
    "AtualizarCustodiadoInputDTO",
    "CustodiadoOutputDTO",
    "CustodiadoListItemDTO",
    "EnderecoOutputDTO",
    # Ports
    "CustodiadoRepository",
    "HistoricoEnderecoRepository",
]
