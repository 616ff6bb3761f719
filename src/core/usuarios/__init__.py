"""
Domínio de Usuários.

Contas de acesso ao sistema:
- Entidades (Usuario, Convite, EmailVerification)
- Use Cases (convites, verificação de email, login, perfil, setup inicial)
- Domain Events (ConviteCriado, UsuarioCriado, ContaBloqueada, ...)
- DTOs e Ports (repositórios e hash de senha)

Novos usuários entram apenas por convite de um administrador;
o primeiro administrador é criado pelo setup inicial.
"""

from .entities import (
    Usuario,
    Convite,
    EmailVerification,
    TipoUsuario,
    StatusUsuario,
    StatusConvite,
)
from .events import (
    ConviteCriadoEvent,
    ConviteReenviadoEvent,
    ConviteAtivadoEvent,
    ConviteCanceladoEvent,
    ConvitesExpiradosEvent,
    CodigoVerificacaoSolicitadoEvent,
    EmailVerificadoEvent,
    UsuarioCriadoEvent,
    UsuarioAtualizadoEvent,
    ContaBloqueadaEvent,
    SenhaAlteradaEvent,
    UsuarioDesativadoEvent,
)
from .dtos import UsuarioOutputDTO, ConviteOutputDTO
from .ports import (
    UsuarioRepository,
    ConviteRepository,
    EmailVerificationRepository,
    PasswordHasher,
)

__all__ = [
    # Entities
    "Usuario",
    "Convite",
    "EmailVerification",
    "TipoUsuario",
    "StatusUsuario",
    "StatusConvite",
    # Events
    "ConviteCriadoEvent",
    "ConviteReenviadoEvent",
    "ConviteAtivadoEvent",
    "ConviteCanceladoEvent",
    "ConvitesExpiradosEvent",
    "CodigoVerificacaoSolicitadoEvent",
    "EmailVerificadoEvent",
    "UsuarioCriadoEvent",
    "UsuarioAtualizadoEvent",
    "ContaBloqueadaEvent",
    "SenhaAlteradaEvent",
    "UsuarioDesativadoEvent",
    # DTOs
    "UsuarioOutputDTO",
    "ConviteOutputDTO",
    # Ports
    "UsuarioRepository",
    "ConviteRepository",
    "EmailVerificationRepository",
    "PasswordHasher",
]
