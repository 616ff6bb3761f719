"""
Data Transfer Objects (DTOs) do Domínio de Usuários.

Nenhum DTO de saída expõe hash de senha, token de convite em
listagens ou código de verificação.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .entities import Convite, EmailVerification, Usuario


def _iso(valor: Optional[datetime]) -> Optional[str]:
    return valor.isoformat() if valor else None


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CriarConviteInputDTO:
    """
    Attributes:
        email: Email do convidado (será o login)
        tipo_usuario: ADMIN ou USUARIO
        criado_por_id: Administrador autenticado
        ip_criacao: IP da requisição (auditoria)
    """

    email: str
    tipo_usuario: str
    criado_por_id: Optional[str]
    ip_criacao: Optional[str] = None


@dataclass(frozen=True)
class AtivarConviteInputDTO:
    token: str
    nome: str
    senha: str
    confirmar_senha: str
    cargo: Optional[str] = None
    ip_ativacao: Optional[str] = None

    @property
    def senhas_coincidem(self) -> bool:
        return self.senha == self.confirmar_senha


@dataclass(frozen=True)
class AutenticarInputDTO:
    email: str
    senha: str
    ip: Optional[str] = None


@dataclass(frozen=True)
class AtualizarUsuarioInputDTO:
    """Atualização administrativa; apenas campos não nulos são aplicados."""

    usuario_id: str
    atualizado_por_id: Optional[str]
    nome: Optional[str] = None
    email: Optional[str] = None
    senha: Optional[str] = None
    tipo: Optional[str] = None
    departamento: Optional[str] = None
    comarca: Optional[str] = None
    cargo: Optional[str] = None
    ativo: Optional[bool] = None
    avatar: Optional[str] = None


@dataclass(frozen=True)
class AtualizarPerfilInputDTO:
    usuario_id: str
    nome: Optional[str] = None
    departamento: Optional[str] = None
    comarca: Optional[str] = None
    cargo: Optional[str] = None
    avatar: Optional[str] = None


@dataclass(frozen=True)
class AlterarSenhaInputDTO:
    usuario_id: str
    senha_atual: str
    nova_senha: str
    confirmar_senha: str


@dataclass(frozen=True)
class CriarPrimeiroAdminInputDTO:
    nome: str
    email: str
    senha: str
    confirmar_senha: str
    departamento: Optional[str] = None
    telefone: Optional[str] = None
    ip: Optional[str] = None


@dataclass(frozen=True)
class SolicitarCodigoInputDTO:
    email: str
    nome: Optional[str] = None
    tipo_usuario: Optional[str] = None
    ip: Optional[str] = None


@dataclass(frozen=True)
class VerificarCodigoInputDTO:
    email: str
    codigo: str
    ip: Optional[str] = None


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class UsuarioOutputDTO:
    """Dados públicos do usuário."""

    id: str
    nome: str
    email: str
    tipo: str
    status: str
    ativo: bool
    departamento: Optional[str]
    comarca: Optional[str]
    cargo: Optional[str]
    avatar: Optional[str]
    email_verificado: bool
    deve_trocar_senha: bool
    senha_expirada: bool
    ultimo_login: Optional[datetime]
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: Usuario) -> "UsuarioOutputDTO":
        return cls(
            id=entity.id,
            nome=entity.nome,
            email=entity.email,
            tipo=entity.tipo.name,
            status=entity.status.value,
            ativo=entity.ativo,
            departamento=entity.departamento,
            comarca=entity.comarca,
            cargo=entity.cargo,
            avatar=entity.avatar,
            email_verificado=entity.email_verificado,
            deve_trocar_senha=entity.deve_trocar_senha,
            senha_expirada=entity.senha_expirada(),
            ultimo_login=entity.ultimo_login,
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nome": self.nome,
            "email": self.email,
            "tipo": self.tipo,
            "status": self.status,
            "ativo": self.ativo,
            "departamento": self.departamento,
            "comarca": self.comarca,
            "cargo": self.cargo,
            "avatar": self.avatar,
            "email_verificado": self.email_verificado,
            "deve_trocar_senha": self.deve_trocar_senha,
            "senha_expirada": self.senha_expirada,
            "ultimo_login": _iso(self.ultimo_login),
            "criado_em": self.criado_em.isoformat(),
        }


@dataclass
class ConviteOutputDTO:
    """Convite com link (retornado ao administrador que o criou)."""

    id: str
    token: str
    email: str
    tipo_usuario: str
    status: str
    link: str
    comarca: Optional[str]
    departamento: Optional[str]
    criado_em: datetime
    expira_em: datetime
    criado_por_id: Optional[str] = None
    criado_por_nome: Optional[str] = None

    @classmethod
    def from_entity(
        cls,
        entity: Convite,
        frontend_url: str,
        criado_por_nome: Optional[str] = None,
    ) -> "ConviteOutputDTO":
        return cls(
            id=entity.id,
            token=entity.token,
            email=entity.email,
            tipo_usuario=entity.tipo_usuario.name,
            status=entity.status.value,
            link=entity.link(frontend_url),
            comarca=entity.comarca,
            departamento=entity.departamento,
            criado_em=entity.criado_em,
            expira_em=entity.expira_em,
            criado_por_id=entity.criado_por_id,
            criado_por_nome=criado_por_nome,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "token": self.token,
            "email": self.email,
            "tipo_usuario": self.tipo_usuario,
            "status": self.status,
            "link": self.link,
            "comarca": self.comarca,
            "departamento": self.departamento,
            "criado_em": self.criado_em.isoformat(),
            "expira_em": self.expira_em.isoformat(),
            "criado_por_id": self.criado_por_id,
            "criado_por_nome": self.criado_por_nome,
        }


@dataclass
class ConviteListItemDTO:
    id: str
    email: str
    tipo_usuario: str
    status: str
    comarca: Optional[str]
    departamento: Optional[str]
    criado_em: datetime
    expira_em: datetime
    ativado_em: Optional[datetime]
    expirado: bool
    usado: bool

    @classmethod
    def from_entity(cls, entity: Convite, agora: Optional[datetime] = None) -> "ConviteListItemDTO":
        return cls(
            id=entity.id,
            email=entity.email,
            tipo_usuario=entity.tipo_usuario.name,
            status=entity.status.value,
            comarca=entity.comarca,
            departamento=entity.departamento,
            criado_em=entity.criado_em,
            expira_em=entity.expira_em,
            ativado_em=entity.ativado_em,
            expirado=entity.is_expirado(agora),
            usado=entity.foi_utilizado,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "tipo_usuario": self.tipo_usuario,
            "status": self.status,
            "comarca": self.comarca,
            "departamento": self.departamento,
            "criado_em": self.criado_em.isoformat(),
            "expira_em": self.expira_em.isoformat(),
            "ativado_em": _iso(self.ativado_em),
            "expirado": self.expirado,
            "usado": self.usado,
        }


@dataclass
class ValidarConviteOutputDTO:
    valido: bool
    mensagem: str
    email: Optional[str] = None
    tipo_usuario: Optional[str] = None
    comarca: Optional[str] = None
    departamento: Optional[str] = None
    expira_em: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "valido": self.valido,
            "mensagem": self.mensagem,
            "email": self.email,
            "tipo_usuario": self.tipo_usuario,
            "comarca": self.comarca,
            "departamento": self.departamento,
            "expira_em": _iso(self.expira_em),
        }


@dataclass
class StatusVerificacaoDTO:
    email: str
    email_verificado: bool
    codigo_enviado: bool
    expira_em: Optional[datetime] = None
    minutos_restantes: int = 0
    tentativas_restantes: int = 0

    @classmethod
    def from_entity(
        cls,
        email: str,
        entity: Optional[EmailVerification],
        agora: Optional[datetime] = None,
    ) -> "StatusVerificacaoDTO":
        if entity is None:
            return cls(email=email, email_verificado=False, codigo_enviado=False)
        return cls(
            email=email,
            email_verificado=entity.verificado,
            codigo_enviado=not entity.is_expirado(agora),
            expira_em=entity.expira_em,
            minutos_restantes=entity.minutos_restantes(agora),
            tentativas_restantes=entity.tentativas_restantes,
        )

    def to_dict(self) -> dict:
        return {
            "email": self.email,
            "email_verificado": self.email_verificado,
            "codigo_enviado": self.codigo_enviado,
            "expira_em": _iso(self.expira_em),
            "minutos_restantes": self.minutos_restantes,
            "tentativas_restantes": self.tentativas_restantes,
        }
