"""
Domain Events do Domínio de Usuários.

Eventos que disparam emails (processados de forma assíncrona):
- ConviteCriadoEvent / ConviteReenviadoEvent: email com o link do convite
- CodigoVerificacaoSolicitadoEvent: email com o código
- UsuarioCriadoEvent: email de boas-vindas
- ContaBloqueadaEvent: aviso de bloqueio
- SenhaAlteradaEvent: aviso de alteração de senha

Demais eventos servem para auditoria.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional

from src.core.shared.events import DomainEvent


@dataclass
class ConviteCriadoEvent(DomainEvent):
    """
    Evento: Administrador criou convite.

    Handlers típicos:
    - Enviar email com o link do convite
    """

    email: str = ""
    tipo_usuario: str = ""
    link: str = ""
    expira_em: str = ""
    comarca: Optional[str] = None
    departamento: Optional[str] = None
    criado_por_id: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Convite"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "tipo_usuario": self.tipo_usuario,
            "link": self.link,
            "expira_em": self.expira_em,
            "comarca": self.comarca,
            "departamento": self.departamento,
            "criado_por_id": self.criado_por_id,
        }


@dataclass
class ConviteReenviadoEvent(ConviteCriadoEvent):
    """Evento: Convite pendente reenviado (mesmo link)."""


@dataclass
class ConviteAtivadoEvent(DomainEvent):
    """Evento: Convite usado para criar conta."""

    email: str = ""
    usuario_id: str = ""
    ip_ativacao: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Convite"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "usuario_id": self.usuario_id,
            "ip_ativacao": self.ip_ativacao,
        }


@dataclass
class ConviteCanceladoEvent(DomainEvent):
    """Evento: Convite pendente cancelado."""

    email: str = ""
    cancelado_por_id: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Convite"

    def _get_event_data(self) -> Dict[str, Any]:
        return {"email": self.email, "cancelado_por_id": self.cancelado_por_id}


@dataclass
class ConvitesExpiradosEvent(DomainEvent):
    """Evento: Job de expiração marcou convites como expirados."""

    convite_ids: List[str] = field(default_factory=list)

    @property
    def aggregate_type(self) -> str:
        return "Convite"

    def _get_event_data(self) -> Dict[str, Any]:
        return {"convite_ids": self.convite_ids}


@dataclass
class CodigoVerificacaoSolicitadoEvent(DomainEvent):
    """
    Evento: Código de verificação gerado.

    Handlers típicos:
    - Enviar email com o código
    """

    email: str = ""
    codigo: str = ""
    nome: Optional[str] = None
    expira_em: str = ""

    sensitive_fields: ClassVar[FrozenSet[str]] = frozenset({"codigo"})

    @property
    def aggregate_type(self) -> str:
        return "EmailVerification"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "codigo": self.codigo,
            "nome": self.nome,
            "expira_em": self.expira_em,
        }


@dataclass
class EmailVerificadoEvent(DomainEvent):
    """Evento: Código conferido com sucesso."""

    email: str = ""
    ip_verificacao: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "EmailVerification"

    def _get_event_data(self) -> Dict[str, Any]:
        return {"email": self.email, "ip_verificacao": self.ip_verificacao}


@dataclass
class UsuarioCriadoEvent(DomainEvent):
    """
    Evento: Conta criada (via convite ou setup inicial).

    Handlers típicos:
    - Enviar email de boas-vindas
    """

    nome: str = ""
    email: str = ""
    tipo: str = ""
    origem: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Usuario"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "nome": self.nome,
            "email": self.email,
            "tipo": self.tipo,
            "origem": self.origem,
        }


@dataclass
class UsuarioAtualizadoEvent(DomainEvent):
    """Evento: Dados do usuário alterados (admin ou perfil)."""

    campos_alterados: List[str] = field(default_factory=list)
    atualizado_por_id: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Usuario"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "campos_alterados": self.campos_alterados,
            "atualizado_por_id": self.atualizado_por_id,
        }


@dataclass
class ContaBloqueadaEvent(DomainEvent):
    """Evento: Conta bloqueada após falhas consecutivas de login."""

    email: str = ""
    nome: str = ""
    bloqueado_ate: str = ""
    tentativas: int = 0
    ip: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Usuario"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "nome": self.nome,
            "bloqueado_ate": self.bloqueado_ate,
            "tentativas": self.tentativas,
            "ip": self.ip,
        }


@dataclass
class SenhaAlteradaEvent(DomainEvent):
    """Evento: Usuário alterou a própria senha."""

    email: str = ""
    nome: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Usuario"

    def _get_event_data(self) -> Dict[str, Any]:
        return {"email": self.email, "nome": self.nome}


@dataclass
class UsuarioDesativadoEvent(DomainEvent):
    """Evento: Conta desativada (pelo próprio usuário ou por admin)."""

    email: str = ""
    desativado_por_id: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Usuario"

    def _get_event_data(self) -> Dict[str, Any]:
        return {"email": self.email, "desativado_por_id": self.desativado_por_id}
