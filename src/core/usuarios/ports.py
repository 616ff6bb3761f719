"""
Ports (Interfaces) do Domínio de Usuários.

Contratos:
- UsuarioRepository: Contas de acesso
- ConviteRepository: Convites
- EmailVerificationRepository: Códigos de verificação
- PasswordHasher: Hash e conferência de senhas (implementado com
  django.contrib.auth.hashers no adapter)
"""

from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable

from .entities import (
    Convite,
    EmailVerification,
    StatusConvite,
    TipoUsuario,
    Usuario,
)


@runtime_checkable
class UsuarioRepository(Protocol):
    """
    Interface para persistência de usuários.

    Emails são comparados já normalizados (minúsculas).
    """

    def save(self, usuario: Usuario) -> None:
        ...

    def get_by_id(self, usuario_id: str) -> Optional[Usuario]:
        ...

    def get_by_email(self, email: str) -> Optional[Usuario]:
        ...

    def exists_by_email(self, email: str, excluir_id: Optional[str] = None) -> bool:
        ...

    def list_all(self) -> List[Usuario]:
        """Todos os usuários, ordenados por nome."""
        ...

    def list_ativos(self) -> List[Usuario]:
        ...

    def list_by_tipo(self, tipo: TipoUsuario) -> List[Usuario]:
        ...

    def count(self) -> int:
        ...

    def count_admins_ativos(self) -> int:
        ...


@runtime_checkable
class ConviteRepository(Protocol):
    """Interface para persistência de convites."""

    def save(self, convite: Convite) -> None:
        ...

    def get_by_id(self, convite_id: str) -> Optional[Convite]:
        ...

    def get_by_token(self, token: str) -> Optional[Convite]:
        ...

    def exists_pendente_by_email(self, email: str) -> bool:
        ...

    def list_by_criador(self, usuario_id: str) -> List[Convite]:
        """Convites criados pelo usuário, mais recentes primeiro."""
        ...

    def list_pendentes_expirados(self, agora: datetime) -> List[Convite]:
        """Convites PENDENTE com expira_em anterior a ``agora``."""
        ...

    def count(self) -> int:
        ...

    def count_by_status(self, status: StatusConvite) -> int:
        ...


@runtime_checkable
class EmailVerificationRepository(Protocol):
    """Interface para persistência dos códigos de verificação."""

    def save(self, verificacao: EmailVerification) -> None:
        ...

    def get_ultima_by_email(self, email: str) -> Optional[EmailVerification]:
        """Verificação mais recente do email."""
        ...

    def delete_expiradas(self, limite: datetime) -> int:
        """
        Remove verificações expiradas antes de ``limite``.

        Returns:
            Quantidade removida
        """
        ...


@runtime_checkable
class PasswordHasher(Protocol):
    """Hash de senhas (algoritmo definido pela infraestrutura)."""

    def hash(self, senha: str) -> str:
        ...

    def verificar(self, senha: str, senha_hash: str) -> bool:
        ...


class InMemoryUsuarioRepository:
    """Implementação em memória do UsuarioRepository."""

    def __init__(self):
        self._usuarios: dict[str, Usuario] = {}

    def save(self, usuario: Usuario) -> None:
        self._usuarios[usuario.id] = usuario

    def get_by_id(self, usuario_id: str) -> Optional[Usuario]:
        return self._usuarios.get(usuario_id)

    def get_by_email(self, email: str) -> Optional[Usuario]:
        email = (email or "").strip().lower()
        return next((u for u in self._usuarios.values() if u.email == email), None)

    def exists_by_email(self, email: str, excluir_id: Optional[str] = None) -> bool:
        usuario = self.get_by_email(email)
        return usuario is not None and usuario.id != excluir_id

    def list_all(self) -> List[Usuario]:
        return sorted(self._usuarios.values(), key=lambda u: u.nome)

    def list_ativos(self) -> List[Usuario]:
        return [u for u in self.list_all() if u.ativo]

    def list_by_tipo(self, tipo: TipoUsuario) -> List[Usuario]:
        return [u for u in self.list_all() if u.tipo == tipo]

    def count(self) -> int:
        return len(self._usuarios)

    def count_admins_ativos(self) -> int:
        return sum(1 for u in self._usuarios.values() if u.is_admin and u.ativo)

    def clear(self) -> None:
        self._usuarios.clear()


class InMemoryConviteRepository:
    """Implementação em memória do ConviteRepository."""

    def __init__(self):
        self._convites: dict[str, Convite] = {}

    def save(self, convite: Convite) -> None:
        self._convites[convite.id] = convite

    def get_by_id(self, convite_id: str) -> Optional[Convite]:
        return self._convites.get(convite_id)

    def get_by_token(self, token: str) -> Optional[Convite]:
        return next((c for c in self._convites.values() if c.token == token), None)

    def exists_pendente_by_email(self, email: str) -> bool:
        return any(
            c.email == email and c.status == StatusConvite.PENDENTE
            for c in self._convites.values()
        )

    def list_by_criador(self, usuario_id: str) -> List[Convite]:
        return sorted(
            (c for c in self._convites.values() if c.criado_por_id == usuario_id),
            key=lambda c: c.criado_em,
            reverse=True,
        )

    def list_pendentes_expirados(self, agora: datetime) -> List[Convite]:
        return [
            c for c in self._convites.values()
            if c.status == StatusConvite.PENDENTE and c.expira_em < agora
        ]

    def count(self) -> int:
        return len(self._convites)

    def count_by_status(self, status: StatusConvite) -> int:
        return sum(1 for c in self._convites.values() if c.status == status)

    def clear(self) -> None:
        self._convites.clear()


class InMemoryEmailVerificationRepository:
    """Implementação em memória do EmailVerificationRepository."""

    def __init__(self):
        self._verificacoes: dict[str, EmailVerification] = {}

    def save(self, verificacao: EmailVerification) -> None:
        self._verificacoes[verificacao.id] = verificacao

    def get_ultima_by_email(self, email: str) -> Optional[EmailVerification]:
        email = (email or "").strip().lower()
        candidatas = [v for v in self._verificacoes.values() if v.email == email]
        return max(candidatas, key=lambda v: v.criado_em) if candidatas else None

    def delete_expiradas(self, limite: datetime) -> int:
        expiradas = [k for k, v in self._verificacoes.items() if v.expira_em < limite]
        for chave in expiradas:
            del self._verificacoes[chave]
        return len(expiradas)

    def clear(self) -> None:
        self._verificacoes.clear()


class PlainPasswordHasher:
    """
    PasswordHasher sem criptografia, apenas para testes.

    Não usar em produção!
    """

    PREFIXO = "plain$"

    def hash(self, senha: str) -> str:
        return f"{self.PREFIXO}{senha}"

    def verificar(self, senha: str, senha_hash: str) -> bool:
        return senha_hash == self.hash(senha)
