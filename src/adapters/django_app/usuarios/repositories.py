"""
Repositórios Django para o domínio de Usuários.

Implementam os ports definidos em src/core/usuarios/ports.py.
"""

from datetime import datetime
from typing import List, Optional
import logging

from src.core.usuarios.entities import (
    Convite,
    EmailVerification,
    StatusConvite,
    TipoUsuario,
    Usuario,
)

from ..shared.repository import BaseRepository
from .mappers import ConviteMapper, EmailVerificationMapper, UsuarioMapper
from .models import ConviteModel, EmailVerificationModel, UsuarioModel

logger = logging.getLogger(__name__)


def _normalizar_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class DjangoUsuarioRepository(BaseRepository[Usuario, UsuarioModel]):
    """Implementação do UsuarioRepository usando Django ORM."""

    model_class = UsuarioModel
    mapper = UsuarioMapper()
    default_ordering = ("nome",)

    def get_by_email(self, email: str) -> Optional[Usuario]:
        model = UsuarioModel.objects.filter(email=_normalizar_email(email)).first()
        return self.mapper.to_entity(model) if model else None

    def exists_by_email(self, email: str, excluir_id: Optional[str] = None) -> bool:
        qs = UsuarioModel.objects.filter(email=_normalizar_email(email))
        if excluir_id:
            qs = qs.exclude(id=excluir_id)
        return qs.exists()

    def list_ativos(self) -> List[Usuario]:
        return self._to_entities(self._get_base_queryset().filter(ativo=True))

    def list_by_tipo(self, tipo: TipoUsuario) -> List[Usuario]:
        return self._to_entities(self._get_base_queryset().filter(tipo=tipo.value))

    def count_admins_ativos(self) -> int:
        return UsuarioModel.objects.filter(tipo=TipoUsuario.ADMIN.value, ativo=True).count()


class DjangoConviteRepository(BaseRepository[Convite, ConviteModel]):
    """Implementação do ConviteRepository usando Django ORM."""

    model_class = ConviteModel
    mapper = ConviteMapper()

    def get_by_token(self, token: str) -> Optional[Convite]:
        model = ConviteModel.objects.filter(token=token).first()
        return self.mapper.to_entity(model) if model else None

    def exists_pendente_by_email(self, email: str) -> bool:
        return ConviteModel.objects.filter(
            email=_normalizar_email(email),
            status=StatusConvite.PENDENTE.value,
        ).exists()

    def list_by_criador(self, usuario_id: str) -> List[Convite]:
        """Mais recentes primeiro."""
        return self._to_entities(self._get_base_queryset().filter(criado_por_id=usuario_id))

    def list_pendentes_expirados(self, agora: datetime) -> List[Convite]:
        qs = self._get_base_queryset().filter(
            status=StatusConvite.PENDENTE.value,
            expira_em__lt=agora,
        )
        return self._to_entities(qs)

    def count_by_status(self, status: StatusConvite) -> int:
        return ConviteModel.objects.filter(status=status.value).count()


class DjangoEmailVerificationRepository(BaseRepository[EmailVerification, EmailVerificationModel]):
    """Implementação do EmailVerificationRepository usando Django ORM."""

    model_class = EmailVerificationModel
    mapper = EmailVerificationMapper()

    def get_ultima_by_email(self, email: str) -> Optional[EmailVerification]:
        model = self._get_base_queryset().filter(email=_normalizar_email(email)).first()
        return self.mapper.to_entity(model) if model else None

    def delete_expiradas(self, limite: datetime) -> int:
        deleted, _ = EmailVerificationModel.objects.filter(expira_em__lt=limite).delete()
        if deleted:
            logger.info(f"{deleted} verificações de email expiradas removidas")
        return deleted
