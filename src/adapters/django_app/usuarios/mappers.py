"""
Mappers para conversão entre Entities (Core) e Models (Django)
do domínio de Usuários.
"""

from typing import Any, Dict

from src.core.usuarios.entities import (
    Convite,
    EmailVerification,
    StatusConvite,
    StatusUsuario,
    TipoUsuario,
    Usuario,
)

from .models import ConviteModel, EmailVerificationModel, UsuarioModel


class UsuarioMapper:
    """Mapper para Usuario."""

    @staticmethod
    def to_model_data(entity: Usuario) -> Dict[str, Any]:
        return {
            'nome': entity.nome,
            'email': entity.email,
            'senha_hash': entity.senha_hash,
            'tipo': entity.tipo.value,
            'status': entity.status.value,
            'ativo': entity.ativo,
            'departamento': entity.departamento,
            'comarca': entity.comarca,
            'cargo': entity.cargo,
            'avatar': entity.avatar,
            'email_verificado': entity.email_verificado,
            'data_verificacao_email': entity.data_verificacao_email,
            'tentativas_login_falhadas': entity.tentativas_login_falhadas,
            'bloqueado_ate': entity.bloqueado_ate,
            'deve_trocar_senha': entity.deve_trocar_senha,
            'senha_expira_em': entity.senha_expira_em,
            'ultimo_login': entity.ultimo_login,
            'criado_em': entity.criado_em,
            'atualizado_em': entity.atualizado_em,
        }

    @staticmethod
    def to_entity(model: UsuarioModel) -> Usuario:
        return Usuario(
            id=model.id,
            nome=model.nome,
            email=model.email,
            senha_hash=model.senha_hash,
            tipo=TipoUsuario(model.tipo),
            status=StatusUsuario(model.status),
            ativo=model.ativo,
            departamento=model.departamento,
            comarca=model.comarca,
            cargo=model.cargo,
            avatar=model.avatar,
            email_verificado=model.email_verificado,
            data_verificacao_email=model.data_verificacao_email,
            tentativas_login_falhadas=model.tentativas_login_falhadas,
            bloqueado_ate=model.bloqueado_ate,
            deve_trocar_senha=model.deve_trocar_senha,
            senha_expira_em=model.senha_expira_em,
            ultimo_login=model.ultimo_login,
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
        )


class ConviteMapper:
    """Mapper para Convite."""

    @staticmethod
    def to_model_data(entity: Convite) -> Dict[str, Any]:
        return {
            'token': entity.token,
            'email': entity.email,
            'tipo_usuario': entity.tipo_usuario.value,
            'status': entity.status.value,
            'comarca': entity.comarca,
            'departamento': entity.departamento,
            'criado_por_id': entity.criado_por_id,
            'usuario_id': entity.usuario_id,
            'ip_criacao': entity.ip_criacao,
            'ip_ativacao': entity.ip_ativacao,
            'quantidade_usos': entity.quantidade_usos,
            'usos_realizados': entity.usos_realizados,
            'criado_em': entity.criado_em,
            'expira_em': entity.expira_em,
            'ativado_em': entity.ativado_em,
        }

    @staticmethod
    def to_entity(model: ConviteModel) -> Convite:
        return Convite(
            id=model.id,
            token=model.token,
            email=model.email,
            tipo_usuario=TipoUsuario(model.tipo_usuario),
            status=StatusConvite(model.status),
            comarca=model.comarca,
            departamento=model.departamento,
            criado_por_id=model.criado_por_id,
            usuario_id=model.usuario_id,
            ip_criacao=model.ip_criacao,
            ip_ativacao=model.ip_ativacao,
            quantidade_usos=model.quantidade_usos,
            usos_realizados=model.usos_realizados,
            criado_em=model.criado_em,
            expira_em=model.expira_em,
            ativado_em=model.ativado_em,
        )


class EmailVerificationMapper:
    """Mapper para EmailVerification."""

    @staticmethod
    def to_model_data(entity: EmailVerification) -> Dict[str, Any]:
        return {
            'email': entity.email,
            'codigo': entity.codigo,
            'nome': entity.nome,
            'tipo_usuario': entity.tipo_usuario.value,
            'verificado': entity.verificado,
            'tentativas': entity.tentativas,
            'max_tentativas': entity.max_tentativas,
            'criado_em': entity.criado_em,
            'expira_em': entity.expira_em,
            'verificado_em': entity.verificado_em,
            'ip_solicitacao': entity.ip_solicitacao,
            'ip_verificacao': entity.ip_verificacao,
        }

    @staticmethod
    def to_entity(model: EmailVerificationModel) -> EmailVerification:
        return EmailVerification(
            id=model.id,
            email=model.email,
            codigo=model.codigo,
            nome=model.nome,
            tipo_usuario=TipoUsuario(model.tipo_usuario),
            verificado=model.verificado,
            tentativas=model.tentativas,
            max_tentativas=model.max_tentativas,
            criado_em=model.criado_em,
            expira_em=model.expira_em,
            verificado_em=model.verificado_em,
            ip_solicitacao=model.ip_solicitacao,
            ip_verificacao=model.ip_verificacao,
        )
