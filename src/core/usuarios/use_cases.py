"""
Use Cases (Application Services) do Domínio de Usuários.

Use Cases implementados:

Convites:
- CriarConviteService, ValidarConviteService, AtivarConviteService
- ListarConvitesService, ObterConviteService, CancelarConviteService
- ReenviarConviteService, EstatisticasConvitesService, ExpirarConvitesService

Verificação de email:
- SolicitarCodigoVerificacaoService, VerificarCodigoService
- ConsultarStatusVerificacaoService, LimparVerificacoesExpiradasService

Contas:
- AutenticarUsuarioService, ListarUsuariosService, ObterUsuarioService
- AtualizarUsuarioService, AtualizarPerfilService, AlterarSenhaService
- DesativarUsuarioService

Setup inicial:
- StatusSetupService, CriarPrimeiroAdminService
"""

from datetime import datetime
from typing import List, Optional
import logging

from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import (
    AccountLockedError,
    AuthenticationError,
    BusinessRuleViolationError,
    EntityNotFoundError,
    ValidationError,
)
from src.core.custodiados.documentos import contato_valido

from .entities import (
    Convite,
    EmailVerification,
    StatusConvite,
    TipoUsuario,
    Usuario,
    normalizar_email,
    validar_email,
    validar_senha_forte,
)
from .dtos import (
    AlterarSenhaInputDTO,
    AtivarConviteInputDTO,
    AtualizarPerfilInputDTO,
    AtualizarUsuarioInputDTO,
    AutenticarInputDTO,
    ConviteListItemDTO,
    ConviteOutputDTO,
    CriarConviteInputDTO,
    CriarPrimeiroAdminInputDTO,
    SolicitarCodigoInputDTO,
    StatusVerificacaoDTO,
    UsuarioOutputDTO,
    ValidarConviteOutputDTO,
    VerificarCodigoInputDTO,
)
from .events import (
    CodigoVerificacaoSolicitadoEvent,
    ContaBloqueadaEvent,
    ConviteAtivadoEvent,
    ConviteCanceladoEvent,
    ConviteCriadoEvent,
    ConviteReenviadoEvent,
    ConvitesExpiradosEvent,
    EmailVerificadoEvent,
    SenhaAlteradaEvent,
    UsuarioAtualizadoEvent,
    UsuarioCriadoEvent,
    UsuarioDesativadoEvent,
)
from .ports import (
    ConviteRepository,
    EmailVerificationRepository,
    PasswordHasher,
    UsuarioRepository,
)

logger = logging.getLogger(__name__)


FRONTEND_URL_PADRAO = "http://localhost:3000"
DOMINIO_INSTITUCIONAL_PADRAO = "tjba.jus.br"
DEPARTAMENTO_ADMIN_PADRAO = "Administração do Sistema"
APP_NAME = "ACLP - Sistema TJBA"


def obter_usuario(repo: UsuarioRepository, usuario_id: str) -> Usuario:
    usuario = repo.get_by_id(usuario_id) if usuario_id else None
    if not usuario:
        raise EntityNotFoundError(
            "Usuário não encontrado",
            entity_type="Usuario",
            entity_id=usuario_id
        )
    return usuario


def obter_autenticado(repo: UsuarioRepository, usuario_id: Optional[str]) -> Usuario:
    """
    Raises:
        AuthenticationError: Se não há usuário autenticado válido
    """
    usuario = repo.get_by_id(usuario_id) if usuario_id else None
    if not usuario or not usuario.ativo:
        raise AuthenticationError("Usuário não autenticado")
    return usuario


def obter_admin(repo: UsuarioRepository, usuario_id: Optional[str]) -> Usuario:
    """
    Raises:
        AuthenticationError: Se não autenticado
        BusinessRuleViolationError: Se não é administrador
    """
    usuario = obter_autenticado(repo, usuario_id)
    if not usuario.is_admin:
        raise BusinessRuleViolationError(
            "Apenas administradores podem realizar esta operação",
            rule="requer_admin"
        )
    return usuario


def _obter_convite(repo: ConviteRepository, convite_id: str) -> Convite:
    convite = repo.get_by_id(convite_id) if convite_id else None
    if not convite:
        raise EntityNotFoundError(
            "Convite não encontrado",
            entity_type="Convite",
            entity_id=convite_id
        )
    return convite


def _parse_tipo_usuario(valor: Optional[str], padrao: Optional[TipoUsuario] = None) -> TipoUsuario:
    if not valor:
        if padrao:
            return padrao
        raise ValidationError("Tipo de usuário é obrigatório", field="tipo_usuario")
    try:
        return TipoUsuario.from_string(valor)
    except ValueError as e:
        raise ValidationError(str(e), field="tipo_usuario")


# =============================================================================
# Convites
# =============================================================================

class CriarConviteService:
    """
    Use Case: Administrador convida novo usuário.

    Fluxo:
    1. Validar administrador autenticado
    2. Normalizar email e verificar duplicidade (usuário ou convite pendente)
    3. Criar convite com comarca/departamento do administrador
    4. Disparar ConviteCriado (o envio do email é assíncrono e uma
       falha de envio não desfaz o convite)
    """

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        convite_repo: ConviteRepository,
        uow: UnitOfWork,
        frontend_url: str = FRONTEND_URL_PADRAO,
        validade_dias: int = Convite.VALIDADE_DIAS,
    ):
        self.usuario_repo = usuario_repo
        self.convite_repo = convite_repo
        self.uow = uow
        self.frontend_url = frontend_url
        self.validade_dias = validade_dias

    def execute(self, input_dto: CriarConviteInputDTO, agora: Optional[datetime] = None) -> ConviteOutputDTO:
        """
        Raises:
            AuthenticationError: Se não autenticado
            ValidationError: Se email ou tipo inválidos
            BusinessRuleViolationError: Se email já cadastrado ou convidado
        """
        admin = obter_admin(self.usuario_repo, input_dto.criado_por_id)
        validar_email(input_dto.email)
        email = normalizar_email(input_dto.email)
        tipo = _parse_tipo_usuario(input_dto.tipo_usuario, TipoUsuario.USUARIO)

        with self.uow:
            if self.usuario_repo.exists_by_email(email):
                raise BusinessRuleViolationError(
                    "Email já cadastrado no sistema",
                    rule="email_duplicado"
                )
            if self.convite_repo.exists_pendente_by_email(email):
                raise BusinessRuleViolationError(
                    "Já existe um convite pendente para este email",
                    rule="convite_pendente"
                )

            convite = Convite.criar(
                email=email,
                tipo_usuario=tipo,
                criado_por_id=admin.id,
                comarca=admin.comarca,
                departamento=admin.departamento,
                ip_criacao=input_dto.ip_criacao,
                validade_dias=self.validade_dias,
                agora=agora,
            )
            self.convite_repo.save(convite)

            self.uow.publish_event(
                ConviteCriadoEvent(
                    aggregate_id=convite.id,
                    email=convite.email,
                    tipo_usuario=convite.tipo_usuario.name,
                    link=convite.link(self.frontend_url),
                    expira_em=convite.expira_em.isoformat(),
                    comarca=convite.comarca,
                    departamento=convite.departamento,
                    criado_por_id=admin.id,
                )
            )

        logger.info(f"Convite criado - ID: {convite.id}, Email: {convite.email}")
        return ConviteOutputDTO.from_entity(convite, self.frontend_url, admin.nome)


class ValidarConviteService:
    """
    Use Case: Validar token de convite (tela de criação de conta).

    Nunca lança exceção para token inválido: o motivo vai em
    ``mensagem``.
    """

    def __init__(self, convite_repo: ConviteRepository):
        self.convite_repo = convite_repo

    def execute(self, token: str, agora: Optional[datetime] = None) -> ValidarConviteOutputDTO:
        convite = self.convite_repo.get_by_token(token) if token else None

        if convite is None:
            return ValidarConviteOutputDTO(valido=False, mensagem="Convite não encontrado")
        if convite.foi_utilizado:
            return ValidarConviteOutputDTO(valido=False, mensagem="Este convite já foi utilizado")
        if convite.is_expirado(agora):
            return ValidarConviteOutputDTO(
                valido=False,
                mensagem=f"Este convite expirou em {convite.expira_em.strftime('%d/%m/%Y %H:%M')}",
            )
        if convite.status != StatusConvite.PENDENTE:
            mensagens = {
                StatusConvite.ATIVADO: "Este convite já foi utilizado",
                StatusConvite.CANCELADO: "Este convite foi cancelado",
            }
            return ValidarConviteOutputDTO(
                valido=False,
                mensagem=mensagens.get(convite.status, "Este convite não está mais disponível"),
            )

        return ValidarConviteOutputDTO(
            valido=True,
            mensagem="Convite válido",
            email=convite.email,
            tipo_usuario=convite.tipo_usuario.name,
            comarca=convite.comarca,
            departamento=convite.departamento,
            expira_em=convite.expira_em,
        )


class AtivarConviteService:
    """
    Use Case: Criar conta a partir de convite.

    O usuário criado já nasce ATIVO e com email verificado (o link
    foi recebido no próprio email).
    """

    MENSAGEM_SUCESSO = "Conta criada com sucesso! Você já pode fazer login."

    def __init__(
        self,
        convite_repo: ConviteRepository,
        usuario_repo: UsuarioRepository,
        password_hasher: PasswordHasher,
        uow: UnitOfWork,
    ):
        self.convite_repo = convite_repo
        self.usuario_repo = usuario_repo
        self.password_hasher = password_hasher
        self.uow = uow

    def execute(self, input_dto: AtivarConviteInputDTO, agora: Optional[datetime] = None) -> dict:
        agora = agora or datetime.now()

        with self.uow:
            convite = self.convite_repo.get_by_token(input_dto.token) if input_dto.token else None
            if not convite:
                raise EntityNotFoundError(
                    "Convite não encontrado",
                    entity_type="Convite",
                    entity_id=input_dto.token
                )
            if convite.foi_utilizado:
                raise BusinessRuleViolationError(
                    "Este convite já foi utilizado",
                    rule="convite_utilizado"
                )
            if not convite.is_valido(agora):
                raise BusinessRuleViolationError(
                    "Convite inválido ou expirado",
                    rule="convite_invalido"
                )
            if not input_dto.senhas_coincidem:
                raise ValidationError("As senhas não coincidem", field="confirmar_senha")
            validar_senha_forte(input_dto.senha)

            if self.usuario_repo.exists_by_email(convite.email):
                raise BusinessRuleViolationError(
                    "Este email já está cadastrado no sistema",
                    rule="email_duplicado"
                )

            usuario = Usuario.criar(
                nome=input_dto.nome,
                email=convite.email,
                senha_hash=self.password_hasher.hash(input_dto.senha),
                tipo=convite.tipo_usuario,
                departamento=convite.departamento,
                comarca=convite.comarca,
                cargo=input_dto.cargo,
                email_verificado=True,
                agora=agora,
            )
            self.usuario_repo.save(usuario)

            convite.ativar(usuario.id, input_dto.ip_ativacao, agora)
            self.convite_repo.save(convite)

            self.uow.publish_event(
                ConviteAtivadoEvent(
                    aggregate_id=convite.id,
                    email=convite.email,
                    usuario_id=usuario.id,
                    ip_ativacao=input_dto.ip_ativacao,
                )
            )
            self.uow.publish_event(
                UsuarioCriadoEvent(
                    aggregate_id=usuario.id,
                    nome=usuario.nome,
                    email=usuario.email,
                    tipo=usuario.tipo.name,
                    origem="convite",
                )
            )

        logger.info(f"Convite ativado - Usuario: {usuario.id}, Email: {usuario.email}")
        return {
            "sucesso": True,
            "mensagem": self.MENSAGEM_SUCESSO,
            "usuario": UsuarioOutputDTO.from_entity(usuario).to_dict(),
        }


class ListarConvitesService:
    """Use Case: Convites criados pelo administrador autenticado."""

    def __init__(self, convite_repo: ConviteRepository, usuario_repo: UsuarioRepository):
        self.convite_repo = convite_repo
        self.usuario_repo = usuario_repo

    def execute(self, usuario_id: Optional[str], agora: Optional[datetime] = None) -> List[ConviteListItemDTO]:
        admin = obter_admin(self.usuario_repo, usuario_id)
        return [
            ConviteListItemDTO.from_entity(c, agora)
            for c in self.convite_repo.list_by_criador(admin.id)
        ]


class ObterConviteService:
    def __init__(
        self,
        convite_repo: ConviteRepository,
        usuario_repo: UsuarioRepository,
        frontend_url: str = FRONTEND_URL_PADRAO,
    ):
        self.convite_repo = convite_repo
        self.usuario_repo = usuario_repo
        self.frontend_url = frontend_url

    def execute(self, convite_id: str) -> ConviteOutputDTO:
        convite = _obter_convite(self.convite_repo, convite_id)
        criador = self.usuario_repo.get_by_id(convite.criado_por_id) if convite.criado_por_id else None
        return ConviteOutputDTO.from_entity(
            convite,
            self.frontend_url,
            criador.nome if criador else None,
        )


class CancelarConviteService:
    """Use Case: Cancelar convite pendente."""

    def __init__(self, convite_repo: ConviteRepository, usuario_repo: UsuarioRepository, uow: UnitOfWork):
        self.convite_repo = convite_repo
        self.usuario_repo = usuario_repo
        self.uow = uow

    def execute(self, convite_id: str, cancelado_por_id: Optional[str]) -> None:
        admin = obter_admin(self.usuario_repo, cancelado_por_id)

        with self.uow:
            convite = _obter_convite(self.convite_repo, convite_id)
            convite.cancelar()
            self.convite_repo.save(convite)

            self.uow.publish_event(
                ConviteCanceladoEvent(
                    aggregate_id=convite.id,
                    email=convite.email,
                    cancelado_por_id=admin.id,
                )
            )

        logger.info(f"Convite cancelado - ID: {convite_id}")


class ReenviarConviteService:
    """Use Case: Reenviar email de convite pendente (mesmo token)."""

    def __init__(
        self,
        convite_repo: ConviteRepository,
        usuario_repo: UsuarioRepository,
        uow: UnitOfWork,
        frontend_url: str = FRONTEND_URL_PADRAO,
    ):
        self.convite_repo = convite_repo
        self.usuario_repo = usuario_repo
        self.uow = uow
        self.frontend_url = frontend_url

    def execute(
        self,
        convite_id: str,
        reenviado_por_id: Optional[str],
        agora: Optional[datetime] = None,
    ) -> ConviteOutputDTO:
        admin = obter_admin(self.usuario_repo, reenviado_por_id)

        with self.uow:
            convite = _obter_convite(self.convite_repo, convite_id)
            if convite.status != StatusConvite.PENDENTE:
                raise BusinessRuleViolationError(
                    "Apenas convites pendentes podem ser reenviados",
                    rule="convite_nao_pendente"
                )
            if convite.is_expirado(agora):
                raise BusinessRuleViolationError(
                    "Convite expirado. Crie um novo convite.",
                    rule="convite_expirado"
                )
            if convite.foi_utilizado:
                raise BusinessRuleViolationError(
                    "Este convite já foi utilizado",
                    rule="convite_utilizado"
                )

            self.uow.publish_event(
                ConviteReenviadoEvent(
                    aggregate_id=convite.id,
                    email=convite.email,
                    tipo_usuario=convite.tipo_usuario.name,
                    link=convite.link(self.frontend_url),
                    expira_em=convite.expira_em.isoformat(),
                    comarca=convite.comarca,
                    departamento=convite.departamento,
                    criado_por_id=admin.id,
                )
            )

        logger.info(f"Convite reenviado - ID: {convite.id}, Email: {convite.email}")
        return ConviteOutputDTO.from_entity(convite, self.frontend_url, admin.nome)


class EstatisticasConvitesService:
    def __init__(self, convite_repo: ConviteRepository):
        self.convite_repo = convite_repo

    def execute(self) -> dict:
        return {
            "total": self.convite_repo.count(),
            "pendentes": self.convite_repo.count_by_status(StatusConvite.PENDENTE),
            "ativados": self.convite_repo.count_by_status(StatusConvite.ATIVADO),
            "expirados": self.convite_repo.count_by_status(StatusConvite.EXPIRADO),
            "cancelados": self.convite_repo.count_by_status(StatusConvite.CANCELADO),
        }


class ExpirarConvitesService:
    """Use Case: Job diário que marca convites pendentes vencidos."""

    def __init__(self, convite_repo: ConviteRepository, uow: UnitOfWork):
        self.convite_repo = convite_repo
        self.uow = uow

    def execute(self, agora: Optional[datetime] = None) -> int:
        agora = agora or datetime.now()

        with self.uow:
            convites = self.convite_repo.list_pendentes_expirados(agora)
            for convite in convites:
                convite.expirar()
                self.convite_repo.save(convite)

            if convites:
                self.uow.publish_event(
                    ConvitesExpiradosEvent(
                        aggregate_id=convites[0].id,
                        convite_ids=[c.id for c in convites],
                    )
                )

        logger.info(f"Convites expirados: {len(convites)}")
        return len(convites)


# =============================================================================
# Verificação de email
# =============================================================================

class SolicitarCodigoVerificacaoService:
    """
    Use Case: Gerar código de verificação para um email ainda não
    cadastrado. O código é enviado por email de forma assíncrona.
    """

    def __init__(
        self,
        verificacao_repo: EmailVerificationRepository,
        usuario_repo: UsuarioRepository,
        uow: UnitOfWork,
        validade_minutos: int = EmailVerification.VALIDADE_MINUTOS,
        max_tentativas: int = EmailVerification.MAX_TENTATIVAS,
    ):
        self.verificacao_repo = verificacao_repo
        self.usuario_repo = usuario_repo
        self.uow = uow
        self.validade_minutos = validade_minutos
        self.max_tentativas = max_tentativas

    def execute(self, input_dto: SolicitarCodigoInputDTO, agora: Optional[datetime] = None) -> dict:
        validar_email(input_dto.email)
        email = normalizar_email(input_dto.email)
        tipo = _parse_tipo_usuario(input_dto.tipo_usuario, TipoUsuario.USUARIO)

        if self.usuario_repo.exists_by_email(email):
            raise BusinessRuleViolationError("Este email já está cadastrado", rule="email_duplicado")

        with self.uow:
            verificacao = EmailVerification.criar(
                email=email,
                nome=input_dto.nome,
                tipo_usuario=tipo,
                ip_solicitacao=input_dto.ip,
                validade_minutos=self.validade_minutos,
                max_tentativas=self.max_tentativas,
                agora=agora,
            )
            self.verificacao_repo.save(verificacao)

            self.uow.publish_event(
                CodigoVerificacaoSolicitadoEvent(
                    aggregate_id=verificacao.id,
                    email=email,
                    codigo=verificacao.codigo,
                    nome=verificacao.nome,
                    expira_em=verificacao.expira_em.isoformat(),
                )
            )

        logger.info(f"Código de verificação gerado para: {email}")
        return {
            "sucesso": True,
            "mensagem": f"Código de verificação enviado para {email}",
            "email": email,
            "expira_em": verificacao.expira_em.isoformat(),
        }


class VerificarCodigoService:
    """
    Use Case: Conferir código de verificação.

    Tentativas erradas são persistidas antes do erro, para que o
    limite de tentativas valha entre requisições.
    """

    def __init__(self, verificacao_repo: EmailVerificationRepository, uow: UnitOfWork):
        self.verificacao_repo = verificacao_repo
        self.uow = uow

    def execute(self, input_dto: VerificarCodigoInputDTO, agora: Optional[datetime] = None) -> dict:
        if not input_dto.codigo or not input_dto.codigo.strip():
            raise ValidationError("Código é obrigatório", field="codigo")

        email = normalizar_email(input_dto.email)
        verificacao = self.verificacao_repo.get_ultima_by_email(email)
        if verificacao is None:
            raise EntityNotFoundError(
                "Nenhum código de verificação solicitado para este email",
                entity_type="EmailVerification",
                entity_id=email
            )

        with self.uow:
            conferiu = verificacao.tentar(input_dto.codigo, input_dto.ip, agora)
            self.verificacao_repo.save(verificacao)
            if conferiu:
                self.uow.publish_event(
                    EmailVerificadoEvent(
                        aggregate_id=verificacao.id,
                        email=email,
                        ip_verificacao=input_dto.ip,
                    )
                )

        if not conferiu:
            logger.warning(
                f"Código incorreto para {email} "
                f"({verificacao.tentativas_restantes} tentativas restantes)"
            )
            raise ValidationError("Código incorreto", field="codigo")

        return {
            "sucesso": True,
            "email_verificado": True,
            "mensagem": "Email verificado com sucesso",
        }


class ConsultarStatusVerificacaoService:
    def __init__(self, verificacao_repo: EmailVerificationRepository):
        self.verificacao_repo = verificacao_repo

    def execute(self, email: str, agora: Optional[datetime] = None) -> StatusVerificacaoDTO:
        email = normalizar_email(email)
        verificacao = self.verificacao_repo.get_ultima_by_email(email)
        return StatusVerificacaoDTO.from_entity(email, verificacao, agora)


class LimparVerificacoesExpiradasService:
    """Use Case: Job diário que remove códigos expirados."""

    def __init__(self, verificacao_repo: EmailVerificationRepository, uow: UnitOfWork):
        self.verificacao_repo = verificacao_repo
        self.uow = uow

    def execute(self, agora: Optional[datetime] = None) -> int:
        agora = agora or datetime.now()
        with self.uow:
            removidas = self.verificacao_repo.delete_expiradas(agora)
        logger.info(f"Verificações expiradas removidas: {removidas}")
        return removidas


# =============================================================================
# Contas
# =============================================================================

class AutenticarUsuarioService:
    """
    Use Case: Login com email e senha.

    Após 5 falhas consecutivas a conta fica bloqueada por 30 minutos.
    A falha é persistida antes do erro de autenticação.
    """

    MENSAGEM_CREDENCIAIS = "Email ou senha incorretos"
    MENSAGEM_DESATIVADA = "Conta desativada. Entre em contato com o administrador."

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        password_hasher: PasswordHasher,
        uow: UnitOfWork,
    ):
        self.usuario_repo = usuario_repo
        self.password_hasher = password_hasher
        self.uow = uow

    def execute(self, input_dto: AutenticarInputDTO, agora: Optional[datetime] = None) -> UsuarioOutputDTO:
        """
        Raises:
            AuthenticationError: Credenciais inválidas ou conta desativada
            AccountLockedError: Conta temporariamente bloqueada
        """
        agora = agora or datetime.now()
        email = normalizar_email(input_dto.email)

        usuario = self.usuario_repo.get_by_email(email) if email else None
        if usuario is None:
            logger.warning(f"Tentativa de login com email desconhecido: {email} (IP: {input_dto.ip})")
            raise AuthenticationError(self.MENSAGEM_CREDENCIAIS)

        if usuario.esta_bloqueado(agora):
            raise AccountLockedError(
                f"Conta bloqueada. Tente novamente em "
                f"{usuario.minutos_bloqueio_restantes(agora)} minutos.",
                bloqueado_ate=usuario.bloqueado_ate,
            )
        if not usuario.pode_logar(agora):
            raise AuthenticationError(self.MENSAGEM_DESATIVADA)

        if not self.password_hasher.verificar(input_dto.senha or "", usuario.senha_hash):
            with self.uow:
                bloqueou = usuario.registrar_falha_login(agora)
                self.usuario_repo.save(usuario)
                if bloqueou:
                    self.uow.publish_event(
                        ContaBloqueadaEvent(
                            aggregate_id=usuario.id,
                            email=usuario.email,
                            nome=usuario.nome,
                            bloqueado_ate=usuario.bloqueado_ate.isoformat(),
                            tentativas=usuario.tentativas_login_falhadas,
                            ip=input_dto.ip,
                        )
                    )
            logger.warning(
                f"Falha de login - Email: {email}, IP: {input_dto.ip}, "
                f"tentativas: {usuario.tentativas_login_falhadas}"
            )
            raise AuthenticationError(self.MENSAGEM_CREDENCIAIS)

        with self.uow:
            usuario.registrar_login(agora)
            self.usuario_repo.save(usuario)

        logger.info(f"Login bem-sucedido - Usuario: {usuario.email}, IP: {input_dto.ip}")
        return UsuarioOutputDTO.from_entity(usuario)


class ListarUsuariosService:
    def __init__(self, usuario_repo: UsuarioRepository):
        self.usuario_repo = usuario_repo

    def execute(self, incluir_inativos: bool = False, tipo: Optional[str] = None) -> List[UsuarioOutputDTO]:
        if tipo:
            usuarios = self.usuario_repo.list_by_tipo(_parse_tipo_usuario(tipo))
            if not incluir_inativos:
                usuarios = [u for u in usuarios if u.ativo]
        elif incluir_inativos:
            usuarios = self.usuario_repo.list_all()
        else:
            usuarios = self.usuario_repo.list_ativos()
        return [UsuarioOutputDTO.from_entity(u) for u in usuarios]


class ObterUsuarioService:
    def __init__(self, usuario_repo: UsuarioRepository):
        self.usuario_repo = usuario_repo

    def execute(self, usuario_id: str) -> UsuarioOutputDTO:
        return UsuarioOutputDTO.from_entity(obter_usuario(self.usuario_repo, usuario_id))


class AtualizarUsuarioService:
    """
    Use Case: Atualização administrativa (parcial) de usuário.

    Não permite deixar o sistema sem administrador ativo.
    """

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        password_hasher: PasswordHasher,
        uow: UnitOfWork,
    ):
        self.usuario_repo = usuario_repo
        self.password_hasher = password_hasher
        self.uow = uow

    def execute(self, input_dto: AtualizarUsuarioInputDTO) -> UsuarioOutputDTO:
        admin = obter_admin(self.usuario_repo, input_dto.atualizado_por_id)

        with self.uow:
            usuario = obter_usuario(self.usuario_repo, input_dto.usuario_id)

            campos = usuario.atualizar_perfil(
                nome=input_dto.nome,
                departamento=input_dto.departamento,
                comarca=input_dto.comarca,
                cargo=input_dto.cargo,
                avatar=input_dto.avatar,
            )

            if input_dto.email is not None and normalizar_email(input_dto.email) != usuario.email:
                if self.usuario_repo.exists_by_email(input_dto.email, excluir_id=usuario.id):
                    raise BusinessRuleViolationError("Email já está em uso", rule="email_duplicado")
                usuario.alterar_email(input_dto.email)
                campos.append("email")

            if input_dto.senha:
                validar_senha_forte(input_dto.senha)
                usuario.alterar_senha(self.password_hasher.hash(input_dto.senha))
                campos.append("senha")

            perde_admin = (
                usuario.is_admin and usuario.ativo
                and (
                    (input_dto.tipo and _parse_tipo_usuario(input_dto.tipo) != TipoUsuario.ADMIN)
                    or input_dto.ativo is False
                )
            )
            if perde_admin and self.usuario_repo.count_admins_ativos() <= 1:
                raise BusinessRuleViolationError(
                    "Não é possível remover o último administrador do sistema",
                    rule="ultimo_admin"
                )

            if input_dto.tipo:
                usuario.tipo = _parse_tipo_usuario(input_dto.tipo)
                campos.append("tipo")
            if input_dto.ativo is not None and input_dto.ativo != usuario.ativo:
                if input_dto.ativo:
                    usuario.reativar()
                else:
                    usuario.desativar()
                campos.append("ativo")

            self.usuario_repo.save(usuario)
            self.uow.publish_event(
                UsuarioAtualizadoEvent(
                    aggregate_id=usuario.id,
                    campos_alterados=campos,
                    atualizado_por_id=admin.id,
                )
            )

        logger.info(f"Usuário {usuario.id} atualizado por {admin.email}: {campos}")
        return UsuarioOutputDTO.from_entity(usuario)


class AtualizarPerfilService:
    """Use Case: Usuário atualiza o próprio perfil (sem permissões admin)."""

    def __init__(self, usuario_repo: UsuarioRepository, uow: UnitOfWork):
        self.usuario_repo = usuario_repo
        self.uow = uow

    def execute(self, input_dto: AtualizarPerfilInputDTO) -> UsuarioOutputDTO:
        with self.uow:
            usuario = obter_autenticado(self.usuario_repo, input_dto.usuario_id)
            campos = usuario.atualizar_perfil(
                nome=input_dto.nome,
                departamento=input_dto.departamento,
                comarca=input_dto.comarca,
                cargo=input_dto.cargo,
                avatar=input_dto.avatar,
            )
            self.usuario_repo.save(usuario)
            if campos:
                self.uow.publish_event(
                    UsuarioAtualizadoEvent(
                        aggregate_id=usuario.id,
                        campos_alterados=campos,
                        atualizado_por_id=usuario.id,
                    )
                )

        logger.info(f"Perfil atualizado para usuário: {usuario.email}")
        return UsuarioOutputDTO.from_entity(usuario)


class AlterarSenhaService:
    """Use Case: Usuário altera a própria senha."""

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        password_hasher: PasswordHasher,
        uow: UnitOfWork,
    ):
        self.usuario_repo = usuario_repo
        self.password_hasher = password_hasher
        self.uow = uow

    def execute(self, input_dto: AlterarSenhaInputDTO) -> None:
        """
        Raises:
            ValidationError: Senha atual incorreta, confirmação divergente
                ou nova senha fraca
        """
        with self.uow:
            usuario = obter_autenticado(self.usuario_repo, input_dto.usuario_id)

            if not self.password_hasher.verificar(input_dto.senha_atual or "", usuario.senha_hash):
                raise ValidationError("Senha atual incorreta", field="senha_atual")
            if input_dto.nova_senha != input_dto.confirmar_senha:
                raise ValidationError(
                    "Nova senha e confirmação não conferem",
                    field="confirmar_senha"
                )
            validar_senha_forte(input_dto.nova_senha, field_name="nova_senha")
            if self.password_hasher.verificar(input_dto.nova_senha, usuario.senha_hash):
                raise ValidationError(
                    "Nova senha não pode ser igual à anterior",
                    field="nova_senha"
                )

            usuario.alterar_senha(self.password_hasher.hash(input_dto.nova_senha))
            self.usuario_repo.save(usuario)

            self.uow.publish_event(
                SenhaAlteradaEvent(
                    aggregate_id=usuario.id,
                    email=usuario.email,
                    nome=usuario.nome,
                )
            )

        logger.info(f"Senha alterada para usuário: {usuario.email}")


class DesativarUsuarioService:
    """
    Use Case: Desativar conta (exclusão lógica).

    O próprio usuário ou um administrador podem desativar.
    """

    def __init__(self, usuario_repo: UsuarioRepository, uow: UnitOfWork):
        self.usuario_repo = usuario_repo
        self.uow = uow

    def execute(self, usuario_id: str, solicitado_por_id: Optional[str]) -> None:
        solicitante = obter_autenticado(self.usuario_repo, solicitado_por_id)
        if solicitante.id != usuario_id and not solicitante.is_admin:
            raise BusinessRuleViolationError(
                "Apenas administradores podem desativar outros usuários",
                rule="requer_admin"
            )

        with self.uow:
            usuario = obter_usuario(self.usuario_repo, usuario_id)
            if usuario.is_admin and usuario.ativo and self.usuario_repo.count_admins_ativos() <= 1:
                raise BusinessRuleViolationError(
                    "Não é possível desativar o último administrador do sistema",
                    rule="ultimo_admin"
                )

            usuario.desativar()
            self.usuario_repo.save(usuario)

            self.uow.publish_event(
                UsuarioDesativadoEvent(
                    aggregate_id=usuario.id,
                    email=usuario.email,
                    desativado_por_id=solicitante.id,
                )
            )

        logger.info(f"Conta desativada: {usuario.email} (por {solicitante.email})")


# =============================================================================
# Setup inicial
# =============================================================================

class StatusSetupService:
    """Setup é necessário enquanto não existir nenhum usuário."""

    def __init__(self, usuario_repo: UsuarioRepository):
        self.usuario_repo = usuario_repo

    def execute(self) -> dict:
        total = self.usuario_repo.count()
        return {
            "setup_requerido": total == 0,
            "total_usuarios": total,
            "possui_administradores": self.usuario_repo.count_admins_ativos() > 0,
            "app_name": APP_NAME,
        }


class CriarPrimeiroAdminService:
    """
    Use Case: Criar o primeiro administrador do sistema.

    Só pode ser executado uma vez, com o banco sem usuários.
    """

    MENSAGEM_SENHA_FRACA = (
        "Senha deve conter pelo menos: 8 caracteres, 1 maiúscula, "
        "1 minúscula, 1 número e 1 símbolo (@$!%*?&)"
    )

    def __init__(
        self,
        usuario_repo: UsuarioRepository,
        password_hasher: PasswordHasher,
        uow: UnitOfWork,
        dominio_institucional: str = DOMINIO_INSTITUCIONAL_PADRAO,
    ):
        self.usuario_repo = usuario_repo
        self.password_hasher = password_hasher
        self.uow = uow
        self.dominio_institucional = dominio_institucional.lstrip("@").lower()

    def execute(self, input_dto: CriarPrimeiroAdminInputDTO) -> UsuarioOutputDTO:
        if self.usuario_repo.count() > 0:
            raise BusinessRuleViolationError(
                "Setup já foi concluído ou sistema já possui usuários!",
                rule="setup_concluido"
            )

        nome = " ".join((input_dto.nome or "").split())
        email = normalizar_email(input_dto.email)
        self._validar(nome, email, input_dto)

        with self.uow:
            if self.usuario_repo.exists_by_email(email):
                raise BusinessRuleViolationError("Email já está em uso no sistema", rule="email_duplicado")

            departamento = (input_dto.departamento or "").strip() or DEPARTAMENTO_ADMIN_PADRAO
            admin = Usuario.criar(
                nome=nome,
                email=email,
                senha_hash=self.password_hasher.hash(input_dto.senha),
                tipo=TipoUsuario.ADMIN,
                departamento=departamento,
            )
            self.usuario_repo.save(admin)

            self.uow.publish_event(
                UsuarioCriadoEvent(
                    aggregate_id=admin.id,
                    nome=admin.nome,
                    email=admin.email,
                    tipo=admin.tipo.name,
                    origem="setup",
                )
            )

        logger.warning(f"SETUP CONCLUÍDO - Primeiro administrador criado: {admin.email} (IP: {input_dto.ip})")
        return UsuarioOutputDTO.from_entity(admin)

    def _validar(self, nome: str, email: str, input_dto: CriarPrimeiroAdminInputDTO) -> None:
        validar_email(email)
        if not email.endswith(f"@{self.dominio_institucional}"):
            raise ValidationError(
                f"Email deve ser institucional (@{self.dominio_institucional})",
                field="email"
            )
        if len(nome) < 3:
            raise ValidationError("Nome deve ter pelo menos 3 caracteres", field="nome")
        if len(nome.split(" ")) < 2:
            raise ValidationError("Informe nome completo (nome e sobrenome)", field="nome")
        try:
            validar_senha_forte(input_dto.senha)
        except ValidationError:
            raise ValidationError(self.MENSAGEM_SENHA_FRACA, field="senha")
        if input_dto.senha != input_dto.confirmar_senha:
            raise ValidationError("Senhas não coincidem", field="confirmar_senha")
        if input_dto.telefone and input_dto.telefone.strip() and not contato_valido(input_dto.telefone):
            raise ValidationError(
                "Telefone deve ter formato válido (ex: (71) 99999-9999)",
                field="telefone"
            )
