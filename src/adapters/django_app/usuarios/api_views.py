"""
API Views JSON para o domínio de Usuários.

Endpoints públicos (sem sessão):
- GET /api/usuarios/setup/ - Status do setup inicial
- POST /api/usuarios/setup/ - Criar primeiro administrador
- POST /api/usuarios/auth/login/ - Login
- GET /api/usuarios/convites/validar/<token>/ - Validar convite
- POST /api/usuarios/convites/ativar/ - Ativar convite (criar conta)
- POST /api/usuarios/verificacao/solicitar/ - Solicitar código
- POST /api/usuarios/verificacao/verificar/ - Verificar código
- GET /api/usuarios/verificacao/status/?email= - Status da verificação

Endpoints autenticados:
- POST /api/usuarios/auth/logout/ - Logout
- GET /api/usuarios/auth/me/ - Usuário da sessão
- GET|POST /api/usuarios/convites/ - Listar/criar convites (admin)
- GET /api/usuarios/convites/estatisticas/ - Estatísticas (admin)
- GET|DELETE /api/usuarios/convites/<id>/ - Obter/cancelar convite
- POST /api/usuarios/convites/<id>/reenviar/ - Reenviar convite
- GET /api/usuarios/ - Listar usuários (admin)
- GET|PATCH /api/usuarios/<id>/ - Obter/atualizar usuário
- POST /api/usuarios/<id>/desativar/ - Desativar usuário
- PATCH /api/usuarios/perfil/ - Atualizar o próprio perfil
- POST /api/usuarios/perfil/senha/ - Alterar a própria senha
"""

import logging

from django.http import HttpRequest, JsonResponse

from src.core.usuarios.dtos import (
    AlterarSenhaInputDTO,
    AtivarConviteInputDTO,
    AtualizarPerfilInputDTO,
    AtualizarUsuarioInputDTO,
    AutenticarInputDTO,
    CriarConviteInputDTO,
    CriarPrimeiroAdminInputDTO,
    SolicitarCodigoInputDTO,
    VerificarCodigoInputDTO,
)

from ..shared.api import (
    SESSION_USUARIO_ID,
    BaseAPIView,
    get_client_ip,
    get_usuario_id,
    json_response,
    parse_bool,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Setup e Autenticação
# =============================================================================

class SetupAPIView(BaseAPIView):
    """
    GET /api/usuarios/setup/ - Indica se o setup é necessário
    POST /api/usuarios/setup/ - Cria o primeiro administrador
    """

    login_required = False

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            return json_response(success=True, data=self.get_service('status_setup_service').execute())
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body JSON:
        {
            "nome", "email", "senha", "confirmar_senha": obrigatórios,
            "departamento", "telefone": opcionais
        }
        """
        try:
            data = self.parse_body(request)

            input_dto = CriarPrimeiroAdminInputDTO(
                nome=data.get('nome', ''),
                email=data.get('email', ''),
                senha=data.get('senha', ''),
                confirmar_senha=data.get('confirmar_senha', ''),
                departamento=data.get('departamento'),
                telefone=data.get('telefone'),
                ip=get_client_ip(request),
            )
            admin = self.get_service('criar_primeiro_admin_service').execute(input_dto)

            logger.info(f"API: Setup concluído - administrador {admin.email}")

            return json_response(
                success=True,
                data={
                    'mensagem': 'Administrador criado com sucesso! Faça login para continuar.',
                    'usuario': admin.to_dict(),
                },
                status=201,
            )

        except Exception as e:
            return self.handle_exception(e)


class LoginAPIView(BaseAPIView):
    """POST /api/usuarios/auth/login/ - Abre a sessão."""

    login_required = False

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)

            usuario = self.get_service('autenticar_usuario_service').execute(
                AutenticarInputDTO(
                    email=data.get('email', ''),
                    senha=data.get('senha', ''),
                    ip=get_client_ip(request),
                )
            )

            request.session.cycle_key()
            request.session[SESSION_USUARIO_ID] = usuario.id

            return json_response(success=True, data=usuario.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class LogoutAPIView(BaseAPIView):
    """POST /api/usuarios/auth/logout/"""

    def post(self, request: HttpRequest) -> JsonResponse:
        logger.info(f"Logout: {get_usuario_id(request)}")
        request.session.flush()
        return json_response(success=True, data={'mensagem': 'Sessão encerrada'})


class MeAPIView(BaseAPIView):
    """GET /api/usuarios/auth/me/"""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            usuario = self.get_service('obter_usuario_service').execute(get_usuario_id(request))
            return json_response(success=True, data=usuario.to_dict())
        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Convites
# =============================================================================

class ConviteAPIListView(BaseAPIView):
    """
    GET /api/usuarios/convites/ - Convites criados pelo admin da sessão
    POST /api/usuarios/convites/ - Cria convite
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            convites = self.get_service('listar_convites_service').execute(get_usuario_id(request))
            return json_response(
                success=True,
                data=[c.to_dict() for c in convites],
                meta={'total': len(convites)},
            )
        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body JSON:
        {
            "email": "string (obrigatório)",
            "tipo_usuario": "admin|usuario (padrão usuario)"
        }
        """
        try:
            data = self.parse_body(request)

            convite = self.get_service('criar_convite_service').execute(
                CriarConviteInputDTO(
                    email=data.get('email', ''),
                    tipo_usuario=data.get('tipo_usuario') or 'usuario',
                    criado_por_id=get_usuario_id(request),
                    ip_criacao=get_client_ip(request),
                )
            )

            return json_response(
                success=True,
                data={
                    'mensagem': f'Convite enviado para {convite.email}',
                    'convite': convite.to_dict(),
                },
                status=201,
            )

        except Exception as e:
            return self.handle_exception(e)


class ConviteAPIDetailView(BaseAPIView):
    """
    GET /api/usuarios/convites/<id>/
    DELETE /api/usuarios/convites/<id>/ - Cancela convite pendente
    """

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            self.exigir_admin(request)
            return json_response(
                success=True,
                data=self.get_service('obter_convite_service').execute(pk).to_dict(),
            )
        except Exception as e:
            return self.handle_exception(e)

    def delete(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            self.get_service('cancelar_convite_service').execute(pk, get_usuario_id(request))
            return json_response(success=True, data={'mensagem': 'Convite cancelado com sucesso'})
        except Exception as e:
            return self.handle_exception(e)


class ConviteAPIReenviarView(BaseAPIView):
    """POST /api/usuarios/convites/<id>/reenviar/"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            convite = self.get_service('reenviar_convite_service').execute(pk, get_usuario_id(request))
            return json_response(
                success=True,
                data={
                    'mensagem': f'Convite reenviado para {convite.email}',
                    'convite': convite.to_dict(),
                },
            )
        except Exception as e:
            return self.handle_exception(e)


class ConviteAPIEstatisticasView(BaseAPIView):
    """GET /api/usuarios/convites/estatisticas/"""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            self.exigir_admin(request)
            return json_response(
                success=True,
                data=self.get_service('estatisticas_convites_service').execute(),
            )
        except Exception as e:
            return self.handle_exception(e)


class ConviteAPIValidarView(BaseAPIView):
    """GET /api/usuarios/convites/validar/<token>/ - Público."""

    login_required = False

    def get(self, request: HttpRequest, token: str) -> JsonResponse:
        try:
            resultado = self.get_service('validar_convite_service').execute(token)
            return json_response(success=True, data=resultado.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class ConviteAPIAtivarView(BaseAPIView):
    """
    POST /api/usuarios/convites/ativar/ - Público.

    Body JSON:
    {
        "token", "nome", "senha", "confirmar_senha": obrigatórios,
        "cargo": opcional
    }
    """

    login_required = False

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)

            resultado = self.get_service('ativar_convite_service').execute(
                AtivarConviteInputDTO(
                    token=data.get('token', ''),
                    nome=data.get('nome', ''),
                    senha=data.get('senha', ''),
                    confirmar_senha=data.get('confirmar_senha', ''),
                    cargo=data.get('cargo'),
                    ip_ativacao=get_client_ip(request),
                )
            )
            return json_response(success=True, data=resultado, status=201)

        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Verificação de Email
# =============================================================================

class SolicitarCodigoAPIView(BaseAPIView):
    """POST /api/usuarios/verificacao/solicitar/"""

    login_required = False

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)
            resultado = self.get_service('solicitar_codigo_service').execute(
                SolicitarCodigoInputDTO(
                    email=data.get('email', ''),
                    nome=data.get('nome'),
                    tipo_usuario=data.get('tipo_usuario'),
                    ip=get_client_ip(request),
                )
            )
            return json_response(success=True, data=resultado)
        except Exception as e:
            return self.handle_exception(e)


class VerificarCodigoAPIView(BaseAPIView):
    """POST /api/usuarios/verificacao/verificar/"""

    login_required = False

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)
            resultado = self.get_service('verificar_codigo_service').execute(
                VerificarCodigoInputDTO(
                    email=data.get('email', ''),
                    codigo=str(data.get('codigo') or ''),
                    ip=get_client_ip(request),
                )
            )
            return json_response(success=True, data=resultado)
        except Exception as e:
            return self.handle_exception(e)


class StatusVerificacaoAPIView(BaseAPIView):
    """GET /api/usuarios/verificacao/status/?email="""

    login_required = False

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            status = self.get_service('status_verificacao_service').execute(request.GET.get('email', ''))
            return json_response(success=True, data=status.to_dict())
        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Usuários e Perfil
# =============================================================================

class UsuarioAPIListView(BaseAPIView):
    """
    GET /api/usuarios/ - Lista usuários (admin)

    Query params:
    - incluir_inativos: true/false
    - tipo: admin | usuario
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            self.exigir_admin(request)
            usuarios = self.get_service('listar_usuarios_service').execute(
                incluir_inativos=bool(parse_bool(request.GET.get('incluir_inativos'))),
                tipo=request.GET.get('tipo') or None,
            )
            return json_response(
                success=True,
                data=[u.to_dict() for u in usuarios],
                meta={'total': len(usuarios)},
            )
        except Exception as e:
            return self.handle_exception(e)


class UsuarioAPIDetailView(BaseAPIView):
    """
    GET /api/usuarios/<id>/
    PATCH /api/usuarios/<id>/ - Atualização administrativa
    """

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            if pk != get_usuario_id(request):
                self.exigir_admin(request)
            return json_response(
                success=True,
                data=self.get_service('obter_usuario_service').execute(pk).to_dict(),
            )
        except Exception as e:
            return self.handle_exception(e)

    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = self.parse_body(request)
            usuario = self.get_service('atualizar_usuario_service').execute(
                AtualizarUsuarioInputDTO(
                    usuario_id=pk,
                    atualizado_por_id=get_usuario_id(request),
                    nome=data.get('nome'),
                    email=data.get('email'),
                    senha=data.get('senha'),
                    tipo=data.get('tipo'),
                    departamento=data.get('departamento'),
                    comarca=data.get('comarca'),
                    cargo=data.get('cargo'),
                    ativo=parse_bool(data.get('ativo')),
                    avatar=data.get('avatar'),
                )
            )
            return json_response(success=True, data=usuario.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class UsuarioAPIDesativarView(BaseAPIView):
    """POST /api/usuarios/<id>/desativar/ - Próprio usuário ou admin."""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            solicitante = get_usuario_id(request)
            self.get_service('desativar_usuario_service').execute(pk, solicitante)

            if pk == solicitante:
                request.session.flush()

            return json_response(success=True, data={'mensagem': 'Usuário desativado com sucesso'})
        except Exception as e:
            return self.handle_exception(e)


class PerfilAPIView(BaseAPIView):
    """PATCH /api/usuarios/perfil/"""

    def patch(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)
            usuario = self.get_service('atualizar_perfil_service').execute(
                AtualizarPerfilInputDTO(
                    usuario_id=get_usuario_id(request),
                    nome=data.get('nome'),
                    departamento=data.get('departamento'),
                    comarca=data.get('comarca'),
                    cargo=data.get('cargo'),
                    avatar=data.get('avatar'),
                )
            )
            return json_response(success=True, data=usuario.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class AlterarSenhaAPIView(BaseAPIView):
    """POST /api/usuarios/perfil/senha/"""

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)
            self.get_service('alterar_senha_service').execute(
                AlterarSenhaInputDTO(
                    usuario_id=get_usuario_id(request),
                    senha_atual=data.get('senha_atual', ''),
                    nova_senha=data.get('nova_senha', ''),
                    confirmar_senha=data.get('confirmar_senha', ''),
                )
            )
            return json_response(success=True, data={'mensagem': 'Senha alterada com sucesso'})
        except Exception as e:
            return self.handle_exception(e)
