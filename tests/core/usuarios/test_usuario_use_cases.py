"""
Testes Unitários para Use Cases do Domínio de Usuários.

Coverage:
- Setup inicial (primeiro administrador)
- Autenticação e bloqueio de conta
- Fluxo de convites (criar, validar, ativar, cancelar, reenviar, expirar)
- Verificação de email por código
- Gestão de contas (atualizar, perfil, senha, desativar)
"""

import pytest
from datetime import timedelta

from src.core.shared.exceptions import (
    AccountLockedError,
    AuthenticationError,
    BusinessRuleViolationError,
    EntityNotFoundError,
    ValidationError,
)
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
from src.core.usuarios.entities import StatusConvite, TipoUsuario, Usuario
from src.core.usuarios.events import (
    CodigoVerificacaoSolicitadoEvent,
    ContaBloqueadaEvent,
    ConviteAtivadoEvent,
    ConviteCriadoEvent,
    ConviteReenviadoEvent,
    ConvitesExpiradosEvent,
    EmailVerificadoEvent,
    SenhaAlteradaEvent,
    UsuarioCriadoEvent,
    UsuarioDesativadoEvent,
)
from src.core.usuarios.use_cases import (
    AlterarSenhaService,
    AtivarConviteService,
    AtualizarPerfilService,
    AtualizarUsuarioService,
    AutenticarUsuarioService,
    CancelarConviteService,
    ConsultarStatusVerificacaoService,
    CriarConviteService,
    CriarPrimeiroAdminService,
    DesativarUsuarioService,
    EstatisticasConvitesService,
    ExpirarConvitesService,
    LimparVerificacoesExpiradasService,
    ListarConvitesService,
    ListarUsuariosService,
    ObterConviteService,
    ReenviarConviteService,
    SolicitarCodigoVerificacaoService,
    StatusSetupService,
    ValidarConviteService,
    VerificarCodigoService,
)


SENHA = "Senha@123"
FRONTEND = "http://aclp.test"


def primeiro_admin_input(**overrides):
    dados = dict(
        nome="Administrador Geral",
        email="admin@tjba.jus.br",
        senha=SENHA,
        confirmar_senha=SENHA,
        telefone="(71) 3372-0000",
        ip="10.0.0.1",
    )
    dados.update(overrides)
    return CriarPrimeiroAdminInputDTO(**dados)


@pytest.fixture
def admin(usuario_repo, hasher, uow):
    output = CriarPrimeiroAdminService(usuario_repo, hasher, uow).execute(primeiro_admin_input())
    usuario = usuario_repo.get_by_id(output.id)
    usuario.comarca = "Salvador"
    return usuario


@pytest.fixture
def servidor(usuario_repo, hasher):
    usuario = Usuario.criar(
        nome="Carlos Servidor",
        email="carlos@tjba.jus.br",
        senha_hash=hasher.hash(SENHA),
    )
    usuario_repo.save(usuario)
    return usuario


@pytest.fixture
def criar_convite(usuario_repo, convite_repo, uow, admin, agora):
    service = CriarConviteService(usuario_repo, convite_repo, uow, frontend_url=FRONTEND, validade_dias=7)

    def _criar(email="novo@tjba.jus.br", tipo_usuario="usuario", criado_por_id=None):
        return service.execute(
            CriarConviteInputDTO(
                email=email,
                tipo_usuario=tipo_usuario,
                criado_por_id=criado_por_id or admin.id,
                ip_criacao="10.0.0.2",
            ),
            agora=agora,
        )

    return _criar


class TestSetup:

    def test_status_sem_usuarios(self, usuario_repo):
        status = StatusSetupService(usuario_repo).execute()

        assert status["setup_requerido"] is True
        assert status["possui_administradores"] is False
        assert status["app_name"] == "ACLP - Sistema TJBA"

    def test_criar_primeiro_admin(self, admin, usuario_repo, uow, hasher):
        assert admin.tipo == TipoUsuario.ADMIN
        assert admin.departamento == "Administração do Sistema"
        assert hasher.verificar(SENHA, admin.senha_hash)

        evento = uow.events_of_type(UsuarioCriadoEvent)[0]
        assert evento.origem == "setup"

        status = StatusSetupService(usuario_repo).execute()
        assert status["setup_requerido"] is False
        assert status["possui_administradores"] is True

    def test_setup_apenas_uma_vez(self, admin, usuario_repo, hasher, uow):
        with pytest.raises(BusinessRuleViolationError) as exc:
            CriarPrimeiroAdminService(usuario_repo, hasher, uow).execute(
                primeiro_admin_input(email="outro@tjba.jus.br")
            )

        assert exc.value.rule == "setup_concluido"

    @pytest.mark.parametrize("overrides, campo", [
        ({"email": "admin@gmail.com"}, "email"),
        ({"nome": "Ad"}, "nome"),
        ({"nome": "Administrador"}, "nome"),
        ({"senha": "fraca", "confirmar_senha": "fraca"}, "senha"),
        ({"confirmar_senha": "Outra@123"}, "confirmar_senha"),
        ({"telefone": "123"}, "telefone"),
    ])
    def test_validacoes(self, usuario_repo, hasher, uow, overrides, campo):
        with pytest.raises(ValidationError) as exc:
            CriarPrimeiroAdminService(usuario_repo, hasher, uow).execute(primeiro_admin_input(**overrides))

        assert exc.value.field == campo
        assert usuario_repo.count() == 0

    def test_senha_fraca_mensagem_completa(self, usuario_repo, hasher, uow):
        with pytest.raises(ValidationError) as exc:
            CriarPrimeiroAdminService(usuario_repo, hasher, uow).execute(
                primeiro_admin_input(senha="semsimbolo1A", confirmar_senha="semsimbolo1A")
            )

        assert exc.value.message == CriarPrimeiroAdminService.MENSAGEM_SENHA_FRACA


class TestAutenticar:

    def autenticar(self, usuario_repo, hasher, uow, agora, senha=SENHA, email="carlos@tjba.jus.br"):
        return AutenticarUsuarioService(usuario_repo, hasher, uow).execute(
            AutenticarInputDTO(email=email, senha=senha, ip="10.0.0.9"),
            agora=agora,
        )

    def test_login_sucesso(self, servidor, usuario_repo, hasher, uow, agora):
        output = self.autenticar(usuario_repo, hasher, uow, agora, email=" CARLOS@tjba.jus.br ")

        assert output.id == servidor.id
        assert servidor.ultimo_login == agora

    def test_email_desconhecido(self, usuario_repo, hasher, uow, agora):
        with pytest.raises(AuthenticationError) as exc:
            self.autenticar(usuario_repo, hasher, uow, agora, email="ninguem@tjba.jus.br")

        assert exc.value.message == "Email ou senha incorretos"

    def test_senha_errada_registra_falha(self, servidor, usuario_repo, hasher, uow, agora):
        with pytest.raises(AuthenticationError):
            self.autenticar(usuario_repo, hasher, uow, agora, senha="errada")

        assert servidor.tentativas_login_falhadas == 1

    def test_bloqueio_na_quinta_falha(self, servidor, usuario_repo, hasher, uow, agora):
        for _ in range(5):
            with pytest.raises(AuthenticationError):
                self.autenticar(usuario_repo, hasher, uow, agora, senha="errada")

        eventos = uow.events_of_type(ContaBloqueadaEvent)
        assert len(eventos) == 1
        assert eventos[0].tentativas == 5

        with pytest.raises(AccountLockedError) as exc:
            self.autenticar(usuario_repo, hasher, uow, agora)
        assert exc.value.bloqueado_ate == agora + timedelta(minutes=30)

        output = self.autenticar(usuario_repo, hasher, uow, agora + timedelta(minutes=31))
        assert output.id == servidor.id
        assert servidor.tentativas_login_falhadas == 0

    def test_conta_desativada(self, servidor, usuario_repo, hasher, uow, agora):
        servidor.desativar()

        with pytest.raises(AuthenticationError) as exc:
            self.autenticar(usuario_repo, hasher, uow, agora)

        assert exc.value.message == AutenticarUsuarioService.MENSAGEM_DESATIVADA


class TestConvites:

    def test_criar_convite(self, criar_convite, admin, uow):
        output = criar_convite(email=" Novo@TJBA.jus.br ")

        assert output.email == "novo@tjba.jus.br"
        assert output.tipo_usuario == "USUARIO"
        assert output.comarca == "Salvador"
        assert output.link == f"{FRONTEND}/invite/{output.token}"

        evento = uow.events_of_type(ConviteCriadoEvent)[0]
        assert evento.link == output.link
        assert evento.criado_por_id == admin.id

    def test_criar_convite_sem_autenticacao(self, criar_convite):
        with pytest.raises(AuthenticationError):
            criar_convite(criado_por_id="desconhecido")

    def test_criar_convite_nao_admin(self, criar_convite, servidor):
        with pytest.raises(BusinessRuleViolationError) as exc:
            criar_convite(criado_por_id=servidor.id)

        assert exc.value.rule == "requer_admin"

    def test_email_ja_cadastrado(self, criar_convite, servidor):
        with pytest.raises(BusinessRuleViolationError) as exc:
            criar_convite(email=servidor.email)

        assert exc.value.rule == "email_duplicado"

    def test_convite_pendente_duplicado(self, criar_convite):
        criar_convite()

        with pytest.raises(BusinessRuleViolationError) as exc:
            criar_convite()

        assert exc.value.rule == "convite_pendente"

    def test_validar_convite(self, criar_convite, convite_repo, agora):
        output = criar_convite()
        service = ValidarConviteService(convite_repo)

        assert service.execute(output.token, agora).valido
        assert service.execute("token-inexistente", agora).mensagem == "Convite não encontrado"

        expirado = service.execute(output.token, agora + timedelta(days=8))
        assert not expirado.valido
        assert expirado.mensagem.startswith("Este convite expirou em")

    def test_ativar_convite(self, criar_convite, convite_repo, usuario_repo, hasher, uow, agora):
        output = criar_convite(tipo_usuario="admin")
        service = AtivarConviteService(convite_repo, usuario_repo, hasher, uow)

        resultado = service.execute(
            AtivarConviteInputDTO(
                token=output.token,
                nome="Novo Servidor",
                senha=SENHA,
                confirmar_senha=SENHA,
                cargo="Técnico",
                ip_ativacao="10.0.0.3",
            ),
            agora=agora,
        )

        assert resultado["sucesso"] is True
        assert resultado["usuario"]["tipo"] == "ADMIN"
        assert resultado["usuario"]["comarca"] == "Salvador"
        assert resultado["usuario"]["email_verificado"] is True

        convite = convite_repo.get_by_id(output.id)
        assert convite.status == StatusConvite.ATIVADO
        assert convite.usuario_id == resultado["usuario"]["id"]
        assert uow.events_of_type(ConviteAtivadoEvent)
        assert uow.events_of_type(UsuarioCriadoEvent)[-1].origem == "convite"

        utilizado = ValidarConviteService(convite_repo).execute(output.token, agora)
        assert utilizado.mensagem == "Este convite já foi utilizado"

        with pytest.raises(BusinessRuleViolationError) as exc:
            service.execute(
                AtivarConviteInputDTO(token=output.token, nome="Outro", senha=SENHA, confirmar_senha=SENHA),
                agora=agora,
            )
        assert exc.value.rule == "convite_utilizado"

    def test_ativar_senhas_divergentes(self, criar_convite, convite_repo, usuario_repo, hasher, uow, agora):
        output = criar_convite()

        with pytest.raises(ValidationError) as exc:
            AtivarConviteService(convite_repo, usuario_repo, hasher, uow).execute(
                AtivarConviteInputDTO(
                    token=output.token,
                    nome="Novo Servidor",
                    senha=SENHA,
                    confirmar_senha="Outra@123",
                ),
                agora=agora,
            )

        assert exc.value.field == "confirmar_senha"

    def test_ativar_convite_expirado(self, criar_convite, convite_repo, usuario_repo, hasher, uow, agora):
        output = criar_convite()

        with pytest.raises(BusinessRuleViolationError) as exc:
            AtivarConviteService(convite_repo, usuario_repo, hasher, uow).execute(
                AtivarConviteInputDTO(
                    token=output.token,
                    nome="Novo Servidor",
                    senha=SENHA,
                    confirmar_senha=SENHA,
                ),
                agora=agora + timedelta(days=8),
            )

        assert exc.value.rule == "convite_invalido"

    def test_ativar_token_inexistente(self, convite_repo, usuario_repo, hasher, uow, agora):
        with pytest.raises(EntityNotFoundError):
            AtivarConviteService(convite_repo, usuario_repo, hasher, uow).execute(
                AtivarConviteInputDTO(token="nada", nome="X Y", senha=SENHA, confirmar_senha=SENHA),
                agora=agora,
            )

    def test_listar_e_obter(self, criar_convite, convite_repo, usuario_repo, admin, agora):
        output = criar_convite()

        itens = ListarConvitesService(convite_repo, usuario_repo).execute(admin.id, agora)
        assert [i.id for i in itens] == [output.id]
        assert itens[0].expirado is False

        detalhe = ObterConviteService(convite_repo, usuario_repo, FRONTEND).execute(output.id)
        assert detalhe.criado_por_nome == "Administrador Geral"

    def test_cancelar_e_reenviar(self, criar_convite, convite_repo, usuario_repo, admin, uow, agora):
        output = criar_convite()
        reenviar = ReenviarConviteService(convite_repo, usuario_repo, uow, FRONTEND)

        reenviado = reenviar.execute(output.id, admin.id, agora)
        assert reenviado.token == output.token
        assert uow.events_of_type(ConviteReenviadoEvent)

        CancelarConviteService(convite_repo, usuario_repo, uow).execute(output.id, admin.id)
        assert convite_repo.get_by_id(output.id).status == StatusConvite.CANCELADO

        with pytest.raises(BusinessRuleViolationError) as exc:
            reenviar.execute(output.id, admin.id, agora)
        assert exc.value.rule == "convite_nao_pendente"

        with pytest.raises(BusinessRuleViolationError):
            CancelarConviteService(convite_repo, usuario_repo, uow).execute(output.id, admin.id)

    def test_reenviar_expirado(self, criar_convite, convite_repo, usuario_repo, admin, uow, agora):
        output = criar_convite()

        with pytest.raises(BusinessRuleViolationError) as exc:
            ReenviarConviteService(convite_repo, usuario_repo, uow, FRONTEND).execute(
                output.id, admin.id, agora + timedelta(days=8)
            )

        assert exc.value.rule == "convite_expirado"

    def test_expirar_e_estatisticas(self, criar_convite, convite_repo, uow, agora):
        criar_convite(email="um@tjba.jus.br")
        criar_convite(email="dois@tjba.jus.br")

        expirados = ExpirarConvitesService(convite_repo, uow).execute(agora + timedelta(days=8))

        assert expirados == 2
        assert len(uow.events_of_type(ConvitesExpiradosEvent)[0].convite_ids) == 2

        stats = EstatisticasConvitesService(convite_repo).execute()
        assert stats == {"total": 2, "pendentes": 0, "ativados": 0, "expirados": 2, "cancelados": 0}

    def test_expirar_sem_convites(self, convite_repo, uow, agora):
        assert ExpirarConvitesService(convite_repo, uow).execute(agora) == 0
        assert not uow.events_of_type(ConvitesExpiradosEvent)


class TestVerificacaoEmail:

    @pytest.fixture
    def solicitar(self, verificacao_repo, usuario_repo, uow, agora):
        service = SolicitarCodigoVerificacaoService(
            verificacao_repo, usuario_repo, uow, validade_minutos=10, max_tentativas=5
        )

        def _solicitar(email="pessoa@tjba.jus.br"):
            service.execute(SolicitarCodigoInputDTO(email=email, nome="Pessoa Teste"), agora=agora)
            return uow.events_of_type(CodigoVerificacaoSolicitadoEvent)[-1].codigo

        return _solicitar

    def verificar(self, verificacao_repo, uow, codigo, agora, email="pessoa@tjba.jus.br"):
        return VerificarCodigoService(verificacao_repo, uow).execute(
            VerificarCodigoInputDTO(email=email, codigo=codigo, ip="10.0.0.4"),
            agora=agora,
        )

    def test_fluxo_completo(self, solicitar, verificacao_repo, uow, agora):
        codigo = solicitar()

        resultado = self.verificar(verificacao_repo, uow, codigo, agora)

        assert resultado["email_verificado"] is True
        assert uow.events_of_type(EmailVerificadoEvent)[0].email == "pessoa@tjba.jus.br"

        status = ConsultarStatusVerificacaoService(verificacao_repo).execute("Pessoa@tjba.jus.br", agora)
        assert status.email_verificado is True

    def test_email_ja_cadastrado(self, solicitar, servidor):
        with pytest.raises(BusinessRuleViolationError) as exc:
            solicitar(email=servidor.email)

        assert exc.value.rule == "email_duplicado"

    def test_codigo_incorreto_persiste_tentativa(self, solicitar, verificacao_repo, uow, agora):
        codigo = solicitar()
        errado = "000000" if codigo != "000000" else "111111"

        with pytest.raises(ValidationError) as exc:
            self.verificar(verificacao_repo, uow, errado, agora)

        assert exc.value.field == "codigo"
        status = ConsultarStatusVerificacaoService(verificacao_repo).execute("pessoa@tjba.jus.br", agora)
        assert status.tentativas_restantes == 4
        assert status.codigo_enviado is True
        assert status.minutos_restantes == 10

    def test_codigo_com_acento_persiste_tentativa(self, solicitar, verificacao_repo, uow, agora):
        solicitar()

        with pytest.raises(ValidationError) as exc:
            self.verificar(verificacao_repo, uow, "é12345", agora)

        assert exc.value.message == "Código incorreto"
        status = ConsultarStatusVerificacaoService(verificacao_repo).execute("pessoa@tjba.jus.br", agora)
        assert status.tentativas_restantes == 4

    def test_codigo_vazio(self, verificacao_repo, uow, agora):
        with pytest.raises(ValidationError):
            self.verificar(verificacao_repo, uow, "  ", agora)

    def test_sem_solicitacao(self, verificacao_repo, uow, agora):
        with pytest.raises(EntityNotFoundError):
            self.verificar(verificacao_repo, uow, "123456", agora)

    def test_codigo_expirado(self, solicitar, verificacao_repo, uow, agora):
        codigo = solicitar()

        with pytest.raises(BusinessRuleViolationError) as exc:
            self.verificar(verificacao_repo, uow, codigo, agora + timedelta(minutes=11))

        assert exc.value.rule == "codigo_expirado"

    def test_status_sem_solicitacao(self, verificacao_repo, agora):
        status = ConsultarStatusVerificacaoService(verificacao_repo).execute("x@tjba.jus.br", agora)

        assert status.codigo_enviado is False
        assert status.tentativas_restantes == 0

    def test_limpar_expiradas(self, solicitar, verificacao_repo, uow, agora):
        solicitar()

        service = LimparVerificacoesExpiradasService(verificacao_repo, uow)

        assert service.execute(agora) == 0
        assert service.execute(agora + timedelta(minutes=11)) == 1


class TestGestaoContas:

    def test_listar_usuarios(self, admin, servidor, usuario_repo):
        servidor.desativar()
        service = ListarUsuariosService(usuario_repo)

        assert [u.email for u in service.execute()] == [admin.email]
        assert len(service.execute(incluir_inativos=True)) == 2
        assert [u.tipo for u in service.execute(tipo="admin")] == ["ADMIN"]

    def test_atualizar_usuario(self, admin, servidor, usuario_repo, hasher, uow):
        output = AtualizarUsuarioService(usuario_repo, hasher, uow).execute(
            AtualizarUsuarioInputDTO(
                usuario_id=servidor.id,
                atualizado_por_id=admin.id,
                email="carlos.novo@tjba.jus.br",
                tipo="admin",
                senha="Nova@1234",
            )
        )

        assert output.email == "carlos.novo@tjba.jus.br"
        assert output.tipo == "ADMIN"
        assert hasher.verificar("Nova@1234", servidor.senha_hash)

    def test_atualizar_email_duplicado(self, admin, servidor, usuario_repo, hasher, uow):
        with pytest.raises(BusinessRuleViolationError) as exc:
            AtualizarUsuarioService(usuario_repo, hasher, uow).execute(
                AtualizarUsuarioInputDTO(
                    usuario_id=servidor.id,
                    atualizado_por_id=admin.id,
                    email=admin.email,
                )
            )

        assert exc.value.rule == "email_duplicado"

    def test_nao_remove_ultimo_admin(self, admin, usuario_repo, hasher, uow):
        with pytest.raises(BusinessRuleViolationError) as exc:
            AtualizarUsuarioService(usuario_repo, hasher, uow).execute(
                AtualizarUsuarioInputDTO(
                    usuario_id=admin.id,
                    atualizado_por_id=admin.id,
                    tipo="usuario",
                )
            )

        assert exc.value.rule == "ultimo_admin"
        assert admin.tipo == TipoUsuario.ADMIN

    def test_atualizar_requer_admin(self, admin, servidor, usuario_repo, hasher, uow):
        with pytest.raises(BusinessRuleViolationError) as exc:
            AtualizarUsuarioService(usuario_repo, hasher, uow).execute(
                AtualizarUsuarioInputDTO(usuario_id=admin.id, atualizado_por_id=servidor.id, nome="X Y")
            )

        assert exc.value.rule == "requer_admin"

    def test_atualizar_perfil(self, servidor, usuario_repo, uow):
        output = AtualizarPerfilService(usuario_repo, uow).execute(
            AtualizarPerfilInputDTO(usuario_id=servidor.id, cargo="Analista Judiciário")
        )

        assert output.cargo == "Analista Judiciário"

    def test_alterar_senha(self, servidor, usuario_repo, hasher, uow):
        AlterarSenhaService(usuario_repo, hasher, uow).execute(
            AlterarSenhaInputDTO(
                usuario_id=servidor.id,
                senha_atual=SENHA,
                nova_senha="Nova@1234",
                confirmar_senha="Nova@1234",
            )
        )

        assert hasher.verificar("Nova@1234", servidor.senha_hash)
        assert uow.events_of_type(SenhaAlteradaEvent)[0].email == servidor.email

    @pytest.mark.parametrize("senha_atual, nova, confirmacao, campo", [
        ("Errada@123", "Nova@1234", "Nova@1234", "senha_atual"),
        (SENHA, "Nova@1234", "Outra@1234", "confirmar_senha"),
        (SENHA, "fraca", "fraca", "nova_senha"),
        (SENHA, SENHA, SENHA, "nova_senha"),
    ])
    def test_alterar_senha_invalida(self, servidor, usuario_repo, hasher, uow, senha_atual, nova, confirmacao, campo):
        with pytest.raises(ValidationError) as exc:
            AlterarSenhaService(usuario_repo, hasher, uow).execute(
                AlterarSenhaInputDTO(
                    usuario_id=servidor.id,
                    senha_atual=senha_atual,
                    nova_senha=nova,
                    confirmar_senha=confirmacao,
                )
            )

        assert exc.value.field == campo

    def test_desativar_propria_conta(self, servidor, usuario_repo, uow):
        DesativarUsuarioService(usuario_repo, uow).execute(servidor.id, servidor.id)

        assert not servidor.ativo
        assert uow.events_of_type(UsuarioDesativadoEvent)[0].desativado_por_id == servidor.id

    def test_desativar_outro_requer_admin(self, admin, servidor, usuario_repo, uow):
        with pytest.raises(BusinessRuleViolationError) as exc:
            DesativarUsuarioService(usuario_repo, uow).execute(admin.id, servidor.id)

        assert exc.value.rule == "requer_admin"

    def test_desativar_ultimo_admin(self, admin, usuario_repo, uow):
        with pytest.raises(BusinessRuleViolationError) as exc:
            DesativarUsuarioService(usuario_repo, uow).execute(admin.id, admin.id)

        assert exc.value.rule == "ultimo_admin"
