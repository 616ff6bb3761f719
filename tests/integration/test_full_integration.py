"""
Testes de Integração End-to-End.

Testes que validam o fluxo completo da aplicação sobre o container
de testes (repositórios, UoW e publisher em memória):
- Use Case → Repository → Domain Events → Publisher
- Domain Events → Dispatcher → Handler

As datas são fixas e passadas via ``hoje``/``agora``.
"""

import pytest
from datetime import date, datetime, timedelta
from unittest.mock import patch

from src.config.container import create_testing_container
from src.core.comparecimentos.dtos import RegistrarComparecimentoInputDTO
from src.core.custodiados.dtos import CadastrarCustodiadoInputDTO, EnderecoInputDTO
from src.core.shared.exceptions import (
    AccountLockedError,
    AuthenticationError,
    BusinessRuleViolationError,
)
from src.core.usuarios.dtos import (
    AtivarConviteInputDTO,
    AutenticarInputDTO,
    CriarConviteInputDTO,
    CriarPrimeiroAdminInputDTO,
    SolicitarCodigoInputDTO,
    VerificarCodigoInputDTO,
)
from src.adapters.django_app.events import handlers


HOJE = date(2024, 6, 15)
AGORA = datetime(2024, 6, 15, 10, 0, 0)
SENHA = "Senha@123"


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def container():
    return create_testing_container()


@pytest.fixture
def publisher(container):
    return container.event_publisher()


@pytest.fixture
def admin(container):
    return container.criar_primeiro_admin_service().execute(
        CriarPrimeiroAdminInputDTO(
            nome="Administrador Geral",
            email="admin@tjba.jus.br",
            senha=SENHA,
            confirmar_senha=SENHA,
        )
    )


@pytest.fixture
def custodiado(container):
    return container.cadastrar_custodiado_service().execute(
        CadastrarCustodiadoInputDTO(
            nome="João Carlos da Silva",
            cpf="529.982.247-25",
            contato="(71) 99999-1234",
            processo="0000001-23.2024.8.05.0001",
            vara="1ª Vara Criminal",
            comarca="Salvador",
            data_decisao=date(2024, 6, 1),
            periodicidade=30,
            data_comparecimento_inicial=date(2024, 6, 10),
            endereco=EnderecoInputDTO(
                cep="40010-000",
                logradouro="Rua Chile",
                numero="12",
                bairro="Centro",
                cidade="Salvador",
                estado="BA",
            ),
            cadastrado_por="servidor@tjba.jus.br",
        ),
        hoje=HOJE,
    )


def registrar(container, custodiado_id, data, **kwargs):
    return container.registrar_comparecimento_service().execute(
        RegistrarComparecimentoInputDTO(
            custodiado_id=custodiado_id,
            data_comparecimento=data,
            tipo_validacao=kwargs.pop("tipo_validacao", "PRESENCIAL"),
            validado_por="Servidor Teste",
            **kwargs,
        ),
        hoje=data,
    )


# =============================================================================
# Custodiados e Comparecimentos
# =============================================================================

class TestCicloCustodiadoIntegration:

    def test_cadastro_cria_endereco_e_comparecimento_inicial(self, container, custodiado, publisher):
        historico = container.historico_comparecimentos_service().execute(custodiado.id)
        enderecos = container.consultar_enderecos_service().historico(custodiado.id)

        assert [c.tipo_validacao for c in historico] == ["CADASTRO_INICIAL"]
        assert len(enderecos) == 1
        assert len(publisher.get_events_by_type("CustodiadoCadastradoEvent")) == 1

    def test_inadimplencia_e_regularizacao(self, container, custodiado, publisher):
        registrar(container, custodiado.id, date(2024, 7, 10))

        verificacao = container.atualizar_status_custodiados_service().execute(hoje=date(2024, 8, 20))
        assert verificacao["novos_inadimplentes"] == 1
        assert container.resumo_status_service().execute(hoje=date(2024, 8, 20))["inadimplentes"] == 1

        registrar(container, custodiado.id, date(2024, 8, 20))

        atual = container.obter_custodiado_service().execute(custodiado.id)
        assert atual.status == "Em Conformidade"
        assert atual.proximo_comparecimento == date(2024, 9, 19)
        alteracoes = publisher.get_events_by_type("StatusCustodiadoAlteradoEvent")
        assert alteracoes[0].status_novo == "Inadimplente"

    def test_mudanca_de_endereco_no_comparecimento(self, container, custodiado, publisher):
        registrar(
            container,
            custodiado.id,
            date(2024, 7, 10),
            mudanca_endereco=True,
            motivo_mudanca_endereco="Mudou-se para Feira de Santana",
            novo_endereco=EnderecoInputDTO(
                cep="44001-000",
                logradouro="Avenida Getúlio Vargas",
                numero="100",
                bairro="Centro",
                cidade="Feira de Santana",
                estado="BA",
            ),
        )

        service = container.consultar_enderecos_service()
        assert service.endereco_atual(custodiado.id).cidade == "Feira de Santana"
        assert len(service.enderecos_historicos(custodiado.id)) == 1
        assert len(publisher.get_events_by_type("EnderecoAlteradoEvent")) == 1

    def test_arquivado_nao_registra_comparecimento(self, container, custodiado):
        container.arquivar_custodiado_service().execute(custodiado.id)

        with pytest.raises(BusinessRuleViolationError) as exc:
            registrar(container, custodiado.id, date(2024, 7, 10))

        assert exc.value.rule == "custodiado_arquivado"

    def test_cpf_duplicado_entre_ativos(self, container, custodiado):
        with pytest.raises(BusinessRuleViolationError) as exc:
            container.cadastrar_custodiado_service().execute(
                CadastrarCustodiadoInputDTO(
                    nome="Outro Nome",
                    cpf="52998224725",
                    contato="(71) 99999-0000",
                    processo="0000002-23.2024.8.05.0001",
                    vara="2ª Vara Criminal",
                    comarca="Salvador",
                    data_decisao=date(2024, 6, 1),
                    periodicidade=30,
                    endereco=EnderecoInputDTO(
                        cep="40010-000",
                        logradouro="Rua Chile",
                        bairro="Centro",
                        cidade="Salvador",
                        estado="BA",
                    ),
                ),
                hoje=HOJE,
            )

        assert exc.value.rule == "cpf_duplicado"


# =============================================================================
# Usuários
# =============================================================================

class TestAcessoIntegration:

    def test_convite_ate_login(self, container, admin, publisher):
        convite = container.criar_convite_service().execute(
            CriarConviteInputDTO(email="novo@tjba.jus.br", tipo_usuario="usuario", criado_por_id=admin.id),
            agora=AGORA,
        )

        resultado = container.ativar_convite_service().execute(
            AtivarConviteInputDTO(
                token=convite.token,
                nome="Carlos Servidor",
                senha=SENHA,
                confirmar_senha=SENHA,
            ),
            agora=AGORA + timedelta(days=1),
        )
        usuario = container.autenticar_usuario_service().execute(
            AutenticarInputDTO(email="novo@tjba.jus.br", senha=SENHA),
            agora=AGORA + timedelta(days=1),
        )

        assert resultado["usuario"]["email"] == "novo@tjba.jus.br"
        assert usuario.tipo == "USUARIO"
        assert [e.event_type for e in publisher.get_events_by_type("UsuarioCriadoEvent")] == [
            "UsuarioCriadoEvent",
            "UsuarioCriadoEvent",
        ]
        assert container.validar_convite_service().execute(convite.token).valido is False

    def test_bloqueio_por_tentativas(self, container, admin, publisher):
        service = container.autenticar_usuario_service()
        errado = AutenticarInputDTO(email="admin@tjba.jus.br", senha="Errada@123")

        for _ in range(5):
            with pytest.raises(AuthenticationError):
                service.execute(errado, agora=AGORA)
        with pytest.raises(AccountLockedError):
            service.execute(
                AutenticarInputDTO(email="admin@tjba.jus.br", senha=SENHA),
                agora=AGORA + timedelta(minutes=10),
            )

        assert len(publisher.get_events_by_type("ContaBloqueadaEvent")) == 1
        assert service.execute(
            AutenticarInputDTO(email="admin@tjba.jus.br", senha=SENHA),
            agora=AGORA + timedelta(minutes=31),
        ).email == "admin@tjba.jus.br"

    def test_verificacao_de_email(self, container, publisher):
        container.solicitar_codigo_service().execute(
            SolicitarCodigoInputDTO(email="pessoa@tjba.jus.br", nome="Pessoa"),
            agora=AGORA,
        )
        codigo = publisher.get_events_by_type("CodigoVerificacaoSolicitadoEvent")[0].codigo

        resultado = container.verificar_codigo_service().execute(
            VerificarCodigoInputDTO(email="pessoa@tjba.jus.br", codigo=codigo),
            agora=AGORA + timedelta(minutes=5),
        )

        assert resultado["email_verificado"] is True


# =============================================================================
# Eventos → Handlers
# =============================================================================

class TestEventosParaHandlers:

    def test_convite_criado_vira_email(self, container, admin, publisher):
        container.criar_convite_service().execute(
            CriarConviteInputDTO(email="novo@tjba.jus.br", tipo_usuario="usuario", criado_por_id=admin.id),
            agora=AGORA,
        )
        evento = publisher.get_events_by_type("ConviteCriadoEvent")[0]

        with patch.object(handlers, 'enviar_email') as enviar_email:
            handlers.handle_convite_criado(evento.to_dict())

        destinatario, assunto, corpo = enviar_email.delay.call_args.args
        assert destinatario == "novo@tjba.jus.br"
        assert "http://localhost:3000/invite/" in corpo

    def test_todos_os_eventos_publicados_tem_handler(self, container, admin, custodiado, publisher):
        registrar(container, custodiado.id, date(2024, 7, 10))

        tipos = {e.event_type for e in publisher.published_events}

        assert tipos
        assert tipos <= set(handlers.EVENT_HANDLERS)
