"""
Testes Unitários para Use Cases do Domínio de Comparecimentos.

Coverage:
- RegistrarComparecimentoService (agenda, duplicidade, mudança de endereço)
- ListarComparecimentosService / HistoricoComparecimentosService
- AtualizarObservacoesService
- EstatisticasComparecimentosService / ResumoSistemaService
- MigrarCadastrosIniciaisService
"""

import pytest
from datetime import date, time, timedelta

from src.core.comparecimentos.dtos import (
    ListarComparecimentosQueryDTO,
    RegistrarComparecimentoInputDTO,
)
from src.core.comparecimentos.entities import TipoValidacao
from src.core.comparecimentos.events import (
    CadastrosIniciaisMigradosEvent,
    ComparecimentoRegistradoEvent,
)
from src.core.comparecimentos.use_cases import (
    AtualizarObservacoesService,
    EstatisticasComparecimentosService,
    HistoricoComparecimentosService,
    ListarComparecimentosService,
    MigrarCadastrosIniciaisService,
    RegistrarComparecimentoService,
    ResumoSistemaService,
)
from src.core.custodiados.dtos import AtualizarCustodiadoInputDTO, EnderecoInputDTO
from src.core.custodiados.entities import Custodiado
from src.core.custodiados.events import EnderecoAlteradoEvent
from src.core.custodiados.use_cases import (
    ArquivarCustodiadoService,
    AtualizarCustodiadoService,
    CadastrarCustodiadoService,
)
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    EntityNotFoundError,
    ValidationError,
)


@pytest.fixture
def custodiado(custodiado_repo, endereco_repo, comparecimento_repo, uow, cadastro_input, hoje):
    """Custodiado cadastrado em 10/06/2024 com periodicidade de 30 dias."""
    service = CadastrarCustodiadoService(custodiado_repo, endereco_repo, comparecimento_repo, uow)
    output = service.execute(cadastro_input(), hoje=hoje)
    return custodiado_repo.get_by_id(output.id)


@pytest.fixture
def registrar(comparecimento_repo, custodiado_repo, endereco_repo, uow, hoje):
    service = RegistrarComparecimentoService(comparecimento_repo, custodiado_repo, endereco_repo, uow)

    def _registrar(custodiado_id, **overrides):
        dados = dict(
            custodiado_id=custodiado_id,
            data_comparecimento=hoje,
            tipo_validacao="presencial",
            validado_por="Servidor Teste",
        )
        dados.update(overrides)
        return service.execute(RegistrarComparecimentoInputDTO(**dados), hoje=hoje)

    return _registrar


class TestRegistrarComparecimentoService:

    def test_registro_atualiza_agenda(self, custodiado, registrar, uow):
        output = registrar(custodiado.id, hora_comparecimento=time(14, 0))

        assert output.tipo_validacao == "PRESENCIAL"
        assert custodiado.ultimo_comparecimento == date(2024, 6, 15)
        assert custodiado.proximo_comparecimento == date(2024, 7, 15)

        evento = uow.events_of_type(ComparecimentoRegistradoEvent)[0]
        assert evento.aggregate_id == output.id
        assert evento.custodiado_id == custodiado.id
        assert evento.tipo_validacao == "PRESENCIAL"
        assert evento.proximo_comparecimento == "2024-07-15"

    def test_data_futura_ajustada_para_hoje(self, custodiado, registrar, hoje):
        output = registrar(custodiado.id, data_comparecimento=date(2024, 7, 1))

        assert output.data_comparecimento == hoje

    def test_registro_retroativo_nao_volta_agenda(self, custodiado, registrar):
        registrar(custodiado.id, data_comparecimento=date(2024, 6, 5))

        assert custodiado.ultimo_comparecimento == date(2024, 6, 10)

    def test_duplicado_na_mesma_data(self, custodiado, registrar, uow):
        registrar(custodiado.id)

        with pytest.raises(BusinessRuleViolationError) as exc:
            registrar(custodiado.id, tipo_validacao="online")

        assert exc.value.rule == "comparecimento_duplicado"
        assert uow.rolled_back

    def test_regular_coexiste_com_cadastro_inicial(self, custodiado, registrar, comparecimento_repo):
        registrar(custodiado.id, data_comparecimento=date(2024, 6, 10))

        do_dia = comparecimento_repo.list_by_custodiado_e_data(custodiado.id, date(2024, 6, 10))
        assert len(do_dia) == 2

    def test_cadastro_inicial_duplicado(self, custodiado, registrar):
        with pytest.raises(BusinessRuleViolationError):
            registrar(
                custodiado.id,
                data_comparecimento=date(2024, 6, 10),
                tipo_validacao="cadastro_inicial",
            )

    def test_cadastro_inicial_nao_altera_agenda(self, custodiado, registrar):
        registrar(custodiado.id, tipo_validacao="CADASTRO_INICIAL")

        assert custodiado.ultimo_comparecimento == date(2024, 6, 10)

    def test_custodiado_arquivado(self, custodiado, registrar, custodiado_repo, uow):
        ArquivarCustodiadoService(custodiado_repo, uow).execute(custodiado.id)

        with pytest.raises(BusinessRuleViolationError) as exc:
            registrar(custodiado.id)

        assert exc.value.rule == "custodiado_arquivado"

    def test_custodiado_inexistente(self, registrar):
        with pytest.raises(EntityNotFoundError):
            registrar("nao-existe")

    @pytest.mark.parametrize("campo, valor", [
        ("tipo_validacao", "telefone"),
        ("tipo_validacao", ""),
        ("validado_por", "  "),
        ("data_comparecimento", None),
    ])
    def test_validacoes_de_entrada(self, custodiado, registrar, campo, valor):
        with pytest.raises(ValidationError) as exc:
            registrar(custodiado.id, **{campo: valor})

        assert exc.value.field == campo

    def test_mudanca_sem_endereco(self, custodiado, registrar):
        with pytest.raises(ValidationError) as exc:
            registrar(custodiado.id, mudanca_endereco=True)

        assert exc.value.field == "novo_endereco"

    def test_mudanca_de_endereco(self, custodiado, registrar, endereco_repo, comparecimento_repo, uow):
        novo = EnderecoInputDTO(
            cep="41820-020",
            logradouro="Avenida Tancredo Neves",
            numero="1500",
            bairro="Caminho das Árvores",
            cidade="Salvador",
            estado="BA",
        )

        output = registrar(
            custodiado.id,
            mudanca_endereco=True,
            motivo_mudanca_endereco="Mudou para imóvel alugado",
            novo_endereco=novo,
        )

        ativo = endereco_repo.get_ativo(custodiado.id)
        assert ativo.logradouro == "Avenida Tancredo Neves"
        assert ativo.historico_comparecimento_id == output.id
        assert ativo.motivo_alteracao == "Mudou para imóvel alugado"
        assert output.enderecos_alterados == [ativo.id]
        assert comparecimento_repo.get_by_id(output.id).mudanca_endereco

        evento = uow.events_of_type(EnderecoAlteradoEvent)[0]
        assert evento.historico_comparecimento_id == output.id

    def test_mudanca_retroativa_apos_atualizacao_de_endereco(
        self, custodiado, registrar, endereco_repo, custodiado_repo, uow, hoje
    ):
        atualizado = EnderecoInputDTO(
            cep="40140-110",
            logradouro="Rua Direita da Piedade",
            numero="8",
            bairro="Piedade",
            cidade="Salvador",
            estado="BA",
        )
        AtualizarCustodiadoService(custodiado_repo, endereco_repo, uow).execute(
            AtualizarCustodiadoInputDTO(custodiado_id=custodiado.id, endereco=atualizado),
            hoje=hoje,
        )

        registrar(
            custodiado.id,
            data_comparecimento=date(2024, 6, 12),
            mudanca_endereco=True,
            novo_endereco=EnderecoInputDTO(
                cep="44001-000",
                logradouro="Avenida Getúlio Vargas",
                numero="100",
                bairro="Centro",
                cidade="Feira de Santana",
                estado="BA",
            ),
        )

        historico = endereco_repo.list_by_custodiado(custodiado.id)
        ativos = [e for e in historico if e.ativo]
        anterior = next(e for e in historico if e.logradouro == "Rua Direita da Piedade")
        assert [e.cidade for e in ativos] == ["Feira de Santana"]
        assert anterior.data_fim == anterior.data_inicio == hoje


class TestConsultasComparecimentos:

    def test_historico(self, custodiado, registrar, comparecimento_repo, custodiado_repo):
        registrar(custodiado.id)

        historico = HistoricoComparecimentosService(comparecimento_repo, custodiado_repo).execute(custodiado.id)

        assert [c.tipo_validacao for c in historico] == ["PRESENCIAL", "CADASTRO_INICIAL"]

    def test_listar_filtrado_e_paginado(self, custodiado, registrar, comparecimento_repo):
        registrar(custodiado.id)
        service = ListarComparecimentosService(comparecimento_repo)

        pagina = service.execute(ListarComparecimentosQueryDTO(por_pagina=1))
        assert pagina.total == 2
        assert pagina.total_paginas == 2
        assert pagina.tem_proxima

        presenciais = service.execute(ListarComparecimentosQueryDTO(tipo_validacao="presencial"))
        assert presenciais.total == 1

        periodo = service.execute(
            ListarComparecimentosQueryDTO(data_inicio=date(2024, 6, 1), data_fim=date(2024, 6, 12))
        )
        assert [c.tipo_validacao for c in periodo.items] == ["CADASTRO_INICIAL"]

    def test_listar_por_pagina_invalido(self, comparecimento_repo):
        with pytest.raises(ValidationError) as exc:
            ListarComparecimentosService(comparecimento_repo).execute(
                ListarComparecimentosQueryDTO(por_pagina=101)
            )

        assert exc.value.field == "por_pagina"

    def test_listar_hoje(self, custodiado, registrar, comparecimento_repo, hoje):
        registrar(custodiado.id)

        registros = ListarComparecimentosService(comparecimento_repo).hoje(hoje)

        assert len(registros) == 1

    def test_atualizar_observacoes(self, custodiado, registrar, comparecimento_repo, uow):
        output = registrar(custodiado.id)

        atualizado = AtualizarObservacoesService(comparecimento_repo, uow).execute(output.id, "Chegou atrasado")

        assert atualizado.observacoes == "Chegou atrasado"

    def test_atualizar_observacoes_inexistente(self, comparecimento_repo, uow):
        with pytest.raises(EntityNotFoundError):
            AtualizarObservacoesService(comparecimento_repo, uow).execute("nao-existe", "x")


class TestEstatisticas:

    def test_estatisticas_gerais(self, custodiado, registrar, comparecimento_repo, hoje):
        registrar(custodiado.id)

        stats = EstatisticasComparecimentosService(comparecimento_repo).execute(hoje=hoje)

        assert stats["periodo"] == "geral"
        assert stats["total"] == 2
        assert stats["presenciais"] == 1
        assert stats["cadastros_iniciais"] == 1
        assert stats["percentual_presencial"] == 50.0
        assert stats["hoje"] == 1
        assert stats["este_mes"] == 2
        assert stats["custodiados_com_comparecimento"] == 1
        assert stats["media_por_custodiado"] == 2.0

    def test_estatisticas_por_periodo(self, custodiado, registrar, comparecimento_repo):
        registrar(custodiado.id)

        stats = EstatisticasComparecimentosService(comparecimento_repo).execute(
            data_inicio=date(2024, 6, 14),
            data_fim=date(2024, 6, 30),
        )

        assert stats["total"] == 1
        assert stats["periodo"] == "2024-06-14 a 2024-06-30"

    def test_estatisticas_periodo_incompleto(self, comparecimento_repo):
        with pytest.raises(ValidationError):
            EstatisticasComparecimentosService(comparecimento_repo).execute(data_inicio=date(2024, 6, 1))

    def test_resumo_sistema(self, custodiado, custodiado_repo, comparecimento_repo):
        resumo = ResumoSistemaService(custodiado_repo, comparecimento_repo).execute(hoje=date(2024, 7, 20))

        assert resumo["ativos"] == 1
        assert resumo["inadimplentes"] == 1
        assert resumo["percentual_inadimplencia"] == 100.0
        assert resumo["analise_atrasos"]["faixas"]["8-15 dias"] == 1
        assert resumo["analise_atrasos"]["maior_atraso"] == 10
        assert resumo["analise_atrasos"]["custodiados"][0]["id"] == custodiado.id

    @pytest.mark.parametrize("dias, faixa", [
        (7, "1-7 dias"),
        (8, "8-15 dias"),
        (30, "16-30 dias"),
        (31, "31-60 dias"),
        (90, "61-90 dias"),
        (91, "Mais de 90 dias"),
    ])
    def test_faixas_de_atraso_nos_limites(self, custodiado, custodiado_repo, comparecimento_repo, dias, faixa):
        hoje = custodiado.proximo_comparecimento + timedelta(days=dias)

        faixas = ResumoSistemaService(custodiado_repo, comparecimento_repo).execute(hoje=hoje)["analise_atrasos"]["faixas"]

        assert faixas[faixa] == 1
        assert sum(faixas.values()) == 1

    def test_resumo_proximos(self, custodiado, custodiado_repo, comparecimento_repo):
        resumo = ResumoSistemaService(custodiado_repo, comparecimento_repo).execute(hoje=date(2024, 7, 9))

        proximos = resumo["proximos_comparecimentos"]
        assert proximos["total"] == 1
        assert proximos["amanha"] == 1
        assert proximos["por_data"][0]["data"] == "2024-07-10"


class TestMigrarCadastrosIniciais:

    def test_sem_custodiados(self, custodiado_repo, comparecimento_repo, uow):
        resultado = MigrarCadastrosIniciaisService(custodiado_repo, comparecimento_repo, uow).execute()

        assert resultado["status"] == "warning"
        assert resultado["custodiados_migrados"] == 0

    def test_migra_apenas_ausentes(self, custodiado, custodiado_repo, comparecimento_repo, uow):
        legado = Custodiado.criar(
            nome="Maria Aparecida Santos",
            rg="12.345.678-90",
            contato="71 3333-4444",
            processo="0000002-45.2024.8.05.0001",
            vara="2ª Vara Criminal",
            comarca="Salvador",
            data_decisao=date(2024, 5, 1),
            periodicidade=15,
            data_comparecimento_inicial=date(2024, 5, 2),
            hoje=date(2024, 6, 15),
        )
        custodiado_repo.save(legado)
        service = MigrarCadastrosIniciaisService(custodiado_repo, comparecimento_repo, uow)

        resultado = service.execute()

        assert resultado["status"] == "success"
        assert resultado["total_custodiados"] == 2
        assert resultado["custodiados_migrados"] == 1
        assert resultado["custodiados_ja_com_cadastro"] == 1

        registros = comparecimento_repo.list_by_custodiado(legado.id)
        assert len(registros) == 1
        assert registros[0].tipo_validacao == TipoValidacao.CADASTRO_INICIAL
        assert registros[0].data_comparecimento == date(2024, 5, 2)
        assert len(uow.events_of_type(CadastrosIniciaisMigradosEvent)) == 1

        assert service.execute()["custodiados_migrados"] == 0
