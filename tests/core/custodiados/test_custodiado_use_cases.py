"""
Testes Unitários para Use Cases do Domínio de Custodiados.

Estratégia de Teste:
- Repositórios em memória (fakes) para isolamento
- FakeUnitOfWork para verificar commit/rollback e eventos
- Datas fixas (hoje) para regras dependentes do calendário
"""

import pytest
from datetime import date, timedelta

from src.core.comparecimentos.entities import TipoValidacao
from src.core.custodiados.dtos import (
    AtualizarCustodiadoInputDTO,
    EnderecoInputDTO,
    ListarCustodiadosQueryDTO,
)
from src.core.custodiados.entities import SituacaoCustodiado, StatusComparecimento
from src.core.custodiados.events import (
    CustodiadoArquivadoEvent,
    CustodiadoAtualizadoEvent,
    CustodiadoCadastradoEvent,
    CustodiadoReativadoEvent,
    EnderecoAlteradoEvent,
    StatusCustodiadoAlteradoEvent,
)
from src.core.custodiados.use_cases import (
    MOTIVO_ENDERECO_INICIAL,
    AgendaComparecimentosService,
    ArquivarCustodiadoService,
    AtualizarCustodiadoService,
    AtualizarStatusCustodiadosService,
    BuscarCustodiadosService,
    CadastrarCustodiadoService,
    ConsultarEnderecosService,
    ListarCustodiadosService,
    ObterCustodiadoService,
    ReativarCustodiadoService,
    ResumoStatusService,
)
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    EntityNotFoundError,
    ValidationError,
)


NOVO_ENDERECO = EnderecoInputDTO(
    cep="44001-000",
    logradouro="Rua Conselheiro Franco",
    bairro="Centro",
    cidade="Feira de Santana",
    estado="BA",
)


@pytest.fixture
def cadastrar(custodiado_repo, endereco_repo, comparecimento_repo, uow, cadastro_input, hoje):
    """Cadastra um custodiado e retorna o DTO de saída."""
    service = CadastrarCustodiadoService(custodiado_repo, endereco_repo, comparecimento_repo, uow)

    def _cadastrar(**overrides):
        return service.execute(cadastro_input(**overrides), hoje=hoje)

    return _cadastrar


class TestCadastrarCustodiadoService:

    def test_cadastro_completo(self, cadastrar, custodiado_repo, endereco_repo, comparecimento_repo, uow):
        output = cadastrar()

        assert output.status == "Em Conformidade"
        assert output.proximo_comparecimento == date(2024, 7, 10)
        assert output.endereco.cep == "40010-000"
        assert custodiado_repo.get_by_id(output.id) is not None

        enderecos = endereco_repo.list_by_custodiado(output.id)
        assert len(enderecos) == 1
        assert enderecos[0].motivo_alteracao == MOTIVO_ENDERECO_INICIAL
        assert enderecos[0].data_inicio == date(2024, 6, 10)

        comparecimentos = comparecimento_repo.list_by_custodiado(output.id)
        assert len(comparecimentos) == 1
        assert comparecimentos[0].tipo_validacao == TipoValidacao.CADASTRO_INICIAL
        assert comparecimentos[0].validado_por == "servidor@tjba.jus.br"

        eventos = uow.events_of_type(CustodiadoCadastradoEvent)
        assert len(eventos) == 1
        assert eventos[0].aggregate_id == output.id
        assert eventos[0].proximo_comparecimento == "2024-07-10"

    def test_cpf_duplicado(self, cadastrar, uow):
        cadastrar()

        with pytest.raises(BusinessRuleViolationError) as exc:
            cadastrar(rg="1234", processo="0000002-45.2024.8.05.0001")

        assert exc.value.rule == "cpf_duplicado"
        assert exc.value.message == "CPF já está cadastrado no sistema"
        assert uow.rolled_back

    def test_cpf_de_arquivado_pode_ser_reutilizado(self, cadastrar, custodiado_repo, uow):
        primeiro = cadastrar()
        ArquivarCustodiadoService(custodiado_repo, uow).execute(primeiro.id)

        segundo = cadastrar()

        assert segundo.id != primeiro.id

    def test_rg_duplicado(self, cadastrar):
        cadastrar(cpf=None, rg="12.345.678-90")

        with pytest.raises(BusinessRuleViolationError) as exc:
            cadastrar(cpf=None, rg="12.345.678-90")

        assert exc.value.rule == "rg_duplicado"

    def test_endereco_obrigatorio(self, cadastrar):
        with pytest.raises(ValidationError) as exc:
            cadastrar(endereco=None)

        assert exc.value.field == "endereco"

    def test_dados_invalidos_nao_persistem(self, cadastrar, custodiado_repo, uow):
        with pytest.raises(ValidationError):
            cadastrar(periodicidade=0)

        assert custodiado_repo.list_all() == []
        assert uow.published == []


class TestAtualizarCustodiadoService:

    def test_atualizacao_sem_endereco(self, cadastrar, custodiado_repo, endereco_repo, uow, hoje):
        criado = cadastrar()
        service = AtualizarCustodiadoService(custodiado_repo, endereco_repo, uow)

        output = service.execute(
            AtualizarCustodiadoInputDTO(custodiado_id=criado.id, vara="2ª Vara Criminal"),
            hoje=hoje,
        )

        assert output.vara == "2ª Vara Criminal"
        evento = uow.events_of_type(CustodiadoAtualizadoEvent)[0]
        assert evento.campos_alterados == ["vara"]
        assert evento.endereco_alterado is False
        assert uow.events_of_type(EnderecoAlteradoEvent) == []

    def test_mesmo_endereco_nao_gera_historico(self, cadastrar, custodiado_repo, endereco_repo, uow, hoje, endereco_input):
        criado = cadastrar()
        service = AtualizarCustodiadoService(custodiado_repo, endereco_repo, uow)

        service.execute(
            AtualizarCustodiadoInputDTO(custodiado_id=criado.id, endereco=endereco_input),
            hoje=hoje,
        )

        assert len(endereco_repo.list_by_custodiado(criado.id)) == 1

    def test_troca_de_endereco(self, cadastrar, custodiado_repo, endereco_repo, uow, hoje):
        criado = cadastrar()
        service = AtualizarCustodiadoService(custodiado_repo, endereco_repo, uow)

        output = service.execute(
            AtualizarCustodiadoInputDTO(
                custodiado_id=criado.id,
                endereco=NOVO_ENDERECO,
                atualizado_por="servidor",
            ),
            hoje=hoje,
        )

        assert output.endereco.cidade == "Feira de Santana"
        historico = endereco_repo.list_by_custodiado(criado.id)
        assert len(historico) == 2
        assert len(endereco_repo.list_ativos_by_custodiado(criado.id)) == 1

        anterior = next(e for e in historico if not e.ativo)
        assert anterior.data_fim == hoje

        evento = uow.events_of_type(EnderecoAlteradoEvent)[0]
        assert evento.endereco_anterior_id == anterior.id
        assert evento.cidade == "Feira de Santana"

    def test_cpf_de_outro_custodiado(self, cadastrar, custodiado_repo, endereco_repo, uow, hoje):
        cadastrar()
        outro = cadastrar(cpf="111.444.777-35")
        service = AtualizarCustodiadoService(custodiado_repo, endereco_repo, uow)

        with pytest.raises(BusinessRuleViolationError) as exc:
            service.execute(
                AtualizarCustodiadoInputDTO(custodiado_id=outro.id, cpf="52998224725"),
                hoje=hoje,
            )

        assert exc.value.rule == "cpf_duplicado"
        assert exc.value.message == "CPF já está cadastrado no sistema"

    def test_data_decisao_apos_comparecimento_inicial(self, cadastrar, custodiado_repo, endereco_repo, uow, hoje):
        criado = cadastrar()
        service = AtualizarCustodiadoService(custodiado_repo, endereco_repo, uow)

        with pytest.raises(ValidationError) as exc:
            service.execute(
                AtualizarCustodiadoInputDTO(custodiado_id=criado.id, data_decisao=date(2024, 6, 14)),
                hoje=hoje,
            )

        assert exc.value.field == "data_decisao"
        assert uow.rolled_back

    def test_custodiado_inexistente(self, custodiado_repo, endereco_repo, uow):
        service = AtualizarCustodiadoService(custodiado_repo, endereco_repo, uow)

        with pytest.raises(EntityNotFoundError):
            service.execute(AtualizarCustodiadoInputDTO(custodiado_id="nao-existe", nome="Fulano"))


class TestArquivarReativar:

    def test_arquivar(self, cadastrar, custodiado_repo, uow):
        criado = cadastrar()

        output = ArquivarCustodiadoService(custodiado_repo, uow).execute(criado.id, "admin")

        assert output.situacao == "Arquivado"
        assert output.proximo_comparecimento is None
        assert uow.events_of_type(CustodiadoArquivadoEvent)[0].arquivado_por == "admin"

    def test_arquivar_inexistente(self, custodiado_repo, uow):
        with pytest.raises(EntityNotFoundError):
            ArquivarCustodiadoService(custodiado_repo, uow).execute("nao-existe")

    def test_reativar(self, cadastrar, custodiado_repo, uow, hoje):
        criado = cadastrar()
        ArquivarCustodiadoService(custodiado_repo, uow).execute(criado.id)

        output = ReativarCustodiadoService(custodiado_repo, uow).execute(criado.id, hoje=hoje)

        assert output.situacao == "Ativo"
        assert output.proximo_comparecimento == date(2024, 7, 10)
        assert len(uow.events_of_type(CustodiadoReativadoEvent)) == 1

    def test_reativar_com_cpf_em_uso(self, cadastrar, custodiado_repo, uow, hoje):
        criado = cadastrar()
        ArquivarCustodiadoService(custodiado_repo, uow).execute(criado.id)
        cadastrar()

        with pytest.raises(BusinessRuleViolationError) as exc:
            ReativarCustodiadoService(custodiado_repo, uow).execute(criado.id, hoje=hoje)

        assert exc.value.rule == "cpf_duplicado"

    def test_reativar_ativo(self, cadastrar, custodiado_repo, uow):
        criado = cadastrar()

        with pytest.raises(BusinessRuleViolationError) as exc:
            ReativarCustodiadoService(custodiado_repo, uow).execute(criado.id)

        assert exc.value.rule == "custodiado_ja_ativo"


class TestConsultas:

    def test_obter_com_endereco(self, cadastrar, custodiado_repo, endereco_repo):
        criado = cadastrar()

        output = ObterCustodiadoService(custodiado_repo, endereco_repo).execute(criado.id)

        assert output.nome == "João Carlos da Silva"
        assert output.endereco_completo.startswith("Rua Chile, 12")

    def test_obter_inexistente(self, custodiado_repo, endereco_repo):
        with pytest.raises(EntityNotFoundError):
            ObterCustodiadoService(custodiado_repo, endereco_repo).execute("nao-existe")

    def test_listar_filtros(self, cadastrar, custodiado_repo, uow):
        ativo = cadastrar()
        arquivado = cadastrar(
            cpf="111.444.777-35",
            nome="Pedro Henrique Oliveira",
            processo="0000003-67.2023.8.05.0080",
        )
        ArquivarCustodiadoService(custodiado_repo, uow).execute(arquivado.id)
        service = ListarCustodiadosService(custodiado_repo)

        assert [c.id for c in service.execute().items] == [ativo.id]
        assert service.execute(ListarCustodiadosQueryDTO(incluir_arquivados=True)).total == 2
        assert [c.id for c in service.execute(ListarCustodiadosQueryDTO(situacao="arquivado")).items] == [arquivado.id]
        assert service.execute(ListarCustodiadosQueryDTO(status="INADIMPLENTE")).items == []
        por_processo = service.execute(
            ListarCustodiadosQueryDTO(processo="00000012320248050001")
        )
        assert [c.id for c in por_processo.items] == [ativo.id]

    def test_listar_paginado(self, cadastrar, custodiado_repo):
        cadastrar()
        cadastrar(
            cpf="111.444.777-35",
            nome="Pedro Henrique Oliveira",
            processo="0000003-67.2023.8.05.0080",
        )
        service = ListarCustodiadosService(custodiado_repo)

        segunda = service.execute(ListarCustodiadosQueryDTO(pagina=2, por_pagina=1))

        assert [c.nome for c in segunda.items] == ["Pedro Henrique Oliveira"]
        assert segunda.total == 2
        assert not segunda.tem_proxima

    def test_listar_por_pagina_invalido(self, custodiado_repo):
        with pytest.raises(ValidationError) as exc:
            ListarCustodiadosService(custodiado_repo).execute(ListarCustodiadosQueryDTO(por_pagina=0))

        assert exc.value.field == "por_pagina"

    def test_listar_status_invalido(self, custodiado_repo):
        with pytest.raises(ValidationError) as exc:
            ListarCustodiadosService(custodiado_repo).execute(ListarCustodiadosQueryDTO(status="foo"))

        assert exc.value.field == "status"

    def test_buscar_por_nome_e_processo(self, cadastrar, custodiado_repo):
        criado = cadastrar()
        service = BuscarCustodiadosService(custodiado_repo)

        assert [c.id for c in service.execute("carlos")] == [criado.id]
        assert [c.id for c in service.execute("00000012320248050001")] == [criado.id]
        assert service.execute("Maria") == []

    @pytest.mark.parametrize("termo", ["", " ", "a"])
    def test_buscar_termo_invalido(self, custodiado_repo, termo):
        with pytest.raises(ValidationError):
            BuscarCustodiadosService(custodiado_repo).execute(termo)

    def test_agenda(self, cadastrar, custodiado_repo, hoje):
        criado = cadastrar()
        service = AgendaComparecimentosService(custodiado_repo)

        assert service.execute(dias=0, hoje=hoje) == []
        assert [c.id for c in service.execute(dias=30, hoje=hoje)] == [criado.id]
        assert [c.id for c in service.execute(dias=0, hoje=date(2024, 7, 10))] == [criado.id]

    def test_agenda_dias_negativo(self, custodiado_repo):
        with pytest.raises(ValidationError):
            AgendaComparecimentosService(custodiado_repo).execute(dias=-1)


class TestConsultarEnderecosService:

    @pytest.fixture
    def com_mudanca(self, cadastrar, custodiado_repo, endereco_repo, uow, hoje):
        criado = cadastrar()
        AtualizarCustodiadoService(custodiado_repo, endereco_repo, uow).execute(
            AtualizarCustodiadoInputDTO(custodiado_id=criado.id, endereco=NOVO_ENDERECO),
            hoje=hoje,
        )
        return criado

    def test_historico_e_atual(self, com_mudanca, custodiado_repo, endereco_repo):
        service = ConsultarEnderecosService(endereco_repo, custodiado_repo)

        historico = service.historico(com_mudanca.id)
        assert [e.cidade for e in historico] == ["Feira de Santana", "Salvador"]
        assert service.endereco_atual(com_mudanca.id).cidade == "Feira de Santana"
        assert [e.cidade for e in service.enderecos_historicos(com_mudanca.id)] == ["Salvador"]
        assert service.contar_por_custodiado(com_mudanca.id) == 2

    def test_por_periodo(self, com_mudanca, custodiado_repo, endereco_repo):
        service = ConsultarEnderecosService(endereco_repo, custodiado_repo)

        enderecos = service.por_periodo(com_mudanca.id, date(2024, 6, 11), date(2024, 6, 12))

        assert [e.cidade for e in enderecos] == ["Salvador"]

    def test_periodo_invertido(self, com_mudanca, custodiado_repo, endereco_repo):
        service = ConsultarEnderecosService(endereco_repo, custodiado_repo)

        with pytest.raises(ValidationError):
            service.por_periodo(com_mudanca.id, date(2024, 7, 1), date(2024, 6, 1))

    def test_mudancas_por_periodo_ignora_cadastro(self, com_mudanca, custodiado_repo, endereco_repo, hoje):
        service = ConsultarEnderecosService(endereco_repo, custodiado_repo)

        mudancas = service.mudancas_por_periodo(date(2024, 1, 1), hoje)

        assert [e.cidade for e in mudancas] == ["Feira de Santana"]

    def test_por_cidade_e_estado(self, com_mudanca, custodiado_repo, endereco_repo):
        service = ConsultarEnderecosService(endereco_repo, custodiado_repo)

        assert [c.id for c in service.custodiados_por_cidade("feira de santana")] == [com_mudanca.id]
        assert service.custodiados_por_cidade("Salvador") == []
        assert [c.id for c in service.custodiados_por_estado("Bahia")] == [com_mudanca.id]

        with pytest.raises(ValidationError):
            service.custodiados_por_estado("XX")

    def test_estatisticas_por_cidade(self, com_mudanca, cadastrar, custodiado_repo, endereco_repo):
        cadastrar(cpf="111.444.777-35")
        service = ConsultarEnderecosService(endereco_repo, custodiado_repo)

        estatisticas = service.estatisticas_por_cidade()

        assert [(e.cidade, e.total) for e in estatisticas] == [
            ("Feira de Santana", 1),
            ("Salvador", 1),
        ]


class TestStatusPeriodico:

    def test_verificacao_marca_inadimplentes(self, cadastrar, custodiado_repo, uow):
        criado = cadastrar()
        service = AtualizarStatusCustodiadosService(custodiado_repo, uow)

        resultado = service.execute(hoje=date(2024, 7, 11))

        assert resultado["verificados"] == 1
        assert resultado["novos_inadimplentes"] == 1
        assert resultado["alterados"] == 1
        assert custodiado_repo.get_by_id(criado.id).status == StatusComparecimento.INADIMPLENTE

        evento = uow.events_of_type(StatusCustodiadoAlteradoEvent)[0]
        assert evento.status_anterior == "Em Conformidade"
        assert evento.status_novo == "Inadimplente"
        assert evento.dias_atraso == 1

    def test_verificacao_sem_mudanca(self, cadastrar, custodiado_repo, uow, hoje):
        cadastrar()

        resultado = AtualizarStatusCustodiadosService(custodiado_repo, uow).execute(hoje=hoje)

        assert resultado["alterados"] == 0
        assert uow.events_of_type(StatusCustodiadoAlteradoEvent) == []

    def test_resumo_status(self, cadastrar, custodiado_repo, uow):
        cadastrar()
        cadastrar(
            cpf="111.444.777-35",
            data_decisao=date(2024, 1, 2),
            data_comparecimento_inicial=date(2024, 1, 10),
        )
        arquivado = cadastrar(cpf=None, rg="99")
        ArquivarCustodiadoService(custodiado_repo, uow).execute(arquivado.id)

        resumo = ResumoStatusService(custodiado_repo).execute(hoje=date(2024, 6, 15))

        assert resumo["total_ativos"] == 2
        assert resumo["arquivados"] == 1
        assert resumo["inadimplentes"] == 1
        assert resumo["em_conformidade"] == 1
        assert resumo["percentual_conformidade"] == 50.0
        assert resumo["data_consulta"] == "2024-06-15"

    def test_resumo_sem_custodiados(self, custodiado_repo):
        resumo = ResumoStatusService(custodiado_repo).execute(hoje=date(2024, 6, 15))

        assert resumo["total_ativos"] == 0
        assert resumo["percentual_conformidade"] == 0.0
        assert resumo["comparecimentos_hoje"] == 0
