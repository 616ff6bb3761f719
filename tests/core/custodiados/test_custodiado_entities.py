"""
Testes Unitários para Entidades do Domínio de Custodiados.

Coverage:
- Custodiado.criar(): Validações de cadastro e agenda inicial
- Custodiado.registrar_comparecimento(): Avanço da agenda
- Status por data (inadimplência)
- Arquivamento e reativação
- Atualização parcial
- HistoricoEndereco: criação, finalização e períodos
- EstadoBrasil
"""

import pytest
from datetime import date, timedelta

from src.core.custodiados.entities import (
    Custodiado,
    EstadoBrasil,
    HistoricoEndereco,
    SituacaoCustodiado,
    StatusComparecimento,
)
from src.core.shared.exceptions import BusinessRuleViolationError, ValidationError


HOJE = date(2024, 6, 15)


def criar_custodiado(**overrides):
    dados = dict(
        nome="João Carlos da Silva",
        cpf="52998224725",
        contato="(71) 99999-1234",
        processo="00000012320248050001",
        vara="1ª Vara Criminal",
        comarca="Salvador",
        data_decisao=date(2024, 6, 1),
        periodicidade=30,
        data_comparecimento_inicial=date(2024, 6, 10),
        hoje=HOJE,
    )
    dados.update(overrides)
    return Custodiado.criar(**dados)


class TestCustodiadoCriacao:

    def test_criar_custodiado_valido(self):
        custodiado = criar_custodiado()

        assert len(custodiado.id) == 36  # UUID
        assert custodiado.cpf == "529.982.247-25"
        assert custodiado.processo == "0000001-23.2024.8.05.0001"
        assert custodiado.situacao == SituacaoCustodiado.ATIVO
        assert custodiado.status == StatusComparecimento.EM_CONFORMIDADE
        assert custodiado.ultimo_comparecimento == date(2024, 6, 10)
        assert custodiado.proximo_comparecimento == date(2024, 7, 10)

    def test_comparecimento_inicial_default_e_hoje(self):
        custodiado = criar_custodiado(data_comparecimento_inicial=None)

        assert custodiado.data_comparecimento_inicial == HOJE
        assert custodiado.proximo_comparecimento == HOJE + timedelta(days=30)

    def test_comparecimento_inicial_antigo_gera_inadimplencia(self):
        custodiado = criar_custodiado(
            data_decisao=date(2024, 1, 2),
            data_comparecimento_inicial=date(2024, 1, 10),
        )

        assert custodiado.status == StatusComparecimento.INADIMPLENTE
        assert custodiado.dias_atraso(HOJE) == (HOJE - date(2024, 2, 9)).days

    def test_apenas_rg_e_suficiente(self):
        custodiado = criar_custodiado(cpf=None, rg="12.345.678-90")

        assert custodiado.cpf is None
        assert custodiado.identificacao == "RG: 12.345.678-90"

    def test_sem_documento_falha(self):
        with pytest.raises(ValidationError) as exc:
            criar_custodiado(cpf=None, rg="  ")

        assert exc.value.field == "cpf"
        assert "Pelo menos um documento" in exc.value.message

    def test_cpf_invalido_falha(self):
        with pytest.raises(ValidationError) as exc:
            criar_custodiado(cpf="529.982.247-26")

        assert exc.value.code == "VALIDATION_ERROR_CPF"

    def test_data_decisao_futura_falha(self):
        with pytest.raises(ValidationError) as exc:
            criar_custodiado(data_decisao=HOJE + timedelta(days=1))

        assert exc.value.field == "data_decisao"

    @pytest.mark.parametrize("periodicidade", [0, 366, None])
    def test_periodicidade_fora_do_intervalo(self, periodicidade):
        with pytest.raises(ValidationError) as exc:
            criar_custodiado(periodicidade=periodicidade)

        assert exc.value.field == "periodicidade"

    def test_comparecimento_inicial_anterior_a_decisao(self):
        with pytest.raises(ValidationError) as exc:
            criar_custodiado(data_comparecimento_inicial=date(2024, 5, 31))

        assert exc.value.field == "data_comparecimento_inicial"

    def test_comparecimento_inicial_mais_de_cinco_anos(self):
        with pytest.raises(ValidationError):
            criar_custodiado(
                data_decisao=date(2018, 1, 1),
                data_comparecimento_inicial=date(2018, 1, 2),
            )

    def test_processo_invalido(self):
        with pytest.raises(ValidationError) as exc:
            criar_custodiado(processo="123")

        assert exc.value.field == "processo"

    def test_nome_com_numeros_falha(self):
        with pytest.raises(ValidationError) as exc:
            criar_custodiado(nome="João 123")

        assert exc.value.field == "nome"

    def test_contato_invalido(self):
        with pytest.raises(ValidationError) as exc:
            criar_custodiado(contato="abc")

        assert exc.value.field == "contato"


class TestCustodiadoAgenda:

    def test_registrar_comparecimento_avanca_agenda(self):
        custodiado = criar_custodiado()

        custodiado.registrar_comparecimento(date(2024, 6, 14), HOJE)

        assert custodiado.ultimo_comparecimento == date(2024, 6, 14)
        assert custodiado.proximo_comparecimento == date(2024, 7, 14)

    def test_comparecimento_retroativo_nao_volta_agenda(self):
        custodiado = criar_custodiado()

        custodiado.registrar_comparecimento(date(2024, 6, 5), HOJE)

        assert custodiado.ultimo_comparecimento == date(2024, 6, 10)
        assert custodiado.proximo_comparecimento == date(2024, 7, 10)

    def test_comparecimento_regulariza_inadimplente(self):
        custodiado = criar_custodiado(
            data_decisao=date(2024, 1, 2),
            data_comparecimento_inicial=date(2024, 1, 10),
        )
        assert custodiado.esta_inadimplente(HOJE)

        custodiado.registrar_comparecimento(HOJE, HOJE)

        assert custodiado.status == StatusComparecimento.EM_CONFORMIDADE
        assert custodiado.dias_atraso(HOJE) == 0

    def test_registrar_comparecimento_arquivado_falha(self):
        custodiado = criar_custodiado()
        custodiado.arquivar()

        with pytest.raises(BusinessRuleViolationError) as exc:
            custodiado.registrar_comparecimento(HOJE, HOJE)

        assert exc.value.rule == "custodiado_arquivado"

    def test_atualizar_status_por_data(self):
        custodiado = criar_custodiado()

        assert custodiado.atualizar_status_por_data(date(2024, 7, 10)) is False
        assert custodiado.atualizar_status_por_data(date(2024, 7, 11)) is True
        assert custodiado.status == StatusComparecimento.INADIMPLENTE

    def test_comparecimento_hoje_e_proximos(self):
        custodiado = criar_custodiado()

        assert custodiado.comparecimento_hoje(date(2024, 7, 10))
        assert custodiado.is_proximo_comparecimento(30, HOJE)
        assert not custodiado.is_proximo_comparecimento(10, HOJE)


class TestCustodiadoSituacao:

    def test_arquivar_remove_da_agenda(self):
        custodiado = criar_custodiado()

        custodiado.arquivar()

        assert custodiado.is_arquivado
        assert custodiado.proximo_comparecimento is None
        assert custodiado.dias_atraso(HOJE) == 0
        assert not custodiado.esta_inadimplente(HOJE)

    def test_arquivar_duas_vezes_falha(self):
        custodiado = criar_custodiado()
        custodiado.arquivar()

        with pytest.raises(BusinessRuleViolationError) as exc:
            custodiado.arquivar()

        assert exc.value.rule == "custodiado_ja_arquivado"

    def test_reativar_recalcula_agenda(self):
        custodiado = criar_custodiado()
        custodiado.arquivar()

        custodiado.reativar(date(2024, 8, 1))

        assert custodiado.is_ativo
        assert custodiado.proximo_comparecimento == date(2024, 7, 10)
        assert custodiado.status == StatusComparecimento.INADIMPLENTE

    def test_reativar_ativo_falha(self):
        with pytest.raises(BusinessRuleViolationError) as exc:
            criar_custodiado().reativar(HOJE)

        assert exc.value.rule == "custodiado_ja_ativo"


class TestCustodiadoAtualizacao:

    def test_atualizar_dados_parcial(self):
        custodiado = criar_custodiado()

        campos = custodiado.atualizar_dados(nome="João C. da Silva", contato="71 3333-4444", hoje=HOJE)

        assert campos == ["nome", "contato"]
        assert custodiado.nome == "João C. da Silva"
        assert custodiado.vara == "1ª Vara Criminal"

    def test_alterar_periodicidade_recalcula_proximo(self):
        custodiado = criar_custodiado()

        custodiado.atualizar_dados(periodicidade=15, hoje=HOJE)

        assert custodiado.proximo_comparecimento == date(2024, 6, 25)

    def test_atualizar_arquivado_falha(self):
        custodiado = criar_custodiado()
        custodiado.arquivar()

        with pytest.raises(BusinessRuleViolationError):
            custodiado.atualizar_dados(nome="Outro Nome", hoje=HOJE)

    def test_data_decisao_posterior_ao_comparecimento_inicial(self):
        custodiado = criar_custodiado()

        with pytest.raises(ValidationError) as exc:
            custodiado.atualizar_dados(data_decisao=date(2024, 6, 14), hoje=HOJE)

        assert exc.value.field == "data_decisao"
        assert custodiado.data_decisao == date(2024, 6, 1)

    def test_data_decisao_igual_ao_comparecimento_inicial(self):
        custodiado = criar_custodiado()

        custodiado.atualizar_dados(data_decisao=date(2024, 6, 10), hoje=HOJE)

        assert custodiado.data_decisao == date(2024, 6, 10)

    def test_periodicidade_descricao(self):
        assert criar_custodiado(periodicidade=30).periodicidade_descricao == "Mensal"
        assert criar_custodiado(periodicidade=45).periodicidade_descricao == "45 dias"


class TestHistoricoEndereco:

    def criar_endereco(self, **overrides):
        dados = dict(
            custodiado_id="custodiado-1",
            cep="40010000",
            logradouro="Rua Chile",
            numero="12",
            bairro="Centro",
            cidade="Salvador",
            estado="ba",
            data_inicio=date(2024, 1, 1),
        )
        dados.update(overrides)
        return HistoricoEndereco.criar(**dados)

    def test_criar_endereco_normaliza(self):
        endereco = self.criar_endereco()

        assert endereco.cep == "40010-000"
        assert endereco.estado == "BA"
        assert endereco.ativo
        assert endereco.endereco_completo == "Rua Chile, 12, Centro, Salvador - BA, CEP: 40010-000"
        assert endereco.nome_estado == "Bahia"
        assert endereco.regiao_estado == "Nordeste"

    def test_estado_invalido(self):
        with pytest.raises(ValidationError) as exc:
            self.criar_endereco(estado="XX")

        assert exc.value.field == "estado"

    def test_logradouro_curto(self):
        with pytest.raises(ValidationError) as exc:
            self.criar_endereco(logradouro="Rua")

        assert exc.value.field == "logradouro"

    def test_cep_invalido(self):
        with pytest.raises(ValidationError) as exc:
            self.criar_endereco(cep="400")

        assert exc.value.field == "cep"

    def test_finalizar(self):
        endereco = self.criar_endereco()

        endereco.finalizar(date(2024, 3, 1))

        assert not endereco.ativo
        assert endereco.data_fim == date(2024, 3, 1)
        assert endereco.periodo_residencia == "01/01/2024 até 01/03/2024"
        assert endereco.dias_residencia() == 60

    def test_finalizar_duas_vezes(self):
        endereco = self.criar_endereco()
        endereco.finalizar(date(2024, 3, 1))

        with pytest.raises(BusinessRuleViolationError) as exc:
            endereco.finalizar(date(2024, 4, 1))

        assert exc.value.rule == "endereco_ja_finalizado"

    def test_finalizar_antes_do_inicio(self):
        endereco = self.criar_endereco()

        with pytest.raises(BusinessRuleViolationError) as exc:
            endereco.finalizar(date(2023, 12, 31))

        assert exc.value.rule == "data_fim_anterior_inicio"

    def test_esteve_ativo_entre(self):
        endereco = self.criar_endereco()
        endereco.finalizar(date(2024, 3, 1))

        assert endereco.esteve_ativo_entre(date(2024, 2, 1), date(2024, 2, 28))
        assert endereco.esteve_ativo_entre(date(2024, 3, 1), date(2024, 4, 1))
        assert not endereco.esteve_ativo_entre(date(2024, 3, 2), date(2024, 4, 1))

    def test_endereco_resumido(self):
        assert self.criar_endereco().endereco_resumido == "Rua Chile, 12, Salvador - BA"
        assert self.criar_endereco(numero=None).endereco_resumido == "Rua Chile, Salvador - BA"

    def test_mudanca_durante_comparecimento(self):
        assert not self.criar_endereco().is_mudanca_durante_comparecimento
        assert self.criar_endereco(historico_comparecimento_id="comp-1").is_mudanca_durante_comparecimento


class TestEstadoBrasil:

    def test_from_string_sigla_e_nome(self):
        assert EstadoBrasil.from_string("ba") == EstadoBrasil.BA
        assert EstadoBrasil.from_string("São Paulo") == EstadoBrasil.SP

    def test_from_string_invalido(self):
        with pytest.raises(ValueError):
            EstadoBrasil.from_string("Atlântida")

    def test_por_regiao(self):
        sul = EstadoBrasil.por_regiao("Sul")

        assert set(sul) == {EstadoBrasil.PR, EstadoBrasil.RS, EstadoBrasil.SC}

    def test_siglas_validas(self):
        siglas = EstadoBrasil.siglas_validas().split(", ")

        assert len(siglas) == 27
        assert siglas[0] == "AC"
        assert siglas[-1] == "TO"
        assert "BA" in siglas
