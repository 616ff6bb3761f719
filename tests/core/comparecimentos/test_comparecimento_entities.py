"""
Testes Unitários para Entidades do Domínio de Comparecimentos.
"""

import pytest
from datetime import date, time

from src.core.comparecimentos.entities import HistoricoComparecimento, TipoValidacao
from src.core.shared.exceptions import ValidationError


def criar_comparecimento(**overrides):
    dados = dict(
        custodiado_id="custodiado-1",
        data_comparecimento=date(2024, 6, 15),
        tipo_validacao=TipoValidacao.PRESENCIAL,
        validado_por=" Servidor ",
    )
    dados.update(overrides)
    return HistoricoComparecimento.criar(**dados)


class TestTipoValidacao:

    @pytest.mark.parametrize("valor, esperado", [
        ("PRESENCIAL", TipoValidacao.PRESENCIAL),
        ("online", TipoValidacao.ONLINE),
        ("Online/Virtual", TipoValidacao.ONLINE),
        ("cadastro inicial", TipoValidacao.CADASTRO_INICIAL),
        ("cadastro_inicial", TipoValidacao.CADASTRO_INICIAL),
    ])
    def test_from_string(self, valor, esperado):
        assert TipoValidacao.from_string(valor) == esperado

    @pytest.mark.parametrize("valor", ["", "telefone"])
    def test_from_string_invalido(self, valor):
        with pytest.raises(ValueError):
            TipoValidacao.from_string(valor)

    def test_propriedades(self):
        assert TipoValidacao.ONLINE.is_virtual
        assert TipoValidacao.CADASTRO_INICIAL.requer_presenca_fisica
        assert not TipoValidacao.CADASTRO_INICIAL.is_comparecimento_regular
        assert TipoValidacao.PRESENCIAL.codigo == "presencial"


class TestHistoricoComparecimento:

    def test_criar(self):
        comparecimento = criar_comparecimento(hora_comparecimento=time(9, 30))

        assert comparecimento.validado_por == "Servidor"
        assert comparecimento.mudanca_endereco is False
        assert comparecimento.resumo == "15/06/2024 - Presencial às 09:30"

    def test_validado_por_obrigatorio(self):
        with pytest.raises(ValidationError) as exc:
            criar_comparecimento(validado_por="  ")

        assert exc.value.field == "validado_por"

    def test_observacoes_longas(self):
        with pytest.raises(ValidationError) as exc:
            criar_comparecimento(observacoes="x" * 501)

        assert exc.value.field == "observacoes"

    def test_motivo_ignorado_sem_mudanca(self):
        comparecimento = criar_comparecimento(motivo_mudanca_endereco="Mudou-se")

        assert comparecimento.motivo_mudanca_endereco is None

    def test_adicionar_endereco_alterado(self):
        comparecimento = criar_comparecimento()

        comparecimento.adicionar_endereco_alterado("end-1")
        comparecimento.adicionar_endereco_alterado("end-1")

        assert comparecimento.enderecos_alterados == ["end-1"]
        assert comparecimento.mudanca_endereco
        assert comparecimento.resumo.endswith("(com mudança de endereço)")

    def test_atualizar_observacoes(self):
        comparecimento = criar_comparecimento(observacoes="Antiga")

        comparecimento.atualizar_observacoes("  Nova observação ")
        assert comparecimento.observacoes == "Nova observação"

        comparecimento.atualizar_observacoes("   ")
        assert comparecimento.observacoes is None

    def test_atraso(self):
        comparecimento = criar_comparecimento()

        assert comparecimento.is_atrasado(date(2024, 6, 10))
        assert comparecimento.dias_atraso(date(2024, 6, 10)) == 5
        assert not comparecimento.is_atrasado(date(2024, 6, 15))
        assert not comparecimento.is_atrasado(None)

    def test_cadastro_inicial_nunca_atrasado(self):
        comparecimento = criar_comparecimento(tipo_validacao=TipoValidacao.CADASTRO_INICIAL)

        assert not comparecimento.is_atrasado(date(2024, 1, 1))
        assert comparecimento.dias_atraso(date(2024, 1, 1)) == 0
