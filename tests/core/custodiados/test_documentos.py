"""
Testes das funções de normalização e validação de documentos.
"""

import pytest

from src.core.custodiados.documentos import (
    cep_valido,
    contato_valido,
    cpf_valido,
    formatar_cep,
    formatar_cpf,
    formatar_processo,
    processo_valido,
    somente_digitos,
)


class TestCPF:

    @pytest.mark.parametrize("cpf", ["529.982.247-25", "52998224725", "111.444.777-35"])
    def test_cpf_valido(self, cpf):
        assert cpf_valido(cpf) is True

    @pytest.mark.parametrize("cpf", [
        "529.982.247-26",   # dígito verificador errado
        "111.111.111-11",   # dígitos repetidos
        "000.000.000-00",
        "1234567890",       # 10 dígitos
        "",
        None,
    ])
    def test_cpf_invalido(self, cpf):
        assert cpf_valido(cpf) is False

    def test_formatar_cpf(self):
        assert formatar_cpf("52998224725") == "529.982.247-25"
        assert formatar_cpf(" 529.982.247-25 ") == "529.982.247-25"

    def test_formatar_cpf_incompleto_mantem_valor(self):
        assert formatar_cpf(" 123.456 ") == "123.456"

    def test_formatar_cpf_vazio(self):
        assert formatar_cpf("") is None
        assert formatar_cpf(None) is None


class TestProcesso:

    def test_formatar_processo_somente_digitos(self):
        assert formatar_processo("00000012320248050001") == "0000001-23.2024.8.05.0001"

    def test_processo_valido(self):
        assert processo_valido("0000001-23.2024.8.05.0001") is True

    @pytest.mark.parametrize("processo", [
        "00000012320248050001",
        "0000001-23.2024.8.05",
        "processo-123",
        None,
    ])
    def test_processo_invalido(self, processo):
        assert processo_valido(processo) is False


class TestCEPeContato:

    def test_formatar_cep(self):
        assert formatar_cep("40010000") == "40010-000"
        assert formatar_cep("40010-000") == "40010-000"

    def test_cep_valido(self):
        assert cep_valido("40010-000")
        assert cep_valido("40010000")
        assert not cep_valido("4001-000")
        assert not cep_valido(None)

    @pytest.mark.parametrize("contato", [
        "(71) 99999-9999",
        "71 9999-9999",
        "71999999999",
        "(71)3333-4444",
    ])
    def test_contato_valido(self, contato):
        assert contato_valido(contato)

    @pytest.mark.parametrize("contato", ["9999-9999", "telefone", "", None])
    def test_contato_invalido(self, contato):
        assert not contato_valido(contato)

    def test_somente_digitos(self):
        assert somente_digitos("529.982.247-25") == "52998224725"
        assert somente_digitos(None) == ""
