"""
Documentos e formatos usados no cadastro de custodiados.

Funções puras de normalização e validação:
- CPF (com dígitos verificadores)
- Número de processo no padrão CNJ (0000000-00.0000.0.00.0000)
- CEP (00000-000)
- Telefone de contato com DDD
"""

import re
from typing import Optional


PROCESSO_PATTERN = re.compile(r"^\d{7}-\d{2}\.\d{4}\.\d\.\d{2}\.\d{4}$")
CEP_PATTERN = re.compile(r"^\d{5}-?\d{3}$")
CONTATO_PATTERN = re.compile(r"^\(?\d{2}\)?\s?\d{4,5}-?\d{4}$")


def somente_digitos(valor: Optional[str]) -> str:
    """Remove tudo que não for dígito."""
    if not valor:
        return ""
    return re.sub(r"\D", "", valor)


def formatar_cpf(cpf: Optional[str]) -> Optional[str]:
    """
    Formata CPF como 000.000.000-00.

    Valores que não têm 11 dígitos são devolvidos sem alteração
    (a validação fica a cargo de ``cpf_valido``).
    """
    if not cpf or not cpf.strip():
        return None
    digitos = somente_digitos(cpf)
    if len(digitos) != 11:
        return cpf.strip()
    return f"{digitos[:3]}.{digitos[3:6]}.{digitos[6:9]}-{digitos[9:]}"


def _digito_verificador(digitos: str, peso_inicial: int) -> int:
    soma = sum(int(d) * peso for d, peso in zip(digitos, range(peso_inicial, 1, -1)))
    resto = soma % 11
    return 0 if resto < 2 else 11 - resto


def cpf_valido(cpf: Optional[str]) -> bool:
    """
    Valida CPF pelos dígitos verificadores.

    CPFs com todos os dígitos iguais (000.000.000-00, 111...) são
    rejeitados.
    """
    digitos = somente_digitos(cpf)
    if len(digitos) != 11 or digitos == digitos[0] * 11:
        return False

    primeiro = _digito_verificador(digitos[:9], 10)
    segundo = _digito_verificador(digitos[:9] + str(primeiro), 11)
    return digitos[9:] == f"{primeiro}{segundo}"


def formatar_processo(processo: Optional[str]) -> Optional[str]:
    """
    Formata número de processo com 20 dígitos no padrão CNJ.

    Example:
        formatar_processo("00000012320248050001")
        # "0000001-23.2024.8.05.0001"
    """
    if not processo or not processo.strip():
        return None
    digitos = somente_digitos(processo)
    if len(digitos) != 20:
        return processo.strip()
    return (
        f"{digitos[:7]}-{digitos[7:9]}.{digitos[9:13]}."
        f"{digitos[13]}.{digitos[14:16]}.{digitos[16:]}"
    )


def processo_valido(processo: Optional[str]) -> bool:
    return bool(processo) and bool(PROCESSO_PATTERN.match(processo))


def formatar_cep(cep: Optional[str]) -> Optional[str]:
    """Formata CEP como 00000-000 quando possui 8 dígitos."""
    if not cep or not cep.strip():
        return None
    digitos = somente_digitos(cep)
    if len(digitos) != 8:
        return cep.strip()
    return f"{digitos[:5]}-{digitos[5:]}"


def cep_valido(cep: Optional[str]) -> bool:
    return bool(cep) and bool(CEP_PATTERN.match(cep.strip()))


def contato_valido(contato: Optional[str]) -> bool:
    """Aceita (71) 99999-9999, 71 9999-9999, 71999999999 e variações."""
    return bool(contato) and bool(CONTATO_PATTERN.match(contato.strip()))
