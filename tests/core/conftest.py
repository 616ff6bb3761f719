"""
Fixtures dos testes unitários do core.

Os testes do core não tocam banco nem Django: usam repositórios em
memória e um Unit of Work fake que guarda os eventos publicados.
"""

import pytest
from datetime import date, datetime
from typing import List

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import UnitOfWork
from src.core.custodiados.dtos import CadastrarCustodiadoInputDTO, EnderecoInputDTO
from src.core.custodiados.ports import (
    InMemoryCustodiadoRepository,
    InMemoryHistoricoEnderecoRepository,
)
from src.core.comparecimentos.ports import InMemoryComparecimentoRepository
from src.core.usuarios.ports import (
    InMemoryConviteRepository,
    InMemoryEmailVerificationRepository,
    InMemoryUsuarioRepository,
    PlainPasswordHasher,
)


HOJE = date(2024, 6, 15)
AGORA = datetime(2024, 6, 15, 10, 0, 0)


class FakeUnitOfWork(UnitOfWork):
    """
    Fake Unit of Work para testes.

    Permite testar:
    - Comportamento de commit/rollback
    - Eventos publicados (apenas os de transações confirmadas)
    """

    def __init__(self):
        super().__init__()
        self.published: List[DomainEvent] = []
        self.commits = 0
        self.rollbacks = 0

    def _begin_transaction(self) -> None:
        self._events = []

    def commit(self) -> None:
        self.commits += 1
        self.published.extend(self._events)
        self.clear_events()

    def rollback(self) -> None:
        self.rollbacks += 1
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self.commits > 0

    @property
    def rolled_back(self) -> bool:
        return self.rollbacks > 0

    def events_of_type(self, event_class) -> List[DomainEvent]:
        return [e for e in self.published if isinstance(e, event_class)]


@pytest.fixture
def hoje():
    return HOJE


@pytest.fixture
def agora():
    return AGORA


@pytest.fixture
def uow():
    """Fixture para Unit of Work fake."""
    return FakeUnitOfWork()


@pytest.fixture
def custodiado_repo():
    return InMemoryCustodiadoRepository()


@pytest.fixture
def endereco_repo():
    return InMemoryHistoricoEnderecoRepository()


@pytest.fixture
def comparecimento_repo():
    return InMemoryComparecimentoRepository()


@pytest.fixture
def usuario_repo():
    return InMemoryUsuarioRepository()


@pytest.fixture
def convite_repo():
    return InMemoryConviteRepository()


@pytest.fixture
def verificacao_repo():
    return InMemoryEmailVerificationRepository()


@pytest.fixture
def hasher():
    return PlainPasswordHasher()


@pytest.fixture
def endereco_input():
    return EnderecoInputDTO(
        cep="40010000",
        logradouro="Rua Chile",
        numero="12",
        bairro="Centro",
        cidade="Salvador",
        estado="BA",
    )


@pytest.fixture
def cadastro_input(endereco_input):
    """Factory de CadastrarCustodiadoInputDTO com valores válidos."""

    def factory(**overrides):
        dados = dict(
            nome="João Carlos da Silva",
            cpf="529.982.247-25",
            contato="(71) 99999-1234",
            processo="0000001-23.2024.8.05.0001",
            vara="1ª Vara Criminal",
            comarca="Salvador",
            data_decisao=date(2024, 6, 1),
            periodicidade=30,
            data_comparecimento_inicial=date(2024, 6, 10),
            endereco=endereco_input,
            cadastrado_por="servidor@tjba.jus.br",
        )
        dados.update(overrides)
        return CadastrarCustodiadoInputDTO(**dados)

    return factory
