"""
Fixtures dos testes dos adapters Django.

O Django já é configurado pelo conftest raiz (SQLite em memória);
aqui ficam factories que gravam entidades pelo ORM.
"""

import pytest
from datetime import date, datetime

from src.core.custodiados.entities import Custodiado, HistoricoEndereco
from src.core.usuarios.entities import TipoUsuario, Usuario


HOJE = date(2024, 6, 15)
AGORA = datetime(2024, 6, 15, 10, 0, 0)


@pytest.fixture
def custodiado_repository():
    from src.adapters.django_app.custodiados.repositories import DjangoCustodiadoRepository
    return DjangoCustodiadoRepository()


@pytest.fixture
def endereco_repository():
    from src.adapters.django_app.custodiados.repositories import DjangoHistoricoEnderecoRepository
    return DjangoHistoricoEnderecoRepository()


@pytest.fixture
def comparecimento_repository():
    from src.adapters.django_app.comparecimentos.repositories import DjangoComparecimentoRepository
    return DjangoComparecimentoRepository()


@pytest.fixture
def usuario_repository():
    from src.adapters.django_app.usuarios.repositories import DjangoUsuarioRepository
    return DjangoUsuarioRepository()


@pytest.fixture
def event_store():
    from src.adapters.django_app.eventos.repositories import DjangoEventStore
    return DjangoEventStore()


@pytest.fixture
def custodiado_factory(db, custodiado_repository):
    """Cria e persiste custodiados (comparecimento inicial em 10/06/2024)."""

    def create_custodiado(**kwargs):
        defaults = dict(
            nome="João Carlos da Silva",
            cpf="529.982.247-25",
            contato="(71) 99999-1234",
            processo="0000001-23.2024.8.05.0001",
            vara="1ª Vara Criminal",
            comarca="Salvador",
            data_decisao=date(2024, 6, 1),
            periodicidade=30,
            data_comparecimento_inicial=date(2024, 6, 10),
            hoje=HOJE,
        )
        defaults.update(kwargs)
        custodiado = Custodiado.criar(**defaults)
        custodiado_repository.save(custodiado)
        return custodiado

    return create_custodiado


@pytest.fixture
def endereco_factory(db, endereco_repository):
    def create_endereco(custodiado_id, **kwargs):
        defaults = dict(
            cep="40010000",
            logradouro="Rua Chile",
            numero="12",
            bairro="Centro",
            cidade="Salvador",
            estado="BA",
            data_inicio=date(2024, 6, 10),
        )
        defaults.update(kwargs)
        endereco = HistoricoEndereco.criar(custodiado_id=custodiado_id, **defaults)
        endereco_repository.save(endereco)
        return endereco

    return create_endereco


@pytest.fixture
def usuario_factory(db, usuario_repository):
    def create_usuario(**kwargs):
        defaults = dict(
            nome="Ana Paula Souza",
            email="ana.souza@tjba.jus.br",
            senha_hash="hash",
            tipo=TipoUsuario.USUARIO,
            agora=AGORA,
        )
        defaults.update(kwargs)
        usuario = Usuario.criar(**defaults)
        usuario_repository.save(usuario)
        return usuario

    return create_usuario
