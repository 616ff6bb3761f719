"""
Testes do núcleo compartilhado: exceções, paginação, eventos e Unit of Work.
"""

import pytest
from datetime import datetime

from src.core.custodiados.events import CustodiadoArquivadoEvent
from src.core.usuarios.events import CodigoVerificacaoSolicitadoEvent
from src.core.shared.dtos import PaginatedResultDTO
from src.core.shared.events import EventMetadata
from src.core.shared.exceptions import (
    AccountLockedError,
    AuthenticationError,
    BusinessRuleViolationError,
    EntityNotFoundError,
    ValidationError,
)


class Item:
    def __init__(self, valor):
        self.valor = valor

    def to_dict(self):
        return {"valor": self.valor}


class TestExceptions:

    def test_validation_error(self):
        erro = ValidationError("CPF inválido", field="cpf")

        assert erro.code == "VALIDATION_ERROR_CPF"
        assert str(erro) == "[VALIDATION_ERROR_CPF] CPF inválido"
        assert erro.to_dict() == {
            "error": "VALIDATION_ERROR_CPF",
            "message": "CPF inválido",
            "field": "cpf",
        }

    def test_validation_error_sem_campo(self):
        assert ValidationError("Dados inválidos").to_dict() == {
            "error": "VALIDATION_ERROR",
            "message": "Dados inválidos",
        }

    def test_entity_not_found(self):
        erro = EntityNotFoundError("Custodiado não encontrado", entity_type="Custodiado", entity_id="c-1")

        assert erro.to_dict()["error"] == "ENTITY_NOT_FOUND"
        assert erro.to_dict()["entity_id"] == "c-1"

    def test_business_rule(self):
        erro = BusinessRuleViolationError("Custodiado já está arquivado", rule="custodiado_ja_arquivado")

        assert erro.to_dict()["rule"] == "custodiado_ja_arquivado"

    def test_account_locked_e_authentication(self):
        ate = datetime(2024, 6, 15, 10, 30)
        erro = AccountLockedError("Conta bloqueada", bloqueado_ate=ate)

        assert isinstance(erro, AuthenticationError)
        assert erro.code == "ACCOUNT_LOCKED"
        assert erro.to_dict()["bloqueado_ate"] == "2024-06-15T10:30:00"
        assert AuthenticationError().message == "Credenciais inválidas"


class TestPaginacao:

    def test_pagina_intermediaria(self):
        resultado = PaginatedResultDTO(items=[Item(i) for i in range(20, 40)], total=45, pagina=2, por_pagina=20)

        assert resultado.total_paginas == 3
        assert resultado.tem_proxima
        assert resultado.tem_anterior

    def test_ultima_pagina(self):
        resultado = PaginatedResultDTO(items=[Item(40)], total=41, pagina=3, por_pagina=20)

        assert not resultado.tem_proxima
        assert resultado.to_dict()["items"] == [{"valor": 40}]

    def test_lista_vazia(self):
        resultado = PaginatedResultDTO(items=[], total=0, pagina=1, por_pagina=10)

        assert resultado.total_paginas == 0
        assert not resultado.tem_proxima
        assert not resultado.tem_anterior


class TestDomainEvent:

    def test_to_dict(self):
        evento = CustodiadoArquivadoEvent(aggregate_id="c-1", processo="0000001-23.2024.8.05.0001")

        dados = evento.to_dict()

        assert dados["event_type"] == "CustodiadoArquivadoEvent"
        assert dados["aggregate_type"] == "Custodiado"
        assert dados["data"] == {"processo": "0000001-23.2024.8.05.0001", "arquivado_por": None}

    def test_from_dict(self):
        original = CustodiadoArquivadoEvent(aggregate_id="c-1", processo="p", arquivado_por="admin")

        copia = CustodiadoArquivadoEvent.from_dict(original.to_dict())

        assert copia.event_id == original.event_id
        assert copia.occurred_at == original.occurred_at
        assert copia.arquivado_por == "admin"

    def test_aggregate_id_obrigatorio(self):
        with pytest.raises(ValueError):
            CustodiadoArquivadoEvent(processo="p")

    def test_campos_sensiveis_fora_do_payload(self):
        evento = CodigoVerificacaoSolicitadoEvent(aggregate_id="v-1", email="a@tjba.jus.br", codigo="123456")

        assert "codigo" not in evento.to_dict()["data"]
        assert evento.to_dict()["data"]["email"] == "a@tjba.jus.br"
        assert evento.to_dict(include_sensitive=True)["data"]["codigo"] == "123456"

    def test_metadata(self):
        metadata = EventMetadata(user_id="u-1")

        assert metadata.correlation_id
        assert metadata.to_dict()["user_id"] == "u-1"


class TestUnitOfWork:

    def test_commit_publica_eventos(self, uow):
        with uow:
            uow.publish_event(CustodiadoArquivadoEvent(aggregate_id="c-1"))

        assert uow.committed
        assert len(uow.published) == 1
        assert uow.collect_events() == []

    def test_rollback_descarta_eventos(self, uow):
        with pytest.raises(RuntimeError):
            with uow:
                uow.publish_event(CustodiadoArquivadoEvent(aggregate_id="c-1"))
                raise RuntimeError("falha")

        assert uow.rolled_back
        assert uow.published == []
