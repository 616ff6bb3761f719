"""
Ports (Interfaces) do Domínio de Custodiados.

Contratos que os Adapters de infraestrutura devem implementar:
- CustodiadoRepository: Persistência e consultas de custodiados
- HistoricoEnderecoRepository: Histórico de endereços

Implementações em memória ficam aqui para testes e prototipagem.
"""

from datetime import date
from typing import List, Optional, Protocol, Tuple, runtime_checkable

from .entities import (
    Custodiado,
    HistoricoEndereco,
    SituacaoCustodiado,
    StatusComparecimento,
)


@runtime_checkable
class CustodiadoRepository(Protocol):
    """
    Interface para persistência de Custodiados.

    Implementações:
    - DjangoCustodiadoRepository (PostgreSQL via ORM)
    - InMemoryCustodiadoRepository (para testes)
    """

    def save(self, custodiado: Custodiado) -> None:
        """
        Persiste custodiado (create ou update).

        Args:
            custodiado: Entidade a ser persistida
        """
        ...

    def get_by_id(self, custodiado_id: str) -> Optional[Custodiado]:
        """
        Busca custodiado por ID.

        Returns:
            Entidade encontrada ou None
        """
        ...

    def list_all(self) -> List[Custodiado]:
        """Lista todos os custodiados, ativos e arquivados, ordenados por nome."""
        ...

    def list_by_situacao(self, situacao: SituacaoCustodiado) -> List[Custodiado]:
        """Lista custodiados de uma situação, ordenados por nome."""
        ...

    def list_by_status(self, status: StatusComparecimento) -> List[Custodiado]:
        """Lista custodiados ATIVOS com o status informado."""
        ...

    def list_by_processo(self, processo: str) -> List[Custodiado]:
        """Lista custodiados (ativos e arquivados) de um processo."""
        ...

    def list_paginated(
        self,
        pagina: int,
        por_pagina: int,
        situacao: Optional[SituacaoCustodiado] = None,
        status: Optional[StatusComparecimento] = None,
        processo: Optional[str] = None,
    ) -> Tuple[List[Custodiado], int]:
        """
        Página de custodiados com filtros opcionais combinados (AND),
        ordenados por nome.

        Returns:
            Tupla (custodiados da página, total sem paginação)
        """
        ...

    def buscar(self, termo: str) -> List[Custodiado]:
        """
        Busca custodiados ativos por nome ou processo (contém, sem
        diferenciar maiúsculas).
        """
        ...

    def list_proximos_entre(self, inicio: date, fim: date) -> List[Custodiado]:
        """
        Lista custodiados ativos com próximo comparecimento no
        intervalo fechado [inicio, fim], ordenados pela data.
        """
        ...

    def exists_cpf_ativo(self, cpf: str, excluir_id: Optional[str] = None) -> bool:
        """Verifica se o CPF pertence a outro custodiado ativo."""
        ...

    def exists_rg_ativo(self, rg: str, excluir_id: Optional[str] = None) -> bool:
        """Verifica se o RG pertence a outro custodiado ativo."""
        ...

    def count_by_situacao(self, situacao: SituacaoCustodiado) -> int:
        ...


@runtime_checkable
class HistoricoEnderecoRepository(Protocol):
    """
    Interface para o histórico de endereços.

    Invariante mantida pelos casos de uso: no máximo um endereço
    ativo por custodiado.
    """

    def save(self, endereco: HistoricoEndereco) -> None:
        ...

    def get_by_id(self, endereco_id: str) -> Optional[HistoricoEndereco]:
        ...

    def list_by_custodiado(self, custodiado_id: str) -> List[HistoricoEndereco]:
        """Histórico completo do custodiado, do mais recente ao mais antigo."""
        ...

    def list_ativos_by_custodiado(self, custodiado_id: str) -> List[HistoricoEndereco]:
        """Endereços ativos do custodiado (normalmente zero ou um)."""
        ...

    def get_ativo(self, custodiado_id: str) -> Optional[HistoricoEndereco]:
        """Endereço ativo mais recente do custodiado."""
        ...

    def list_ativos(self) -> List[HistoricoEndereco]:
        """Todos os endereços ativos (de todos os custodiados)."""
        ...

    def list_iniciados_entre(self, inicio: date, fim: date) -> List[HistoricoEndereco]:
        """Endereços com data_inicio no intervalo fechado [inicio, fim]."""
        ...


class InMemoryCustodiadoRepository:
    """
    Implementação em memória do CustodiadoRepository.

    Útil para testes unitários e prototipagem. Não usar em produção!
    """

    def __init__(self):
        self._custodiados: dict[str, Custodiado] = {}

    def save(self, custodiado: Custodiado) -> None:
        self._custodiados[custodiado.id] = custodiado

    def get_by_id(self, custodiado_id: str) -> Optional[Custodiado]:
        return self._custodiados.get(custodiado_id)

    def list_all(self) -> List[Custodiado]:
        return sorted(self._custodiados.values(), key=lambda c: c.nome)

    def list_by_situacao(self, situacao: SituacaoCustodiado) -> List[Custodiado]:
        return [c for c in self.list_all() if c.situacao == situacao]

    def list_by_status(self, status: StatusComparecimento) -> List[Custodiado]:
        return [c for c in self.list_all() if c.is_ativo and c.status == status]

    def list_by_processo(self, processo: str) -> List[Custodiado]:
        return [c for c in self.list_all() if c.processo == processo]

    def list_paginated(
        self,
        pagina: int,
        por_pagina: int,
        situacao: Optional[SituacaoCustodiado] = None,
        status: Optional[StatusComparecimento] = None,
        processo: Optional[str] = None,
    ) -> Tuple[List[Custodiado], int]:
        filtrados = [
            c for c in self.list_all()
            if (situacao is None or c.situacao == situacao)
            and (status is None or c.status == status)
            and (processo is None or c.processo == processo)
        ]
        inicio = (max(pagina, 1) - 1) * por_pagina
        return filtrados[inicio:inicio + por_pagina], len(filtrados)

    def buscar(self, termo: str) -> List[Custodiado]:
        termo = termo.lower()
        return [
            c for c in self.list_all()
            if c.is_ativo and (termo in c.nome.lower() or termo in c.processo.lower())
        ]

    def list_proximos_entre(self, inicio: date, fim: date) -> List[Custodiado]:
        return sorted(
            (
                c for c in self._custodiados.values()
                if c.is_ativo and c.proximo_comparecimento
                and inicio <= c.proximo_comparecimento <= fim
            ),
            key=lambda c: c.proximo_comparecimento,
        )

    def exists_cpf_ativo(self, cpf: str, excluir_id: Optional[str] = None) -> bool:
        return any(
            c.cpf == cpf and c.is_ativo and c.id != excluir_id
            for c in self._custodiados.values()
        )

    def exists_rg_ativo(self, rg: str, excluir_id: Optional[str] = None) -> bool:
        return any(
            c.rg == rg and c.is_ativo and c.id != excluir_id
            for c in self._custodiados.values()
        )

    def count_by_situacao(self, situacao: SituacaoCustodiado) -> int:
        return len(self.list_by_situacao(situacao))

    def clear(self) -> None:
        """Limpa todos os dados (útil para testes)."""
        self._custodiados.clear()


class InMemoryHistoricoEnderecoRepository:
    """Implementação em memória do HistoricoEnderecoRepository."""

    def __init__(self):
        self._enderecos: dict[str, HistoricoEndereco] = {}

    def save(self, endereco: HistoricoEndereco) -> None:
        self._enderecos[endereco.id] = endereco

    def get_by_id(self, endereco_id: str) -> Optional[HistoricoEndereco]:
        return self._enderecos.get(endereco_id)

    def list_by_custodiado(self, custodiado_id: str) -> List[HistoricoEndereco]:
        return sorted(
            (e for e in self._enderecos.values() if e.custodiado_id == custodiado_id),
            key=lambda e: (e.data_inicio, e.criado_em),
            reverse=True,
        )

    def list_ativos_by_custodiado(self, custodiado_id: str) -> List[HistoricoEndereco]:
        return [e for e in self.list_by_custodiado(custodiado_id) if e.ativo]

    def get_ativo(self, custodiado_id: str) -> Optional[HistoricoEndereco]:
        ativos = self.list_ativos_by_custodiado(custodiado_id)
        return ativos[0] if ativos else None

    def list_ativos(self) -> List[HistoricoEndereco]:
        return [e for e in self._enderecos.values() if e.ativo]

    def list_iniciados_entre(self, inicio: date, fim: date) -> List[HistoricoEndereco]:
        return sorted(
            (e for e in self._enderecos.values() if inicio <= e.data_inicio <= fim),
            key=lambda e: e.data_inicio,
            reverse=True,
        )

    def clear(self) -> None:
        self._enderecos.clear()
