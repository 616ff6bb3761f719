"""
Ports (Interfaces) do Domínio de Comparecimentos.

Contratos:
- ComparecimentoRepository: Persistência e consultas do histórico
  de comparecimentos
"""

from datetime import date
from typing import List, Optional, Protocol, Tuple, runtime_checkable

from .entities import HistoricoComparecimento, TipoValidacao


@runtime_checkable
class ComparecimentoRepository(Protocol):
    """
    Interface para persistência de comparecimentos.

    Implementações:
    - DjangoComparecimentoRepository (PostgreSQL via ORM)
    - InMemoryComparecimentoRepository (para testes)
    """

    def save(self, comparecimento: HistoricoComparecimento) -> None:
        ...

    def get_by_id(self, comparecimento_id: str) -> Optional[HistoricoComparecimento]:
        ...

    def list_all(self) -> List[HistoricoComparecimento]:
        """Todos os comparecimentos, do mais recente ao mais antigo."""
        ...

    def list_by_custodiado(self, custodiado_id: str) -> List[HistoricoComparecimento]:
        """Comparecimentos do custodiado, do mais recente ao mais antigo."""
        ...

    def list_by_custodiado_e_data(
        self,
        custodiado_id: str,
        data: date
    ) -> List[HistoricoComparecimento]:
        """Comparecimentos do custodiado em uma data específica."""
        ...

    def filtrar(
        self,
        custodiado_id: Optional[str] = None,
        data_inicio: Optional[date] = None,
        data_fim: Optional[date] = None,
        tipo_validacao: Optional[TipoValidacao] = None,
        mudanca_endereco: Optional[bool] = None,
    ) -> List[HistoricoComparecimento]:
        """
        Consulta com filtros opcionais combinados (AND).

        Returns:
            Lista ordenada por data e hora, mais recentes primeiro
        """
        ...

    def filtrar_paginado(
        self,
        pagina: int,
        por_pagina: int,
        custodiado_id: Optional[str] = None,
        data_inicio: Optional[date] = None,
        data_fim: Optional[date] = None,
        tipo_validacao: Optional[TipoValidacao] = None,
        mudanca_endereco: Optional[bool] = None,
    ) -> Tuple[List[HistoricoComparecimento], int]:
        """
        Mesmos filtros de ``filtrar``, paginados no armazenamento.

        Returns:
            Tupla (comparecimentos da página, total sem paginação)
        """
        ...

    def custodiados_com_cadastro_inicial(self) -> List[str]:
        """IDs dos custodiados que já possuem comparecimento CADASTRO_INICIAL."""
        ...


class InMemoryComparecimentoRepository:
    """Implementação em memória do ComparecimentoRepository."""

    def __init__(self):
        self._comparecimentos: dict[str, HistoricoComparecimento] = {}

    def save(self, comparecimento: HistoricoComparecimento) -> None:
        self._comparecimentos[comparecimento.id] = comparecimento

    def get_by_id(self, comparecimento_id: str) -> Optional[HistoricoComparecimento]:
        return self._comparecimentos.get(comparecimento_id)

    def list_all(self) -> List[HistoricoComparecimento]:
        return self.filtrar()

    def list_by_custodiado(self, custodiado_id: str) -> List[HistoricoComparecimento]:
        return self.filtrar(custodiado_id=custodiado_id)

    def list_by_custodiado_e_data(
        self,
        custodiado_id: str,
        data: date
    ) -> List[HistoricoComparecimento]:
        return self.filtrar(custodiado_id=custodiado_id, data_inicio=data, data_fim=data)

    def filtrar(
        self,
        custodiado_id: Optional[str] = None,
        data_inicio: Optional[date] = None,
        data_fim: Optional[date] = None,
        tipo_validacao: Optional[TipoValidacao] = None,
        mudanca_endereco: Optional[bool] = None,
    ) -> List[HistoricoComparecimento]:
        resultado = [
            c for c in self._comparecimentos.values()
            if (custodiado_id is None or c.custodiado_id == custodiado_id)
            and (data_inicio is None or c.data_comparecimento >= data_inicio)
            and (data_fim is None or c.data_comparecimento <= data_fim)
            and (tipo_validacao is None or c.tipo_validacao == tipo_validacao)
            and (mudanca_endereco is None or c.mudanca_endereco == mudanca_endereco)
        ]
        return sorted(
            resultado,
            key=lambda c: (c.data_hora_comparecimento, c.criado_em),
            reverse=True,
        )

    def filtrar_paginado(
        self,
        pagina: int,
        por_pagina: int,
        **filtros,
    ) -> Tuple[List[HistoricoComparecimento], int]:
        resultado = self.filtrar(**filtros)
        inicio = (max(pagina, 1) - 1) * por_pagina
        return resultado[inicio:inicio + por_pagina], len(resultado)

    def custodiados_com_cadastro_inicial(self) -> List[str]:
        return sorted({
            c.custodiado_id for c in self._comparecimentos.values()
            if c.tipo_validacao == TipoValidacao.CADASTRO_INICIAL
        })

    def clear(self) -> None:
        self._comparecimentos.clear()
