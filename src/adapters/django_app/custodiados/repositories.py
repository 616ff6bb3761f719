"""
Repositórios Django para o domínio de Custodiados.

Implementam os ports definidos em src/core/custodiados/ports.py.
"""

from datetime import date
from typing import List, Optional, Tuple
import logging

from django.db.models import Q

from src.core.custodiados.entities import (
    Custodiado,
    HistoricoEndereco,
    SituacaoCustodiado,
    StatusComparecimento,
)

from ..shared.repository import BaseRepository
from .mappers import CustodiadoMapper, HistoricoEnderecoMapper
from .models import CustodiadoModel, HistoricoEnderecoModel

logger = logging.getLogger(__name__)

ATIVO = SituacaoCustodiado.ATIVO.value


class DjangoCustodiadoRepository(BaseRepository[Custodiado, CustodiadoModel]):
    """
    Implementação do CustodiadoRepository usando Django ORM.

    Listagens ordenadas por nome, exceto a agenda de próximos
    comparecimentos (ordenada por data).
    """

    model_class = CustodiadoModel
    mapper = CustodiadoMapper()
    default_ordering = ("nome",)

    def list_by_situacao(self, situacao: SituacaoCustodiado) -> List[Custodiado]:
        return self._to_entities(self._get_base_queryset().filter(situacao=situacao.value))

    def list_by_status(self, status: StatusComparecimento) -> List[Custodiado]:
        """Apenas custodiados ativos."""
        qs = self._get_base_queryset().filter(situacao=ATIVO, status=status.value)
        return self._to_entities(qs)

    def list_by_processo(self, processo: str) -> List[Custodiado]:
        return self._to_entities(self._get_base_queryset().filter(processo=processo))

    def list_paginated(
        self,
        pagina: int,
        por_pagina: int,
        situacao: Optional[SituacaoCustodiado] = None,
        status: Optional[StatusComparecimento] = None,
        processo: Optional[str] = None,
    ) -> Tuple[List[Custodiado], int]:
        qs = self._get_base_queryset()
        if situacao is not None:
            qs = qs.filter(situacao=situacao.value)
        if status is not None:
            qs = qs.filter(status=status.value)
        if processo is not None:
            qs = qs.filter(processo=processo)
        return self._paginar(qs, pagina, por_pagina)

    def buscar(self, termo: str) -> List[Custodiado]:
        """Busca parcial (case-insensitive) por nome ou processo entre os ativos."""
        qs = self._get_base_queryset().filter(situacao=ATIVO).filter(
            Q(nome__icontains=termo) | Q(processo__icontains=termo)
        )
        return self._to_entities(qs)

    def list_proximos_entre(self, inicio: date, fim: date) -> List[Custodiado]:
        qs = (
            CustodiadoModel.objects
            .filter(
                situacao=ATIVO,
                proximo_comparecimento__gte=inicio,
                proximo_comparecimento__lte=fim,
            )
            .order_by('proximo_comparecimento', 'nome')
        )
        return self._to_entities(qs)

    def exists_cpf_ativo(self, cpf: str, excluir_id: Optional[str] = None) -> bool:
        qs = CustodiadoModel.objects.filter(cpf=cpf, situacao=ATIVO)
        if excluir_id:
            qs = qs.exclude(id=excluir_id)
        return qs.exists()

    def exists_rg_ativo(self, rg: str, excluir_id: Optional[str] = None) -> bool:
        qs = CustodiadoModel.objects.filter(rg=rg, situacao=ATIVO)
        if excluir_id:
            qs = qs.exclude(id=excluir_id)
        return qs.exists()

    def count_by_situacao(self, situacao: SituacaoCustodiado) -> int:
        return CustodiadoModel.objects.filter(situacao=situacao.value).count()


class DjangoHistoricoEnderecoRepository(BaseRepository[HistoricoEndereco, HistoricoEnderecoModel]):
    """Implementação do HistoricoEnderecoRepository usando Django ORM."""

    model_class = HistoricoEnderecoModel
    mapper = HistoricoEnderecoMapper()
    default_ordering = ("-data_inicio", "-criado_em")

    def list_by_custodiado(self, custodiado_id: str) -> List[HistoricoEndereco]:
        return self._to_entities(self._get_base_queryset().filter(custodiado_id=custodiado_id))

    def list_ativos_by_custodiado(self, custodiado_id: str) -> List[HistoricoEndereco]:
        qs = self._get_base_queryset().filter(custodiado_id=custodiado_id, ativo=True)
        return self._to_entities(qs)

    def get_ativo(self, custodiado_id: str) -> Optional[HistoricoEndereco]:
        model = self._get_base_queryset().filter(custodiado_id=custodiado_id, ativo=True).first()
        return self.mapper.to_entity(model) if model else None

    def list_ativos(self) -> List[HistoricoEndereco]:
        return self._to_entities(self._get_base_queryset().filter(ativo=True))

    def list_iniciados_entre(self, inicio: date, fim: date) -> List[HistoricoEndereco]:
        qs = self._get_base_queryset().filter(data_inicio__gte=inicio, data_inicio__lte=fim)
        return self._to_entities(qs)
