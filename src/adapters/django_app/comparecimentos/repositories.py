"""
Repositório Django para o domínio de Comparecimentos.

Implementa o port definido em src/core/comparecimentos/ports.py.
"""

from datetime import date
from typing import List, Optional, Tuple
import logging

from django.db.models import F, QuerySet

from src.core.comparecimentos.entities import HistoricoComparecimento, TipoValidacao

from ..shared.repository import BaseRepository
from .mappers import ComparecimentoMapper
from .models import HistoricoComparecimentoModel

logger = logging.getLogger(__name__)


class DjangoComparecimentoRepository(BaseRepository[HistoricoComparecimento, HistoricoComparecimentoModel]):
    """
    Implementação do ComparecimentoRepository usando Django ORM.

    Ordenação: data e hora mais recentes primeiro; sem hora conta
    como início do dia.
    """

    model_class = HistoricoComparecimentoModel
    mapper = ComparecimentoMapper()
    default_ordering = (
        F('data_comparecimento').desc(),
        F('hora_comparecimento').desc(nulls_last=True),
        F('criado_em').desc(),
    )

    def list_by_custodiado(self, custodiado_id: str) -> List[HistoricoComparecimento]:
        return self.filtrar(custodiado_id=custodiado_id)

    def list_by_custodiado_e_data(self, custodiado_id: str, data: date) -> List[HistoricoComparecimento]:
        return self.filtrar(custodiado_id=custodiado_id, data_inicio=data, data_fim=data)

    def _filtrar_queryset(
        self,
        custodiado_id: Optional[str] = None,
        data_inicio: Optional[date] = None,
        data_fim: Optional[date] = None,
        tipo_validacao: Optional[TipoValidacao] = None,
        mudanca_endereco: Optional[bool] = None,
    ) -> QuerySet:
        qs = self._get_base_queryset()

        if custodiado_id is not None:
            qs = qs.filter(custodiado_id=custodiado_id)
        if data_inicio is not None:
            qs = qs.filter(data_comparecimento__gte=data_inicio)
        if data_fim is not None:
            qs = qs.filter(data_comparecimento__lte=data_fim)
        if tipo_validacao is not None:
            qs = qs.filter(tipo_validacao=tipo_validacao.value)
        if mudanca_endereco is not None:
            qs = qs.filter(mudanca_endereco=mudanca_endereco)

        return qs

    def filtrar(self, **filtros) -> List[HistoricoComparecimento]:
        return self._to_entities(self._filtrar_queryset(**filtros))

    def filtrar_paginado(
        self,
        pagina: int,
        por_pagina: int,
        **filtros,
    ) -> Tuple[List[HistoricoComparecimento], int]:
        return self._paginar(self._filtrar_queryset(**filtros), pagina, por_pagina)

    def custodiados_com_cadastro_inicial(self) -> List[str]:
        return list(
            HistoricoComparecimentoModel.objects
            .filter(tipo_validacao=TipoValidacao.CADASTRO_INICIAL.value)
            .order_by('custodiado_id')
            .values_list('custodiado_id', flat=True)
            .distinct()
        )
