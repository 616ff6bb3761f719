"""
Repository Base - Implementação base de repositórios com Django ORM.

Fornece funcionalidades comuns para todos os repositórios:
- Upsert (create ou update) via mapper
- Busca por ID
- Listagem ordenada, contagem e paginação no banco

Princípios:
- Repositórios são stateless
- Não contêm lógica de negócio
- Apenas persistência e queries
"""

from abc import ABC
from typing import Any, Dict, Generic, Iterable, List, Optional, Protocol, Tuple, Type, TypeVar
import logging

from django.db import models
from django.db.models import QuerySet

logger = logging.getLogger(__name__)

T = TypeVar("T")  # Entity type
M = TypeVar("M", bound=models.Model)  # Model type


class EntityMapper(Protocol[T, M]):
    """Contrato dos mappers usados pelo BaseRepository."""

    def to_entity(self, model: M) -> T:
        ...

    def to_model_data(self, entity: T) -> Dict[str, Any]:
        """Campos do model (exceto ``id``) para ``update_or_create``."""
        ...


class BaseRepository(ABC, Generic[T, M]):
    """
    Classe base para repositórios Django.

    Subclasses definem ``model_class`` e ``mapper`` e acrescentam
    as consultas específicas do port que implementam.

    Example:
        class DjangoCustodiadoRepository(BaseRepository[Custodiado, CustodiadoModel]):
            model_class = CustodiadoModel
            mapper = CustodiadoMapper()
            default_ordering = ("nome",)
    """

    model_class: Type[M]
    mapper: EntityMapper

    # Campos para select_related (otimização N+1)
    select_related_fields: List[str] = []

    default_ordering: tuple = ("-criado_em",)

    def _get_base_queryset(self) -> QuerySet:
        qs = self.model_class.objects.all()
        if self.select_related_fields:
            qs = qs.select_related(*self.select_related_fields)
        return qs.order_by(*self.default_ordering)

    def _to_entities(self, queryset: Iterable[M]) -> List[T]:
        return [self.mapper.to_entity(model) for model in queryset]

    def save(self, entity: T) -> None:
        """
        Persiste entidade (create ou update).

        Usa update_or_create para atomicidade.
        """
        self.model_class.objects.update_or_create(
            id=entity.id,
            defaults=self.mapper.to_model_data(entity),
        )
        logger.debug(f"{self.model_class.__name__} saved: {entity.id}")

    def get_by_id(self, entity_id: str) -> Optional[T]:
        try:
            return self.mapper.to_entity(self._get_base_queryset().get(id=entity_id))
        except self.model_class.DoesNotExist:
            logger.debug(f"{self.model_class.__name__} not found: {entity_id}")
            return None

    def exists(self, entity_id: str) -> bool:
        return self.model_class.objects.filter(id=entity_id).exists()

    def count(self) -> int:
        return self.model_class.objects.count()

    def list_all(self) -> List[T]:
        """
        Lista todas as entidades.

        Warning:
            Sem paginação; listagens paginadas usam ``_paginar``.
        """
        return self._to_entities(self._get_base_queryset())

    def _paginar(self, qs: QuerySet, pagina: int, por_pagina: int) -> Tuple[List[T], int]:
        """
        Pagina um queryset no banco (OFFSET/LIMIT).

        Args:
            qs: Queryset já filtrado e ordenado
            pagina: Página desejada (1-indexed, valores < 1 viram 1)
            por_pagina: Itens por página

        Returns:
            Tupla (entidades da página, total sem paginação)
        """
        total = qs.count()
        offset = (max(pagina, 1) - 1) * por_pagina
        return self._to_entities(qs[offset:offset + por_pagina]), total
