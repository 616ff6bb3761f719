"""
DTOs compartilhados entre os domínios.
"""

from dataclasses import dataclass
from typing import Any, List


@dataclass
class PaginatedResultDTO:
    """
    DTO para resultados paginados.

    Os itens devem expor ``to_dict()``.

    Attributes:
        items: Lista de itens da página atual
        total: Total de itens (sem paginação)
        pagina: Página atual (1-indexed)
        por_pagina: Itens por página
    """

    items: List[Any]
    total: int
    pagina: int
    por_pagina: int

    @property
    def total_paginas(self) -> int:
        if self.por_pagina <= 0:
            return 0
        return (self.total + self.por_pagina - 1) // self.por_pagina

    @property
    def tem_proxima(self) -> bool:
        return self.pagina < self.total_paginas

    @property
    def tem_anterior(self) -> bool:
        return self.pagina > 1

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "total": self.total,
            "pagina": self.pagina,
            "por_pagina": self.por_pagina,
            "total_paginas": self.total_paginas,
            "tem_proxima": self.tem_proxima,
            "tem_anterior": self.tem_anterior,
        }
