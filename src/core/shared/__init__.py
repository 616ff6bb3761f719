"""
Shared Domain Components.

Contém componentes compartilhados entre todos os domínios:
- Exceções de domínio
- Interfaces (Ports)
- Base classes para Domain Events
- DTO de paginação
"""

from .exceptions import (
    DomainException,
    ValidationError,
    EntityNotFoundError,
    BusinessRuleViolationError,
    AuthenticationError,
    AccountLockedError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork
from .dtos import PaginatedResultDTO

__all__ = [
    "DomainException",
    "ValidationError",
    "EntityNotFoundError",
    "BusinessRuleViolationError",
    "AuthenticationError",
    "AccountLockedError",
    "DomainEvent",
    "UnitOfWork",
    "PaginatedResultDTO",
]
