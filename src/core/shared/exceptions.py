"""
Exceções de Domínio do ACLP.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Hierarquia:
    DomainException (base)
    ├── ValidationError (validação de entrada)
    ├── EntityNotFoundError (entidade não existe)
    ├── BusinessRuleViolationError (regra de negócio violada)
    └── AuthenticationError (credenciais)
        └── AccountLockedError (conta bloqueada temporariamente)
"""

from datetime import datetime
from typing import Optional


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            custodiado.arquivar()
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.

    Example:
        if not nome.strip():
            raise ValidationError("Nome é obrigatório", field="nome")
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Lançada quando uma busca por ID (ou token) não retorna resultado.
    """

    def __init__(self, message: str, entity_type: str = None, entity_id: str = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.

    Example:
        if self.situacao == SituacaoCustodiado.ARQUIVADO:
            raise BusinessRuleViolationError(
                "Custodiado já está arquivado",
                rule="custodiado_ja_arquivado"
            )
    """

    def __init__(self, message: str, rule: str = None):
        self.rule = rule
        super().__init__(message, "BUSINESS_RULE_VIOLATION")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class AuthenticationError(DomainException):
    """
    Falha de autenticação.

    Lançada para credenciais inválidas ou quando a operação
    exige um usuário autenticado.
    """

    def __init__(self, message: str = "Credenciais inválidas", code: str = "AUTHENTICATION_ERROR"):
        super().__init__(message, code)


class AccountLockedError(AuthenticationError):
    """Conta bloqueada após excesso de tentativas de login."""

    def __init__(self, message: str, bloqueado_ate: Optional[datetime] = None):
        self.bloqueado_ate = bloqueado_ate
        super().__init__(message, "ACCOUNT_LOCKED")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.bloqueado_ate:
            result["bloqueado_ate"] = self.bloqueado_ate.isoformat()
        return result
