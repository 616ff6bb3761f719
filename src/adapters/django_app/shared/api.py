"""
Infraestrutura comum das API Views JSON.

Formato:
- Entrada: JSON
- Saída: JSON com estrutura {success, data/error, meta}

Autenticação:
- Session: ``request.session["usuario_id"]`` gravado no login
"""

import json
import logging
from datetime import date, datetime
from typing import Any, Dict, Optional

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from src.core.shared.exceptions import (
    AccountLockedError,
    AuthenticationError,
    BusinessRuleViolationError,
    DomainException,
    EntityNotFoundError,
    ValidationError,
)
from src.core.usuarios.use_cases import obter_admin, obter_autenticado
from src.config.container import get_container

logger = logging.getLogger(__name__)

SESSION_USUARIO_ID = "usuario_id"


# =============================================================================
# Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Raises:
        ValueError: Se JSON inválido ou não for um objeto
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except json.JSONDecodeError as e:
        raise ValueError(f"JSON inválido: {e}")

    if not isinstance(data, dict):
        raise ValueError("JSON inválido: esperado um objeto")
    return data


def parse_date(valor: Optional[str], campo: str) -> Optional[date]:
    """
    Converte 'YYYY-MM-DD' em date (None se vazio).

    Raises:
        ValidationError: Se formato inválido
    """
    if not valor:
        return None
    try:
        return date.fromisoformat(str(valor)[:10])
    except ValueError:
        raise ValidationError(f"Data inválida: {valor}. Use o formato AAAA-MM-DD", field=campo)


def parse_time(valor: Optional[str], campo: str):
    if not valor:
        return None
    try:
        return datetime.strptime(valor, "%H:%M:%S" if valor.count(":") == 2 else "%H:%M").time()
    except ValueError:
        raise ValidationError(f"Hora inválida: {valor}. Use o formato HH:MM", field=campo)


def parse_int(valor: Any, campo: str, default: Optional[int] = None) -> Optional[int]:
    if valor is None or valor == "":
        return default
    try:
        return int(valor)
    except (TypeError, ValueError):
        raise ValidationError(f"{campo} deve ser um número inteiro", field=campo)


def parse_bool(valor: Any) -> Optional[bool]:
    if valor is None or valor == "":
        return None
    if isinstance(valor, bool):
        return valor
    return str(valor).lower() in ("true", "1", "sim", "yes")


def get_client_ip(request: HttpRequest) -> Optional[str]:
    """IP do cliente (primeiro IP de X-Forwarded-For, se presente)."""
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def get_usuario_id(request: HttpRequest) -> Optional[str]:
    """ID do usuário autenticado na sessão (None se anônimo)."""
    session = getattr(request, "session", None)
    if session is None:
        return None
    return session.get(SESSION_USUARIO_ID)


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON
    - Acesso ao container DI
    - Exigência de sessão autenticada (``login_required``)
    - Tratamento de erros padronizado
    """

    login_required = True

    def dispatch(self, request: HttpRequest, *args, **kwargs):
        if self.login_required:
            try:
                obter_autenticado(
                    self.get_container().usuario_repository(), get_usuario_id(request)
                )
            except AuthenticationError:
                if get_usuario_id(request):
                    logger.warning(f"Sessão encerrada para usuário inativo ou removido: {get_usuario_id(request)}")
                    request.session.flush()
                return json_response(
                    success=False,
                    error="Usuário não autenticado",
                    status=401,
                )
        return super().dispatch(request, *args, **kwargs)

    def get_container(self):
        return get_container()

    def get_service(self, service_name: str):
        """Obtém service do container."""
        return getattr(self.get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def exigir_admin(self, request: HttpRequest):
        """
        Raises:
            BusinessRuleViolationError: Se o usuário da sessão não é administrador
        """
        return obter_admin(self.get_container().usuario_repository(), get_usuario_id(request))

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Mapeia exceções de domínio para status HTTP.

        Returns:
            JsonResponse com erro
        """
        if isinstance(e, ValidationError):
            return json_response(
                success=False,
                error=e.message,
                status=400,
                meta={'field': e.field, 'code': e.code}
            )

        if isinstance(e, AccountLockedError):
            return json_response(
                success=False,
                error=e.message,
                status=423,
                meta={
                    'code': e.code,
                    'bloqueado_ate': e.bloqueado_ate.isoformat() if e.bloqueado_ate else None,
                }
            )

        if isinstance(e, AuthenticationError):
            return json_response(
                success=False,
                error=e.message,
                status=401,
                meta={'code': e.code}
            )

        if isinstance(e, EntityNotFoundError):
            return json_response(
                success=False,
                error=e.message,
                status=404,
                meta={'code': e.code}
            )

        if isinstance(e, BusinessRuleViolationError):
            return json_response(
                success=False,
                error=e.message,
                status=422,
                meta={'rule': e.rule, 'code': e.code}
            )

        if isinstance(e, DomainException):
            return json_response(
                success=False,
                error=e.message,
                status=400,
                meta={'code': e.code}
            )

        if isinstance(e, ValueError):
            return json_response(
                success=False,
                error=str(e),
                status=400
            )

        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error="Erro interno do servidor",
            status=500
        )
