"""
API Views JSON para o domínio de Comparecimentos.

Endpoints:
- GET /api/comparecimentos/ - Listar (filtros + paginação)
- POST /api/comparecimentos/ - Registrar comparecimento
- GET /api/comparecimentos/hoje/ - Comparecimentos de hoje
- GET /api/comparecimentos/estatisticas/ - Estatísticas (geral ou período)
- GET /api/comparecimentos/resumo/ - Resumo do sistema
- POST /api/comparecimentos/migrar/ - Criar cadastros iniciais faltantes
- GET /api/comparecimentos/custodiado/<id>/ - Histórico do custodiado
- PATCH /api/comparecimentos/<id>/observacoes/ - Atualizar observações
"""

import logging

from django.http import HttpRequest, JsonResponse

from src.core.comparecimentos.dtos import (
    ListarComparecimentosQueryDTO,
    RegistrarComparecimentoInputDTO,
)

from ..custodiados.api_views import endereco_from_dict
from ..shared.api import (
    BaseAPIView,
    json_response,
    parse_bool,
    parse_date,
    parse_int,
    parse_time,
)

logger = logging.getLogger(__name__)


class ComparecimentoAPIListView(BaseAPIView):
    """
    GET /api/comparecimentos/ - Lista comparecimentos
    POST /api/comparecimentos/ - Registra comparecimento
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        """
        Query params:
        - custodiado_id
        - data_inicio / data_fim (AAAA-MM-DD)
        - tipo_validacao: PRESENCIAL | ONLINE | CADASTRO_INICIAL
        - mudanca_endereco: true/false
        - pagina / por_pagina
        """
        try:
            query = ListarComparecimentosQueryDTO(
                custodiado_id=request.GET.get('custodiado_id') or None,
                data_inicio=parse_date(request.GET.get('data_inicio'), 'data_inicio'),
                data_fim=parse_date(request.GET.get('data_fim'), 'data_fim'),
                tipo_validacao=request.GET.get('tipo_validacao') or None,
                mudanca_endereco=parse_bool(request.GET.get('mudanca_endereco')),
                pagina=parse_int(request.GET.get('pagina'), 'pagina', 1),
                por_pagina=parse_int(request.GET.get('por_pagina'), 'por_pagina', 20),
            )
            resultado = self.get_service('listar_comparecimentos_service').execute(query).to_dict()
            items = resultado.pop('items')

            return json_response(success=True, data=items, meta=resultado)

        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body JSON:
        {
            "custodiado_id": "string (obrigatório)",
            "data_comparecimento": "AAAA-MM-DD (obrigatório)",
            "hora_comparecimento": "HH:MM (opcional)",
            "tipo_validacao": "PRESENCIAL|ONLINE (padrão PRESENCIAL)",
            "validado_por": "string (obrigatório)",
            "observacoes", "anexos": opcionais,
            "mudanca_endereco": bool,
            "motivo_mudanca_endereco": "string",
            "novo_endereco": {...} (obrigatório quando há mudança)
        }
        """
        try:
            data = self.parse_body(request)

            input_dto = RegistrarComparecimentoInputDTO(
                custodiado_id=data.get('custodiado_id', ''),
                data_comparecimento=parse_date(data.get('data_comparecimento'), 'data_comparecimento'),
                tipo_validacao=data.get('tipo_validacao') or 'PRESENCIAL',
                validado_por=data.get('validado_por', ''),
                hora_comparecimento=parse_time(data.get('hora_comparecimento'), 'hora_comparecimento'),
                observacoes=data.get('observacoes'),
                anexos=data.get('anexos'),
                mudanca_endereco=bool(parse_bool(data.get('mudanca_endereco'))),
                motivo_mudanca_endereco=data.get('motivo_mudanca_endereco'),
                novo_endereco=endereco_from_dict(data.get('novo_endereco')),
            )

            output = self.get_service('registrar_comparecimento_service').execute(input_dto)

            logger.info(f"API: Comparecimento registrado: {output.id} (custodiado {output.custodiado_id})")

            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class ComparecimentoAPIHojeView(BaseAPIView):
    """GET /api/comparecimentos/hoje/"""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            comparecimentos = self.get_service('listar_comparecimentos_service').hoje()
            return json_response(
                success=True,
                data=[c.to_dict() for c in comparecimentos],
                meta={'total': len(comparecimentos)},
            )
        except Exception as e:
            return self.handle_exception(e)


class ComparecimentoAPIHistoricoView(BaseAPIView):
    """GET /api/comparecimentos/custodiado/<id>/"""

    def get(self, request: HttpRequest, custodiado_id: str) -> JsonResponse:
        try:
            historico = self.get_service('historico_comparecimentos_service').execute(custodiado_id)
            return json_response(
                success=True,
                data=[c.to_dict() for c in historico],
                meta={'total': len(historico)},
            )
        except Exception as e:
            return self.handle_exception(e)


class ComparecimentoAPIObservacoesView(BaseAPIView):
    """PATCH /api/comparecimentos/<id>/observacoes/"""

    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            data = self.parse_body(request)
            output = self.get_service('atualizar_observacoes_service').execute(
                pk, data.get('observacoes')
            )
            return json_response(success=True, data=output.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class ComparecimentoAPIEstatisticasView(BaseAPIView):
    """GET /api/comparecimentos/estatisticas/?data_inicio=&data_fim="""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            estatisticas = self.get_service('estatisticas_comparecimentos_service').execute(
                data_inicio=parse_date(request.GET.get('data_inicio'), 'data_inicio'),
                data_fim=parse_date(request.GET.get('data_fim'), 'data_fim'),
            )
            return json_response(success=True, data=estatisticas)
        except Exception as e:
            return self.handle_exception(e)


class ResumoSistemaAPIView(BaseAPIView):
    """GET /api/comparecimentos/resumo/ - Painel geral."""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            return json_response(
                success=True,
                data=self.get_service('resumo_sistema_service').execute(),
            )
        except Exception as e:
            return self.handle_exception(e)


class MigrarCadastrosIniciaisAPIView(BaseAPIView):
    """POST /api/comparecimentos/migrar/"""

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            self.exigir_admin(request)
            resultado = self.get_service('migrar_cadastros_iniciais_service').execute()
            logger.info(f"API: Migração de cadastros iniciais: {resultado}")
            return json_response(success=True, data=resultado)
        except Exception as e:
            return self.handle_exception(e)
