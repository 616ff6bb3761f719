"""
API Views JSON para o domínio de Custodiados.

Endpoints:
- GET /api/custodiados/ - Listar custodiados (paginado)
- POST /api/custodiados/ - Cadastrar custodiado
- GET /api/custodiados/buscar/?termo= - Buscar por nome ou processo
- GET /api/custodiados/agenda/?dias= - Próximos comparecimentos
- GET /api/custodiados/resumo/ - Contagens de conformidade
- POST /api/custodiados/verificar-status/ - Reavaliar inadimplência
- GET /api/custodiados/enderecos/... - Consultas ao histórico de endereços
- GET /api/custodiados/<id>/ - Obter custodiado
- PATCH /api/custodiados/<id>/ - Atualizar custodiado
- POST /api/custodiados/<id>/arquivar/ - Arquivar
- POST /api/custodiados/<id>/reativar/ - Reativar
- GET /api/custodiados/<id>/enderecos/ - Histórico de endereços
"""

import logging
from typing import Dict, Optional

from django.http import HttpRequest, JsonResponse

from src.core.custodiados.dtos import (
    AtualizarCustodiadoInputDTO,
    CadastrarCustodiadoInputDTO,
    EnderecoInputDTO,
    ListarCustodiadosQueryDTO,
)
from src.core.shared.exceptions import ValidationError

from ..shared.api import (
    BaseAPIView,
    get_usuario_id,
    json_response,
    parse_bool,
    parse_date,
    parse_int,
)

logger = logging.getLogger(__name__)

POR_PAGINA_PADRAO = 20


def endereco_from_dict(data: Optional[Dict]) -> Optional[EnderecoInputDTO]:
    """Monta EnderecoInputDTO a partir do bloco ``endereco`` do JSON."""
    if not data:
        return None
    if not isinstance(data, dict):
        raise ValidationError("Endereço deve ser um objeto", field="endereco")
    return EnderecoInputDTO(
        cep=data.get('cep', ''),
        logradouro=data.get('logradouro', ''),
        bairro=data.get('bairro', ''),
        cidade=data.get('cidade', ''),
        estado=data.get('estado', ''),
        numero=data.get('numero'),
        complemento=data.get('complemento'),
    )


# =============================================================================
# Custodiado API Views
# =============================================================================

class CustodiadoAPIListView(BaseAPIView):
    """
    GET /api/custodiados/ - Lista custodiados
    POST /api/custodiados/ - Cadastra custodiado
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        """
        Query params:
        - situacao: Ativo | Arquivado
        - status: Em Conformidade | Inadimplente
        - processo: Número do processo
        - incluir_arquivados: true/false
        - pagina / por_pagina
        """
        try:
            query = ListarCustodiadosQueryDTO(
                situacao=request.GET.get('situacao') or None,
                status=request.GET.get('status') or None,
                processo=request.GET.get('processo') or None,
                incluir_arquivados=bool(parse_bool(request.GET.get('incluir_arquivados'))),
                pagina=parse_int(request.GET.get('pagina'), 'pagina', 1),
                por_pagina=parse_int(request.GET.get('por_pagina'), 'por_pagina', POR_PAGINA_PADRAO),
            )
            resultado = self.get_service('listar_custodiados_service').execute(query).to_dict()
            items = resultado.pop('items')

            return json_response(success=True, data=items, meta=resultado)

        except Exception as e:
            return self.handle_exception(e)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body JSON:
        {
            "nome", "contato", "processo", "vara", "comarca",
            "data_decisao": "AAAA-MM-DD",
            "periodicidade": int,
            "cpf" | "rg": pelo menos um,
            "data_comparecimento_inicial": "AAAA-MM-DD" (opcional),
            "observacoes": "string" (opcional),
            "endereco": {cep, logradouro, numero, complemento, bairro, cidade, estado}
        }
        """
        try:
            data = self.parse_body(request)

            endereco = endereco_from_dict(data.get('endereco'))
            if endereco is None:
                raise ValidationError("Endereço é obrigatório", field="endereco")

            input_dto = CadastrarCustodiadoInputDTO(
                nome=data.get('nome', ''),
                contato=data.get('contato', ''),
                processo=data.get('processo', ''),
                vara=data.get('vara', ''),
                comarca=data.get('comarca', ''),
                data_decisao=parse_date(data.get('data_decisao'), 'data_decisao'),
                periodicidade=parse_int(data.get('periodicidade'), 'periodicidade'),
                endereco=endereco,
                cpf=data.get('cpf'),
                rg=data.get('rg'),
                data_comparecimento_inicial=parse_date(
                    data.get('data_comparecimento_inicial'), 'data_comparecimento_inicial'
                ),
                observacoes=data.get('observacoes'),
                cadastrado_por=get_usuario_id(request),
            )

            output = self.get_service('cadastrar_custodiado_service').execute(input_dto)

            logger.info(f"API: Custodiado cadastrado: {output.id}")

            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class CustodiadoAPIDetailView(BaseAPIView):
    """
    GET /api/custodiados/<id>/ - Obter custodiado
    PATCH /api/custodiados/<id>/ - Atualizar custodiado
    """

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            output = self.get_service('obter_custodiado_service').execute(pk)
            return json_response(success=True, data=output.to_dict())
        except Exception as e:
            return self.handle_exception(e)

    def patch(self, request: HttpRequest, pk: str) -> JsonResponse:
        """Apenas os campos presentes no body são alterados."""
        try:
            data = self.parse_body(request)

            input_dto = AtualizarCustodiadoInputDTO(
                custodiado_id=pk,
                nome=data.get('nome'),
                cpf=data.get('cpf'),
                rg=data.get('rg'),
                contato=data.get('contato'),
                processo=data.get('processo'),
                vara=data.get('vara'),
                comarca=data.get('comarca'),
                data_decisao=parse_date(data.get('data_decisao'), 'data_decisao'),
                periodicidade=parse_int(data.get('periodicidade'), 'periodicidade'),
                observacoes=data.get('observacoes'),
                endereco=endereco_from_dict(data.get('endereco')),
                atualizado_por=get_usuario_id(request),
            )

            output = self.get_service('atualizar_custodiado_service').execute(input_dto)

            logger.info(f"API: Custodiado atualizado: {pk}")

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class CustodiadoAPIArquivarView(BaseAPIView):
    """POST /api/custodiados/<id>/arquivar/"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            output = self.get_service('arquivar_custodiado_service').execute(
                pk, arquivado_por=get_usuario_id(request)
            )
            logger.info(f"API: Custodiado {pk} arquivado")
            return json_response(success=True, data=output.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class CustodiadoAPIReativarView(BaseAPIView):
    """POST /api/custodiados/<id>/reativar/"""

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            output = self.get_service('reativar_custodiado_service').execute(
                pk, reativado_por=get_usuario_id(request)
            )
            logger.info(f"API: Custodiado {pk} reativado")
            return json_response(success=True, data=output.to_dict())
        except Exception as e:
            return self.handle_exception(e)


class CustodiadoAPIBuscarView(BaseAPIView):
    """GET /api/custodiados/buscar/?termo="""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            resultado = self.get_service('buscar_custodiados_service').execute(
                request.GET.get('termo')
            )
            return json_response(
                success=True,
                data=[c.to_dict() for c in resultado],
                meta={'total': len(resultado)},
            )
        except Exception as e:
            return self.handle_exception(e)


class CustodiadoAPIAgendaView(BaseAPIView):
    """GET /api/custodiados/agenda/?dias=N (0 = hoje)"""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            dias = parse_int(request.GET.get('dias'), 'dias', 0)
            resultado = self.get_service('agenda_comparecimentos_service').execute(dias=dias)
            return json_response(
                success=True,
                data=[c.to_dict() for c in resultado],
                meta={'total': len(resultado), 'dias': dias},
            )
        except Exception as e:
            return self.handle_exception(e)


class CustodiadoAPIResumoView(BaseAPIView):
    """GET /api/custodiados/resumo/"""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            return json_response(
                success=True,
                data=self.get_service('resumo_status_service').execute(),
            )
        except Exception as e:
            return self.handle_exception(e)


class CustodiadoAPIVerificarStatusView(BaseAPIView):
    """POST /api/custodiados/verificar-status/ - Reavalia conformidade sob demanda."""

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            self.exigir_admin(request)
            resultado = self.get_service('atualizar_status_custodiados_service').execute()
            logger.info(f"API: Verificação de status executada por {get_usuario_id(request)}")
            return json_response(success=True, data=resultado)
        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Endereços
# =============================================================================

class EnderecoAPIHistoricoView(BaseAPIView):
    """
    GET /api/custodiados/<id>/enderecos/

    Query params:
    - tipo: todos (padrão) | atual | historicos
    - data_inicio / data_fim: endereços ativos em algum momento do período
    """

    def get(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            service = self.get_service('consultar_enderecos_service')
            tipo = request.GET.get('tipo', 'todos')

            inicio = parse_date(request.GET.get('data_inicio'), 'data_inicio')
            fim = parse_date(request.GET.get('data_fim'), 'data_fim')

            if inicio or fim:
                enderecos = service.por_periodo(pk, inicio, fim)
            elif tipo == 'atual':
                atual = service.endereco_atual(pk)
                return json_response(success=True, data=atual.to_dict() if atual else None)
            elif tipo == 'historicos':
                enderecos = service.enderecos_historicos(pk)
            else:
                enderecos = service.historico(pk)

            return json_response(
                success=True,
                data=[e.to_dict() for e in enderecos],
                meta={'total': len(enderecos)},
            )
        except Exception as e:
            return self.handle_exception(e)


class EnderecoAPIMudancasView(BaseAPIView):
    """GET /api/custodiados/enderecos/mudancas/?data_inicio=&data_fim="""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            enderecos = self.get_service('consultar_enderecos_service').mudancas_por_periodo(
                parse_date(request.GET.get('data_inicio'), 'data_inicio'),
                parse_date(request.GET.get('data_fim'), 'data_fim'),
            )
            return json_response(
                success=True,
                data=[e.to_dict() for e in enderecos],
                meta={'total': len(enderecos)},
            )
        except Exception as e:
            return self.handle_exception(e)


class EnderecoAPILocalidadeView(BaseAPIView):
    """
    GET /api/custodiados/enderecos/localidade/?cidade=
    GET /api/custodiados/enderecos/localidade/?estado=
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            service = self.get_service('consultar_enderecos_service')
            estado = request.GET.get('estado')

            if estado:
                custodiados = service.custodiados_por_estado(estado)
            else:
                custodiados = service.custodiados_por_cidade(request.GET.get('cidade'))

            return json_response(
                success=True,
                data=[c.to_dict() for c in custodiados],
                meta={'total': len(custodiados)},
            )
        except Exception as e:
            return self.handle_exception(e)


class EnderecoAPIEstatisticasView(BaseAPIView):
    """GET /api/custodiados/enderecos/estatisticas/ - Custodiados por cidade."""

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            estatisticas = self.get_service('consultar_enderecos_service').estatisticas_por_cidade()
            return json_response(success=True, data=[e.to_dict() for e in estatisticas])
        except Exception as e:
            return self.handle_exception(e)
