"""
Use Cases (Application Services) do Domínio de Comparecimentos.

Use Cases implementados:
- RegistrarComparecimentoService: Registro com mudança de endereço opcional
- HistoricoComparecimentosService: Histórico de um custodiado
- ListarComparecimentosService: Listagem filtrada e paginada
- AtualizarObservacoesService: Edição das observações
- EstatisticasComparecimentosService: Contagens por tipo e período
- ResumoSistemaService: Painel geral (conformidade, agenda e atrasos)
- MigrarCadastrosIniciaisService: Cria o CADASTRO_INICIAL ausente
"""

from collections import Counter, OrderedDict
from datetime import date, timedelta
from typing import List, Optional
import logging
import uuid

from src.core.shared.dtos import PaginatedResultDTO
from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    DomainException,
    EntityNotFoundError,
    ValidationError,
)
from src.core.custodiados.dtos import CustodiadoListItemDTO
from src.core.custodiados.entities import SituacaoCustodiado
from src.core.custodiados.events import EnderecoAlteradoEvent
from src.core.custodiados.ports import CustodiadoRepository, HistoricoEnderecoRepository
from src.core.custodiados.use_cases import (
    VALIDADO_POR_SISTEMA,
    obter_custodiado,
    trocar_endereco,
    validar_periodo,
)

from .entities import HistoricoComparecimento, TipoValidacao
from .dtos import (
    ComparecimentoOutputDTO,
    ListarComparecimentosQueryDTO,
    RegistrarComparecimentoInputDTO,
)
from .events import CadastrosIniciaisMigradosEvent, ComparecimentoRegistradoEvent
from .ports import ComparecimentoRepository

logger = logging.getLogger(__name__)


MOTIVO_MUDANCA_COMPARECIMENTO = "Mudança informada no comparecimento"
OBSERVACAO_CADASTRO_MIGRADO = "Cadastro inicial migrado do sistema"

FAIXAS_ATRASO = (
    ("1-7 dias", 1, 7),
    ("8-15 dias", 8, 15),
    ("16-30 dias", 16, 30),
    ("31-60 dias", 31, 60),
    ("61-90 dias", 61, 90),
    ("Mais de 90 dias", 91, None),
)


def _texto_ou_none(valor: Optional[str]) -> Optional[str]:
    if valor is None or not valor.strip():
        return None
    return valor.strip()


def _percentual(parte: int, total: int) -> float:
    return round(parte * 100 / total, 2) if total else 0.0


def _parse_tipo(valor: Optional[str]) -> TipoValidacao:
    if not valor:
        raise ValidationError("Tipo de validação é obrigatório", field="tipo_validacao")
    try:
        return TipoValidacao.from_string(valor)
    except ValueError as e:
        raise ValidationError(str(e), field="tipo_validacao")


class RegistrarComparecimentoService:
    """
    Use Case: Registrar comparecimento.

    Fluxo:
    1. Normalizar entrada (datas futuras viram hoje)
    2. Validar custodiado ativo e duplicidade na data
    3. Persistir comparecimento
    4. Se houve mudança de endereço, encerrar o endereço ativo e
       criar o novo vinculado ao comparecimento
    5. Atualizar agenda e status do custodiado (exceto cadastro inicial)
    6. Disparar eventos

    Example:
        service = RegistrarComparecimentoService(
            comparecimento_repo, custodiado_repo, endereco_repo, uow
        )
        output = service.execute(input_dto)
    """

    def __init__(
        self,
        comparecimento_repo: ComparecimentoRepository,
        custodiado_repo: CustodiadoRepository,
        endereco_repo: HistoricoEnderecoRepository,
        uow: UnitOfWork,
    ):
        self.comparecimento_repo = comparecimento_repo
        self.custodiado_repo = custodiado_repo
        self.endereco_repo = endereco_repo
        self.uow = uow

    def execute(
        self,
        input_dto: RegistrarComparecimentoInputDTO,
        hoje: Optional[date] = None,
    ) -> ComparecimentoOutputDTO:
        """
        Executa o registro em transação atômica.

        Raises:
            ValidationError: Se dados inválidos
            EntityNotFoundError: Se custodiado não existe
            BusinessRuleViolationError: Se custodiado arquivado ou
                comparecimento duplicado na data
        """
        hoje = hoje or date.today()

        if not input_dto.custodiado_id:
            raise ValidationError("Custodiado é obrigatório", field="custodiado_id")
        if input_dto.data_comparecimento is None:
            raise ValidationError(
                "Data do comparecimento é obrigatória",
                field="data_comparecimento"
            )
        tipo = _parse_tipo(input_dto.tipo_validacao)

        validado_por = _texto_ou_none(input_dto.validado_por)
        if not validado_por:
            raise ValidationError("Validado por é obrigatório", field="validado_por")

        if input_dto.mudanca_endereco and input_dto.novo_endereco is None:
            raise ValidationError(
                "Dados do novo endereço são obrigatórios quando há mudança",
                field="novo_endereco"
            )

        data = input_dto.data_comparecimento
        if data > hoje:
            logger.warning(
                f"Data de comparecimento futura ({data.isoformat()}) ajustada para hoje "
                f"- custodiado {input_dto.custodiado_id}"
            )
            data = hoje

        with self.uow:
            custodiado = obter_custodiado(self.custodiado_repo, input_dto.custodiado_id)
            if not custodiado.is_ativo:
                raise BusinessRuleViolationError(
                    "Não é possível registrar comparecimento para custodiado arquivado",
                    rule="custodiado_arquivado"
                )

            self._verificar_duplicidade(custodiado.id, data, tipo)

            comparecimento = HistoricoComparecimento.criar(
                custodiado_id=custodiado.id,
                data_comparecimento=data,
                hora_comparecimento=input_dto.hora_comparecimento,
                tipo_validacao=tipo,
                validado_por=validado_por,
                observacoes=_texto_ou_none(input_dto.observacoes),
                anexos=_texto_ou_none(input_dto.anexos),
                mudanca_endereco=input_dto.mudanca_endereco,
                motivo_mudanca_endereco=_texto_ou_none(input_dto.motivo_mudanca_endereco),
            )
            self.comparecimento_repo.save(comparecimento)

            if input_dto.mudanca_endereco:
                motivo = comparecimento.motivo_mudanca_endereco or MOTIVO_MUDANCA_COMPARECIMENTO
                anterior, novo = trocar_endereco(
                    self.endereco_repo,
                    custodiado_id=custodiado.id,
                    dados=input_dto.novo_endereco,
                    data_mudanca=data,
                    motivo=motivo,
                    validado_por=validado_por,
                    historico_comparecimento_id=comparecimento.id,
                )
                comparecimento.adicionar_endereco_alterado(novo.id)
                self.comparecimento_repo.save(comparecimento)

                self.uow.publish_event(
                    EnderecoAlteradoEvent(
                        aggregate_id=custodiado.id,
                        endereco_anterior_id=anterior.id if anterior else None,
                        endereco_novo_id=novo.id,
                        cidade=novo.cidade,
                        estado=novo.estado,
                        motivo=motivo,
                        historico_comparecimento_id=comparecimento.id,
                    )
                )

            if not tipo.is_cadastro_inicial:
                custodiado.registrar_comparecimento(data, hoje)
                self.custodiado_repo.save(custodiado)

            self.uow.publish_event(
                ComparecimentoRegistradoEvent(
                    aggregate_id=comparecimento.id,
                    custodiado_id=custodiado.id,
                    data_comparecimento=data.isoformat(),
                    tipo_validacao=tipo.name,
                    validado_por=validado_por,
                    mudanca_endereco=comparecimento.mudanca_endereco,
                    status_custodiado=custodiado.status.value,
                    proximo_comparecimento=(
                        custodiado.proximo_comparecimento.isoformat()
                        if custodiado.proximo_comparecimento else None
                    ),
                )
            )

        logger.info(
            f"Comparecimento registrado: custodiado {custodiado.id} em "
            f"{data.isoformat()} ({tipo.name})"
        )
        return ComparecimentoOutputDTO.from_entity(comparecimento)

    def _verificar_duplicidade(self, custodiado_id: str, data: date, tipo: TipoValidacao) -> None:
        """
        Um comparecimento por dia; o regular pode coexistir com o
        cadastro inicial da mesma data.
        """
        existentes = self.comparecimento_repo.list_by_custodiado_e_data(custodiado_id, data)
        conflitantes = [
            c for c in existentes
            if not (c.is_cadastro_inicial and tipo.is_comparecimento_regular)
        ]
        if conflitantes:
            raise BusinessRuleViolationError(
                "Já existe comparecimento registrado para este custodiado na data: "
                f"{data.strftime('%d/%m/%Y')}",
                rule="comparecimento_duplicado"
            )


class HistoricoComparecimentosService:
    """Use Case: Comparecimentos de um custodiado, mais recentes primeiro."""

    def __init__(
        self,
        comparecimento_repo: ComparecimentoRepository,
        custodiado_repo: CustodiadoRepository,
    ):
        self.comparecimento_repo = comparecimento_repo
        self.custodiado_repo = custodiado_repo

    def execute(self, custodiado_id: str) -> List[ComparecimentoOutputDTO]:
        obter_custodiado(self.custodiado_repo, custodiado_id)
        return [
            ComparecimentoOutputDTO.from_entity(c)
            for c in self.comparecimento_repo.list_by_custodiado(custodiado_id)
        ]


class ListarComparecimentosService:
    """
    Use Case: Listagem de comparecimentos com filtros e paginação.
    """

    POR_PAGINA_MAX = 100

    def __init__(self, comparecimento_repo: ComparecimentoRepository):
        self.comparecimento_repo = comparecimento_repo

    def execute(
        self,
        query: Optional[ListarComparecimentosQueryDTO] = None,
    ) -> PaginatedResultDTO:
        """
        Raises:
            ValidationError: Se período, tipo ou paginação inválidos
        """
        query = query or ListarComparecimentosQueryDTO()

        if query.data_inicio and query.data_fim:
            validar_periodo(query.data_inicio, query.data_fim)
        if not 1 <= query.por_pagina <= self.POR_PAGINA_MAX:
            raise ValidationError(
                f"Itens por página deve estar entre 1 e {self.POR_PAGINA_MAX}",
                field="por_pagina"
            )

        tipo = _parse_tipo(query.tipo_validacao) if query.tipo_validacao else None

        pagina = max(query.pagina, 1)
        comparecimentos, total = self.comparecimento_repo.filtrar_paginado(
            pagina,
            query.por_pagina,
            custodiado_id=query.custodiado_id,
            data_inicio=query.data_inicio,
            data_fim=query.data_fim,
            tipo_validacao=tipo,
            mudanca_endereco=query.mudanca_endereco,
        )
        return PaginatedResultDTO(
            items=[ComparecimentoOutputDTO.from_entity(c) for c in comparecimentos],
            total=total,
            pagina=pagina,
            por_pagina=query.por_pagina,
        )

    def hoje(self, hoje: Optional[date] = None) -> List[ComparecimentoOutputDTO]:
        """Comparecimentos registrados hoje."""
        hoje = hoje or date.today()
        return [
            ComparecimentoOutputDTO.from_entity(c)
            for c in self.comparecimento_repo.filtrar(data_inicio=hoje, data_fim=hoje)
        ]


class AtualizarObservacoesService:
    """Use Case: Substituir observações de um comparecimento."""

    def __init__(self, comparecimento_repo: ComparecimentoRepository, uow: UnitOfWork):
        self.comparecimento_repo = comparecimento_repo
        self.uow = uow

    def execute(self, comparecimento_id: str, observacoes: Optional[str]) -> ComparecimentoOutputDTO:
        with self.uow:
            comparecimento = self.comparecimento_repo.get_by_id(comparecimento_id)
            if not comparecimento:
                raise EntityNotFoundError(
                    f"Comparecimento {comparecimento_id} não encontrado",
                    entity_type="HistoricoComparecimento",
                    entity_id=comparecimento_id
                )
            comparecimento.atualizar_observacoes(observacoes)
            self.comparecimento_repo.save(comparecimento)

        return ComparecimentoOutputDTO.from_entity(comparecimento)


class EstatisticasComparecimentosService:
    """
    Use Case: Estatísticas de comparecimentos.

    Sem período, retorna as estatísticas gerais (inclui hoje, mês
    corrente e média por custodiado).
    """

    def __init__(self, comparecimento_repo: ComparecimentoRepository):
        self.comparecimento_repo = comparecimento_repo

    def execute(
        self,
        data_inicio: Optional[date] = None,
        data_fim: Optional[date] = None,
        hoje: Optional[date] = None,
    ) -> dict:
        if data_inicio is None and data_fim is None:
            return self._gerais(hoje or date.today())

        validar_periodo(data_inicio, data_fim)
        comparecimentos = self.comparecimento_repo.filtrar(data_inicio=data_inicio, data_fim=data_fim)
        resultado = self._contagens(comparecimentos)
        resultado["periodo"] = f"{data_inicio.isoformat()} a {data_fim.isoformat()}"
        return resultado

    def _gerais(self, hoje: date) -> dict:
        comparecimentos = self.comparecimento_repo.list_all()
        custodiados = {c.custodiado_id for c in comparecimentos}

        resultado = self._contagens(comparecimentos)
        resultado.update({
            "periodo": "geral",
            "hoje": sum(1 for c in comparecimentos if c.data_comparecimento == hoje),
            "este_mes": sum(
                1 for c in comparecimentos
                if c.data_comparecimento.year == hoje.year
                and c.data_comparecimento.month == hoje.month
            ),
            "custodiados_com_comparecimento": len(custodiados),
            "media_por_custodiado": (
                round(len(comparecimentos) / len(custodiados), 2) if custodiados else 0.0
            ),
        })
        return resultado

    @staticmethod
    def _contagens(comparecimentos: List[HistoricoComparecimento]) -> dict:
        por_tipo = Counter(c.tipo_validacao for c in comparecimentos)
        total = len(comparecimentos)
        presenciais = por_tipo[TipoValidacao.PRESENCIAL]
        online = por_tipo[TipoValidacao.ONLINE]
        return {
            "total": total,
            "presenciais": presenciais,
            "online": online,
            "cadastros_iniciais": por_tipo[TipoValidacao.CADASTRO_INICIAL],
            "mudancas_endereco": sum(1 for c in comparecimentos if c.mudanca_endereco),
            "percentual_presencial": _percentual(presenciais, total),
            "percentual_online": _percentual(online, total),
        }


class ResumoSistemaService:
    """
    Use Case: Resumo geral para o painel.

    Reúne totais de custodiados, agenda dos próximos dias e análise
    de atrasos por faixa.
    """

    DIAS_AGENDA = 30
    MAX_ATRASADOS = 10

    def __init__(
        self,
        custodiado_repo: CustodiadoRepository,
        comparecimento_repo: ComparecimentoRepository,
    ):
        self.custodiado_repo = custodiado_repo
        self.comparecimento_repo = comparecimento_repo

    def execute(self, hoje: Optional[date] = None) -> dict:
        hoje = hoje or date.today()
        ativos = self.custodiado_repo.list_by_situacao(SituacaoCustodiado.ATIVO)
        arquivados = self.custodiado_repo.count_by_situacao(SituacaoCustodiado.ARQUIVADO)

        inadimplentes = [c for c in ativos if c.esta_inadimplente(hoje)]
        em_conformidade = len(ativos) - len(inadimplentes)

        comparecimentos_hoje = self.comparecimento_repo.filtrar(data_inicio=hoje, data_fim=hoje)
        comparecimentos_mes = self.comparecimento_repo.filtrar(
            data_inicio=hoje.replace(day=1),
            data_fim=hoje,
        )

        return {
            "total_custodiados": len(ativos) + arquivados,
            "ativos": len(ativos),
            "arquivados": arquivados,
            "em_conformidade": em_conformidade,
            "inadimplentes": len(inadimplentes),
            "percentual_conformidade": _percentual(em_conformidade, len(ativos)),
            "percentual_inadimplencia": _percentual(len(inadimplentes), len(ativos)),
            "comparecimentos_hoje": len(comparecimentos_hoje),
            "comparecimentos_este_mes": len(comparecimentos_mes),
            "proximos_comparecimentos": self._proximos(hoje),
            "analise_atrasos": self._analise_atrasos(inadimplentes, hoje),
            "data_consulta": hoje.isoformat(),
        }

    def _proximos(self, hoje: date) -> dict:
        amanha = hoje + timedelta(days=1)
        custodiados = self.custodiado_repo.list_proximos_entre(
            hoje, hoje + timedelta(days=self.DIAS_AGENDA)
        )

        por_data = OrderedDict()
        for custodiado in custodiados:
            por_data.setdefault(custodiado.proximo_comparecimento, []).append(custodiado.nome)

        return {
            "dias": self.DIAS_AGENDA,
            "total": len(custodiados),
            "hoje": len(por_data.get(hoje, [])),
            "amanha": len(por_data.get(amanha, [])),
            "por_data": [
                {"data": data.isoformat(), "total": len(nomes), "custodiados": nomes}
                for data, nomes in por_data.items()
            ],
        }

    def _analise_atrasos(self, inadimplentes, hoje: date) -> dict:
        atrasos = [(c, c.dias_atraso(hoje)) for c in inadimplentes]
        atrasos.sort(key=lambda item: item[1], reverse=True)

        faixas = OrderedDict((nome, 0) for nome, _, _ in FAIXAS_ATRASO)
        for _, dias in atrasos:
            for nome, minimo, maximo in FAIXAS_ATRASO:
                if dias >= minimo and (maximo is None or dias <= maximo):
                    faixas[nome] += 1
                    break

        dias_validos = [dias for _, dias in atrasos if dias > 0]
        return {
            "total": len(atrasos),
            "faixas": dict(faixas),
            "media_dias_atraso": (
                round(sum(dias_validos) / len(dias_validos), 1) if dias_validos else 0.0
            ),
            "maior_atraso": max(dias_validos) if dias_validos else 0,
            "custodiados": [
                CustodiadoListItemDTO.from_entity(c, hoje).to_dict()
                for c, _ in atrasos[:self.MAX_ATRASADOS]
            ],
        }


class MigrarCadastrosIniciaisService:
    """
    Use Case: Criar o comparecimento CADASTRO_INICIAL dos custodiados
    cadastrados antes da existência do histórico.

    Idempotente: custodiados que já possuem cadastro inicial são
    ignorados.
    """

    def __init__(
        self,
        custodiado_repo: CustodiadoRepository,
        comparecimento_repo: ComparecimentoRepository,
        uow: UnitOfWork,
    ):
        self.custodiado_repo = custodiado_repo
        self.comparecimento_repo = comparecimento_repo
        self.uow = uow

    def execute(self, validado_por: str = VALIDADO_POR_SISTEMA) -> dict:
        custodiados = self.custodiado_repo.list_all()
        if not custodiados:
            return {
                "status": "warning",
                "mensagem": "Nenhum custodiado encontrado para migração",
                "total_custodiados": 0,
                "custodiados_migrados": 0,
                "custodiados_ja_com_cadastro": 0,
                "erros": 0,
                "detalhes_erros": [],
            }

        com_cadastro = set(self.comparecimento_repo.custodiados_com_cadastro_inicial())
        migrados = 0
        detalhes_erros = []

        with self.uow:
            for custodiado in custodiados:
                if custodiado.id in com_cadastro:
                    continue
                try:
                    comparecimento = HistoricoComparecimento.criar(
                        custodiado_id=custodiado.id,
                        data_comparecimento=(
                            custodiado.data_comparecimento_inicial or custodiado.criado_em.date()
                        ),
                        tipo_validacao=TipoValidacao.CADASTRO_INICIAL,
                        validado_por=validado_por,
                        observacoes=OBSERVACAO_CADASTRO_MIGRADO,
                    )
                except DomainException as e:
                    logger.warning(f"Falha ao migrar custodiado {custodiado.id}: {e.message}")
                    detalhes_erros.append(f"Custodiado {custodiado.id}: {e.message}")
                    continue

                self.comparecimento_repo.save(comparecimento)
                migrados += 1

            self.uow.publish_event(
                CadastrosIniciaisMigradosEvent(
                    aggregate_id=str(uuid.uuid4()),
                    total_custodiados=len(custodiados),
                    custodiados_migrados=migrados,
                    validado_por=validado_por,
                )
            )

        logger.info(f"Migração de cadastros iniciais: {migrados} de {len(custodiados)} migrados")
        return {
            "status": "success",
            "mensagem": f"Migração concluída. {migrados} de {len(custodiados)} custodiados migrados",
            "total_custodiados": len(custodiados),
            "custodiados_migrados": migrados,
            "custodiados_ja_com_cadastro": len(com_cadastro),
            "erros": len(detalhes_erros),
            "detalhes_erros": detalhes_erros,
        }
