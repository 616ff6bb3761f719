"""
Use Cases (Application Services) do Domínio de Custodiados.

Use Cases implementados:
- CadastrarCustodiadoService: Cadastro com endereço e comparecimento inicial
- AtualizarCustodiadoService: Atualização parcial (com troca de endereço)
- ArquivarCustodiadoService: Exclusão lógica
- ReativarCustodiadoService: Reativação de arquivado
- ObterCustodiadoService: Detalhes com endereço ativo
- ListarCustodiadosService: Listagem com filtros
- BuscarCustodiadosService: Busca por nome ou processo
- AgendaComparecimentosService: Comparecimentos previstos nos próximos dias
- ConsultarEnderecosService: Consultas ao histórico de endereços
- AtualizarStatusCustodiadosService: Verificação periódica de inadimplência
- ResumoStatusService: Contagens de conformidade

Princípios:
- Um Use Case = Uma operação de negócio
- Dependências injetadas (DI)
- Sem lógica de infraestrutura
"""

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple
import logging

from src.core.shared.dtos import PaginatedResultDTO
from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import (
    EntityNotFoundError,
    ValidationError,
    BusinessRuleViolationError,
)
from src.core.comparecimentos.entities import HistoricoComparecimento, TipoValidacao
from src.core.comparecimentos.ports import ComparecimentoRepository

from .documentos import formatar_cpf, formatar_processo, somente_digitos
from .entities import (
    Custodiado,
    EstadoBrasil,
    HistoricoEndereco,
    SituacaoCustodiado,
    StatusComparecimento,
)
from .dtos import (
    AtualizarCustodiadoInputDTO,
    CadastrarCustodiadoInputDTO,
    CustodiadoListItemDTO,
    CustodiadoOutputDTO,
    EnderecoInputDTO,
    EnderecoOutputDTO,
    EstatisticaCidadeDTO,
    ListarCustodiadosQueryDTO,
)
from .events import (
    CustodiadoArquivadoEvent,
    CustodiadoAtualizadoEvent,
    CustodiadoCadastradoEvent,
    CustodiadoReativadoEvent,
    EnderecoAlteradoEvent,
    StatusCustodiadoAlteradoEvent,
)
from .ports import CustodiadoRepository, HistoricoEnderecoRepository

logger = logging.getLogger(__name__)


VALIDADO_POR_SISTEMA = "Sistema ACLP"
MOTIVO_ENDERECO_INICIAL = "Endereço inicial no cadastro"
MOTIVO_ATUALIZACAO_CADASTRAL = "Atualização cadastral"
OBSERVACAO_CADASTRO_INICIAL = "Cadastro inicial no sistema"
MENSAGEM_CPF_DUPLICADO = "CPF já está cadastrado no sistema"
MENSAGEM_RG_DUPLICADO = "RG já está cadastrado no sistema"


def obter_custodiado(repo: CustodiadoRepository, custodiado_id: str) -> Custodiado:
    custodiado = repo.get_by_id(custodiado_id) if custodiado_id else None
    if not custodiado:
        raise EntityNotFoundError(
            f"Custodiado {custodiado_id} não encontrado",
            entity_type="Custodiado",
            entity_id=custodiado_id
        )
    return custodiado


def validar_periodo(inicio: Optional[date], fim: Optional[date]) -> None:
    if inicio is None or fim is None:
        raise ValidationError("Data de início e fim são obrigatórias", field="data_inicio")
    if inicio > fim:
        raise ValidationError(
            "Data de início não pode ser posterior à data de fim",
            field="data_inicio"
        )


def trocar_endereco(
    endereco_repo: HistoricoEnderecoRepository,
    custodiado_id: str,
    dados: EnderecoInputDTO,
    data_mudanca: date,
    motivo: Optional[str] = None,
    validado_por: Optional[str] = None,
    historico_comparecimento_id: Optional[str] = None,
) -> Tuple[Optional[HistoricoEndereco], HistoricoEndereco]:
    """
    Encerra os endereços ativos do custodiado e cria o novo endereço ativo.

    Mantém a invariante de um único endereço ativo por custodiado.

    Returns:
        Tupla (endereço anterior ou None, novo endereço)
    """
    novo = HistoricoEndereco.criar(
        custodiado_id=custodiado_id,
        cep=dados.cep,
        logradouro=dados.logradouro,
        numero=dados.numero,
        complemento=dados.complemento,
        bairro=dados.bairro,
        cidade=dados.cidade,
        estado=dados.estado,
        data_inicio=data_mudanca,
        motivo_alteracao=motivo,
        validado_por=validado_por,
        historico_comparecimento_id=historico_comparecimento_id,
    )

    anterior = None
    for endereco in endereco_repo.list_ativos_by_custodiado(custodiado_id):
        # comparecimento retroativo não encerra antes do início
        endereco.finalizar(max(data_mudanca, endereco.data_inicio))
        endereco_repo.save(endereco)
        anterior = anterior or endereco

    endereco_repo.save(novo)
    logger.info(
        f"Endereço do custodiado {custodiado_id} alterado para "
        f"{novo.cidade_estado} (anterior: {anterior.id if anterior else None})"
    )
    return anterior, novo


class CadastrarCustodiadoService:
    """
    Use Case: Cadastrar custodiado.

    Fluxo:
    1. Criar entidade (validações de negócio na entidade)
    2. Garantir que CPF/RG não pertencem a outro custodiado ativo
    3. Persistir custodiado, endereço inicial e comparecimento
       de cadastro inicial na mesma transação
    4. Disparar evento CustodiadoCadastrado

    Example:
        service = CadastrarCustodiadoService(
            custodiado_repo, endereco_repo, comparecimento_repo, uow
        )
        output = service.execute(input_dto)
    """

    def __init__(
        self,
        custodiado_repo: CustodiadoRepository,
        endereco_repo: HistoricoEnderecoRepository,
        comparecimento_repo: ComparecimentoRepository,
        uow: UnitOfWork,
    ):
        self.custodiado_repo = custodiado_repo
        self.endereco_repo = endereco_repo
        self.comparecimento_repo = comparecimento_repo
        self.uow = uow

    def execute(
        self,
        input_dto: CadastrarCustodiadoInputDTO,
        hoje: Optional[date] = None,
    ) -> CustodiadoOutputDTO:
        """
        Executa o cadastro em transação atômica.

        Raises:
            ValidationError: Se dados inválidos
            BusinessRuleViolationError: Se documento duplicado
        """
        if input_dto.endereco is None:
            raise ValidationError("Endereço é obrigatório", field="endereco")

        with self.uow:
            custodiado = Custodiado.criar(
                nome=input_dto.nome,
                cpf=input_dto.cpf,
                rg=input_dto.rg,
                contato=input_dto.contato,
                processo=input_dto.processo,
                vara=input_dto.vara,
                comarca=input_dto.comarca,
                data_decisao=input_dto.data_decisao,
                periodicidade=input_dto.periodicidade,
                data_comparecimento_inicial=input_dto.data_comparecimento_inicial,
                observacoes=input_dto.observacoes,
                hoje=hoje,
            )

            if custodiado.cpf and self.custodiado_repo.exists_cpf_ativo(custodiado.cpf):
                raise BusinessRuleViolationError(
                    MENSAGEM_CPF_DUPLICADO,
                    rule="cpf_duplicado"
                )
            if custodiado.rg and self.custodiado_repo.exists_rg_ativo(custodiado.rg):
                raise BusinessRuleViolationError(
                    MENSAGEM_RG_DUPLICADO,
                    rule="rg_duplicado"
                )

            self.custodiado_repo.save(custodiado)

            _, endereco = trocar_endereco(
                self.endereco_repo,
                custodiado_id=custodiado.id,
                dados=input_dto.endereco,
                data_mudanca=custodiado.data_comparecimento_inicial,
                motivo=MOTIVO_ENDERECO_INICIAL,
                validado_por=VALIDADO_POR_SISTEMA,
            )

            comparecimento = HistoricoComparecimento.criar(
                custodiado_id=custodiado.id,
                data_comparecimento=custodiado.data_comparecimento_inicial,
                hora_comparecimento=datetime.now().time().replace(microsecond=0),
                tipo_validacao=TipoValidacao.CADASTRO_INICIAL,
                validado_por=input_dto.cadastrado_por or VALIDADO_POR_SISTEMA,
                observacoes=OBSERVACAO_CADASTRO_INICIAL,
            )
            self.comparecimento_repo.save(comparecimento)

            self.uow.publish_event(
                CustodiadoCadastradoEvent(
                    aggregate_id=custodiado.id,
                    nome=custodiado.nome,
                    processo=custodiado.processo,
                    comarca=custodiado.comarca,
                    periodicidade=custodiado.periodicidade,
                    proximo_comparecimento=(
                        custodiado.proximo_comparecimento.isoformat()
                        if custodiado.proximo_comparecimento else None
                    ),
                    cadastrado_por=input_dto.cadastrado_por,
                )
            )

        logger.info(f"Custodiado cadastrado: {custodiado.id} - processo {custodiado.processo}")
        return CustodiadoOutputDTO.from_entity(custodiado, endereco, hoje)


class AtualizarCustodiadoService:
    """
    Use Case: Atualizar dados cadastrais.

    Apenas campos informados são alterados. Endereço diferente do
    atual encerra o endereço ativo e cria um novo no histórico.
    """

    def __init__(
        self,
        custodiado_repo: CustodiadoRepository,
        endereco_repo: HistoricoEnderecoRepository,
        uow: UnitOfWork,
    ):
        self.custodiado_repo = custodiado_repo
        self.endereco_repo = endereco_repo
        self.uow = uow

    def execute(
        self,
        input_dto: AtualizarCustodiadoInputDTO,
        hoje: Optional[date] = None,
    ) -> CustodiadoOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se custodiado não existe
            BusinessRuleViolationError: Se arquivado ou documento duplicado
            ValidationError: Se dados inválidos
        """
        hoje = hoje or date.today()

        with self.uow:
            custodiado = obter_custodiado(self.custodiado_repo, input_dto.custodiado_id)

            cpf = formatar_cpf(input_dto.cpf) if input_dto.cpf else None
            if cpf and self.custodiado_repo.exists_cpf_ativo(cpf, excluir_id=custodiado.id):
                raise BusinessRuleViolationError(
                    MENSAGEM_CPF_DUPLICADO,
                    rule="cpf_duplicado"
                )
            rg = input_dto.rg.strip() if input_dto.rg else None
            if rg and self.custodiado_repo.exists_rg_ativo(rg, excluir_id=custodiado.id):
                raise BusinessRuleViolationError(
                    MENSAGEM_RG_DUPLICADO,
                    rule="rg_duplicado"
                )

            campos = custodiado.atualizar_dados(
                nome=input_dto.nome,
                cpf=input_dto.cpf,
                rg=input_dto.rg,
                contato=input_dto.contato,
                processo=input_dto.processo,
                vara=input_dto.vara,
                comarca=input_dto.comarca,
                data_decisao=input_dto.data_decisao,
                periodicidade=input_dto.periodicidade,
                observacoes=input_dto.observacoes,
                hoje=hoje,
            )
            self.custodiado_repo.save(custodiado)

            endereco = self.endereco_repo.get_ativo(custodiado.id)
            endereco_alterado = False
            if input_dto.endereco and input_dto.endereco.difere_de(endereco):
                anterior, endereco = trocar_endereco(
                    self.endereco_repo,
                    custodiado_id=custodiado.id,
                    dados=input_dto.endereco,
                    data_mudanca=hoje,
                    motivo=MOTIVO_ATUALIZACAO_CADASTRAL,
                    validado_por=input_dto.atualizado_por,
                )
                endereco_alterado = True
                self.uow.publish_event(
                    EnderecoAlteradoEvent(
                        aggregate_id=custodiado.id,
                        endereco_anterior_id=anterior.id if anterior else None,
                        endereco_novo_id=endereco.id,
                        cidade=endereco.cidade,
                        estado=endereco.estado,
                        motivo=MOTIVO_ATUALIZACAO_CADASTRAL,
                    )
                )

            self.uow.publish_event(
                CustodiadoAtualizadoEvent(
                    aggregate_id=custodiado.id,
                    campos_alterados=campos,
                    endereco_alterado=endereco_alterado,
                    atualizado_por=input_dto.atualizado_por,
                )
            )

        return CustodiadoOutputDTO.from_entity(custodiado, endereco, hoje)


class ArquivarCustodiadoService:
    """
    Use Case: Arquivar custodiado (equivale à exclusão).

    O histórico de comparecimentos e endereços é preservado.
    """

    def __init__(self, custodiado_repo: CustodiadoRepository, uow: UnitOfWork):
        self.custodiado_repo = custodiado_repo
        self.uow = uow

    def execute(self, custodiado_id: str, arquivado_por: Optional[str] = None) -> CustodiadoOutputDTO:
        with self.uow:
            custodiado = obter_custodiado(self.custodiado_repo, custodiado_id)
            custodiado.arquivar()
            self.custodiado_repo.save(custodiado)

            self.uow.publish_event(
                CustodiadoArquivadoEvent(
                    aggregate_id=custodiado.id,
                    processo=custodiado.processo,
                    arquivado_por=arquivado_por,
                )
            )

        logger.info(f"Custodiado arquivado: {custodiado.id}")
        return CustodiadoOutputDTO.from_entity(custodiado)


class ReativarCustodiadoService:
    """
    Use Case: Reativar custodiado arquivado.

    Os documentos não podem estar em uso por outro custodiado ativo.
    """

    def __init__(self, custodiado_repo: CustodiadoRepository, uow: UnitOfWork):
        self.custodiado_repo = custodiado_repo
        self.uow = uow

    def execute(
        self,
        custodiado_id: str,
        reativado_por: Optional[str] = None,
        hoje: Optional[date] = None,
    ) -> CustodiadoOutputDTO:
        with self.uow:
            custodiado = obter_custodiado(self.custodiado_repo, custodiado_id)

            if custodiado.is_ativo:
                raise BusinessRuleViolationError(
                    "Custodiado já está ativo",
                    rule="custodiado_ja_ativo"
                )
            if custodiado.cpf and self.custodiado_repo.exists_cpf_ativo(custodiado.cpf, excluir_id=custodiado.id):
                raise BusinessRuleViolationError(
                    "Não é possível reativar: CPF já está em uso por outro custodiado ativo",
                    rule="cpf_duplicado"
                )
            if custodiado.rg and self.custodiado_repo.exists_rg_ativo(custodiado.rg, excluir_id=custodiado.id):
                raise BusinessRuleViolationError(
                    "Não é possível reativar: RG já está em uso por outro custodiado ativo",
                    rule="rg_duplicado"
                )

            custodiado.reativar(hoje)
            self.custodiado_repo.save(custodiado)

            self.uow.publish_event(
                CustodiadoReativadoEvent(
                    aggregate_id=custodiado.id,
                    processo=custodiado.processo,
                    status=custodiado.status.value,
                    proximo_comparecimento=(
                        custodiado.proximo_comparecimento.isoformat()
                        if custodiado.proximo_comparecimento else None
                    ),
                    reativado_por=reativado_por,
                )
            )

        return CustodiadoOutputDTO.from_entity(custodiado, hoje=hoje)


class ObterCustodiadoService:
    """Use Case: Obter custodiado com endereço ativo."""

    def __init__(
        self,
        custodiado_repo: CustodiadoRepository,
        endereco_repo: HistoricoEnderecoRepository,
    ):
        self.custodiado_repo = custodiado_repo
        self.endereco_repo = endereco_repo

    def execute(self, custodiado_id: str) -> CustodiadoOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se custodiado não existe
        """
        custodiado = obter_custodiado(self.custodiado_repo, custodiado_id)
        endereco = self.endereco_repo.get_ativo(custodiado.id)
        return CustodiadoOutputDTO.from_entity(custodiado, endereco)


class ListarCustodiadosService:
    """
    Use Case: Listar custodiados com filtros e paginação.

    Por padrão lista apenas ativos.
    """

    POR_PAGINA_MAX = 100

    def __init__(self, custodiado_repo: CustodiadoRepository):
        self.custodiado_repo = custodiado_repo

    def execute(self, query: Optional[ListarCustodiadosQueryDTO] = None) -> PaginatedResultDTO:
        """
        Raises:
            ValidationError: Se situação, status ou paginação inválidos
        """
        query = query or ListarCustodiadosQueryDTO()

        if not 1 <= query.por_pagina <= self.POR_PAGINA_MAX:
            raise ValidationError(
                f"Itens por página deve estar entre 1 e {self.POR_PAGINA_MAX}",
                field="por_pagina"
            )

        situacao = None
        if query.situacao:
            try:
                situacao = SituacaoCustodiado.from_string(query.situacao)
            except ValueError as e:
                raise ValidationError(str(e), field="situacao")
        elif not query.incluir_arquivados:
            situacao = SituacaoCustodiado.ATIVO

        status = None
        if query.status:
            try:
                status = StatusComparecimento.from_string(query.status)
            except ValueError as e:
                raise ValidationError(str(e), field="status")

        pagina = max(query.pagina, 1)
        custodiados, total = self.custodiado_repo.list_paginated(
            pagina,
            query.por_pagina,
            situacao=situacao,
            status=status,
            processo=formatar_processo(query.processo) if query.processo else None,
        )
        return PaginatedResultDTO(
            items=[CustodiadoListItemDTO.from_entity(c) for c in custodiados],
            total=total,
            pagina=pagina,
            por_pagina=query.por_pagina,
        )


class BuscarCustodiadosService:
    """
    Use Case: Buscar custodiados ativos por nome ou número de processo.
    """

    TERMO_MIN_LENGTH = 2

    def __init__(self, custodiado_repo: CustodiadoRepository):
        self.custodiado_repo = custodiado_repo

    def execute(self, termo: Optional[str]) -> List[CustodiadoListItemDTO]:
        """
        Raises:
            ValidationError: Se termo vazio ou curto demais
        """
        if not termo or not termo.strip():
            raise ValidationError("Termo de busca é obrigatório", field="termo")

        termo = termo.strip()
        if len(termo) < self.TERMO_MIN_LENGTH:
            raise ValidationError(
                f"Termo de busca deve ter pelo menos {self.TERMO_MIN_LENGTH} caracteres",
                field="termo"
            )

        encontrados = {c.id: c for c in self.custodiado_repo.buscar(termo)}

        # Processo digitado sem máscara
        if len(somente_digitos(termo)) >= 10:
            formatado = formatar_processo(termo)
            if formatado != termo:
                for custodiado in self.custodiado_repo.buscar(formatado):
                    encontrados.setdefault(custodiado.id, custodiado)

        resultado = sorted(encontrados.values(), key=lambda c: c.nome)
        return [CustodiadoListItemDTO.from_entity(c) for c in resultado]


class AgendaComparecimentosService:
    """
    Use Case: Comparecimentos previstos entre hoje e hoje + N dias.

    dias=0 retorna os comparecimentos de hoje.
    """

    def __init__(self, custodiado_repo: CustodiadoRepository):
        self.custodiado_repo = custodiado_repo

    def execute(self, dias: int = 0, hoje: Optional[date] = None) -> List[CustodiadoListItemDTO]:
        if dias < 0:
            raise ValidationError("Dias deve ser maior ou igual a zero", field="dias")

        hoje = hoje or date.today()
        custodiados = self.custodiado_repo.list_proximos_entre(hoje, hoje + timedelta(days=dias))
        return [CustodiadoListItemDTO.from_entity(c, hoje) for c in custodiados]


class ConsultarEnderecosService:
    """
    Use Case: Consultas ao histórico de endereços.

    Agrupa as consultas de leitura do histórico (por custodiado,
    por período, por cidade/estado e estatísticas).
    """

    def __init__(
        self,
        endereco_repo: HistoricoEnderecoRepository,
        custodiado_repo: CustodiadoRepository,
    ):
        self.endereco_repo = endereco_repo
        self.custodiado_repo = custodiado_repo

    def historico(self, custodiado_id: str) -> List[EnderecoOutputDTO]:
        """Histórico completo, do endereço mais recente ao mais antigo."""
        obter_custodiado(self.custodiado_repo, custodiado_id)
        return [
            EnderecoOutputDTO.from_entity(e)
            for e in self.endereco_repo.list_by_custodiado(custodiado_id)
        ]

    def endereco_atual(self, custodiado_id: str) -> Optional[EnderecoOutputDTO]:
        obter_custodiado(self.custodiado_repo, custodiado_id)
        endereco = self.endereco_repo.get_ativo(custodiado_id)
        return EnderecoOutputDTO.from_entity(endereco) if endereco else None

    def enderecos_historicos(self, custodiado_id: str) -> List[EnderecoOutputDTO]:
        """Endereços já encerrados do custodiado."""
        obter_custodiado(self.custodiado_repo, custodiado_id)
        return [
            EnderecoOutputDTO.from_entity(e)
            for e in self.endereco_repo.list_by_custodiado(custodiado_id)
            if not e.ativo
        ]

    def por_periodo(
        self,
        custodiado_id: str,
        inicio: Optional[date],
        fim: Optional[date],
    ) -> List[EnderecoOutputDTO]:
        """Endereços em que o custodiado residiu em algum momento do período."""
        validar_periodo(inicio, fim)
        obter_custodiado(self.custodiado_repo, custodiado_id)
        return [
            EnderecoOutputDTO.from_entity(e)
            for e in self.endereco_repo.list_by_custodiado(custodiado_id)
            if e.esteve_ativo_entre(inicio, fim)
        ]

    def mudancas_por_periodo(
        self,
        inicio: Optional[date],
        fim: Optional[date],
    ) -> List[EnderecoOutputDTO]:
        """Mudanças de endereço (exclui endereços de cadastro) iniciadas no período."""
        validar_periodo(inicio, fim)
        return [
            EnderecoOutputDTO.from_entity(e)
            for e in self.endereco_repo.list_iniciados_entre(inicio, fim)
            if e.motivo_alteracao != MOTIVO_ENDERECO_INICIAL
        ]

    def contar_por_custodiado(self, custodiado_id: str) -> int:
        obter_custodiado(self.custodiado_repo, custodiado_id)
        return len(self.endereco_repo.list_by_custodiado(custodiado_id))

    def custodiados_por_cidade(self, cidade: Optional[str]) -> List[CustodiadoListItemDTO]:
        """Custodiados ativos cujo endereço ativo fica na cidade."""
        if not cidade or not cidade.strip():
            raise ValidationError("Nome da cidade é obrigatório", field="cidade")

        alvo = cidade.strip().lower()
        return self._custodiados_com_endereco(
            e for e in self.endereco_repo.list_ativos() if e.cidade.lower() == alvo
        )

    def custodiados_por_estado(self, estado: Optional[str]) -> List[CustodiadoListItemDTO]:
        """Custodiados ativos cujo endereço ativo fica no estado (sigla ou nome)."""
        if not estado or not estado.strip():
            raise ValidationError("Sigla do estado é obrigatória", field="estado")
        try:
            sigla = EstadoBrasil.from_string(estado).sigla
        except ValueError as e:
            raise ValidationError(str(e), field="estado")

        return self._custodiados_com_endereco(
            e for e in self.endereco_repo.list_ativos() if e.estado == sigla
        )

    def estatisticas_por_cidade(self) -> List[EstatisticaCidadeDTO]:
        """Quantidade de custodiados ativos por cidade do endereço ativo."""
        grupos = defaultdict(set)
        for endereco in self.endereco_repo.list_ativos():
            custodiado = self.custodiado_repo.get_by_id(endereco.custodiado_id)
            if custodiado and custodiado.is_ativo:
                grupos[(endereco.cidade, endereco.estado)].add(custodiado.id)

        estatisticas = [
            EstatisticaCidadeDTO(
                cidade=cidade,
                estado=estado,
                total=len(ids),
                custodiado_ids=sorted(ids),
            )
            for (cidade, estado), ids in grupos.items()
        ]
        return sorted(estatisticas, key=lambda e: (-e.total, e.cidade))

    def _custodiados_com_endereco(self, enderecos) -> List[CustodiadoListItemDTO]:
        custodiados = {}
        for endereco in enderecos:
            custodiado = self.custodiado_repo.get_by_id(endereco.custodiado_id)
            if custodiado and custodiado.is_ativo:
                custodiados[custodiado.id] = custodiado
        return [
            CustodiadoListItemDTO.from_entity(c)
            for c in sorted(custodiados.values(), key=lambda c: c.nome)
        ]


class AtualizarStatusCustodiadosService:
    """
    Use Case: Verificação periódica de status.

    Reavalia a conformidade de todos os custodiados ativos com base
    na data do próximo comparecimento. Executado pelo agendador
    (Celery Beat) e sob demanda por administradores.
    """

    def __init__(self, custodiado_repo: CustodiadoRepository, uow: UnitOfWork):
        self.custodiado_repo = custodiado_repo
        self.uow = uow

    def execute(self, hoje: Optional[date] = None) -> dict:
        """
        Returns:
            Dict com verificados, alterados, novos inadimplentes,
            regularizados e data da verificação
        """
        hoje = hoje or date.today()
        verificados = 0
        novos_inadimplentes = 0
        regularizados = 0

        with self.uow:
            for custodiado in self.custodiado_repo.list_by_situacao(SituacaoCustodiado.ATIVO):
                verificados += 1
                status_anterior = custodiado.status

                if not custodiado.atualizar_status_por_data(hoje):
                    continue

                self.custodiado_repo.save(custodiado)
                if custodiado.status == StatusComparecimento.INADIMPLENTE:
                    novos_inadimplentes += 1
                else:
                    regularizados += 1

                self.uow.publish_event(
                    StatusCustodiadoAlteradoEvent(
                        aggregate_id=custodiado.id,
                        status_anterior=status_anterior.value,
                        status_novo=custodiado.status.value,
                        dias_atraso=custodiado.dias_atraso(hoje),
                        proximo_comparecimento=(
                            custodiado.proximo_comparecimento.isoformat()
                            if custodiado.proximo_comparecimento else None
                        ),
                    )
                )

        alterados = novos_inadimplentes + regularizados
        logger.info(
            f"Verificação de status concluída: {verificados} verificados, "
            f"{alterados} alterados ({novos_inadimplentes} inadimplentes)"
        )
        return {
            "verificados": verificados,
            "alterados": alterados,
            "novos_inadimplentes": novos_inadimplentes,
            "regularizados": regularizados,
            "data_verificacao": hoje.isoformat(),
        }


class ResumoStatusService:
    """Use Case: Contagens de conformidade dos custodiados."""

    def __init__(self, custodiado_repo: CustodiadoRepository):
        self.custodiado_repo = custodiado_repo

    def execute(self, hoje: Optional[date] = None) -> dict:
        hoje = hoje or date.today()
        ativos = self.custodiado_repo.list_by_situacao(SituacaoCustodiado.ATIVO)

        inadimplentes = sum(1 for c in ativos if c.esta_inadimplente(hoje))
        em_conformidade = len(ativos) - inadimplentes
        percentual = round(em_conformidade * 100 / len(ativos), 2) if ativos else 0.0

        return {
            "total_ativos": len(ativos),
            "arquivados": self.custodiado_repo.count_by_situacao(SituacaoCustodiado.ARQUIVADO),
            "em_conformidade": em_conformidade,
            "inadimplentes": inadimplentes,
            "comparecimentos_hoje": sum(1 for c in ativos if c.comparecimento_hoje(hoje)),
            "percentual_conformidade": percentual,
            "data_consulta": hoje.isoformat(),
        }
