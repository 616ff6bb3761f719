"""
Data Transfer Objects (DTOs) do Domínio de Custodiados.

Tipos de DTOs:
- Input DTOs: Dados de entrada vindos da API
- Output DTOs: Dados formatados para resposta
- Query DTOs: Parâmetros de filtro de listagens
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from .entities import Custodiado, HistoricoEndereco


ENDERECO_NAO_INFORMADO = "Endereço não informado"
CIDADE_NAO_INFORMADA = "Não informado"


def _iso(valor) -> Optional[str]:
    return valor.isoformat() if valor else None


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class EnderecoInputDTO:
    """
    DTO de entrada para endereço.

    Attributes:
        cep: CEP (com ou sem hífen)
        logradouro: Rua, avenida etc.
        bairro: Bairro
        cidade: Cidade
        estado: Sigla da UF
        numero: Número (opcional)
        complemento: Complemento (opcional)
    """

    cep: str
    logradouro: str
    bairro: str
    cidade: str
    estado: str
    numero: Optional[str] = None
    complemento: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "cep": self.cep,
            "logradouro": self.logradouro,
            "numero": self.numero,
            "complemento": self.complemento,
            "bairro": self.bairro,
            "cidade": self.cidade,
            "estado": self.estado,
        }

    def difere_de(self, endereco: Optional[HistoricoEndereco]) -> bool:
        """Verifica se os dados informados diferem do endereço atual."""
        if endereco is None:
            return True

        def normalizar(valor: Optional[str]) -> str:
            return "".join((valor or "").split()).lower()

        return any(
            normalizar(novo) != normalizar(atual)
            for novo, atual in (
                ("".join(c for c in self.cep if c.isdigit()), endereco.cep_somente_numeros),
                (self.logradouro, endereco.logradouro),
                (self.numero, endereco.numero),
                (self.complemento, endereco.complemento),
                (self.bairro, endereco.bairro),
                (self.cidade, endereco.cidade),
                (self.estado, endereco.estado),
            )
        )


@dataclass(frozen=True)
class CadastrarCustodiadoInputDTO:
    """
    DTO de entrada para cadastrar custodiado.

    O endereço é obrigatório: o cadastro cria o primeiro registro
    do histórico de endereços.
    """

    nome: str
    contato: str
    processo: str
    vara: str
    comarca: str
    data_decisao: date
    periodicidade: int
    endereco: EnderecoInputDTO
    cpf: Optional[str] = None
    rg: Optional[str] = None
    data_comparecimento_inicial: Optional[date] = None
    observacoes: Optional[str] = None
    cadastrado_por: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "nome": self.nome,
            "cpf": self.cpf,
            "rg": self.rg,
            "contato": self.contato,
            "processo": self.processo,
            "vara": self.vara,
            "comarca": self.comarca,
            "data_decisao": _iso(self.data_decisao),
            "periodicidade": self.periodicidade,
            "data_comparecimento_inicial": _iso(self.data_comparecimento_inicial),
            "observacoes": self.observacoes,
            "endereco": self.endereco.to_dict(),
            "cadastrado_por": self.cadastrado_por,
        }


@dataclass(frozen=True)
class AtualizarCustodiadoInputDTO:
    """
    DTO de entrada para atualização parcial.

    Campos None não são alterados. Um endereço diferente do atual
    gera nova entrada no histórico.
    """

    custodiado_id: str
    nome: Optional[str] = None
    cpf: Optional[str] = None
    rg: Optional[str] = None
    contato: Optional[str] = None
    processo: Optional[str] = None
    vara: Optional[str] = None
    comarca: Optional[str] = None
    data_decisao: Optional[date] = None
    periodicidade: Optional[int] = None
    observacoes: Optional[str] = None
    endereco: Optional[EnderecoInputDTO] = None
    atualizado_por: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "custodiado_id": self.custodiado_id,
            "nome": self.nome,
            "cpf": self.cpf,
            "rg": self.rg,
            "contato": self.contato,
            "processo": self.processo,
            "vara": self.vara,
            "comarca": self.comarca,
            "data_decisao": _iso(self.data_decisao),
            "periodicidade": self.periodicidade,
            "observacoes": self.observacoes,
            "endereco": self.endereco.to_dict() if self.endereco else None,
            "atualizado_por": self.atualizado_por,
        }


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class EnderecoOutputDTO:
    """DTO de saída de um registro do histórico de endereços."""

    id: str
    custodiado_id: str
    cep: str
    logradouro: str
    numero: Optional[str]
    complemento: Optional[str]
    bairro: str
    cidade: str
    estado: str
    nome_estado: str
    regiao: str
    endereco_completo: str
    endereco_resumido: str
    data_inicio: date
    data_fim: Optional[date]
    ativo: bool
    periodo_residencia: str
    dias_residencia: int
    motivo_alteracao: Optional[str]
    validado_por: Optional[str]
    historico_comparecimento_id: Optional[str]

    @classmethod
    def from_entity(cls, entity: HistoricoEndereco) -> "EnderecoOutputDTO":
        return cls(
            id=entity.id,
            custodiado_id=entity.custodiado_id,
            cep=entity.cep,
            logradouro=entity.logradouro,
            numero=entity.numero,
            complemento=entity.complemento,
            bairro=entity.bairro,
            cidade=entity.cidade,
            estado=entity.estado,
            nome_estado=entity.nome_estado,
            regiao=entity.regiao_estado,
            endereco_completo=entity.endereco_completo,
            endereco_resumido=entity.endereco_resumido,
            data_inicio=entity.data_inicio,
            data_fim=entity.data_fim,
            ativo=entity.ativo,
            periodo_residencia=entity.periodo_residencia,
            dias_residencia=entity.dias_residencia(),
            motivo_alteracao=entity.motivo_alteracao,
            validado_por=entity.validado_por,
            historico_comparecimento_id=entity.historico_comparecimento_id,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "custodiado_id": self.custodiado_id,
            "cep": self.cep,
            "logradouro": self.logradouro,
            "numero": self.numero,
            "complemento": self.complemento,
            "bairro": self.bairro,
            "cidade": self.cidade,
            "estado": self.estado,
            "nome_estado": self.nome_estado,
            "regiao": self.regiao,
            "endereco_completo": self.endereco_completo,
            "endereco_resumido": self.endereco_resumido,
            "data_inicio": _iso(self.data_inicio),
            "data_fim": _iso(self.data_fim),
            "ativo": self.ativo,
            "periodo_residencia": self.periodo_residencia,
            "dias_residencia": self.dias_residencia,
            "motivo_alteracao": self.motivo_alteracao,
            "validado_por": self.validado_por,
            "historico_comparecimento_id": self.historico_comparecimento_id,
        }


@dataclass
class CustodiadoOutputDTO:
    """
    DTO de saída completo com dados do custodiado.

    Inclui o endereço ativo quando informado e os indicadores
    calculados de agenda (dias de atraso, comparecimento hoje).
    """

    id: str
    nome: str
    cpf: Optional[str]
    rg: Optional[str]
    identificacao: str
    contato: str
    processo: str
    vara: str
    comarca: str
    data_decisao: Optional[date]
    periodicidade: int
    periodicidade_descricao: str
    data_comparecimento_inicial: Optional[date]
    status: str
    situacao: str
    ultimo_comparecimento: Optional[date]
    proximo_comparecimento: Optional[date]
    dias_atraso: int
    inadimplente: bool
    comparecimento_hoje: bool
    observacoes: Optional[str]
    criado_em: datetime
    atualizado_em: datetime
    endereco: Optional[EnderecoOutputDTO] = None

    @classmethod
    def from_entity(
        cls,
        entity: Custodiado,
        endereco: Optional[HistoricoEndereco] = None,
        hoje: Optional[date] = None,
    ) -> "CustodiadoOutputDTO":
        return cls(
            id=entity.id,
            nome=entity.nome,
            cpf=entity.cpf,
            rg=entity.rg,
            identificacao=entity.identificacao,
            contato=entity.contato,
            processo=entity.processo,
            vara=entity.vara,
            comarca=entity.comarca,
            data_decisao=entity.data_decisao,
            periodicidade=entity.periodicidade,
            periodicidade_descricao=entity.periodicidade_descricao,
            data_comparecimento_inicial=entity.data_comparecimento_inicial,
            status=entity.status.value,
            situacao=entity.situacao.value,
            ultimo_comparecimento=entity.ultimo_comparecimento,
            proximo_comparecimento=entity.proximo_comparecimento,
            dias_atraso=entity.dias_atraso(hoje),
            inadimplente=entity.esta_inadimplente(hoje),
            comparecimento_hoje=entity.comparecimento_hoje(hoje),
            observacoes=entity.observacoes,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
            endereco=EnderecoOutputDTO.from_entity(endereco) if endereco else None,
        )

    @property
    def endereco_completo(self) -> str:
        return self.endereco.endereco_completo if self.endereco else ENDERECO_NAO_INFORMADO

    @property
    def cidade_estado(self) -> str:
        if not self.endereco:
            return CIDADE_NAO_INFORMADA
        return f"{self.endereco.cidade} - {self.endereco.estado}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nome": self.nome,
            "cpf": self.cpf,
            "rg": self.rg,
            "identificacao": self.identificacao,
            "contato": self.contato,
            "processo": self.processo,
            "vara": self.vara,
            "comarca": self.comarca,
            "data_decisao": _iso(self.data_decisao),
            "periodicidade": self.periodicidade,
            "periodicidade_descricao": self.periodicidade_descricao,
            "data_comparecimento_inicial": _iso(self.data_comparecimento_inicial),
            "status": self.status,
            "situacao": self.situacao,
            "ultimo_comparecimento": _iso(self.ultimo_comparecimento),
            "proximo_comparecimento": _iso(self.proximo_comparecimento),
            "dias_atraso": self.dias_atraso,
            "inadimplente": self.inadimplente,
            "comparecimento_hoje": self.comparecimento_hoje,
            "observacoes": self.observacoes,
            "endereco": self.endereco.to_dict() if self.endereco else None,
            "endereco_completo": self.endereco_completo,
            "cidade_estado": self.cidade_estado,
            "criado_em": self.criado_em.isoformat(),
            "atualizado_em": self.atualizado_em.isoformat(),
        }


@dataclass
class CustodiadoListItemDTO:
    """DTO enxuto para listagens e agenda."""

    id: str
    nome: str
    identificacao: str
    processo: str
    comarca: str
    status: str
    situacao: str
    periodicidade: int
    ultimo_comparecimento: Optional[date]
    proximo_comparecimento: Optional[date]
    dias_atraso: int

    @classmethod
    def from_entity(cls, entity: Custodiado, hoje: Optional[date] = None) -> "CustodiadoListItemDTO":
        return cls(
            id=entity.id,
            nome=entity.nome,
            identificacao=entity.identificacao,
            processo=entity.processo,
            comarca=entity.comarca,
            status=entity.status.value,
            situacao=entity.situacao.value,
            periodicidade=entity.periodicidade,
            ultimo_comparecimento=entity.ultimo_comparecimento,
            proximo_comparecimento=entity.proximo_comparecimento,
            dias_atraso=entity.dias_atraso(hoje),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nome": self.nome,
            "identificacao": self.identificacao,
            "processo": self.processo,
            "comarca": self.comarca,
            "status": self.status,
            "situacao": self.situacao,
            "periodicidade": self.periodicidade,
            "ultimo_comparecimento": _iso(self.ultimo_comparecimento),
            "proximo_comparecimento": _iso(self.proximo_comparecimento),
            "dias_atraso": self.dias_atraso,
        }


# =============================================================================
# QUERY DTOs (Filtros de Busca)
# =============================================================================

@dataclass(frozen=True)
class ListarCustodiadosQueryDTO:
    """
    Parâmetros de filtro da listagem de custodiados.

    Attributes:
        situacao: ATIVO ou ARQUIVADO (tem precedência sobre incluir_arquivados)
        status: EM_CONFORMIDADE ou INADIMPLENTE
        processo: Número do processo (formatado ou só dígitos)
        incluir_arquivados: Inclui arquivados quando situacao não é informada
        pagina: Número da página (1-indexed)
        por_pagina: Itens por página
    """

    situacao: Optional[str] = None
    status: Optional[str] = None
    processo: Optional[str] = None
    incluir_arquivados: bool = False
    pagina: int = 1
    por_pagina: int = 20

    def to_dict(self) -> dict:
        return {
            "situacao": self.situacao,
            "status": self.status,
            "processo": self.processo,
            "incluir_arquivados": self.incluir_arquivados,
            "pagina": self.pagina,
            "por_pagina": self.por_pagina,
        }


@dataclass
class EstatisticaCidadeDTO:
    """Quantidade de custodiados com endereço ativo em uma cidade."""

    cidade: str
    estado: str
    total: int
    custodiado_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "cidade": self.cidade,
            "estado": self.estado,
            "total": self.total,
        }
