"""
Entidades do Domínio de Custodiados.

Este módulo define as entidades que encapsulam as regras de
acompanhamento de pessoas em liberdade provisória.

Entidades:
- Custodiado: Agregado principal (dados pessoais, processo e agenda)
- HistoricoEndereco: Endereços do custodiado ao longo do tempo
- SituacaoCustodiado: Ativo ou arquivado
- StatusComparecimento: Em conformidade ou inadimplente
- EstadoBrasil: Unidades federativas aceitas nos endereços

Regras de Negócio Encapsuladas:
- Próximo comparecimento = último comparecimento + periodicidade
- Inadimplência quando o próximo comparecimento já passou
- Arquivamento remove o custodiado da agenda
- Apenas um endereço ativo por custodiado
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import ClassVar, List, Optional
import re
import uuid

from src.core.shared.exceptions import (
    ValidationError,
    BusinessRuleViolationError,
)
from .documentos import (
    formatar_cpf,
    cpf_valido,
    formatar_processo,
    processo_valido,
    formatar_cep,
    cep_valido,
    contato_valido,
    somente_digitos,
)


class SituacaoCustodiado(Enum):
    """Situação cadastral. ARQUIVADO equivale à exclusão lógica."""

    ATIVO = "Ativo"
    ARQUIVADO = "Arquivado"

    @classmethod
    def from_string(cls, value: str) -> "SituacaoCustodiado":
        try:
            return cls[value.upper().replace(" ", "_")]
        except KeyError:
            pass

        for situacao in cls:
            if situacao.value.lower() == value.lower():
                return situacao

        raise ValueError(f"Situação inválida: {value}")


class StatusComparecimento(Enum):
    """
    Status de cumprimento da agenda de comparecimentos.

    INADIMPLENTE quando a data do próximo comparecimento já passou
    sem registro de comparecimento.
    """

    EM_CONFORMIDADE = "Em Conformidade"
    INADIMPLENTE = "Inadimplente"

    @classmethod
    def from_string(cls, value: str) -> "StatusComparecimento":
        try:
            return cls[value.upper().replace(" ", "_")]
        except KeyError:
            pass

        for status in cls:
            if status.value.lower() == value.lower():
                return status

        raise ValueError(f"Status inválido: {value}")


_ESTADOS = {
    "AC": ("Acre", "Norte"),
    "AL": ("Alagoas", "Nordeste"),
    "AP": ("Amapá", "Norte"),
    "AM": ("Amazonas", "Norte"),
    "BA": ("Bahia", "Nordeste"),
    "CE": ("Ceará", "Nordeste"),
    "DF": ("Distrito Federal", "Centro-Oeste"),
    "ES": ("Espírito Santo", "Sudeste"),
    "GO": ("Goiás", "Centro-Oeste"),
    "MA": ("Maranhão", "Nordeste"),
    "MT": ("Mato Grosso", "Centro-Oeste"),
    "MS": ("Mato Grosso do Sul", "Centro-Oeste"),
    "MG": ("Minas Gerais", "Sudeste"),
    "PA": ("Pará", "Norte"),
    "PB": ("Paraíba", "Nordeste"),
    "PR": ("Paraná", "Sul"),
    "PE": ("Pernambuco", "Nordeste"),
    "PI": ("Piauí", "Nordeste"),
    "RJ": ("Rio de Janeiro", "Sudeste"),
    "RN": ("Rio Grande do Norte", "Nordeste"),
    "RS": ("Rio Grande do Sul", "Sul"),
    "RO": ("Rondônia", "Norte"),
    "RR": ("Roraima", "Norte"),
    "SC": ("Santa Catarina", "Sul"),
    "SP": ("São Paulo", "Sudeste"),
    "SE": ("Sergipe", "Nordeste"),
    "TO": ("Tocantins", "Norte"),
}


class EstadoBrasil(Enum):
    """
    Unidades federativas do Brasil.

    O valor do enum é a sigla; nome e região vêm da tabela ``_ESTADOS``.
    """

    AC = "AC"
    AL = "AL"
    AP = "AP"
    AM = "AM"
    BA = "BA"
    CE = "CE"
    DF = "DF"
    ES = "ES"
    GO = "GO"
    MA = "MA"
    MT = "MT"
    MS = "MS"
    MG = "MG"
    PA = "PA"
    PB = "PB"
    PR = "PR"
    PE = "PE"
    PI = "PI"
    RJ = "RJ"
    RN = "RN"
    RS = "RS"
    RO = "RO"
    RR = "RR"
    SC = "SC"
    SP = "SP"
    SE = "SE"
    TO = "TO"

    @property
    def sigla(self) -> str:
        return self.value

    @property
    def nome(self) -> str:
        return _ESTADOS[self.value][0]

    @property
    def regiao(self) -> str:
        return _ESTADOS[self.value][1]

    @property
    def nome_completo(self) -> str:
        """Ex: "Bahia (BA)"."""
        return f"{self.nome} ({self.sigla})"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "EstadoBrasil":
        """
        Converte sigla ou nome completo para enum.

        Raises:
            ValueError: Se vazio ou não corresponder a nenhum estado
        """
        if not value or not value.strip():
            raise ValueError("Estado não pode ser vazio")

        valor = value.strip()
        try:
            return cls[valor.upper()]
        except KeyError:
            pass

        for estado in cls:
            if estado.nome.lower() == valor.lower():
                return estado

        raise ValueError(
            f"Estado inválido: {value}. Use uma sigla válida (ex: BA, SP, RJ) ou nome completo"
        )

    @classmethod
    def is_valid_sigla(cls, sigla: Optional[str]) -> bool:
        return bool(sigla) and sigla.strip().upper() in _ESTADOS

    @classmethod
    def siglas_validas(cls) -> str:
        return ", ".join(estado.sigla for estado in cls)

    @classmethod
    def por_regiao(cls, regiao: str) -> List["EstadoBrasil"]:
        return [estado for estado in cls if estado.regiao.lower() == regiao.lower()]


@dataclass
class HistoricoEndereco:
    """
    Entidade de Domínio: Endereço no histórico do custodiado.

    Cada mudança de endereço encerra o endereço ativo (data_fim) e
    cria um novo registro ativo. Endereços criados durante um
    comparecimento guardam o ID desse comparecimento.

    Invariantes:
    - CEP, logradouro, bairro, cidade e estado são obrigatórios
    - Estado deve ser uma sigla válida de UF
    - data_fim não pode ser anterior a data_inicio
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    custodiado_id: str = ""

    cep: str = ""
    logradouro: str = ""
    numero: Optional[str] = None
    complemento: Optional[str] = None
    bairro: str = ""
    cidade: str = ""
    estado: str = ""

    data_inicio: date = field(default_factory=date.today)
    data_fim: Optional[date] = None
    ativo: bool = True

    motivo_alteracao: Optional[str] = None
    validado_por: Optional[str] = None
    historico_comparecimento_id: Optional[str] = None

    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)

    LOGRADOURO_MIN_LENGTH: ClassVar[int] = 5
    LOGRADOURO_MAX_LENGTH: ClassVar[int] = 200
    NUMERO_MAX_LENGTH: ClassVar[int] = 20
    COMPLEMENTO_MAX_LENGTH: ClassVar[int] = 100
    BAIRRO_CIDADE_MIN_LENGTH: ClassVar[int] = 2
    BAIRRO_CIDADE_MAX_LENGTH: ClassVar[int] = 100
    MOTIVO_MAX_LENGTH: ClassVar[int] = 500
    VALIDADO_POR_MAX_LENGTH: ClassVar[int] = 100

    @classmethod
    def criar(
        cls,
        custodiado_id: str,
        cep: str,
        logradouro: str,
        bairro: str,
        cidade: str,
        estado: str,
        numero: Optional[str] = None,
        complemento: Optional[str] = None,
        data_inicio: Optional[date] = None,
        motivo_alteracao: Optional[str] = None,
        validado_por: Optional[str] = None,
        historico_comparecimento_id: Optional[str] = None,
    ) -> "HistoricoEndereco":
        """
        Factory method para criar endereço ativo com validações.

        Raises:
            ValidationError: Se algum campo for inválido
        """
        if not custodiado_id:
            raise ValidationError("Custodiado é obrigatório", field="custodiado_id")

        cls._validar_cep(cep)
        cls._validar_texto(logradouro, "logradouro", "Logradouro",
                           cls.LOGRADOURO_MIN_LENGTH, cls.LOGRADOURO_MAX_LENGTH)
        cls._validar_texto(bairro, "bairro", "Bairro",
                           cls.BAIRRO_CIDADE_MIN_LENGTH, cls.BAIRRO_CIDADE_MAX_LENGTH)
        cls._validar_texto(cidade, "cidade", "Cidade",
                           cls.BAIRRO_CIDADE_MIN_LENGTH, cls.BAIRRO_CIDADE_MAX_LENGTH,
                           feminino=True)
        sigla = cls._validar_estado(estado)
        cls._validar_opcional(numero, "numero", "Número", cls.NUMERO_MAX_LENGTH)
        cls._validar_opcional(complemento, "complemento", "Complemento",
                              cls.COMPLEMENTO_MAX_LENGTH)
        cls._validar_opcional(motivo_alteracao, "motivo_alteracao",
                              "Motivo da alteração", cls.MOTIVO_MAX_LENGTH)
        cls._validar_opcional(validado_por, "validado_por", "Validado por",
                              cls.VALIDADO_POR_MAX_LENGTH)

        return cls(
            custodiado_id=custodiado_id,
            cep=formatar_cep(cep),
            logradouro=logradouro.strip(),
            numero=numero.strip() if numero and numero.strip() else None,
            complemento=complemento.strip() if complemento and complemento.strip() else None,
            bairro=bairro.strip(),
            cidade=cidade.strip(),
            estado=sigla,
            data_inicio=data_inicio or date.today(),
            ativo=True,
            motivo_alteracao=motivo_alteracao,
            validado_por=validado_por,
            historico_comparecimento_id=historico_comparecimento_id,
        )

    @classmethod
    def _validar_cep(cls, cep: str) -> None:
        if not cep or not cep.strip():
            raise ValidationError("CEP é obrigatório", field="cep")
        if not cep_valido(cep):
            raise ValidationError("CEP deve ter o formato 00000-000", field="cep")

    @classmethod
    def _validar_texto(
        cls,
        valor: str,
        campo: str,
        rotulo: str,
        minimo: int,
        maximo: int,
        feminino: bool = False,
    ) -> None:
        if not valor or not valor.strip():
            sufixo = "obrigatória" if feminino else "obrigatório"
            raise ValidationError(f"{rotulo} é {sufixo}", field=campo)
        if not minimo <= len(valor.strip()) <= maximo:
            raise ValidationError(
                f"{rotulo} deve ter entre {minimo} e {maximo} caracteres",
                field=campo
            )

    @classmethod
    def _validar_opcional(cls, valor: Optional[str], campo: str, rotulo: str, maximo: int) -> None:
        if valor and len(valor.strip()) > maximo:
            raise ValidationError(
                f"{rotulo} deve ter no máximo {maximo} caracteres",
                field=campo
            )

    @classmethod
    def _validar_estado(cls, estado: str) -> str:
        if not estado or not estado.strip():
            raise ValidationError("Estado é obrigatório", field="estado")
        sigla = estado.strip().upper()
        if not EstadoBrasil.is_valid_sigla(sigla):
            raise ValidationError(
                f"Estado '{estado}' é inválido. Estados válidos: {EstadoBrasil.siglas_validas()}",
                field="estado"
            )
        return sigla

    def finalizar(self, data_fim: Optional[date] = None) -> None:
        """
        Encerra o endereço (mudança de residência).

        Raises:
            BusinessRuleViolationError: Se já encerrado ou data inválida
        """
        data_fim = data_fim or date.today()

        if not self.ativo:
            raise BusinessRuleViolationError(
                "Endereço já foi finalizado",
                rule="endereco_ja_finalizado"
            )
        if data_fim < self.data_inicio:
            raise BusinessRuleViolationError(
                "Data de fim não pode ser anterior à data de início do endereço",
                rule="data_fim_anterior_inicio"
            )

        self.data_fim = data_fim
        self.ativo = False
        self.atualizado_em = datetime.now()

    @property
    def estado_brasil(self) -> Optional[EstadoBrasil]:
        if not EstadoBrasil.is_valid_sigla(self.estado):
            return None
        return EstadoBrasil.from_string(self.estado)

    @property
    def endereco_completo(self) -> str:
        partes = [self.logradouro]
        if self.numero:
            partes.append(self.numero)
        if self.complemento:
            partes.append(self.complemento)
        partes.append(self.bairro)
        partes.append(f"{self.cidade} - {self.estado}")
        if self.cep:
            partes.append(f"CEP: {self.cep}")
        return ", ".join(partes)

    @property
    def endereco_resumido(self) -> str:
        logradouro = f"{self.logradouro}, {self.numero}" if self.numero else self.logradouro
        return f"{logradouro}, {self.cidade} - {self.estado}"

    @property
    def cidade_estado(self) -> str:
        return f"{self.cidade} - {self.estado}"

    @property
    def cep_somente_numeros(self) -> str:
        return somente_digitos(self.cep)

    @property
    def nome_estado(self) -> str:
        estado = self.estado_brasil
        return estado.nome if estado else self.estado

    @property
    def regiao_estado(self) -> str:
        estado = self.estado_brasil
        return estado.regiao if estado else "Não identificada"

    @property
    def is_completo(self) -> bool:
        return all(
            valor and valor.strip()
            for valor in (self.cep, self.logradouro, self.bairro, self.cidade, self.estado)
        )

    @property
    def is_mudanca_durante_comparecimento(self) -> bool:
        return self.historico_comparecimento_id is not None

    @property
    def periodo_residencia(self) -> str:
        inicio = self.data_inicio.strftime("%d/%m/%Y")
        if self.ativo or self.data_fim is None:
            return f"Desde {inicio} (atual)"
        return f"{inicio} até {self.data_fim.strftime('%d/%m/%Y')}"

    def dias_residencia(self, hoje: Optional[date] = None) -> int:
        fim = self.data_fim or hoje or date.today()
        return (fim - self.data_inicio).days

    def esteve_ativo_entre(self, inicio: date, fim: date) -> bool:
        """Verifica se o período de residência se sobrepõe a [inicio, fim]."""
        termino = self.data_fim or date.max
        return self.data_inicio <= fim and termino >= inicio

    def __repr__(self) -> str:
        return (
            f"HistoricoEndereco("
            f"id={self.id[:8]}..., "
            f"custodiado_id={self.custodiado_id[:8]}..., "
            f"cidade='{self.cidade}', "
            f"ativo={self.ativo}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HistoricoEndereco):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class Custodiado:
    """
    Entidade de Domínio: Custodiado.

    Pessoa em liberdade provisória com obrigação de comparecer
    periodicamente em juízo.

    Invariantes:
    - Pelo menos um documento (CPF ou RG) deve ser informado
    - CPF, quando informado, deve ter dígitos verificadores válidos
    - Processo segue o padrão CNJ
    - Periodicidade entre 1 e 365 dias
    - Custodiado arquivado não tem próximo comparecimento

    Attributes:
        id: Identificador único (UUID)
        nome: Nome completo
        cpf: CPF formatado (000.000.000-00)
        rg: RG
        contato: Telefone com DDD
        processo: Número do processo (0000000-00.0000.0.00.0000)
        vara: Vara responsável
        comarca: Comarca do processo
        data_decisao: Data da decisão judicial
        periodicidade: Intervalo em dias entre comparecimentos
        data_comparecimento_inicial: Data do primeiro comparecimento
        status: Status de cumprimento
        situacao: Ativo ou arquivado
        ultimo_comparecimento: Data do último comparecimento
        proximo_comparecimento: Data prevista para o próximo
        observacoes: Observações livres

    Example:
        custodiado = Custodiado.criar(
            nome="João da Silva",
            cpf="52998224725",
            contato="(71) 99999-9999",
            processo="0000001-23.2024.8.05.0001",
            vara="1ª Vara Criminal",
            comarca="Salvador",
            data_decisao=date(2024, 1, 10),
            periodicidade=30,
        )
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    nome: str = ""
    cpf: Optional[str] = None
    rg: Optional[str] = None
    contato: str = ""

    processo: str = ""
    vara: str = ""
    comarca: str = ""
    data_decisao: Optional[date] = None

    periodicidade: int = 30
    data_comparecimento_inicial: Optional[date] = None

    status: StatusComparecimento = field(default=StatusComparecimento.EM_CONFORMIDADE)
    situacao: SituacaoCustodiado = field(default=SituacaoCustodiado.ATIVO)
    ultimo_comparecimento: Optional[date] = None
    proximo_comparecimento: Optional[date] = None

    observacoes: Optional[str] = None

    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)

    NOME_MIN_LENGTH: ClassVar[int] = 2
    NOME_MAX_LENGTH: ClassVar[int] = 150
    RG_MAX_LENGTH: ClassVar[int] = 20
    VARA_COMARCA_MAX_LENGTH: ClassVar[int] = 100
    OBSERVACOES_MAX_LENGTH: ClassVar[int] = 500
    PERIODICIDADE_MIN: ClassVar[int] = 1
    PERIODICIDADE_MAX: ClassVar[int] = 365
    ANOS_RETROATIVOS_MAX: ClassVar[int] = 5

    NOME_PATTERN: ClassVar[re.Pattern] = re.compile(r"^[A-Za-zÀ-ÿ\s'.-]+$")

    @classmethod
    def criar(
        cls,
        nome: str,
        contato: str,
        processo: str,
        vara: str,
        comarca: str,
        data_decisao: date,
        periodicidade: int,
        cpf: Optional[str] = None,
        rg: Optional[str] = None,
        data_comparecimento_inicial: Optional[date] = None,
        observacoes: Optional[str] = None,
        hoje: Optional[date] = None,
    ) -> "Custodiado":
        """
        Factory method para cadastrar custodiado com validações.

        O comparecimento inicial (default: hoje) é tratado como o
        último comparecimento, e o próximo é calculado a partir dele.

        Raises:
            ValidationError: Se dados de entrada inválidos
        """
        hoje = hoje or date.today()
        data_inicial = data_comparecimento_inicial or hoje

        cls._validar_nome(nome)
        cls._validar_documentos(cpf, rg)
        cls._validar_contato(contato)
        processo_formatado = cls._validar_processo(processo)
        cls._validar_vara_comarca(vara, comarca)
        cls._validar_data_decisao(data_decisao, hoje)
        cls._validar_periodicidade(periodicidade)
        cls._validar_data_inicial(data_inicial, data_decisao, hoje)
        cls._validar_observacoes(observacoes)

        custodiado = cls(
            nome=nome.strip(),
            cpf=formatar_cpf(cpf),
            rg=rg.strip() if rg and rg.strip() else None,
            contato=contato.strip(),
            processo=processo_formatado,
            vara=vara.strip(),
            comarca=comarca.strip(),
            data_decisao=data_decisao,
            periodicidade=periodicidade,
            data_comparecimento_inicial=data_inicial,
            ultimo_comparecimento=data_inicial,
            observacoes=observacoes.strip() if observacoes and observacoes.strip() else None,
        )
        custodiado.calcular_proximo_comparecimento()
        custodiado.atualizar_status_por_data(hoje)
        return custodiado

    @classmethod
    def _validar_nome(cls, nome: str) -> None:
        if not nome or not nome.strip():
            raise ValidationError("Nome é obrigatório", field="nome")

        nome_limpo = nome.strip()
        if not cls.NOME_MIN_LENGTH <= len(nome_limpo) <= cls.NOME_MAX_LENGTH:
            raise ValidationError(
                f"Nome deve ter entre {cls.NOME_MIN_LENGTH} e {cls.NOME_MAX_LENGTH} caracteres",
                field="nome"
            )
        if not cls.NOME_PATTERN.match(nome_limpo):
            raise ValidationError(
                "Nome deve conter apenas letras, espaços e caracteres especiais válidos",
                field="nome"
            )

    @classmethod
    def _validar_documentos(cls, cpf: Optional[str], rg: Optional[str]) -> None:
        tem_cpf = bool(cpf and cpf.strip())
        tem_rg = bool(rg and rg.strip())

        if not tem_cpf and not tem_rg:
            raise ValidationError(
                "Pelo menos um documento (CPF ou RG) deve ser informado",
                field="cpf"
            )
        if tem_cpf and not cpf_valido(cpf):
            raise ValidationError(
                "CPF inválido. Verifique os dígitos verificadores",
                field="cpf"
            )
        if tem_rg and len(rg.strip()) > cls.RG_MAX_LENGTH:
            raise ValidationError(
                f"RG deve ter no máximo {cls.RG_MAX_LENGTH} caracteres",
                field="rg"
            )

    @classmethod
    def _validar_contato(cls, contato: str) -> None:
        if not contato or not contato.strip():
            raise ValidationError("Contato é obrigatório", field="contato")
        if not contato_valido(contato):
            raise ValidationError(
                "Contato deve ter formato válido de telefone",
                field="contato"
            )

    @classmethod
    def _validar_processo(cls, processo: str) -> str:
        if not processo or not processo.strip():
            raise ValidationError("Número do processo é obrigatório", field="processo")

        formatado = formatar_processo(processo)
        if not processo_valido(formatado):
            raise ValidationError(
                "Processo deve ter formato válido (0000000-00.0000.0.00.0000)",
                field="processo"
            )
        return formatado

    @classmethod
    def _validar_vara_comarca(cls, vara: str, comarca: str) -> None:
        if not vara or not vara.strip():
            raise ValidationError("Vara é obrigatória", field="vara")
        if len(vara.strip()) > cls.VARA_COMARCA_MAX_LENGTH:
            raise ValidationError(
                f"Vara deve ter no máximo {cls.VARA_COMARCA_MAX_LENGTH} caracteres",
                field="vara"
            )
        if not comarca or not comarca.strip():
            raise ValidationError("Comarca é obrigatória", field="comarca")
        if len(comarca.strip()) > cls.VARA_COMARCA_MAX_LENGTH:
            raise ValidationError(
                f"Comarca deve ter no máximo {cls.VARA_COMARCA_MAX_LENGTH} caracteres",
                field="comarca"
            )

    @classmethod
    def _validar_data_decisao(cls, data_decisao: Optional[date], hoje: date) -> None:
        if data_decisao is None:
            raise ValidationError("Data da decisão é obrigatória", field="data_decisao")
        if data_decisao > hoje:
            raise ValidationError(
                "Data da decisão não pode ser uma data futura",
                field="data_decisao"
            )

    @classmethod
    def _validar_periodicidade(cls, periodicidade: Optional[int]) -> None:
        if periodicidade is None or not cls.PERIODICIDADE_MIN <= periodicidade <= cls.PERIODICIDADE_MAX:
            raise ValidationError(
                f"Periodicidade deve estar entre {cls.PERIODICIDADE_MIN} e {cls.PERIODICIDADE_MAX} dias",
                field="periodicidade"
            )

    @classmethod
    def _validar_data_inicial(cls, data_inicial: date, data_decisao: date, hoje: date) -> None:
        if data_inicial < data_decisao:
            raise ValidationError(
                "Data do comparecimento inicial não pode ser anterior à data da decisão",
                field="data_comparecimento_inicial"
            )
        if data_inicial < hoje - timedelta(days=365 * cls.ANOS_RETROATIVOS_MAX):
            raise ValidationError(
                f"Data do comparecimento inicial não pode ser anterior a {cls.ANOS_RETROATIVOS_MAX} anos",
                field="data_comparecimento_inicial"
            )

    @classmethod
    def _validar_observacoes(cls, observacoes: Optional[str]) -> None:
        if observacoes and len(observacoes.strip()) > cls.OBSERVACOES_MAX_LENGTH:
            raise ValidationError(
                f"Observações deve ter no máximo {cls.OBSERVACOES_MAX_LENGTH} caracteres",
                field="observacoes"
            )

    # -------------------------------------------------------------------------
    # Agenda e status
    # -------------------------------------------------------------------------

    def calcular_proximo_comparecimento(self) -> None:
        """Próximo = último + periodicidade (apenas para ativos)."""
        if self.ultimo_comparecimento and self.periodicidade and self.is_ativo:
            self.proximo_comparecimento = self.ultimo_comparecimento + timedelta(days=self.periodicidade)

    def atualizar_status_por_data(self, hoje: Optional[date] = None) -> bool:
        """
        Recalcula o status a partir da data do próximo comparecimento.

        Custodiado arquivado mantém o status atual.

        Returns:
            True se o status mudou
        """
        if not self.is_ativo:
            return False

        hoje = hoje or date.today()
        anterior = self.status

        if self.proximo_comparecimento and self.proximo_comparecimento < hoje:
            self.status = StatusComparecimento.INADIMPLENTE
        else:
            self.status = StatusComparecimento.EM_CONFORMIDADE

        if self.status != anterior:
            self._atualizar_timestamp()
            return True
        return False

    def registrar_comparecimento(self, data_comparecimento: date, hoje: Optional[date] = None) -> None:
        """
        Aplica um comparecimento à agenda do custodiado.

        O último comparecimento só avança: registros retroativos não
        fazem a agenda voltar no tempo.

        Raises:
            BusinessRuleViolationError: Se custodiado arquivado
        """
        if not self.is_ativo:
            raise BusinessRuleViolationError(
                "Não é possível registrar comparecimento para custodiado arquivado",
                rule="custodiado_arquivado"
            )

        if self.ultimo_comparecimento is None or data_comparecimento > self.ultimo_comparecimento:
            self.ultimo_comparecimento = data_comparecimento
            self.calcular_proximo_comparecimento()

        self.atualizar_status_por_data(hoje)
        self._atualizar_timestamp()

    def dias_atraso(self, hoje: Optional[date] = None) -> int:
        if self.proximo_comparecimento is None or not self.is_ativo:
            return 0
        hoje = hoje or date.today()
        if hoje > self.proximo_comparecimento:
            return (hoje - self.proximo_comparecimento).days
        return 0

    def esta_inadimplente(self, hoje: Optional[date] = None) -> bool:
        if not self.is_ativo:
            return False
        hoje = hoje or date.today()
        return self.status == StatusComparecimento.INADIMPLENTE or (
            self.proximo_comparecimento is not None and self.proximo_comparecimento < hoje
        )

    def comparecimento_hoje(self, hoje: Optional[date] = None) -> bool:
        hoje = hoje or date.today()
        return self.is_ativo and self.proximo_comparecimento == hoje

    def is_proximo_comparecimento(self, dias: int, hoje: Optional[date] = None) -> bool:
        """Próximo comparecimento cai entre hoje e hoje + dias."""
        if self.proximo_comparecimento is None or not self.is_ativo:
            return False
        hoje = hoje or date.today()
        return hoje <= self.proximo_comparecimento <= hoje + timedelta(days=dias)

    # -------------------------------------------------------------------------
    # Situação
    # -------------------------------------------------------------------------

    def arquivar(self) -> None:
        """
        Arquiva o custodiado (exclusão lógica).

        Raises:
            BusinessRuleViolationError: Se já arquivado
        """
        if not self.is_ativo:
            raise BusinessRuleViolationError(
                "Custodiado já está arquivado",
                rule="custodiado_ja_arquivado"
            )

        self.situacao = SituacaoCustodiado.ARQUIVADO
        self.proximo_comparecimento = None
        self._atualizar_timestamp()

    def reativar(self, hoje: Optional[date] = None) -> None:
        """
        Reativa custodiado arquivado, recalculando agenda e status.

        Raises:
            BusinessRuleViolationError: Se já ativo
        """
        if self.is_ativo:
            raise BusinessRuleViolationError(
                "Custodiado já está ativo",
                rule="custodiado_ja_ativo"
            )

        self.situacao = SituacaoCustodiado.ATIVO
        self.calcular_proximo_comparecimento()
        self.atualizar_status_por_data(hoje)
        self._atualizar_timestamp()

    def atualizar_dados(
        self,
        nome: Optional[str] = None,
        cpf: Optional[str] = None,
        rg: Optional[str] = None,
        contato: Optional[str] = None,
        processo: Optional[str] = None,
        vara: Optional[str] = None,
        comarca: Optional[str] = None,
        data_decisao: Optional[date] = None,
        periodicidade: Optional[int] = None,
        observacoes: Optional[str] = None,
        hoje: Optional[date] = None,
    ) -> List[str]:
        """
        Atualização parcial: apenas campos informados são alterados.

        Alterar a periodicidade recalcula o próximo comparecimento.

        Returns:
            Nomes dos campos alterados

        Raises:
            BusinessRuleViolationError: Se custodiado arquivado
            ValidationError: Se algum valor for inválido
        """
        if not self.is_ativo:
            raise BusinessRuleViolationError(
                "Não é possível atualizar custodiado arquivado. Reative-o primeiro.",
                rule="custodiado_arquivado"
            )

        hoje = hoje or date.today()
        alterados: List[str] = []

        if nome is not None:
            self._validar_nome(nome)
            self.nome = nome.strip()
            alterados.append("nome")

        if cpf is not None or rg is not None:
            novo_cpf = cpf if cpf is not None else self.cpf
            novo_rg = rg if rg is not None else self.rg
            self._validar_documentos(novo_cpf, novo_rg)
            if cpf is not None:
                self.cpf = formatar_cpf(cpf)
                alterados.append("cpf")
            if rg is not None:
                self.rg = rg.strip() or None
                alterados.append("rg")

        if contato is not None:
            self._validar_contato(contato)
            self.contato = contato.strip()
            alterados.append("contato")

        if processo is not None:
            self.processo = self._validar_processo(processo)
            alterados.append("processo")

        if vara is not None or comarca is not None:
            self._validar_vara_comarca(vara if vara is not None else self.vara,
                                       comarca if comarca is not None else self.comarca)
            if vara is not None:
                self.vara = vara.strip()
                alterados.append("vara")
            if comarca is not None:
                self.comarca = comarca.strip()
                alterados.append("comarca")

        if data_decisao is not None:
            self._validar_data_decisao(data_decisao, hoje)
            if self.data_comparecimento_inicial and self.data_comparecimento_inicial < data_decisao:
                raise ValidationError(
                    "Data da decisão não pode ser posterior ao comparecimento inicial",
                    field="data_decisao"
                )
            self.data_decisao = data_decisao
            alterados.append("data_decisao")

        if periodicidade is not None:
            self._validar_periodicidade(periodicidade)
            self.periodicidade = periodicidade
            self.calcular_proximo_comparecimento()
            alterados.append("periodicidade")

        if observacoes is not None:
            self._validar_observacoes(observacoes)
            self.observacoes = observacoes.strip() or None
            alterados.append("observacoes")

        if alterados:
            self.atualizar_status_por_data(hoje)
            self._atualizar_timestamp()

        return alterados

    def _atualizar_timestamp(self) -> None:
        self.atualizado_em = datetime.now()

    # -------------------------------------------------------------------------
    # Propriedades
    # -------------------------------------------------------------------------

    @property
    def is_ativo(self) -> bool:
        return self.situacao == SituacaoCustodiado.ATIVO

    @property
    def is_arquivado(self) -> bool:
        return self.situacao == SituacaoCustodiado.ARQUIVADO

    @property
    def identificacao(self) -> str:
        if self.cpf:
            return f"CPF: {self.cpf}"
        if self.rg:
            return f"RG: {self.rg}"
        return "Sem documento"

    @property
    def periodicidade_descricao(self) -> str:
        descricoes = {
            7: "Semanal",
            15: "Quinzenal",
            30: "Mensal",
            60: "Bimensal",
            90: "Trimestral",
            180: "Semestral",
        }
        return descricoes.get(self.periodicidade, f"{self.periodicidade} dias")

    @property
    def resumo(self) -> str:
        return f"{self.nome} - {self.identificacao} - {self.situacao.value}"

    def __repr__(self) -> str:
        return (
            f"Custodiado("
            f"id={self.id[:8]}..., "
            f"nome='{self.nome[:20]}', "
            f"processo={self.processo}, "
            f"status={self.status.value}, "
            f"situacao={self.situacao.value}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Custodiado):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
