"""
Entidades do Domínio de Comparecimentos.

Entidades:
- HistoricoComparecimento: Registro de um comparecimento em juízo
- TipoValidacao: Presencial, online ou cadastro inicial

Regras de Negócio Encapsuladas:
- Validado por é obrigatório
- Cadastro inicial nunca é considerado atrasado
- Comparecimento com mudança de endereço referencia os endereços criados
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import ClassVar, List, Optional
import uuid

from src.core.shared.exceptions import ValidationError


class TipoValidacao(Enum):
    """
    Forma como o comparecimento foi validado.

    CADASTRO_INICIAL é o registro criado junto com o cadastro do
    custodiado; os demais são comparecimentos regulares.
    """

    PRESENCIAL = "Presencial"
    ONLINE = "Online/Virtual"
    CADASTRO_INICIAL = "Cadastro Inicial"

    @property
    def codigo(self) -> str:
        return self.name.lower()

    @property
    def is_virtual(self) -> bool:
        return self == TipoValidacao.ONLINE

    @property
    def requer_presenca_fisica(self) -> bool:
        return self in (TipoValidacao.PRESENCIAL, TipoValidacao.CADASTRO_INICIAL)

    @property
    def is_cadastro_inicial(self) -> bool:
        return self == TipoValidacao.CADASTRO_INICIAL

    @property
    def is_comparecimento_regular(self) -> bool:
        return self in (TipoValidacao.PRESENCIAL, TipoValidacao.ONLINE)

    @classmethod
    def from_string(cls, value: str) -> "TipoValidacao":
        """
        Converte nome (PRESENCIAL), código (presencial) ou rótulo
        ("Online/Virtual") para enum.

        Raises:
            ValueError: Se valor inválido
        """
        if not value or not value.strip():
            raise ValueError("Tipo de validação não pode ser vazio")

        try:
            return cls[value.strip().upper().replace(" ", "_")]
        except KeyError:
            pass

        for tipo in cls:
            if tipo.value.lower() == value.strip().lower():
                return tipo

        raise ValueError(
            f"Tipo de validação inválido: '{value}'. Use: presencial, online ou cadastro_inicial"
        )


@dataclass
class HistoricoComparecimento:
    """
    Entidade de Domínio: Comparecimento registrado.

    Invariantes:
    - custodiado_id, data e validado_por são obrigatórios
    - Observações e motivo da mudança têm no máximo 500 caracteres

    Attributes:
        id: Identificador único (UUID)
        custodiado_id: Custodiado que compareceu
        data_comparecimento: Data do comparecimento
        hora_comparecimento: Hora (opcional)
        tipo_validacao: Presencial, online ou cadastro inicial
        validado_por: Servidor que validou
        observacoes: Observações livres
        anexos: Referências de anexos (texto livre)
        mudanca_endereco: Se houve mudança de endereço
        motivo_mudanca_endereco: Motivo informado
        enderecos_alterados: IDs dos endereços criados neste comparecimento
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    custodiado_id: str = ""

    data_comparecimento: date = field(default_factory=date.today)
    hora_comparecimento: Optional[time] = None
    tipo_validacao: TipoValidacao = field(default=TipoValidacao.PRESENCIAL)
    validado_por: str = ""

    observacoes: Optional[str] = None
    anexos: Optional[str] = None

    mudanca_endereco: bool = False
    motivo_mudanca_endereco: Optional[str] = None
    enderecos_alterados: List[str] = field(default_factory=list)

    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)

    VALIDADO_POR_MAX_LENGTH: ClassVar[int] = 100
    TEXTO_MAX_LENGTH: ClassVar[int] = 500

    @classmethod
    def criar(
        cls,
        custodiado_id: str,
        data_comparecimento: date,
        tipo_validacao: TipoValidacao,
        validado_por: str,
        hora_comparecimento: Optional[time] = None,
        observacoes: Optional[str] = None,
        anexos: Optional[str] = None,
        mudanca_endereco: bool = False,
        motivo_mudanca_endereco: Optional[str] = None,
    ) -> "HistoricoComparecimento":
        """
        Factory method para registrar comparecimento com validações.

        Raises:
            ValidationError: Se dados de entrada inválidos
        """
        if not custodiado_id:
            raise ValidationError("Custodiado é obrigatório", field="custodiado_id")
        if data_comparecimento is None:
            raise ValidationError(
                "Data do comparecimento é obrigatória",
                field="data_comparecimento"
            )
        if tipo_validacao is None:
            raise ValidationError(
                "Tipo de validação é obrigatório",
                field="tipo_validacao"
            )
        cls._validar_validado_por(validado_por)
        cls._validar_texto(observacoes, "observacoes", "Observações")
        cls._validar_texto(motivo_mudanca_endereco, "motivo_mudanca_endereco", "Motivo da mudança")

        return cls(
            custodiado_id=custodiado_id,
            data_comparecimento=data_comparecimento,
            hora_comparecimento=hora_comparecimento,
            tipo_validacao=tipo_validacao,
            validado_por=validado_por.strip(),
            observacoes=observacoes,
            anexos=anexos,
            mudanca_endereco=mudanca_endereco,
            motivo_mudanca_endereco=motivo_mudanca_endereco if mudanca_endereco else None,
        )

    @classmethod
    def _validar_validado_por(cls, validado_por: str) -> None:
        if not validado_por or not validado_por.strip():
            raise ValidationError("Validado por é obrigatório", field="validado_por")
        if len(validado_por.strip()) > cls.VALIDADO_POR_MAX_LENGTH:
            raise ValidationError(
                f"Validado por deve ter no máximo {cls.VALIDADO_POR_MAX_LENGTH} caracteres",
                field="validado_por"
            )

    @classmethod
    def _validar_texto(cls, valor: Optional[str], campo: str, rotulo: str) -> None:
        if valor and len(valor) > cls.TEXTO_MAX_LENGTH:
            raise ValidationError(
                f"{rotulo} deve ter no máximo {cls.TEXTO_MAX_LENGTH} caracteres",
                field=campo
            )

    def adicionar_endereco_alterado(self, endereco_id: str) -> None:
        if endereco_id not in self.enderecos_alterados:
            self.enderecos_alterados.append(endereco_id)
            self.mudanca_endereco = True
            self._atualizar_timestamp()

    def atualizar_observacoes(self, observacoes: Optional[str]) -> None:
        """
        Substitui as observações do comparecimento.

        Raises:
            ValidationError: Se exceder o tamanho máximo
        """
        texto = observacoes.strip() if observacoes and observacoes.strip() else None
        self._validar_texto(texto, "observacoes", "Observações")
        self.observacoes = texto
        self._atualizar_timestamp()

    def is_atrasado(self, proximo_esperado: Optional[date]) -> bool:
        """
        Compareceu depois da data esperada?

        Args:
            proximo_esperado: Data em que o comparecimento era devido
        """
        if self.tipo_validacao.is_cadastro_inicial or proximo_esperado is None:
            return False
        return self.data_comparecimento > proximo_esperado

    def dias_atraso(self, proximo_esperado: Optional[date]) -> int:
        if not self.is_atrasado(proximo_esperado):
            return 0
        return (self.data_comparecimento - proximo_esperado).days

    def _atualizar_timestamp(self) -> None:
        self.atualizado_em = datetime.now()

    @property
    def data_hora_comparecimento(self) -> datetime:
        return datetime.combine(self.data_comparecimento, self.hora_comparecimento or time.min)

    @property
    def is_cadastro_inicial(self) -> bool:
        return self.tipo_validacao.is_cadastro_inicial

    @property
    def total_enderecos_alterados(self) -> int:
        return len(self.enderecos_alterados)

    @property
    def resumo(self) -> str:
        texto = f"{self.data_comparecimento.strftime('%d/%m/%Y')} - {self.tipo_validacao.value}"
        if self.hora_comparecimento:
            texto += f" às {self.hora_comparecimento.strftime('%H:%M')}"
        if self.mudanca_endereco:
            texto += " (com mudança de endereço)"
        return texto

    @property
    def descricao_completa(self) -> str:
        texto = (
            f"Comparecimento {self.tipo_validacao.value.lower()} "
            f"em {self.data_comparecimento.strftime('%d/%m/%Y')}"
        )
        if self.hora_comparecimento:
            texto += f" às {self.hora_comparecimento.strftime('%H:%M')}"
        if self.mudanca_endereco:
            texto += ". Houve mudança de endereço"
            if self.motivo_mudanca_endereco and self.motivo_mudanca_endereco.strip():
                texto += f" ({self.motivo_mudanca_endereco})"
        if self.observacoes and self.observacoes.strip():
            texto += f". Obs: {self.observacoes}"
        return texto

    def __repr__(self) -> str:
        return (
            f"HistoricoComparecimento("
            f"id={self.id[:8]}..., "
            f"custodiado_id={self.custodiado_id[:8]}..., "
            f"data={self.data_comparecimento.isoformat()}, "
            f"tipo={self.tipo_validacao.name}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HistoricoComparecimento):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
