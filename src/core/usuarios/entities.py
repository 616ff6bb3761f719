"""
Entidades do Domínio de Usuários.

Entidades:
- Usuario: Conta de acesso ao sistema
- Convite: Convite de uso único para criação de conta
- EmailVerification: Código numérico de verificação de email

Regras de Negócio Encapsuladas:
- Conta bloqueada por 30 minutos após 5 falhas de login
- Senha expira em 320 dias
- Convite vale 7 dias e só pode ser usado uma vez
- Código de verificação vale 10 minutos e aceita 5 tentativas
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import ClassVar, List, Optional
import re
import secrets
import uuid

from src.core.shared.exceptions import ValidationError, BusinessRuleViolationError


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
SIMBOLOS_SENHA = "@$!%*?&"


def normalizar_email(email: Optional[str]) -> str:
    return email.strip().lower() if email else ""


def validar_email(email: Optional[str]) -> None:
    """
    Raises:
        ValidationError: Se email vazio, inválido ou longo demais
    """
    if not email or not email.strip():
        raise ValidationError("Email é obrigatório", field="email")
    if len(email.strip()) > Usuario.EMAIL_MAX_LENGTH:
        raise ValidationError(
            f"Email deve ter no máximo {Usuario.EMAIL_MAX_LENGTH} caracteres",
            field="email"
        )
    if not EMAIL_PATTERN.match(email.strip()):
        raise ValidationError("Email deve ser válido", field="email")


def validar_senha_forte(senha: Optional[str], field_name: str = "senha") -> None:
    """
    Senha forte: 8+ caracteres com maiúscula, minúscula, número e
    símbolo (@$!%*?&).

    Raises:
        ValidationError: Indicando o primeiro requisito não atendido
    """
    if not senha or len(senha) < 8:
        raise ValidationError("Senha deve ter pelo menos 8 caracteres", field=field_name)
    if not re.search(r"[A-Z]", senha):
        raise ValidationError("Senha deve conter pelo menos uma letra maiúscula", field=field_name)
    if not re.search(r"[a-z]", senha):
        raise ValidationError("Senha deve conter pelo menos uma letra minúscula", field=field_name)
    if not re.search(r"\d", senha):
        raise ValidationError("Senha deve conter pelo menos um número", field=field_name)
    if not any(c in SIMBOLOS_SENHA for c in senha):
        raise ValidationError(
            f"Senha deve conter pelo menos um símbolo ({SIMBOLOS_SENHA})",
            field=field_name
        )


class TipoUsuario(Enum):
    """Perfil de acesso."""

    ADMIN = "admin"
    USUARIO = "usuario"

    @property
    def label(self) -> str:
        return {
            TipoUsuario.ADMIN: "Administrador",
            TipoUsuario.USUARIO: "Usuário",
        }[self]

    @classmethod
    def from_string(cls, value: str) -> "TipoUsuario":
        """
        Raises:
            ValueError: Se valor inválido
        """
        if value:
            for tipo in cls:
                if value.strip().lower() in (tipo.value, tipo.name.lower()):
                    return tipo
        raise ValueError(f"Tipo de usuário inválido: {value}")


class StatusUsuario(Enum):
    """Ciclo de vida da conta."""

    INVITED = "INVITED"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    BLOCKED = "BLOCKED"
    EXPIRED = "EXPIRED"

    @property
    def label(self) -> str:
        return {
            StatusUsuario.INVITED: "Convidado",
            StatusUsuario.ACTIVE: "Ativo",
            StatusUsuario.INACTIVE: "Inativo",
            StatusUsuario.BLOCKED: "Bloqueado",
            StatusUsuario.EXPIRED: "Expirado",
        }[self]

    @property
    def pode_logar(self) -> bool:
        return self == StatusUsuario.ACTIVE

    @classmethod
    def from_string(cls, value: str) -> "StatusUsuario":
        if value:
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        raise ValueError(f"Status de usuário inválido: {value}")


class StatusConvite(Enum):
    """Status de um convite."""

    PENDENTE = "PENDENTE"
    ATIVADO = "ATIVADO"
    EXPIRADO = "EXPIRADO"
    CANCELADO = "CANCELADO"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_string(cls, value: str) -> "StatusConvite":
        if value:
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        raise ValueError(f"Status de convite inválido: {value}")


@dataclass
class Usuario:
    """
    Entidade de Domínio: Usuário do sistema.

    A senha nunca é armazenada em texto: apenas o hash produzido
    pelo PasswordHasher da infraestrutura.

    Invariantes:
    - Nome entre 2 e 100 caracteres
    - Email válido, único e em minúsculas
    - Login só é permitido para contas ACTIVE, ativas e não bloqueadas
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    nome: str = ""
    email: str = ""
    senha_hash: str = ""
    tipo: TipoUsuario = field(default=TipoUsuario.USUARIO)
    status: StatusUsuario = field(default=StatusUsuario.ACTIVE)
    ativo: bool = True

    departamento: Optional[str] = None
    comarca: Optional[str] = None
    cargo: Optional[str] = None
    avatar: Optional[str] = None

    email_verificado: bool = False
    data_verificacao_email: Optional[datetime] = None

    tentativas_login_falhadas: int = 0
    bloqueado_ate: Optional[datetime] = None
    deve_trocar_senha: bool = False
    senha_expira_em: Optional[datetime] = None
    ultimo_login: Optional[datetime] = None

    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)

    NOME_MIN_LENGTH: ClassVar[int] = 2
    NOME_MAX_LENGTH: ClassVar[int] = 100
    EMAIL_MAX_LENGTH: ClassVar[int] = 150
    CAMPO_MAX_LENGTH: ClassVar[int] = 100
    MAX_TENTATIVAS_LOGIN: ClassVar[int] = 5
    BLOQUEIO_MINUTOS: ClassVar[int] = 30
    SENHA_VALIDADE_DIAS: ClassVar[int] = 320

    @classmethod
    def criar(
        cls,
        nome: str,
        email: str,
        senha_hash: str,
        tipo: TipoUsuario = TipoUsuario.USUARIO,
        departamento: Optional[str] = None,
        comarca: Optional[str] = None,
        cargo: Optional[str] = None,
        email_verificado: bool = False,
        agora: Optional[datetime] = None,
    ) -> "Usuario":
        """
        Factory method para criar usuário ativo.

        Raises:
            ValidationError: Se dados inválidos
        """
        agora = agora or datetime.now()
        cls._validar_nome(nome)
        validar_email(email)
        if not senha_hash:
            raise ValidationError("Senha é obrigatória", field="senha")
        for valor, campo, rotulo in (
            (departamento, "departamento", "Departamento"),
            (comarca, "comarca", "Comarca"),
            (cargo, "cargo", "Cargo"),
        ):
            cls._validar_campo_opcional(valor, campo, rotulo)

        return cls(
            nome=nome.strip(),
            email=normalizar_email(email),
            senha_hash=senha_hash,
            tipo=tipo,
            departamento=departamento.strip() if departamento else None,
            comarca=comarca.strip() if comarca else None,
            cargo=cargo.strip() if cargo else None,
            email_verificado=email_verificado,
            data_verificacao_email=agora if email_verificado else None,
            senha_expira_em=agora + timedelta(days=cls.SENHA_VALIDADE_DIAS),
            criado_em=agora,
            atualizado_em=agora,
        )

    @classmethod
    def _validar_nome(cls, nome: str) -> None:
        if not nome or not nome.strip():
            raise ValidationError("Nome é obrigatório", field="nome")
        if not cls.NOME_MIN_LENGTH <= len(nome.strip()) <= cls.NOME_MAX_LENGTH:
            raise ValidationError(
                f"Nome deve ter entre {cls.NOME_MIN_LENGTH} e {cls.NOME_MAX_LENGTH} caracteres",
                field="nome"
            )

    @classmethod
    def _validar_campo_opcional(cls, valor: Optional[str], campo: str, rotulo: str) -> None:
        if valor and len(valor.strip()) > cls.CAMPO_MAX_LENGTH:
            raise ValidationError(
                f"{rotulo} deve ter no máximo {cls.CAMPO_MAX_LENGTH} caracteres",
                field=campo
            )

    # -------------------------------------------------------------------------
    # Login
    # -------------------------------------------------------------------------

    def esta_bloqueado(self, agora: Optional[datetime] = None) -> bool:
        agora = agora or datetime.now()
        return self.bloqueado_ate is not None and self.bloqueado_ate > agora

    def minutos_bloqueio_restantes(self, agora: Optional[datetime] = None) -> int:
        agora = agora or datetime.now()
        if not self.esta_bloqueado(agora):
            return 0
        return int((self.bloqueado_ate - agora).total_seconds() // 60)

    def pode_logar(self, agora: Optional[datetime] = None) -> bool:
        return self.status.pode_logar and self.ativo and not self.esta_bloqueado(agora)

    def senha_expirada(self, agora: Optional[datetime] = None) -> bool:
        agora = agora or datetime.now()
        return self.senha_expira_em is not None and self.senha_expira_em < agora

    def registrar_falha_login(self, agora: Optional[datetime] = None) -> bool:
        """
        Incrementa falhas; ao atingir o limite bloqueia a conta.

        Returns:
            True se a conta foi bloqueada nesta tentativa
        """
        agora = agora or datetime.now()
        self.tentativas_login_falhadas += 1
        self._atualizar_timestamp()

        if self.tentativas_login_falhadas >= self.MAX_TENTATIVAS_LOGIN:
            self.bloqueado_ate = agora + timedelta(minutes=self.BLOQUEIO_MINUTOS)
            return True
        return False

    def resetar_tentativas(self) -> None:
        self.tentativas_login_falhadas = 0
        self.bloqueado_ate = None

    def registrar_login(self, agora: Optional[datetime] = None) -> None:
        self.resetar_tentativas()
        self.ultimo_login = agora or datetime.now()
        self._atualizar_timestamp()

    # -------------------------------------------------------------------------
    # Dados da conta
    # -------------------------------------------------------------------------

    def alterar_senha(self, novo_hash: str, agora: Optional[datetime] = None) -> None:
        agora = agora or datetime.now()
        self.senha_hash = novo_hash
        self.deve_trocar_senha = False
        self.senha_expira_em = agora + timedelta(days=self.SENHA_VALIDADE_DIAS)
        self._atualizar_timestamp()

    def marcar_email_verificado(self, agora: Optional[datetime] = None) -> None:
        self.email_verificado = True
        self.data_verificacao_email = agora or datetime.now()
        self._atualizar_timestamp()

    def atualizar_perfil(
        self,
        nome: Optional[str] = None,
        departamento: Optional[str] = None,
        comarca: Optional[str] = None,
        cargo: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> List[str]:
        """
        Atualização parcial: apenas valores informados são aplicados.

        Returns:
            Nomes dos campos alterados
        """
        alterados = []
        if nome is not None:
            self._validar_nome(nome)
            self.nome = nome.strip()
            alterados.append("nome")
        for valor, campo, rotulo in (
            (departamento, "departamento", "Departamento"),
            (comarca, "comarca", "Comarca"),
            (cargo, "cargo", "Cargo"),
        ):
            if valor is not None:
                self._validar_campo_opcional(valor, campo, rotulo)
                setattr(self, campo, valor.strip() or None)
                alterados.append(campo)
        if avatar is not None:
            self.avatar = avatar or None
            alterados.append("avatar")

        if alterados:
            self._atualizar_timestamp()
        return alterados

    def alterar_email(self, email: str) -> None:
        validar_email(email)
        self.email = normalizar_email(email)
        self._atualizar_timestamp()

    def desativar(self) -> None:
        """
        Raises:
            BusinessRuleViolationError: Se já desativado
        """
        if not self.ativo:
            raise BusinessRuleViolationError(
                "Usuário já está desativado",
                rule="usuario_ja_desativado"
            )
        self.ativo = False
        self.status = StatusUsuario.INACTIVE
        self._atualizar_timestamp()

    def reativar(self) -> None:
        self.ativo = True
        self.status = StatusUsuario.ACTIVE
        self.resetar_tentativas()
        self._atualizar_timestamp()

    def _atualizar_timestamp(self) -> None:
        self.atualizado_em = datetime.now()

    @property
    def is_admin(self) -> bool:
        return self.tipo == TipoUsuario.ADMIN

    @property
    def nome_completo(self) -> str:
        return f"{self.nome} ({self.departamento})" if self.departamento else self.nome

    def __repr__(self) -> str:
        return f"Usuario(id={self.id[:8]}..., email={self.email}, tipo={self.tipo.name})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Usuario):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class Convite:
    """
    Entidade de Domínio: Convite para criação de conta.

    Comarca e departamento são copiados do administrador que
    convidou; o usuário criado herda esses valores.

    Ciclo de vida:
        PENDENTE → ATIVADO | EXPIRADO | CANCELADO
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    token: str = field(default_factory=lambda: str(uuid.uuid4()))

    email: str = ""
    tipo_usuario: TipoUsuario = field(default=TipoUsuario.USUARIO)
    status: StatusConvite = field(default=StatusConvite.PENDENTE)

    comarca: Optional[str] = None
    departamento: Optional[str] = None

    criado_por_id: Optional[str] = None
    usuario_id: Optional[str] = None
    ip_criacao: Optional[str] = None
    ip_ativacao: Optional[str] = None

    quantidade_usos: int = 1
    usos_realizados: int = 0

    criado_em: datetime = field(default_factory=datetime.now)
    expira_em: datetime = field(default_factory=lambda: datetime.now() + timedelta(days=7))
    ativado_em: Optional[datetime] = None

    VALIDADE_DIAS: ClassVar[int] = 7

    @classmethod
    def criar(
        cls,
        email: str,
        tipo_usuario: TipoUsuario,
        criado_por_id: str,
        comarca: Optional[str] = None,
        departamento: Optional[str] = None,
        ip_criacao: Optional[str] = None,
        validade_dias: Optional[int] = None,
        agora: Optional[datetime] = None,
    ) -> "Convite":
        """
        Raises:
            ValidationError: Se email inválido
        """
        validar_email(email)
        agora = agora or datetime.now()
        return cls(
            email=normalizar_email(email),
            tipo_usuario=tipo_usuario,
            comarca=comarca,
            departamento=departamento,
            criado_por_id=criado_por_id,
            ip_criacao=ip_criacao,
            criado_em=agora,
            expira_em=agora + timedelta(days=validade_dias or cls.VALIDADE_DIAS),
        )

    def is_expirado(self, agora: Optional[datetime] = None) -> bool:
        agora = agora or datetime.now()
        return agora > self.expira_em

    def is_valido(self, agora: Optional[datetime] = None) -> bool:
        return (
            self.status == StatusConvite.PENDENTE
            and not self.is_expirado(agora)
            and self.usos_restantes > 0
        )

    @property
    def usos_restantes(self) -> int:
        return max(0, self.quantidade_usos - self.usos_realizados)

    @property
    def foi_utilizado(self) -> bool:
        return self.usos_realizados > 0

    def ativar(self, usuario_id: str, ip: Optional[str] = None, agora: Optional[datetime] = None) -> None:
        """
        Raises:
            BusinessRuleViolationError: Se convite não está válido
        """
        agora = agora or datetime.now()
        if not self.is_valido(agora):
            raise BusinessRuleViolationError(
                "Convite inválido ou expirado",
                rule="convite_invalido"
            )
        self.usuario_id = usuario_id
        self.usos_realizados += 1
        self.status = StatusConvite.ATIVADO
        self.ativado_em = agora
        self.ip_ativacao = ip

    def cancelar(self) -> None:
        if self.status != StatusConvite.PENDENTE:
            raise BusinessRuleViolationError(
                "Apenas convites pendentes podem ser cancelados",
                rule="convite_nao_pendente"
            )
        self.status = StatusConvite.CANCELADO

    def expirar(self) -> None:
        if self.status == StatusConvite.PENDENTE:
            self.status = StatusConvite.EXPIRADO

    def link(self, frontend_url: str) -> str:
        return f"{frontend_url.rstrip('/')}/invite/{self.token}"

    def __repr__(self) -> str:
        return f"Convite(id={self.id[:8]}..., email={self.email}, status={self.status.name})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Convite):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


def gerar_codigo_verificacao() -> str:
    """Código numérico de 6 dígitos (com zeros à esquerda)."""
    return f"{secrets.randbelow(10 ** 6):06d}"


@dataclass
class EmailVerification:
    """
    Entidade de Domínio: Verificação de email por código.

    Invariantes:
    - Código expira em 10 minutos
    - No máximo 5 tentativas; tentativas erradas também contam
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    email: str = ""
    codigo: str = field(default_factory=gerar_codigo_verificacao)
    nome: Optional[str] = None
    tipo_usuario: TipoUsuario = field(default=TipoUsuario.USUARIO)

    verificado: bool = False
    tentativas: int = 0
    max_tentativas: int = 5

    criado_em: datetime = field(default_factory=datetime.now)
    expira_em: datetime = field(default_factory=lambda: datetime.now() + timedelta(minutes=10))
    verificado_em: Optional[datetime] = None

    ip_solicitacao: Optional[str] = None
    ip_verificacao: Optional[str] = None

    VALIDADE_MINUTOS: ClassVar[int] = 10
    MAX_TENTATIVAS: ClassVar[int] = 5

    @classmethod
    def criar(
        cls,
        email: str,
        nome: Optional[str] = None,
        tipo_usuario: TipoUsuario = TipoUsuario.USUARIO,
        ip_solicitacao: Optional[str] = None,
        validade_minutos: Optional[int] = None,
        max_tentativas: Optional[int] = None,
        agora: Optional[datetime] = None,
    ) -> "EmailVerification":
        validar_email(email)
        agora = agora or datetime.now()
        return cls(
            email=normalizar_email(email),
            nome=nome.strip() if nome and nome.strip() else None,
            tipo_usuario=tipo_usuario,
            max_tentativas=max_tentativas or cls.MAX_TENTATIVAS,
            criado_em=agora,
            expira_em=agora + timedelta(minutes=validade_minutos or cls.VALIDADE_MINUTOS),
            ip_solicitacao=ip_solicitacao,
        )

    def is_expirado(self, agora: Optional[datetime] = None) -> bool:
        agora = agora or datetime.now()
        return agora > self.expira_em

    def pode_tentar(self, agora: Optional[datetime] = None) -> bool:
        return (
            not self.verificado
            and not self.is_expirado(agora)
            and self.tentativas < self.max_tentativas
        )

    def tentar(self, codigo: str, ip: Optional[str] = None, agora: Optional[datetime] = None) -> bool:
        """
        Registra uma tentativa de verificação.

        Returns:
            True se o código confere (verificação concluída)

        Raises:
            BusinessRuleViolationError: Se já verificado, expirado ou
                sem tentativas restantes
        """
        agora = agora or datetime.now()
        if self.verificado:
            raise BusinessRuleViolationError("Email já foi verificado", rule="verificacao_concluida")
        if self.is_expirado(agora):
            raise BusinessRuleViolationError(
                "Código expirado. Solicite um novo código.",
                rule="codigo_expirado"
            )
        if self.tentativas >= self.max_tentativas:
            raise BusinessRuleViolationError(
                "Número máximo de tentativas excedido. Solicite um novo código.",
                rule="tentativas_excedidas"
            )

        self.tentativas += 1
        informado = (codigo or "").strip().encode("utf-8")
        if not secrets.compare_digest(self.codigo.encode("utf-8"), informado):
            return False

        self.verificado = True
        self.verificado_em = agora
        self.ip_verificacao = ip
        return True

    def minutos_restantes(self, agora: Optional[datetime] = None) -> int:
        agora = agora or datetime.now()
        if self.is_expirado(agora):
            return 0
        return int((self.expira_em - agora).total_seconds() // 60)

    @property
    def tentativas_restantes(self) -> int:
        return max(0, self.max_tentativas - self.tentativas)

    def __repr__(self) -> str:
        return f"EmailVerification(email={self.email}, verificado={self.verificado})"
