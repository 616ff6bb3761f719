"""
Django Models para o domínio de Usuários.

Tabelas:
- usuarios: Servidores com acesso ao sistema
- convites: Convites de cadastro enviados por administradores
- email_verifications: Códigos de verificação de email

Os usuários do sistema não usam ``django.contrib.auth``: a senha é
gravada com os hashers do Django (ver hashers.py) e a sessão guarda
apenas o ID do usuário.
"""

from django.db import models


class TipoUsuarioChoices(models.TextChoices):
    """Espelha TipoUsuario do Core."""
    ADMIN = 'admin', 'Administrador'
    USUARIO = 'usuario', 'Usuário'


class StatusUsuarioChoices(models.TextChoices):
    """Espelha StatusUsuario do Core."""
    INVITED = 'INVITED', 'Convidado'
    ACTIVE = 'ACTIVE', 'Ativo'
    INACTIVE = 'INACTIVE', 'Inativo'
    BLOCKED = 'BLOCKED', 'Bloqueado'
    EXPIRED = 'EXPIRED', 'Expirado'


class StatusConviteChoices(models.TextChoices):
    """Espelha StatusConvite do Core."""
    PENDENTE = 'PENDENTE', 'Pendente'
    ATIVADO = 'ATIVADO', 'Ativado'
    EXPIRADO = 'EXPIRADO', 'Expirado'
    CANCELADO = 'CANCELADO', 'Cancelado'


class UsuarioModel(models.Model):
    """Model Django para persistência de usuários."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    nome = models.CharField(max_length=100)
    email = models.EmailField(max_length=150, unique=True, help_text="Email em minúsculas")
    senha_hash = models.CharField(max_length=255)

    tipo = models.CharField(
        max_length=10,
        choices=TipoUsuarioChoices.choices,
        default=TipoUsuarioChoices.USUARIO,
        db_index=True,
    )

    status = models.CharField(
        max_length=10,
        choices=StatusUsuarioChoices.choices,
        default=StatusUsuarioChoices.ACTIVE,
        db_index=True,
    )

    ativo = models.BooleanField(default=True, db_index=True)

    departamento = models.CharField(max_length=100, null=True, blank=True)
    comarca = models.CharField(max_length=100, null=True, blank=True)
    cargo = models.CharField(max_length=100, null=True, blank=True)
    avatar = models.CharField(max_length=255, null=True, blank=True)

    email_verificado = models.BooleanField(default=False)
    data_verificacao_email = models.DateTimeField(null=True, blank=True)

    # Segurança
    tentativas_login_falhadas = models.PositiveIntegerField(default=0)
    bloqueado_ate = models.DateTimeField(null=True, blank=True)
    deve_trocar_senha = models.BooleanField(default=False)
    senha_expira_em = models.DateTimeField(null=True, blank=True)
    ultimo_login = models.DateTimeField(null=True, blank=True)

    criado_em = models.DateTimeField()
    atualizado_em = models.DateTimeField()

    class Meta:
        db_table = 'usuarios'
        verbose_name = 'Usuário'
        verbose_name_plural = 'Usuários'
        ordering = ['nome']
        indexes = [
            models.Index(fields=['tipo', 'ativo'], name='idx_usuario_tipo_ativo'),
        ]

    def __str__(self):
        return f"{self.nome} <{self.email}>"


class ConviteModel(models.Model):
    """Convite de cadastro (link único com validade)."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)
    token = models.CharField(max_length=64, unique=True, help_text="Token do link de ativação")

    email = models.EmailField(max_length=150, db_index=True)
    tipo_usuario = models.CharField(
        max_length=10,
        choices=TipoUsuarioChoices.choices,
        default=TipoUsuarioChoices.USUARIO,
    )
    status = models.CharField(
        max_length=10,
        choices=StatusConviteChoices.choices,
        default=StatusConviteChoices.PENDENTE,
        db_index=True,
    )

    comarca = models.CharField(max_length=100, null=True, blank=True)
    departamento = models.CharField(max_length=100, null=True, blank=True)

    criado_por_id = models.CharField(max_length=36, null=True, blank=True, db_index=True)
    usuario_id = models.CharField(
        max_length=36,
        null=True,
        blank=True,
        help_text="Usuário criado na ativação"
    )
    ip_criacao = models.GenericIPAddressField(null=True, blank=True)
    ip_ativacao = models.GenericIPAddressField(null=True, blank=True)

    quantidade_usos = models.PositiveIntegerField(default=1)
    usos_realizados = models.PositiveIntegerField(default=0)

    criado_em = models.DateTimeField(db_index=True)
    expira_em = models.DateTimeField(db_index=True)
    ativado_em = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'convites'
        verbose_name = 'Convite'
        verbose_name_plural = 'Convites'
        ordering = ['-criado_em']
        indexes = [
            models.Index(fields=['email', 'status'], name='idx_convite_email_status'),
            models.Index(fields=['status', 'expira_em'], name='idx_convite_status_expira'),
        ]

    def __str__(self):
        return f"Convite {self.email} ({self.status})"


class EmailVerificationModel(models.Model):
    """Código de verificação de email (6 dígitos)."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    email = models.EmailField(max_length=150, db_index=True)
    codigo = models.CharField(max_length=6)
    nome = models.CharField(max_length=100, null=True, blank=True)
    tipo_usuario = models.CharField(
        max_length=10,
        choices=TipoUsuarioChoices.choices,
        default=TipoUsuarioChoices.USUARIO,
    )

    verificado = models.BooleanField(default=False)
    tentativas = models.PositiveIntegerField(default=0)
    max_tentativas = models.PositiveIntegerField(default=5)

    criado_em = models.DateTimeField(db_index=True)
    expira_em = models.DateTimeField(db_index=True)
    verificado_em = models.DateTimeField(null=True, blank=True)

    ip_solicitacao = models.GenericIPAddressField(null=True, blank=True)
    ip_verificacao = models.GenericIPAddressField(null=True, blank=True)

    class Meta:
        db_table = 'email_verifications'
        verbose_name = 'Verificação de Email'
        verbose_name_plural = 'Verificações de Email'
        ordering = ['-criado_em']
        indexes = [
            models.Index(fields=['email', 'criado_em'], name='idx_verificacao_email'),
        ]

    def __str__(self):
        return f"{self.email} ({'verificado' if self.verificado else 'pendente'})"
