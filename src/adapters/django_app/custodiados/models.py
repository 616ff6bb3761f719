"""
Django Models para o domínio de Custodiados.

Estes models são ADAPTERS - implementam a persistência para as
entidades definidas em src/core/custodiados/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Status e próximo comparecimento são calculados pelas Entities
- Models são mapeados para/de Entities via Mappers

Tabelas:
- custodiados: Pessoas em liberdade provisória
- historico_enderecos: Histórico temporal de endereços
"""

from django.db import models


class SituacaoChoices(models.TextChoices):
    """Espelha SituacaoCustodiado do Core."""
    ATIVO = 'Ativo', 'Ativo'
    ARQUIVADO = 'Arquivado', 'Arquivado'


class StatusComparecimentoChoices(models.TextChoices):
    """Espelha StatusComparecimento do Core."""
    EM_CONFORMIDADE = 'Em Conformidade', 'Em Conformidade'
    INADIMPLENTE = 'Inadimplente', 'Inadimplente'


class CustodiadoModel(models.Model):
    """
    Model Django para persistência de Custodiados.

    CPF e RG não são únicos no banco: a unicidade vale apenas entre
    custodiados ativos e é verificada no caso de uso.
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do custodiado"
    )

    # Dados pessoais
    nome = models.CharField(
        max_length=150,
        db_index=True,
        help_text="Nome completo"
    )

    cpf = models.CharField(
        max_length=14,
        null=True,
        blank=True,
        db_index=True,
        help_text="CPF formatado (000.000.000-00)"
    )

    rg = models.CharField(
        max_length=20,
        null=True,
        blank=True,
        db_index=True,
        help_text="RG"
    )

    contato = models.CharField(
        max_length=20,
        help_text="Telefone com DDD"
    )

    # Dados processuais
    processo = models.CharField(
        max_length=25,
        db_index=True,
        help_text="Número do processo no padrão CNJ"
    )

    vara = models.CharField(
        max_length=100,
        help_text="Vara responsável"
    )

    comarca = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Comarca do processo"
    )

    data_decisao = models.DateField(
        help_text="Data da decisão judicial"
    )

    # Comparecimentos
    periodicidade = models.PositiveIntegerField(
        default=30,
        help_text="Intervalo em dias entre comparecimentos"
    )

    data_comparecimento_inicial = models.DateField(
        help_text="Data do primeiro comparecimento"
    )

    status = models.CharField(
        max_length=20,
        choices=StatusComparecimentoChoices.choices,
        default=StatusComparecimentoChoices.EM_CONFORMIDADE,
        db_index=True,
        help_text="Status de cumprimento"
    )

    situacao = models.CharField(
        max_length=20,
        choices=SituacaoChoices.choices,
        default=SituacaoChoices.ATIVO,
        db_index=True,
        help_text="Ativo ou arquivado"
    )

    ultimo_comparecimento = models.DateField(
        null=True,
        blank=True,
        help_text="Data do último comparecimento"
    )

    proximo_comparecimento = models.DateField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Data prevista para o próximo comparecimento"
    )

    observacoes = models.TextField(
        null=True,
        blank=True,
        help_text="Observações livres"
    )

    # Timestamps (controlados pela Entity)
    criado_em = models.DateTimeField(
        db_index=True,
        help_text="Data/hora de cadastro"
    )

    atualizado_em = models.DateTimeField(
        help_text="Data/hora da última atualização"
    )

    class Meta:
        db_table = 'custodiados'
        verbose_name = 'Custodiado'
        verbose_name_plural = 'Custodiados'
        ordering = ['nome']
        indexes = [
            models.Index(fields=['situacao', 'status'], name='idx_custodiado_sit_status'),
            models.Index(fields=['situacao', 'proximo_comparecimento'], name='idx_custodiado_sit_proximo'),
        ]

    def __str__(self):
        return f"{self.nome} ({self.processo})"

    def __repr__(self):
        return f"<CustodiadoModel id={self.id[:8]} status={self.status}>"


class HistoricoEnderecoModel(models.Model):
    """
    Endereços do custodiado ao longo do tempo.

    Apenas um registro ativo por custodiado (mantido pelos casos de uso).
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do endereço"
    )

    custodiado = models.ForeignKey(
        CustodiadoModel,
        on_delete=models.CASCADE,
        related_name='enderecos',
        help_text="Custodiado dono do endereço"
    )

    cep = models.CharField(max_length=9, help_text="CEP (00000-000)")
    logradouro = models.CharField(max_length=200)
    numero = models.CharField(max_length=20, null=True, blank=True)
    complemento = models.CharField(max_length=100, null=True, blank=True)
    bairro = models.CharField(max_length=100)
    cidade = models.CharField(max_length=100, db_index=True)
    estado = models.CharField(max_length=2, db_index=True, help_text="Sigla da UF")

    data_inicio = models.DateField(db_index=True, help_text="Início da residência")
    data_fim = models.DateField(null=True, blank=True, help_text="Fim da residência")
    ativo = models.BooleanField(default=True, db_index=True)

    motivo_alteracao = models.CharField(max_length=500, null=True, blank=True)
    validado_por = models.CharField(max_length=100, null=True, blank=True)

    # Comparecimento em que a mudança foi informada (outro app, sem FK)
    historico_comparecimento_id = models.CharField(
        max_length=36,
        null=True,
        blank=True,
        db_index=True,
        help_text="Comparecimento que registrou a mudança"
    )

    criado_em = models.DateTimeField()
    atualizado_em = models.DateTimeField()

    class Meta:
        db_table = 'historico_enderecos'
        verbose_name = 'Endereço'
        verbose_name_plural = 'Histórico de Endereços'
        ordering = ['-data_inicio', '-criado_em']
        indexes = [
            models.Index(fields=['custodiado', 'ativo'], name='idx_endereco_custodiado_ativo'),
            models.Index(fields=['data_inicio', 'data_fim'], name='idx_endereco_periodo'),
        ]

    def __str__(self):
        return f"{self.logradouro}, {self.cidade}/{self.estado}"
