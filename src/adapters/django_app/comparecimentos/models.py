"""
Django Models para o domínio de Comparecimentos.

Tabela:
- historico_comparecimentos: Cada apresentação do custodiado
  (presencial, online ou o registro de cadastro inicial)
"""

from django.db import models

from ..custodiados.models import CustodiadoModel


class TipoValidacaoChoices(models.TextChoices):
    """Espelha TipoValidacao do Core."""
    PRESENCIAL = 'Presencial', 'Presencial'
    ONLINE = 'Online/Virtual', 'Online/Virtual'
    CADASTRO_INICIAL = 'Cadastro Inicial', 'Cadastro Inicial'


class HistoricoComparecimentoModel(models.Model):
    """Model Django para persistência de comparecimentos."""

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do comparecimento"
    )

    custodiado = models.ForeignKey(
        CustodiadoModel,
        on_delete=models.PROTECT,
        related_name='comparecimentos',
        help_text="Custodiado que compareceu"
    )

    data_comparecimento = models.DateField(
        db_index=True,
        help_text="Data do comparecimento"
    )

    hora_comparecimento = models.TimeField(
        null=True,
        blank=True,
        help_text="Hora do comparecimento"
    )

    tipo_validacao = models.CharField(
        max_length=20,
        choices=TipoValidacaoChoices.choices,
        default=TipoValidacaoChoices.PRESENCIAL,
        db_index=True,
        help_text="Forma de validação"
    )

    validado_por = models.CharField(
        max_length=100,
        help_text="Servidor que validou"
    )

    observacoes = models.TextField(null=True, blank=True)
    anexos = models.TextField(null=True, blank=True, help_text="Referências de anexos")

    mudanca_endereco = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Se houve mudança de endereço"
    )

    motivo_mudanca_endereco = models.CharField(max_length=500, null=True, blank=True)

    enderecos_alterados = models.JSONField(
        default=list,
        blank=True,
        help_text="IDs dos endereços criados neste comparecimento"
    )

    criado_em = models.DateTimeField(db_index=True)
    atualizado_em = models.DateTimeField()

    class Meta:
        db_table = 'historico_comparecimentos'
        verbose_name = 'Comparecimento'
        verbose_name_plural = 'Histórico de Comparecimentos'
        ordering = ['-data_comparecimento', '-hora_comparecimento', '-criado_em']
        indexes = [
            models.Index(fields=['custodiado', 'data_comparecimento'], name='idx_comp_custodiado_data'),
            models.Index(fields=['tipo_validacao', 'data_comparecimento'], name='idx_comp_tipo_data'),
        ]

    def __str__(self):
        return f"{self.data_comparecimento} - {self.tipo_validacao}"
