"""
Django Admin para o domínio de Comparecimentos.
"""

from django.contrib import admin

from .models import HistoricoComparecimentoModel


@admin.register(HistoricoComparecimentoModel)
class HistoricoComparecimentoAdmin(admin.ModelAdmin):
    """Admin para comparecimentos (somente consulta)."""

    list_display = [
        'custodiado',
        'data_comparecimento',
        'hora_comparecimento',
        'tipo_validacao',
        'validado_por',
        'mudanca_endereco',
    ]

    list_filter = [
        'tipo_validacao',
        'mudanca_endereco',
        'data_comparecimento',
    ]

    search_fields = [
        'custodiado__nome',
        'custodiado__processo',
        'validado_por',
    ]

    readonly_fields = [
        'id',
        'custodiado',
        'data_comparecimento',
        'hora_comparecimento',
        'tipo_validacao',
        'validado_por',
        'mudanca_endereco',
        'motivo_mudanca_endereco',
        'enderecos_alterados',
        'criado_em',
        'atualizado_em',
    ]

    date_hierarchy = 'data_comparecimento'

    def has_add_permission(self, request):
        return False
