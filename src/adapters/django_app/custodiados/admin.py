"""
Django Admin para o domínio de Custodiados.

Consulta e conferência de cadastros. Alterações de negócio
(arquivar, mudar endereço) devem passar pela API.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import CustodiadoModel, HistoricoEnderecoModel


class HistoricoEnderecoInline(admin.TabularInline):
    model = HistoricoEnderecoModel
    extra = 0
    fields = ['logradouro', 'numero', 'bairro', 'cidade', 'estado', 'data_inicio', 'data_fim', 'ativo']
    readonly_fields = fields
    can_delete = False
    show_change_link = True


@admin.register(CustodiadoModel)
class CustodiadoAdmin(admin.ModelAdmin):
    """Admin para CustodiadoModel."""

    list_display = [
        'nome',
        'processo',
        'comarca',
        'status_badge',
        'situacao',
        'periodicidade',
        'ultimo_comparecimento',
        'proximo_comparecimento',
    ]

    list_filter = [
        'situacao',
        'status',
        'comarca',
        'periodicidade',
    ]

    search_fields = [
        'id',
        'nome',
        'cpf',
        'rg',
        'processo',
    ]

    readonly_fields = [
        'id',
        'status',
        'ultimo_comparecimento',
        'proximo_comparecimento',
        'criado_em',
        'atualizado_em',
    ]

    fieldsets = [
        ('Identificação', {
            'fields': ['id', 'nome', 'cpf', 'rg', 'contato'],
        }),
        ('Processo', {
            'fields': ['processo', 'vara', 'comarca', 'data_decisao'],
        }),
        ('Comparecimentos', {
            'fields': [
                'periodicidade', 'data_comparecimento_inicial', 'status', 'situacao',
                'ultimo_comparecimento', 'proximo_comparecimento',
            ],
        }),
        ('Observações', {
            'fields': ['observacoes'],
        }),
        ('Timestamps', {
            'fields': ['criado_em', 'atualizado_em'],
            'classes': ['collapse'],
        }),
    ]

    inlines = [HistoricoEnderecoInline]

    ordering = ['nome']

    date_hierarchy = 'proximo_comparecimento'

    def status_badge(self, obj):
        """Exibe status com badge colorido."""
        color = '#28a745' if obj.status == 'Em Conformidade' else '#dc3545'
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; '
            'border-radius: 3px;">{}</span>',
            color,
            obj.status,
        )
    status_badge.short_description = 'Status'


@admin.register(HistoricoEnderecoModel)
class HistoricoEnderecoAdmin(admin.ModelAdmin):
    """Admin para o histórico de endereços."""

    list_display = ['custodiado', 'logradouro', 'cidade', 'estado', 'data_inicio', 'data_fim', 'ativo']
    list_filter = ['ativo', 'estado']
    search_fields = ['custodiado__nome', 'logradouro', 'bairro', 'cidade', 'cep']
    readonly_fields = ['id', 'criado_em', 'atualizado_em']
    ordering = ['-data_inicio']
