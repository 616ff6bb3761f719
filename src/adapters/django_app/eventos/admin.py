"""
Django Admin do Event Store (somente leitura).
"""

from django.contrib import admin

from .models import DomainEventModel


@admin.register(DomainEventModel)
class DomainEventAdmin(admin.ModelAdmin):
    """Admin para eventos de domínio."""

    list_display = [
        'event_id_curto',
        'event_type',
        'aggregate_type',
        'aggregate_id_curto',
        'sequence',
        'occurred_at',
        'user_id',
    ]

    list_filter = [
        'event_type',
        'aggregate_type',
        'occurred_at',
    ]

    search_fields = [
        'event_id',
        'aggregate_id',
        'event_type',
        'user_id',
        'correlation_id',
    ]

    readonly_fields = [
        'event_id',
        'event_type',
        'aggregate_type',
        'aggregate_id',
        'event_data',
        'version',
        'sequence',
        'occurred_at',
        'recorded_at',
        'correlation_id',
        'causation_id',
        'user_id',
    ]

    def has_add_permission(self, request):
        return False

    def event_id_curto(self, obj):
        return obj.event_id[:8] + '...'
    event_id_curto.short_description = 'Event ID'

    def aggregate_id_curto(self, obj):
        return obj.aggregate_id[:8] + '...'
    aggregate_id_curto.short_description = 'Aggregate'
