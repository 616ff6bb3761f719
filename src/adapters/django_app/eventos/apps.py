"""
Configuração do Django App do Event Store.
"""

from django.apps import AppConfig


class EventosConfig(AppConfig):
    """Configuração do app Eventos."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.eventos'
    label = 'eventos'
    verbose_name = 'Eventos de Domínio'
