"""
Configuração do Django App para Comparecimentos.
"""

from django.apps import AppConfig


class ComparecimentosConfig(AppConfig):
    """Configuração do app Comparecimentos."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.comparecimentos'
    label = 'comparecimentos'
    verbose_name = 'Comparecimentos'
