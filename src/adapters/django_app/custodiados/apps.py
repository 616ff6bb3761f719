"""
Configuração do Django App para Custodiados.
"""

from django.apps import AppConfig


class CustodiadosConfig(AppConfig):
    """Configuração do app Custodiados."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.custodiados'
    label = 'custodiados'
    verbose_name = 'Custodiados'
