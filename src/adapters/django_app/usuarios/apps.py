"""
Configuração do Django App para Usuários.
"""

from django.apps import AppConfig


class UsuariosConfig(AppConfig):
    """Configuração do app Usuários."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.usuarios'
    label = 'usuarios'
    verbose_name = 'Usuários e Convites'
