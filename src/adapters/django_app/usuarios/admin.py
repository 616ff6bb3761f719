"""
Django Admin para o domínio de Usuários.

Senhas e códigos de verificação não são exibidos.
"""

from django.contrib import admin

from .models import ConviteModel, EmailVerificationModel, UsuarioModel


@admin.register(UsuarioModel)
class UsuarioAdmin(admin.ModelAdmin):
    """Admin para usuários."""

    list_display = ['nome', 'email', 'tipo', 'status', 'ativo', 'comarca', 'ultimo_login']
    list_filter = ['tipo', 'status', 'ativo', 'comarca']
    search_fields = ['nome', 'email', 'departamento', 'cargo']
    exclude = ['senha_hash']
    readonly_fields = [
        'id',
        'tentativas_login_falhadas',
        'bloqueado_ate',
        'ultimo_login',
        'criado_em',
        'atualizado_em',
    ]
    ordering = ['nome']


@admin.register(ConviteModel)
class ConviteAdmin(admin.ModelAdmin):
    """Admin para convites."""

    list_display = ['email', 'tipo_usuario', 'status', 'criado_em', 'expira_em', 'ativado_em']
    list_filter = ['status', 'tipo_usuario']
    search_fields = ['email', 'token']
    readonly_fields = ['id', 'token', 'criado_por_id', 'usuario_id', 'ip_criacao', 'ip_ativacao']
    date_hierarchy = 'criado_em'


@admin.register(EmailVerificationModel)
class EmailVerificationAdmin(admin.ModelAdmin):
    """Admin para verificações de email (somente leitura)."""

    list_display = ['email', 'verificado', 'tentativas', 'max_tentativas', 'criado_em', 'expira_em']
    list_filter = ['verificado']
    search_fields = ['email']
    exclude = ['codigo']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
