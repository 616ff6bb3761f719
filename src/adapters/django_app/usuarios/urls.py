"""
URL patterns para o domínio de Usuários.

Montado em /api/usuarios/ (ver src/config/urls.py).
"""

from django.urls import path

from . import api_views

app_name = 'usuarios'

urlpatterns = [
    # Setup e autenticação
    path('setup/', api_views.SetupAPIView.as_view(), name='setup'),
    path('auth/login/', api_views.LoginAPIView.as_view(), name='login'),
    path('auth/logout/', api_views.LogoutAPIView.as_view(), name='logout'),
    path('auth/me/', api_views.MeAPIView.as_view(), name='me'),

    # Convites (rotas fixas antes do <pk>)
    path('convites/', api_views.ConviteAPIListView.as_view(), name='convites'),
    path('convites/estatisticas/', api_views.ConviteAPIEstatisticasView.as_view(), name='convites_estatisticas'),
    path('convites/ativar/', api_views.ConviteAPIAtivarView.as_view(), name='convites_ativar'),
    path('convites/validar/<str:token>/', api_views.ConviteAPIValidarView.as_view(), name='convites_validar'),
    path('convites/<str:pk>/', api_views.ConviteAPIDetailView.as_view(), name='convite_detail'),
    path('convites/<str:pk>/reenviar/', api_views.ConviteAPIReenviarView.as_view(), name='convite_reenviar'),

    # Verificação de email
    path('verificacao/solicitar/', api_views.SolicitarCodigoAPIView.as_view(), name='verificacao_solicitar'),
    path('verificacao/verificar/', api_views.VerificarCodigoAPIView.as_view(), name='verificacao_verificar'),
    path('verificacao/status/', api_views.StatusVerificacaoAPIView.as_view(), name='verificacao_status'),

    # Perfil
    path('perfil/', api_views.PerfilAPIView.as_view(), name='perfil'),
    path('perfil/senha/', api_views.AlterarSenhaAPIView.as_view(), name='perfil_senha'),

    # Usuários
    path('', api_views.UsuarioAPIListView.as_view(), name='list'),
    path('<str:pk>/', api_views.UsuarioAPIDetailView.as_view(), name='detail'),
    path('<str:pk>/desativar/', api_views.UsuarioAPIDesativarView.as_view(), name='desativar'),
]
