"""
URL patterns para o domínio de Comparecimentos.

Montado em /api/comparecimentos/ (ver src/config/urls.py).
"""

from django.urls import path

from . import api_views

app_name = 'comparecimentos'

urlpatterns = [
    path('', api_views.ComparecimentoAPIListView.as_view(), name='list'),

    # Rotas fixas (antes do <pk> para não conflitar)
    path('hoje/', api_views.ComparecimentoAPIHojeView.as_view(), name='hoje'),
    path('estatisticas/', api_views.ComparecimentoAPIEstatisticasView.as_view(), name='estatisticas'),
    path('resumo/', api_views.ResumoSistemaAPIView.as_view(), name='resumo'),
    path('migrar/', api_views.MigrarCadastrosIniciaisAPIView.as_view(), name='migrar'),
    path(
        'custodiado/<str:custodiado_id>/',
        api_views.ComparecimentoAPIHistoricoView.as_view(),
        name='historico',
    ),

    path('<str:pk>/observacoes/', api_views.ComparecimentoAPIObservacoesView.as_view(), name='observacoes'),
]
