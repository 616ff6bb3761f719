"""
URL patterns para o domínio de Custodiados.

Montado em /api/custodiados/ (ver src/config/urls.py).
"""

from django.urls import path

from . import api_views

app_name = 'custodiados'

urlpatterns = [
    # Listagem e cadastro
    path('', api_views.CustodiadoAPIListView.as_view(), name='list'),

    # Rotas fixas (antes do <pk> para não conflitar)
    path('buscar/', api_views.CustodiadoAPIBuscarView.as_view(), name='buscar'),
    path('agenda/', api_views.CustodiadoAPIAgendaView.as_view(), name='agenda'),
    path('resumo/', api_views.CustodiadoAPIResumoView.as_view(), name='resumo'),
    path('verificar-status/', api_views.CustodiadoAPIVerificarStatusView.as_view(), name='verificar_status'),

    # Endereços
    path('enderecos/mudancas/', api_views.EnderecoAPIMudancasView.as_view(), name='enderecos_mudancas'),
    path('enderecos/localidade/', api_views.EnderecoAPILocalidadeView.as_view(), name='enderecos_localidade'),
    path('enderecos/estatisticas/', api_views.EnderecoAPIEstatisticasView.as_view(), name='enderecos_estatisticas'),

    # Custodiado específico
    path('<str:pk>/', api_views.CustodiadoAPIDetailView.as_view(), name='detail'),
    path('<str:pk>/arquivar/', api_views.CustodiadoAPIArquivarView.as_view(), name='arquivar'),
    path('<str:pk>/reativar/', api_views.CustodiadoAPIReativarView.as_view(), name='reativar'),
    path('<str:pk>/enderecos/', api_views.EnderecoAPIHistoricoView.as_view(), name='enderecos'),
]
