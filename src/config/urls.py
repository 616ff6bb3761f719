"""
URL Configuration do ACLP.

Estrutura:
- /admin/ - Django Admin
- /api/custodiados/ - Custodiados e histórico de endereços
- /api/comparecimentos/ - Registro e consulta de comparecimentos
- /api/usuarios/ - Setup, autenticação, convites e usuários
- /health/ - Health check (banco e cache)
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include

from src.adapters.django_app.shared.database import check_cache, check_database_connection


def health(request):
    database = check_database_connection()
    cache = check_cache()
    healthy = database['healthy'] and cache['healthy']
    return JsonResponse(
        {'status': 'ok' if healthy else 'degraded', 'database': database, 'cache': cache},
        status=200 if healthy else 503,
    )


urlpatterns = [
    path('admin/', admin.site.urls),

    path('api/custodiados/', include('src.adapters.django_app.custodiados.urls')),
    path('api/comparecimentos/', include('src.adapters.django_app.comparecimentos.urls')),
    path('api/usuarios/', include('src.adapters.django_app.usuarios.urls')),

    path('health/', health, name='health'),
]
