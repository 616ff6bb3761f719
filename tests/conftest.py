"""
Configurações globais do Pytest para o ACLP.

Este arquivo é carregado automaticamente pelo pytest e:
- Configura o Django (SQLite em memória) antes da coleta
- Fornece fixtures compartilhadas
"""

import pytest
from pathlib import Path


def pytest_configure(config):
    """Configura Django antes dos testes."""
    import django
    from django.conf import settings

    if not settings.configured:
        settings.configure(
            DEBUG=True,
            SECRET_KEY='test-secret-key',
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.admin',
                'django.contrib.auth',
                'django.contrib.contenttypes',
                'django.contrib.sessions',
                'django.contrib.messages',
                'src.adapters.django_app.eventos',
                'src.adapters.django_app.custodiados',
                'src.adapters.django_app.comparecimentos',
                'src.adapters.django_app.usuarios',
            ],
            MIDDLEWARE=[
                'django.contrib.sessions.middleware.SessionMiddleware',
                'django.middleware.common.CommonMiddleware',
                'django.contrib.auth.middleware.AuthenticationMiddleware',
                'django.contrib.messages.middleware.MessageMiddleware',
            ],
            TEMPLATES=[{
                'BACKEND': 'django.template.backends.django.DjangoTemplates',
                'DIRS': [],
                'APP_DIRS': True,
                'OPTIONS': {
                    'context_processors': [
                        'django.template.context_processors.request',
                        'django.contrib.auth.context_processors.auth',
                        'django.contrib.messages.context_processors.messages',
                    ],
                },
            }],
            ROOT_URLCONF='src.config.urls',
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            USE_TZ=False,
            TIME_ZONE='America/Sao_Paulo',
            CACHES={
                'default': {
                    'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
                }
            },
            PASSWORD_HASHERS=['django.contrib.auth.hashers.MD5PasswordHasher'],
            EMAIL_BACKEND='django.core.mail.backends.locmem.EmailBackend',
            DEFAULT_FROM_EMAIL='ACLP - TJBA <noreply@tjba.jus.br>',
            ACLP_EMAIL_ENABLED=True,
            ACLP_FRONTEND_URL='http://aclp.test',
            ACLP_CONVITE_VALIDADE_DIAS=7,
            ACLP_VERIFICACAO_VALIDADE_MINUTOS=10,
            ACLP_VERIFICACAO_MAX_TENTATIVAS=5,
            ACLP_DOMINIO_INSTITUCIONAL='tjba.jus.br',
            EVENT_PUBLISHER_MODE='memory',
        )
        django.setup()

    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def reset_singletons():
    """
    Reset do container global entre testes.

    Garante que cada teste inicia com repositórios e publisher limpos.
    """
    from src.config.container import reset_container

    reset_container()
    yield
    reset_container()
