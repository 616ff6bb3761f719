#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings
2. Cria banco de dados SQLite
3. Executa migrations
4. Cria custodiados de exemplo (opcional)

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
"""

import os
import sys
import argparse
from datetime import date, timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def setup_django():
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

    # Forçar SQLite para desenvolvimento rápido
    os.environ['DATABASE_URL'] = 'sqlite:///db.sqlite3'
    os.environ.setdefault('EVENT_PUBLISHER_MODE', 'logging')

    import django
    django.setup()


def run_migrations():
    """Executa migrations."""
    from django.core.management import call_command

    print("📦 Executando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Migrations concluídas!")


SAMPLE_CUSTODIADOS = [
    {
        'nome': 'João Carlos da Silva',
        'cpf': '529.982.247-25',
        'contato': '(71) 99999-1234',
        'processo': '0000001-23.2024.8.05.0001',
        'vara': '1ª Vara Criminal',
        'comarca': 'Salvador',
        'periodicidade': 30,
        'dias_desde_inicial': 10,
        'endereco': ('40010-000', 'Rua Chile', 'Centro', 'Salvador', 'BA', '12'),
    },
    {
        'nome': 'Maria Aparecida Santos',
        'rg': '12.345.678-90',
        'contato': '71 3333-4444',
        'processo': '0000002-45.2024.8.05.0001',
        'vara': '2ª Vara Criminal',
        'comarca': 'Salvador',
        'periodicidade': 15,
        'dias_desde_inicial': 20,
        'endereco': ('41820-020', 'Avenida Tancredo Neves', 'Caminho das Árvores', 'Salvador', 'BA', '1500'),
    },
    {
        'nome': 'Pedro Henrique Oliveira',
        'cpf': '111.444.777-35',
        'contato': '(75) 98888-7777',
        'processo': '0000003-67.2023.8.05.0080',
        'vara': 'Vara Criminal',
        'comarca': 'Feira de Santana',
        'periodicidade': 60,
        'dias_desde_inicial': 90,
        'endereco': ('44001-000', 'Rua Conselheiro Franco', 'Centro', 'Feira de Santana', 'BA', None),
    },
]


def create_sample_data():
    """Cria custodiados de exemplo (um deles já inadimplente)."""
    from src.config.container import get_container
    from src.core.custodiados.dtos import CadastrarCustodiadoInputDTO, EnderecoInputDTO

    service = get_container().cadastrar_custodiado_service()
    hoje = date.today()

    print("📝 Criando custodiados de exemplo...")

    for dados in SAMPLE_CUSTODIADOS:
        cep, logradouro, bairro, cidade, estado, numero = dados['endereco']
        inicial = hoje - timedelta(days=dados['dias_desde_inicial'])
        output = service.execute(CadastrarCustodiadoInputDTO(
            nome=dados['nome'],
            cpf=dados.get('cpf'),
            rg=dados.get('rg'),
            contato=dados['contato'],
            processo=dados['processo'],
            vara=dados['vara'],
            comarca=dados['comarca'],
            data_decisao=inicial - timedelta(days=5),
            periodicidade=dados['periodicidade'],
            data_comparecimento_inicial=inicial,
            endereco=EnderecoInputDTO(
                cep=cep,
                logradouro=logradouro,
                bairro=bairro,
                cidade=cidade,
                estado=estado,
                numero=numero,
            ),
            cadastrado_por='quick_setup',
        ))
        print(f"   ✓ {output.nome} - {output.status}")

    print(f"✅ {len(SAMPLE_CUSTODIADOS)} custodiados criados!")


def check_connection():
    """Verifica conexão com o banco."""
    from src.adapters.django_app.shared.database import check_database_connection

    print("🔍 Verificando conexão com o banco...")

    resultado = check_database_connection()
    if resultado['healthy']:
        print("✅ Conexão OK!")
        return True

    print(f"❌ Erro de conexão: {resultado.get('error')}")
    return False


def show_info():
    """Mostra informações do setup."""
    from django.conf import settings

    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Event Publisher: {settings.EVENT_PUBLISHER_MODE}")
    print(f"  Debug Mode: {settings.DEBUG}")
    print("=" * 60)
    print("\n🚀 Próximos passos:")
    print("   1. python manage.py runserver")
    print("   2. Crie o primeiro administrador: POST /api/usuarios/setup/")
    print("   3. Acesse: http://localhost:8000/api/custodiados/")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Criar custodiados de exemplo'
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("🔧 ACLP - Quick Setup")
    print("=" * 60 + "\n")

    setup_django()

    if args.check_only:
        check_connection()
        return

    if not check_connection():
        print("\n⚠️  Certifique-se de que o banco de dados está rodando.")
        print("   Para usar SQLite, defina: DATABASE_URL=sqlite:///db.sqlite3")
        return

    run_migrations()

    if args.with_sample_data:
        create_sample_data()

    show_info()


if __name__ == '__main__':
    main()
