"""
Testes do container de Dependency Injection.
"""

from src.config.container import create_testing_container, get_container, reset_container
from src.core.custodiados.ports import InMemoryCustodiadoRepository
from src.core.usuarios.ports import PlainPasswordHasher
from src.adapters.django_app.events.publishers import InMemoryEventPublisher
from src.adapters.django_app.shared.unit_of_work import DjangoUnitOfWork, InMemoryUnitOfWork
from src.adapters.django_app.usuarios.hashers import DjangoPasswordHasher


class TestGetContainer:

    def test_singleton(self):
        assert get_container() is get_container()

    def test_reset(self):
        anterior = get_container()

        reset_container()

        assert get_container() is not anterior

    def test_configuracao_do_settings(self):
        container = get_container()

        assert container.config.frontend_url() == 'http://aclp.test'
        assert container.config.dominio_institucional() == 'tjba.jus.br'
        assert isinstance(container.event_publisher(), InMemoryEventPublisher)
        assert isinstance(container.password_hasher(), DjangoPasswordHasher)

    def test_unit_of_work_por_chamada(self):
        container = get_container()

        uow = container.unit_of_work()

        assert isinstance(uow, DjangoUnitOfWork)
        assert uow is not container.unit_of_work()

    def test_services_compartilham_publisher(self):
        container = get_container()

        assert container.event_publisher() is container.event_publisher()


class TestTestingContainer:

    def test_implementacoes_em_memoria(self):
        container = create_testing_container()

        assert isinstance(container.custodiado_repository(), InMemoryCustodiadoRepository)
        assert isinstance(container.password_hasher(), PlainPasswordHasher)
        assert isinstance(container.unit_of_work(), InMemoryUnitOfWork)

    def test_repositorios_singleton(self):
        container = create_testing_container()

        assert container.usuario_repository() is container.usuario_repository()

    def test_containers_isolados(self):
        primeiro = create_testing_container()
        segundo = create_testing_container()

        assert primeiro.custodiado_repository() is not segundo.custodiado_repository()

    def test_service_montado(self):
        container = create_testing_container()

        status = container.status_setup_service().execute()

        assert status["setup_requerido"] is True
        assert status["total_usuarios"] == 0
