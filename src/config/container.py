"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Singleton: Uma instância para toda app (repositories, publisher)
- Factory: Nova instância por chamada (services, UoW)
- Configuration: valores vindos do settings do Django

Os imports das implementações são feitos sob demanda para que o
container possa ser importado antes do ``django.setup()``.
"""

from importlib import import_module
from typing import Any, Callable, Optional

from dependency_injector import containers, providers

CUSTODIADOS = 'src.core.custodiados.use_cases'
COMPARECIMENTOS = 'src.core.comparecimentos.use_cases'
USUARIOS = 'src.core.usuarios.use_cases'


def _lazy(module: str, name: str) -> Callable[..., Any]:
    """Callable que importa ``module.name`` apenas ao ser chamado."""

    def factory(*args, **kwargs):
        return getattr(import_module(module), name)(*args, **kwargs)

    factory.__name__ = name
    return factory


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: settings do ACLP
    - Infrastructure: Event Store, Event Publisher, hasher
    - Repositories: Persistência
    - Unit of Work: Transações
    - Services: Use Cases

    Example:
        from src.config.container import get_container

        service = get_container().registrar_comparecimento_service()
        result = service.execute(input_dto)
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    config = providers.Configuration(default={
        'event_publisher_mode': 'logging',
        'frontend_url': 'http://localhost:3000',
        'convite_validade_dias': 7,
        'verificacao_validade_minutos': 10,
        'verificacao_max_tentativas': 5,
        'dominio_institucional': 'tjba.jus.br',
    })

    # =========================================================================
    # Infrastructure
    # =========================================================================

    event_publisher = providers.Singleton(
        _lazy('src.adapters.django_app.events.publishers', 'get_event_publisher'),
        mode=config.event_publisher_mode,
    )

    event_store = providers.Singleton(
        _lazy('src.adapters.django_app.eventos.repositories', 'DjangoEventStore'),
    )

    password_hasher = providers.Singleton(
        _lazy('src.adapters.django_app.usuarios.hashers', 'DjangoPasswordHasher'),
    )

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    custodiado_repository = providers.Singleton(
        _lazy('src.adapters.django_app.custodiados.repositories', 'DjangoCustodiadoRepository'),
    )

    endereco_repository = providers.Singleton(
        _lazy('src.adapters.django_app.custodiados.repositories', 'DjangoHistoricoEnderecoRepository'),
    )

    comparecimento_repository = providers.Singleton(
        _lazy('src.adapters.django_app.comparecimentos.repositories', 'DjangoComparecimentoRepository'),
    )

    usuario_repository = providers.Singleton(
        _lazy('src.adapters.django_app.usuarios.repositories', 'DjangoUsuarioRepository'),
    )

    convite_repository = providers.Singleton(
        _lazy('src.adapters.django_app.usuarios.repositories', 'DjangoConviteRepository'),
    )

    verificacao_repository = providers.Singleton(
        _lazy('src.adapters.django_app.usuarios.repositories', 'DjangoEmailVerificationRepository'),
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        _lazy('src.adapters.django_app.shared.unit_of_work', 'DjangoUnitOfWork'),
        event_publisher=event_publisher,
        event_store=event_store,
    )

    # =========================================================================
    # Services - Custodiados
    # =========================================================================

    cadastrar_custodiado_service = providers.Factory(
        _lazy(CUSTODIADOS, 'CadastrarCustodiadoService'),
        custodiado_repo=custodiado_repository,
        endereco_repo=endereco_repository,
        comparecimento_repo=comparecimento_repository,
        uow=unit_of_work,
    )

    atualizar_custodiado_service = providers.Factory(
        _lazy(CUSTODIADOS, 'AtualizarCustodiadoService'),
        custodiado_repo=custodiado_repository,
        endereco_repo=endereco_repository,
        uow=unit_of_work,
    )

    arquivar_custodiado_service = providers.Factory(
        _lazy(CUSTODIADOS, 'ArquivarCustodiadoService'),
        custodiado_repo=custodiado_repository,
        uow=unit_of_work,
    )

    reativar_custodiado_service = providers.Factory(
        _lazy(CUSTODIADOS, 'ReativarCustodiadoService'),
        custodiado_repo=custodiado_repository,
        uow=unit_of_work,
    )

    # Leitura (sem UoW)
    obter_custodiado_service = providers.Factory(
        _lazy(CUSTODIADOS, 'ObterCustodiadoService'),
        custodiado_repo=custodiado_repository,
        endereco_repo=endereco_repository,
    )

    listar_custodiados_service = providers.Factory(
        _lazy(CUSTODIADOS, 'ListarCustodiadosService'),
        custodiado_repo=custodiado_repository,
    )

    buscar_custodiados_service = providers.Factory(
        _lazy(CUSTODIADOS, 'BuscarCustodiadosService'),
        custodiado_repo=custodiado_repository,
    )

    agenda_comparecimentos_service = providers.Factory(
        _lazy(CUSTODIADOS, 'AgendaComparecimentosService'),
        custodiado_repo=custodiado_repository,
    )

    resumo_status_service = providers.Factory(
        _lazy(CUSTODIADOS, 'ResumoStatusService'),
        custodiado_repo=custodiado_repository,
    )

    consultar_enderecos_service = providers.Factory(
        _lazy(CUSTODIADOS, 'ConsultarEnderecosService'),
        endereco_repo=endereco_repository,
        custodiado_repo=custodiado_repository,
    )

    atualizar_status_custodiados_service = providers.Factory(
        _lazy(CUSTODIADOS, 'AtualizarStatusCustodiadosService'),
        custodiado_repo=custodiado_repository,
        uow=unit_of_work,
    )

    # =========================================================================
    # Services - Comparecimentos
    # =========================================================================

    registrar_comparecimento_service = providers.Factory(
        _lazy(COMPARECIMENTOS, 'RegistrarComparecimentoService'),
        comparecimento_repo=comparecimento_repository,
        custodiado_repo=custodiado_repository,
        endereco_repo=endereco_repository,
        uow=unit_of_work,
    )

    listar_comparecimentos_service = providers.Factory(
        _lazy(COMPARECIMENTOS, 'ListarComparecimentosService'),
        comparecimento_repo=comparecimento_repository,
    )

    historico_comparecimentos_service = providers.Factory(
        _lazy(COMPARECIMENTOS, 'HistoricoComparecimentosService'),
        comparecimento_repo=comparecimento_repository,
        custodiado_repo=custodiado_repository,
    )

    atualizar_observacoes_service = providers.Factory(
        _lazy(COMPARECIMENTOS, 'AtualizarObservacoesService'),
        comparecimento_repo=comparecimento_repository,
        uow=unit_of_work,
    )

    estatisticas_comparecimentos_service = providers.Factory(
        _lazy(COMPARECIMENTOS, 'EstatisticasComparecimentosService'),
        comparecimento_repo=comparecimento_repository,
    )

    resumo_sistema_service = providers.Factory(
        _lazy(COMPARECIMENTOS, 'ResumoSistemaService'),
        custodiado_repo=custodiado_repository,
        comparecimento_repo=comparecimento_repository,
    )

    migrar_cadastros_iniciais_service = providers.Factory(
        _lazy(COMPARECIMENTOS, 'MigrarCadastrosIniciaisService'),
        custodiado_repo=custodiado_repository,
        comparecimento_repo=comparecimento_repository,
        uow=unit_of_work,
    )

    # =========================================================================
    # Services - Setup e Autenticação
    # =========================================================================

    status_setup_service = providers.Factory(
        _lazy(USUARIOS, 'StatusSetupService'),
        usuario_repo=usuario_repository,
    )

    criar_primeiro_admin_service = providers.Factory(
        _lazy(USUARIOS, 'CriarPrimeiroAdminService'),
        usuario_repo=usuario_repository,
        password_hasher=password_hasher,
        uow=unit_of_work,
        dominio_institucional=config.dominio_institucional,
    )

    autenticar_usuario_service = providers.Factory(
        _lazy(USUARIOS, 'AutenticarUsuarioService'),
        usuario_repo=usuario_repository,
        password_hasher=password_hasher,
        uow=unit_of_work,
    )

    # =========================================================================
    # Services - Convites
    # =========================================================================

    criar_convite_service = providers.Factory(
        _lazy(USUARIOS, 'CriarConviteService'),
        usuario_repo=usuario_repository,
        convite_repo=convite_repository,
        uow=unit_of_work,
        frontend_url=config.frontend_url,
        validade_dias=config.convite_validade_dias,
    )

    validar_convite_service = providers.Factory(
        _lazy(USUARIOS, 'ValidarConviteService'),
        convite_repo=convite_repository,
    )

    ativar_convite_service = providers.Factory(
        _lazy(USUARIOS, 'AtivarConviteService'),
        convite_repo=convite_repository,
        usuario_repo=usuario_repository,
        password_hasher=password_hasher,
        uow=unit_of_work,
    )

    listar_convites_service = providers.Factory(
        _lazy(USUARIOS, 'ListarConvitesService'),
        convite_repo=convite_repository,
        usuario_repo=usuario_repository,
    )

    obter_convite_service = providers.Factory(
        _lazy(USUARIOS, 'ObterConviteService'),
        convite_repo=convite_repository,
        usuario_repo=usuario_repository,
        frontend_url=config.frontend_url,
    )

    cancelar_convite_service = providers.Factory(
        _lazy(USUARIOS, 'CancelarConviteService'),
        convite_repo=convite_repository,
        usuario_repo=usuario_repository,
        uow=unit_of_work,
    )

    reenviar_convite_service = providers.Factory(
        _lazy(USUARIOS, 'ReenviarConviteService'),
        convite_repo=convite_repository,
        usuario_repo=usuario_repository,
        uow=unit_of_work,
        frontend_url=config.frontend_url,
    )

    estatisticas_convites_service = providers.Factory(
        _lazy(USUARIOS, 'EstatisticasConvitesService'),
        convite_repo=convite_repository,
    )

    expirar_convites_service = providers.Factory(
        _lazy(USUARIOS, 'ExpirarConvitesService'),
        convite_repo=convite_repository,
        uow=unit_of_work,
    )

    # =========================================================================
    # Services - Verificação de Email
    # =========================================================================

    solicitar_codigo_service = providers.Factory(
        _lazy(USUARIOS, 'SolicitarCodigoVerificacaoService'),
        verificacao_repo=verificacao_repository,
        usuario_repo=usuario_repository,
        uow=unit_of_work,
        validade_minutos=config.verificacao_validade_minutos,
        max_tentativas=config.verificacao_max_tentativas,
    )

    verificar_codigo_service = providers.Factory(
        _lazy(USUARIOS, 'VerificarCodigoService'),
        verificacao_repo=verificacao_repository,
        uow=unit_of_work,
    )

    status_verificacao_service = providers.Factory(
        _lazy(USUARIOS, 'ConsultarStatusVerificacaoService'),
        verificacao_repo=verificacao_repository,
    )

    limpar_verificacoes_service = providers.Factory(
        _lazy(USUARIOS, 'LimparVerificacoesExpiradasService'),
        verificacao_repo=verificacao_repository,
        uow=unit_of_work,
    )

    # =========================================================================
    # Services - Usuários
    # =========================================================================

    listar_usuarios_service = providers.Factory(
        _lazy(USUARIOS, 'ListarUsuariosService'),
        usuario_repo=usuario_repository,
    )

    obter_usuario_service = providers.Factory(
        _lazy(USUARIOS, 'ObterUsuarioService'),
        usuario_repo=usuario_repository,
    )

    atualizar_usuario_service = providers.Factory(
        _lazy(USUARIOS, 'AtualizarUsuarioService'),
        usuario_repo=usuario_repository,
        password_hasher=password_hasher,
        uow=unit_of_work,
    )

    atualizar_perfil_service = providers.Factory(
        _lazy(USUARIOS, 'AtualizarPerfilService'),
        usuario_repo=usuario_repository,
        uow=unit_of_work,
    )

    alterar_senha_service = providers.Factory(
        _lazy(USUARIOS, 'AlterarSenhaService'),
        usuario_repo=usuario_repository,
        password_hasher=password_hasher,
        uow=unit_of_work,
    )

    desativar_usuario_service = providers.Factory(
        _lazy(USUARIOS, 'DesativarUsuarioService'),
        usuario_repo=usuario_repository,
        uow=unit_of_work,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def _config_from_settings() -> dict:
    from django.conf import settings

    return {
        'event_publisher_mode': settings.EVENT_PUBLISHER_MODE,
        'frontend_url': settings.ACLP_FRONTEND_URL,
        'convite_validade_dias': settings.ACLP_CONVITE_VALIDADE_DIAS,
        'verificacao_validade_minutos': settings.ACLP_VERIFICACAO_VALIDADE_MINUTOS,
        'verificacao_max_tentativas': settings.ACLP_VERIFICACAO_MAX_TENTATIVAS,
        'dominio_institucional': settings.ACLP_DOMINIO_INSTITUCIONAL,
    }


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir (lazy initialization), configurada a partir
    do settings do Django.
    """
    global _container

    if _container is None:
        _container = Container()
        _container.config.from_dict(_config_from_settings())

    return _container


def reset_container() -> None:
    """
    Reset do container (para testes).

    Permite criar novo container limpo.
    """
    global _container
    _container = None


# =============================================================================
# Testing Container
# =============================================================================

def create_testing_container() -> Container:
    """
    Container para testes com implementações InMemory.

    Mesmos services do container principal, sem banco de dados:
    repositórios em memória, UoW em memória, publisher em memória
    e hasher sem criptografia.

    Example:
        container = create_testing_container()
        service = container.cadastrar_custodiado_service()
        container.event_publisher().published_events
    """
    from src.adapters.django_app.events.publishers import InMemoryEventPublisher
    from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
    from src.core.comparecimentos.ports import InMemoryComparecimentoRepository
    from src.core.custodiados.ports import (
        InMemoryCustodiadoRepository,
        InMemoryHistoricoEnderecoRepository,
    )
    from src.core.usuarios.ports import (
        InMemoryConviteRepository,
        InMemoryEmailVerificationRepository,
        InMemoryUsuarioRepository,
        PlainPasswordHasher,
    )

    container = Container()

    container.event_publisher.override(providers.Singleton(InMemoryEventPublisher))
    container.password_hasher.override(providers.Singleton(PlainPasswordHasher))

    container.custodiado_repository.override(providers.Singleton(InMemoryCustodiadoRepository))
    container.endereco_repository.override(providers.Singleton(InMemoryHistoricoEnderecoRepository))
    container.comparecimento_repository.override(providers.Singleton(InMemoryComparecimentoRepository))
    container.usuario_repository.override(providers.Singleton(InMemoryUsuarioRepository))
    container.convite_repository.override(providers.Singleton(InMemoryConviteRepository))
    container.verificacao_repository.override(providers.Singleton(InMemoryEmailVerificationRepository))

    container.unit_of_work.override(
        providers.Factory(InMemoryUnitOfWork, event_publisher=container.event_publisher)
    )

    return container
