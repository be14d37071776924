"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Singleton: Uma instância para toda app (repositories, relógio, SLA)
- Factory: Nova instância por chamada (services, UoW)

As classes são importadas apenas quando o provider é chamado pela
primeira vez, para que o container possa ser importado antes de o
Django carregar os apps.
"""

import importlib
from typing import Any, Callable, Optional

from dependency_injector import containers, providers


def _lazy(caminho: str) -> Callable[..., Any]:
    """
    Retorna um construtor que importa a classe sob demanda.

    Example:
        providers.Factory(_lazy('src.core.auditoria.gate.AuditGate'), catalogo=...)
    """
    modulo, nome = caminho.rsplit('.', 1)

    def construir(*args, **kwargs):
        return getattr(importlib.import_module(modulo), nome)(*args, **kwargs)

    construir.__name__ = nome
    return construir


def _sla_de_settings():
    from django.conf import settings
    from src.core.protocolos.sla import SLAClock

    return SLAClock(getattr(settings, 'PROTOCOLO_SLA_HORAS', None))


def _envio_timeout_de_settings():
    from django.conf import settings

    return getattr(settings, 'ATENDIMENTO_ENVIO_TIMEOUT', 120)


def _publisher_de_settings():
    from django.conf import settings
    from src.adapters.django_app.events.publishers import get_event_publisher

    return get_event_publisher(getattr(settings, 'EVENT_PUBLISHER_MODE', 'logging'))


_USE_CASES_PROTOCOLOS = 'src.core.protocolos.use_cases'
_USE_CASES_ATENDIMENTO = 'src.core.atendimento.use_cases'
_PROTOCOLOS = 'src.adapters.django_app.protocolos.repositories'
_ATENDIMENTO = 'src.adapters.django_app.atendimento'


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Infrastructure: Relógio, publisher, SLA
    - Repositories: Persistência (Django ORM e cache)
    - Unit of Work: Transações
    - Services: Use Cases

    Example:
        from src.config.container import get_container

        service = get_container().criar_protocolo_service()
        result = service.execute(input_dto)
    """

    config = providers.Configuration()

    # =========================================================================
    # Infrastructure
    # =========================================================================

    clock = providers.Singleton(_lazy('src.adapters.django_app.shared.clock.DjangoClock'))

    event_publisher = providers.Singleton(_publisher_de_settings)

    sla = providers.Singleton(_sla_de_settings)

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    operador_repository = providers.Singleton(_lazy(f'{_PROTOCOLOS}.DjangoOperadorRepository'))

    protocolo_repository = providers.Singleton(_lazy(f'{_PROTOCOLOS}.DjangoProtocoloRepository'))

    protocolo_evento_repository = providers.Singleton(
        _lazy(f'{_PROTOCOLOS}.DjangoProtocoloEventoRepository')
    )

    pergunta_auditoria_repository = providers.Singleton(
        _lazy(f'{_PROTOCOLOS}.DjangoPerguntaAuditoriaRepository')
    )

    tarefa_repository = providers.Singleton(
        _lazy(f'{_ATENDIMENTO}.repositories.DjangoTarefaRepository')
    )

    registro_chamada_repository = providers.Singleton(
        _lazy(f'{_ATENDIMENTO}.repositories.DjangoRegistroChamadaRepository')
    )

    contato_repository = providers.Singleton(
        _lazy(f'{_ATENDIMENTO}.repositories.DjangoContatoRepository')
    )

    operador_evento_logger = providers.Singleton(
        _lazy(f'{_ATENDIMENTO}.repositories.DjangoOperadorEventoLogger')
    )

    sessao_store = providers.Singleton(_lazy(f'{_ATENDIMENTO}.sessao_store.CacheSessaoStore'))

    audit_gate = providers.Singleton(
        _lazy('src.core.auditoria.gate.AuditGate'),
        catalogo=pergunta_auditoria_repository,
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        _lazy('src.adapters.django_app.shared.unit_of_work.DjangoUnitOfWork'),
        event_publisher=event_publisher,
    )

    # =========================================================================
    # Services / Use Cases (Factory - nova instância por chamada)
    # =========================================================================

    criar_protocolo_service = providers.Factory(
        _lazy(f'{_USE_CASES_PROTOCOLOS}.CriarProtocoloService'),
        protocolo_repo=protocolo_repository,
        evento_repo=protocolo_evento_repository,
        operador_repo=operador_repository,
        sla=sla,
        uow=unit_of_work,
        clock=clock,
    )

    iniciar_protocolo_service = providers.Factory(
        _lazy(f'{_USE_CASES_PROTOCOLOS}.IniciarProtocoloService'),
        protocolo_repo=protocolo_repository,
        evento_repo=protocolo_evento_repository,
        operador_repo=operador_repository,
        uow=unit_of_work,
        clock=clock,
    )

    submeter_resolucao_service = providers.Factory(
        _lazy(f'{_USE_CASES_PROTOCOLOS}.SubmeterResolucaoService'),
        protocolo_repo=protocolo_repository,
        evento_repo=protocolo_evento_repository,
        operador_repo=operador_repository,
        audit_gate=audit_gate,
        uow=unit_of_work,
        clock=clock,
    )

    aprovar_resolucao_service = providers.Factory(
        _lazy(f'{_USE_CASES_PROTOCOLOS}.AprovarResolucaoService'),
        protocolo_repo=protocolo_repository,
        evento_repo=protocolo_evento_repository,
        operador_repo=operador_repository,
        uow=unit_of_work,
        clock=clock,
    )

    rejeitar_resolucao_service = providers.Factory(
        _lazy(f'{_USE_CASES_PROTOCOLOS}.RejeitarResolucaoService'),
        protocolo_repo=protocolo_repository,
        evento_repo=protocolo_evento_repository,
        operador_repo=operador_repository,
        uow=unit_of_work,
        clock=clock,
    )

    aguardar_protocolo_service = providers.Factory(
        _lazy(f'{_USE_CASES_PROTOCOLOS}.AguardarProtocoloService'),
        protocolo_repo=protocolo_repository,
        evento_repo=protocolo_evento_repository,
        operador_repo=operador_repository,
        uow=unit_of_work,
        clock=clock,
    )

    retomar_protocolo_service = providers.Factory(
        _lazy(f'{_USE_CASES_PROTOCOLOS}.RetomarProtocoloService'),
        protocolo_repo=protocolo_repository,
        evento_repo=protocolo_evento_repository,
        operador_repo=operador_repository,
        uow=unit_of_work,
        clock=clock,
    )

    reabrir_protocolo_service = providers.Factory(
        _lazy(f'{_USE_CASES_PROTOCOLOS}.ReabrirProtocoloService'),
        protocolo_repo=protocolo_repository,
        evento_repo=protocolo_evento_repository,
        operador_repo=operador_repository,
        uow=unit_of_work,
        clock=clock,
    )

    adicionar_nota_service = providers.Factory(
        _lazy(f'{_USE_CASES_PROTOCOLOS}.AdicionarNotaService'),
        protocolo_repo=protocolo_repository,
        evento_repo=protocolo_evento_repository,
        operador_repo=operador_repository,
        uow=unit_of_work,
        clock=clock,
    )

    reatribuir_protocolo_service = providers.Factory(
        _lazy(f'{_USE_CASES_PROTOCOLOS}.ReatribuirProtocoloService'),
        protocolo_repo=protocolo_repository,
        evento_repo=protocolo_evento_repository,
        operador_repo=operador_repository,
        uow=unit_of_work,
        clock=clock,
    )

    # Consultas (sem UoW - leitura)
    obter_protocolo_service = providers.Factory(
        _lazy(f'{_USE_CASES_PROTOCOLOS}.ObterProtocoloService'),
        protocolo_repo=protocolo_repository,
        operador_repo=operador_repository,
        clock=clock,
    )

    listar_protocolos_service = providers.Factory(
        _lazy(f'{_USE_CASES_PROTOCOLOS}.ListarProtocolosService'),
        protocolo_repo=protocolo_repository,
        operador_repo=operador_repository,
        clock=clock,
    )

    listar_eventos_service = providers.Factory(
        _lazy(f'{_USE_CASES_PROTOCOLOS}.ListarEventosService'),
        protocolo_repo=protocolo_repository,
        evento_repo=protocolo_evento_repository,
        operador_repo=operador_repository,
        clock=clock,
    )

    estatisticas_service = providers.Factory(
        _lazy(f'{_USE_CASES_PROTOCOLOS}.EstatisticasService'),
        protocolo_repo=protocolo_repository,
        operador_repo=operador_repository,
        clock=clock,
    )

    # Atendimento
    fluxo_atendimento_service = providers.Factory(
        _lazy(f'{_USE_CASES_ATENDIMENTO}.FluxoAtendimentoService'),
        tarefa_repo=tarefa_repository,
        registro_repo=registro_chamada_repository,
        contato_repo=contato_repository,
        catalogo_repo=pergunta_auditoria_repository,
        operador_repo=operador_repository,
        evento_logger=operador_evento_logger,
        sessao_store=sessao_store,
        uow=unit_of_work,
        clock=clock,
        criar_protocolo=criar_protocolo_service,
        envio_timeout=providers.Callable(_envio_timeout_de_settings),
    )

    listar_registros_chamada_service = providers.Factory(
        _lazy(f'{_USE_CASES_ATENDIMENTO}.ListarRegistrosChamadaService'),
        registro_repo=registro_chamada_repository,
        operador_repo=operador_repository,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[containers.DeclarativeContainer] = None


def get_container():
    """
    Retorna instância global do container.

    Cria se não existir (lazy initialization).
    """
    global _container

    if _container is None:
        _container = Container()

    return _container


def set_container(container) -> None:
    """Substitui o container global (ex.: TestingContainer em testes)."""
    global _container
    _container = container


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

def TestingContainer() -> Container:
    """
    Container para testes com implementações InMemory.

    Mantém os mesmos services do Container; persistência, sessão,
    publisher e relógio são sobrescritos (override), o que alcança
    todos os providers que dependem deles.

    Example:
        container = TestingContainer()
        container.operador_repository().add(operador)
        container.clock().avancar(segundos=42)
    """
    container = Container()

    container.clock.override(providers.Singleton(_lazy('src.core.shared.interfaces.FakeClock')))
    container.event_publisher.override(
        providers.Singleton(_lazy('src.adapters.django_app.events.publishers.InMemoryEventPublisher'))
    )
    container.sla.override(providers.Singleton(_lazy('src.core.protocolos.sla.SLAClock')))

    container.operador_repository.override(
        providers.Singleton(_lazy('src.core.operadores.ports.InMemoryOperadorRepository'))
    )
    container.protocolo_repository.override(
        providers.Singleton(_lazy('src.core.protocolos.ports.InMemoryProtocoloRepository'))
    )
    container.protocolo_evento_repository.override(
        providers.Singleton(_lazy('src.core.protocolos.ports.InMemoryProtocoloEventoRepository'))
    )
    container.pergunta_auditoria_repository.override(
        providers.Singleton(_lazy('src.core.auditoria.ports.InMemoryPerguntaAuditoriaRepository'))
    )
    container.tarefa_repository.override(
        providers.Singleton(_lazy('src.core.atendimento.ports.InMemoryTarefaRepository'))
    )
    container.registro_chamada_repository.override(
        providers.Singleton(_lazy('src.core.atendimento.ports.InMemoryRegistroChamadaRepository'))
    )
    container.contato_repository.override(
        providers.Singleton(_lazy('src.core.atendimento.ports.InMemoryContatoRepository'))
    )
    container.operador_evento_logger.override(
        providers.Singleton(_lazy('src.core.atendimento.ports.InMemoryOperadorEventoLogger'))
    )
    container.sessao_store.override(
        providers.Singleton(_lazy('src.core.atendimento.ports.InMemorySessaoStore'))
    )
    container.unit_of_work.override(
        providers.Factory(
            _lazy('src.adapters.django_app.shared.unit_of_work.InMemoryUnitOfWork'),
            event_publisher=container.event_publisher,
        )
    )

    return container
