"""
Testes do container de injeção de dependência.
"""

import socket
from datetime import timedelta

import pytest

from src.adapters.django_app.atendimento.sessao_store import CacheSessaoStore
from src.adapters.django_app.events.publishers import InMemoryEventPublisher
from src.adapters.django_app.protocolos.repositories import DjangoProtocoloRepository
from src.adapters.django_app.shared.clock import DjangoClock
from src.adapters.django_app.shared.unit_of_work import DjangoUnitOfWork, InMemoryUnitOfWork
from src.config.container import (
    Container,
    TestingContainer,
    get_container,
    reset_container,
    set_container,
)
from src.core.atendimento.use_cases import FluxoAtendimentoService
from src.core.operadores.entities import OperadorEntity
from src.core.protocolos.dtos import CriarProtocoloInputDTO
from src.core.protocolos.ports import InMemoryProtocoloRepository
from src.core.protocolos.use_cases import CriarProtocoloService


class TestContainerPadrao:
    def test_container_global(self):
        assert get_container() is get_container()

        reset_container()
        novo = Container()
        set_container(novo)

        assert get_container() is novo

    def test_providers_de_producao(self):
        container = Container()

        assert isinstance(container.clock(), DjangoClock)
        assert container.clock().origem() == socket.gethostname()
        assert isinstance(container.protocolo_repository(), DjangoProtocoloRepository)
        assert container.protocolo_repository() is container.protocolo_repository()
        assert isinstance(container.sessao_store(), CacheSessaoStore)
        assert isinstance(container.event_publisher(), InMemoryEventPublisher)

    def test_services_sao_factories(self):
        container = Container()

        primeiro = container.criar_protocolo_service()
        segundo = container.criar_protocolo_service()

        assert isinstance(primeiro, CriarProtocoloService)
        assert primeiro is not segundo
        assert isinstance(container.unit_of_work(), DjangoUnitOfWork)
        assert isinstance(container.fluxo_atendimento_service(), FluxoAtendimentoService)

    def test_sla_le_a_tabela_dos_settings(self, settings):
        settings.PROTOCOLO_SLA_HORAS = {"ALTA": 2, "MEDIA": 4, "BAIXA": 8}

        sla = Container().sla()

        assert sla.horas("ALTA") == 2

    def test_timeout_de_envio_dos_settings(self, settings):
        settings.ATENDIMENTO_ENVIO_TIMEOUT = 30

        fluxo = Container().fluxo_atendimento_service()

        assert fluxo.envio_timeout == timedelta(seconds=30)


class TestTestingContainer:
    def test_overrides_em_memoria(self):
        container = TestingContainer()

        assert isinstance(container.protocolo_repository(), InMemoryProtocoloRepository)
        assert isinstance(container.unit_of_work(), InMemoryUnitOfWork)

    def test_abertura_ponta_a_ponta(self):
        container = TestingContainer()
        container.operador_repository().add(OperadorEntity(id="op1", nome="Ana"))

        output = container.criar_protocolo_service().execute(
            CriarProtocoloInputDTO(
                ator_id="op1",
                titulo="Vazamento na bomba",
                descricao="Cliente relata vazamento",
                departamento_id="d1",
                prioridade="BAIXA",
                cliente_id="c1",
            )
        )

        eventos = container.event_publisher().published_events
        assert output.sla_prazo - output.aberto_em == timedelta(hours=72)
        assert [e.event_type for e in eventos] == ["ProtocoloCriadoEvent"]
        assert len(container.protocolo_evento_repository().list_by_protocolo(output.id)) == 1

    def test_relogio_compartilhado(self):
        container = TestingContainer()

        container.clock().avancar(segundos=42)

        assert container.clock().monotonic() == pytest.approx(42)
