"""
Testes dos handlers Celery, do dispatcher e dos publishers.

As tasks rodam em modo eager (test_settings); as chamadas .delay das
tasks de notificação e métrica são substituídas por mocks.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from dependency_injector import providers
from django.utils import timezone

from src.adapters.django_app.atendimento.models import OperadorEventoModel
from src.adapters.django_app.events import handlers
from src.adapters.django_app.events.publishers import (
    CeleryEventPublisher,
    InMemoryEventPublisher,
    LoggingEventPublisher,
    get_event_publisher,
)
from src.adapters.django_app.protocolos.repositories import DjangoProtocoloRepository
from src.config.container import get_container
from src.core.protocolos.entities import ProtocoloEntity, ProtocoloPriority
from src.core.protocolos.events import (
    ProtocoloCriadoEvent,
    ProtocoloReatribuidoEvent,
    ProtocoloStatusAlteradoEvent,
)
from src.core.shared.interfaces import FakeClock


def _payload(event):
    return event.to_dict()


class TestHandlersProtocolo:
    def test_criado_por_outro_notifica_responsavel(self):
        evento = ProtocoloCriadoEvent(
            aggregate_id="p1",
            numero="PRX7K2Q",
            aberto_por_id="op1",
            responsavel_id="op2",
            prioridade="Alta",
        )

        with patch.object(handlers.notify_user, "delay") as notify, \
                patch.object(handlers.notify_supervisao, "delay") as supervisao, \
                patch.object(handlers.record_metric, "delay") as metric:
            handlers.handle_protocolo_criado(_payload(evento))

        notify.assert_called_once_with(user_id="op2", message="Protocolo PRX7K2Q atribuído a você")
        supervisao.assert_called_once()
        assert metric.call_args.kwargs["tags"] == {"prioridade": "Alta", "origem": "manual"}

    def test_criado_pelo_proprio_responsavel(self):
        evento = ProtocoloCriadoEvent(
            aggregate_id="p1",
            numero="PRX7K2Q",
            aberto_por_id="op1",
            responsavel_id="op1",
            prioridade="Baixa",
        )

        with patch.object(handlers.notify_user, "delay") as notify, \
                patch.object(handlers.notify_supervisao, "delay") as supervisao, \
                patch.object(handlers.record_metric, "delay"):
            handlers.handle_protocolo_criado(_payload(evento))

        notify.assert_not_called()
        supervisao.assert_not_called()

    def test_rejeicao_avisa_responsavel(self):
        evento = ProtocoloStatusAlteradoEvent(
            aggregate_id="p1",
            numero="PRX7K2Q",
            status_anterior="Resolvido (Pendente Confirmação)",
            status_novo="Em andamento",
            responsavel_id="op1",
            nota="Sem foto",
        )

        with patch.object(handlers.notify_user, "delay") as notify:
            handlers.handle_protocolo_status_alterado(_payload(evento))

        assert notify.call_args.kwargs["user_id"] == "op1"
        assert "Sem foto" in notify.call_args.kwargs["message"]

    def test_submissao_avisa_supervisao(self):
        evento = ProtocoloStatusAlteradoEvent(
            aggregate_id="p1",
            numero="PRX7K2Q",
            status_anterior="Em andamento",
            status_novo="Resolvido (Pendente Confirmação)",
        )

        with patch.object(handlers.notify_supervisao, "delay") as supervisao:
            handlers.handle_protocolo_status_alterado(_payload(evento))

        assert supervisao.call_args.kwargs["protocolo_id"] == "p1"

    def test_reatribuicao_notifica_novo_responsavel(self):
        evento = ProtocoloReatribuidoEvent(
            aggregate_id="p1",
            numero="PRX7K2Q",
            responsavel_anterior_id="op1",
            responsavel_novo_id="op2",
            ator_id="adm",
        )

        with patch.object(handlers.notify_user, "delay") as notify:
            handlers.handle_protocolo_reatribuido(_payload(evento))

        notify.assert_called_once_with(user_id="op2", message="Protocolo PRX7K2Q reatribuído a você")


class TestDispatcher:
    def test_roteia_para_handler(self):
        evento = ProtocoloReatribuidoEvent(aggregate_id="p1", numero="PRX7K2Q")

        with patch.object(handlers.handle_protocolo_reatribuido, "delay") as handler:
            handlers.dispatch_domain_event(evento.event_type, _payload(evento))

        handler.assert_called_once()
        assert handler.call_args.args[0]["aggregate_id"] == "p1"

    def test_evento_desconhecido_e_ignorado(self):
        with patch.object(handlers.handle_protocolo_criado, "delay") as handler:
            handlers.dispatch_domain_event("EventoInexistente", {"aggregate_id": "x"})

        handler.assert_not_called()


@pytest.mark.django_db
class TestTarefasAgendadas:
    @pytest.fixture
    def clock(self):
        relogio = FakeClock(timezone.now())
        get_container().clock.override(providers.Object(relogio))
        return relogio

    def _abrir(self, clock, horas_sla):
        protocolo = ProtocoloEntity.criar(
            aberto_por_id="op1",
            departamento_id="d1",
            titulo="Inversor sem sinal",
            descricao="Sem comunicação",
            prioridade=ProtocoloPriority.ALTA,
            aberto_em=clock.agora(),
            sla_prazo=clock.agora() + timedelta(hours=horas_sla),
            cliente_id="c1",
        )
        DjangoProtocoloRepository().add(protocolo)
        return protocolo

    def test_verificar_atrasados(self, clock):
        self._abrir(clock, horas_sla=24)
        self._abrir(clock, horas_sla=96)
        clock.avancar(horas=48)

        with patch.object(handlers.notify_user, "delay") as notify, \
                patch.object(handlers.record_metric, "delay"):
            total = handlers.verificar_protocolos_atrasados()

        assert total == 1
        assert notify.call_args.kwargs["user_id"] == "op1"

    def test_relatorio_diario(self, clock):
        self._abrir(clock, horas_sla=24)

        report = handlers.gerar_relatorio_diario()

        assert report["total_protocolos"] == 1
        assert report["por_status"]["Aberto"] == 1
        assert report["atrasados"] == 0

    def test_limpar_eventos_operador(self):
        antigo = OperadorEventoModel.objects.create(operador_id="op1", tipo="PULAR_ATENDIMENTO")
        OperadorEventoModel.objects.filter(id=antigo.id).update(
            criado_em=timezone.now() - timedelta(days=120)
        )
        OperadorEventoModel.objects.create(operador_id="op1", tipo="FINALIZAR_ATENDIMENTO")

        assert handlers.limpar_eventos_operador(days=90) == 1
        assert OperadorEventoModel.objects.count() == 1


class TestPublishers:
    def test_factory_por_modo(self):
        assert isinstance(get_event_publisher("celery"), CeleryEventPublisher)
        assert isinstance(get_event_publisher("MEMORY"), InMemoryEventPublisher)
        assert isinstance(get_event_publisher(None), LoggingEventPublisher)

    def test_handler_local_com_falha_nao_propaga(self):
        publisher = InMemoryEventPublisher()
        recebidos = []

        def quebrado(event):
            raise RuntimeError("handler quebrado")

        publisher.register_handler("ProtocoloCriadoEvent", quebrado)
        publisher.register_handler("ProtocoloCriadoEvent", recebidos.append)
        publisher.publish(ProtocoloCriadoEvent(aggregate_id="p1", numero="PR1"))

        assert len(recebidos) == 1
        assert len(publisher.get_events_by_type("ProtocoloCriadoEvent")) == 1

    def test_celery_publisher_envia_para_dispatcher(self):
        evento = ProtocoloCriadoEvent(aggregate_id="p1", numero="PR1")

        with patch.object(handlers.dispatch_domain_event, "delay") as dispatch:
            CeleryEventPublisher(also_log=False).publish(evento)

        assert dispatch.call_args.args[0] == "ProtocoloCriadoEvent"
        assert dispatch.call_args.args[1]["data"]["numero"] == "PR1"

    def test_falha_de_broker_nao_propaga(self):
        evento = ProtocoloCriadoEvent(aggregate_id="p1", numero="PR1")

        with patch.object(handlers.dispatch_domain_event, "delay", side_effect=ConnectionError):
            CeleryEventPublisher().publish(evento)
