"""
Event Publishers - Publicadores de Eventos de Domínio.

Responsável por publicar eventos para handlers assíncronos.
Implementações:
- LoggingEventPublisher: Apenas loga (desenvolvimento)
- CeleryEventPublisher: Publica via Celery (produção)
- InMemoryEventPublisher: Para testes

Padrão Observer/Pub-Sub para desacoplamento.
"""

from typing import List, Callable, Dict
import logging
import json

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)


class _HandlerRegistryMixin:
    """Handlers síncronos locais, indexados por event_type."""

    def register_handler(
        self,
        event_type: str,
        handler: Callable[[DomainEvent], None]
    ) -> None:
        """Registra handler para tipo de evento."""
        self._handlers.setdefault(event_type, []).append(handler)

    def _dispatch_to_handlers(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Erro em handler para {event.event_type}: {e}")


class LoggingEventPublisher(_HandlerRegistryMixin, EventPublisher):
    """
    Publisher que apenas loga eventos.

    Usado em desenvolvimento para visualizar eventos
    sem necessidade de infraestrutura de mensageria.
    """

    def __init__(self, log_level: int = logging.INFO, dispatch_to_celery: bool = False):
        """
        Args:
            log_level: Nível de log para eventos
            dispatch_to_celery: Se deve também despachar para Celery
        """
        self._log_level = log_level
        self._dispatch_to_celery = dispatch_to_celery
        self._handlers: Dict[str, List[Callable]] = {}

    def publish(self, event: DomainEvent) -> None:
        event_data = event.to_dict()

        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(event_data, default=str)}"
        )

        if self._dispatch_to_celery:
            _enviar_para_celery(event)

        self._dispatch_to_handlers(event)


class CeleryEventPublisher(EventPublisher):
    """
    Publisher que envia eventos para Celery.

    Usado em produção para processamento assíncrono.
    """

    def __init__(self, also_log: bool = True):
        self._also_log = also_log

    def publish(self, event: DomainEvent) -> None:
        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )
        _enviar_para_celery(event)


class InMemoryEventPublisher(_HandlerRegistryMixin, EventPublisher):
    """
    Publisher em memória para testes.

    Armazena eventos publicados para verificação em testes.
    """

    def __init__(self):
        self._published_events: List[DomainEvent] = []
        self._handlers: Dict[str, List[Callable]] = {}

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        self._dispatch_to_handlers(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()

    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        """Filtra eventos por tipo."""
        return [e for e in self._published_events if e.event_type == event_type]

    def clear(self) -> None:
        self._published_events.clear()


def _enviar_para_celery(event: DomainEvent) -> None:
    """Falha de broker não desfaz a transição já comitada."""
    try:
        from src.adapters.django_app.events.handlers import dispatch_domain_event
        dispatch_domain_event.delay(event.event_type, event.to_dict())
    except Exception as e:
        logger.error(f"Falha ao publicar evento no Celery: {e}", exc_info=True)


def get_event_publisher(mode: str = "logging") -> EventPublisher:
    """
    Factory para obter publisher apropriado.

    Args:
        mode: "celery", "memory" ou "logging" (EVENT_PUBLISHER_MODE)
    """
    mode = (mode or "logging").lower()
    if mode == "celery":
        return CeleryEventPublisher()
    if mode == "memory":
        return InMemoryEventPublisher()
    return LoggingEventPublisher(dispatch_to_celery=False)
