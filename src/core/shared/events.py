"""
Domain Events - Comunicação desacoplada entre o núcleo e os adapters.

Um Domain Event registra algo significativo que aconteceu no domínio
(protocolo aberto, resolução aprovada, atendimento finalizado) para
consumo assíncrono: notificações, métricas, integrações.

Não confundir com o histórico de protocolo (ProtocoloEventoEntity),
que é parte do estado auditável do protocolo e é gravado na mesma
transação. Domain Events são publicados somente após o commit do
Unit of Work e podem ser perdidos sem afetar a correção do núcleo.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict
import uuid


@dataclass
class DomainEvent(ABC):
    """
    Classe base abstrata para Domain Events.

    Características:
    - Nomeados no passado (ProtocoloCriado, não CriarProtocolo)
    - Tratados como fatos históricos (não são alterados após criados)
    - Serializáveis para transporte via Celery

    Attributes:
        event_id: Identificador único do evento
        aggregate_id: ID do agregado que gerou o evento
        occurred_at: Momento em que o evento ocorreu
        version: Versão do schema do evento

    Example:
        @dataclass
        class ProtocoloCriadoEvent(DomainEvent):
            numero: str = ""

            @property
            def aggregate_type(self) -> str:
                return "Protocolo"
    """

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aggregate_id: str = ""
    occurred_at: datetime = field(default_factory=datetime.now)
    version: int = 1

    def __post_init__(self):
        if not self.aggregate_id:
            raise ValueError("aggregate_id é obrigatório")

    @property
    @abstractmethod
    def aggregate_type(self) -> str:
        """Tipo do agregado que gerou o evento (ex: "Protocolo")."""
        ...

    @property
    def event_type(self) -> str:
        """Nome da classe do evento, usado no roteamento dos handlers."""
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializa evento para dicionário.

        O formato é o payload enviado às tasks Celery e registrado
        pelo LoggingEventPublisher.
        """
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "data": self._get_event_data(),
        }

    def _get_event_data(self) -> Dict[str, Any]:
        """Campos específicos da subclasse (tudo que não é da base)."""
        base_fields = {"event_id", "aggregate_id", "occurred_at", "version"}
        return {
            key: value
            for key, value in self.__dict__.items()
            if key not in base_fields and not key.startswith("_")
        }

    def __repr__(self) -> str:
        return (
            f"{self.event_type}("
            f"event_id={self.event_id[:8]}..., "
            f"aggregate_id={self.aggregate_id}, "
            f"occurred_at={self.occurred_at.isoformat()}"
            f")"
        )
