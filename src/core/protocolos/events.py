"""
Domain Events do Domínio de Protocolos.

Eventos:
- ProtocoloCriadoEvent: Protocolo aberto (manual ou por escalonamento)
- ProtocoloStatusAlteradoEvent: Qualquer mudança de status
- ProtocoloNotaAdicionadaEvent: Nota livre registrada
- ProtocoloReatribuidoEvent: Responsável trocado

Uso:
    Eventos são criados nos use cases e publicados através do
    UnitOfWork após commit bem-sucedido.

    with uow:
        evento = protocolo.iniciar(ator, agora)
        ...
        uow.publish_event(ProtocoloStatusAlteradoEvent(...))
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from src.core.shared.events import DomainEvent


@dataclass
class ProtocoloCriadoEvent(DomainEvent):
    """
    Evento: Protocolo foi aberto.

    Handlers típicos:
    - Notificar o responsável
    - Registrar métrica de abertura por setor

    Attributes:
        numero: Número humano do protocolo
        responsavel_id: Responsável inicial
        departamento_id: Setor
        prioridade: Prioridade (valor exibido)
        sla_prazo: Prazo de SLA em ISO 8601
        origem_tipo_chamada: Tipo da chamada de origem (se escalonado)
    """

    numero: str = ""
    aberto_por_id: str = ""
    responsavel_id: str = ""
    departamento_id: str = ""
    prioridade: str = ""
    sla_prazo: str = ""
    origem_tipo_chamada: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Protocolo"


@dataclass
class ProtocoloStatusAlteradoEvent(DomainEvent):
    """
    Evento: Status do protocolo mudou.

    Handlers típicos:
    - Notificar responsável quando a resolução é rejeitada
    - Registrar tempo de ciclo ao fechar

    Attributes:
        numero: Número humano do protocolo
        status_anterior: Valor exibido do status anterior
        status_novo: Valor exibido do status novo
        ator_id: Quem executou a transição
        responsavel_id: Responsável atual
        nota: Nota do histórico (motivo da rejeição, etc.)
    """

    numero: str = ""
    status_anterior: str = ""
    status_novo: str = ""
    ator_id: str = ""
    responsavel_id: str = ""
    nota: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Protocolo"


@dataclass
class ProtocoloNotaAdicionadaEvent(DomainEvent):
    """Evento: Nota livre registrada no histórico."""

    numero: str = ""
    ator_id: str = ""
    responsavel_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Protocolo"


@dataclass
class ProtocoloReatribuidoEvent(DomainEvent):
    """
    Evento: Responsável do protocolo foi trocado.

    Handlers típicos:
    - Notificar o novo responsável
    """

    numero: str = ""
    responsavel_anterior_id: str = ""
    responsavel_novo_id: str = ""
    ator_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Protocolo"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "numero": self.numero,
            "responsavel_anterior_id": self.responsavel_anterior_id,
            "responsavel_novo_id": self.responsavel_novo_id,
            "ator_id": self.ator_id,
        }
