"""
Domain Events do Domínio de Atendimento.

Eventos:
- AtendimentoFinalizadoEvent: Registro de chamada gravado
- AtendimentoPuladoEvent: Tarefa pulada com motivo
"""

from dataclasses import dataclass
from typing import Optional

from src.core.shared.events import DomainEvent


@dataclass
class AtendimentoFinalizadoEvent(DomainEvent):
    """
    Evento: Chamada concluída e registrada.

    Handlers típicos:
    - Registrar métricas de duração (chamada e relatório)
    - Acompanhar escalonamentos para protocolo
    """

    tarefa_id: str = ""
    operador_id: str = ""
    tipo_chamada: str = ""
    duracao_chamada: int = 0
    duracao_relatorio: int = 0
    protocolo_id: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "RegistroChamada"


@dataclass
class AtendimentoPuladoEvent(DomainEvent):
    """Evento: Tarefa pulada pelo operador."""

    operador_id: str = ""
    tipo_chamada: str = ""
    motivo: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Tarefa"
