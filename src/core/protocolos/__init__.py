"""
Domínio de Protocolos - ciclo de vida, SLA e histórico.
"""

from .entities import (
    ProtocoloEntity,
    ProtocoloEventoEntity,
    ProtocoloEventoTipo,
    ProtocoloPriority,
    ProtocoloStatus,
)
from .sla import SLAClock, calcular_prazo_sla
from .ports import (
    ProtocoloRepository,
    ProtocoloEventoRepository,
    InMemoryProtocoloRepository,
    InMemoryProtocoloEventoRepository,
)

__all__ = [
    "ProtocoloEntity",
    "ProtocoloEventoEntity",
    "ProtocoloEventoTipo",
    "ProtocoloPriority",
    "ProtocoloStatus",
    "SLAClock",
    "calcular_prazo_sla",
    "ProtocoloRepository",
    "ProtocoloEventoRepository",
    "InMemoryProtocoloRepository",
    "InMemoryProtocoloEventoRepository",
]
