"""
Domínio de Atendimento - fila de tarefas e sessão de chamada do operador.
"""

from .entities import (
    MotivoPulo,
    OperadorEventoTipo,
    RegistroChamadaEntity,
    TarefaEntity,
    TarefaStatus,
)
from .cronometro import Cronometro
from .sessao import SessaoAtendimento, SessaoEstado
from .ports import (
    ContatoRepository,
    OperadorEventoLogger,
    RegistroChamadaRepository,
    SessaoStore,
    TarefaRepository,
    InMemoryContatoRepository,
    InMemoryOperadorEventoLogger,
    InMemoryRegistroChamadaRepository,
    InMemorySessaoStore,
    InMemoryTarefaRepository,
)

__all__ = [
    "MotivoPulo",
    "OperadorEventoTipo",
    "RegistroChamadaEntity",
    "TarefaEntity",
    "TarefaStatus",
    "Cronometro",
    "SessaoAtendimento",
    "SessaoEstado",
    "ContatoRepository",
    "OperadorEventoLogger",
    "RegistroChamadaRepository",
    "SessaoStore",
    "TarefaRepository",
    "InMemoryContatoRepository",
    "InMemoryOperadorEventoLogger",
    "InMemoryRegistroChamadaRepository",
    "InMemorySessaoStore",
    "InMemoryTarefaRepository",
]
