"""
Domínio de Auditoria - catálogo de perguntas e checklist de fechamento.
"""

from .entities import (
    TipoChamada,
    PerguntaAuditoria,
    RespostaAuditoria,
    ResultadoAuditoria,
    TODOS_OS_TIPOS,
)
from .ports import (
    PerguntaAuditoriaRepository,
    InMemoryPerguntaAuditoriaRepository,
    CATALOGO_PADRAO,
)
from .gate import AuditGate

__all__ = [
    "TipoChamada",
    "PerguntaAuditoria",
    "RespostaAuditoria",
    "ResultadoAuditoria",
    "TODOS_OS_TIPOS",
    "PerguntaAuditoriaRepository",
    "InMemoryPerguntaAuditoriaRepository",
    "CATALOGO_PADRAO",
    "AuditGate",
]
