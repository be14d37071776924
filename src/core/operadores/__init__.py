"""
Domínio de Operadores - atores das transições e seus papéis.
"""

from .entities import OperadorEntity, OperadorRole
from .ports import OperadorRepository, InMemoryOperadorRepository, carregar_ator

__all__ = [
    "OperadorEntity",
    "OperadorRole",
    "OperadorRepository",
    "InMemoryOperadorRepository",
    "carregar_ator",
]
