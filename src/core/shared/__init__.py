"""
Shared Domain Components.

Contém componentes compartilhados entre todos os domínios:
- Exceções de domínio
- Interfaces (Ports) transversais: UnitOfWork, EventPublisher, Clock
- Base class para Domain Events
"""

from .exceptions import (
    DomainException,
    ValidationError,
    AuditoriaIncompletaError,
    JustificativaObrigatoriaError,
    StateError,
    ConcurrencyError,
    AuthorizationError,
    EntityNotFoundError,
    PersistenceError,
    ConfigurationError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork, EventPublisher, Clock, SystemClock, FakeClock

__all__ = [
    "DomainException",
    "ValidationError",
    "AuditoriaIncompletaError",
    "JustificativaObrigatoriaError",
    "StateError",
    "ConcurrencyError",
    "AuthorizationError",
    "EntityNotFoundError",
    "PersistenceError",
    "ConfigurationError",
    "DomainEvent",
    "UnitOfWork",
    "EventPublisher",
    "Clock",
    "SystemClock",
    "FakeClock",
]
