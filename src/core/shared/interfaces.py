"""
Interfaces (Ports) compartilhadas entre os domínios.

São os "Ports" da Arquitetura Hexagonal que não pertencem a um
domínio específico:
- UnitOfWork: fronteira transacional de cada transição
- EventPublisher: saída de Domain Events após o commit
- Clock: fonte de tempo injetável (parede e monotônico)

Princípio: Core define interfaces; Adapters implementam.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import List, Optional, Protocol, runtime_checkable
import socket
import time

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Unit of Work - Coordena transações atômicas.

    Cada transição do núcleo roda dentro de um UoW: a gravação do
    protocolo e o registro no histórico são persistidos juntos ou
    nenhum deles é. Domain Events enfileirados só são publicados
    após commit bem-sucedido.

    Pattern: Context Manager
        with uow:
            repo.update(protocolo, ...)
            eventos.append(evento)
            uow.publish_event(ProtocoloStatusAlteradoEvent(...))
        # Commit ao sair sem erro, rollback se exceção
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False  # Não suprime exceções

    @abstractmethod
    def _begin_transaction(self) -> None:
        """Inicia uma nova transação no armazenamento concreto."""
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """
        Persiste todas as mudanças e publica eventos.

        Note:
            Eventos só são publicados após commit bem-sucedido.
            Se commit falhar, eventos são descartados.
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz todas as mudanças e descarta eventos."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """
        Enfileira evento para publicação após commit.

        Args:
            event: Evento de domínio a ser publicado
        """
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        """Retorna eventos enfileirados (para testing/debugging)."""
        return list(self._events)

    def clear_events(self) -> None:
        """Limpa fila de eventos."""
        self._events.clear()


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.

    Adapters implementam para integrar com diferentes
    sistemas de mensageria (Celery, log, memória).
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Publica evento para consumidores."""
        raise NotImplementedError

    def publish_batch(self, events: List[DomainEvent]) -> None:
        """Publica múltiplos eventos em ordem."""
        for event in events:
            self.publish(event)


@runtime_checkable
class Clock(Protocol):
    """
    Fonte de tempo do núcleo.

    agora() alimenta timestamps persistidos (aberto_em, fechado_em);
    monotonic() alimenta os cronômetros de atendimento, que não podem
    andar para trás se o relógio de parede for ajustado.
    origem() identifica a máquina dona das leituras monotônicas.
    """

    def agora(self) -> datetime:
        ...

    def monotonic(self) -> float:
        ...

    def origem(self) -> str:
        ...


class SystemClock:
    """Relógio real do processo."""

    def agora(self) -> datetime:
        return datetime.now()

    def monotonic(self) -> float:
        return time.monotonic()

    def origem(self) -> str:
        return socket.gethostname()


class FakeClock:
    """
    Relógio controlável para testes determinísticos.

    Example:
        clock = FakeClock(datetime(2024, 1, 1, 9, 0))
        clock.avancar(segundos=42)
    """

    def __init__(self, inicio: Optional[datetime] = None):
        self._agora = inicio or datetime(2024, 1, 1, 9, 0, 0)
        self._monotonic = 0.0
        self._origem = "local"

    def agora(self) -> datetime:
        return self._agora

    def monotonic(self) -> float:
        return self._monotonic

    def origem(self) -> str:
        return self._origem

    def avancar(self, segundos: float = 0, horas: float = 0) -> None:
        """Avança os dois relógios na mesma quantidade."""
        delta = segundos + horas * 3600
        self._agora = self._agora + timedelta(seconds=delta)
        self._monotonic += delta

    def trocar_origem(self, origem: str, monotonic: float = 0.0) -> None:
        """Simula a leitura por outra máquina (monotônico sem relação)."""
        self._origem = origem
        self._monotonic = monotonic
