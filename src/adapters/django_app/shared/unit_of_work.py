"""
Unit of Work - Implementação Django.

Gerencia a transação de cada transição do núcleo, garantindo que o
protocolo, seu histórico, a tarefa e o registro de chamada sejam
gravados juntos ou nenhum deles.

Responsabilidades:
- Abrir/fechar blocos transaction.atomic
- Commit/Rollback coordenado
- Publicar eventos somente após o commit da transação mais externa

Aninhamento:
    O escalonamento de um atendimento abre um protocolo dentro da
    transação do envio. Cada UoW abre seu próprio bloco atomic; o
    bloco interno vira savepoint e os eventos dele aguardam o commit
    externo via transaction.on_commit.
"""

from typing import List, Optional
from contextlib import contextmanager
import logging

from django.db import DatabaseError, transaction

from src.core.shared.events import DomainEvent
from src.core.shared.exceptions import PersistenceError
from src.core.shared.interfaces import EventPublisher, UnitOfWork

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Usa django.db.transaction.atomic para gerenciar transações.
    Eventos são publicados apenas após commit bem-sucedido.

    Example:
        with DjangoUnitOfWork(event_publisher=publisher) as uow:
            protocolo_repo.update(protocolo, status_lido, versao_lida)
            evento_repo.append(evento)
            uow.publish_event(ProtocoloStatusAlteradoEvent(...))
        # Commit automático + eventos publicados

    Example com rollback:
        with DjangoUnitOfWork() as uow:
            protocolo_repo.add(protocolo)
            raise ValidationError("...")
        # Rollback automático, eventos descartados
    """

    def __init__(
        self,
        event_publisher: Optional[EventPublisher] = None,
        using: Optional[str] = None,
    ):
        """
        Args:
            event_publisher: Publicador de eventos (Celery, log, memória)
            using: Alias do banco (default do Django se None)
        """
        super().__init__()
        self._event_publisher = event_publisher
        self._using = using
        self._atomics: List[transaction.Atomic] = []
        self._committed = False
        self._rolled_back = False

    def _begin_transaction(self) -> None:
        atomic = transaction.atomic(using=self._using)
        atomic.__enter__()
        self._atomics.append(atomic)
        self._committed = False
        self._rolled_back = False
        logger.debug(f"Transaction started (depth={len(self._atomics)})")

    def commit(self) -> None:
        """
        Fecha o bloco atomic e agenda a publicação dos eventos.

        Ordem de execução:
        1. Saída do bloco atomic (commit ou liberação do savepoint)
        2. Registro da publicação em transaction.on_commit
        3. Limpeza da fila interna

        Raises:
            PersistenceError: Se o banco recusar o commit
        """
        if not self._atomics:
            logger.warning("Transaction already finalized")
            return

        atomic = self._atomics.pop()
        eventos = self.collect_events()
        self.clear_events()

        try:
            atomic.__exit__(None, None, None)
        except DatabaseError as e:
            logger.error(f"Commit failed: {e}")
            self._rolled_back = True
            raise PersistenceError(f"Falha ao gravar transação: {e}") from e

        self._committed = True
        logger.debug("Transaction committed")

        if eventos:
            # Fora de bloco atomic o callback roda na hora; dentro de um
            # bloco externo ele espera o commit externo.
            transaction.on_commit(
                lambda: self._publish_events(eventos),
                using=self._using,
            )

    def rollback(self) -> None:
        """
        Desfaz todas as mudanças e descarta eventos.

        Chamado automaticamente se exceção ocorrer dentro do contexto.
        """
        self.clear_events()
        if not self._atomics:
            return

        atomic = self._atomics.pop()
        try:
            transaction.set_rollback(True, using=self._using)
        finally:
            atomic.__exit__(None, None, None)
            self._rolled_back = True
            logger.debug("Transaction rolled back")

    def _publish_events(self, eventos: List[DomainEvent]) -> None:
        """
        Publica eventos para handlers assíncronos.

        Falhas de publicação são registradas e não desfazem a transição.
        """
        for event in eventos:
            logger.info(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )

            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    logger.error(f"Failed to publish event: {e}")

    @property
    def is_committed(self) -> bool:
        """Verifica se transação foi comitada."""
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        """Verifica se transação foi revertida."""
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.

    Não persiste nada - apenas simula comportamento
    para testes unitários sem banco de dados.

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        """Simula início de transação."""
        pass

    def commit(self) -> None:
        """Simula commit."""
        self._committed = True
        eventos = self.collect_events()
        self.clear_events()
        self._published_events.extend(eventos)
        if self._event_publisher:
            self._event_publisher.publish_batch(eventos)

    def rollback(self) -> None:
        """Simula rollback."""
        self._rolled_back = True
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        """Retorna eventos que foram 'publicados'."""
        return self._published_events

    def reset(self) -> None:
        """Reset para próximo teste."""
        self._committed = False
        self._rolled_back = False
        self._published_events.clear()
        self.clear_events()


# =============================================================================
# Context Manager Helper
# =============================================================================

@contextmanager
def atomic_operation(
    uow: Optional[UnitOfWork] = None,
    event_publisher: Optional[EventPublisher] = None,
):
    """
    Context manager para operações atômicas fora dos use cases
    (scripts de carga, tasks de manutenção).

    Example:
        with atomic_operation() as uow:
            repo.add(entity)
            uow.publish_event(event)
    """
    if uow is None:
        uow = DjangoUnitOfWork(event_publisher=event_publisher)

    with uow:
        yield uow
