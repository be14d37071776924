"""
Fixtures do núcleo (sem Django).

Os use cases recebem repositórios em memória, um FakeUnitOfWork e um
FakeClock, de modo que os testes controlam tempo, estado e eventos.
"""

from datetime import datetime
from typing import List

import pytest

from src.core.atendimento.dtos import ContatoDTO
from src.core.atendimento.ports import (
    InMemoryContatoRepository,
    InMemoryOperadorEventoLogger,
    InMemoryRegistroChamadaRepository,
    InMemorySessaoStore,
    InMemoryTarefaRepository,
)
from src.core.auditoria.gate import AuditGate
from src.core.auditoria.ports import CATALOGO_PADRAO, InMemoryPerguntaAuditoriaRepository
from src.core.operadores.entities import OperadorEntity, OperadorRole
from src.core.operadores.ports import InMemoryOperadorRepository
from src.core.protocolos.ports import (
    InMemoryProtocoloEventoRepository,
    InMemoryProtocoloRepository,
)
from src.core.protocolos.sla import SLAClock
from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import FakeClock


T0 = datetime(2024, 3, 4, 9, 0, 0)


class FakeUnitOfWork:
    """
    Fake Unit of Work para testes.

    Permite verificar commit/rollback e os eventos enfileirados.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self.commits = 0
        self.rollbacks = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1
        self._events.clear()

    def publish_event(self, event: DomainEvent):
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        return list(self._events)

    @property
    def committed(self) -> bool:
        return self.commits > 0

    @property
    def rolled_back(self) -> bool:
        return self.rollbacks > 0


@pytest.fixture
def clock():
    return FakeClock(T0)


@pytest.fixture
def uow():
    return FakeUnitOfWork()


@pytest.fixture
def admin():
    return OperadorEntity(id="adm", nome="Gestora", papel=OperadorRole.ADMIN)


@pytest.fixture
def operador():
    return OperadorEntity(id="op1", nome="Ana")


@pytest.fixture
def outro_operador():
    return OperadorEntity(id="op2", nome="Bruno")


@pytest.fixture
def operador_repo(admin, operador, outro_operador):
    return InMemoryOperadorRepository(
        [
            admin,
            operador,
            outro_operador,
            OperadorEntity(id="op-inativo", nome="Carlos", ativo=False),
        ]
    )


@pytest.fixture
def protocolo_repo():
    return InMemoryProtocoloRepository()


@pytest.fixture
def evento_repo():
    return InMemoryProtocoloEventoRepository()


@pytest.fixture
def catalogo_repo():
    return InMemoryPerguntaAuditoriaRepository(CATALOGO_PADRAO)


@pytest.fixture
def audit_gate(catalogo_repo):
    return AuditGate(catalogo_repo)


@pytest.fixture
def sla():
    return SLAClock({"ALTA": 24, "MEDIA": 48, "BAIXA": 72})


@pytest.fixture
def tarefa_repo():
    return InMemoryTarefaRepository()


@pytest.fixture
def registro_repo():
    return InMemoryRegistroChamadaRepository()


@pytest.fixture
def contato_repo():
    repo = InMemoryContatoRepository()
    repo.add(
        ContatoDTO(
            id="c1",
            tipo="cliente",
            nome="Maria Oliveira",
            telefone="(11) 98888-1111",
            itens=("Aquecedor solar 300L",),
        )
    )
    repo.add(ContatoDTO(id="p1", tipo="prospect", nome="Padaria Bom Pão"))
    return repo


@pytest.fixture
def evento_logger():
    return InMemoryOperadorEventoLogger()


@pytest.fixture
def sessao_store():
    return InMemorySessaoStore()
