"""
Ports (Interfaces) do Domínio de Atendimento.

Tipos de Ports:
- TarefaRepository: Fila de tarefas por operador
- RegistroChamadaRepository: Registros de chamadas concluídas
- ContatoRepository: Leitura de clientes e prospects
- OperadorEventoLogger: Eventos de ciclo de vida do operador
- SessaoStore: Estado da sessão de atendimento por operador
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable
import copy

from src.core.shared.exceptions import ConcurrencyError, EntityNotFoundError

from .dtos import ContatoDTO
from .entities import (
    OperadorEventoTipo,
    RegistroChamadaEntity,
    TarefaEntity,
    TarefaStatus,
)
from .sessao import SessaoAtendimento


@runtime_checkable
class TarefaRepository(Protocol):
    """
    Fila de tarefas.

    Implementações:
    - DjangoTarefaRepository (ORM, UPDATE filtrado por status)
    - InMemoryTarefaRepository (testes)
    """

    def get_pending_for_operador(self, operador_id: str) -> Optional[TarefaEntity]:
        """Tarefa pendente mais antiga do operador, ou None."""
        ...

    def get_by_id(self, tarefa_id: str) -> Optional[TarefaEntity]:
        ...

    def update(self, tarefa: TarefaEntity, status_esperado: TarefaStatus) -> None:
        """
        Regrava a tarefa se o status armazenado for o esperado.

        Raises:
            ConcurrencyError: Se a tarefa já foi consumida
        """
        ...


@runtime_checkable
class RegistroChamadaRepository(Protocol):
    def add(self, registro: RegistroChamadaEntity) -> None:
        ...

    def list(
        self,
        operador_id: Optional[str] = None,
        tarefa_id: Optional[str] = None,
    ) -> List[RegistroChamadaEntity]:
        """Registros filtrados, mais recentes primeiro."""
        ...


@runtime_checkable
class ContatoRepository(Protocol):
    def get_cliente(self, cliente_id: str) -> Optional[ContatoDTO]:
        ...

    def get_prospect(self, prospect_id: str) -> Optional[ContatoDTO]:
        ...


@runtime_checkable
class OperadorEventoLogger(Protocol):
    """
    Registro de eventos de ciclo de vida do operador.

    Chamado sem aguardar confirmação: falhas são registradas em log e
    nunca interrompem o atendimento.
    """

    def registrar(
        self,
        operador_id: str,
        tipo: OperadorEventoTipo,
        tarefa_id: Optional[str] = None,
        detalhe: Optional[str] = None,
    ) -> None:
        ...


@runtime_checkable
class SessaoStore(Protocol):
    """
    Armazenamento do estado da sessão por operador.

    Implementações:
    - CacheSessaoStore (cache do Django)
    - InMemorySessaoStore (testes)
    """

    def obter(self, operador_id: str) -> Optional[SessaoAtendimento]:
        ...

    def salvar(self, sessao: SessaoAtendimento) -> None:
        ...

    def descartar(self, operador_id: str) -> None:
        ...


# =============================================================================
# Implementações em memória (testes e TestingContainer)
# =============================================================================

class InMemoryTarefaRepository:
    def __init__(self):
        self._tarefas: Dict[str, TarefaEntity] = {}

    def add(self, tarefa: TarefaEntity) -> None:
        self._tarefas[tarefa.id] = copy.deepcopy(tarefa)

    def get_pending_for_operador(self, operador_id: str) -> Optional[TarefaEntity]:
        pendentes = sorted(
            (
                t for t in self._tarefas.values()
                if t.operador_id == operador_id and t.esta_pendente
            ),
            key=lambda t: (t.criado_em, t.id),
        )
        return copy.deepcopy(pendentes[0]) if pendentes else None

    def get_by_id(self, tarefa_id: str) -> Optional[TarefaEntity]:
        tarefa = self._tarefas.get(tarefa_id)
        return copy.deepcopy(tarefa) if tarefa else None

    def update(self, tarefa: TarefaEntity, status_esperado: TarefaStatus) -> None:
        atual = self._tarefas.get(tarefa.id)
        if atual is None:
            raise EntityNotFoundError(
                f"Tarefa {tarefa.id} não encontrada",
                entity_type="Tarefa",
                entity_id=tarefa.id,
            )
        if atual.status != status_esperado:
            raise ConcurrencyError(
                f"Tarefa {tarefa.id} foi alterada por outra operação",
                current_status=atual.status.value,
            )
        self._tarefas[tarefa.id] = copy.deepcopy(tarefa)


class InMemoryRegistroChamadaRepository:
    def __init__(self):
        self._registros: List[RegistroChamadaEntity] = []

    def add(self, registro: RegistroChamadaEntity) -> None:
        self._registros.append(registro)

    def list(
        self,
        operador_id: Optional[str] = None,
        tarefa_id: Optional[str] = None,
    ) -> List[RegistroChamadaEntity]:
        registros = [
            r for r in self._registros
            if (operador_id is None or r.operador_id == operador_id)
            and (tarefa_id is None or r.tarefa_id == tarefa_id)
        ]
        return sorted(registros, key=lambda r: r.fim, reverse=True)


class InMemoryContatoRepository:
    def __init__(self):
        self._clientes: Dict[str, ContatoDTO] = {}
        self._prospects: Dict[str, ContatoDTO] = {}

    def add(self, contato: ContatoDTO) -> None:
        destino = self._clientes if contato.tipo == "cliente" else self._prospects
        destino[contato.id] = contato

    def get_cliente(self, cliente_id: str) -> Optional[ContatoDTO]:
        return self._clientes.get(cliente_id)

    def get_prospect(self, prospect_id: str) -> Optional[ContatoDTO]:
        return self._prospects.get(prospect_id)


class InMemoryOperadorEventoLogger:
    """Guarda os eventos em lista (inspecionável nos testes)."""

    def __init__(self):
        self.eventos: List[tuple] = []

    def registrar(
        self,
        operador_id: str,
        tipo: OperadorEventoTipo,
        tarefa_id: Optional[str] = None,
        detalhe: Optional[str] = None,
    ) -> None:
        self.eventos.append((operador_id, tipo, tarefa_id, detalhe))


class InMemorySessaoStore:
    """Guarda cópias, como um cache serializado."""

    def __init__(self):
        self._sessoes: Dict[str, SessaoAtendimento] = {}

    def obter(self, operador_id: str) -> Optional[SessaoAtendimento]:
        sessao = self._sessoes.get(operador_id)
        return copy.deepcopy(sessao) if sessao else None

    def salvar(self, sessao: SessaoAtendimento) -> None:
        self._sessoes[sessao.operador_id] = copy.deepcopy(sessao)

    def descartar(self, operador_id: str) -> None:
        self._sessoes.pop(operador_id, None)
