"""
Ports (Interfaces) do Domínio de Protocolos.

Define os contratos que os Adapters de infraestrutura devem implementar
para persistência de protocolos e do seu histórico.

Tipos de Ports:
- ProtocoloRepository: Gravação condicional e consultas de protocolos
- ProtocoloEventoRepository: Histórico append-only

Princípio:
    Core define interfaces → Adapters implementam
    Dependências sempre apontam para o Core
"""

from dataclasses import replace
from typing import Dict, List, Optional, Protocol, runtime_checkable
import copy
import itertools

from src.core.shared.exceptions import ConcurrencyError, EntityNotFoundError

from .dtos import FiltroProtocolos
from .entities import ProtocoloEntity, ProtocoloEventoEntity, ProtocoloStatus


@runtime_checkable
class ProtocoloRepository(Protocol):
    """
    Interface para persistência de Protocolos.

    Cada transição lê o estado atual, valida e regrava o estado
    completo. A regravação é condicional: só acontece se o status e a
    versão armazenados ainda forem os lidos no início da transição.

    Implementações:
    - DjangoProtocoloRepository (ORM, UPDATE filtrado)
    - InMemoryProtocoloRepository (testes)
    """

    def add(self, protocolo: ProtocoloEntity) -> None:
        """
        Insere protocolo novo.

        Raises:
            PersistenceError: Se falha no armazenamento
        """
        ...

    def update(
        self,
        protocolo: ProtocoloEntity,
        status_esperado: ProtocoloStatus,
        versao_esperada: int,
    ) -> None:
        """
        Regrava o protocolo se status e versão armazenados conferem.

        Em caso de sucesso, protocolo.versao passa a versao_esperada + 1.

        Raises:
            ConcurrencyError: Se o armazenamento mudou desde a leitura
            PersistenceError: Se falha no armazenamento
        """
        ...

    def get_by_id_ou_numero(self, referencia: str) -> Optional[ProtocoloEntity]:
        """Busca por ID interno ou pelo número humano (PRxxxxx)."""
        ...

    def list(self, filtro: FiltroProtocolos) -> List[ProtocoloEntity]:
        """Lista protocolos que atendem ao filtro (sem ordenação garantida)."""
        ...

    def exists_numero(self, numero: str) -> bool:
        """Verifica se o número humano já está em uso."""
        ...


@runtime_checkable
class ProtocoloEventoRepository(Protocol):
    """
    Histórico append-only.

    Itens nunca são atualizados nem removidos. A listagem devolve a
    ordem causal (criação, empates pela sequência de inserção).
    """

    def append(self, evento: ProtocoloEventoEntity) -> ProtocoloEventoEntity:
        """Grava o item e devolve a cópia com a sequência atribuída."""
        ...

    def list_by_protocolo(self, protocolo_id: str) -> List[ProtocoloEventoEntity]:
        ...


# =============================================================================
# Implementações em memória (testes e TestingContainer)
# =============================================================================

class InMemoryProtocoloRepository:
    """
    Implementação em memória do ProtocoloRepository.

    Guarda cópias: alterações na entidade só chegam ao repositório via
    add/update, como no banco.
    """

    def __init__(self):
        self._protocolos: Dict[str, ProtocoloEntity] = {}

    def add(self, protocolo: ProtocoloEntity) -> None:
        self._protocolos[protocolo.id] = copy.deepcopy(protocolo)

    def update(
        self,
        protocolo: ProtocoloEntity,
        status_esperado: ProtocoloStatus,
        versao_esperada: int,
    ) -> None:
        atual = self._protocolos.get(protocolo.id)
        if atual is None:
            raise EntityNotFoundError(
                f"Protocolo {protocolo.id} não encontrado",
                entity_type="Protocolo",
                entity_id=protocolo.id,
            )
        if atual.status != status_esperado or atual.versao != versao_esperada:
            raise ConcurrencyError(
                f"Protocolo {protocolo.numero} foi alterado por outra operação",
                current_status=atual.status.value,
            )
        protocolo.versao = versao_esperada + 1
        self._protocolos[protocolo.id] = copy.deepcopy(protocolo)

    def get_by_id_ou_numero(self, referencia: str) -> Optional[ProtocoloEntity]:
        if not referencia:
            return None
        protocolo = self._protocolos.get(referencia)
        if protocolo is None:
            numero = referencia.strip().upper()
            protocolo = next(
                (p for p in self._protocolos.values() if p.numero == numero),
                None,
            )
        return copy.deepcopy(protocolo) if protocolo else None

    def list(self, filtro: FiltroProtocolos) -> List[ProtocoloEntity]:
        resultado = []
        for protocolo in self._protocolos.values():
            if filtro.status and protocolo.status != filtro.status:
                continue
            if filtro.departamento_id and protocolo.departamento_id != filtro.departamento_id:
                continue
            if filtro.responsavel_id and protocolo.responsavel_id != filtro.responsavel_id:
                continue
            if filtro.visivel_para and filtro.visivel_para not in (
                protocolo.responsavel_id,
                protocolo.aberto_por_id,
            ):
                continue
            if filtro.busca:
                termo = filtro.busca.strip().lower()
                if termo not in protocolo.titulo.lower() and termo not in protocolo.numero.lower():
                    continue
            resultado.append(copy.deepcopy(protocolo))
        return resultado

    def exists_numero(self, numero: str) -> bool:
        return any(p.numero == numero for p in self._protocolos.values())

    def clear(self) -> None:
        """Limpa todos os protocolos (útil para testes)."""
        self._protocolos.clear()


class InMemoryProtocoloEventoRepository:
    """Implementação em memória do histórico."""

    def __init__(self):
        self._eventos: List[ProtocoloEventoEntity] = []
        self._sequencia = itertools.count(1)

    def append(self, evento: ProtocoloEventoEntity) -> ProtocoloEventoEntity:
        gravado = replace(evento, sequencia=next(self._sequencia))
        self._eventos.append(gravado)
        return gravado

    def list_by_protocolo(self, protocolo_id: str) -> List[ProtocoloEventoEntity]:
        return sorted(
            (e for e in self._eventos if e.protocolo_id == protocolo_id),
            key=lambda e: (e.criado_em, e.sequencia),
        )
