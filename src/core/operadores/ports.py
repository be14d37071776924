"""
Ports (Interfaces) do Domínio de Operadores.
"""

from typing import Dict, Iterable, List, Optional, Protocol, runtime_checkable

from src.core.shared.exceptions import AuthorizationError

from .entities import OperadorEntity


@runtime_checkable
class OperadorRepository(Protocol):
    """
    Consulta ao cadastro de operadores.

    Implementações:
    - DjangoOperadorRepository (ORM)
    - InMemoryOperadorRepository (testes)
    """

    def get_by_id(self, operador_id: str) -> Optional[OperadorEntity]:
        """Retorna o operador ou None se não existir."""
        ...

    def list_ativos(self) -> List[OperadorEntity]:
        """Lista operadores ativos."""
        ...


def carregar_ator(repo: OperadorRepository, ator_id: str) -> OperadorEntity:
    """
    Resolve o ator de uma transição a partir do cadastro.

    O papel nunca é aceito do chamador: é sempre lido do cadastro,
    para que a checagem de permissão aconteça no servidor.

    Raises:
        AuthorizationError: Se operador desconhecido ou inativo
    """
    ator = repo.get_by_id(ator_id) if ator_id else None
    if ator is None:
        raise AuthorizationError("Operador não reconhecido", actor_id=ator_id)
    if not ator.ativo:
        raise AuthorizationError("Operador inativo", actor_id=ator_id)
    return ator


class InMemoryOperadorRepository:
    """Implementação em memória do OperadorRepository (testes)."""

    def __init__(self, operadores: Iterable[OperadorEntity] = ()):
        self._operadores: Dict[str, OperadorEntity] = {o.id: o for o in operadores}

    def add(self, operador: OperadorEntity) -> None:
        self._operadores[operador.id] = operador

    def get_by_id(self, operador_id: str) -> Optional[OperadorEntity]:
        return self._operadores.get(operador_id)

    def list_ativos(self) -> List[OperadorEntity]:
        return [o for o in self._operadores.values() if o.ativo]
