"""
Entidades do Domínio de Operadores.

Operadores são os atores de todas as transições: abrem e conduzem
protocolos, executam atendimentos e, com papel administrativo,
aprovam resoluções e redistribuem responsáveis.

O cadastro de operadores é mantido fora do núcleo; aqui ficam apenas
as regras de permissão calculadas no limite de cada transição.
"""

from dataclasses import dataclass
from enum import Enum


class OperadorRole(Enum):
    """Papéis de usuário do console."""

    ADMIN = "ADMIN"
    SUPERVISOR = "SUPERVISOR"
    OPERATOR_TELEMARKETING = "OPERATOR_TELEMARKETING"
    ANALISTA_MARKETING = "ANALISTA_MARKETING"
    VENDEDOR = "VENDEDOR"

    @classmethod
    def from_string(cls, value: str) -> "OperadorRole":
        """
        Converte string para enum.

        Raises:
            ValueError: Se papel desconhecido
        """
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Papel inválido: {value}")


@dataclass(frozen=True)
class OperadorEntity:
    """
    Operador do console.

    Attributes:
        id: Identificador do operador (mesmo ID do usuário autenticado)
        nome: Nome de exibição
        papel: Papel de acesso
        ativo: Operadores inativos não executam transições
    """

    id: str
    nome: str
    papel: OperadorRole = OperadorRole.OPERATOR_TELEMARKETING
    ativo: bool = True

    @property
    def e_administrador(self) -> bool:
        """Papel administrativo exigido para aprovar, rejeitar e reatribuir."""
        return self.papel == OperadorRole.ADMIN
