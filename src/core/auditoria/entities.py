"""
Entidades do Domínio de Auditoria.

O catálogo de perguntas é configurado fora do núcleo. Ele alimenta dois
usos distintos:
- o roteiro do atendimento (perguntas do tipo de chamada da tarefa);
- o checklist de fechamento de protocolo (perguntas marcadas com
  confirmacao_fechamento), validado pelo AuditGate.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple


TODOS_OS_TIPOS = "ALL"


class TipoChamada(Enum):
    """Classificação do tipo de chamada (origem de tarefas e protocolos)."""

    POS_VENDA = "PÓS-VENDA"
    PROSPECCAO = "PROSPECÇÃO"
    VENDA = "VENDA"
    CONFIRMACAO_PROTOCOLO = "CONFIRMAÇÃO PROTOCOLO"
    ASSISTENCIA = "ASSISTÊNCIA"

    @classmethod
    def from_string(cls, value: str) -> "TipoChamada":
        """
        Converte string para enum.

        Aceita o nome ("POS_VENDA") ou o valor exibido ("PÓS-VENDA").

        Raises:
            ValueError: Se valor inválido
        """
        try:
            return cls[value.strip().upper().replace(" ", "_").replace("-", "_")]
        except KeyError:
            pass

        for tipo in cls:
            if tipo.value.lower() == value.strip().lower():
                return tipo

        raise ValueError(f"Tipo de chamada inválido: {value}")


@dataclass(frozen=True)
class PerguntaAuditoria:
    """
    Pergunta do catálogo externo.

    Attributes:
        id: Identificador estável (chave das respostas)
        texto: Enunciado exibido ao operador
        opcoes: Valores permitidos
        tipos: Tipos de chamada atendidos (valores de TipoChamada ou "ALL")
        ordem: Ordem de exibição
        sensivel_upsell: Resposta preenchida exige justificativa pareada
        confirmacao_fechamento: Faz parte do checklist de fechamento
        etapa: Etapa do atendimento avaliada (atendimento, tecnico, ...)
    """

    id: str
    texto: str
    opcoes: Tuple[str, ...]
    tipos: FrozenSet[str] = field(default_factory=lambda: frozenset({TODOS_OS_TIPOS}))
    ordem: int = 0
    sensivel_upsell: bool = False
    confirmacao_fechamento: bool = False
    etapa: Optional[str] = None

    def aplica_a(self, tipo: Optional[TipoChamada]) -> bool:
        """Verifica se a pergunta vale para o tipo de chamada informado."""
        if TODOS_OS_TIPOS in self.tipos:
            return True
        return tipo is not None and tipo.value in self.tipos

    def aceita(self, valor: Optional[str]) -> bool:
        """Verifica se o valor é uma das opções enumeradas."""
        return valor is not None and valor in self.opcoes


@dataclass(frozen=True)
class RespostaAuditoria:
    """Par (pergunta, valor) já validado contra o catálogo."""

    pergunta_id: str
    valor: str


@dataclass(frozen=True)
class ResultadoAuditoria:
    """
    Resultado da validação do checklist.

    Attributes:
        respostas: Pares validados, na ordem do catálogo
        pendentes: IDs de perguntas obrigatórias sem resposta válida
    """

    respostas: Tuple[RespostaAuditoria, ...] = ()
    pendentes: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.pendentes
