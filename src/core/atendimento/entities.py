"""
Entidades do Domínio de Atendimento.

Entidades:
- TarefaEntity: Contato pendente na fila de um operador
- RegistroChamadaEntity: Registro imutável de uma chamada concluída
- MotivoPulo: Motivos fechados para pular um contato
- OperadorEventoTipo: Eventos de ciclo de vida do operador

Tarefas são criadas fora do núcleo (distribuição da fila) e
consumidas exatamente uma vez pelo fluxo de atendimento.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple
import uuid

from src.core.auditoria.entities import TipoChamada
from src.core.shared.exceptions import StateError


class TarefaStatus(Enum):
    """Estados de uma tarefa da fila."""

    PENDENTE = "pending"
    CONCLUIDA = "completed"
    PULADA = "skipped"


class MotivoPulo(Enum):
    """Motivos aceitos para pular um contato."""

    NAO_ATENDE = "NÃO ATENDE"
    CAIXA_POSTAL = "CAIXA POSTAL"
    NUMERO_ERRADO = "NÚMERO ERRADO / INEXISTENTE"
    CLIENTE_OCUPADO = "CLIENTE OCUPADO / RETORNAR DEPOIS"
    FORA_DE_AREA = "FORA DE ÁREA"
    RECUSOU_ATENDIMENTO = "RECUSOU ATENDIMENTO"

    @classmethod
    def from_string(cls, value: str) -> "MotivoPulo":
        """
        Converte string para enum.

        Aceita o nome ("CAIXA_POSTAL") ou o rótulo ("CAIXA POSTAL").

        Raises:
            ValueError: Se motivo fora do conjunto
        """
        try:
            return cls[value.strip().upper()]
        except KeyError:
            pass

        for motivo in cls:
            if motivo.value == value.strip().upper():
                return motivo

        raise ValueError(f"Motivo de pulo inválido: {value}")


class OperadorEventoTipo(Enum):
    """Eventos de ciclo de vida registrados por operador."""

    INICIAR_PROXIMO_ATENDIMENTO = "INICIAR_PROXIMO_ATENDIMENTO"
    PULAR_ATENDIMENTO = "PULAR_ATENDIMENTO"
    FINALIZAR_ATENDIMENTO = "FINALIZAR_ATENDIMENTO"


@dataclass
class TarefaEntity:
    """
    Entidade de Domínio: Tarefa de atendimento.

    Invariantes:
    - Exatamente um entre cliente_id e prospect_id
    - Terminal em CONCLUIDA ou PULADA
    - motivo_pulo só preenchido em PULADA

    Attributes:
        id: Identificador único
        operador_id: Operador designado
        tipo_chamada: Classificação da chamada
        prazo: Data limite para o contato
        cliente_id: Cliente a contatar
        prospect_id: Prospect a contatar
        status: Estado atual
        motivo_pulo: Motivo quando pulada
        criado_em: Entrada na fila (define a ordem de atendimento)
    """

    operador_id: str
    tipo_chamada: TipoChamada
    prazo: datetime
    cliente_id: Optional[str] = None
    prospect_id: Optional[str] = None
    status: TarefaStatus = TarefaStatus.PENDENTE
    motivo_pulo: Optional[MotivoPulo] = None
    criado_em: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def esta_pendente(self) -> bool:
        return self.status == TarefaStatus.PENDENTE

    def concluir(self) -> None:
        """
        Marca a tarefa como concluída.

        Raises:
            StateError: Se a tarefa já foi consumida
        """
        self._exigir_pendente()
        self.status = TarefaStatus.CONCLUIDA

    def pular(self, motivo: MotivoPulo) -> None:
        """
        Marca a tarefa como pulada com o motivo.

        Raises:
            StateError: Se a tarefa já foi consumida
        """
        self._exigir_pendente()
        self.status = TarefaStatus.PULADA
        self.motivo_pulo = motivo

    def _exigir_pendente(self) -> None:
        if not self.esta_pendente:
            raise StateError(
                f"Tarefa {self.id} já foi consumida",
                current_status=self.status.value,
            )


# Chaves reservadas no mapa de respostas do registro.
CHAVE_RELATO = "written_report"
CHAVE_TIPO_CHAMADA = "call_type"


@dataclass(frozen=True)
class RegistroChamadaEntity:
    """
    Registro imutável de uma chamada concluída.

    Attributes:
        tarefa_id: Tarefa consumida
        operador_id: Operador que atendeu
        tipo_chamada: Classificação da chamada
        inicio: Início da chamada (relógio de parede)
        fim: Envio do relatório
        duracao_chamada: Segundos em chamada
        duracao_relatorio: Segundos escrevendo o relatório
        respostas: Pares (pergunta_id, valor) na ordem do roteiro
        justificativas: Pares (pergunta_id, nota)
        resumo: Relato livre do operador
        cliente_id / prospect_id: Contato atendido
        protocolo_id: Protocolo aberto a partir da chamada
    """

    tarefa_id: str
    operador_id: str
    tipo_chamada: TipoChamada
    inicio: datetime
    fim: datetime
    duracao_chamada: int
    duracao_relatorio: int
    respostas: Tuple[Tuple[str, str], ...] = ()
    justificativas: Tuple[Tuple[str, str], ...] = ()
    resumo: str = ""
    cliente_id: Optional[str] = None
    prospect_id: Optional[str] = None
    protocolo_id: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_respostas_map(self) -> Dict[str, str]:
        """
        Mapa completo de respostas com as chaves reservadas.

        Inclui o relato livre em "written_report" e o tipo de chamada
        em "call_type".
        """
        mapa = dict(self.respostas)
        mapa[CHAVE_RELATO] = self.resumo
        mapa[CHAVE_TIPO_CHAMADA] = self.tipo_chamada.value
        return mapa
