"""
Estado da sessão de atendimento de um operador.

A sessão é um valor simples e serializável: o fluxo a lê do
SessaoStore no início de cada operação e grava de volta ao final, o
que permite mantê-la no cache do Django entre requisições.

Estados:
    OCIOSA → PRONTA → EM_CHAMADA → RELATORIO → ENVIADA
               │
               └──→ PULADA

ENVIADA e PULADA são passagens: a sessão é zerada e a próxima tarefa
carregada na mesma operação.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Tuple

from src.core.auditoria.entities import PerguntaAuditoria

from .cronometro import Cronometro
from .dtos import ContatoDTO
from .entities import TarefaEntity


class SessaoEstado(Enum):
    OCIOSA = "idle"
    PRONTA = "ready"
    EM_CHAMADA = "in_call"
    RELATORIO = "reporting"
    ENVIADA = "submitted"
    PULADA = "skipped"


ESTADOS_COM_TAREFA_ATIVA = {
    SessaoEstado.PRONTA,
    SessaoEstado.EM_CHAMADA,
    SessaoEstado.RELATORIO,
}


@dataclass
class SessaoAtendimento:
    """
    Attributes:
        operador_id: Dono da sessão
        estado: Estado atual
        tarefa: Tarefa ativa (lida do repositório ao carregar)
        contato: Visão do contato da tarefa
        perguntas: Roteiro do tipo de chamada
        respostas: pergunta_id -> valor
        justificativas: pergunta_id -> nota
        inicio: Início da chamada (relógio de parede)
        fim_chamada: Fim da chamada (relógio de parede)
        cronometro_chamada: Tempo em chamada
        cronometro_relatorio: Tempo escrevendo o relatório
        processando_desde: Início do envio em andamento (bloqueia
            reentrada até expirar)
    """

    operador_id: str
    estado: SessaoEstado = SessaoEstado.OCIOSA
    tarefa: Optional[TarefaEntity] = None
    contato: Optional[ContatoDTO] = None
    perguntas: Tuple[PerguntaAuditoria, ...] = ()
    respostas: Dict[str, str] = field(default_factory=dict)
    justificativas: Dict[str, str] = field(default_factory=dict)
    inicio: Optional[datetime] = None
    fim_chamada: Optional[datetime] = None
    cronometro_chamada: Cronometro = field(default_factory=Cronometro)
    cronometro_relatorio: Cronometro = field(default_factory=Cronometro)
    processando_desde: Optional[datetime] = None

    @property
    def tem_tarefa_ativa(self) -> bool:
        return self.estado in ESTADOS_COM_TAREFA_ATIVA

    def envio_em_andamento(self, agora: datetime, limite: timedelta) -> bool:
        """
        Bloqueio de envio ainda válido.

        Um bloqueio mais velho que o limite pertence a um processo que
        morreu antes de liberá-lo e não vale mais.
        """
        if self.processando_desde is None:
            return False
        return agora - self.processando_desde < limite

    def pergunta(self, pergunta_id: str) -> Optional[PerguntaAuditoria]:
        return next((p for p in self.perguntas if p.id == pergunta_id), None)

    def justificativas_pendentes(self) -> List[str]:
        """Perguntas de upsell respondidas sem nota pareada."""
        return [
            p.id for p in self.perguntas
            if p.sensivel_upsell
            and self.respostas.get(p.id)
            and not self.justificativas.get(p.id, "").strip()
        ]

    def respostas_ordenadas(self) -> Tuple[Tuple[str, str], ...]:
        """Respostas na ordem do roteiro."""
        return tuple(
            (p.id, self.respostas[p.id]) for p in self.perguntas if p.id in self.respostas
        )

    def justificativas_preenchidas(self) -> Tuple[Tuple[str, str], ...]:
        return tuple(
            (p.id, self.justificativas[p.id].strip())
            for p in self.perguntas
            if self.justificativas.get(p.id, "").strip()
        )

    def resetar(self) -> None:
        """Descarta tudo que pertence à tarefa atual."""
        self.estado = SessaoEstado.OCIOSA
        self.tarefa = None
        self.contato = None
        self.perguntas = ()
        self.respostas = {}
        self.justificativas = {}
        self.inicio = None
        self.fim_chamada = None
        self.cronometro_chamada = Cronometro()
        self.cronometro_relatorio = Cronometro()
        self.processando_desde = None
