"""
Data Transfer Objects (DTOs) do Domínio de Atendimento.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from src.core.auditoria.entities import PerguntaAuditoria

from .entities import RegistroChamadaEntity, TarefaEntity


@dataclass(frozen=True)
class ContatoDTO:
    """
    Visão somente leitura do cliente ou prospect da tarefa.

    Attributes:
        id: Identificador do contato
        tipo: "cliente" ou "prospect"
        nome: Nome de exibição
        telefone: Telefone para discagem
        endereco: Endereço (pode estar vazio)
        itens: Equipamentos adquiridos (apenas clientes)
    """

    id: str
    tipo: str
    nome: str
    telefone: str = ""
    endereco: str = ""
    itens: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tipo": self.tipo,
            "nome": self.nome,
            "telefone": self.telefone,
            "endereco": self.endereco,
            "itens": list(self.itens),
        }


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class EscalonamentoInputDTO:
    """
    Pedido de abertura de protocolo junto com o envio do atendimento.

    Cliente/prospect e tipo de chamada vêm da tarefa; o operador que
    atende é quem abre.
    """

    titulo: str
    descricao: str
    departamento_id: str
    prioridade: str
    responsavel_id: Optional[str] = None


@dataclass(frozen=True)
class EnviarAtendimentoInputDTO:
    """
    Attributes:
        operador_id: Operador da sessão
        resumo: Relato livre (chave reservada written_report)
        escalonamento: Protocolo a abrir (opcional)
    """

    operador_id: str
    resumo: str = ""
    escalonamento: Optional[EscalonamentoInputDTO] = None


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class TarefaOutputDTO:
    id: str
    operador_id: str
    tipo_chamada: str
    prazo: datetime
    status: str
    cliente_id: Optional[str]
    prospect_id: Optional[str]
    motivo_pulo: Optional[str]

    @classmethod
    def from_entity(cls, entity: TarefaEntity) -> "TarefaOutputDTO":
        return cls(
            id=entity.id,
            operador_id=entity.operador_id,
            tipo_chamada=entity.tipo_chamada.value,
            prazo=entity.prazo,
            status=entity.status.value,
            cliente_id=entity.cliente_id,
            prospect_id=entity.prospect_id,
            motivo_pulo=entity.motivo_pulo.value if entity.motivo_pulo else None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "operador_id": self.operador_id,
            "tipo_chamada": self.tipo_chamada,
            "prazo": self.prazo.isoformat(),
            "status": self.status,
            "cliente_id": self.cliente_id,
            "prospect_id": self.prospect_id,
            "motivo_pulo": self.motivo_pulo,
        }


@dataclass
class PerguntaOutputDTO:
    id: str
    texto: str
    opcoes: List[str]
    ordem: int
    sensivel_upsell: bool
    etapa: Optional[str]

    @classmethod
    def from_entity(cls, pergunta: PerguntaAuditoria) -> "PerguntaOutputDTO":
        return cls(
            id=pergunta.id,
            texto=pergunta.texto,
            opcoes=list(pergunta.opcoes),
            ordem=pergunta.ordem,
            sensivel_upsell=pergunta.sensivel_upsell,
            etapa=pergunta.etapa,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "texto": self.texto,
            "opcoes": self.opcoes,
            "ordem": self.ordem,
            "sensivel_upsell": self.sensivel_upsell,
            "etapa": self.etapa,
        }


@dataclass
class SessaoOutputDTO:
    """
    Fotografia da sessão para a tela do operador.

    Attributes:
        estado: Valor do SessaoEstado
        decorrido: Segundos do cronômetro em exibição
        justificativas_pendentes: Perguntas de upsell ainda sem nota
    """

    operador_id: str
    estado: str
    tarefa: Optional[TarefaOutputDTO] = None
    contato: Optional[ContatoDTO] = None
    perguntas: List[PerguntaOutputDTO] = field(default_factory=list)
    respostas: Dict[str, str] = field(default_factory=dict)
    justificativas: Dict[str, str] = field(default_factory=dict)
    justificativas_pendentes: List[str] = field(default_factory=list)
    inicio: Optional[datetime] = None
    duracao_chamada: Optional[int] = None
    decorrido: int = 0

    def to_dict(self) -> dict:
        return {
            "operador_id": self.operador_id,
            "estado": self.estado,
            "tarefa": self.tarefa.to_dict() if self.tarefa else None,
            "contato": self.contato.to_dict() if self.contato else None,
            "perguntas": [p.to_dict() for p in self.perguntas],
            "respostas": dict(self.respostas),
            "justificativas": dict(self.justificativas),
            "justificativas_pendentes": list(self.justificativas_pendentes),
            "inicio": self.inicio.isoformat() if self.inicio else None,
            "duracao_chamada": self.duracao_chamada,
            "decorrido": self.decorrido,
        }


@dataclass
class RegistroChamadaOutputDTO:
    id: str
    tarefa_id: str
    operador_id: str
    tipo_chamada: str
    inicio: datetime
    fim: datetime
    duracao_chamada: int
    duracao_relatorio: int
    respostas: Dict[str, str]
    justificativas: Dict[str, str]
    cliente_id: Optional[str]
    prospect_id: Optional[str]
    protocolo_id: Optional[str]
    protocolo_numero: Optional[str] = None

    @classmethod
    def from_entity(
        cls,
        entity: RegistroChamadaEntity,
        protocolo_numero: Optional[str] = None,
    ) -> "RegistroChamadaOutputDTO":
        return cls(
            id=entity.id,
            tarefa_id=entity.tarefa_id,
            operador_id=entity.operador_id,
            tipo_chamada=entity.tipo_chamada.value,
            inicio=entity.inicio,
            fim=entity.fim,
            duracao_chamada=entity.duracao_chamada,
            duracao_relatorio=entity.duracao_relatorio,
            respostas=entity.to_respostas_map(),
            justificativas=dict(entity.justificativas),
            cliente_id=entity.cliente_id,
            prospect_id=entity.prospect_id,
            protocolo_id=entity.protocolo_id,
            protocolo_numero=protocolo_numero,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tarefa_id": self.tarefa_id,
            "operador_id": self.operador_id,
            "tipo_chamada": self.tipo_chamada,
            "inicio": self.inicio.isoformat(),
            "fim": self.fim.isoformat(),
            "duracao_chamada": self.duracao_chamada,
            "duracao_relatorio": self.duracao_relatorio,
            "respostas": dict(self.respostas),
            "justificativas": dict(self.justificativas),
            "cliente_id": self.cliente_id,
            "prospect_id": self.prospect_id,
            "protocolo_id": self.protocolo_id,
            "protocolo_numero": self.protocolo_numero,
        }
