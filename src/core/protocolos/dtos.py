"""
Data Transfer Objects (DTOs) do Domínio de Protocolos.

Tipos de DTOs:
- Input DTOs: Dados de entrada das transições (vindos da API)
- Output DTOs: Formatação de protocolo e histórico para resposta
- Query DTOs: Filtros de listagem

O ator nunca traz papel nos DTOs: apenas o ID, que é resolvido no
cadastro de operadores dentro do use case.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from .entities import ProtocoloEntity, ProtocoloEventoEntity, ProtocoloStatus


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CriarProtocoloInputDTO:
    """
    DTO de entrada para abrir protocolo.

    Attributes:
        ator_id: Operador que abre
        titulo: Título
        descricao: Descrição
        departamento_id: Setor responsável
        prioridade: Nome ou valor da prioridade ("ALTA" ou "Alta")
        cliente_id: Cliente vinculado (exclusivo com prospect_id)
        prospect_id: Prospect vinculado
        responsavel_id: Responsável explícito (padrão: ator)
        origem_tipo_chamada: Tipo da chamada de origem
    """

    ator_id: str
    titulo: str
    descricao: str
    departamento_id: str
    prioridade: str
    cliente_id: Optional[str] = None
    prospect_id: Optional[str] = None
    responsavel_id: Optional[str] = None
    origem_tipo_chamada: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "ator_id": self.ator_id,
            "titulo": self.titulo,
            "descricao": self.descricao,
            "departamento_id": self.departamento_id,
            "prioridade": self.prioridade,
            "cliente_id": self.cliente_id,
            "prospect_id": self.prospect_id,
            "responsavel_id": self.responsavel_id,
            "origem_tipo_chamada": self.origem_tipo_chamada,
        }


@dataclass(frozen=True)
class TransicaoProtocoloInputDTO:
    """
    DTO genérico das transições sem dados extras (iniciar, aprovar,
    retomar).

    Attributes:
        protocolo_ref: ID ou número do protocolo
        ator_id: Operador que executa
    """

    protocolo_ref: str
    ator_id: str


@dataclass(frozen=True)
class SubmeterResolucaoInputDTO:
    """
    DTO de entrada para submeter resolução.

    Attributes:
        protocolo_ref: ID ou número do protocolo
        ator_id: Responsável
        resumo: Resumo livre da resolução
        respostas: Respostas do checklist (pergunta_id -> valor)
    """

    protocolo_ref: str
    ator_id: str
    resumo: str
    respostas: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RejeitarResolucaoInputDTO:
    protocolo_ref: str
    ator_id: str
    motivo: str


@dataclass(frozen=True)
class AdicionarNotaInputDTO:
    protocolo_ref: str
    ator_id: str
    texto: str


@dataclass(frozen=True)
class ReatribuirProtocoloInputDTO:
    """
    DTO de entrada para reatribuir protocolo.

    Attributes:
        protocolo_ref: ID ou número do protocolo
        ator_id: Administrador que reatribui
        novo_responsavel_id: Operador ativo que assume
    """

    protocolo_ref: str
    ator_id: str
    novo_responsavel_id: str


@dataclass(frozen=True)
class AguardarProtocoloInputDTO:
    """
    Attributes:
        destino: "AGUARDANDO_SETOR" ou "AGUARDANDO_CLIENTE"
        nota: Observação opcional registrada no histórico
    """

    protocolo_ref: str
    ator_id: str
    destino: str
    nota: str = ""


@dataclass(frozen=True)
class ReabrirProtocoloInputDTO:
    protocolo_ref: str
    ator_id: str
    motivo: str = ""


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class ProtocoloOutputDTO:
    """
    DTO de saída completo com dados do protocolo.

    esta_atrasado é calculado no momento da leitura com o relógio
    injetado; atraso nunca é um status.
    """

    id: str
    numero: str
    cliente_id: Optional[str]
    prospect_id: Optional[str]
    aberto_por_id: str
    responsavel_id: str
    departamento_id: str
    titulo: str
    descricao: str
    prioridade: str
    status: str
    aberto_em: datetime
    atualizado_em: datetime
    sla_prazo: Optional[datetime]
    fechado_em: Optional[datetime]
    resumo_resolucao: Optional[str]
    origem_tipo_chamada: Optional[str]
    versao: int
    esta_atrasado: bool

    @classmethod
    def from_entity(cls, entity: ProtocoloEntity, agora: datetime) -> "ProtocoloOutputDTO":
        """
        Factory method para converter entidade em DTO.

        Args:
            entity: Protocolo
            agora: Momento de referência para o cálculo de atraso
        """
        return cls(
            id=entity.id,
            numero=entity.numero,
            cliente_id=entity.cliente_id,
            prospect_id=entity.prospect_id,
            aberto_por_id=entity.aberto_por_id,
            responsavel_id=entity.responsavel_id,
            departamento_id=entity.departamento_id,
            titulo=entity.titulo,
            descricao=entity.descricao,
            prioridade=entity.prioridade.value,
            status=entity.status.value,
            aberto_em=entity.aberto_em,
            atualizado_em=entity.atualizado_em,
            sla_prazo=entity.sla_prazo,
            fechado_em=entity.fechado_em,
            resumo_resolucao=entity.resumo_resolucao,
            origem_tipo_chamada=(
                entity.origem_tipo_chamada.value if entity.origem_tipo_chamada else None
            ),
            versao=entity.versao,
            esta_atrasado=entity.esta_atrasado(agora),
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "numero": self.numero,
            "cliente_id": self.cliente_id,
            "prospect_id": self.prospect_id,
            "aberto_por_id": self.aberto_por_id,
            "responsavel_id": self.responsavel_id,
            "departamento_id": self.departamento_id,
            "titulo": self.titulo,
            "descricao": self.descricao,
            "prioridade": self.prioridade,
            "status": self.status,
            "aberto_em": self.aberto_em.isoformat(),
            "atualizado_em": self.atualizado_em.isoformat(),
            "sla_prazo": self.sla_prazo.isoformat() if self.sla_prazo else None,
            "fechado_em": self.fechado_em.isoformat() if self.fechado_em else None,
            "resumo_resolucao": self.resumo_resolucao,
            "origem_tipo_chamada": self.origem_tipo_chamada,
            "versao": self.versao,
            "esta_atrasado": self.esta_atrasado,
        }


@dataclass
class ProtocoloEventoOutputDTO:
    """Item do histórico formatado para resposta."""

    id: str
    protocolo_id: str
    tipo: str
    ator_id: str
    criado_em: datetime
    valor_antigo: Optional[str]
    valor_novo: Optional[str]
    nota: str

    @classmethod
    def from_entity(cls, entity: ProtocoloEventoEntity) -> "ProtocoloEventoOutputDTO":
        return cls(
            id=entity.id,
            protocolo_id=entity.protocolo_id,
            tipo=entity.tipo.value,
            ator_id=entity.ator_id,
            criado_em=entity.criado_em,
            valor_antigo=entity.valor_antigo,
            valor_novo=entity.valor_novo,
            nota=entity.nota,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "protocolo_id": self.protocolo_id,
            "tipo": self.tipo,
            "ator_id": self.ator_id,
            "criado_em": self.criado_em.isoformat(),
            "valor_antigo": self.valor_antigo,
            "valor_novo": self.valor_novo,
            "nota": self.nota,
        }


@dataclass
class EstatisticasOutputDTO:
    """
    Contagens para o painel de protocolos.

    Attributes:
        por_status: Valor exibido do status -> quantidade
        atrasados: Protocolos fora do SLA (não fechados)
        total: Total visível
    """

    por_status: Dict[str, int] = field(default_factory=dict)
    atrasados: int = 0
    total: int = 0

    def to_dict(self) -> dict:
        return {
            "por_status": dict(self.por_status),
            "atrasados": self.atrasados,
            "total": self.total,
        }


# =============================================================================
# QUERY DTOs (Filtros de Busca)
# =============================================================================

@dataclass(frozen=True)
class ListarProtocolosQueryDTO:
    """
    Parâmetros de busca/filtro de protocolos.

    A visibilidade por ator é aplicada pelo use case, não pelo filtro.

    Attributes:
        status: Filtrar por status (nome ou valor)
        departamento_id: Filtrar por setor
        responsavel_id: Filtrar por responsável
        busca: Texto livre em título e número
        apenas_atrasados: Apenas fora do SLA
    """

    status: Optional[str] = None
    departamento_id: Optional[str] = None
    responsavel_id: Optional[str] = None
    busca: Optional[str] = None
    apenas_atrasados: bool = False

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "departamento_id": self.departamento_id,
            "responsavel_id": self.responsavel_id,
            "busca": self.busca,
            "apenas_atrasados": self.apenas_atrasados,
        }


@dataclass(frozen=True)
class FiltroProtocolos:
    """
    Filtro já normalizado entregue ao repositório.

    Attributes:
        status: Status convertido para enum (ou None)
        visivel_para: Restringe a protocolos que o operador abriu ou conduz
    """

    status: Optional[ProtocoloStatus] = None
    departamento_id: Optional[str] = None
    responsavel_id: Optional[str] = None
    busca: Optional[str] = None
    visivel_para: Optional[str] = None

