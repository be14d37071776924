"""
Mappers para conversão entre Entities (Core) e Models (Django).

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
- Tratam apenas conversão de dados
"""

from typing import Iterable, List

from src.core.auditoria.entities import PerguntaAuditoria, TipoChamada
from src.core.operadores.entities import OperadorEntity, OperadorRole
from src.core.protocolos.entities import (
    ProtocoloEntity,
    ProtocoloEventoEntity,
    ProtocoloEventoTipo,
    ProtocoloPriority,
    ProtocoloStatus,
)

from .models import (
    OperadorModel,
    PerguntaAuditoriaModel,
    ProtocoloEventoModel,
    ProtocoloModel,
)


class ProtocoloMapper:
    """
    Mapper para conversão entre ProtocoloEntity e ProtocoloModel.

    - to_model(): Entity → Model
    - to_entity(): Model → Entity
    - to_fields(): colunas graváveis (usado no UPDATE condicional)
    """

    @staticmethod
    def to_fields(entity: ProtocoloEntity) -> dict:
        return {
            'numero': entity.numero,
            'cliente_id': entity.cliente_id,
            'prospect_id': entity.prospect_id,
            'aberto_por_id': entity.aberto_por_id,
            'responsavel_id': entity.responsavel_id,
            'departamento_id': entity.departamento_id,
            'titulo': entity.titulo,
            'descricao': entity.descricao,
            'status': entity.status.value,
            'prioridade': entity.prioridade.value,
            'aberto_em': entity.aberto_em,
            'atualizado_em': entity.atualizado_em,
            'sla_prazo': entity.sla_prazo,
            'fechado_em': entity.fechado_em,
            'resumo_resolucao': entity.resumo_resolucao,
            'origem_tipo_chamada': (
                entity.origem_tipo_chamada.value if entity.origem_tipo_chamada else None
            ),
            'versao': entity.versao,
        }

    @classmethod
    def to_model(cls, entity: ProtocoloEntity) -> ProtocoloModel:
        """
        Converte ProtocoloEntity para ProtocoloModel.

        Note:
            Não chama .save() - deixa isso para o Repository
        """
        return ProtocoloModel(id=entity.id, **cls.to_fields(entity))

    @staticmethod
    def to_entity(model: ProtocoloModel) -> ProtocoloEntity:
        """
        Converte ProtocoloModel para ProtocoloEntity.

        Note:
            Bypassa validações do factory method .criar()
            pois dados já foram validados na criação original
        """
        return ProtocoloEntity(
            id=model.id,
            numero=model.numero,
            cliente_id=model.cliente_id,
            prospect_id=model.prospect_id,
            aberto_por_id=model.aberto_por_id,
            responsavel_id=model.responsavel_id,
            departamento_id=model.departamento_id,
            titulo=model.titulo,
            descricao=model.descricao,
            prioridade=ProtocoloPriority(model.prioridade),
            status=ProtocoloStatus(model.status),
            aberto_em=model.aberto_em,
            atualizado_em=model.atualizado_em,
            sla_prazo=model.sla_prazo,
            fechado_em=model.fechado_em,
            resumo_resolucao=model.resumo_resolucao,
            origem_tipo_chamada=(
                TipoChamada(model.origem_tipo_chamada) if model.origem_tipo_chamada else None
            ),
            versao=model.versao,
        )

    @classmethod
    def to_entity_list(cls, models: Iterable[ProtocoloModel]) -> List[ProtocoloEntity]:
        return [cls.to_entity(m) for m in models]


class ProtocoloEventoMapper:
    """ProtocoloEventoEntity ↔ ProtocoloEventoModel. A sequência é o id do banco."""

    @staticmethod
    def to_model(entity: ProtocoloEventoEntity) -> ProtocoloEventoModel:
        return ProtocoloEventoModel(
            evento_id=entity.id,
            protocolo_id=entity.protocolo_id,
            tipo=entity.tipo.value,
            ator_id=entity.ator_id,
            criado_em=entity.criado_em,
            valor_antigo=entity.valor_antigo,
            valor_novo=entity.valor_novo,
            nota=entity.nota or '',
        )

    @staticmethod
    def to_entity(model: ProtocoloEventoModel) -> ProtocoloEventoEntity:
        return ProtocoloEventoEntity(
            id=model.evento_id,
            protocolo_id=model.protocolo_id,
            tipo=ProtocoloEventoTipo(model.tipo),
            ator_id=model.ator_id,
            criado_em=model.criado_em,
            valor_antigo=model.valor_antigo,
            valor_novo=model.valor_novo,
            nota=model.nota,
            sequencia=model.id,
        )


class OperadorMapper:
    @staticmethod
    def to_entity(model: OperadorModel) -> OperadorEntity:
        return OperadorEntity(
            id=model.id,
            nome=model.nome,
            papel=OperadorRole(model.papel),
            ativo=model.ativo,
        )


class PerguntaAuditoriaMapper:
    @staticmethod
    def to_entity(model: PerguntaAuditoriaModel) -> PerguntaAuditoria:
        return PerguntaAuditoria(
            id=model.id,
            texto=model.texto,
            opcoes=tuple(model.opcoes or ()),
            tipos=frozenset(model.tipos or ()),
            ordem=model.ordem,
            sensivel_upsell=model.sensivel_upsell,
            confirmacao_fechamento=model.confirmacao_fechamento,
            etapa=model.etapa,
        )

    @staticmethod
    def to_model(entity: PerguntaAuditoria) -> PerguntaAuditoriaModel:
        return PerguntaAuditoriaModel(
            id=entity.id,
            texto=entity.texto,
            opcoes=list(entity.opcoes),
            tipos=sorted(entity.tipos),
            ordem=entity.ordem,
            sensivel_upsell=entity.sensivel_upsell,
            confirmacao_fechamento=entity.confirmacao_fechamento,
            etapa=entity.etapa,
        )
