"""
Mappers para conversão entre Entities (Core) e Models (Django)
do domínio de Atendimento.
"""

from src.core.atendimento.dtos import ContatoDTO
from src.core.atendimento.entities import (
    MotivoPulo,
    RegistroChamadaEntity,
    TarefaEntity,
    TarefaStatus,
)
from src.core.auditoria.entities import TipoChamada

from .models import ContatoModel, RegistroChamadaModel, TarefaModel


class TarefaMapper:
    @staticmethod
    def to_model(entity: TarefaEntity) -> TarefaModel:
        return TarefaModel(
            id=entity.id,
            operador_id=entity.operador_id,
            tipo_chamada=entity.tipo_chamada.value,
            prazo=entity.prazo,
            cliente_id=entity.cliente_id,
            prospect_id=entity.prospect_id,
            status=entity.status.value,
            motivo_pulo=entity.motivo_pulo.value if entity.motivo_pulo else None,
            criado_em=entity.criado_em,
        )

    @staticmethod
    def to_entity(model: TarefaModel) -> TarefaEntity:
        return TarefaEntity(
            id=model.id,
            operador_id=model.operador_id,
            tipo_chamada=TipoChamada(model.tipo_chamada),
            prazo=model.prazo,
            cliente_id=model.cliente_id,
            prospect_id=model.prospect_id,
            status=TarefaStatus(model.status),
            motivo_pulo=MotivoPulo(model.motivo_pulo) if model.motivo_pulo else None,
            criado_em=model.criado_em,
        )


class RegistroChamadaMapper:
    """
    Pares de respostas são gravados como listas JSON para preservar a
    ordem do roteiro.
    """

    @staticmethod
    def to_model(entity: RegistroChamadaEntity) -> RegistroChamadaModel:
        return RegistroChamadaModel(
            id=entity.id,
            tarefa_id=entity.tarefa_id,
            operador_id=entity.operador_id,
            tipo_chamada=entity.tipo_chamada.value,
            inicio=entity.inicio,
            fim=entity.fim,
            duracao_chamada=entity.duracao_chamada,
            duracao_relatorio=entity.duracao_relatorio,
            respostas=[list(par) for par in entity.respostas],
            justificativas=[list(par) for par in entity.justificativas],
            resumo=entity.resumo,
            cliente_id=entity.cliente_id,
            prospect_id=entity.prospect_id,
            protocolo_id=entity.protocolo_id,
        )

    @staticmethod
    def to_entity(model: RegistroChamadaModel) -> RegistroChamadaEntity:
        return RegistroChamadaEntity(
            id=model.id,
            tarefa_id=model.tarefa_id,
            operador_id=model.operador_id,
            tipo_chamada=TipoChamada(model.tipo_chamada),
            inicio=model.inicio,
            fim=model.fim,
            duracao_chamada=model.duracao_chamada,
            duracao_relatorio=model.duracao_relatorio,
            respostas=tuple((k, v) for k, v in model.respostas),
            justificativas=tuple((k, v) for k, v in model.justificativas),
            resumo=model.resumo,
            cliente_id=model.cliente_id,
            prospect_id=model.prospect_id,
            protocolo_id=model.protocolo_id,
        )


class ContatoMapper:
    @staticmethod
    def to_dto(model: ContatoModel) -> ContatoDTO:
        return ContatoDTO(
            id=model.id,
            tipo=model.tipo,
            nome=model.nome,
            telefone=model.telefone,
            endereco=model.endereco,
            itens=tuple(model.itens or ()),
        )
