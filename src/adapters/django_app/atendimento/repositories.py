"""
Repositórios Django do domínio de Atendimento.

Implementam TarefaRepository, RegistroChamadaRepository,
ContatoRepository e OperadorEventoLogger definidos no Core.
"""

from typing import List, Optional
import logging

from src.core.atendimento.dtos import ContatoDTO
from src.core.atendimento.entities import (
    OperadorEventoTipo,
    RegistroChamadaEntity,
    TarefaEntity,
    TarefaStatus,
)
from src.core.shared.exceptions import ConcurrencyError, EntityNotFoundError

from ..shared.persistence import traduzir_erros_de_banco
from .mappers import ContatoMapper, RegistroChamadaMapper, TarefaMapper
from .models import (
    ContatoModel,
    ContatoTipoChoices,
    OperadorEventoModel,
    RegistroChamadaModel,
    TarefaModel,
)

logger = logging.getLogger(__name__)


class DjangoTarefaRepository:
    """
    Fila de tarefas sobre o ORM.

    Conclusão e pulo são um UPDATE filtrado pelo status lido: uma
    tarefa nunca é consumida duas vezes.
    """

    @traduzir_erros_de_banco
    def add(self, tarefa: TarefaEntity) -> None:
        TarefaMapper.to_model(tarefa).save(force_insert=True)

    @traduzir_erros_de_banco
    def get_pending_for_operador(self, operador_id: str) -> Optional[TarefaEntity]:
        model = TarefaModel.objects.filter(
            operador_id=operador_id,
            status=TarefaStatus.PENDENTE.value,
        ).order_by('criado_em', 'id').first()
        return TarefaMapper.to_entity(model) if model else None

    @traduzir_erros_de_banco
    def get_by_id(self, tarefa_id: str) -> Optional[TarefaEntity]:
        model = TarefaModel.objects.filter(id=tarefa_id).first()
        return TarefaMapper.to_entity(model) if model else None

    @traduzir_erros_de_banco
    def update(self, tarefa: TarefaEntity, status_esperado: TarefaStatus) -> None:
        linhas = TarefaModel.objects.filter(
            id=tarefa.id,
            status=status_esperado.value,
        ).update(
            status=tarefa.status.value,
            motivo_pulo=tarefa.motivo_pulo.value if tarefa.motivo_pulo else None,
        )

        if linhas == 0:
            atual = TarefaModel.objects.filter(id=tarefa.id).values('status').first()
            if atual is None:
                raise EntityNotFoundError(
                    f"Tarefa {tarefa.id} não encontrada",
                    entity_type="Tarefa",
                    entity_id=tarefa.id,
                )
            raise ConcurrencyError(
                f"Tarefa {tarefa.id} foi alterada por outra operação",
                current_status=atual['status'],
            )


class DjangoRegistroChamadaRepository:
    @traduzir_erros_de_banco
    def add(self, registro: RegistroChamadaEntity) -> None:
        RegistroChamadaMapper.to_model(registro).save(force_insert=True)

    @traduzir_erros_de_banco
    def list(
        self,
        operador_id: Optional[str] = None,
        tarefa_id: Optional[str] = None,
    ) -> List[RegistroChamadaEntity]:
        qs = RegistroChamadaModel.objects.all()
        if operador_id:
            qs = qs.filter(operador_id=operador_id)
        if tarefa_id:
            qs = qs.filter(tarefa_id=tarefa_id)
        return [RegistroChamadaMapper.to_entity(m) for m in qs.order_by('-fim')]


class DjangoContatoRepository:
    @traduzir_erros_de_banco
    def get_cliente(self, cliente_id: str) -> Optional[ContatoDTO]:
        return self._get(cliente_id, ContatoTipoChoices.CLIENTE)

    @traduzir_erros_de_banco
    def get_prospect(self, prospect_id: str) -> Optional[ContatoDTO]:
        return self._get(prospect_id, ContatoTipoChoices.PROSPECT)

    def _get(self, contato_id: str, tipo: str) -> Optional[ContatoDTO]:
        model = ContatoModel.objects.filter(id=contato_id, tipo=tipo).first()
        return ContatoMapper.to_dto(model) if model else None


class DjangoOperadorEventoLogger:
    """Grava eventos de operador; o fluxo trata falhas como não fatais."""

    @traduzir_erros_de_banco
    def registrar(
        self,
        operador_id: str,
        tipo: OperadorEventoTipo,
        tarefa_id: Optional[str] = None,
        detalhe: Optional[str] = None,
    ) -> None:
        OperadorEventoModel.objects.create(
            operador_id=operador_id,
            tipo=tipo.value,
            tarefa_id=tarefa_id,
            detalhe=detalhe,
        )
        logger.debug(f"Evento de operador {tipo.value} para {operador_id}")
