"""
Repositórios Django do domínio de Protocolos.

Implementam as interfaces (Ports) definidas no Core.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Responsabilidades:
- Mapear entities para models e vice-versa
- Executar queries no banco via ORM
- Traduzir DatabaseError em PersistenceError

Princípios:
- Repository não contém lógica de negócio
- Usa Mapper para conversões
"""

from dataclasses import replace
from typing import List, Optional
import logging

from django.db.models import Q

from src.core.auditoria.entities import PerguntaAuditoria, TipoChamada
from src.core.operadores.entities import OperadorEntity
from src.core.protocolos.dtos import FiltroProtocolos
from src.core.protocolos.entities import (
    ProtocoloEntity,
    ProtocoloEventoEntity,
    ProtocoloStatus,
)
from src.core.shared.exceptions import ConcurrencyError, EntityNotFoundError

from ..shared.persistence import traduzir_erros_de_banco
from .mappers import (
    OperadorMapper,
    PerguntaAuditoriaMapper,
    ProtocoloEventoMapper,
    ProtocoloMapper,
)
from .models import (
    OperadorModel,
    PerguntaAuditoriaModel,
    ProtocoloEventoModel,
    ProtocoloModel,
)

logger = logging.getLogger(__name__)


class DjangoProtocoloRepository:
    """
    Implementação Django do ProtocoloRepository.

    A gravação de transições é um único UPDATE filtrado por id, status
    e versão lidos: se outra operação gravou antes, nenhuma linha é
    afetada e a transição falha com ConcurrencyError.

    Example:
        repo = DjangoProtocoloRepository()
        repo.add(protocolo)
        protocolo = repo.get_by_id_ou_numero("PRX7K2Q")
    """

    def __init__(self):
        self._mapper = ProtocoloMapper()

    @traduzir_erros_de_banco
    def add(self, protocolo: ProtocoloEntity) -> None:
        logger.debug(f"Saving protocolo: {protocolo.numero}")
        self._mapper.to_model(protocolo).save(force_insert=True)

    @traduzir_erros_de_banco
    def update(
        self,
        protocolo: ProtocoloEntity,
        status_esperado: ProtocoloStatus,
        versao_esperada: int,
    ) -> None:
        """
        Raises:
            EntityNotFoundError: Se o protocolo não existe
            ConcurrencyError: Se status ou versão mudaram desde a leitura
        """
        campos = self._mapper.to_fields(protocolo)
        campos['versao'] = versao_esperada + 1

        linhas = ProtocoloModel.objects.filter(
            id=protocolo.id,
            status=status_esperado.value,
            versao=versao_esperada,
        ).update(**campos)

        if linhas == 0:
            atual = ProtocoloModel.objects.filter(id=protocolo.id).values('status').first()
            if atual is None:
                raise EntityNotFoundError(
                    f"Protocolo {protocolo.id} não encontrado",
                    entity_type="Protocolo",
                    entity_id=protocolo.id,
                )
            raise ConcurrencyError(
                f"Protocolo {protocolo.numero} foi alterado por outra operação",
                current_status=atual['status'],
            )

        protocolo.versao = versao_esperada + 1

    @traduzir_erros_de_banco
    def get_by_id_ou_numero(self, referencia: str) -> Optional[ProtocoloEntity]:
        if not referencia:
            return None

        model = ProtocoloModel.objects.filter(
            Q(id=referencia) | Q(numero=referencia.strip().upper())
        ).first()

        if model is None:
            logger.debug(f"Protocolo not found: {referencia}")
            return None
        return self._mapper.to_entity(model)

    @traduzir_erros_de_banco
    def list(self, filtro: FiltroProtocolos) -> List[ProtocoloEntity]:
        qs = ProtocoloModel.objects.all()

        if filtro.status:
            qs = qs.filter(status=filtro.status.value)
        if filtro.departamento_id:
            qs = qs.filter(departamento_id=filtro.departamento_id)
        if filtro.responsavel_id:
            qs = qs.filter(responsavel_id=filtro.responsavel_id)
        if filtro.visivel_para:
            qs = qs.filter(
                Q(responsavel_id=filtro.visivel_para) | Q(aberto_por_id=filtro.visivel_para)
            )
        if filtro.busca:
            termo = filtro.busca.strip()
            qs = qs.filter(Q(titulo__icontains=termo) | Q(numero__icontains=termo))

        return self._mapper.to_entity_list(qs)

    @traduzir_erros_de_banco
    def exists_numero(self, numero: str) -> bool:
        return ProtocoloModel.objects.filter(numero=numero).exists()


class DjangoProtocoloEventoRepository:
    """Histórico append-only: só INSERT e SELECT."""

    @traduzir_erros_de_banco
    def append(self, evento: ProtocoloEventoEntity) -> ProtocoloEventoEntity:
        model = ProtocoloEventoMapper.to_model(evento)
        model.save(force_insert=True)
        return replace(evento, sequencia=model.id)

    @traduzir_erros_de_banco
    def list_by_protocolo(self, protocolo_id: str) -> List[ProtocoloEventoEntity]:
        models = ProtocoloEventoModel.objects.filter(
            protocolo_id=protocolo_id
        ).order_by('criado_em', 'id')
        return [ProtocoloEventoMapper.to_entity(m) for m in models]


class DjangoOperadorRepository:
    @traduzir_erros_de_banco
    def get_by_id(self, operador_id: str) -> Optional[OperadorEntity]:
        model = OperadorModel.objects.filter(id=operador_id).first()
        return OperadorMapper.to_entity(model) if model else None

    @traduzir_erros_de_banco
    def list_ativos(self) -> List[OperadorEntity]:
        return [OperadorMapper.to_entity(m) for m in OperadorModel.objects.filter(ativo=True)]


class DjangoPerguntaAuditoriaRepository:
    """
    Catálogo lido do banco a cada consulta.

    O filtro por tipo é feito em Python: o catálogo é pequeno e a
    consulta em JSONField varia entre bancos.
    """

    @traduzir_erros_de_banco
    def list_by_tipo_chamada(self, tipo: Optional[TipoChamada]) -> List[PerguntaAuditoria]:
        perguntas = [
            PerguntaAuditoriaMapper.to_entity(m)
            for m in PerguntaAuditoriaModel.objects.filter(ativa=True)
        ]
        return sorted(
            (p for p in perguntas if p.aplica_a(tipo)),
            key=lambda p: (p.ordem, p.id),
        )

    @traduzir_erros_de_banco
    def add(self, pergunta: PerguntaAuditoria) -> None:
        PerguntaAuditoriaMapper.to_model(pergunta).save()
