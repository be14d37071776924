"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers são executados de forma assíncrona via Celery quando
Domain Events são publicados (após o commit da transição). Isso permite:

- Desacoplamento: Produtores não conhecem consumidores
- Escalabilidade: Processamento distribuído em workers
- Resiliência: Retry automático em falhas

Nenhum handler altera o estado de um protocolo: o vencimento de SLA é
apenas informativo e a tarefa agendada só notifica.

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        dados = event_data.get('data', {})
"""

import logging
from datetime import timedelta
from typing import Dict, Any

from celery import shared_task
from django.utils import timezone

from src.core.protocolos.entities import ProtocoloStatus

logger = logging.getLogger(__name__)


def _dados(event_data: Dict[str, Any]) -> Dict[str, Any]:
    return event_data.get('data') or {}


# =============================================================================
# Event Handlers - Protocolos
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=(Exception,),
    acks_late=True,
)
def handle_protocolo_criado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para ProtocoloCriadoEvent.

    Ações:
    - Notificar responsável (quando não é quem abriu)
    - Alertar supervisão em prioridade Alta
    - Registrar métrica de abertura
    """
    protocolo_id = event_data.get('aggregate_id')
    dados = _dados(event_data)
    numero = dados.get('numero')
    prioridade = dados.get('prioridade', '')
    responsavel_id = dados.get('responsavel_id')

    logger.info(
        f"[HANDLER] ProtocoloCriado: {numero} | "
        f"Responsável: {responsavel_id} | Prioridade: {prioridade}"
    )

    if responsavel_id and responsavel_id != dados.get('aberto_por_id'):
        notify_user.delay(
            user_id=responsavel_id,
            message=f"Protocolo {numero} atribuído a você",
        )

    if prioridade == 'Alta':
        notify_supervisao.delay(
            protocolo_id=protocolo_id,
            message=f"Protocolo {numero} aberto com prioridade Alta",
        )

    record_metric.delay(
        metric_name='protocolos_abertos',
        value=1,
        tags={
            'prioridade': prioridade,
            'origem': dados.get('origem_tipo_chamada') or 'manual',
        }
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_protocolo_status_alterado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para ProtocoloStatusAlteradoEvent.

    Ações:
    - Resolução submetida: avisar gestores que há aprovação pendente
    - Resolução rejeitada: avisar o responsável
    - Fechamento e reabertura: métricas
    """
    protocolo_id = event_data.get('aggregate_id')
    dados = _dados(event_data)
    numero = dados.get('numero')
    anterior = dados.get('status_anterior')
    novo = dados.get('status_novo')

    logger.info(f"[HANDLER] ProtocoloStatusAlterado: {numero} | {anterior} -> {novo}")

    if novo == ProtocoloStatus.RESOLVIDO_PENDENTE.value:
        notify_supervisao.delay(
            protocolo_id=protocolo_id,
            message=f"Protocolo {numero} aguardando aprovação",
        )
    elif (
        anterior == ProtocoloStatus.RESOLVIDO_PENDENTE.value
        and novo == ProtocoloStatus.EM_ANDAMENTO.value
    ):
        notify_user.delay(
            user_id=dados.get('responsavel_id'),
            message=f"Resolução do protocolo {numero} rejeitada: {dados.get('nota', '')}",
        )
    elif novo == ProtocoloStatus.FECHADO.value:
        record_metric.delay(metric_name='protocolos_fechados', value=1, tags={})
    elif novo == ProtocoloStatus.REABERTO.value:
        record_metric.delay(metric_name='protocolos_reabertos', value=1, tags={})


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_protocolo_reatribuido(self, event_data: Dict[str, Any]) -> None:
    """Handler para ProtocoloReatribuidoEvent: notifica o novo responsável."""
    dados = _dados(event_data)
    numero = dados.get('numero')
    novo = dados.get('responsavel_novo_id')

    logger.info(
        f"[HANDLER] ProtocoloReatribuido: {numero} | "
        f"{dados.get('responsavel_anterior_id')} -> {novo}"
    )

    notify_user.delay(
        user_id=novo,
        message=f"Protocolo {numero} reatribuído a você",
    )


@shared_task(bind=True, max_retries=3, default_retry_delay=60, acks_late=True)
def handle_protocolo_nota_adicionada(self, event_data: Dict[str, Any]) -> None:
    """Handler para ProtocoloNotaAdicionadaEvent."""
    dados = _dados(event_data)
    responsavel_id = dados.get('responsavel_id')

    if responsavel_id and responsavel_id != dados.get('ator_id'):
        notify_user.delay(
            user_id=responsavel_id,
            message=f"Nova nota no protocolo {dados.get('numero')}",
        )


# =============================================================================
# Event Handlers - Atendimento
# =============================================================================

@shared_task(bind=True, ignore_result=True)
def handle_atendimento_finalizado(self, event_data: Dict[str, Any]) -> None:
    """Métricas de duração de chamada e de relatório."""
    dados = _dados(event_data)
    tags = {'tipo_chamada': dados.get('tipo_chamada', '')}

    record_metric.delay(
        metric_name='atendimento_duracao_chamada',
        value=dados.get('duracao_chamada', 0),
        tags=tags,
    )
    record_metric.delay(
        metric_name='atendimento_duracao_relatorio',
        value=dados.get('duracao_relatorio', 0),
        tags=tags,
    )
    if dados.get('protocolo_id'):
        record_metric.delay(metric_name='atendimentos_escalonados', value=1, tags=tags)


@shared_task(bind=True, ignore_result=True)
def handle_atendimento_pulado(self, event_data: Dict[str, Any]) -> None:
    dados = _dados(event_data)
    record_metric.delay(
        metric_name='atendimentos_pulados',
        value=1,
        tags={'motivo': dados.get('motivo', '')},
    )


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

HANDLERS = {
    'ProtocoloCriadoEvent': handle_protocolo_criado,
    'ProtocoloStatusAlteradoEvent': handle_protocolo_status_alterado,
    'ProtocoloReatribuidoEvent': handle_protocolo_reatribuido,
    'ProtocoloNotaAdicionadaEvent': handle_protocolo_nota_adicionada,
    'AtendimentoFinalizadoEvent': handle_atendimento_finalizado,
    'AtendimentoPuladoEvent': handle_atendimento_pulado,
}


@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> None:
    """
    Dispatcher central para Domain Events.

    Args:
        event_type: Tipo do evento (ex: 'ProtocoloCriadoEvent')
        event_data: Evento serializado por DomainEvent.to_dict()
    """
    handler = HANDLERS.get(event_type)

    if handler:
        logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
        handler.delay(event_data)
    else:
        logger.warning(f"[DISPATCHER] Handler não encontrado para {event_type}")


# =============================================================================
# Notification Tasks
# =============================================================================

@shared_task(bind=True, max_retries=3, default_retry_delay=120)
def notify_user(self, user_id: str, message: str, channel: str = 'email') -> None:
    """Notifica operador pelo canal especificado."""
    logger.info(f"[NOTIFICATION] {channel.upper()} para {user_id}: {message}")


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def notify_supervisao(self, protocolo_id: str, message: str) -> None:
    """Notifica os operadores administrativos ativos."""
    from src.config.container import get_container

    operadores = get_container().operador_repository().list_ativos()
    for operador in operadores:
        if operador.e_administrador:
            notify_user.delay(user_id=operador.id, message=message)

    logger.info(f"[NOTIFICATION] Supervisão: protocolo {protocolo_id} - {message}")


# =============================================================================
# Metric Tasks
# =============================================================================

@shared_task(bind=True, ignore_result=True)
def record_metric(self, metric_name: str, value: float, tags: Dict[str, str] = None) -> None:
    """Registra métrica para monitoramento."""
    logger.info(f"[METRIC] {metric_name}={value} | tags={tags or {}}")


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

@shared_task(bind=True)
def verificar_protocolos_atrasados(self) -> int:
    """
    Relata protocolos com SLA vencido aos responsáveis.

    Executada periodicamente pelo Celery Beat. Não muda status.

    Returns:
        Número de protocolos atrasados encontrados
    """
    from src.config.container import get_container
    from src.core.protocolos.dtos import FiltroProtocolos

    container = get_container()
    agora = container.clock().agora()
    protocolos = container.protocolo_repository().list(FiltroProtocolos())
    atrasados = [p for p in protocolos if p.esta_atrasado(agora)]

    logger.info(f"[SCHEDULED] Encontrados {len(atrasados)} protocolos atrasados")

    for protocolo in atrasados:
        notify_user.delay(
            user_id=protocolo.responsavel_id,
            message=f"Protocolo {protocolo.numero} com SLA vencido",
        )

    record_metric.delay(metric_name='protocolos_atrasados', value=len(atrasados), tags={})
    return len(atrasados)


@shared_task(bind=True)
def gerar_relatorio_diario(self) -> Dict[str, Any]:
    """Contagens por status e atrasos, para o e-mail diário da supervisão."""
    from src.config.container import get_container
    from src.core.protocolos.dtos import FiltroProtocolos

    container = get_container()
    agora = container.clock().agora()
    protocolos = container.protocolo_repository().list(FiltroProtocolos())

    por_status = {status.value: 0 for status in ProtocoloStatus}
    for protocolo in protocolos:
        por_status[protocolo.status.value] += 1

    report = {
        'data': agora.isoformat(),
        'total_protocolos': len(protocolos),
        'por_status': por_status,
        'atrasados': sum(1 for p in protocolos if p.esta_atrasado(agora)),
    }

    logger.info(f"[SCHEDULED] Relatório gerado: {report}")
    return report


@shared_task(bind=True)
def limpar_eventos_operador(self, days: int = 90) -> int:
    """
    Remove eventos de ciclo de vida de operador mais antigos que `days`.

    Histórico de protocolo e registros de chamada nunca são removidos.
    """
    from src.adapters.django_app.atendimento.models import OperadorEventoModel

    cutoff_date = timezone.now() - timedelta(days=days)
    deleted, _ = OperadorEventoModel.objects.filter(criado_em__lt=cutoff_date).delete()

    logger.info(f"[SCHEDULED] {deleted} eventos de operador removidos")
    return deleted
