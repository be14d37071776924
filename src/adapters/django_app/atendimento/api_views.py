"""
API Views JSON para o fluxo de atendimento.

Endpoints (sempre sobre a sessão do operador autenticado):
- GET  /atendimento/api/sessao/ - Estado atual da sessão
- GET  /atendimento/api/sessao/tick/ - Amostra do cronômetro em exibição
- POST /atendimento/api/sessao/<acao>/ - proxima, iniciar, encerrar,
  responder, justificar, enviar, pular, cancelar
- GET  /atendimento/api/registros/ - Histórico de chamadas
- GET  /atendimento/api/motivos-pulo/ - Motivos aceitos para pular
"""

import logging
from typing import Dict, Optional

from django.http import HttpRequest, JsonResponse

from src.core.atendimento.dtos import EnviarAtendimentoInputDTO, EscalonamentoInputDTO
from src.core.atendimento.entities import MotivoPulo
from src.core.shared.exceptions import ValidationError

from ..shared.api import BaseAPIView, get_ator_id, json_response

logger = logging.getLogger(__name__)


def _escalonamento(data: Dict) -> Optional[EscalonamentoInputDTO]:
    bruto = data.get('escalonamento')
    if not bruto:
        return None
    if not isinstance(bruto, dict):
        raise ValidationError("escalonamento deve ser um objeto", field="escalonamento")

    return EscalonamentoInputDTO(
        titulo=bruto.get('titulo') or '',
        descricao=bruto.get('descricao') or '',
        departamento_id=bruto.get('departamento_id') or '',
        prioridade=bruto.get('prioridade') or '',
        responsavel_id=bruto.get('responsavel_id') or None,
    )


class SessaoAPIView(BaseAPIView):
    """GET /atendimento/api/sessao/"""

    def get(self, request: HttpRequest) -> JsonResponse:
        operador_id = get_ator_id(request)
        sessao = self.get_service('fluxo_atendimento_service').obter_sessao(operador_id)
        return json_response(success=True, data=sessao.to_dict())


class SessaoTickAPIView(BaseAPIView):
    """GET /atendimento/api/sessao/tick/ - chamado a cada segundo pela tela."""

    def get(self, request: HttpRequest) -> JsonResponse:
        operador_id = get_ator_id(request)
        decorrido = self.get_service('fluxo_atendimento_service').tick(operador_id)
        return json_response(success=True, data={'decorrido': decorrido})


class SessaoAcaoAPIView(BaseAPIView):
    """
    POST /atendimento/api/sessao/<acao>/

    Cada ação mapeia para um método do FluxoAtendimentoService.
    """

    ACOES = (
        'proxima',
        'iniciar',
        'encerrar',
        'responder',
        'justificar',
        'enviar',
        'pular',
        'cancelar',
    )

    def post(self, request: HttpRequest, acao: str) -> JsonResponse:
        if acao not in self.ACOES:
            return json_response(success=False, error=f"Ação desconhecida: {acao}", status=404)

        operador_id = get_ator_id(request)
        data = self.parse_body(request)
        fluxo = self.get_service('fluxo_atendimento_service')

        if acao == 'enviar':
            registro = fluxo.enviar(
                EnviarAtendimentoInputDTO(
                    operador_id=operador_id,
                    resumo=data.get('resumo') or '',
                    escalonamento=_escalonamento(data),
                )
            )
            sessao = fluxo.obter_sessao(operador_id)
            return json_response(
                success=True,
                data={'registro': registro.to_dict(), 'sessao': sessao.to_dict()},
                status=201,
            )

        if acao == 'proxima':
            sessao = fluxo.carregar_proxima(operador_id)
        elif acao == 'iniciar':
            sessao = fluxo.iniciar(operador_id)
        elif acao == 'encerrar':
            sessao = fluxo.encerrar_chamada(operador_id)
        elif acao == 'responder':
            sessao = fluxo.responder(
                operador_id,
                data.get('pergunta_id') or '',
                data.get('valor') or None,
                data.get('justificativa'),
            )
        elif acao == 'justificar':
            sessao = fluxo.justificar(
                operador_id,
                data.get('pergunta_id') or '',
                data.get('nota') or '',
            )
        elif acao == 'pular':
            sessao = fluxo.pular(operador_id, data.get('motivo') or '')
        else:
            sessao = fluxo.cancelar(operador_id)

        return json_response(success=True, data=sessao.to_dict())


class RegistrosChamadaAPIView(BaseAPIView):
    """
    GET /atendimento/api/registros/?operador_id=&tarefa_id=

    Não administradores sempre recebem apenas os próprios registros.
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        ator_id = get_ator_id(request)
        registros = self.get_service('listar_registros_chamada_service').execute(
            ator_id,
            operador_id=request.GET.get('operador_id') or None,
            tarefa_id=request.GET.get('tarefa_id') or None,
        )
        return json_response(
            success=True,
            data=[r.to_dict() for r in registros],
            meta={'total': len(registros)},
        )


class MotivosPuloAPIView(BaseAPIView):
    def get(self, request: HttpRequest) -> JsonResponse:
        get_ator_id(request)
        return json_response(
            success=True,
            data=[{'id': m.name, 'nome': m.value} for m in MotivoPulo],
        )
