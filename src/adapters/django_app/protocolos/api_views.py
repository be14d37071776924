"""
API Views JSON para o domínio de Protocolos.

Endpoints:
- GET  /protocolos/api/ - Listar protocolos visíveis
- POST /protocolos/api/ - Abrir protocolo
- GET  /protocolos/api/estatisticas/ - Contagens por status e atraso
- GET  /protocolos/api/departamentos/ - Setores configurados
- GET  /protocolos/api/checklist/ - Perguntas do checklist de fechamento
- GET  /protocolos/api/<ref>/ - Obter protocolo (ID ou número)
- GET  /protocolos/api/<ref>/eventos/ - Histórico em ordem causal
- POST /protocolos/api/<ref>/<acao>/ - Transições

O ator é sempre o usuário autenticado da sessão.
"""

import logging
from typing import Dict

from django.conf import settings
from django.http import HttpRequest, JsonResponse

from src.core.protocolos.dtos import (
    AdicionarNotaInputDTO,
    AguardarProtocoloInputDTO,
    CriarProtocoloInputDTO,
    ListarProtocolosQueryDTO,
    ReabrirProtocoloInputDTO,
    ReatribuirProtocoloInputDTO,
    RejeitarResolucaoInputDTO,
    SubmeterResolucaoInputDTO,
    TransicaoProtocoloInputDTO,
)
from src.core.auditoria.entities import TipoChamada
from src.core.shared.exceptions import ValidationError

from ..shared.api import BaseAPIView, get_ator_id, json_response

logger = logging.getLogger(__name__)


def _texto(data: Dict, campo: str, default: str = "") -> str:
    valor = data.get(campo, default)
    if valor is None:
        return default
    if not isinstance(valor, str):
        raise ValidationError(f"Campo {campo} deve ser texto", field=campo)
    return valor


def _respostas(data: Dict) -> Dict[str, str]:
    respostas = data.get('respostas') or {}
    if not isinstance(respostas, dict):
        raise ValidationError("respostas deve ser um objeto", field="respostas")
    return {str(k): str(v) for k, v in respostas.items()}


class ProtocoloAPIListView(BaseAPIView):
    """
    GET /protocolos/api/ - Lista protocolos (fila)
    POST /protocolos/api/ - Abre protocolo
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        """
        Query params:
        - status, departamento_id, responsavel_id, busca
        - atrasados: "1" para apenas fora do SLA
        - page / per_page
        """
        ator_id = get_ator_id(request)
        query = ListarProtocolosQueryDTO(
            status=request.GET.get('status') or None,
            departamento_id=request.GET.get('departamento_id') or None,
            responsavel_id=request.GET.get('responsavel_id') or None,
            busca=request.GET.get('busca') or None,
            apenas_atrasados=request.GET.get('atrasados') in ('1', 'true'),
        )

        protocolos = self.get_service('listar_protocolos_service').execute(query, ator_id)

        try:
            page = max(int(request.GET.get('page', 1)), 1)
            per_page = min(max(int(request.GET.get('per_page', 20)), 1), 100)
        except ValueError:
            raise ValidationError("Paginação inválida", field="page")

        total = len(protocolos)
        start = (page - 1) * per_page
        paginated = protocolos[start:start + per_page]

        return json_response(
            success=True,
            data=[p.to_dict() for p in paginated],
            meta={
                'total': total,
                'page': page,
                'per_page': per_page,
                'total_pages': (total + per_page - 1) // per_page,
            }
        )

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Body JSON:
        {
            "titulo": "...", "descricao": "...", "departamento_id": "d1",
            "prioridade": "ALTA", "cliente_id": "c1" | "prospect_id": "p1",
            "responsavel_id": "opcional"
        }
        """
        ator_id = get_ator_id(request)
        data = self.parse_body(request)

        input_dto = CriarProtocoloInputDTO(
            ator_id=ator_id,
            titulo=_texto(data, 'titulo'),
            descricao=_texto(data, 'descricao'),
            departamento_id=_texto(data, 'departamento_id'),
            prioridade=_texto(data, 'prioridade'),
            cliente_id=data.get('cliente_id') or None,
            prospect_id=data.get('prospect_id') or None,
            responsavel_id=data.get('responsavel_id') or None,
            origem_tipo_chamada=data.get('origem_tipo_chamada') or None,
        )

        output = self.get_service('criar_protocolo_service').execute(input_dto)
        logger.info(f"Protocolo criado via API: {output.numero}")

        return json_response(success=True, data=output.to_dict(), status=201)


class ProtocoloAPIDetailView(BaseAPIView):
    """GET /protocolos/api/<ref>/"""

    def get(self, request: HttpRequest, ref: str) -> JsonResponse:
        ator_id = get_ator_id(request)
        output = self.get_service('obter_protocolo_service').execute(ref, ator_id)
        return json_response(success=True, data=output.to_dict())


class ProtocoloAPIEventosView(BaseAPIView):
    """GET /protocolos/api/<ref>/eventos/"""

    def get(self, request: HttpRequest, ref: str) -> JsonResponse:
        ator_id = get_ator_id(request)
        eventos = self.get_service('listar_eventos_service').execute(ref, ator_id)
        return json_response(
            success=True,
            data=[e.to_dict() for e in eventos],
            meta={'total': len(eventos)},
        )


class ProtocoloAPIEstatisticasView(BaseAPIView):
    def get(self, request: HttpRequest) -> JsonResponse:
        ator_id = get_ator_id(request)
        output = self.get_service('estatisticas_service').execute(ator_id)
        return json_response(success=True, data=output.to_dict())


class DepartamentosAPIView(BaseAPIView):
    def get(self, request: HttpRequest) -> JsonResponse:
        get_ator_id(request)
        departamentos = getattr(settings, 'PROTOCOLO_DEPARTAMENTOS', {})
        return json_response(
            success=True,
            data=[{'id': k, 'nome': v} for k, v in departamentos.items()],
        )


class ChecklistAPIView(BaseAPIView):
    """
    GET /protocolos/api/checklist/?tipo_chamada=VENDA

    Perguntas obrigatórias para submeter uma resolução.
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        get_ator_id(request)
        tipo = None
        if request.GET.get('tipo_chamada'):
            try:
                tipo = TipoChamada.from_string(request.GET['tipo_chamada'])
            except ValueError as e:
                raise ValidationError(str(e), field="tipo_chamada")

        perguntas = self.get_service('audit_gate').perguntas_obrigatorias(tipo)
        return json_response(
            success=True,
            data=[
                {'id': p.id, 'texto': p.texto, 'opcoes': list(p.opcoes)}
                for p in perguntas
            ],
        )


# =============================================================================
# Transições
# =============================================================================

class _TransicaoAPIView(BaseAPIView):
    """
    POST /protocolos/api/<ref>/<acao>/

    Subclasses definem o service e como montar o DTO a partir do body.
    """

    service_name: str = ""
    status_sucesso: int = 200

    def build_dto(self, ref: str, ator_id: str, data: Dict):
        return TransicaoProtocoloInputDTO(protocolo_ref=ref, ator_id=ator_id)

    def post(self, request: HttpRequest, ref: str) -> JsonResponse:
        ator_id = get_ator_id(request)
        data = self.parse_body(request)
        output = self.get_service(self.service_name).execute(
            self.build_dto(ref, ator_id, data)
        )
        return json_response(success=True, data=output.to_dict(), status=self.status_sucesso)


class ProtocoloAPIIniciarView(_TransicaoAPIView):
    service_name = 'iniciar_protocolo_service'


class ProtocoloAPISubmeterView(_TransicaoAPIView):
    """Body: {"resumo": "...", "respostas": {"fc1": "Boa", "fc2": "Sim"}}"""

    service_name = 'submeter_resolucao_service'

    def build_dto(self, ref, ator_id, data):
        return SubmeterResolucaoInputDTO(
            protocolo_ref=ref,
            ator_id=ator_id,
            resumo=_texto(data, 'resumo'),
            respostas=_respostas(data),
        )


class ProtocoloAPIAprovarView(_TransicaoAPIView):
    service_name = 'aprovar_resolucao_service'


class ProtocoloAPIRejeitarView(_TransicaoAPIView):
    service_name = 'rejeitar_resolucao_service'

    def build_dto(self, ref, ator_id, data):
        return RejeitarResolucaoInputDTO(
            protocolo_ref=ref,
            ator_id=ator_id,
            motivo=_texto(data, 'motivo'),
        )


class ProtocoloAPIAguardarView(_TransicaoAPIView):
    """Body: {"destino": "AGUARDANDO_SETOR" | "AGUARDANDO_CLIENTE", "nota": "..."}"""

    service_name = 'aguardar_protocolo_service'

    def build_dto(self, ref, ator_id, data):
        return AguardarProtocoloInputDTO(
            protocolo_ref=ref,
            ator_id=ator_id,
            destino=_texto(data, 'destino'),
            nota=_texto(data, 'nota'),
        )


class ProtocoloAPIRetomarView(_TransicaoAPIView):
    service_name = 'retomar_protocolo_service'


class ProtocoloAPIReabrirView(_TransicaoAPIView):
    service_name = 'reabrir_protocolo_service'

    def build_dto(self, ref, ator_id, data):
        return ReabrirProtocoloInputDTO(
            protocolo_ref=ref,
            ator_id=ator_id,
            motivo=_texto(data, 'motivo'),
        )


class ProtocoloAPINotaView(_TransicaoAPIView):
    service_name = 'adicionar_nota_service'
    status_sucesso = 201

    def build_dto(self, ref, ator_id, data):
        return AdicionarNotaInputDTO(
            protocolo_ref=ref,
            ator_id=ator_id,
            texto=_texto(data, 'texto'),
        )


class ProtocoloAPIReatribuirView(_TransicaoAPIView):
    service_name = 'reatribuir_protocolo_service'

    def build_dto(self, ref, ator_id, data):
        return ReatribuirProtocoloInputDTO(
            protocolo_ref=ref,
            ator_id=ator_id,
            novo_responsavel_id=_texto(data, 'novo_responsavel_id'),
        )
