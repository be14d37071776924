"""
Infraestrutura comum das APIs JSON.

Formato:
- Entrada: JSON
- Saída: JSON com estrutura {success, data/error, meta}

Autenticação:
- Session do Django. O ator de toda transição é o usuário autenticado;
  nenhum endpoint aceita ator_id no corpo da requisição.
"""

import json
import logging
from typing import Any, Dict

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from src.core.shared.exceptions import (
    AuthorizationError,
    ConfigurationError,
    DomainException,
    EntityNotFoundError,
    PersistenceError,
    StateError,
    ValidationError,
)
from src.config.container import get_container

logger = logging.getLogger(__name__)


class NaoAutenticadoError(Exception):
    """Requisição sem usuário autenticado."""


def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parseia body JSON do request.

    Raises:
        ValidationError: Se JSON inválido ou não for um objeto
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except json.JSONDecodeError as e:
        raise ValidationError(f"JSON inválido: {e}")

    if not isinstance(data, dict):
        raise ValidationError("Corpo da requisição deve ser um objeto JSON")
    return data


def get_ator_id(request: HttpRequest) -> str:
    """
    Extrai o ID do operador autenticado.

    Raises:
        NaoAutenticadoError: Se não houver sessão autenticada
    """
    if not request.user.is_authenticated:
        raise NaoAutenticadoError()
    return str(request.user.id)


@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON
    - Acesso ao container DI
    - Tratamento de erros padronizado
    """

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except Exception as e:
            return self.handle_exception(e)

    def get_service(self, service_name: str):
        """Obtém service do container."""
        return getattr(get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Mapeia exceções de domínio para status HTTP.

        ValidationError 400, AuthorizationError 403, EntityNotFoundError 404,
        StateError 409, PersistenceError 503, sem sessão 401.
        """
        if isinstance(e, NaoAutenticadoError):
            return json_response(
                success=False,
                error="Autenticação necessária",
                status=401,
            )

        if isinstance(e, ValidationError):
            return json_response(
                success=False,
                error=str(e),
                status=400,
                meta=e.to_dict(),
            )

        if isinstance(e, AuthorizationError):
            return json_response(success=False, error=str(e), status=403)

        if isinstance(e, EntityNotFoundError):
            return json_response(success=False, error=str(e), status=404)

        if isinstance(e, StateError):
            return json_response(
                success=False,
                error=str(e),
                status=409,
                meta=e.to_dict(),
            )

        if isinstance(e, PersistenceError):
            logger.error(f"Armazenamento indisponível: {e}")
            return json_response(success=False, error=str(e), status=503)

        if isinstance(e, ConfigurationError):
            logger.error(f"Configuração inválida: {e}")
            return json_response(
                success=False,
                error="Erro de configuração do servidor",
                status=500,
            )

        if isinstance(e, DomainException):
            return json_response(success=False, error=str(e), status=400)

        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error="Erro interno do servidor",
            status=500
        )
