"""
SessaoStore sobre o cache do Django.

A sessão de atendimento é lida e regravada a cada operação. Em
produção o cache precisa ser compartilhado entre processos (Redis,
via REDIS_URL); o LocMemCache só serve para um processo.
"""

from typing import Optional
import logging

from django.conf import settings
from django.core.cache import caches

from src.core.atendimento.sessao import SessaoAtendimento

logger = logging.getLogger(__name__)

PREFIXO_CHAVE = "atendimento:sessao:"


class CacheSessaoStore:
    """
    Example:
        store = CacheSessaoStore()
        store.salvar(sessao)
        sessao = store.obter("42")
    """

    def __init__(self, alias: str = "default", timeout: Optional[int] = None):
        self._alias = alias
        self._timeout = timeout if timeout is not None else getattr(
            settings, "ATENDIMENTO_SESSAO_TIMEOUT", 12 * 3600
        )

    @property
    def _cache(self):
        return caches[self._alias]

    def obter(self, operador_id: str) -> Optional[SessaoAtendimento]:
        return self._cache.get(PREFIXO_CHAVE + operador_id)

    def salvar(self, sessao: SessaoAtendimento) -> None:
        self._cache.set(PREFIXO_CHAVE + sessao.operador_id, sessao, self._timeout)
        logger.debug(f"Sessão de {sessao.operador_id} gravada ({sessao.estado.value})")

    def descartar(self, operador_id: str) -> None:
        self._cache.delete(PREFIXO_CHAVE + operador_id)
