"""
Tradução de erros do ORM para o núcleo.

Repositórios Django não deixam DatabaseError vazar para os use cases:
o núcleo só conhece PersistenceError (armazenamento indisponível).
"""

from functools import wraps
import logging

from django.db import DatabaseError

from src.core.shared.exceptions import PersistenceError

logger = logging.getLogger(__name__)


def traduzir_erros_de_banco(func):
    """
    Decorator para métodos de repositório.

    Example:
        class DjangoProtocoloRepository:
            @traduzir_erros_de_banco
            def add(self, protocolo): ...
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as e:
            logger.error(f"Erro de banco em {func.__qualname__}: {e}")
            raise PersistenceError(f"Armazenamento indisponível: {e}") from e

    return wrapper
