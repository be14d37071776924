"""
Exceções de Domínio do Console de Televendas.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Nenhuma delas é fatal: todas são devolvidas ao chamador, que decide
se corrige a entrada, recarrega o estado ou tenta novamente.

Hierarquia:
    DomainException (base)
    ├── ValidationError (entrada inválida ou incompleta)
    │   ├── AuditoriaIncompletaError (checklist de fechamento)
    │   └── JustificativaObrigatoriaError (upsell sem justificativa)
    ├── StateError (transição não permitida no status atual)
    │   └── ConcurrencyError (estado mudou desde a leitura)
    ├── AuthorizationError (ator sem papel/posse exigidos)
    ├── EntityNotFoundError (entidade não existe)
    ├── PersistenceError (falha do armazenamento)
    └── ConfigurationError (configuração externa inconsistente)
"""

from typing import Iterable, List, Optional


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            protocolo.aprovar(ator)
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.

    Sempre recuperável localmente: o chamador corrige a entrada e
    tenta de novo. Nunca é aplicada parcialmente.

    Example:
        if not titulo.strip():
            raise ValidationError("Título é obrigatório", field="titulo")
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class AuditoriaIncompletaError(ValidationError):
    """
    Checklist de fechamento sem todas as respostas obrigatórias.

    Attributes:
        pendentes: IDs das perguntas sem resposta válida
    """

    def __init__(self, pendentes: Iterable[str]):
        self.pendentes: List[str] = list(pendentes)
        super().__init__(
            "Auditoria de fechamento incompleta. Perguntas pendentes: "
            + ", ".join(self.pendentes),
            field="respostas",
        )

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["pendentes"] = self.pendentes
        return result


class JustificativaObrigatoriaError(ValidationError):
    """
    Perguntas de upsell respondidas sem a justificativa pareada.

    Attributes:
        pendentes: IDs das perguntas que exigem justificativa
    """

    def __init__(self, pendentes: Iterable[str]):
        self.pendentes: List[str] = list(pendentes)
        super().__init__(
            "Justificativa obrigatória para: " + ", ".join(self.pendentes),
            field="justificativas",
        )

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["pendentes"] = self.pendentes
        return result


class StateError(DomainException):
    """
    Transição tentada a partir de um status que não a permite.

    O chamador deve recarregar o status atual antes de tentar novamente.

    Example:
        if protocolo.status != ProtocoloStatus.RESOLVIDO_PENDENTE:
            raise StateError("Protocolo não aguarda aprovação")
    """

    def __init__(self, message: str, current_status: Optional[str] = None):
        self.current_status = current_status
        super().__init__(message, "STATE_ERROR")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.current_status:
            result["current_status"] = self.current_status
        return result


class ConcurrencyError(StateError):
    """
    Erro de concorrência/conflito de versão.

    Lançada quando a atualização condicional encontra no armazenamento
    um status ou versão diferente do lido no início da operação.
    """

    def __init__(self, message: str, current_status: Optional[str] = None):
        super().__init__(message, current_status)
        self.code = "CONCURRENCY_ERROR"


class AuthorizationError(DomainException):
    """
    Ator sem o papel ou a posse exigidos pela transição.

    Não deve ser repetida automaticamente; é apresentada como negação.
    """

    def __init__(self, message: str, actor_id: Optional[str] = None):
        self.actor_id = actor_id
        super().__init__(message, "AUTHORIZATION_ERROR")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.actor_id:
            result["actor_id"] = self.actor_id
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Lançada quando uma busca por ID (ou número do protocolo)
    não retorna resultado.

    Example:
        protocolo = repo.get_by_id_ou_numero(ref)
        if not protocolo:
            raise EntityNotFoundError(f"Protocolo {ref} não encontrado")
    """

    def __init__(
        self,
        message: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class PersistenceError(DomainException):
    """
    Falha do colaborador de armazenamento (rede, banco indisponível).

    O núcleo não repete automaticamente; as transições validam contra
    o estado atual e podem ser reexecutadas pelo chamador.
    """

    def __init__(self, message: str):
        super().__init__(message, "PERSISTENCE_ERROR")


class ConfigurationError(DomainException):
    """Configuração externa ausente ou inconsistente (SLA, catálogo)."""

    def __init__(self, message: str, setting: Optional[str] = None):
        self.setting = setting
        super().__init__(message, "CONFIGURATION_ERROR")
