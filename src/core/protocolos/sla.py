"""
SLAClock - prazo de SLA por prioridade.

Mapeamento puro prioridade + aberto_em → prazo. A tabela de horas é
configurada fora do núcleo (settings PROTOCOLO_SLA_HORAS); não existe
prazo padrão silencioso para prioridade desconhecida.
"""

from datetime import datetime, timedelta
from typing import Dict, Mapping, Optional, Union

from src.core.shared.exceptions import ConfigurationError

from .entities import ProtocoloPriority


SLA_HORAS_PADRAO: Dict[str, int] = {
    "ALTA": 24,
    "MEDIA": 48,
    "BAIXA": 72,
}


class SLAClock:
    """
    Calcula o prazo de SLA de um protocolo.

    Example:
        sla = SLAClock({"ALTA": 24, "MEDIA": 48, "BAIXA": 72})
        sla.prazo(ProtocoloPriority.ALTA, datetime(2024, 1, 1, 9))
        # datetime(2024, 1, 2, 9)
    """

    def __init__(self, horas_por_prioridade: Optional[Mapping] = None):
        tabela = SLA_HORAS_PADRAO if horas_por_prioridade is None else horas_por_prioridade
        self._horas: Dict[ProtocoloPriority, int] = {}
        for chave, horas in tabela.items():
            prioridade = self._normalizar(chave)
            self._horas[prioridade] = int(horas)

    @staticmethod
    def _normalizar(prioridade: Union[ProtocoloPriority, str]) -> ProtocoloPriority:
        if isinstance(prioridade, ProtocoloPriority):
            return prioridade
        try:
            return ProtocoloPriority.from_string(str(prioridade))
        except ValueError:
            raise ConfigurationError(
                f"Prioridade desconhecida na política de SLA: {prioridade}",
                setting="PROTOCOLO_SLA_HORAS",
            )

    def horas(self, prioridade: Union[ProtocoloPriority, str]) -> int:
        """
        Horas de SLA da prioridade.

        Raises:
            ConfigurationError: Se a prioridade não está na tabela
        """
        chave = self._normalizar(prioridade)
        if chave not in self._horas:
            raise ConfigurationError(
                f"Política de SLA sem horas para a prioridade {chave.value}",
                setting="PROTOCOLO_SLA_HORAS",
            )
        return self._horas[chave]

    def prazo(
        self,
        prioridade: Union[ProtocoloPriority, str],
        aberto_em: datetime,
    ) -> datetime:
        """Prazo = aberto_em + horas da prioridade."""
        return aberto_em + timedelta(hours=self.horas(prioridade))


def calcular_prazo_sla(
    prioridade: Union[ProtocoloPriority, str],
    aberto_em: datetime,
    horas_por_prioridade: Optional[Mapping] = None,
) -> datetime:
    """Atalho funcional para SLAClock(horas_por_prioridade).prazo(...)."""
    return SLAClock(horas_por_prioridade).prazo(prioridade, aberto_em)
