"""
Cronômetro de atendimento.

O tempo decorrido é calculado por amostragem do relógio monotônico
injetado, nunca por contagem de ticks. Um tick perdido não atrasa o
cronômetro e o estado cabe inteiro na sessão serializada.

Leituras monotônicas só são comparáveis na máquina que as produziu.
Por isso o início guarda também o relógio de parede e a origem da
leitura: amostrado por outro host, o cronômetro usa a diferença de
parede.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from src.core.shared.exceptions import StateError


@dataclass
class Cronometro:
    """
    Attributes:
        iniciado_em: Leitura monotônica do início (None se parado)
        congelado: Segundos inteiros fixados ao parar
        iniciado_parede: Relógio de parede no início
        origem: Origem da leitura monotônica (host)
    """

    iniciado_em: Optional[float] = None
    congelado: Optional[int] = None
    iniciado_parede: Optional[datetime] = None
    origem: Optional[str] = None

    @property
    def em_execucao(self) -> bool:
        return self.iniciado_em is not None and self.congelado is None

    def iniciar(
        self,
        agora_mono: float,
        agora: Optional[datetime] = None,
        origem: Optional[str] = None,
    ) -> None:
        self.iniciado_em = agora_mono
        self.iniciado_parede = agora
        self.origem = origem
        self.congelado = None

    def amostrar(
        self,
        agora_mono: float,
        agora: Optional[datetime] = None,
        origem: Optional[str] = None,
    ) -> int:
        """Segundos inteiros decorridos (ou o valor congelado)."""
        if self.congelado is not None:
            return self.congelado
        if self.iniciado_em is None:
            return 0
        if origem != self.origem and agora is not None and self.iniciado_parede is not None:
            return max(0, int((agora - self.iniciado_parede).total_seconds()))
        return max(0, int(agora_mono - self.iniciado_em))

    def parar(
        self,
        agora_mono: float,
        agora: Optional[datetime] = None,
        origem: Optional[str] = None,
    ) -> int:
        """
        Congela e devolve a duração.

        Raises:
            StateError: Se o cronômetro não foi iniciado
        """
        if self.iniciado_em is None:
            raise StateError("Cronômetro não iniciado")
        if self.congelado is None:
            self.congelado = self.amostrar(agora_mono, agora, origem)
        return self.congelado

    def zerar(self) -> None:
        self.iniciado_em = None
        self.congelado = None
        self.iniciado_parede = None
        self.origem = None
