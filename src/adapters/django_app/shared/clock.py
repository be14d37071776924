"""
Relógio do processo Django.

Com USE_TZ=True os timestamps persistidos precisam ser aware; o
SystemClock do núcleo devolve datetime ingênuo, então os adapters
usam este relógio.

A sessão de atendimento circula entre hosts pelo Redis; origem()
devolve o hostname para que um cronômetro iniciado em outra máquina
seja amostrado pelo relógio de parede.
"""

import socket
import time
from datetime import datetime

from django.utils import timezone


class DjangoClock:
    """Implementa o Clock do núcleo sobre django.utils.timezone."""

    def __init__(self):
        self._origem = socket.gethostname()

    def agora(self) -> datetime:
        return timezone.now()

    def monotonic(self) -> float:
        return time.monotonic()

    def origem(self) -> str:
        return self._origem
