"""
Testes do Cronometro (amostragem do relógio monotônico).
"""

from datetime import datetime, timedelta

import pytest

from src.core.atendimento.cronometro import Cronometro
from src.core.shared.exceptions import StateError


class TestCronometro:
    def test_parado_marca_zero(self):
        cronometro = Cronometro()

        assert cronometro.em_execucao is False
        assert cronometro.amostrar(100.0) == 0

    def test_amostra_segundos_inteiros(self):
        cronometro = Cronometro()
        cronometro.iniciar(10.0)

        assert cronometro.em_execucao is True
        assert cronometro.amostrar(10.9) == 0
        assert cronometro.amostrar(52.4) == 42

    def test_ticks_perdidos_nao_atrasam(self):
        cronometro = Cronometro()
        cronometro.iniciar(0.0)

        # nenhuma amostra intermediária
        assert cronometro.amostrar(3600.0) == 3600

    def test_relogio_para_tras_nao_fica_negativo(self):
        cronometro = Cronometro()
        cronometro.iniciar(50.0)

        assert cronometro.amostrar(40.0) == 0

    def test_parar_congela(self):
        cronometro = Cronometro()
        cronometro.iniciar(0.0)

        assert cronometro.parar(42.7) == 42
        assert cronometro.em_execucao is False
        assert cronometro.amostrar(500.0) == 42
        assert cronometro.parar(900.0) == 42

    def test_parar_sem_iniciar(self):
        with pytest.raises(StateError):
            Cronometro().parar(1.0)

    def test_zerar(self):
        cronometro = Cronometro()
        cronometro.iniciar(0.0)
        cronometro.parar(5.0)

        cronometro.zerar()

        assert cronometro.iniciado_em is None
        assert cronometro.congelado is None


T0 = datetime(2024, 3, 4, 9, 0, 0)


class TestCronometroEntreHosts:
    def test_mesma_origem_usa_monotonico(self):
        cronometro = Cronometro()
        cronometro.iniciar(1000.0, T0, "web-1")

        # Relógio de parede ajustado para trás não afeta a amostra
        assert cronometro.amostrar(1042.0, T0 - timedelta(minutes=5), "web-1") == 42

    def test_outra_origem_usa_relogio_de_parede(self):
        cronometro = Cronometro()
        cronometro.iniciar(1000.0, T0, "web-1")

        assert cronometro.amostrar(3.0, T0 + timedelta(seconds=42), "web-2") == 42
        assert cronometro.parar(9.0, T0 + timedelta(seconds=50), "web-2") == 50

    def test_zerar_esquece_origem(self):
        cronometro = Cronometro()
        cronometro.iniciar(0.0, T0, "web-1")

        cronometro.zerar()

        assert cronometro.iniciado_parede is None
        assert cronometro.origem is None
