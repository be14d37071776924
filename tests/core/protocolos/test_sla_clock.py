"""
Testes do SLAClock.
"""

from datetime import datetime, timedelta

import pytest

from src.core.protocolos.entities import ProtocoloPriority
from src.core.protocolos.sla import SLA_HORAS_PADRAO, SLAClock, calcular_prazo_sla
from src.core.shared.exceptions import ConfigurationError


ABERTURA = datetime(2024, 3, 4, 9, 0, 0)


class TestSLAClock:
    def test_tabela_padrao(self):
        sla = SLAClock()

        assert sla.horas(ProtocoloPriority.ALTA) == SLA_HORAS_PADRAO["ALTA"]
        assert sla.horas("MEDIA") == SLA_HORAS_PADRAO["MEDIA"]
        assert sla.horas("Baixa") == SLA_HORAS_PADRAO["BAIXA"]

    def test_prazo_soma_horas(self):
        sla = SLAClock({"ALTA": 4})

        assert sla.prazo("ALTA", ABERTURA) == ABERTURA + timedelta(hours=4)

    def test_chaves_aceitam_nome_ou_valor(self):
        sla = SLAClock({"Média": "12", ProtocoloPriority.BAIXA: 100})

        assert sla.horas(ProtocoloPriority.MEDIA) == 12
        assert sla.horas("baixa") == 100

    def test_prioridade_fora_da_tabela(self):
        sla = SLAClock({"ALTA": 24})

        with pytest.raises(ConfigurationError) as exc_info:
            sla.horas("BAIXA")

        assert exc_info.value.setting == "PROTOCOLO_SLA_HORAS"

    def test_chave_desconhecida_na_configuracao(self):
        with pytest.raises(ConfigurationError):
            SLAClock({"CRITICA": 2})

    def test_tabela_vazia_nao_usa_padrao(self):
        sla = SLAClock({})

        with pytest.raises(ConfigurationError):
            sla.prazo("ALTA", ABERTURA)

    def test_atalho_funcional(self):
        prazo = calcular_prazo_sla(ProtocoloPriority.MEDIA, ABERTURA)

        assert prazo == ABERTURA + timedelta(hours=48)
