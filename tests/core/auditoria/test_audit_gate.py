"""
Testes do AuditGate (checklist de fechamento).
"""

import pytest

from src.core.auditoria.entities import (
    PerguntaAuditoria,
    RespostaAuditoria,
    TipoChamada,
)
from src.core.auditoria.gate import AuditGate
from src.core.auditoria.ports import CATALOGO_PADRAO, InMemoryPerguntaAuditoriaRepository
from src.core.shared.exceptions import AuditoriaIncompletaError, ValidationError


@pytest.fixture
def gate_assistencia(catalogo_repo):
    catalogo_repo.add(
        PerguntaAuditoria(
            id="as9",
            texto="Técnico compareceu",
            opcoes=("Sim", "Não"),
            tipos=frozenset({TipoChamada.ASSISTENCIA.value}),
            ordem=0,
            confirmacao_fechamento=True,
        )
    )
    return AuditGate(catalogo_repo)


class TestTipoChamada:
    @pytest.mark.parametrize(
        "texto, esperado",
        [
            ("POS_VENDA", TipoChamada.POS_VENDA),
            ("PÓS-VENDA", TipoChamada.POS_VENDA),
            ("confirmação protocolo", TipoChamada.CONFIRMACAO_PROTOCOLO),
            ("CONFIRMACAO_PROTOCOLO", TipoChamada.CONFIRMACAO_PROTOCOLO),
            ("venda", TipoChamada.VENDA),
        ],
    )
    def test_from_string(self, texto, esperado):
        assert TipoChamada.from_string(texto) == esperado

    def test_from_string_invalido(self):
        with pytest.raises(ValueError):
            TipoChamada.from_string("COBRANÇA")


class TestPerguntasObrigatorias:
    def test_sem_tipo_exige_apenas_perguntas_gerais(self, audit_gate):
        ids = [p.id for p in audit_gate.perguntas_obrigatorias(None)]

        assert ids == ["fc1", "fc2"]

    def test_perguntas_de_roteiro_nao_entram_no_checklist(self, audit_gate):
        ids = [p.id for p in audit_gate.perguntas_obrigatorias(TipoChamada.POS_VENDA)]

        assert "pv3" not in ids
        assert ids == ["fc1", "fc2"]

    def test_pergunta_especifica_do_tipo(self, gate_assistencia):
        assistencia = gate_assistencia.perguntas_obrigatorias(TipoChamada.ASSISTENCIA)
        venda = gate_assistencia.perguntas_obrigatorias(TipoChamada.VENDA)

        assert [p.id for p in assistencia] == ["as9", "fc1", "fc2"]
        assert [p.id for p in venda] == ["fc1", "fc2"]


class TestValidar:
    def test_checklist_completo(self, audit_gate):
        resultado = audit_gate.validar(None, {"fc2": "Não", "fc1": "Regular"})

        assert resultado.ok is True
        assert resultado.respostas == (
            RespostaAuditoria("fc1", "Regular"),
            RespostaAuditoria("fc2", "Não"),
        )

    def test_pendentes_sem_resposta_e_fora_das_opcoes(self, audit_gate):
        resultado = audit_gate.validar(None, {"fc1": "Péssima"})

        assert resultado.ok is False
        assert resultado.pendentes == ("fc1", "fc2")

    def test_pergunta_desconhecida(self, audit_gate):
        with pytest.raises(ValidationError) as exc_info:
            audit_gate.validar(None, {"fc1": "Boa", "fc2": "Sim", "pv1": "Ok"})

        assert exc_info.value.field == "respostas"
        assert "pv1" in str(exc_info.value)

    def test_catalogo_vazio_aceita_checklist_vazio(self):
        gate = AuditGate(InMemoryPerguntaAuditoriaRepository())

        assert gate.validar(TipoChamada.VENDA, {}).ok is True


class TestExigir:
    def test_lanca_com_todas_as_pendencias(self, gate_assistencia):
        with pytest.raises(AuditoriaIncompletaError) as exc_info:
            gate_assistencia.exigir(TipoChamada.ASSISTENCIA, {"fc1": "Boa"})

        assert exc_info.value.pendentes == ["as9", "fc2"]
        assert exc_info.value.to_dict()["pendentes"] == ["as9", "fc2"]

    def test_devolve_resultado_quando_completo(self, audit_gate):
        resultado = audit_gate.exigir(TipoChamada.VENDA, {"fc1": "Boa", "fc2": "Sim"})

        assert len(resultado.respostas) == 2


class TestComporTexto:
    def test_formato_canonico_na_ordem_do_catalogo(self, audit_gate):
        resultado = audit_gate.exigir(None, {"fc2": "Sim", "fc1": "Boa"})

        texto = audit_gate.compor_texto(None, "  fixed pump seal ", resultado.respostas)

        assert texto == "Resolução: fixed pump seal | Satisfação: Boa | Retornou Compra: Sim"

    def test_catalogo_padrao_tem_perguntas_de_upsell(self):
        upsell = sorted(p.id for p in CATALOGO_PADRAO if p.sensivel_upsell)

        assert upsell == ["pr2", "pv3"]
