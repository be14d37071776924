"""
Testes Unitários para Entidades do Domínio de Protocolos.

Testa regras de negócio encapsuladas no agregado:
- Abertura com validações (sujeito exclusivo, campos obrigatórios)
- Transições guardadas por status, papel e posse
- Histórico produzido por transição
- Consultas de SLA
"""

from datetime import datetime, timedelta

import pytest

from src.core.auditoria.entities import TipoChamada
from src.core.protocolos.entities import (
    ProtocoloEntity,
    ProtocoloEventoTipo,
    ProtocoloPriority,
    ProtocoloStatus,
)
from src.core.shared.exceptions import AuthorizationError, StateError, ValidationError

T0 = datetime(2024, 3, 4, 9, 0, 0)


def _criar(**kwargs) -> ProtocoloEntity:
    dados = dict(
        aberto_por_id="op1",
        departamento_id="d1",
        titulo="Vazamento na bomba",
        descricao="Cliente relata vazamento após instalação",
        prioridade=ProtocoloPriority.ALTA,
        aberto_em=T0,
        sla_prazo=T0 + timedelta(hours=24),
        cliente_id="c1",
    )
    dados.update(kwargs)
    return ProtocoloEntity.criar(**dados)


def _em_andamento(operador) -> ProtocoloEntity:
    protocolo = _criar()
    protocolo.iniciar(operador, T0)
    return protocolo


class TestProtocoloCriacao:
    def test_criar_protocolo_valido(self):
        protocolo = _criar()

        assert protocolo.status == ProtocoloStatus.ABERTO
        assert protocolo.responsavel_id == "op1"
        assert protocolo.aberto_em == T0
        assert protocolo.atualizado_em == T0
        assert protocolo.sla_prazo == T0 + timedelta(hours=24)
        assert protocolo.fechado_em is None
        assert protocolo.resumo_resolucao is None
        assert protocolo.versao == 1

    def test_numero_tem_prefixo_e_cinco_caracteres(self):
        protocolo = _criar()

        assert protocolo.numero.startswith("PR")
        assert len(protocolo.numero) == 7
        assert protocolo.numero[2:].isalnum()
        assert protocolo.numero == protocolo.numero.upper()

    def test_responsavel_explicito(self):
        protocolo = _criar(responsavel_id="op2")

        assert protocolo.responsavel_id == "op2"
        assert protocolo.aberto_por_id == "op1"

    def test_cliente_e_prospect_juntos_invalido(self):
        with pytest.raises(ValidationError):
            _criar(cliente_id="c1", prospect_id="p1")

    def test_sem_cliente_e_sem_prospect_invalido(self):
        with pytest.raises(ValidationError):
            _criar(cliente_id=None, prospect_id=None)

    def test_prospect_sem_cliente_valido(self):
        protocolo = _criar(cliente_id=None, prospect_id="p1")

        assert protocolo.prospect_id == "p1"
        assert protocolo.cliente_id is None

    @pytest.mark.parametrize("campo", ["titulo", "descricao", "departamento_id"])
    def test_campos_obrigatorios(self, campo):
        with pytest.raises(ValidationError) as exc_info:
            _criar(**{campo: "   "})

        assert exc_info.value.field == campo

    def test_prioridade_deve_ser_enum(self):
        with pytest.raises(ValidationError):
            _criar(prioridade="Alta")

    def test_evento_de_criacao(self):
        protocolo = _criar()
        evento = protocolo.evento_criacao()

        assert evento.tipo == ProtocoloEventoTipo.CRIADO
        assert evento.ator_id == "op1"
        assert evento.criado_em == T0
        assert evento.valor_novo == ProtocoloStatus.ABERTO.value


class TestProtocoloTransicoes:
    def test_iniciar_pelo_responsavel(self, operador):
        protocolo = _criar()

        evento = protocolo.iniciar(operador, T0 + timedelta(minutes=5))

        assert protocolo.status == ProtocoloStatus.EM_ANDAMENTO
        assert protocolo.atualizado_em == T0 + timedelta(minutes=5)
        assert evento.tipo == ProtocoloEventoTipo.STATUS_ALTERADO
        assert evento.valor_antigo == ProtocoloStatus.ABERTO.value
        assert evento.valor_novo == ProtocoloStatus.EM_ANDAMENTO.value

    def test_iniciar_por_outro_operador_negado(self, outro_operador):
        protocolo = _criar()

        with pytest.raises(AuthorizationError):
            protocolo.iniciar(outro_operador, T0)

        assert protocolo.status == ProtocoloStatus.ABERTO

    def test_admin_nao_responsavel_nao_inicia(self, admin):
        protocolo = _criar()

        with pytest.raises(AuthorizationError):
            protocolo.iniciar(admin, T0)

    def test_iniciar_duas_vezes_erro_de_estado(self, operador):
        protocolo = _em_andamento(operador)

        with pytest.raises(StateError) as exc_info:
            protocolo.iniciar(operador, T0)

        assert exc_info.value.current_status == ProtocoloStatus.EM_ANDAMENTO.value

    def test_estado_checado_antes_da_posse(self, operador, outro_operador):
        protocolo = _em_andamento(operador)

        with pytest.raises(StateError):
            protocolo.iniciar(outro_operador, T0)

    def test_submeter_resolucao(self, operador):
        protocolo = _em_andamento(operador)

        evento = protocolo.submeter_resolucao(operador, "Resolução: troca do selo", T0)

        assert protocolo.status == ProtocoloStatus.RESOLVIDO_PENDENTE
        assert protocolo.resumo_resolucao == "Resolução: troca do selo"
        assert evento.nota == "Resolução: troca do selo"

    def test_submeter_resolucao_vazia_invalida(self, operador):
        protocolo = _em_andamento(operador)

        with pytest.raises(ValidationError):
            protocolo.submeter_resolucao(operador, "  ", T0)

        assert protocolo.status == ProtocoloStatus.EM_ANDAMENTO

    def test_aprovar_fecha_protocolo(self, operador, admin):
        protocolo = _em_andamento(operador)
        protocolo.submeter_resolucao(operador, "Resolução: ok", T0)

        fechamento = T0 + timedelta(hours=2)
        protocolo.aprovar(admin, fechamento)

        assert protocolo.status == ProtocoloStatus.FECHADO
        assert protocolo.fechado_em == fechamento
        assert protocolo.resumo_resolucao == "Resolução: ok"

    def test_aprovar_exige_administrador(self, operador):
        protocolo = _em_andamento(operador)
        protocolo.submeter_resolucao(operador, "Resolução: ok", T0)

        with pytest.raises(AuthorizationError):
            protocolo.aprovar(operador, T0)

        assert protocolo.status == ProtocoloStatus.RESOLVIDO_PENDENTE
        assert protocolo.fechado_em is None

    def test_rejeitar_volta_para_andamento_e_mantem_sla(self, operador, admin):
        protocolo = _em_andamento(operador)
        prazo = protocolo.sla_prazo
        protocolo.submeter_resolucao(operador, "Resolução: ok", T0)

        evento = protocolo.rejeitar(admin, "Cliente ainda sem água quente", T0 + timedelta(hours=30))

        assert protocolo.status == ProtocoloStatus.EM_ANDAMENTO
        assert protocolo.responsavel_id == "op1"
        assert protocolo.resumo_resolucao is None
        assert protocolo.sla_prazo == prazo
        assert "Cliente ainda sem água quente" in evento.nota

    def test_rejeitar_sem_motivo_invalido(self, operador, admin):
        protocolo = _em_andamento(operador)
        protocolo.submeter_resolucao(operador, "Resolução: ok", T0)

        with pytest.raises(ValidationError):
            protocolo.rejeitar(admin, "", T0)

        assert protocolo.status == ProtocoloStatus.RESOLVIDO_PENDENTE

    def test_aguardar_e_retomar(self, operador):
        protocolo = _em_andamento(operador)

        protocolo.aguardar(operador, ProtocoloStatus.AGUARDANDO_SETOR, T0, nota="Peça")
        assert protocolo.status == ProtocoloStatus.AGUARDANDO_SETOR

        protocolo.retomar(operador, T0)
        assert protocolo.status == ProtocoloStatus.EM_ANDAMENTO

    def test_aguardar_destino_invalido(self, operador):
        protocolo = _em_andamento(operador)

        with pytest.raises(ValidationError):
            protocolo.aguardar(operador, ProtocoloStatus.FECHADO, T0)

    def test_retomar_fora_de_espera_erro_de_estado(self, operador):
        protocolo = _em_andamento(operador)

        with pytest.raises(StateError):
            protocolo.retomar(operador, T0)

    def test_reabrir_limpa_fechamento_e_mantem_sla(self, operador, admin):
        protocolo = _em_andamento(operador)
        prazo = protocolo.sla_prazo
        protocolo.submeter_resolucao(operador, "Resolução: ok", T0)
        protocolo.aprovar(admin, T0)

        protocolo.reabrir(admin, T0 + timedelta(days=3), motivo="Defeito voltou")

        assert protocolo.status == ProtocoloStatus.REABERTO
        assert protocolo.fechado_em is None
        assert protocolo.resumo_resolucao is None
        assert protocolo.sla_prazo == prazo

        protocolo.iniciar(operador, T0 + timedelta(days=3))
        assert protocolo.status == ProtocoloStatus.EM_ANDAMENTO

    def test_reabrir_protocolo_aberto_erro_de_estado(self, admin):
        protocolo = _criar()

        with pytest.raises(StateError):
            protocolo.reabrir(admin, T0)


class TestProtocoloNotasEReatribuicao:
    def test_nota_nao_altera_status(self, outro_operador):
        protocolo = _criar()

        evento = protocolo.adicionar_nota(outro_operador, "Cliente ligou de novo", T0 + timedelta(hours=1))

        assert protocolo.status == ProtocoloStatus.ABERTO
        assert protocolo.atualizado_em == T0 + timedelta(hours=1)
        assert evento.tipo == ProtocoloEventoTipo.NOTA_ADICIONADA
        assert evento.nota == "Cliente ligou de novo"

    def test_nota_vazia_invalida(self, operador):
        protocolo = _criar()

        with pytest.raises(ValidationError):
            protocolo.adicionar_nota(operador, "   ", T0)

    def test_nota_em_protocolo_fechado(self, operador, admin):
        protocolo = _em_andamento(operador)
        protocolo.submeter_resolucao(operador, "Resolução: ok", T0)
        protocolo.aprovar(admin, T0)

        with pytest.raises(StateError):
            protocolo.adicionar_nota(operador, "Mais uma coisa", T0)

    def test_reatribuir_registra_valores(self, admin, outro_operador):
        protocolo = _criar()

        evento = protocolo.reatribuir(admin, outro_operador, T0)

        assert protocolo.responsavel_id == "op2"
        assert protocolo.status == ProtocoloStatus.ABERTO
        assert evento.valor_antigo == "op1"
        assert evento.valor_novo == "op2"

    def test_reatribuir_exige_administrador(self, operador, outro_operador):
        protocolo = _criar()

        with pytest.raises(AuthorizationError):
            protocolo.reatribuir(operador, outro_operador, T0)

    def test_reatribuir_para_inativo_invalido(self, admin):
        from src.core.operadores.entities import OperadorEntity

        inativo = OperadorEntity(id="op9", nome="Inativo", ativo=False)
        protocolo = _criar()

        with pytest.raises(ValidationError):
            protocolo.reatribuir(admin, inativo, T0)

        assert protocolo.responsavel_id == "op1"


class TestProtocoloSLA:
    def test_atrasado_apos_prazo(self):
        protocolo = _criar()

        assert protocolo.esta_atrasado(T0 + timedelta(hours=23)) is False
        assert protocolo.esta_atrasado(T0 + timedelta(hours=24, seconds=1)) is True

    def test_fechado_nunca_atrasado(self, operador, admin):
        protocolo = _em_andamento(operador)
        protocolo.submeter_resolucao(operador, "Resolução: ok", T0)
        protocolo.aprovar(admin, T0 + timedelta(hours=30))

        assert protocolo.esta_atrasado(T0 + timedelta(days=10)) is False
        assert protocolo.tempo_restante_sla(T0 + timedelta(days=10)) is None

    def test_tempo_restante_negativo_quando_atrasado(self):
        protocolo = _criar()

        restante = protocolo.tempo_restante_sla(T0 + timedelta(hours=25))

        assert restante == timedelta(hours=-1)

    def test_visibilidade(self, operador, outro_operador, admin):
        protocolo = _criar(origem_tipo_chamada=TipoChamada.POS_VENDA)

        assert protocolo.pode_ser_visto_por(operador) is True
        assert protocolo.pode_ser_visto_por(admin) is True
        assert protocolo.pode_ser_visto_por(outro_operador) is False
