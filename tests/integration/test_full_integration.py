"""
Testes de Integração End-to-End.

Fluxos completos montados pelo TestingContainer (repositórios, sessão
e publisher em memória, FakeClock):
- Atendimento → escalonamento → ciclo do protocolo até Fechado
- Domain Events publicados ao longo do caminho
"""

import pytest

from src.core.atendimento.dtos import ContatoDTO, EnviarAtendimentoInputDTO, EscalonamentoInputDTO
from src.core.atendimento.entities import TarefaEntity
from src.core.auditoria.entities import TipoChamada
from src.core.auditoria.ports import CATALOGO_PADRAO
from src.core.operadores.entities import OperadorEntity, OperadorRole
from src.core.protocolos.dtos import (
    ListarProtocolosQueryDTO,
    SubmeterResolucaoInputDTO,
    TransicaoProtocoloInputDTO,
)
from src.core.shared.exceptions import AuthorizationError


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def container():
    from src.config.container import TestingContainer

    container = TestingContainer()
    container.operador_repository().add(OperadorEntity(id="op1", nome="Ana"))
    container.operador_repository().add(
        OperadorEntity(id="adm", nome="Gestora", papel=OperadorRole.ADMIN)
    )
    for pergunta in CATALOGO_PADRAO:
        container.pergunta_auditoria_repository().add(pergunta)
    container.contato_repository().add(
        ContatoDTO(id="c1", tipo="cliente", nome="Maria Oliveira", itens=("Aquecedor solar 300L",))
    )
    return container


@pytest.fixture
def tarefa(container):
    tarefa = TarefaEntity(
        operador_id="op1",
        tipo_chamada=TipoChamada.POS_VENDA,
        prazo=container.clock().agora(),
        cliente_id="c1",
        criado_em=container.clock().agora(),
    )
    container.tarefa_repository().add(tarefa)
    return tarefa


# =============================================================================
# Testes de Fluxo Completo
# =============================================================================

class TestAtendimentoAteProtocoloFechado:
    """Chamada de pós-venda que vira protocolo e é aprovado."""

    def test_fluxo_completo(self, container, tarefa):
        fluxo = container.fluxo_atendimento_service()
        clock = container.clock()

        # 1. Atendimento com escalonamento
        fluxo.carregar_proxima("op1")
        fluxo.iniciar("op1")
        clock.avancar(segundos=42)
        fluxo.encerrar_chamada("op1")
        fluxo.responder("op1", "pv1", "Ok")
        clock.avancar(segundos=15)
        registro = fluxo.enviar(
            EnviarAtendimentoInputDTO(
                operador_id="op1",
                resumo="Aquecedor não esquenta",
                escalonamento=EscalonamentoInputDTO(
                    titulo="Aquecedor sem aquecimento",
                    descricao="Água fria desde a instalação",
                    departamento_id="d1",
                    prioridade="ALTA",
                ),
            )
        )

        assert registro.duracao_chamada == 42
        assert registro.duracao_relatorio == 15
        assert registro.protocolo_numero.startswith("PR")
        assert fluxo.obter_sessao("op1").estado == "idle"

        # 2. Ciclo do protocolo aberto pela chamada
        ref = registro.protocolo_numero
        container.iniciar_protocolo_service().execute(TransicaoProtocoloInputDTO(ref, "op1"))
        container.submeter_resolucao_service().execute(
            SubmeterResolucaoInputDTO(
                protocolo_ref=ref,
                ator_id="op1",
                resumo="Troca do termostato",
                respostas={"fc1": "Boa", "fc2": "Não"},
            )
        )

        with pytest.raises(AuthorizationError):
            container.aprovar_resolucao_service().execute(TransicaoProtocoloInputDTO(ref, "op1"))

        fechado = container.aprovar_resolucao_service().execute(
            TransicaoProtocoloInputDTO(ref, "adm")
        )

        assert fechado.status == "Fechado"
        assert fechado.origem_tipo_chamada == "PÓS-VENDA"
        assert fechado.resumo_resolucao == (
            "Resolução: Troca do termostato | Satisfação: Boa | Retornou Compra: Não"
        )

        # 3. Eventos
        publisher = container.event_publisher()
        assert len(publisher.get_events_by_type("ProtocoloCriadoEvent")) == 1
        assert len(publisher.get_events_by_type("AtendimentoFinalizadoEvent")) == 1
        assert len(publisher.get_events_by_type("ProtocoloStatusAlteradoEvent")) == 3

        historico = container.protocolo_evento_repository().list_by_protocolo(fechado.id)
        assert [e.valor_novo for e in historico] == [
            "Aberto",
            "Em andamento",
            "Resolvido (Pendente Confirmação)",
            "Fechado",
        ]

    def test_listagem_do_operador(self, container, tarefa):
        fluxo = container.fluxo_atendimento_service()
        fluxo.carregar_proxima("op1")
        fluxo.iniciar("op1")
        fluxo.encerrar_chamada("op1")
        fluxo.enviar(
            EnviarAtendimentoInputDTO(
                operador_id="op1",
                escalonamento=EscalonamentoInputDTO(
                    titulo="Retorno técnico",
                    descricao="Agendar visita",
                    departamento_id="d2",
                    prioridade="MEDIA",
                ),
            )
        )

        protocolos = container.listar_protocolos_service().execute(
            ListarProtocolosQueryDTO(), ator_id="op1"
        )

        assert len(protocolos) == 1
        assert protocolos[0].departamento_id == "d2"
        assert protocolos[0].prioridade == "Média"
