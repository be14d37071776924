"""
Testes da API JSON do fluxo de atendimento.

O relógio do container é trocado por um FakeClock com horário
"aware", de modo que cronômetros e timestamps gravados no banco são
determinísticos.
"""

import json
from datetime import timedelta

import pytest
from dependency_injector import providers
from django.utils import timezone

from src.adapters.django_app.atendimento.models import (
    OperadorEventoModel,
    RegistroChamadaModel,
    TarefaModel,
)
from src.adapters.django_app.atendimento.repositories import DjangoTarefaRepository
from src.adapters.django_app.protocolos.models import ProtocoloModel
from src.config.container import get_container
from src.core.atendimento.entities import TarefaEntity
from src.core.auditoria.entities import TipoChamada
from src.core.shared.interfaces import FakeClock


pytestmark = pytest.mark.django_db

BASE = '/atendimento/api/'


@pytest.fixture
def clock():
    relogio = FakeClock(timezone.now().replace(microsecond=0))
    get_container().clock.override(providers.Object(relogio))
    return relogio


@pytest.fixture
def fila(operador_user, contatos, catalogo, clock):
    """Duas tarefas de pós-venda para o operador logado."""
    repo = DjangoTarefaRepository()
    tarefas = []
    for minutos in (0, 5):
        tarefa = TarefaEntity(
            operador_id=str(operador_user.id),
            tipo_chamada=TipoChamada.POS_VENDA,
            prazo=clock.agora() + timedelta(days=2),
            cliente_id='c1',
            criado_em=clock.agora() - timedelta(hours=1) + timedelta(minutes=minutos),
        )
        repo.add(tarefa)
        tarefas.append(tarefa)
    return tarefas


def _acao(client, acao, payload=None):
    return client.post(
        f'{BASE}sessao/{acao}/',
        data=json.dumps(payload or {}),
        content_type='application/json',
    )


class TestSessaoAPI:
    def test_sessao_sem_login(self, client):
        assert client.get(f'{BASE}sessao/').status_code == 401

    def test_sessao_ociosa(self, operador_client, operador_user):
        data = operador_client.get(f'{BASE}sessao/').json()['data']

        assert data['estado'] == 'idle'
        assert data['operador_id'] == str(operador_user.id)
        assert data['tarefa'] is None

    def test_proxima_carrega_tarefa_contato_e_roteiro(self, operador_client, fila):
        response = _acao(operador_client, 'proxima')
        data = response.json()['data']

        assert response.status_code == 200
        assert data['estado'] == 'ready'
        assert data['tarefa']['id'] == fila[0].id
        assert data['contato']['nome'] == 'Maria Oliveira'
        assert [p['id'] for p in data['perguntas']] == ['pv1', 'pv2', 'pv3']

    def test_acao_desconhecida(self, operador_client):
        assert _acao(operador_client, 'pausar').status_code == 404

    def test_iniciar_sem_tarefa(self, operador_client, clock):
        response = _acao(operador_client, 'iniciar')

        assert response.status_code == 409
        assert response.json()['meta']['current_status'] == 'idle'


class TestAtendimentoCompleto:
    def test_chamada_de_42_segundos(self, operador_client, operador_user, fila, clock):
        _acao(operador_client, 'proxima')
        _acao(operador_client, 'iniciar')
        clock.avancar(segundos=42)

        tick = operador_client.get(f'{BASE}sessao/tick/').json()['data']
        assert tick['decorrido'] == 42

        data = _acao(operador_client, 'encerrar').json()['data']
        assert data['estado'] == 'reporting'
        assert data['duracao_chamada'] == 42

        data = _acao(operador_client, 'responder', {'pergunta_id': 'pv3', 'valor': 'Sim'}).json()['data']
        assert data['justificativas_pendentes'] == ['pv3']

        response = _acao(operador_client, 'enviar', {'resumo': 'Cliente satisfeito'})
        assert response.status_code == 400
        assert response.json()['meta']['pendentes'] == ['pv3']
        assert RegistroChamadaModel.objects.count() == 0

        _acao(operador_client, 'justificar', {'pergunta_id': 'pv3', 'nota': 'Pediu orçamento'})
        clock.avancar(segundos=20)
        response = _acao(operador_client, 'enviar', {'resumo': 'Cliente satisfeito'})

        assert response.status_code == 201
        registro = response.json()['data']['registro']
        assert registro['duracao_chamada'] == 42
        assert registro['duracao_relatorio'] == 20
        assert registro['respostas']['pv3'] == 'Sim'
        assert registro['respostas']['written_report'] == 'Cliente satisfeito'
        assert registro['respostas']['call_type'] == 'PÓS-VENDA'
        assert registro['justificativas'] == {'pv3': 'Pediu orçamento'}

        proxima = response.json()['data']['sessao']
        assert proxima['estado'] == 'ready'
        assert proxima['tarefa']['id'] == fila[1].id

        assert TarefaModel.objects.get(id=fila[0].id).status == 'completed'
        modelo = RegistroChamadaModel.objects.get(tarefa_id=fila[0].id)
        assert modelo.respostas == [['pv3', 'Sim']]
        assert list(
            OperadorEventoModel.objects.filter(
                operador_id=str(operador_user.id)
            ).order_by('id').values_list('tipo', flat=True)
        ) == ['INICIAR_PROXIMO_ATENDIMENTO', 'FINALIZAR_ATENDIMENTO']

    def test_enviar_com_escalonamento(self, operador_client, operador_user, fila, clock):
        _acao(operador_client, 'proxima')
        _acao(operador_client, 'iniciar')
        clock.avancar(segundos=30)
        _acao(operador_client, 'encerrar')

        response = _acao(operador_client, 'enviar', {
            'resumo': 'Aquecedor não esquenta',
            'escalonamento': {
                'titulo': 'Aquecedor sem aquecimento',
                'descricao': 'Água fria desde a instalação',
                'departamento_id': 'd1',
                'prioridade': 'ALTA',
            },
        })

        assert response.status_code == 201
        registro = response.json()['data']['registro']
        protocolo = ProtocoloModel.objects.get(id=registro['protocolo_id'])
        assert protocolo.numero == registro['protocolo_numero']
        assert protocolo.origem_tipo_chamada == 'PÓS-VENDA'
        assert protocolo.cliente_id == 'c1'
        assert protocolo.responsavel_id == str(operador_user.id)
        assert protocolo.sla_prazo - protocolo.aberto_em == timedelta(hours=24)

    def test_escalonamento_invalido_nao_grava(self, operador_client, fila, clock):
        _acao(operador_client, 'proxima')
        _acao(operador_client, 'iniciar')
        _acao(operador_client, 'encerrar')

        response = _acao(operador_client, 'enviar', {
            'resumo': 'x',
            'escalonamento': {'titulo': 'Sem setor', 'descricao': 'd', 'prioridade': 'ALTA'},
        })

        assert response.status_code == 400
        assert RegistroChamadaModel.objects.count() == 0
        assert ProtocoloModel.objects.count() == 0
        assert TarefaModel.objects.get(id=fila[0].id).status == 'pending'
        assert operador_client.get(f'{BASE}sessao/').json()['data']['estado'] == 'reporting'

    def test_escalonamento_sem_prioridade_e_reenvio(self, operador_client, fila, clock):
        _acao(operador_client, 'proxima')
        _acao(operador_client, 'iniciar')
        _acao(operador_client, 'encerrar')
        escalonamento = {
            'titulo': 'Aquecedor sem aquecimento',
            'descricao': 'Água fria desde a instalação',
            'departamento_id': 'd1',
        }

        response = _acao(operador_client, 'enviar', {'resumo': 'x', 'escalonamento': escalonamento})

        assert response.status_code == 400
        assert response.json()['meta']['field'] == 'prioridade'
        assert ProtocoloModel.objects.count() == 0
        assert TarefaModel.objects.get(id=fila[0].id).status == 'pending'

        escalonamento['prioridade'] = 'BAIXA'
        response = _acao(operador_client, 'enviar', {'resumo': 'x', 'escalonamento': escalonamento})

        assert response.status_code == 201
        assert ProtocoloModel.objects.get().prioridade == 'Baixa'
        assert TarefaModel.objects.get(id=fila[0].id).status == 'completed'


class TestPularECancelar:
    def test_pular_com_motivo(self, operador_client, operador_user, fila):
        _acao(operador_client, 'proxima')

        data = _acao(operador_client, 'pular', {'motivo': 'CAIXA POSTAL'}).json()['data']

        tarefa = TarefaModel.objects.get(id=fila[0].id)
        assert tarefa.status == 'skipped'
        assert tarefa.motivo_pulo == 'CAIXA POSTAL'
        assert data['tarefa']['id'] == fila[1].id
        evento = OperadorEventoModel.objects.get(tipo='PULAR_ATENDIMENTO')
        assert evento.detalhe == 'CAIXA POSTAL'
        assert evento.tarefa_id == fila[0].id

    def test_pular_motivo_invalido(self, operador_client, fila):
        _acao(operador_client, 'proxima')

        assert _acao(operador_client, 'pular', {'motivo': 'SEM VONTADE'}).status_code == 400

    def test_cancelar_mantem_tarefa_pendente(self, operador_client, fila):
        _acao(operador_client, 'proxima')
        _acao(operador_client, 'iniciar')

        data = _acao(operador_client, 'cancelar').json()['data']

        assert data['estado'] == 'idle'
        assert TarefaModel.objects.get(id=fila[0].id).status == 'pending'
        assert RegistroChamadaModel.objects.count() == 0

    def test_motivos_pulo(self, operador_client):
        data = operador_client.get(f'{BASE}motivos-pulo/').json()['data']

        assert {'id': 'CAIXA_POSTAL', 'nome': 'CAIXA POSTAL'} in data


class TestRegistrosAPI:
    def test_operador_ve_apenas_os_proprios(
        self, operador_client, outro_client, admin_client, operador_user, fila, clock
    ):
        _acao(operador_client, 'proxima')
        _acao(operador_client, 'iniciar')
        _acao(operador_client, 'encerrar')
        _acao(operador_client, 'enviar', {'resumo': 'ok'})

        proprios = operador_client.get(f'{BASE}registros/').json()
        alheios = outro_client.get(f'{BASE}registros/', {'operador_id': str(operador_user.id)}).json()
        todos = admin_client.get(f'{BASE}registros/').json()

        assert proprios['meta']['total'] == 1
        assert alheios['meta']['total'] == 0
        assert todos['meta']['total'] == 1
