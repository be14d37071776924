"""
Testes da API JSON de Protocolos.

Testa:
- Autenticação (ator vem sempre da sessão)
- Abertura e ciclo completo via HTTP
- Mapeamento de erros de domínio para status HTTP
- Visibilidade por operador
"""

import json
from datetime import datetime, timedelta

import pytest


pytestmark = pytest.mark.django_db

BASE = '/protocolos/api/'


def _post(client, url, payload=None):
    return client.post(url, data=json.dumps(payload or {}), content_type='application/json')


def _abrir(client, **kwargs):
    payload = {
        'titulo': 'Vazamento na bomba',
        'descricao': 'Cliente relata vazamento após instalação',
        'departamento_id': 'd1',
        'prioridade': 'ALTA',
        'cliente_id': 'c1',
    }
    payload.update(kwargs)
    response = _post(client, BASE, payload)
    assert response.status_code == 201, response.content
    return response.json()['data']


class TestAutenticacao:
    def test_lista_sem_sessao(self, client):
        response = client.get(BASE)

        assert response.status_code == 401
        assert response.json()['success'] is False

    def test_usuario_sem_cadastro_de_operador(self, client, django_user_model):
        user = django_user_model.objects.create_user(username='visitante', password='x')
        client.force_login(user)

        response = _post(client, BASE, {'titulo': 'x'})

        assert response.status_code == 403

    def test_ator_do_corpo_e_ignorado(self, operador_client, operador_user, admin_user):
        data = _abrir(operador_client, ator_id=str(admin_user.id))

        assert data['aberto_por_id'] == str(operador_user.id)


class TestAbrirProtocolo:
    def test_abrir_com_prazo_por_prioridade(self, operador_client, operador_user):
        data = _abrir(operador_client)

        aberto_em = datetime.fromisoformat(data['aberto_em'])
        sla_prazo = datetime.fromisoformat(data['sla_prazo'])
        assert data['status'] == 'Aberto'
        assert data['prioridade'] == 'Alta'
        assert data['responsavel_id'] == str(operador_user.id)
        assert data['numero'].startswith('PR')
        assert sla_prazo - aberto_em == timedelta(hours=24)

    def test_prioridade_invalida(self, operador_client):
        response = _post(operador_client, BASE, {
            'titulo': 'Sem prioridade',
            'descricao': 'Prioridade fora da tabela',
            'departamento_id': 'd1',
            'prioridade': 'URGENTE',
            'cliente_id': 'c1',
        })

        assert response.status_code == 400
        assert response.json()['meta']['field'] == 'prioridade'

    def test_prioridade_ausente(self, operador_client):
        response = _post(operador_client, BASE, {
            'titulo': 'Sem prioridade',
            'descricao': 'Campo omitido',
            'departamento_id': 'd1',
            'cliente_id': 'c1',
        })

        assert response.status_code == 400
        assert response.json()['meta']['field'] == 'prioridade'
        assert operador_client.get(BASE).json()['data'] == []

    def test_json_invalido(self, operador_client):
        response = operador_client.post(BASE, data='{nao é json', content_type='application/json')

        assert response.status_code == 400

    def test_cliente_e_prospect_juntos(self, operador_client):
        response = _post(operador_client, BASE, {
            'titulo': 'Dois sujeitos',
            'descricao': 'Não pode',
            'departamento_id': 'd1',
            'cliente_id': 'c1',
            'prospect_id': 'p1',
        })

        assert response.status_code == 400


class TestCicloViaAPI:
    def test_alta_ate_fechado(self, operador_client, admin_client, catalogo):
        protocolo = _abrir(operador_client)
        ref = protocolo['numero']

        response = _post(operador_client, f'{BASE}{ref}/iniciar/')
        assert response.status_code == 200
        assert response.json()['data']['status'] == 'Em andamento'

        response = _post(operador_client, f'{BASE}{ref}/submeter/', {
            'resumo': 'fixed pump seal',
            'respostas': {'fc1': 'Boa'},
        })
        assert response.status_code == 400
        assert response.json()['meta']['pendentes'] == ['fc2']

        response = _post(operador_client, f'{BASE}{ref}/submeter/', {
            'resumo': 'fixed pump seal',
            'respostas': {'fc1': 'Boa', 'fc2': 'Sim'},
        })
        assert response.status_code == 200
        data = response.json()['data']
        assert data['status'] == 'Resolvido (Pendente Confirmação)'
        assert data['resumo_resolucao'] == (
            'Resolução: fixed pump seal | Satisfação: Boa | Retornou Compra: Sim'
        )

        response = _post(operador_client, f'{BASE}{ref}/aprovar/')
        assert response.status_code == 403

        response = _post(admin_client, f'{BASE}{ref}/aprovar/')
        assert response.status_code == 200
        assert response.json()['data']['status'] == 'Fechado'
        assert response.json()['data']['fechado_em'] is not None

        response = operador_client.get(f'{BASE}{ref}/eventos/')
        eventos = response.json()['data']
        assert response.json()['meta']['total'] == 4
        assert [e['tipo'] for e in eventos] == [
            'created', 'status_changed', 'status_changed', 'status_changed'
        ]

    def test_transicao_fora_de_ordem(self, operador_client, admin_client):
        protocolo = _abrir(operador_client)

        response = _post(admin_client, f"{BASE}{protocolo['id']}/aprovar/")

        assert response.status_code == 409
        assert response.json()['meta']['current_status'] == 'Aberto'

    def test_rejeitar_volta_para_em_andamento(self, operador_client, admin_client, catalogo):
        ref = _abrir(operador_client)['id']
        _post(operador_client, f'{BASE}{ref}/iniciar/')
        _post(operador_client, f'{BASE}{ref}/submeter/', {
            'resumo': 'Troca do selo',
            'respostas': {'fc1': 'Boa', 'fc2': 'Não'},
        })

        response = _post(admin_client, f'{BASE}{ref}/rejeitar/', {'motivo': 'Sem foto'})

        assert response.status_code == 200
        assert response.json()['data']['status'] == 'Em andamento'
        assert response.json()['data']['resumo_resolucao'] is None

    def test_aguardar_e_retomar(self, operador_client):
        ref = _abrir(operador_client)['id']
        _post(operador_client, f'{BASE}{ref}/iniciar/')

        response = _post(operador_client, f'{BASE}{ref}/aguardar/', {
            'destino': 'AGUARDANDO_CLIENTE',
            'nota': 'Retorno amanhã',
        })
        assert response.json()['data']['status'] == 'Aguardando Cliente'

        response = _post(operador_client, f'{BASE}{ref}/retomar/')
        assert response.json()['data']['status'] == 'Em andamento'

    def test_nota_e_reatribuicao(self, operador_client, admin_client, outro_user, outro_client):
        ref = _abrir(operador_client)['id']

        response = _post(operador_client, f'{BASE}{ref}/notas/', {'texto': 'Cliente ligou'})
        assert response.status_code == 201
        assert response.json()['data']['tipo'] == 'note_added'

        response = _post(admin_client, f'{BASE}{ref}/reatribuir/', {
            'novo_responsavel_id': str(outro_user.id),
        })
        assert response.status_code == 200
        assert response.json()['data']['responsavel_id'] == str(outro_user.id)

        response = outro_client.get(f'{BASE}{ref}/')
        assert response.status_code == 200

    def test_reatribuir_por_operador(self, operador_client, outro_user):
        ref = _abrir(operador_client)['id']

        response = _post(operador_client, f'{BASE}{ref}/reatribuir/', {
            'novo_responsavel_id': str(outro_user.id),
        })

        assert response.status_code == 403


class TestConsultas:
    def test_protocolo_inexistente(self, operador_client):
        response = operador_client.get(f'{BASE}PRZZZZZ/')

        assert response.status_code == 404

    def test_fora_da_carteira(self, operador_client, outro_client):
        ref = _abrir(operador_client)['id']

        assert outro_client.get(f'{BASE}{ref}/').status_code == 403
        assert outro_client.get(BASE).json()['data'] == []

    def test_lista_ordenada_e_paginada(self, operador_client):
        _abrir(operador_client, prioridade='BAIXA', titulo='Baixa')
        _abrir(operador_client, prioridade='ALTA', titulo='Alta')
        _abrir(operador_client, prioridade='MEDIA', titulo='Media')

        response = operador_client.get(BASE, {'per_page': 2})
        body = response.json()

        assert [p['titulo'] for p in body['data']] == ['Alta', 'Media']
        assert body['meta']['total'] == 3
        assert body['meta']['total_pages'] == 2

    def test_filtro_status_invalido(self, operador_client):
        response = operador_client.get(BASE, {'status': 'PERDIDO'})

        assert response.status_code == 400

    def test_estatisticas_admin(self, operador_client, outro_client, admin_client):
        _abrir(operador_client)
        _abrir(outro_client)

        data = admin_client.get(f'{BASE}estatisticas/').json()['data']

        assert data['total'] == 2
        assert data['por_status']['Aberto'] == 2
        assert data['atrasados'] == 0

    def test_departamentos(self, operador_client):
        data = operador_client.get(f'{BASE}departamentos/').json()['data']

        assert {'id': 'd1', 'nome': 'Suporte'} in data

    def test_checklist(self, operador_client, catalogo):
        data = operador_client.get(f'{BASE}checklist/', {'tipo_chamada': 'VENDA'}).json()['data']

        assert [p['id'] for p in data] == ['fc1', 'fc2']

    def test_checklist_tipo_invalido(self, operador_client):
        response = operador_client.get(f'{BASE}checklist/', {'tipo_chamada': 'COBRANÇA'})

        assert response.status_code == 400
