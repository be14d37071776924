"""
Configuração pytest para testes com Django.

Settings vêm de src.config.test_settings (pyproject.toml):
- SQLite em memória, tabelas criadas direto dos models
- Cache local e publisher de eventos em memória

Fixtures:
- Usuários Django com o cadastro de operador correspondente
- Clients autenticados
- Catálogo de auditoria padrão
"""

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import caches
from django.test import Client

from src.config.container import reset_container


@pytest.fixture(autouse=True)
def reset_di_container():
    """Container e cache limpos entre testes."""
    reset_container()
    caches['default'].clear()
    yield
    reset_container()
    caches['default'].clear()


@pytest.fixture
def criar_operador(db):
    """
    Factory: cria usuário Django e o operador com o mesmo ID.

    Example:
        user = criar_operador("ana", papel="ADMIN")
    """
    from src.adapters.django_app.protocolos.models import OperadorModel

    def _criar(username, papel="OPERATOR_TELEMARKETING", ativo=True):
        user = get_user_model().objects.create_user(username=username, password=username)
        OperadorModel.objects.create(
            id=str(user.id),
            nome=username.title(),
            papel=papel,
            ativo=ativo,
        )
        return user

    return _criar


@pytest.fixture
def operador_user(criar_operador):
    return criar_operador("ana")


@pytest.fixture
def outro_user(criar_operador):
    return criar_operador("bruno")


@pytest.fixture
def admin_user(criar_operador):
    return criar_operador("gestora", papel="ADMIN")


def _logado(user):
    client = Client()
    client.force_login(user)
    return client


@pytest.fixture
def operador_client(operador_user):
    return _logado(operador_user)


@pytest.fixture
def outro_client(outro_user):
    return _logado(outro_user)


@pytest.fixture
def admin_client(admin_user):
    return _logado(admin_user)


@pytest.fixture
def catalogo(db):
    """Catálogo de auditoria padrão gravado no banco."""
    from src.adapters.django_app.protocolos.repositories import DjangoPerguntaAuditoriaRepository
    from src.core.auditoria.ports import CATALOGO_PADRAO

    repo = DjangoPerguntaAuditoriaRepository()
    for pergunta in CATALOGO_PADRAO:
        repo.add(pergunta)
    return CATALOGO_PADRAO


@pytest.fixture
def contatos(db):
    from src.adapters.django_app.atendimento.models import ContatoModel

    ContatoModel.objects.create(
        id="c1",
        tipo="cliente",
        nome="Maria Oliveira",
        telefone="(11) 98888-1111",
        itens=["Aquecedor solar 300L"],
    )
    ContatoModel.objects.create(id="p1", tipo="prospect", nome="Padaria Bom Pão")
