#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings
2. Cria banco de dados SQLite
3. Executa migrations
4. Cria dados de exemplo (opcional)

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
"""

import os
import sys
import argparse

# Adicionar src ao path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def setup_django():
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')
    
    # Forçar SQLite para desenvolvimento rápido
    os.environ['DATABASE_URL'] = 'sqlite:///db.sqlite3'
    
    import django
    django.setup()


def run_migrations():
    """Executa migrations."""
    from django.core.management import call_command
    
    print("📦 Executando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Migrations concluídas!")


# (username, nome, papel) - o id do operador é o id do usuário Django
SAMPLE_OPERADORES = [
    ('admin', 'Administração', 'ADMIN'),
    ('operador1', 'Ana Souza', 'OPERATOR_TELEMARKETING'),
    ('operador2', 'Bruno Lima', 'OPERATOR_TELEMARKETING'),
]

SAMPLE_CONTATOS = [
    {
        'id': 'c1',
        'tipo': 'cliente',
        'nome': 'Maria Oliveira',
        'telefone': '(11) 98888-1111',
        'endereco': 'Rua das Flores, 120 - São Paulo',
        'itens': ['Aquecedor solar 300L'],
    },
    {
        'id': 'c2',
        'tipo': 'cliente',
        'nome': 'João Pereira',
        'telefone': '(21) 97777-2222',
        'endereco': 'Av. Atlântica, 55 - Rio de Janeiro',
        'itens': ['Placa fotovoltaica 550W', 'Inversor 5kW'],
    },
    {
        'id': 'p1',
        'tipo': 'prospect',
        'nome': 'Padaria Bom Pão',
        'telefone': '(31) 96666-3333',
        'endereco': 'Rua Central, 10 - Belo Horizonte',
        'itens': [],
    },
]


def create_sample_data():
    """Cria operadores, contatos, catálogo de auditoria e fila de tarefas."""
    from datetime import timedelta

    from django.contrib.auth import get_user_model
    from django.utils import timezone

    from src.core.atendimento.entities import TarefaEntity
    from src.core.auditoria.entities import TipoChamada
    from src.core.auditoria.ports import CATALOGO_PADRAO
    from src.adapters.django_app.atendimento.models import ContatoModel, TarefaModel
    from src.adapters.django_app.atendimento.repositories import DjangoTarefaRepository
    from src.adapters.django_app.protocolos.models import OperadorModel, PerguntaAuditoriaModel
    from src.adapters.django_app.protocolos.repositories import DjangoPerguntaAuditoriaRepository

    User = get_user_model()

    print("👤 Criando operadores...")
    operadores = {}
    for username, nome, papel in SAMPLE_OPERADORES:
        user, created = User.objects.get_or_create(
            username=username,
            defaults={'is_staff': papel == 'ADMIN', 'is_superuser': papel == 'ADMIN'},
        )
        if created:
            user.set_password(username)
            user.save()
        OperadorModel.objects.update_or_create(
            id=str(user.id),
            defaults={'nome': nome, 'papel': papel, 'ativo': True},
        )
        operadores[username] = str(user.id)
        print(f"   ✓ {nome} ({papel}) - login: {username}/{username}")

    print("📇 Criando contatos...")
    for contato in SAMPLE_CONTATOS:
        ContatoModel.objects.update_or_create(id=contato['id'], defaults=contato)
        print(f"   ✓ {contato['nome']}")

    print("📋 Carregando catálogo de auditoria...")
    catalogo_repo = DjangoPerguntaAuditoriaRepository()
    for pergunta in CATALOGO_PADRAO:
        if not PerguntaAuditoriaModel.objects.filter(id=pergunta.id).exists():
            catalogo_repo.add(pergunta)
    print(f"   ✓ {len(CATALOGO_PADRAO)} perguntas")

    print("📞 Criando fila de tarefas...")
    tarefa_repo = DjangoTarefaRepository()
    agora = timezone.now()
    fila = [
        ('operador1', TipoChamada.POS_VENDA, {'cliente_id': 'c1'}),
        ('operador1', TipoChamada.PROSPECCAO, {'prospect_id': 'p1'}),
        ('operador1', TipoChamada.ASSISTENCIA, {'cliente_id': 'c2'}),
        ('operador2', TipoChamada.VENDA, {'cliente_id': 'c2'}),
    ]
    for posicao, (username, tipo, contato) in enumerate(fila):
        if TarefaModel.objects.filter(operador_id=operadores[username], status='pending').count() >= 3:
            continue
        tarefa_repo.add(
            TarefaEntity(
                operador_id=operadores[username],
                tipo_chamada=tipo,
                prazo=agora + timedelta(days=1),
                criado_em=agora + timedelta(seconds=posicao),
                **contato,
            )
        )
        print(f"   ✓ {tipo.value} para {username}")

    print("✅ Dados de exemplo criados!")


def check_connection():
    """Verifica conexão com o banco."""
    from django.db import connection
    
    print("🔍 Verificando conexão com o banco...")
    
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        print("✅ Conexão OK!")
        return True
    except Exception as e:
        print(f"❌ Erro de conexão: {e}")
        return False


def show_info():
    """Mostra informações do setup."""
    from django.conf import settings
    
    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Debug Mode: {settings.DEBUG}")
    print("=" * 60)
    print("\n🚀 Próximos passos:")
    print("   1. django-admin runserver --settings=src.config.settings --pythonpath=.")
    print("   2. Acesse: http://localhost:8000/admin/")
    print("   3. Acesse: http://localhost:8000/atendimento/api/sessao/")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Criar dados de exemplo'
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )
    
    args = parser.parse_args()
    
    print("\n" + "=" * 60)
    print("🔧 Telemarketing - Quick Setup")
    print("=" * 60 + "\n")
    
    # Configurar Django
    setup_django()
    
    if args.check_only:
        check_connection()
        return
    
    # Verificar conexão
    if not check_connection():
        print("\n⚠️  Certifique-se de que o banco de dados está rodando.")
        print("   Para usar SQLite, defina: DATABASE_URL=sqlite:///db.sqlite3")
        return
    
    # Executar migrations
    run_migrations()
    
    # Criar dados de exemplo
    if args.with_sample_data:
        create_sample_data()
    
    # Mostrar informações
    show_info()


if __name__ == '__main__':
    main()
