"""
Migration inicial para o domínio de Protocolos.

Cria as tabelas:
- protocolos: Protocolos
- protocolo_eventos: Histórico append-only
- operadores: Cadastro de operadores
- perguntas_auditoria: Catálogo de auditoria
"""

from django.db import migrations, models
import django.db.models.deletion


STATUS_CHOICES = [
    ('Aberto', 'Aberto'),
    ('Em andamento', 'Em andamento'),
    ('Aguardando Setor', 'Aguardando Setor'),
    ('Aguardando Cliente', 'Aguardando Cliente'),
    ('Resolvido (Pendente Confirmação)', 'Resolvido (Pendente Confirmação)'),
    ('Fechado', 'Fechado'),
    ('Reaberto', 'Reaberto'),
]

PRIORIDADE_CHOICES = [
    ('Baixa', 'Baixa'),
    ('Média', 'Média'),
    ('Alta', 'Alta'),
]

PAPEL_CHOICES = [
    ('ADMIN', 'Administrador'),
    ('SUPERVISOR', 'Supervisor'),
    ('OPERATOR_TELEMARKETING', 'Operador de Telemarketing'),
    ('ANALISTA_MARKETING', 'Analista de Marketing'),
    ('VENDEDOR', 'Vendedor'),
]


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        # =================================================================
        # Tabela: protocolos
        # =================================================================
        migrations.CreateModel(
            name='ProtocoloModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único do protocolo'
                )),
                ('numero', models.CharField(
                    max_length=16,
                    unique=True,
                    help_text='Número exibido ao cliente'
                )),
                ('cliente_id', models.CharField(max_length=100, null=True, blank=True, db_index=True)),
                ('prospect_id', models.CharField(max_length=100, null=True, blank=True, db_index=True)),
                ('aberto_por_id', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='Operador que abriu o protocolo'
                )),
                ('responsavel_id', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='Operador responsável'
                )),
                ('departamento_id', models.CharField(
                    max_length=50,
                    db_index=True,
                    help_text='Setor de destino'
                )),
                ('titulo', models.CharField(max_length=200)),
                ('descricao', models.TextField()),
                ('status', models.CharField(
                    max_length=50,
                    choices=STATUS_CHOICES,
                    default='Aberto',
                    db_index=True,
                )),
                ('prioridade', models.CharField(
                    max_length=20,
                    choices=PRIORIDADE_CHOICES,
                    default='Média',
                    db_index=True,
                )),
                ('aberto_em', models.DateTimeField(db_index=True)),
                ('atualizado_em', models.DateTimeField()),
                ('sla_prazo', models.DateTimeField(db_index=True)),
                ('fechado_em', models.DateTimeField(null=True, blank=True)),
                ('resumo_resolucao', models.TextField(null=True, blank=True)),
                ('origem_tipo_chamada', models.CharField(
                    max_length=50,
                    null=True,
                    blank=True,
                    help_text='Tipo da chamada que originou o protocolo'
                )),
                ('versao', models.PositiveIntegerField(default=1)),
            ],
            options={
                'verbose_name': 'Protocolo',
                'verbose_name_plural': 'Protocolos',
                'db_table': 'protocolos',
                'ordering': ['-aberto_em'],
            },
        ),

        # =================================================================
        # Tabela: protocolo_eventos
        # =================================================================
        migrations.CreateModel(
            name='ProtocoloEventoModel',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('evento_id', models.CharField(
                    max_length=36,
                    unique=True,
                    help_text='UUID do evento gerado pelo núcleo'
                )),
                ('tipo', models.CharField(max_length=30, db_index=True)),
                ('ator_id', models.CharField(max_length=100)),
                ('criado_em', models.DateTimeField(db_index=True)),
                ('valor_antigo', models.CharField(max_length=100, null=True, blank=True)),
                ('valor_novo', models.CharField(max_length=100, null=True, blank=True)),
                ('nota', models.TextField(blank=True, default='')),
                ('protocolo', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='eventos',
                    to='protocolos.protocolomodel',
                )),
            ],
            options={
                'verbose_name': 'Evento de Protocolo',
                'verbose_name_plural': 'Histórico de Protocolos',
                'db_table': 'protocolo_eventos',
                'ordering': ['criado_em', 'id'],
            },
        ),

        # =================================================================
        # Tabela: operadores
        # =================================================================
        migrations.CreateModel(
            name='OperadorModel',
            fields=[
                ('id', models.CharField(max_length=100, primary_key=True, serialize=False)),
                ('nome', models.CharField(max_length=150)),
                ('papel', models.CharField(
                    max_length=30,
                    choices=PAPEL_CHOICES,
                    default='OPERATOR_TELEMARKETING',
                )),
                ('ativo', models.BooleanField(default=True, db_index=True)),
            ],
            options={
                'verbose_name': 'Operador',
                'verbose_name_plural': 'Operadores',
                'db_table': 'operadores',
                'ordering': ['nome'],
            },
        ),

        # =================================================================
        # Tabela: perguntas_auditoria
        # =================================================================
        migrations.CreateModel(
            name='PerguntaAuditoriaModel',
            fields=[
                ('id', models.CharField(max_length=50, primary_key=True, serialize=False)),
                ('texto', models.CharField(max_length=255)),
                ('opcoes', models.JSONField(default=list)),
                ('tipos', models.JSONField(default=list)),
                ('ordem', models.IntegerField(default=0)),
                ('sensivel_upsell', models.BooleanField(default=False)),
                ('confirmacao_fechamento', models.BooleanField(default=False)),
                ('etapa', models.CharField(max_length=50, null=True, blank=True)),
                ('ativa', models.BooleanField(default=True)),
            ],
            options={
                'verbose_name': 'Pergunta de Auditoria',
                'verbose_name_plural': 'Perguntas de Auditoria',
                'db_table': 'perguntas_auditoria',
                'ordering': ['ordem', 'id'],
            },
        ),

        # =================================================================
        # Índices
        # =================================================================
        migrations.AddIndex(
            model_name='protocolomodel',
            index=models.Index(fields=['status', 'aberto_em'], name='protocolos_status_9a1c2e_idx'),
        ),
        migrations.AddIndex(
            model_name='protocolomodel',
            index=models.Index(fields=['responsavel_id', 'status'], name='protocolos_respons_4b7d31_idx'),
        ),
        migrations.AddIndex(
            model_name='protocolomodel',
            index=models.Index(fields=['prioridade', 'sla_prazo'], name='protocolos_priorid_e2f860_idx'),
        ),
        migrations.AddIndex(
            model_name='protocoloeventomodel',
            index=models.Index(fields=['protocolo', 'criado_em'], name='protocolo_e_protoco_7c5a90_idx'),
        ),
    ]
