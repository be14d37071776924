"""
Migration inicial para o domínio de Atendimento.

Cria as tabelas:
- contatos: Clientes e prospects
- tarefas: Fila por operador
- registros_chamada: Chamadas concluídas
- operador_eventos: Ciclo de vida do operador
"""

from django.db import migrations, models
import django.utils.timezone


TIPO_CHAMADA_CHOICES = [
    ('PÓS-VENDA', 'Pós-venda'),
    ('PROSPECÇÃO', 'Prospecção'),
    ('VENDA', 'Venda'),
    ('CONFIRMAÇÃO PROTOCOLO', 'Confirmação de protocolo'),
    ('ASSISTÊNCIA', 'Assistência'),
]


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='ContatoModel',
            fields=[
                ('id', models.CharField(max_length=100, primary_key=True, serialize=False)),
                ('tipo', models.CharField(
                    max_length=10,
                    choices=[('cliente', 'Cliente'), ('prospect', 'Prospect')],
                    db_index=True,
                )),
                ('nome', models.CharField(max_length=200)),
                ('telefone', models.CharField(max_length=30, blank=True, default='')),
                ('endereco', models.CharField(max_length=255, blank=True, default='')),
                ('itens', models.JSONField(default=list, blank=True)),
            ],
            options={
                'verbose_name': 'Contato',
                'verbose_name_plural': 'Contatos',
                'db_table': 'contatos',
                'ordering': ['nome'],
            },
        ),
        migrations.CreateModel(
            name='TarefaModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('operador_id', models.CharField(max_length=100, db_index=True)),
                ('tipo_chamada', models.CharField(max_length=30, choices=TIPO_CHAMADA_CHOICES)),
                ('prazo', models.DateTimeField()),
                ('cliente_id', models.CharField(max_length=100, null=True, blank=True)),
                ('prospect_id', models.CharField(max_length=100, null=True, blank=True)),
                ('status', models.CharField(
                    max_length=20,
                    choices=[
                        ('pending', 'Pendente'),
                        ('completed', 'Concluída'),
                        ('skipped', 'Pulada'),
                    ],
                    default='pending',
                    db_index=True,
                )),
                ('motivo_pulo', models.CharField(max_length=60, null=True, blank=True)),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now, db_index=True)),
            ],
            options={
                'verbose_name': 'Tarefa',
                'verbose_name_plural': 'Tarefas',
                'db_table': 'tarefas',
                'ordering': ['criado_em', 'id'],
            },
        ),
        migrations.CreateModel(
            name='RegistroChamadaModel',
            fields=[
                ('id', models.CharField(max_length=36, primary_key=True, serialize=False, editable=False)),
                ('tarefa_id', models.CharField(max_length=36, unique=True)),
                ('operador_id', models.CharField(max_length=100, db_index=True)),
                ('tipo_chamada', models.CharField(max_length=30, choices=TIPO_CHAMADA_CHOICES)),
                ('inicio', models.DateTimeField()),
                ('fim', models.DateTimeField(db_index=True)),
                ('duracao_chamada', models.PositiveIntegerField()),
                ('duracao_relatorio', models.PositiveIntegerField()),
                ('respostas', models.JSONField(default=list)),
                ('justificativas', models.JSONField(default=list)),
                ('resumo', models.TextField(blank=True, default='')),
                ('cliente_id', models.CharField(max_length=100, null=True, blank=True)),
                ('prospect_id', models.CharField(max_length=100, null=True, blank=True)),
                ('protocolo_id', models.CharField(max_length=36, null=True, blank=True, db_index=True)),
            ],
            options={
                'verbose_name': 'Registro de Chamada',
                'verbose_name_plural': 'Registros de Chamada',
                'db_table': 'registros_chamada',
                'ordering': ['-fim'],
            },
        ),
        migrations.CreateModel(
            name='OperadorEventoModel',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('operador_id', models.CharField(max_length=100, db_index=True)),
                ('tipo', models.CharField(max_length=40, db_index=True)),
                ('tarefa_id', models.CharField(max_length=36, null=True, blank=True)),
                ('detalhe', models.CharField(max_length=255, null=True, blank=True)),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now, db_index=True)),
            ],
            options={
                'verbose_name': 'Evento de Operador',
                'verbose_name_plural': 'Eventos de Operador',
                'db_table': 'operador_eventos',
                'ordering': ['-criado_em'],
            },
        ),
        migrations.AddIndex(
            model_name='tarefamodel',
            index=models.Index(
                fields=['operador_id', 'status', 'criado_em'],
                name='tarefas_operado_5e1b7a_idx',
            ),
        ),
    ]
