"""
Django Models para o domínio de Atendimento.

Tabelas:
- ContatoModel: Clientes e prospects (leitura pelo fluxo)
- TarefaModel: Fila de tarefas por operador
- RegistroChamadaModel: Registros imutáveis de chamadas concluídas
- OperadorEventoModel: Eventos de ciclo de vida do operador
"""

from django.db import models
from django.utils import timezone


class TipoChamadaChoices(models.TextChoices):
    """Choices para tipo de chamada (espelha TipoChamada do Core)."""
    POS_VENDA = 'PÓS-VENDA', 'Pós-venda'
    PROSPECCAO = 'PROSPECÇÃO', 'Prospecção'
    VENDA = 'VENDA', 'Venda'
    CONFIRMACAO_PROTOCOLO = 'CONFIRMAÇÃO PROTOCOLO', 'Confirmação de protocolo'
    ASSISTENCIA = 'ASSISTÊNCIA', 'Assistência'


class TarefaStatusChoices(models.TextChoices):
    PENDENTE = 'pending', 'Pendente'
    CONCLUIDA = 'completed', 'Concluída'
    PULADA = 'skipped', 'Pulada'


class ContatoTipoChoices(models.TextChoices):
    CLIENTE = 'cliente', 'Cliente'
    PROSPECT = 'prospect', 'Prospect'


class ContatoModel(models.Model):
    """
    Cliente ou prospect.

    Fields:
        itens: Equipamentos adquiridos (JSON, apenas clientes)
    """

    id = models.CharField(max_length=100, primary_key=True)
    tipo = models.CharField(max_length=10, choices=ContatoTipoChoices.choices, db_index=True)
    nome = models.CharField(max_length=200)
    telefone = models.CharField(max_length=30, blank=True, default='')
    endereco = models.CharField(max_length=255, blank=True, default='')
    itens = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = 'contatos'
        verbose_name = 'Contato'
        verbose_name_plural = 'Contatos'
        ordering = ['nome']

    def __str__(self):
        return f"{self.nome} ({self.tipo})"


class TarefaModel(models.Model):
    """
    Tarefa da fila de um operador.

    A ordem de atendimento é (criado_em, id).
    """

    id = models.CharField(max_length=36, primary_key=True, editable=False)
    operador_id = models.CharField(max_length=100, db_index=True)
    tipo_chamada = models.CharField(max_length=30, choices=TipoChamadaChoices.choices)
    prazo = models.DateTimeField()
    cliente_id = models.CharField(max_length=100, null=True, blank=True)
    prospect_id = models.CharField(max_length=100, null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=TarefaStatusChoices.choices,
        default=TarefaStatusChoices.PENDENTE,
        db_index=True,
    )
    motivo_pulo = models.CharField(max_length=60, null=True, blank=True)
    criado_em = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'tarefas'
        verbose_name = 'Tarefa'
        verbose_name_plural = 'Tarefas'
        ordering = ['criado_em', 'id']
        indexes = [
            models.Index(fields=['operador_id', 'status', 'criado_em'], name='tarefas_operado_5e1b7a_idx'),
        ]

    def __str__(self):
        return f"{self.tipo_chamada} - {self.operador_id} [{self.status}]"


class RegistroChamadaModel(models.Model):
    """
    Registro imutável de chamada concluída.

    Fields:
        respostas: Lista de pares [pergunta_id, valor] na ordem do roteiro
        justificativas: Lista de pares [pergunta_id, nota]
    """

    id = models.CharField(max_length=36, primary_key=True, editable=False)
    tarefa_id = models.CharField(max_length=36, unique=True)
    operador_id = models.CharField(max_length=100, db_index=True)
    tipo_chamada = models.CharField(max_length=30, choices=TipoChamadaChoices.choices)
    inicio = models.DateTimeField()
    fim = models.DateTimeField(db_index=True)
    duracao_chamada = models.PositiveIntegerField()
    duracao_relatorio = models.PositiveIntegerField()
    respostas = models.JSONField(default=list)
    justificativas = models.JSONField(default=list)
    resumo = models.TextField(blank=True, default='')
    cliente_id = models.CharField(max_length=100, null=True, blank=True)
    prospect_id = models.CharField(max_length=100, null=True, blank=True)
    protocolo_id = models.CharField(max_length=36, null=True, blank=True, db_index=True)

    class Meta:
        db_table = 'registros_chamada'
        verbose_name = 'Registro de Chamada'
        verbose_name_plural = 'Registros de Chamada'
        ordering = ['-fim']

    def __str__(self):
        return f"{self.tipo_chamada} - {self.operador_id} @ {self.fim}"


class OperadorEventoModel(models.Model):
    """Eventos INICIAR/PULAR/FINALIZAR por operador."""

    id = models.BigAutoField(primary_key=True)
    operador_id = models.CharField(max_length=100, db_index=True)
    tipo = models.CharField(max_length=40, db_index=True)
    tarefa_id = models.CharField(max_length=36, null=True, blank=True)
    detalhe = models.CharField(max_length=255, null=True, blank=True)
    criado_em = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'operador_eventos'
        verbose_name = 'Evento de Operador'
        verbose_name_plural = 'Eventos de Operador'
        ordering = ['-criado_em']

    def __str__(self):
        return f"{self.tipo} - {self.operador_id} @ {self.criado_em}"
