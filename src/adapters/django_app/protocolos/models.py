"""
Django Models para o domínio de Protocolos.

Estes models são ADAPTERS - implementam a persistência para as
entidades de domínio definidas em src/core/protocolos/entities.py,
src/core/operadores/entities.py e src/core/auditoria/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Models são mapeados para/de Entities via Mappers

Tabelas:
- ProtocoloModel: Protocolos
- ProtocoloEventoModel: Histórico append-only de cada protocolo
- OperadorModel: Cadastro de operadores (id = id do usuário Django)
- PerguntaAuditoriaModel: Catálogo de perguntas de auditoria
"""

from django.db import models


class ProtocoloStatusChoices(models.TextChoices):
    """Choices para status (espelha ProtocoloStatus do Core)."""
    ABERTO = 'Aberto', 'Aberto'
    EM_ANDAMENTO = 'Em andamento', 'Em andamento'
    AGUARDANDO_SETOR = 'Aguardando Setor', 'Aguardando Setor'
    AGUARDANDO_CLIENTE = 'Aguardando Cliente', 'Aguardando Cliente'
    RESOLVIDO_PENDENTE = 'Resolvido (Pendente Confirmação)', 'Resolvido (Pendente Confirmação)'
    FECHADO = 'Fechado', 'Fechado'
    REABERTO = 'Reaberto', 'Reaberto'


class ProtocoloPriorityChoices(models.TextChoices):
    """Choices para prioridade (espelha ProtocoloPriority do Core)."""
    BAIXA = 'Baixa', 'Baixa'
    MEDIA = 'Média', 'Média'
    ALTA = 'Alta', 'Alta'


class OperadorRoleChoices(models.TextChoices):
    ADMIN = 'ADMIN', 'Administrador'
    SUPERVISOR = 'SUPERVISOR', 'Supervisor'
    OPERATOR_TELEMARKETING = 'OPERATOR_TELEMARKETING', 'Operador de Telemarketing'
    ANALISTA_MARKETING = 'ANALISTA_MARKETING', 'Analista de Marketing'
    VENDEDOR = 'VENDEDOR', 'Vendedor'


class ProtocoloModel(models.Model):
    """
    Model Django para persistência de Protocolos.

    Fields:
        id: UUID como primary key (gerado pela Entity)
        numero: Número humano único (PR + 5 caracteres)
        cliente_id / prospect_id: Contato (exatamente um preenchido)
        aberto_por_id: Operador que abriu
        responsavel_id: Operador que conduz
        departamento_id: Setor de destino
        versao: Contador para gravação condicional
    """

    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do protocolo"
    )

    numero = models.CharField(
        max_length=16,
        unique=True,
        help_text="Número exibido ao cliente"
    )

    # Contato
    cliente_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    prospect_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)

    # Responsabilidade
    aberto_por_id = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Operador que abriu o protocolo"
    )

    responsavel_id = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Operador responsável"
    )

    departamento_id = models.CharField(
        max_length=50,
        db_index=True,
        help_text="Setor de destino"
    )

    # Conteúdo
    titulo = models.CharField(max_length=200)
    descricao = models.TextField()

    # Estado
    status = models.CharField(
        max_length=50,
        choices=ProtocoloStatusChoices.choices,
        default=ProtocoloStatusChoices.ABERTO,
        db_index=True,
    )

    prioridade = models.CharField(
        max_length=20,
        choices=ProtocoloPriorityChoices.choices,
        default=ProtocoloPriorityChoices.MEDIA,
        db_index=True,
    )

    # Timestamps (definidos pelo núcleo, nunca pelo banco)
    aberto_em = models.DateTimeField(db_index=True)
    atualizado_em = models.DateTimeField()
    sla_prazo = models.DateTimeField(db_index=True)
    fechado_em = models.DateTimeField(null=True, blank=True)

    resumo_resolucao = models.TextField(null=True, blank=True)

    origem_tipo_chamada = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        help_text="Tipo da chamada que originou o protocolo"
    )

    versao = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = 'protocolos'
        verbose_name = 'Protocolo'
        verbose_name_plural = 'Protocolos'
        ordering = ['-aberto_em']
        indexes = [
            models.Index(fields=['status', 'aberto_em'], name='protocolos_status_9a1c2e_idx'),
            models.Index(fields=['responsavel_id', 'status'], name='protocolos_respons_4b7d31_idx'),
            models.Index(fields=['prioridade', 'sla_prazo'], name='protocolos_priorid_e2f860_idx'),
        ]

    def __str__(self):
        return f"{self.numero} - {self.titulo}"


class ProtocoloEventoModel(models.Model):
    """
    Histórico append-only de protocolos.

    A ordem causal é (criado_em, id): o id auto-incremental desempata
    eventos gravados no mesmo instante.
    """

    id = models.BigAutoField(primary_key=True)

    evento_id = models.CharField(
        max_length=36,
        unique=True,
        help_text="UUID do evento gerado pelo núcleo"
    )

    protocolo = models.ForeignKey(
        ProtocoloModel,
        on_delete=models.CASCADE,
        related_name='eventos',
    )

    tipo = models.CharField(max_length=30, db_index=True)
    ator_id = models.CharField(max_length=100)
    criado_em = models.DateTimeField(db_index=True)
    valor_antigo = models.CharField(max_length=100, null=True, blank=True)
    valor_novo = models.CharField(max_length=100, null=True, blank=True)
    nota = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'protocolo_eventos'
        verbose_name = 'Evento de Protocolo'
        verbose_name_plural = 'Histórico de Protocolos'
        ordering = ['criado_em', 'id']
        indexes = [
            models.Index(fields=['protocolo', 'criado_em'], name='protocolo_e_protoco_7c5a90_idx'),
        ]

    def __str__(self):
        return f"{self.tipo} - {self.protocolo_id[:8]} @ {self.criado_em}"


class OperadorModel(models.Model):
    """
    Cadastro de operadores.

    O id é o id do usuário autenticado (string), de modo que o ator de
    cada requisição é resolvido diretamente da sessão.
    """

    id = models.CharField(max_length=100, primary_key=True)
    nome = models.CharField(max_length=150)
    papel = models.CharField(
        max_length=30,
        choices=OperadorRoleChoices.choices,
        default=OperadorRoleChoices.OPERATOR_TELEMARKETING,
    )
    ativo = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = 'operadores'
        verbose_name = 'Operador'
        verbose_name_plural = 'Operadores'
        ordering = ['nome']

    def __str__(self):
        return f"{self.nome} ({self.papel})"


class PerguntaAuditoriaModel(models.Model):
    """
    Catálogo de perguntas de auditoria, editável pelo admin.

    Fields:
        opcoes: Lista de valores permitidos (JSON)
        tipos: Valores de TipoChamada atendidos, ou ["ALL"] (JSON)
    """

    id = models.CharField(max_length=50, primary_key=True)
    texto = models.CharField(max_length=255)
    opcoes = models.JSONField(default=list)
    tipos = models.JSONField(default=list)
    ordem = models.IntegerField(default=0)
    sensivel_upsell = models.BooleanField(default=False)
    confirmacao_fechamento = models.BooleanField(default=False)
    etapa = models.CharField(max_length=50, null=True, blank=True)
    ativa = models.BooleanField(default=True)

    class Meta:
        db_table = 'perguntas_auditoria'
        verbose_name = 'Pergunta de Auditoria'
        verbose_name_plural = 'Perguntas de Auditoria'
        ordering = ['ordem', 'id']

    def __str__(self):
        return self.texto
