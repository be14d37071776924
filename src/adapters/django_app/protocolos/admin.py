"""
Django Admin para o domínio de Protocolos.

Protocolos e histórico ficam somente leitura: toda mudança de estado
passa pelos use cases do núcleo. Operadores e o catálogo de auditoria
são mantidos aqui.
"""

from django.contrib import admin
from django.utils.html import format_html
from django.utils import timezone

from .models import (
    OperadorModel,
    PerguntaAuditoriaModel,
    ProtocoloEventoModel,
    ProtocoloModel,
)


class SomenteLeituraMixin:
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class ProtocoloEventoInline(SomenteLeituraMixin, admin.TabularInline):
    model = ProtocoloEventoModel
    fields = ['criado_em', 'tipo', 'ator_id', 'valor_antigo', 'valor_novo', 'nota']
    readonly_fields = fields
    extra = 0
    ordering = ['criado_em', 'id']


@admin.register(ProtocoloModel)
class ProtocoloAdmin(SomenteLeituraMixin, admin.ModelAdmin):
    """Admin para ProtocoloModel."""

    list_display = [
        'numero',
        'titulo',
        'status_badge',
        'prioridade_badge',
        'departamento_id',
        'responsavel_id',
        'aberto_em',
        'sla_status',
    ]

    list_filter = [
        'status',
        'prioridade',
        'departamento_id',
        'aberto_em',
    ]

    search_fields = [
        'numero',
        'titulo',
        'descricao',
        'responsavel_id',
        'cliente_id',
        'prospect_id',
    ]

    fieldsets = [
        ('Identificação', {
            'fields': ['id', 'numero', 'titulo', 'descricao', 'origem_tipo_chamada'],
        }),
        ('Contato', {
            'fields': ['cliente_id', 'prospect_id'],
        }),
        ('Status', {
            'fields': ['status', 'prioridade', 'sla_prazo', 'resumo_resolucao', 'versao'],
        }),
        ('Responsáveis', {
            'fields': ['aberto_por_id', 'responsavel_id', 'departamento_id'],
        }),
        ('Timestamps', {
            'fields': ['aberto_em', 'atualizado_em', 'fechado_em'],
            'classes': ['collapse'],
        }),
    ]

    inlines = [ProtocoloEventoInline]
    ordering = ['-aberto_em']
    date_hierarchy = 'aberto_em'

    def has_change_permission(self, request, obj=None):
        # Permite abrir a página de detalhe, sem salvar.
        return request.method in ('GET', 'HEAD')

    def status_badge(self, obj):
        colors = {
            'Aberto': '#17a2b8',
            'Em andamento': '#ffc107',
            'Aguardando Setor': '#6c757d',
            'Aguardando Cliente': '#6c757d',
            'Resolvido (Pendente Confirmação)': '#007bff',
            'Fechado': '#343a40',
            'Reaberto': '#fd7e14',
        }
        color = colors.get(obj.status, '#6c757d')
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; '
            'border-radius: 3px; font-size: 11px;">{}</span>',
            color,
            obj.status
        )
    status_badge.short_description = 'Status'

    def prioridade_badge(self, obj):
        colors = {
            'Baixa': '#28a745',
            'Média': '#ffc107',
            'Alta': '#dc3545',
        }
        color = colors.get(obj.prioridade, '#6c757d')
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; '
            'border-radius: 3px; font-size: 11px;">{}</span>',
            color,
            obj.prioridade
        )
    prioridade_badge.short_description = 'Prioridade'

    def sla_status(self, obj):
        if obj.status == 'Fechado':
            return format_html('<span style="color: #28a745;">✓ Fechado</span>')

        if timezone.now() > obj.sla_prazo:
            return format_html(
                '<span style="color: #dc3545; font-weight: bold;">⚠ Atrasado</span>'
            )

        return format_html('<span style="color: #28a745;">✓ No prazo</span>')
    sla_status.short_description = 'SLA'


@admin.register(ProtocoloEventoModel)
class ProtocoloEventoAdmin(SomenteLeituraMixin, admin.ModelAdmin):
    """Histórico append-only."""

    list_display = ['id', 'protocolo', 'tipo', 'ator_id', 'valor_novo', 'criado_em']
    list_filter = ['tipo', 'criado_em']
    search_fields = ['protocolo__numero', 'ator_id', 'nota']

    def has_change_permission(self, request, obj=None):
        return request.method in ('GET', 'HEAD')


@admin.register(OperadorModel)
class OperadorAdmin(admin.ModelAdmin):
    list_display = ['id', 'nome', 'papel', 'ativo']
    list_filter = ['papel', 'ativo']
    search_fields = ['id', 'nome']


@admin.register(PerguntaAuditoriaModel)
class PerguntaAuditoriaAdmin(admin.ModelAdmin):
    list_display = [
        'id',
        'texto',
        'ordem',
        'sensivel_upsell',
        'confirmacao_fechamento',
        'ativa',
    ]
    list_filter = ['sensivel_upsell', 'confirmacao_fechamento', 'ativa']
    search_fields = ['id', 'texto']
    ordering = ['ordem', 'id']
