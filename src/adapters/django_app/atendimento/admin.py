"""
Django Admin para o domínio de Atendimento.

Contatos e tarefas são mantidos aqui (distribuição da fila).
Registros de chamada e eventos de operador são somente leitura.
"""

from django.contrib import admin

from .models import ContatoModel, OperadorEventoModel, RegistroChamadaModel, TarefaModel


@admin.register(ContatoModel)
class ContatoAdmin(admin.ModelAdmin):
    list_display = ['id', 'nome', 'tipo', 'telefone']
    list_filter = ['tipo']
    search_fields = ['id', 'nome', 'telefone']


@admin.register(TarefaModel)
class TarefaAdmin(admin.ModelAdmin):
    list_display = ['id', 'operador_id', 'tipo_chamada', 'status', 'prazo', 'criado_em']
    list_filter = ['status', 'tipo_chamada']
    search_fields = ['id', 'operador_id', 'cliente_id', 'prospect_id']
    readonly_fields = ['motivo_pulo']
    ordering = ['criado_em', 'id']


class _SomenteLeituraAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return request.method in ('GET', 'HEAD')

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(RegistroChamadaModel)
class RegistroChamadaAdmin(_SomenteLeituraAdmin):
    list_display = [
        'id',
        'operador_id',
        'tipo_chamada',
        'duracao_chamada',
        'duracao_relatorio',
        'protocolo_id',
        'fim',
    ]
    list_filter = ['tipo_chamada', 'fim']
    search_fields = ['id', 'tarefa_id', 'operador_id', 'protocolo_id']
    date_hierarchy = 'fim'


@admin.register(OperadorEventoModel)
class OperadorEventoAdmin(_SomenteLeituraAdmin):
    list_display = ['id', 'operador_id', 'tipo', 'tarefa_id', 'detalhe', 'criado_em']
    list_filter = ['tipo', 'criado_em']
    search_fields = ['operador_id', 'tarefa_id']
