"""
Configuração do Django App para Atendimento.
"""

from django.apps import AppConfig


class AtendimentoConfig(AppConfig):
    """Fila de tarefas, contatos, registros de chamada e eventos de operador."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.atendimento'
    label = 'atendimento'
    verbose_name = 'Atendimento'
