"""
Configuração do Django App para Protocolos.
"""

from django.apps import AppConfig


class ProtocolosConfig(AppConfig):
    """Protocolos, histórico, operadores e catálogo de auditoria."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.protocolos'
    label = 'protocolos'
    verbose_name = 'Gestão de Protocolos'
