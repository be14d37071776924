"""
URL patterns para o domínio de Protocolos.

Endpoints API JSON:
- GET  /protocolos/api/ - Listar protocolos
- POST /protocolos/api/ - Abrir protocolo
- GET  /protocolos/api/estatisticas/ - Estatísticas
- GET  /protocolos/api/departamentos/ - Setores
- GET  /protocolos/api/checklist/ - Checklist de fechamento
- GET  /protocolos/api/<ref>/ - Obter protocolo
- GET  /protocolos/api/<ref>/eventos/ - Histórico
- POST /protocolos/api/<ref>/iniciar/ - Iniciar atendimento do protocolo
- POST /protocolos/api/<ref>/submeter/ - Submeter resolução
- POST /protocolos/api/<ref>/aprovar/ - Aprovar resolução
- POST /protocolos/api/<ref>/rejeitar/ - Rejeitar resolução
- POST /protocolos/api/<ref>/aguardar/ - Aguardar setor/cliente
- POST /protocolos/api/<ref>/retomar/ - Retomar
- POST /protocolos/api/<ref>/reabrir/ - Reabrir
- POST /protocolos/api/<ref>/notas/ - Adicionar nota
- POST /protocolos/api/<ref>/reatribuir/ - Reatribuir responsável
"""

from django.urls import path
from . import api_views

app_name = 'protocolos'

urlpatterns = [
    path('api/', api_views.ProtocoloAPIListView.as_view(), name='api_list'),

    # Rotas fixas antes do <ref> para não conflitar
    path('api/estatisticas/', api_views.ProtocoloAPIEstatisticasView.as_view(), name='api_estatisticas'),
    path('api/departamentos/', api_views.DepartamentosAPIView.as_view(), name='api_departamentos'),
    path('api/checklist/', api_views.ChecklistAPIView.as_view(), name='api_checklist'),

    path('api/<str:ref>/', api_views.ProtocoloAPIDetailView.as_view(), name='api_detail'),
    path('api/<str:ref>/eventos/', api_views.ProtocoloAPIEventosView.as_view(), name='api_eventos'),

    # Transições
    path('api/<str:ref>/iniciar/', api_views.ProtocoloAPIIniciarView.as_view(), name='api_iniciar'),
    path('api/<str:ref>/submeter/', api_views.ProtocoloAPISubmeterView.as_view(), name='api_submeter'),
    path('api/<str:ref>/aprovar/', api_views.ProtocoloAPIAprovarView.as_view(), name='api_aprovar'),
    path('api/<str:ref>/rejeitar/', api_views.ProtocoloAPIRejeitarView.as_view(), name='api_rejeitar'),
    path('api/<str:ref>/aguardar/', api_views.ProtocoloAPIAguardarView.as_view(), name='api_aguardar'),
    path('api/<str:ref>/retomar/', api_views.ProtocoloAPIRetomarView.as_view(), name='api_retomar'),
    path('api/<str:ref>/reabrir/', api_views.ProtocoloAPIReabrirView.as_view(), name='api_reabrir'),
    path('api/<str:ref>/notas/', api_views.ProtocoloAPINotaView.as_view(), name='api_notas'),
    path('api/<str:ref>/reatribuir/', api_views.ProtocoloAPIReatribuirView.as_view(), name='api_reatribuir'),
]
