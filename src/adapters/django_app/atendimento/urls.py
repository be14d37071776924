"""
URL patterns para o fluxo de atendimento.

Endpoints API JSON:
- GET  /atendimento/api/sessao/ - Sessão do operador
- GET  /atendimento/api/sessao/tick/ - Cronômetro
- POST /atendimento/api/sessao/<acao>/ - Transições da sessão
- GET  /atendimento/api/registros/ - Registros de chamada
- GET  /atendimento/api/motivos-pulo/ - Motivos de pulo
"""

from django.urls import path
from . import api_views

app_name = 'atendimento'

urlpatterns = [
    path('api/sessao/', api_views.SessaoAPIView.as_view(), name='api_sessao'),
    path('api/sessao/tick/', api_views.SessaoTickAPIView.as_view(), name='api_tick'),
    path('api/sessao/<str:acao>/', api_views.SessaoAcaoAPIView.as_view(), name='api_acao'),
    path('api/registros/', api_views.RegistrosChamadaAPIView.as_view(), name='api_registros'),
    path('api/motivos-pulo/', api_views.MotivosPuloAPIView.as_view(), name='api_motivos_pulo'),
]
