"""
URL Configuration.

Estrutura:
- /admin/ - Django Admin
- /protocolos/ - API de protocolos
- /atendimento/ - Sessão de atendimento do operador
- /health/ - Health check
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include


def health(request):
    return JsonResponse({'status': 'ok'})


urlpatterns = [
    path('admin/', admin.site.urls),
    path('protocolos/', include('src.adapters.django_app.protocolos.urls')),
    path('atendimento/', include('src.adapters.django_app.atendimento.urls')),
    path('health/', health, name='health'),
]
