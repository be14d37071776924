"""
Núcleo do console de telemarketing, sem dependência de framework.

Subpacotes:
- protocolos: ciclo de vida do protocolo, SLA e histórico
- atendimento: sessão de chamada do operador e fila de tarefas
- auditoria: catálogo de perguntas e validação do checklist
- operadores: identidade e papel de quem executa as transições
- shared: exceções, eventos, Unit of Work e relógio

Adapters (Django, Celery, cache) implementam os Ports declarados aqui.
"""
