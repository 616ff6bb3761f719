"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events de forma assíncrona
- Enviar emails (convites, códigos de verificação, alertas)
- Tarefas agendadas (status de custodiados, expiração de convites,
  relatório diário, limpeza)

Arquitetura:
- Broker: RabbitMQ (mensagens entre Django e Workers)
- Backend: Redis (resultados de tarefas)
- Workers: Processos que executam as tarefas

Uso:
    # Iniciar worker
    celery -A src.config.celery worker -l INFO

    # Iniciar beat (tarefas agendadas)
    celery -A src.config.celery beat -l INFO
"""

import os
from celery import Celery
from celery.schedules import crontab
from kombu import Queue, Exchange

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

app = Celery('aclp')

# Configurações CELERY_* do Django (broker, backend, serialização)
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    worker_send_task_events=True,
    task_send_sent_event=True,
)

HANDLERS = 'src.adapters.django_app.events.handlers'

# Definir filas
app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('notifications', Exchange('notifications'), routing_key='notifications.#'),
    Queue('reports', Exchange('reports'), routing_key='reports.#'),
)
app.conf.task_default_queue = 'default'

# Roteamento de tarefas para filas (primeira regra que casa vence)
app.conf.task_routes = {
    f'{HANDLERS}.enviar_email': {'queue': 'notifications'},
    f'{HANDLERS}.gerar_relatorio_diario': {'queue': 'reports'},
    f'{HANDLERS}.*': {'queue': 'events'},
}

app.autodiscover_tasks(['src.adapters.django_app.events'], related_name='handlers')

# Tarefas agendadas (beat)
app.conf.beat_schedule = {
    'verificar-status-custodiados-diario': {
        'task': f'{HANDLERS}.verificar_status_custodiados',
        'schedule': crontab(hour=1, minute=0),
    },
    'verificar-status-custodiados-6h': {
        'task': f'{HANDLERS}.verificar_status_custodiados',
        'schedule': crontab(hour='*/6', minute=30),
    },
    'expirar-convites': {
        'task': f'{HANDLERS}.expirar_convites',
        'schedule': crontab(hour=0, minute=0),
    },
    'limpar-verificacoes-expiradas': {
        'task': f'{HANDLERS}.limpar_verificacoes_expiradas',
        'schedule': crontab(hour=3, minute=0),
    },
    'relatorio-diario': {
        'task': f'{HANDLERS}.gerar_relatorio_diario',
        'schedule': crontab(hour=8, minute=0),
    },
    'cleanup-old-events': {
        'task': f'{HANDLERS}.cleanup_old_events',
        'schedule': crontab(day_of_week='sunday', hour=4, minute=0),
    },
}


@app.task(bind=True, ignore_result=True)
def debug_task(self):
    """Tarefa de debug para testar Celery."""
    print(f'Request: {self.request!r}')
