"""
Migration inicial do Event Store.

Cria a tabela:
- domain_events
"""

from django.core.serializers.json import DjangoJSONEncoder
from django.db import migrations, models


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='DomainEventModel',
            fields=[
                ('event_id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    help_text='UUID único do evento'
                )),
                ('event_type', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='Tipo do evento (ex: ComparecimentoRegistradoEvent)'
                )),
                ('aggregate_type', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='Tipo do agregado (ex: Custodiado)'
                )),
                ('aggregate_id', models.CharField(
                    max_length=36,
                    db_index=True,
                    help_text='ID do agregado que gerou o evento'
                )),
                ('event_data', models.JSONField(
                    default=dict,
                    encoder=DjangoJSONEncoder,
                    help_text='Dados serializados do evento'
                )),
                ('version', models.IntegerField(
                    default=1,
                    help_text='Versão do schema do evento'
                )),
                ('sequence', models.BigIntegerField(
                    default=0,
                    help_text='Sequência do evento no agregado'
                )),
                ('occurred_at', models.DateTimeField(
                    help_text='Quando o evento ocorreu'
                )),
                ('recorded_at', models.DateTimeField(
                    auto_now_add=True,
                    help_text='Quando o evento foi persistido'
                )),
                ('correlation_id', models.CharField(
                    max_length=36,
                    null=True,
                    blank=True,
                    db_index=True,
                    help_text='ID para rastrear fluxo de eventos relacionados'
                )),
                ('causation_id', models.CharField(
                    max_length=36,
                    null=True,
                    blank=True,
                    help_text='ID do evento que causou este'
                )),
                ('user_id', models.CharField(
                    max_length=100,
                    null=True,
                    blank=True,
                    db_index=True,
                    help_text='Usuário que iniciou a ação'
                )),
            ],
            options={
                'db_table': 'domain_events',
                'verbose_name': 'Evento de Domínio',
                'verbose_name_plural': 'Eventos de Domínio',
                'ordering': ['recorded_at'],
                'indexes': [
                    models.Index(fields=['aggregate_id', 'sequence'], name='idx_event_aggregate_seq'),
                    models.Index(fields=['aggregate_type', 'recorded_at'], name='idx_event_aggtype_rec'),
                    models.Index(fields=['event_type', 'recorded_at'], name='idx_event_type_rec'),
                ],
            },
        ),
    ]
