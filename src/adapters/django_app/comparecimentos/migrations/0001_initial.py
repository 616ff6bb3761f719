"""
Migration inicial do domínio de Comparecimentos.

Cria a tabela:
- historico_comparecimentos
"""

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
        ('custodiados', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='HistoricoComparecimentoModel',
            fields=[
                ('id', models.CharField(editable=False, help_text='UUID único do comparecimento', max_length=36, primary_key=True, serialize=False)),
                ('data_comparecimento', models.DateField(db_index=True, help_text='Data do comparecimento')),
                ('hora_comparecimento', models.TimeField(blank=True, help_text='Hora do comparecimento', null=True)),
                ('tipo_validacao', models.CharField(choices=[('Presencial', 'Presencial'), ('Online/Virtual', 'Online/Virtual'), ('Cadastro Inicial', 'Cadastro Inicial')], db_index=True, default='Presencial', help_text='Forma de validação', max_length=20)),
                ('validado_por', models.CharField(help_text='Servidor que validou', max_length=100)),
                ('observacoes', models.TextField(blank=True, null=True)),
                ('anexos', models.TextField(blank=True, help_text='Referências de anexos', null=True)),
                ('mudanca_endereco', models.BooleanField(db_index=True, default=False, help_text='Se houve mudança de endereço')),
                ('motivo_mudanca_endereco', models.CharField(blank=True, max_length=500, null=True)),
                ('enderecos_alterados', models.JSONField(blank=True, default=list, help_text='IDs dos endereços criados neste comparecimento')),
                ('criado_em', models.DateTimeField(db_index=True)),
                ('atualizado_em', models.DateTimeField()),
                ('custodiado', models.ForeignKey(help_text='Custodiado que compareceu', on_delete=django.db.models.deletion.PROTECT, related_name='comparecimentos', to='custodiados.custodiadomodel')),
            ],
            options={
                'verbose_name': 'Comparecimento',
                'verbose_name_plural': 'Histórico de Comparecimentos',
                'db_table': 'historico_comparecimentos',
                'ordering': ['-data_comparecimento', '-hora_comparecimento', '-criado_em'],
                'indexes': [
                    models.Index(fields=['custodiado', 'data_comparecimento'], name='idx_comp_custodiado_data'),
                    models.Index(fields=['tipo_validacao', 'data_comparecimento'], name='idx_comp_tipo_data'),
                ],
            },
        ),
    ]
