"""
Migration inicial do domínio de Custodiados.

Cria as tabelas:
- custodiados
- historico_enderecos
"""

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='CustodiadoModel',
            fields=[
                ('id', models.CharField(editable=False, help_text='UUID único do custodiado', max_length=36, primary_key=True, serialize=False)),
                ('nome', models.CharField(db_index=True, help_text='Nome completo', max_length=150)),
                ('cpf', models.CharField(blank=True, db_index=True, help_text='CPF formatado (000.000.000-00)', max_length=14, null=True)),
                ('rg', models.CharField(blank=True, db_index=True, help_text='RG', max_length=20, null=True)),
                ('contato', models.CharField(help_text='Telefone com DDD', max_length=20)),
                ('processo', models.CharField(db_index=True, help_text='Número do processo no padrão CNJ', max_length=25)),
                ('vara', models.CharField(help_text='Vara responsável', max_length=100)),
                ('comarca', models.CharField(db_index=True, help_text='Comarca do processo', max_length=100)),
                ('data_decisao', models.DateField(help_text='Data da decisão judicial')),
                ('periodicidade', models.PositiveIntegerField(default=30, help_text='Intervalo em dias entre comparecimentos')),
                ('data_comparecimento_inicial', models.DateField(help_text='Data do primeiro comparecimento')),
                ('status', models.CharField(choices=[('Em Conformidade', 'Em Conformidade'), ('Inadimplente', 'Inadimplente')], db_index=True, default='Em Conformidade', help_text='Status de cumprimento', max_length=20)),
                ('situacao', models.CharField(choices=[('Ativo', 'Ativo'), ('Arquivado', 'Arquivado')], db_index=True, default='Ativo', help_text='Ativo ou arquivado', max_length=20)),
                ('ultimo_comparecimento', models.DateField(blank=True, help_text='Data do último comparecimento', null=True)),
                ('proximo_comparecimento', models.DateField(blank=True, db_index=True, help_text='Data prevista para o próximo comparecimento', null=True)),
                ('observacoes', models.TextField(blank=True, help_text='Observações livres', null=True)),
                ('criado_em', models.DateTimeField(db_index=True, help_text='Data/hora de cadastro')),
                ('atualizado_em', models.DateTimeField(help_text='Data/hora da última atualização')),
            ],
            options={
                'verbose_name': 'Custodiado',
                'verbose_name_plural': 'Custodiados',
                'db_table': 'custodiados',
                'ordering': ['nome'],
                'indexes': [
                    models.Index(fields=['situacao', 'status'], name='idx_custodiado_sit_status'),
                    models.Index(fields=['situacao', 'proximo_comparecimento'], name='idx_custodiado_sit_proximo'),
                ],
            },
        ),
        migrations.CreateModel(
            name='HistoricoEnderecoModel',
            fields=[
                ('id', models.CharField(editable=False, help_text='UUID único do endereço', max_length=36, primary_key=True, serialize=False)),
                ('cep', models.CharField(help_text='CEP (00000-000)', max_length=9)),
                ('logradouro', models.CharField(max_length=200)),
                ('numero', models.CharField(blank=True, max_length=20, null=True)),
                ('complemento', models.CharField(blank=True, max_length=100, null=True)),
                ('bairro', models.CharField(max_length=100)),
                ('cidade', models.CharField(db_index=True, max_length=100)),
                ('estado', models.CharField(db_index=True, help_text='Sigla da UF', max_length=2)),
                ('data_inicio', models.DateField(db_index=True, help_text='Início da residência')),
                ('data_fim', models.DateField(blank=True, help_text='Fim da residência', null=True)),
                ('ativo', models.BooleanField(db_index=True, default=True)),
                ('motivo_alteracao', models.CharField(blank=True, max_length=500, null=True)),
                ('validado_por', models.CharField(blank=True, max_length=100, null=True)),
                ('historico_comparecimento_id', models.CharField(blank=True, db_index=True, help_text='Comparecimento que registrou a mudança', max_length=36, null=True)),
                ('criado_em', models.DateTimeField()),
                ('atualizado_em', models.DateTimeField()),
                ('custodiado', models.ForeignKey(help_text='Custodiado dono do endereço', on_delete=django.db.models.deletion.CASCADE, related_name='enderecos', to='custodiados.custodiadomodel')),
            ],
            options={
                'verbose_name': 'Endereço',
                'verbose_name_plural': 'Histórico de Endereços',
                'db_table': 'historico_enderecos',
                'ordering': ['-data_inicio', '-criado_em'],
                'indexes': [
                    models.Index(fields=['custodiado', 'ativo'], name='idx_endereco_custodiado_ativo'),
                    models.Index(fields=['data_inicio', 'data_fim'], name='idx_endereco_periodo'),
                ],
            },
        ),
    ]
