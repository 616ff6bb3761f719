"""
Migration inicial do domínio de Usuários.

Cria as tabelas:
- usuarios
- convites
- email_verifications
"""

from django.db import migrations, models


TIPO_USUARIO_CHOICES = [('admin', 'Administrador'), ('usuario', 'Usuário')]


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='UsuarioModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('nome', models.CharField(max_length=100)),
                ('email', models.EmailField(help_text='Email em minúsculas', max_length=150, unique=True)),
                ('senha_hash', models.CharField(max_length=255)),
                ('tipo', models.CharField(choices=TIPO_USUARIO_CHOICES, db_index=True, default='usuario', max_length=10)),
                ('status', models.CharField(choices=[('INVITED', 'Convidado'), ('ACTIVE', 'Ativo'), ('INACTIVE', 'Inativo'), ('BLOCKED', 'Bloqueado'), ('EXPIRED', 'Expirado')], db_index=True, default='ACTIVE', max_length=10)),
                ('ativo', models.BooleanField(db_index=True, default=True)),
                ('departamento', models.CharField(blank=True, max_length=100, null=True)),
                ('comarca', models.CharField(blank=True, max_length=100, null=True)),
                ('cargo', models.CharField(blank=True, max_length=100, null=True)),
                ('avatar', models.CharField(blank=True, max_length=255, null=True)),
                ('email_verificado', models.BooleanField(default=False)),
                ('data_verificacao_email', models.DateTimeField(blank=True, null=True)),
                ('tentativas_login_falhadas', models.PositiveIntegerField(default=0)),
                ('bloqueado_ate', models.DateTimeField(blank=True, null=True)),
                ('deve_trocar_senha', models.BooleanField(default=False)),
                ('senha_expira_em', models.DateTimeField(blank=True, null=True)),
                ('ultimo_login', models.DateTimeField(blank=True, null=True)),
                ('criado_em', models.DateTimeField()),
                ('atualizado_em', models.DateTimeField()),
            ],
            options={
                'verbose_name': 'Usuário',
                'verbose_name_plural': 'Usuários',
                'db_table': 'usuarios',
                'ordering': ['nome'],
                'indexes': [
                    models.Index(fields=['tipo', 'ativo'], name='idx_usuario_tipo_ativo'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ConviteModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('token', models.CharField(help_text='Token do link de ativação', max_length=64, unique=True)),
                ('email', models.EmailField(db_index=True, max_length=150)),
                ('tipo_usuario', models.CharField(choices=TIPO_USUARIO_CHOICES, default='usuario', max_length=10)),
                ('status', models.CharField(choices=[('PENDENTE', 'Pendente'), ('ATIVADO', 'Ativado'), ('EXPIRADO', 'Expirado'), ('CANCELADO', 'Cancelado')], db_index=True, default='PENDENTE', max_length=10)),
                ('comarca', models.CharField(blank=True, max_length=100, null=True)),
                ('departamento', models.CharField(blank=True, max_length=100, null=True)),
                ('criado_por_id', models.CharField(blank=True, db_index=True, max_length=36, null=True)),
                ('usuario_id', models.CharField(blank=True, help_text='Usuário criado na ativação', max_length=36, null=True)),
                ('ip_criacao', models.GenericIPAddressField(blank=True, null=True)),
                ('ip_ativacao', models.GenericIPAddressField(blank=True, null=True)),
                ('quantidade_usos', models.PositiveIntegerField(default=1)),
                ('usos_realizados', models.PositiveIntegerField(default=0)),
                ('criado_em', models.DateTimeField(db_index=True)),
                ('expira_em', models.DateTimeField(db_index=True)),
                ('ativado_em', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'verbose_name': 'Convite',
                'verbose_name_plural': 'Convites',
                'db_table': 'convites',
                'ordering': ['-criado_em'],
                'indexes': [
                    models.Index(fields=['email', 'status'], name='idx_convite_email_status'),
                    models.Index(fields=['status', 'expira_em'], name='idx_convite_status_expira'),
                ],
            },
        ),
        migrations.CreateModel(
            name='EmailVerificationModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('email', models.EmailField(db_index=True, max_length=150)),
                ('codigo', models.CharField(max_length=6)),
                ('nome', models.CharField(blank=True, max_length=100, null=True)),
                ('tipo_usuario', models.CharField(choices=TIPO_USUARIO_CHOICES, default='usuario', max_length=10)),
                ('verificado', models.BooleanField(default=False)),
                ('tentativas', models.PositiveIntegerField(default=0)),
                ('max_tentativas', models.PositiveIntegerField(default=5)),
                ('criado_em', models.DateTimeField(db_index=True)),
                ('expira_em', models.DateTimeField(db_index=True)),
                ('verificado_em', models.DateTimeField(blank=True, null=True)),
                ('ip_solicitacao', models.GenericIPAddressField(blank=True, null=True)),
                ('ip_verificacao', models.GenericIPAddressField(blank=True, null=True)),
            ],
            options={
                'verbose_name': 'Verificação de Email',
                'verbose_name_plural': 'Verificações de Email',
                'db_table': 'email_verifications',
                'ordering': ['-criado_em'],
                'indexes': [
                    models.Index(fields=['email', 'criado_em'], name='idx_verificacao_email'),
                ],
            },
        ),
    ]
