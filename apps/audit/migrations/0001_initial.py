# Generated manually for the audit app

import uuid
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='AuditLogEntry',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('operation_type', models.CharField(choices=[('pvz_creation', 'PVZ creation'), ('pvz_update', 'PVZ update'), ('pvz_deletion', 'PVZ deletion')], max_length=20)),
                ('pvz_id', models.UUIDField()),
                ('user_id', models.UUIDField()),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
            ],
            options={
                'verbose_name': 'audit log entry',
                'verbose_name_plural': 'audit log entries',
                'db_table': 'audit_log',
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['pvz_id', 'created_at'], name='audit_log_pvz_created_idx'),
                ],
            },
        ),
    ]
