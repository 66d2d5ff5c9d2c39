# Generated manually for the pvz app

import uuid
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='PVZ',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('city', models.CharField(max_length=100, unique=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
            ],
            options={
                'verbose_name': 'PVZ',
                'verbose_name_plural': 'PVZ',
                'db_table': 'pvz',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['created_at'], name='pvz_created_at_idx'),
                ],
            },
        ),
    ]
