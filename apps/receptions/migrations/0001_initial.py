# Generated manually for the receptions app

import uuid
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('pvz', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Reception',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date_time', models.DateTimeField(default=django.utils.timezone.now)),
                ('status', models.CharField(choices=[('in_progress', 'In progress'), ('close', 'Closed')], default='in_progress', max_length=20)),
                ('pvz', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='receptions', to='pvz.pvz')),
            ],
            options={
                'db_table': 'receptions',
                'ordering': ['-date_time'],
                'indexes': [
                    models.Index(fields=['pvz', 'status'], name='receptions_pvz_status_idx'),
                    models.Index(fields=['date_time'], name='receptions_date_time_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status', 'in_progress')), fields=('pvz',), name='one_open_reception_per_pvz'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date_time', models.DateTimeField(default=django.utils.timezone.now)),
                ('type', models.CharField(choices=[('electronics', 'электроника'), ('clothing', 'одежда'), ('shoes', 'обувь')], max_length=20)),
                ('sequence', models.PositiveIntegerField(editable=False)),
                ('reception', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='products', to='receptions.reception')),
            ],
            options={
                'db_table': 'products',
                'ordering': ['reception', 'sequence'],
                'indexes': [
                    models.Index(fields=['reception', 'date_time'], name='products_reception_time_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('reception', 'sequence'), name='unique_product_sequence_per_reception'),
                ],
            },
        ),
    ]
