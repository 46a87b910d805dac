import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('responders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='SOSCase',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Unique identifier (UUID v4)', primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Timestamp when record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last updated')),
                ('is_deleted', models.BooleanField(db_index=True, default=False, help_text='Soft delete flag - records are never physically deleted')),
                ('deleted_at', models.DateTimeField(blank=True, help_text='Timestamp when record was soft-deleted', null=True)),
                ('case_number', models.CharField(db_index=True, help_text='Human-readable case number (e.g., SOS-20240115-103000-4821)', max_length=32, unique=True)),
                ('latitude', models.FloatField()),
                ('longitude', models.FloatField()),
                ('accuracy', models.FloatField(blank=True, help_text='GPS accuracy radius in metres', null=True)),
                ('address', models.TextField(blank=True, help_text='Reverse geocoded address (best effort)')),
                ('description', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('CREATED', 'Created'), ('ASSIGNED', 'Assigned'), ('ACKNOWLEDGED', 'Acknowledged'), ('EN_ROUTE', 'En Route'), ('ON_SCENE', 'On Scene'), ('ACTION_TAKEN', 'Action Taken'), ('CLOSED', 'Closed')], db_index=True, default='CREATED', max_length=20)),
                ('priority', models.PositiveSmallIntegerField(default=1)),
                ('assigned_at', models.DateTimeField(blank=True, null=True)),
                ('assigned_by', models.CharField(blank=True, help_text='User id of the assigner, or SYSTEM for auto-assignment', max_length=36)),
                ('closed_at', models.DateTimeField(blank=True, null=True)),
                ('closure_notes', models.TextField(blank=True)),
                ('officer', models.ForeignKey(blank=True, help_text='Assigned officer', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='cases', to='responders.officer')),
                ('reported_by', models.ForeignKey(blank=True, help_text='Citizen who raised the SOS', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='sos_cases', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'SOS Case',
                'verbose_name_plural': 'SOS Cases',
                'db_table': 'sos_cases',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'created_at'], name='case_status_created_idx'),
                    models.Index(fields=['officer', 'status'], name='case_officer_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CaseStatusLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('from_status', models.CharField(blank=True, choices=[('CREATED', 'Created'), ('ASSIGNED', 'Assigned'), ('ACKNOWLEDGED', 'Acknowledged'), ('EN_ROUTE', 'En Route'), ('ON_SCENE', 'On Scene'), ('ACTION_TAKEN', 'Action Taken'), ('CLOSED', 'Closed')], help_text='Previous status (null for initial creation)', max_length=20, null=True)),
                ('to_status', models.CharField(choices=[('CREATED', 'Created'), ('ASSIGNED', 'Assigned'), ('ACKNOWLEDGED', 'Acknowledged'), ('EN_ROUTE', 'En Route'), ('ON_SCENE', 'On Scene'), ('ACTION_TAKEN', 'Action Taken'), ('CLOSED', 'Closed')], max_length=20)),
                ('changed_by', models.CharField(help_text='User id of the actor, or SYSTEM for automated transitions', max_length=36)),
                ('notes', models.TextField(blank=True)),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('case', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='status_logs', to='cases.soscase')),
            ],
            options={
                'verbose_name': 'Case Status Log',
                'verbose_name_plural': 'Case Status Logs',
                'db_table': 'case_status_logs',
                'ordering': ['timestamp', 'id'],
            },
        ),
    ]
