import uuid

import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('event_type', models.CharField(choices=[('sos.created', 'SOS Created'), ('sos.assigned', 'SOS Assigned'), ('sos.assignment.failed', 'SOS Assignment Failed'), ('sos.reassigned', 'Officer Reassigned'), ('sos.status.changed', 'Status Changed'), ('sos.closed', 'Case Closed'), ('location.history.purged', 'Location History Purged')], db_index=True, help_text='Type of event being logged', max_length=50)),
                ('severity', models.CharField(choices=[('info', 'Info'), ('warning', 'Warning'), ('error', 'Error')], db_index=True, default='info', max_length=10)),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When the event occurred')),
                ('actor_id', models.CharField(blank=True, db_index=True, help_text='UUID of user who performed action, or SYSTEM', max_length=36)),
                ('actor_role', models.CharField(blank=True, max_length=20)),
                ('actor_identifier', models.CharField(blank=True, max_length=255)),
                ('target_type', models.CharField(blank=True, max_length=50)),
                ('target_id', models.CharField(blank=True, db_index=True, max_length=36)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.CharField(blank=True, max_length=500)),
                ('request_method', models.CharField(blank=True, max_length=10)),
                ('request_path', models.CharField(blank=True, max_length=500)),
                ('description', models.TextField(blank=True)),
                ('metadata', models.JSONField(blank=True, default=dict, help_text='Additional structured data about the event')),
                ('success', models.BooleanField(default=True)),
            ],
            options={
                'verbose_name': 'Audit Log',
                'verbose_name_plural': 'Audit Logs',
                'db_table': 'audit_logs',
                'ordering': ['-timestamp'],
                'indexes': [
                    models.Index(fields=['event_type', 'timestamp'], name='audit_event_time_idx'),
                    models.Index(fields=['target_id', 'timestamp'], name='audit_target_time_idx'),
                ],
            },
        ),
    ]
