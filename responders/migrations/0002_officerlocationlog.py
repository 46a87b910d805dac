import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('cases', '0001_initial'),
        ('responders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='OfficerLocationLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('latitude', models.FloatField()),
                ('longitude', models.FloatField()),
                ('accuracy', models.FloatField(blank=True, help_text='GPS accuracy radius in metres', null=True)),
                ('timestamp', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('case', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='officer_locations', to='cases.soscase')),
                ('officer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='location_logs', to='responders.officer')),
            ],
            options={
                'db_table': 'officer_location_logs',
                'ordering': ['-timestamp', '-id'],
                'indexes': [
                    models.Index(fields=['officer', '-timestamp'], name='loclog_officer_time_idx'),
                    models.Index(fields=['case', '-timestamp'], name='loclog_case_time_idx'),
                ],
            },
        ),
    ]
