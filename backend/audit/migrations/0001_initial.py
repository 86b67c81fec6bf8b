import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('contenttypes', '0002_remove_content_type_name'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('object_id', models.PositiveIntegerField()),
                ('action', models.CharField(choices=[('CREATE', 'Create'), ('UPDATE', 'Update'), ('DELETE', 'Delete'), ('SUBMIT', 'Submit'), ('CERTIFY', 'Certify'), ('APPROVE', 'Approve'), ('REJECT', 'Reject'), ('CORRECT', 'Correct'), ('ACTIVATE', 'Activate'), ('DEACTIVATE', 'Deactivate')], max_length=20)),
                ('timestamp', models.DateTimeField()),
                ('field_name', models.CharField(blank=True, max_length=100, null=True)),
                ('old_value', models.TextField(blank=True, null=True)),
                ('new_value', models.TextField(blank=True, null=True)),
                ('detail', models.TextField(blank=True, null=True)),
                ('content_type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, to='contenttypes.contenttype')),
                ('user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Audit Log',
                'verbose_name_plural': 'Audit Logs',
                'ordering': ['-timestamp', '-id'],
                'indexes': [
                    models.Index(fields=['content_type', 'object_id'], name='audit_audit_content_idx'),
                    models.Index(fields=['user', 'timestamp'], name='audit_audit_user_ts_idx'),
                    models.Index(fields=['action', 'timestamp'], name='audit_audit_action_ts_idx'),
                ],
            },
        ),
    ]
