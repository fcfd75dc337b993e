# Generated migration for the notification model

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('death_reported', 'Death Reported'), ('death_report_cancelled', 'Death Report Cancelled'), ('consent_requested', 'Consent Requested'), ('note_opened', 'Note Opened'), ('consent_reset', 'Consent Reset'), ('deletion_consent_requested', 'Deletion Consent Requested'), ('deletion_consent_declined', 'Deletion Consent Declined'), ('deletion_consent_cancelled', 'Deletion Consent Cancelled'), ('data_deleted', 'Data Deleted'), ('member_joined', 'Member Joined'), ('member_left', 'Member Left'), ('member_removed', 'Member Removed'), ('role_changed', 'Role Changed'), ('category_access_granted', 'Category Access Granted'), ('category_access_revoked', 'Category Access Revoked')], max_length=40)),
                ('title', models.CharField(max_length=200)),
                ('message', models.TextField()),
                ('is_read', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('related_creator', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='related_notifications', to=settings.AUTH_USER_MODEL)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['user', 'is_read', 'created_at'], name='notification_user_read_idx')],
            },
        ),
    ]
