# Generated migration for category access and preset models

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('family', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='CategoryAccess',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('category_id', models.CharField(choices=[('memories', 'Memories'), ('people', 'People'), ('house', 'House & Belongings'), ('medical', 'Medical & Care'), ('funeral', 'Funeral & Burial'), ('money', 'Money & Assets'), ('work', 'Work'), ('digital', 'Digital Accounts'), ('legal', 'Legal & Inheritance'), ('trust', 'Trust & Wishes'), ('support', 'Support & Services')], max_length=30)),
                ('granted_at', models.DateTimeField(auto_now_add=True)),
                ('creator', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='category_grants', to=settings.AUTH_USER_MODEL)),
                ('family_member', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='category_access', to='family.familymember')),
                ('granted_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='category_grants_given', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name_plural': 'Category access',
                'indexes': [models.Index(fields=['creator', 'family_member'], name='category_access_member_idx')],
                'unique_together': {('creator', 'family_member', 'category_id')},
            },
        ),
        migrations.CreateModel(
            name='AccessPreset',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('category_id', models.CharField(choices=[('memories', 'Memories'), ('people', 'People'), ('house', 'House & Belongings'), ('medical', 'Medical & Care'), ('funeral', 'Funeral & Burial'), ('money', 'Money & Assets'), ('work', 'Work'), ('digital', 'Digital Accounts'), ('legal', 'Legal & Inheritance'), ('trust', 'Trust & Wishes'), ('support', 'Support & Services')], max_length=30)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('creator', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='access_presets', to=settings.AUTH_USER_MODEL)),
                ('family_member', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='access_presets', to='family.familymember')),
            ],
            options={
                'ordering': ['family_member', 'category_id'],
                'unique_together': {('creator', 'family_member', 'category_id')},
            },
        ),
    ]
