import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ScannedUnit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('unit_id', models.UUIDField(unique=True)),
                ('product_name', models.CharField(blank=True, max_length=255, null=True)),
                ('points_awarded', models.PositiveIntegerField()),
                ('matched_by', models.CharField(blank=True, max_length=50)),
                ('scanned_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='scanned_units', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'scanned_units',
                'ordering': ['-scanned_at'],
                'indexes': [models.Index(fields=['user', 'scanned_at'], name='scanned_user_time_idx')],
            },
        ),
    ]
