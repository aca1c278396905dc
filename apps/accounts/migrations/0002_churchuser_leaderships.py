# Generated manually for the accounts app

from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('accounts', '0001_initial'),
        ('groups', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='churchuser',
            name='group_leaderships',
            field=models.ManyToManyField(blank=True, related_name='leader_accounts', to='groups.group'),
        ),
        migrations.AddField(
            model_name='churchuser',
            name='subgroup_leaderships',
            field=models.ManyToManyField(blank=True, related_name='leader_accounts', to='groups.subgroup'),
        ),
    ]
