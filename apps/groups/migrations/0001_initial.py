# Generated manually for the groups app

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
        ('people', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Group',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('purpose', models.TextField(blank=True)),
                ('meeting_frequency', models.CharField(choices=[('weekly', 'Weekly'), ('biweekly', 'Biweekly'), ('monthly', 'Monthly'), ('quarterly', 'Quarterly'), ('custom', 'Custom')], default='weekly', max_length=20)),
                ('custom_frequency', models.CharField(blank=True, max_length=100)),
                ('meeting_day', models.CharField(choices=[('monday', 'Monday'), ('tuesday', 'Tuesday'), ('wednesday', 'Wednesday'), ('thursday', 'Thursday'), ('friday', 'Friday'), ('saturday', 'Saturday'), ('sunday', 'Sunday'), ('varies', 'Varies')], default='sunday', max_length=20)),
                ('meeting_time', models.CharField(blank=True, max_length=50)),
                ('meeting_location', models.CharField(blank=True, max_length=200)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('church', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='groups', to='accounts.church')),
                ('created_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_groups', to=settings.AUTH_USER_MODEL)),
                ('leaders', models.ManyToManyField(blank=True, related_name='led_groups', to='people.person')),
            ],
            options={
                'db_table': 'groups',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['church', 'name'], name='groups_church_name_idx'),
                    models.Index(fields=['is_active'], name='groups_is_active_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Subgroup',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('meeting_day', models.CharField(choices=[('monday', 'Monday'), ('tuesday', 'Tuesday'), ('wednesday', 'Wednesday'), ('thursday', 'Thursday'), ('friday', 'Friday'), ('saturday', 'Saturday'), ('sunday', 'Sunday'), ('varies', 'Varies')], default='sunday', max_length=20)),
                ('meeting_time', models.CharField(blank=True, max_length=50)),
                ('meeting_location', models.CharField(blank=True, max_length=200)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('church', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='subgroups', to='accounts.church')),
                ('created_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_subgroups', to=settings.AUTH_USER_MODEL)),
                ('leaders', models.ManyToManyField(blank=True, related_name='led_subgroups', to='people.person')),
                ('parent_group', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='subgroups', to='groups.group')),
            ],
            options={
                'db_table': 'subgroups',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['parent_group', 'name'], name='subgroups_parent_name_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='GroupMember',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('role', models.CharField(choices=[('member', 'Member'), ('leader', 'Leader'), ('assistant', 'Assistant'), ('admin', 'Admin')], default='member', max_length=20)),
                ('join_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('is_active', models.BooleanField(default=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('church', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='group_memberships', to='accounts.church')),
                ('group', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='memberships', to='groups.group')),
                ('person', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='group_memberships', to='people.person')),
                ('subgroup', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='memberships', to='groups.subgroup')),
            ],
            options={
                'db_table': 'group_members',
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['group', 'role'], name='group_members_group_role_idx'),
                    models.Index(fields=['subgroup'], name='group_members_subgroup_idx'),
                ],
                'unique_together': {('person', 'group')},
            },
        ),
        migrations.CreateModel(
            name='AttendanceEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('status', models.CharField(choices=[('present', 'Present'), ('absent', 'Absent'), ('excused', 'Excused')], max_length=10)),
                ('notes', models.TextField(blank=True)),
                ('recorded_at', models.DateTimeField(auto_now_add=True)),
                ('member', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attendance', to='groups.groupmember')),
            ],
            options={
                'db_table': 'group_attendance',
                'ordering': ['id'],
                'indexes': [
                    models.Index(fields=['member', 'date'], name='group_att_member_date_idx'),
                ],
            },
        ),
    ]
