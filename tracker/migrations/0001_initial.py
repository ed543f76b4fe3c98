# Initial schema for the tracker target store

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


STATUS_CHOICES = [(0, 'Disabled'), (1, 'Normal')]
PRIORITY_CHOICES = [('urgent', 'Urgent'), ('high', 'High'), ('medium', 'Medium'), ('low', 'Low')]


def _id():
    return ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID'))


def _timestamps():
    return [
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
        ('deleted_at', models.DateTimeField(blank=True, null=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Department',
            fields=[
                _id(),
                *_timestamps(),
                ('name', models.CharField(max_length=100)),
                ('code', models.CharField(max_length=50, unique=True)),
                ('level', models.PositiveSmallIntegerField(default=1)),
                ('sort', models.IntegerField(default=0)),
                ('status', models.SmallIntegerField(choices=STATUS_CHOICES, default=1)),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='children', to='tracker.department')),
            ],
            options={
                'db_table': 'departments',
                'ordering': ['level', 'sort', 'id'],
            },
        ),
        migrations.CreateModel(
            name='Permission',
            fields=[
                _id(),
                *_timestamps(),
                ('code', models.CharField(max_length=100, unique=True)),
                ('name', models.CharField(max_length=100)),
                ('resource', models.CharField(blank=True, max_length=50)),
                ('action', models.CharField(blank=True, max_length=50)),
                ('description', models.CharField(blank=True, max_length=255)),
            ],
            options={
                'db_table': 'permissions',
                'ordering': ['resource', 'action'],
            },
        ),
        migrations.CreateModel(
            name='Role',
            fields=[
                _id(),
                *_timestamps(),
                ('name', models.CharField(max_length=50, unique=True)),
                ('code', models.CharField(max_length=50, unique=True)),
                ('description', models.CharField(blank=True, max_length=255)),
                ('status', models.SmallIntegerField(choices=STATUS_CHOICES, default=1)),
                ('permissions', models.ManyToManyField(blank=True, db_table='role_permissions', related_name='roles', to='tracker.permission')),
            ],
            options={
                'db_table': 'roles',
            },
        ),
        migrations.CreateModel(
            name='User',
            fields=[
                _id(),
                *_timestamps(),
                ('username', models.CharField(max_length=50, unique=True)),
                ('nickname', models.CharField(blank=True, max_length=50)),
                ('password', models.CharField(blank=True, max_length=255)),
                ('email', models.CharField(blank=True, max_length=100)),
                ('phone', models.CharField(blank=True, max_length=20)),
                ('avatar', models.CharField(blank=True, max_length=255)),
                ('status', models.SmallIntegerField(choices=STATUS_CHOICES, default=1)),
                ('department', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='users', to='tracker.department')),
                ('roles', models.ManyToManyField(blank=True, db_table='user_roles', related_name='users', to='tracker.role')),
            ],
            options={
                'db_table': 'users',
            },
        ),
        migrations.CreateModel(
            name='Project',
            fields=[
                _id(),
                *_timestamps(),
                ('name', models.CharField(max_length=100)),
                ('code', models.CharField(max_length=50, unique=True)),
                ('description', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('wait', 'Waiting'), ('doing', 'In Progress'), ('suspended', 'Suspended'), ('closed', 'Closed'), ('done', 'Done')], default='wait', max_length=20)),
                ('start_date', models.DateField(blank=True, null=True)),
                ('end_date', models.DateField(blank=True, null=True)),
            ],
            options={
                'db_table': 'projects',
            },
        ),
        migrations.CreateModel(
            name='ProjectMember',
            fields=[
                _id(),
                *_timestamps(),
                ('role', models.CharField(choices=[('owner', 'Owner'), ('member', 'Member'), ('viewer', 'Viewer')], default='member', max_length=20)),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='members', to='tracker.project')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='project_memberships', to='tracker.user')),
            ],
            options={
                'db_table': 'project_members',
                'unique_together': {('project', 'user')},
            },
        ),
        migrations.CreateModel(
            name='Module',
            fields=[
                _id(),
                *_timestamps(),
                ('name', models.CharField(max_length=100, unique=True)),
                ('code', models.CharField(max_length=50, unique=True)),
                ('description', models.TextField(blank=True)),
                ('status', models.SmallIntegerField(choices=STATUS_CHOICES, default=1)),
                ('sort', models.IntegerField(default=0)),
            ],
            options={
                'db_table': 'modules',
            },
        ),
        migrations.CreateModel(
            name='Version',
            fields=[
                _id(),
                *_timestamps(),
                ('version_number', models.CharField(max_length=50)),
                ('description', models.TextField(blank=True)),
                ('release_date', models.DateField(blank=True, null=True)),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='versions', to='tracker.project')),
            ],
            options={
                'db_table': 'versions',
            },
        ),
        migrations.CreateModel(
            name='Requirement',
            fields=[
                _id(),
                *_timestamps(),
                ('legacy_id', models.PositiveIntegerField(blank=True, null=True, unique=True)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('reviewing', 'Reviewing'), ('active', 'Active'), ('changing', 'Changing'), ('closed', 'Closed')], default='draft', max_length=20)),
                ('priority', models.CharField(choices=PRIORITY_CHOICES, default='medium', max_length=20)),
                ('estimated_hours', models.FloatField(blank=True, null=True)),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='requirements', to='tracker.project')),
                ('creator', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_requirements', to='tracker.user')),
                ('assignee', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assigned_requirements', to='tracker.user')),
            ],
            options={
                'db_table': 'requirements',
            },
        ),
        migrations.CreateModel(
            name='Task',
            fields=[
                _id(),
                *_timestamps(),
                ('legacy_id', models.PositiveIntegerField(blank=True, null=True, unique=True)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('wait', 'Waiting'), ('doing', 'In Progress'), ('done', 'Done'), ('pause', 'Paused'), ('cancel', 'Cancelled'), ('closed', 'Closed')], default='wait', max_length=20)),
                ('priority', models.CharField(choices=PRIORITY_CHOICES, default='medium', max_length=20)),
                ('start_date', models.DateField(blank=True, null=True)),
                ('end_date', models.DateField(blank=True, null=True)),
                ('due_date', models.DateField(blank=True, null=True)),
                ('estimated_hours', models.FloatField(blank=True, null=True)),
                ('actual_hours', models.FloatField(blank=True, null=True)),
                ('progress', models.PositiveSmallIntegerField(default=0)),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tasks', to='tracker.project')),
                ('requirement', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='tasks', to='tracker.requirement')),
                ('creator', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_tasks', to='tracker.user')),
                ('assignee', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assigned_tasks', to='tracker.user')),
            ],
            options={
                'db_table': 'tasks',
            },
        ),
        migrations.CreateModel(
            name='Bug',
            fields=[
                _id(),
                *_timestamps(),
                ('legacy_id', models.PositiveIntegerField(blank=True, null=True, unique=True)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('active', 'Active'), ('resolved', 'Resolved'), ('closed', 'Closed')], default='active', max_length=20)),
                ('severity', models.CharField(choices=[('critical', 'Critical'), ('high', 'High'), ('medium', 'Medium'), ('low', 'Low')], default='medium', max_length=20)),
                ('priority', models.CharField(choices=PRIORITY_CHOICES, default='medium', max_length=20)),
                ('confirmed', models.BooleanField(default=False)),
                ('estimated_hours', models.FloatField(blank=True, null=True)),
                ('actual_hours', models.FloatField(blank=True, null=True)),
                ('solution', models.CharField(blank=True, max_length=50)),
                ('solution_note', models.TextField(blank=True)),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bugs', to='tracker.project')),
                ('requirement', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='bugs', to='tracker.requirement')),
                ('module', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='bugs', to='tracker.module')),
                ('creator', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_bugs', to='tracker.user')),
                ('assignees', models.ManyToManyField(blank=True, db_table='bug_assignees', related_name='assigned_bugs', to='tracker.user')),
                ('resolved_version', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='resolved_bugs', to='tracker.version')),
            ],
            options={
                'db_table': 'bugs',
            },
        ),
        migrations.CreateModel(
            name='SystemConfig',
            fields=[
                _id(),
                ('key', models.CharField(max_length=100, unique=True)),
                ('value', models.TextField(blank=True)),
                ('type', models.CharField(default='string', max_length=20)),
                ('description', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'system_configs',
            },
        ),
        migrations.CreateModel(
            name='Action',
            fields=[
                _id(),
                ('object_type', models.CharField(db_index=True, max_length=30)),
                ('object_id', models.PositiveIntegerField(db_index=True)),
                ('action', models.CharField(max_length=30)),
                ('date', models.DateTimeField(default=django.utils.timezone.now)),
                ('comment', models.TextField(blank=True)),
                ('extra', models.JSONField(blank=True, null=True)),
                ('project', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='actions', to='tracker.project')),
                ('actor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='actions', to='tracker.user')),
            ],
            options={
                'db_table': 'actions',
                'ordering': ['-date', '-id'],
            },
        ),
        migrations.CreateModel(
            name='History',
            fields=[
                _id(),
                ('field_name', models.CharField(max_length=30)),
                ('old_raw', models.TextField(blank=True)),
                ('old_display', models.TextField(blank=True)),
                ('new_raw', models.TextField(blank=True)),
                ('new_display', models.TextField(blank=True)),
                ('diff', models.TextField(blank=True)),
                ('action', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='histories', to='tracker.action')),
            ],
            options={
                'db_table': 'histories',
                'ordering': ['id'],
            },
        ),
    ]
