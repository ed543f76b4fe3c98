from django.db import models
from django.utils import timezone


STATUS_DISABLED = 0
STATUS_NORMAL = 1
STATUS_CHOICES = [
    (STATUS_DISABLED, 'Disabled'),
    (STATUS_NORMAL, 'Normal'),
]

PRIORITY_CHOICES = [
    ('urgent', 'Urgent'),
    ('high', 'High'),
    ('medium', 'Medium'),
    ('low', 'Low'),
]


class TimestampedModel(models.Model):
    """Shared bookkeeping columns; ``deleted_at`` marks soft-deleted rows."""
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        abstract = True


class Department(TimestampedModel):
    name = models.CharField(max_length=100)
    code = models.CharField(max_length=50, unique=True)
    parent = models.ForeignKey('self', null=True, blank=True, on_delete=models.SET_NULL, related_name='children')
    level = models.PositiveSmallIntegerField(default=1)  # parent.level + 1
    sort = models.IntegerField(default=0)
    status = models.SmallIntegerField(choices=STATUS_CHOICES, default=STATUS_NORMAL)

    class Meta:
        db_table = 'departments'
        ordering = ['level', 'sort', 'id']

    def __str__(self):
        return self.name


class Permission(TimestampedModel):
    code = models.CharField(max_length=100, unique=True)  # 'resource:action'
    name = models.CharField(max_length=100)
    resource = models.CharField(max_length=50, blank=True)
    action = models.CharField(max_length=50, blank=True)
    description = models.CharField(max_length=255, blank=True)

    class Meta:
        db_table = 'permissions'
        ordering = ['resource', 'action']

    def __str__(self):
        return self.code


class Role(TimestampedModel):
    name = models.CharField(max_length=50, unique=True)
    code = models.CharField(max_length=50, unique=True)
    description = models.CharField(max_length=255, blank=True)
    status = models.SmallIntegerField(choices=STATUS_CHOICES, default=STATUS_NORMAL)
    permissions = models.ManyToManyField(Permission, blank=True, related_name='roles', db_table='role_permissions')

    class Meta:
        db_table = 'roles'

    def __str__(self):
        return self.name


class User(TimestampedModel):
    """Tracker account. Passwords are Django password hashes."""
    username = models.CharField(max_length=50, unique=True)
    nickname = models.CharField(max_length=50, blank=True)
    password = models.CharField(max_length=255, blank=True)
    email = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    avatar = models.CharField(max_length=255, blank=True)
    department = models.ForeignKey(Department, null=True, blank=True, on_delete=models.SET_NULL, related_name='users')
    status = models.SmallIntegerField(choices=STATUS_CHOICES, default=STATUS_NORMAL)
    roles = models.ManyToManyField(Role, blank=True, related_name='users', db_table='user_roles')

    class Meta:
        db_table = 'users'

    def __str__(self):
        return self.display_name

    @property
    def display_name(self):
        if self.nickname:
            return f"{self.username}({self.nickname})"
        return self.username


class Project(TimestampedModel):
    STATUS_CHOICES = [
        ('wait', 'Waiting'),
        ('doing', 'In Progress'),
        ('suspended', 'Suspended'),
        ('closed', 'Closed'),
        ('done', 'Done'),
    ]

    name = models.CharField(max_length=100)
    code = models.CharField(max_length=50, unique=True)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='wait')
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)

    class Meta:
        db_table = 'projects'

    def __str__(self):
        return self.name


class ProjectMember(TimestampedModel):
    ROLE_CHOICES = [
        ('owner', 'Owner'),
        ('member', 'Member'),
        ('viewer', 'Viewer'),
    ]

    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='members')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='project_memberships')
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='member')

    class Meta:
        db_table = 'project_members'
        unique_together = [('project', 'user')]


class Module(TimestampedModel):
    name = models.CharField(max_length=100, unique=True)
    code = models.CharField(max_length=50, unique=True)
    description = models.TextField(blank=True)
    status = models.SmallIntegerField(choices=STATUS_CHOICES, default=STATUS_NORMAL)
    sort = models.IntegerField(default=0)

    class Meta:
        db_table = 'modules'

    def __str__(self):
        return self.name


class Version(TimestampedModel):
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='versions')
    version_number = models.CharField(max_length=50)
    description = models.TextField(blank=True)
    release_date = models.DateField(null=True, blank=True)

    class Meta:
        db_table = 'versions'

    def __str__(self):
        return self.version_number


class Requirement(TimestampedModel):
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('reviewing', 'Reviewing'),
        ('active', 'Active'),
        ('changing', 'Changing'),
        ('closed', 'Closed'),
    ]

    legacy_id = models.PositiveIntegerField(null=True, blank=True, unique=True)  # zt_story.id
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft')
    priority = models.CharField(max_length=20, choices=PRIORITY_CHOICES, default='medium')
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='requirements')
    creator = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='created_requirements')
    assignee = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='assigned_requirements')
    estimated_hours = models.FloatField(null=True, blank=True)

    class Meta:
        db_table = 'requirements'

    def __str__(self):
        return self.title


class Task(TimestampedModel):
    STATUS_CHOICES = [
        ('wait', 'Waiting'),
        ('doing', 'In Progress'),
        ('done', 'Done'),
        ('pause', 'Paused'),
        ('cancel', 'Cancelled'),
        ('closed', 'Closed'),
    ]

    legacy_id = models.PositiveIntegerField(null=True, blank=True, unique=True)  # zt_task.id
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='wait')
    priority = models.CharField(max_length=20, choices=PRIORITY_CHOICES, default='medium')
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='tasks')
    requirement = models.ForeignKey(Requirement, null=True, blank=True, on_delete=models.SET_NULL, related_name='tasks')
    creator = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='created_tasks')
    assignee = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='assigned_tasks')
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    due_date = models.DateField(null=True, blank=True)
    estimated_hours = models.FloatField(null=True, blank=True)
    actual_hours = models.FloatField(null=True, blank=True)
    progress = models.PositiveSmallIntegerField(default=0)  # 0-100

    class Meta:
        db_table = 'tasks'

    def __str__(self):
        return self.title


class Bug(TimestampedModel):
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('resolved', 'Resolved'),
        ('closed', 'Closed'),
    ]
    SEVERITY_CHOICES = [
        ('critical', 'Critical'),
        ('high', 'High'),
        ('medium', 'Medium'),
        ('low', 'Low'),
    ]

    legacy_id = models.PositiveIntegerField(null=True, blank=True, unique=True)  # zt_bug.id
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    severity = models.CharField(max_length=20, choices=SEVERITY_CHOICES, default='medium')
    priority = models.CharField(max_length=20, choices=PRIORITY_CHOICES, default='medium')
    confirmed = models.BooleanField(default=False)
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='bugs')
    requirement = models.ForeignKey(Requirement, null=True, blank=True, on_delete=models.SET_NULL, related_name='bugs')
    module = models.ForeignKey(Module, null=True, blank=True, on_delete=models.SET_NULL, related_name='bugs')
    creator = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='created_bugs')
    assignees = models.ManyToManyField(User, blank=True, related_name='assigned_bugs', db_table='bug_assignees')
    estimated_hours = models.FloatField(null=True, blank=True)
    actual_hours = models.FloatField(null=True, blank=True)
    solution = models.CharField(max_length=50, blank=True)
    solution_note = models.TextField(blank=True)
    resolved_version = models.ForeignKey(Version, null=True, blank=True, on_delete=models.SET_NULL, related_name='resolved_bugs')

    class Meta:
        db_table = 'bugs'

    def __str__(self):
        return self.title


class SystemConfig(models.Model):
    """Key/value settings; ``initialized`` switches the system out of setup mode."""
    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(blank=True)
    type = models.CharField(max_length=20, default='string')  # string, boolean, number, json
    description = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'system_configs'

    def __str__(self):
        return self.key


class Action(models.Model):
    """An audit event on one tracker object. Append-only."""
    object_type = models.CharField(max_length=30, db_index=True)  # 'bug', 'task', 'requirement', ...
    object_id = models.PositiveIntegerField(db_index=True)
    project = models.ForeignKey(Project, null=True, blank=True, on_delete=models.SET_NULL, related_name='actions')
    actor = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='actions')
    action = models.CharField(max_length=30)  # created, edited, assigned, resolved, commented
    date = models.DateTimeField(default=timezone.now)
    comment = models.TextField(blank=True)
    extra = models.JSONField(null=True, blank=True)

    class Meta:
        db_table = 'actions'
        ordering = ['-date', '-id']

    def __str__(self):
        return f"{self.object_type}#{self.object_id} {self.action}"


class History(models.Model):
    """One changed field of an Action, with raw and display values."""
    action = models.ForeignKey(Action, on_delete=models.CASCADE, related_name='histories')
    field_name = models.CharField(max_length=30)  # wire name, e.g. 'assignee_ids'
    old_raw = models.TextField(blank=True)
    old_display = models.TextField(blank=True)
    new_raw = models.TextField(blank=True)
    new_display = models.TextField(blank=True)
    diff = models.TextField(blank=True)

    class Meta:
        db_table = 'histories'
        ordering = ['id']

    def __str__(self):
        return f"{self.field_name}: {self.old_raw} -> {self.new_raw}"
