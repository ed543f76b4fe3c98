"""
One migrator per entity kind.

Each migrator reads its legacy rows, maps them, looks the target row up by
natural key and creates it when missing, then records the legacy id ->
target id correspondence for the migrators that run after it.
"""
import logging

from django.contrib.auth.hashers import make_password
from django.db import DatabaseError, transaction

from tracker.exceptions import LegacyReadError
from tracker.migration import mappers
from tracker.migration.toposort import parents_first
from tracker.models import (
    STATUS_NORMAL, Bug, Department, Module, Permission, Project, ProjectMember,
    Requirement, Role, Task, User,
)

logger = logging.getLogger('tracker')

MIGRATED = 'migrated'
SKIPPED = 'skipped'
FAILED = 'failed'

# Every migrated account gets this password; operators must force a reset.
DEFAULT_PASSWORD = '123'

ADMIN_ROLE_CODE = 'admin'
ADMIN_ROLE_KEYWORDS = ('admin', '管理员', '管理')


def ensure_admin_role():
    """Return the ``admin`` role, creating it with every permission if missing."""
    role, created = Role.objects.get_or_create(
        code=ADMIN_ROLE_CODE,
        defaults={
            'name': 'Administrator',
            'description': 'System administrator with all permissions',
            'status': STATUS_NORMAL,
        },
    )
    if created:
        role.permissions.set(Permission.objects.all())
        logger.info("Created admin role")
    return role


class EntityMigrator:
    """
    Base class for the per-entity migrators.

    Subclasses set ``kind`` (statistics key), ``label`` (used in log lines)
    and implement ``read_rows`` and ``migrate_row``. ``migrate_row`` returns
    one of MIGRATED, SKIPPED or FAILED.
    """
    kind = ''
    label = ''

    def __init__(self, legacy, resolver, stats):
        self.legacy = legacy
        self.resolver = resolver
        self.counts = stats[self.kind]

    def read_rows(self):
        raise NotImplementedError

    def migrate_row(self, row):
        raise NotImplementedError

    def before_run(self):
        pass

    def run(self):
        self.before_run()
        rows = self.read_rows()
        logger.info(f"Found {len(rows)} legacy {self.label} rows")
        for row in rows:
            self._count(self.migrate_row(row))
        self.after_rows(rows)
        logger.info(
            f"Migrated {self.counts.migrated} {self.label} rows "
            f"({self.counts.skipped} skipped, {self.counts.failed} failed)"
        )
        return self.counts

    def after_rows(self, rows):
        pass

    def _count(self, outcome):
        if outcome == MIGRATED:
            self.counts.migrated += 1
        elif outcome == SKIPPED:
            self.counts.skipped += 1
        elif outcome == FAILED:
            self.counts.failed += 1

    def _save(self, describe, build):
        """Run ``build`` in its own savepoint; log and return None on a database error."""
        try:
            with transaction.atomic():
                return build()
        except DatabaseError as e:
            logger.error(f"Failed to create {self.label} {describe}: {e}")
            return None

    def _matched(self, legacy_id, obj, describe):
        self.resolver.record(self.resolver_kind, legacy_id, obj.pk)
        logger.info(f"{self.label.capitalize()} {describe} already exists (id={obj.pk})")
        return MIGRATED

    def _created(self, legacy_id, obj, describe):
        self.resolver.record(self.resolver_kind, legacy_id, obj.pk)
        logger.info(f"Created {self.label} {describe} (legacy {legacy_id} -> {obj.pk})")
        return MIGRATED

    @property
    def resolver_kind(self):
        return self.label


class DepartmentMigrator(EntityMigrator):
    kind = 'departments'
    label = 'department'

    def read_rows(self):
        return parents_first(
            self.legacy.departments(),
            get_id=lambda dept: dept.id,
            get_parent=lambda dept: dept.parent,
        )

    def migrate_row(self, dept):
        code = mappers.generate_dept_code(dept.id)
        existing = Department.objects.filter(code=code).first()
        if existing:
            return self._matched(dept.id, existing, code)

        parent = None
        if dept.parent:
            parent_id = self.resolver.resolve('department', dept.parent)
            parent = Department.objects.filter(pk=parent_id).first() if parent_id else None
            if parent is None:
                logger.warning(f"Parent {dept.parent} of department {dept.id} not migrated; treating it as a root")
        level = parent.level + 1 if parent else 1

        obj = self._save(code, lambda: Department.objects.create(
            name=dept.name or code,
            code=code,
            parent=parent,
            level=level,
            sort=dept.order,
            status=STATUS_NORMAL,
        ))
        if obj is None:
            return FAILED
        return self._created(dept.id, obj, f"{obj.name} ({code})")


class RoleMigrator(EntityMigrator):
    kind = 'roles'
    label = 'role'

    def before_run(self):
        self.admin_role = ensure_admin_role()

    def read_rows(self):
        return self.legacy.groups()

    def migrate_row(self, group):
        name = group.name.strip()
        if any(keyword in name.lower() for keyword in ADMIN_ROLE_KEYWORDS):
            self.resolver.record('role', group.id, self.admin_role.pk)
            logger.info(f"Group {name} mapped to the admin role")
            return MIGRATED

        code = mappers.generate_role_code(name)
        existing = Role.objects.filter(code=code).first()
        if existing:
            return self._matched(group.id, existing, code)

        mapped = [
            mappers.convert_permission_code(p.module, p.method)
            for p in self.legacy.group_privileges(group.id)
        ]
        permissions = list(Permission.objects.filter(code__in={c for c in mapped if c}))
        dropped = mapped.count('')
        if dropped:
            logger.debug(f"Dropped {dropped} unmapped privileges of group {name}")

        def build():
            role = Role.objects.create(
                name=name or code,
                code=code,
                description=group.desc,
                status=STATUS_NORMAL,
            )
            role.permissions.set(permissions)
            return role

        role = self._save(code, build)
        if role is None:
            return FAILED
        return self._created(group.id, role, f"{role.name} with {len(permissions)} permissions")


class UserMigrator(EntityMigrator):
    kind = 'users'
    label = 'user'

    def before_run(self):
        # Hash once; every created user shares the default password.
        self.default_password = make_password(DEFAULT_PASSWORD)
        self.admin_role = ensure_admin_role()

    def read_rows(self):
        return self.legacy.users()

    def migrate_row(self, legacy_user):
        username = legacy_user.account.strip()
        if not username:
            logger.warning(f"Legacy user {legacy_user.id} has no account; skipping")
            return SKIPPED

        existing = User.objects.filter(username=username).first()
        if existing:
            if username.lower() == 'admin':
                self._save(username, lambda: existing.roles.add(self.admin_role))
            return self._matched(legacy_user.id, existing, username)

        role_ids = self._role_ids(legacy_user)
        if not role_ids:
            logger.warning(f"User {username} has no roles")

        def build():
            user = User.objects.create(
                username=username,
                nickname=legacy_user.realname.strip() or username,
                password=self.default_password,
                email=legacy_user.email,
                phone=legacy_user.mobile,
                avatar=legacy_user.avatar,
                department_id=self.resolver.resolve('department', legacy_user.dept),
                status=mappers.convert_user_status(legacy_user.deleted),
            )
            user.roles.set(role_ids)
            return user

        user = self._save(username, build)
        if user is None:
            return FAILED
        return self._created(legacy_user.id, user, username)

    def _role_ids(self, legacy_user):
        role_ids = []
        account = legacy_user.account.strip().lower()
        if 'admin' in account or 'admin' in legacy_user.role.lower():
            role_ids.append(self.admin_role.pk)
        for group_id in self.legacy.user_group_ids(legacy_user.account):
            role_id = self.resolver.resolve('role', group_id)
            if role_id is not None and role_id not in role_ids:
                role_ids.append(role_id)
        if not role_ids and account == 'admin':
            role_ids.append(self.admin_role.pk)
        return role_ids


class ProjectMigrator(EntityMigrator):
    kind = 'projects'
    label = 'project'

    def read_rows(self):
        return self.legacy.projects()

    def migrate_row(self, legacy_project):
        code = legacy_project.code.strip() or mappers.generate_project_code(legacy_project.name, legacy_project.id)
        existing = Project.objects.filter(code=code).first()
        if existing:
            return self._matched(legacy_project.id, existing, code)

        project = self._save(code, lambda: Project.objects.create(
            name=legacy_project.name or code,
            code=code,
            description=legacy_project.desc,
            status=mappers.convert_project_status(legacy_project.status),
            start_date=mappers.parse_date(legacy_project.begin),
            end_date=mappers.parse_date(legacy_project.end),
        ))
        if project is None:
            return FAILED
        return self._created(legacy_project.id, project, f"{project.name} ({code})")


class ModuleMigrator(EntityMigrator):
    kind = 'modules'
    label = 'module'

    def before_run(self):
        self.seen = {}

    def read_rows(self):
        try:
            return self.legacy.modules()
        except LegacyReadError as e:
            logger.warning(f"Skipping modules: {e}")
            return []

    def migrate_row(self, legacy_module):
        name = legacy_module.name.strip()
        if not name:
            return SKIPPED
        if name in self.seen:
            logger.warning(f"Duplicate module name {name} (legacy {legacy_module.id}); keeping the first")
            self.resolver.record('module', legacy_module.id, self.seen[name])
            return SKIPPED

        existing = Module.objects.filter(name=name).first()
        if existing:
            self.seen[name] = existing.pk
            return self._matched(legacy_module.id, existing, name)

        code = mappers.generate_module_code(name, legacy_module.id)
        if Module.objects.filter(code=code).exists():
            code = f"module_{legacy_module.id}"

        module = self._save(name, lambda: Module.objects.create(
            name=name,
            code=code,
            status=STATUS_NORMAL,
            sort=legacy_module.order,
        ))
        if module is None:
            return FAILED
        self.seen[name] = module.pk
        return self._created(legacy_module.id, module, f"{name} ({code})")


class RequirementMigrator(EntityMigrator):
    kind = 'requirements'
    label = 'requirement'

    def read_rows(self):
        return self.legacy.stories()

    def migrate_row(self, story):
        existing = Requirement.objects.filter(legacy_id=story.id).first()
        if existing:
            return self._matched(story.id, existing, f"#{story.id}")

        project_id = self._project_id(story)
        if project_id is None:
            logger.warning(f"Skipping story {story.id} ({story.title}): no migrated project")
            return SKIPPED

        requirement = self._save(f"#{story.id}", lambda: Requirement.objects.create(
            legacy_id=story.id,
            title=story.title,
            description=self.legacy.story_spec(story.id),
            status=mappers.convert_requirement_status(story.status),
            priority=mappers.convert_priority(story.pri),
            project_id=project_id,
            creator_id=self.resolver.resolve_by_account(story.opened_by),
            assignee_id=self.resolver.resolve_by_account(story.assigned_to),
            estimated_hours=mappers.days_to_hours(story.estimate),
        ))
        if requirement is None:
            return FAILED
        return self._created(story.id, requirement, requirement.title)

    def _project_id(self, story):
        # The product link is only consulted when the story has no project link at all.
        legacy_project_id = self.legacy.story_project_id(story.id)
        if legacy_project_id is None and story.product:
            legacy_project_id = self.legacy.product_project_id(story.product)
        return self.resolver.resolve('project', legacy_project_id)


class TaskMigrator(EntityMigrator):
    kind = 'tasks'
    label = 'task'

    def read_rows(self):
        return self.legacy.tasks()

    def migrate_row(self, legacy_task):
        existing = Task.objects.filter(legacy_id=legacy_task.id).first()
        if existing:
            return self._matched(legacy_task.id, existing, f"#{legacy_task.id}")

        project_id = (
            self.resolver.resolve('project', legacy_task.execution)
            or self.resolver.resolve('project', legacy_task.project)
        )
        if project_id is None:
            logger.warning(f"Skipping task {legacy_task.id} ({legacy_task.name}): no migrated project")
            return SKIPPED

        start_date = mappers.parse_date(legacy_task.est_started)
        due_date = mappers.parse_date(legacy_task.deadline)

        task = self._save(f"#{legacy_task.id}", lambda: Task.objects.create(
            legacy_id=legacy_task.id,
            title=legacy_task.name,
            description=legacy_task.desc,
            status=mappers.convert_task_status(legacy_task.status),
            priority=mappers.convert_priority(legacy_task.pri),
            project_id=project_id,
            requirement_id=self.resolver.resolve('requirement', legacy_task.story),
            creator_id=self.resolver.resolve_by_account(legacy_task.opened_by),
            assignee_id=self.resolver.resolve_by_account(legacy_task.assigned_to),
            start_date=start_date,
            due_date=due_date,
            end_date=mappers.compute_end_date(start_date, due_date, legacy_task.estimate),
            estimated_hours=mappers.days_to_hours(legacy_task.estimate),
            actual_hours=mappers.days_to_hours(legacy_task.consumed),
        ))
        if task is None:
            return FAILED
        return self._created(legacy_task.id, task, task.title)


class BugMigrator(EntityMigrator):
    kind = 'bugs'
    label = 'bug'

    def read_rows(self):
        return self.legacy.bugs()

    def migrate_row(self, legacy_bug):
        existing = Bug.objects.filter(legacy_id=legacy_bug.id).first()
        if existing:
            return self._matched(legacy_bug.id, existing, f"#{legacy_bug.id}")

        project_id = self.resolver.resolve('project', legacy_bug.project)
        if project_id is None:
            logger.warning(f"Skipping bug {legacy_bug.id} ({legacy_bug.title}): no migrated project")
            return SKIPPED

        assignee_id = self.resolver.resolve_by_account(legacy_bug.assigned_to)

        def build():
            bug = Bug.objects.create(
                legacy_id=legacy_bug.id,
                title=legacy_bug.title,
                description=legacy_bug.steps,
                status=mappers.convert_bug_status(legacy_bug.status),
                severity=mappers.convert_severity(legacy_bug.severity),
                priority=mappers.convert_priority(legacy_bug.pri),
                project_id=project_id,
                requirement_id=self.resolver.resolve('requirement', legacy_bug.story),
                creator_id=self.resolver.resolve_by_account(legacy_bug.opened_by),
                solution=legacy_bug.resolution,
                solution_note=legacy_bug.resolved_build,
            )
            if assignee_id is not None:
                bug.assignees.add(assignee_id)
            return bug

        bug = self._save(f"#{legacy_bug.id}", build)
        if bug is None:
            return FAILED
        return self._created(legacy_bug.id, bug, bug.title)


class ProjectMemberMigrator(EntityMigrator):
    """
    Migrate legacy team rows into project memberships.

    A team row's ``root`` is a project, an execution or a task depending on
    ``type``. Without any team rows, members are inferred from the assignees
    of migrated tasks, requirements and bugs.
    """
    kind = 'project_members'
    label = 'project member'

    def read_rows(self):
        try:
            return self.legacy.team_members()
        except LegacyReadError as e:
            logger.warning(f"Team table unavailable, inferring members instead: {e}")
            return []

    def migrate_row(self, team):
        project_id = self._project_id(team)
        user_id = self.resolver.resolve_by_account(team.account)
        if project_id is None or user_id is None:
            logger.warning(f"Skipping team row {team.type}:{team.root} for {team.account}: project or user not migrated")
            return SKIPPED

        role = mappers.convert_project_role(team.role)

        def build():
            member, created = ProjectMember.objects.get_or_create(
                project_id=project_id,
                user_id=user_id,
                defaults={'role': role},
            )
            if not created and member.role != role:
                member.role = role
                member.save(update_fields=['role', 'updated_at'])
            return member

        member = self._save(f"{team.account}@{project_id}", build)
        if member is None:
            return FAILED
        logger.info(f"Project {project_id} member {team.account} as {role}")
        return MIGRATED

    def after_rows(self, rows):
        if not rows:
            self.infer_members()

    def _project_id(self, team):
        root_type = team.type.strip().lower()
        if root_type == 'project':
            return self.resolver.resolve('project', team.root)
        if root_type == 'execution':
            return self._execution_project(team.root)
        if root_type == 'task':
            return self._execution_project(self.legacy.task_execution_id(team.root))
        return None

    def _execution_project(self, execution_id):
        if not execution_id:
            return None
        project_id = self.resolver.resolve('project', execution_id)
        if project_id is None:
            project_id = self.resolver.resolve('project', self.legacy.execution_parent_id(execution_id))
        return project_id

    def infer_members(self):
        pairs = set()
        for model in (Task, Requirement):
            pairs.update(
                model.objects.filter(legacy_id__isnull=False, assignee__isnull=False)
                .values_list('project_id', 'assignee_id')
            )
        pairs.update(
            Bug.assignees.through.objects.filter(bug__legacy_id__isnull=False)
            .values_list('bug__project_id', 'user_id')
        )
        logger.info(f"Inferring {len(pairs)} project memberships from assignees")

        for project_id, user_id in sorted(pairs):
            if ProjectMember.objects.filter(project_id=project_id, user_id=user_id).exists():
                self._count(MIGRATED)
                continue
            member = self._save(f"{user_id}@{project_id}", lambda: ProjectMember.objects.create(
                project_id=project_id,
                user_id=user_id,
                role='member',
            ))
            self._count(MIGRATED if member is not None else FAILED)
