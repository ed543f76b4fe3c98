from tracker.exceptions import MigrationError
from tracker.migration.driver import MIGRATION_STEPS, MigrationDriver, is_initialized
from tracker.migration.stats import ENTITY_KINDS
from tracker.models import (
    Bug, Department, Module, Project, ProjectMember, Requirement, Role, SystemConfig, Task, User,
)
from tracker.tests.legacy_fixtures import LegacyDatabaseTestCase, insert_rows


def load_sample_data():
    """A small but complete ZenTao dataset touching every migrator."""
    insert_rows('zt_dept', [
        {'id': 1, 'name': 'R&D', 'parent': 0, 'grade': 1, 'order': 0},
        {'id': 2, 'name': 'Backend', 'parent': 1, 'grade': 2, 'order': 0},
    ])
    insert_rows('zt_group', [
        {'id': 1, 'name': 'Admin', 'desc': ''},
        {'id': 2, 'name': 'Developer', 'desc': ''},
    ])
    insert_rows('zt_grouppriv', [
        {'group': 2, 'module': 'task', 'method': 'edit'},
        {'group': 2, 'module': 'bug', 'method': 'assign'},
    ])
    insert_rows('zt_user', [
        {'id': 1, 'account': 'admin', 'realname': 'Administrator', 'dept': 1},
        {'id': 42, 'account': 'alice', 'realname': 'Alice Wang', 'dept': 2},
    ])
    insert_rows('zt_usergroup', [{'account': 'alice', 'group': 2}])
    insert_rows('zt_project', [
        {'id': 10, 'name': 'Portal', 'code': 'portal', 'type': 'project', 'status': 'doing'},
    ])
    insert_rows('zt_module', [{'id': 1, 'name': 'Login'}])
    insert_rows('zt_story', [
        {'id': 1, 'title': 'Login flow', 'status': 'active', 'pri': 2, 'estimate': 1.5, 'openedBy': 'alice'},
    ])
    insert_rows('zt_projectstory', [{'project': 10, 'story': 1}])
    insert_rows('zt_task', [
        {'id': 1, 'name': 'Build form', 'project': 10, 'story': 1, 'assignedTo': 'alice', 'status': 'wait'},
    ])
    insert_rows('zt_bug', [
        {'id': 1, 'title': 'Crash', 'project': 10, 'severity': 1, 'pri': 4, 'status': 'closed',
         'resolution': 'fixed', 'assignedTo': 'alice', 'openedBy': 'admin'},
    ])


def target_state():
    return {
        'departments': sorted(Department.objects.values_list('code', 'level', 'parent__code')),
        'roles': sorted(Role.objects.values_list('code', flat=True)),
        'users': sorted(User.objects.values_list('username', 'nickname', 'department__code')),
        'projects': sorted(Project.objects.values_list('code', 'status')),
        'modules': sorted(Module.objects.values_list('name', 'code')),
        'requirements': sorted(Requirement.objects.values_list('legacy_id', 'title', 'project__code')),
        'tasks': sorted(Task.objects.values_list('legacy_id', 'title', 'requirement__legacy_id')),
        'bugs': sorted(Bug.objects.values_list('legacy_id', 'severity', 'priority')),
        'members': sorted(ProjectMember.objects.values_list('project__code', 'user__username', 'role')),
    }


class MigrationDriverTests(LegacyDatabaseTestCase):

    def setUp(self):
        load_sample_data()

    def test_steps_follow_dependency_order(self):
        self.assertEqual([step.kind for step in MIGRATION_STEPS], list(ENTITY_KINDS))

    def test_full_migration(self):
        """Test a complete run: every entity kind migrated and the system initialized."""
        self.assertFalse(is_initialized())
        result = MigrationDriver().migrate()

        self.assertTrue(result.success)
        self.assertTrue(is_initialized())
        config = SystemConfig.objects.get(key='initialized')
        self.assertEqual((config.value, config.type), ('true', 'boolean'))

        stats = result.stats
        self.assertEqual(stats['departments'].migrated, 2)
        self.assertEqual(stats['roles'].migrated, 2)
        self.assertEqual(stats['users'].migrated, 2)
        self.assertEqual(stats['projects'].migrated, 1)
        self.assertEqual(stats['modules'].migrated, 1)
        self.assertEqual(stats['requirements'].migrated, 1)
        self.assertEqual(stats['tasks'].migrated, 1)
        self.assertEqual(stats['bugs'].migrated, 1)
        self.assertEqual(stats['project_members'].migrated, 1)

        alice = User.objects.get(username='alice')
        self.assertEqual(alice.department.code, 'dept_2')
        self.assertEqual(list(alice.roles.values_list('code', flat=True)), ['developer'])
        self.assertTrue(User.objects.get(username='admin').roles.filter(code='admin').exists())

        requirement = Requirement.objects.get(legacy_id=1)
        self.assertEqual(requirement.creator, alice)
        self.assertEqual(requirement.estimated_hours, 12.0)
        self.assertEqual(Task.objects.get(legacy_id=1).requirement, requirement)
        self.assertEqual(list(Bug.objects.get(legacy_id=1).assignees.all()), [alice])
        self.assertEqual(result.correspondence['user'][42], alice.pk)

    def test_second_run_converges(self):
        """Test that running the driver twice leaves the same target state."""
        MigrationDriver().migrate()
        first = target_state()
        MigrationDriver().migrate()
        self.assertEqual(target_state(), first)
        self.assertEqual(SystemConfig.objects.filter(key='initialized').count(), 1)

    def test_summary_is_logged(self):
        with self.assertLogs('tracker', level='INFO') as logs:
            MigrationDriver().migrate()
        self.assertTrue(any('Requirements: 1 migrated' in line for line in logs.output))


class MigrationAbortTests(LegacyDatabaseTestCase):
    legacy_exclude = ('zt_bug',)

    def setUp(self):
        insert_rows('zt_project', [{'id': 10, 'name': 'Portal', 'code': 'portal', 'type': 'project'}])

    def test_failed_read_aborts_without_initializing(self):
        """Test that a failed legacy read stops the run and leaves earlier rows in place."""
        with self.assertRaises(MigrationError) as ctx:
            MigrationDriver().migrate()

        self.assertEqual(ctx.exception.step, 'bugs')
        self.assertIn('zt_bug', str(ctx.exception))
        self.assertEqual(ctx.exception.stats['projects'].migrated, 1)
        self.assertTrue(Project.objects.filter(code='portal').exists())
        self.assertFalse(is_initialized())
