from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.core.management.base import CommandError

from tracker.migration.driver import is_initialized
from tracker.models import Bug, Project, User
from tracker.tests.legacy_fixtures import LegacyDatabaseTestCase, insert_rows
from tracker.tests.test_driver import load_sample_data


class MigrateLegacyCommandTests(LegacyDatabaseTestCase):

    def setUp(self):
        load_sample_data()

    def call(self, *args):
        out = StringIO()
        call_command('migrate_legacy', *args, stdout=out)
        return out.getvalue()

    def test_migrates_and_reports(self):
        output = self.call()

        self.assertIn('Migration summary:', output)
        self.assertIn('Users: 2 migrated, 0 skipped, 0 failed', output)
        self.assertIn('Migration complete', output)
        self.assertIn('"123"', output)
        self.assertTrue(is_initialized())
        self.assertEqual(User.objects.count(), 2)

    def test_dry_run_rolls_back(self):
        """Test that --dry-run reports a full summary but leaves no rows behind."""
        output = self.call('--dry-run')

        self.assertIn('DRY RUN MODE', output)
        self.assertIn('Bugs: 1 migrated', output)
        self.assertIn('all changes rolled back', output)
        self.assertFalse(User.objects.exists())
        self.assertFalse(Bug.objects.exists())
        self.assertFalse(is_initialized())

    def test_table_prefix(self):
        """Test that a prefix with no matching tables aborts on the first step."""
        with self.assertRaises(CommandError) as ctx:
            self.call('--table-prefix', 'other_')
        self.assertIn('Failed to migrate departments', str(ctx.exception))
        self.assertIn('other_dept', str(ctx.exception))

    def test_missing_legacy_database(self):
        fake = mock.Mock(databases={'default': {}})
        with mock.patch('tracker.management.commands.migrate_legacy.connections', fake):
            with self.assertRaises(CommandError) as ctx:
                self.call()
        self.assertIn("No 'legacy' database", str(ctx.exception))


class MigrateLegacyAbortTests(LegacyDatabaseTestCase):
    legacy_exclude = ('zt_task',)

    def setUp(self):
        insert_rows('zt_project', [{'id': 10, 'name': 'Portal', 'code': 'portal', 'type': 'project'}])

    def test_abort_writes_partial_summary(self):
        """Test that an aborted run prints the counts so far and keeps committed rows."""
        out = StringIO()
        with self.assertRaises(CommandError) as ctx:
            call_command('migrate_legacy', stdout=out)

        self.assertIn('Failed to migrate tasks', str(ctx.exception))
        self.assertIn('Projects: 1 migrated', out.getvalue())
        self.assertTrue(Project.objects.filter(code='portal').exists())
        self.assertFalse(is_initialized())
