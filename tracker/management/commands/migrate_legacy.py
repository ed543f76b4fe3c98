"""
Management command to migrate a legacy ZenTao database into the tracker.
"""
from django.core.management.base import BaseCommand, CommandError
from django.db import connections, transaction

from tracker.exceptions import MigrationError
from tracker.migration.driver import MigrationDriver
from tracker.migration.legacy import LegacyStore
from tracker.routers import LEGACY_ALIAS


class Command(BaseCommand):
    help = 'Migrate departments, roles, users, projects, requirements, tasks and bugs from the legacy ZenTao database'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Run the whole migration and roll it back at the end',
        )
        parser.add_argument(
            '--table-prefix',
            default='zt_',
            help='Prefix of the legacy tables (default: zt_)',
        )

    def handle(self, *args, **options):
        dry_run = options.get('dry_run', False)

        if LEGACY_ALIAS not in connections.databases:
            raise CommandError(
                "No 'legacy' database configured. Create migrate-config.yaml "
                "or set PMHUB_MIGRATE_CONFIG."
            )

        if dry_run:
            self.stdout.write(self.style.WARNING('DRY RUN MODE - No changes will be made'))

        driver = MigrationDriver(legacy=LegacyStore(using=LEGACY_ALIAS, prefix=options['table_prefix']))
        self.stdout.write('Starting legacy data migration...')

        try:
            if dry_run:
                with transaction.atomic():
                    result = driver.migrate()
                    transaction.set_rollback(True)
            else:
                # Rows are committed as they go; an abort keeps them for the re-run.
                result = driver.migrate()
        except MigrationError as e:
            if e.stats is not None:
                self._write_summary(e.stats)
            raise CommandError(str(e)) from e

        self._write_summary(result.stats)
        if dry_run:
            self.stdout.write(self.style.SUCCESS('\nDry run complete: all changes rolled back'))
        else:
            self.stdout.write(self.style.SUCCESS('\nMigration complete: system marked as initialized'))
            self.stdout.write(self.style.WARNING(
                'All migrated users share the default password "123"; force a reset on first login.'
            ))

    def _write_summary(self, stats):
        self.stdout.write('\nMigration summary:')
        for line in stats.summary_lines():
            self.stdout.write(f'  {line}')
