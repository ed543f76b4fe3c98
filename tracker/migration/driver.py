import logging

from django.db import DatabaseError

from tracker.exceptions import LegacyReadError, MigrationError
from tracker.migration.legacy import LegacyStore
from tracker.migration.migrators import (
    BugMigrator, DepartmentMigrator, ModuleMigrator, ProjectMemberMigrator,
    ProjectMigrator, RequirementMigrator, RoleMigrator, TaskMigrator, UserMigrator,
)
from tracker.migration.resolver import IdentityResolver
from tracker.migration.stats import MigrationResult, MigrationStats
from tracker.models import SystemConfig

logger = logging.getLogger('tracker')

# Each step only depends on correspondences recorded by the steps before it.
MIGRATION_STEPS = (
    DepartmentMigrator,
    RoleMigrator,
    UserMigrator,
    ProjectMigrator,
    ModuleMigrator,
    RequirementMigrator,
    TaskMigrator,
    BugMigrator,
    ProjectMemberMigrator,
)

INITIALIZED_KEY = 'initialized'


def is_initialized():
    return SystemConfig.objects.filter(key=INITIALIZED_KEY, value='true').exists()


def mark_initialized():
    """Flip the system from setup mode to operating mode."""
    SystemConfig.objects.update_or_create(
        key=INITIALIZED_KEY,
        defaults={
            'value': 'true',
            'type': 'boolean',
            'description': 'System initialized from legacy data',
        },
    )


class MigrationDriver:
    """
    Run the entity migrators in dependency order.

    Usage:
        result = MigrationDriver().migrate()

    A failed top-level legacy read or a store error outside a row aborts the
    run with MigrationError; rows already committed stay in place and the
    initialized flag is left unset. Re-running converges because every
    migrator upserts by natural key.
    """

    def __init__(self, legacy=None, resolver=None, steps=MIGRATION_STEPS):
        self.legacy = legacy or LegacyStore()
        self.resolver = resolver or IdentityResolver(self.legacy)
        self.steps = steps

    def migrate(self):
        stats = MigrationStats()
        logger.info("=" * 50)
        logger.info("Starting legacy data migration")
        logger.info("=" * 50)

        for migrator_cls in self.steps:
            migrator = migrator_cls(self.legacy, self.resolver, stats)
            logger.info(f"Migrating {migrator.kind.replace('_', ' ')}...")
            try:
                migrator.run()
            except (LegacyReadError, DatabaseError) as e:
                logger.error(f"Migration aborted while migrating {migrator.kind}: {e}")
                raise MigrationError(
                    f"Failed to migrate {migrator.kind}: {e}",
                    step=migrator.kind,
                    stats=stats,
                ) from e

        mark_initialized()

        logger.info("=" * 50)
        logger.info("Migration complete")
        for line in stats.summary_lines():
            logger.info(line)
        logger.info("=" * 50)

        return MigrationResult(success=True, stats=stats, correspondence=self.resolver.tables())
