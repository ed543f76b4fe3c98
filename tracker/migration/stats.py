from dataclasses import dataclass, field

# Entity kinds in the order the driver migrates them
ENTITY_KINDS = (
    'departments',
    'roles',
    'users',
    'projects',
    'modules',
    'requirements',
    'tasks',
    'bugs',
    'project_members',
)


@dataclass
class EntityStats:
    """Counters for one entity kind."""
    migrated: int = 0  # created or matched by natural key
    skipped: int = 0   # prerequisite could not be resolved
    failed: int = 0    # create raised a database error


@dataclass
class MigrationStats:
    """Statistics collected during migration."""
    entities: dict = field(default_factory=lambda: {kind: EntityStats() for kind in ENTITY_KINDS})

    def __getitem__(self, kind):
        return self.entities.setdefault(kind, EntityStats())

    def summary_lines(self):
        return [
            f"{kind.replace('_', ' ').capitalize()}: {counts.migrated} migrated, "
            f"{counts.skipped} skipped, {counts.failed} failed"
            for kind, counts in self.entities.items()
        ]


@dataclass
class MigrationResult:
    """Result of a migration run."""
    success: bool
    stats: MigrationStats
    correspondence: dict  # kind -> {legacy_id: target_id}
