"""
Minimal ZenTao schema for the ``legacy`` test database.

Only the columns the migration reads are created. Call ``create_legacy_schema``
from ``setUpTestData`` and fill tables with ``insert_rows``.
"""
from django.db import connections
from django.test import TestCase

LEGACY_ALIAS = 'legacy'

LEGACY_TABLES = {
    'zt_dept': """
        `id` INTEGER PRIMARY KEY, `name` VARCHAR(60) NOT NULL DEFAULT '',
        `parent` INTEGER NOT NULL DEFAULT 0, `grade` INTEGER NOT NULL DEFAULT 0,
        `order` INTEGER NOT NULL DEFAULT 0
    """,
    'zt_group': """
        `id` INTEGER PRIMARY KEY, `name` VARCHAR(30) NOT NULL DEFAULT '',
        `desc` VARCHAR(255) NOT NULL DEFAULT ''
    """,
    'zt_grouppriv': """
        `group` INTEGER NOT NULL DEFAULT 0, `module` VARCHAR(30) NOT NULL DEFAULT '',
        `method` VARCHAR(30) NOT NULL DEFAULT ''
    """,
    'zt_usergroup': """
        `account` VARCHAR(30) NOT NULL DEFAULT '', `group` INTEGER NOT NULL DEFAULT 0
    """,
    'zt_user': """
        `id` INTEGER PRIMARY KEY, `account` VARCHAR(30) NOT NULL DEFAULT '',
        `realname` VARCHAR(100) NOT NULL DEFAULT '', `email` VARCHAR(90) NOT NULL DEFAULT '',
        `mobile` VARCHAR(11) NOT NULL DEFAULT '', `avatar` TEXT NOT NULL DEFAULT '',
        `dept` INTEGER NOT NULL DEFAULT 0, `role` VARCHAR(10) NOT NULL DEFAULT '',
        `deleted` VARCHAR(1) NOT NULL DEFAULT '0'
    """,
    'zt_project': """
        `id` INTEGER PRIMARY KEY, `name` VARCHAR(90) NOT NULL DEFAULT '',
        `code` VARCHAR(45) NOT NULL DEFAULT '', `desc` TEXT NOT NULL DEFAULT '',
        `begin` VARCHAR(20) NOT NULL DEFAULT '', `end` VARCHAR(20) NOT NULL DEFAULT '',
        `status` VARCHAR(10) NOT NULL DEFAULT '', `type` VARCHAR(20) NOT NULL DEFAULT 'sprint',
        `parent` INTEGER NOT NULL DEFAULT 0, `project` INTEGER NOT NULL DEFAULT 0,
        `deleted` VARCHAR(1) NOT NULL DEFAULT '0'
    """,
    'zt_story': """
        `id` INTEGER PRIMARY KEY, `title` VARCHAR(255) NOT NULL DEFAULT '',
        `status` VARCHAR(20) NOT NULL DEFAULT '', `pri` INTEGER NOT NULL DEFAULT 3,
        `product` INTEGER NOT NULL DEFAULT 0, `openedBy` VARCHAR(30) NOT NULL DEFAULT '',
        `assignedTo` VARCHAR(30) NOT NULL DEFAULT '', `estimate` FLOAT NOT NULL DEFAULT 0,
        `deleted` VARCHAR(1) NOT NULL DEFAULT '0'
    """,
    'zt_storyspec': """
        `story` INTEGER NOT NULL DEFAULT 0, `version` INTEGER NOT NULL DEFAULT 1,
        `spec` TEXT NOT NULL DEFAULT ''
    """,
    'zt_projectstory': """
        `project` INTEGER NOT NULL DEFAULT 0, `story` INTEGER NOT NULL DEFAULT 0
    """,
    'zt_projectproduct': """
        `project` INTEGER NOT NULL DEFAULT 0, `product` INTEGER NOT NULL DEFAULT 0
    """,
    'zt_task': """
        `id` INTEGER PRIMARY KEY, `name` VARCHAR(255) NOT NULL DEFAULT '',
        `desc` TEXT NOT NULL DEFAULT '', `status` VARCHAR(20) NOT NULL DEFAULT '',
        `pri` INTEGER NOT NULL DEFAULT 3, `project` INTEGER NOT NULL DEFAULT 0,
        `execution` INTEGER NOT NULL DEFAULT 0, `story` INTEGER NOT NULL DEFAULT 0,
        `openedBy` VARCHAR(30) NOT NULL DEFAULT '', `assignedTo` VARCHAR(30) NOT NULL DEFAULT '',
        `estStarted` VARCHAR(20) NOT NULL DEFAULT '', `deadline` VARCHAR(20) NOT NULL DEFAULT '',
        `estimate` FLOAT NOT NULL DEFAULT 0, `consumed` FLOAT NOT NULL DEFAULT 0,
        `deleted` VARCHAR(1) NOT NULL DEFAULT '0'
    """,
    'zt_bug': """
        `id` INTEGER PRIMARY KEY, `title` VARCHAR(255) NOT NULL DEFAULT '',
        `steps` TEXT NOT NULL DEFAULT '', `status` VARCHAR(20) NOT NULL DEFAULT '',
        `severity` INTEGER NOT NULL DEFAULT 3, `pri` INTEGER NOT NULL DEFAULT 3,
        `project` INTEGER NOT NULL DEFAULT 0, `story` INTEGER NOT NULL DEFAULT 0,
        `openedBy` VARCHAR(30) NOT NULL DEFAULT '', `assignedTo` VARCHAR(30) NOT NULL DEFAULT '',
        `resolution` VARCHAR(30) NOT NULL DEFAULT '', `resolvedBuild` VARCHAR(30) NOT NULL DEFAULT '',
        `deleted` VARCHAR(1) NOT NULL DEFAULT '0'
    """,
    'zt_module': """
        `id` INTEGER PRIMARY KEY, `name` VARCHAR(60) NOT NULL DEFAULT '',
        `root` INTEGER NOT NULL DEFAULT 0, `type` VARCHAR(30) NOT NULL DEFAULT '',
        `parent` INTEGER NOT NULL DEFAULT 0, `grade` INTEGER NOT NULL DEFAULT 0,
        `order` INTEGER NOT NULL DEFAULT 0, `deleted` VARCHAR(1) NOT NULL DEFAULT '0'
    """,
    'zt_team': """
        `root` INTEGER NOT NULL DEFAULT 0, `type` VARCHAR(30) NOT NULL DEFAULT 'project',
        `account` VARCHAR(30) NOT NULL DEFAULT '', `role` VARCHAR(30) NOT NULL DEFAULT ''
    """,
}


def _execute(sql, params=None):
    with connections[LEGACY_ALIAS].cursor() as cursor:
        cursor.execute(sql, params)


def create_legacy_schema(exclude=()):
    """Create the zt_* tables, except the ones named in ``exclude``."""
    for table, columns in LEGACY_TABLES.items():
        if table in exclude:
            continue
        _execute(f"CREATE TABLE IF NOT EXISTS `{table}` ({columns})")


def insert_rows(table, rows):
    """Insert dict rows into a legacy table."""
    for row in rows:
        columns = ', '.join(f"`{name}`" for name in row)
        placeholders = ', '.join(['%s'] * len(row))
        _execute(f"INSERT INTO `{table}` ({columns}) VALUES ({placeholders})", list(row.values()))


class LegacyDatabaseTestCase(TestCase):
    """TestCase with the legacy schema created in the ``legacy`` test database."""

    databases = {'default', LEGACY_ALIAS}
    legacy_exclude = ()

    @classmethod
    def setUpTestData(cls):
        create_legacy_schema(exclude=cls.legacy_exclude)
