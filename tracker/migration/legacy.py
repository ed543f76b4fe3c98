import logging

from django.db import DatabaseError, connections

from tracker.exceptions import LegacyReadError
from tracker.migration.rows import (
    LegacyBug, LegacyDept, LegacyGroup, LegacyGroupPriv, LegacyModule,
    LegacyProject, LegacyStory, LegacyTask, LegacyTeamMember, LegacyUser, LegacyUserGroup,
)

logger = logging.getLogger('tracker')


class LegacyStore:
    """
    Raw SQL reader over the legacy ZenTao database.

    Top-level listings raise LegacyReadError when the query fails. Per-row
    lookups (joins, memberships, account lookups) log the failure and
    report a miss, leaving the caller to skip or null the field.
    """

    def __init__(self, using='legacy', prefix='zt_'):
        self.using = using
        self.prefix = prefix

    @property
    def connection(self):
        return connections[self.using]

    def _table(self, name):
        return f"`{self.prefix}{name}`"

    def _fetch(self, sql, params=None):
        with self.connection.cursor() as cursor:
            cursor.execute(sql, params or [])
            columns = [col[0] for col in cursor.description]
            return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def _select(self, row_cls, where='', params=None, order_by='`id`'):
        cols = ', '.join(f"`{name}`" for name in row_cls.columns())
        sql = f"SELECT {cols} FROM {self._table(row_cls.table)}"
        if where:
            sql += f" WHERE {where}"
        if order_by:
            sql += f" ORDER BY {order_by}"
        return [row_cls.from_row(row) for row in self._fetch(sql, params)]

    def _list(self, row_cls, **kwargs):
        try:
            return self._select(row_cls, **kwargs)
        except DatabaseError as e:
            raise LegacyReadError(f"{self.prefix}{row_cls.table}", e) from e

    def _lookup(self, description, sql, params):
        try:
            return self._fetch(sql, params)
        except DatabaseError as e:
            logger.warning(f"Legacy lookup failed ({description}): {e}")
            return []

    # Top-level listings

    def departments(self):
        return self._list(LegacyDept, order_by='`grade` ASC, `order` ASC, `id` ASC')

    def groups(self):
        return self._list(LegacyGroup)

    def users(self):
        return self._list(LegacyUser)

    def projects(self):
        return self._list(
            LegacyProject,
            where="`type` IN ('sprint', 'project') AND `deleted` = '0'",
        )

    def stories(self):
        return self._list(LegacyStory, where="`deleted` = '0'")

    def tasks(self):
        return self._list(LegacyTask, where="`deleted` = '0'")

    def bugs(self):
        return self._list(LegacyBug, where="`deleted` = '0'")

    def modules(self):
        return self._list(LegacyModule, where="`deleted` = '0'")

    def team_members(self):
        return self._list(LegacyTeamMember, order_by='`root` ASC, `account` ASC')

    # Per-row lookups

    def group_privileges(self, group_id):
        rows = self._lookup(
            f"privileges of group {group_id}",
            f"SELECT `group`, `module`, `method` FROM {self._table('grouppriv')} WHERE `group` = %s",
            [group_id],
        )
        return [LegacyGroupPriv.from_row(row) for row in rows]

    def user_group_ids(self, account):
        rows = self._lookup(
            f"groups of {account}",
            f"SELECT `group` FROM {self._table('usergroup')} WHERE `account` = %s ORDER BY `group`",
            [account],
        )
        return [LegacyUserGroup.from_row(row).group for row in rows]

    def user_id_by_account(self, account):
        rows = self._lookup(
            f"user {account}",
            f"SELECT `id` FROM {self._table('user')} WHERE `account` = %s",
            [account],
        )
        return int(rows[0]['id']) if rows else None

    def story_project_id(self, story_id):
        rows = self._lookup(
            f"project of story {story_id}",
            f"SELECT `project` FROM {self._table('projectstory')} WHERE `story` = %s ORDER BY `project`",
            [story_id],
        )
        return int(rows[0]['project']) if rows else None

    def product_project_id(self, product_id):
        rows = self._lookup(
            f"project of product {product_id}",
            f"SELECT `project` FROM {self._table('projectproduct')} WHERE `product` = %s ORDER BY `project`",
            [product_id],
        )
        return int(rows[0]['project']) if rows else None

    def story_spec(self, story_id):
        rows = self._lookup(
            f"spec of story {story_id}",
            f"SELECT `spec` FROM {self._table('storyspec')} WHERE `story` = %s ORDER BY `version` DESC",
            [story_id],
        )
        if not rows or rows[0]['spec'] is None:
            return ''
        return str(rows[0]['spec'])

    def execution_parent_id(self, execution_id):
        """Return the legacy project an execution belongs to, or None."""
        rows = self._lookup(
            f"parent of execution {execution_id}",
            f"SELECT `project`, `parent` FROM {self._table('project')} WHERE `id` = %s",
            [execution_id],
        )
        if not rows:
            return None
        parent = int(rows[0]['project'] or 0) or int(rows[0]['parent'] or 0)
        return parent or None

    def task_execution_id(self, task_id):
        """Return the execution (or, failing that, the project) of a legacy task."""
        rows = self._lookup(
            f"execution of task {task_id}",
            f"SELECT `execution`, `project` FROM {self._table('task')} WHERE `id` = %s",
            [task_id],
        )
        if not rows:
            return None
        return int(rows[0]['execution'] or 0) or int(rows[0]['project'] or 0) or None
