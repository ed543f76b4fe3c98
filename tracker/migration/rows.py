"""Read-only rows materialised from the legacy ZenTao tables."""
from dataclasses import dataclass, field, fields


def _as_int(value):
    if value is None or value == '':
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return 0


def _as_float(value):
    if value is None or value == '':
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _as_str(value):
    if value is None:
        return ''
    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')
    return str(value)


_COERCERS = {int: _as_int, float: _as_float, str: _as_str}


def column(name, default=''):
    """Declare a field whose legacy column name differs from the attribute name."""
    return field(default=default, metadata={'column': name})


@dataclass(frozen=True)
class LegacyRow:
    """Base for legacy rows; ``table`` is the table name without the prefix."""

    table = ''

    @classmethod
    def columns(cls):
        return [f.metadata.get('column', f.name) for f in fields(cls)]

    @classmethod
    def from_row(cls, row):
        values = {}
        for f in fields(cls):
            raw = row.get(f.metadata.get('column', f.name))
            values[f.name] = _COERCERS[f.type](raw)
        return cls(**values)


@dataclass(frozen=True)
class LegacyDept(LegacyRow):
    table = 'dept'

    id: int = 0
    name: str = ''
    parent: int = 0
    grade: int = 0
    order: int = 0


@dataclass(frozen=True)
class LegacyGroup(LegacyRow):
    table = 'group'

    id: int = 0
    name: str = ''
    desc: str = ''


@dataclass(frozen=True)
class LegacyGroupPriv(LegacyRow):
    table = 'grouppriv'

    group: int = 0
    module: str = ''
    method: str = ''


@dataclass(frozen=True)
class LegacyUserGroup(LegacyRow):
    table = 'usergroup'

    account: str = ''
    group: int = 0


@dataclass(frozen=True)
class LegacyUser(LegacyRow):
    table = 'user'

    id: int = 0
    account: str = ''
    realname: str = ''
    email: str = ''
    mobile: str = ''
    avatar: str = ''
    dept: int = 0
    role: str = ''
    deleted: str = '0'


@dataclass(frozen=True)
class LegacyProject(LegacyRow):
    table = 'project'

    id: int = 0
    name: str = ''
    code: str = ''
    desc: str = ''
    begin: str = ''
    end: str = ''
    status: str = ''
    type: str = ''
    parent: int = 0
    project: int = 0
    deleted: str = '0'


@dataclass(frozen=True)
class LegacyStory(LegacyRow):
    table = 'story'

    id: int = 0
    title: str = ''
    status: str = ''
    pri: int = 0
    product: int = 0
    opened_by: str = column('openedBy')
    assigned_to: str = column('assignedTo')
    estimate: float = 0.0
    deleted: str = '0'


@dataclass(frozen=True)
class LegacyTask(LegacyRow):
    table = 'task'

    id: int = 0
    name: str = ''
    desc: str = ''
    status: str = ''
    pri: int = 0
    project: int = 0
    execution: int = 0
    story: int = 0
    opened_by: str = column('openedBy')
    assigned_to: str = column('assignedTo')
    est_started: str = column('estStarted')
    deadline: str = ''
    estimate: float = 0.0
    consumed: float = 0.0
    deleted: str = '0'


@dataclass(frozen=True)
class LegacyBug(LegacyRow):
    table = 'bug'

    id: int = 0
    title: str = ''
    steps: str = ''
    status: str = ''
    severity: int = 0
    pri: int = 0
    project: int = 0
    story: int = 0
    opened_by: str = column('openedBy')
    assigned_to: str = column('assignedTo')
    resolution: str = ''
    resolved_build: str = column('resolvedBuild')
    deleted: str = '0'


@dataclass(frozen=True)
class LegacyModule(LegacyRow):
    table = 'module'

    id: int = 0
    name: str = ''
    root: int = 0
    type: str = ''
    parent: int = 0
    grade: int = 0
    order: int = 0
    deleted: str = '0'


@dataclass(frozen=True)
class LegacyTeamMember(LegacyRow):
    table = 'team'

    root: int = 0
    type: str = ''
    account: str = ''
    role: str = ''
