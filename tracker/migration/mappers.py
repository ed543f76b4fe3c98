"""
Translate legacy ZenTao values into tracker vocabulary.

Every function here is total: unknown input falls back to a documented
default instead of raising.
"""
import re
from datetime import date, datetime, timedelta

from django.utils import dateparse

PROJECT_STATUSES = ('wait', 'doing', 'suspended', 'closed', 'done')
REQUIREMENT_STATUSES = ('draft', 'reviewing', 'active', 'changing', 'closed')
TASK_STATUSES = ('wait', 'doing', 'done', 'pause', 'cancel', 'closed')
BUG_STATUSES = ('active', 'resolved', 'closed')

PRIORITIES = {1: 'urgent', 2: 'high', 3: 'medium', 4: 'low'}
SEVERITIES = {1: 'critical', 2: 'high', 3: 'medium', 4: 'low'}

OWNER_ROLE_KEYWORDS = ('经理', '负责人', 'owner', 'leader', 'pm')
MEMBER_ROLE_KEYWORDS = ('开发', '测试', '产品', '设计', 'developer', 'tester', 'designer')

HOURS_PER_DAY = 8

# Legacy zero dates mean "not set"
EMPTY_DATES = ('', '0000-00-00', '0000-00-00 00:00:00')
DATE_FORMATS = ('%Y-%m-%d %H:%M:%S', '%Y-%m-%d')

_VERBS = {
    'create': 'create',
    'edit': 'update',
    'update': 'update',
    'view': 'read',
    'index': 'read',
    'browse': 'read',
    'delete': 'delete',
}
_STORY_VERBS = {
    'create': 'create',
    'edit': 'update',
    'change': 'update',
    'view': 'read',
    'index': 'read',
    'browse': 'read',
    'delete': 'delete',
}
_BUG_VERBS = dict(_VERBS, assign='assign')

# legacy module -> (resource, {legacy method: action})
PERMISSION_MAP = {
    'project': ('project', _VERBS),
    'story': ('requirement', _STORY_VERBS),
    'task': ('task', _VERBS),
    'bug': ('bug', _BUG_VERBS),
    'user': ('user', _VERBS),
    'dept': ('department', _VERBS),
    'department': ('department', _VERBS),
}


def _to_int(value):
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _normalize(value):
    return str(value or '').strip().lower()


def _coerce_status(value, allowed, default):
    status = _normalize(value)
    return status if status in allowed else default


def convert_project_status(status):
    return _coerce_status(status, PROJECT_STATUSES, 'wait')


def convert_requirement_status(status):
    return _coerce_status(status, REQUIREMENT_STATUSES, 'draft')


def convert_task_status(status):
    return _coerce_status(status, TASK_STATUSES, 'wait')


def convert_bug_status(status):
    return _coerce_status(status, BUG_STATUSES, 'active')


def convert_priority(pri):
    """Map legacy pri 1..4 to urgent/high/medium/low; anything else is medium."""
    return PRIORITIES.get(_to_int(pri), 'medium')


def convert_severity(severity):
    """Map legacy severity 1..4 to critical/high/medium/low; anything else is medium."""
    return SEVERITIES.get(_to_int(severity), 'medium')


def convert_user_status(deleted):
    """Legacy deleted flag -> 0 (disabled) or 1 (normal)."""
    return 0 if str(deleted).strip() == '1' else 1


def convert_project_role(role):
    """Classify a free-text legacy team role as owner, member or viewer."""
    role = _normalize(role)
    if not role:
        return 'viewer'
    if any(keyword in role for keyword in OWNER_ROLE_KEYWORDS):
        return 'owner'
    if any(keyword in role for keyword in MEMBER_ROLE_KEYWORDS):
        return 'member'
    return 'viewer'


def convert_permission_code(module, method):
    """
    Map a legacy (module, method) grant to a ``resource:action`` permission code.

    Returns an empty string for grants outside the supported modules and
    verbs; callers discard those.
    """
    entry = PERMISSION_MAP.get(_normalize(module))
    if entry is None:
        return ''
    resource, verbs = entry
    action = verbs.get(_normalize(method))
    if action is None:
        return ''
    return f"{resource}:{action}"


def days_to_hours(days):
    """Legacy estimates are in days; return hours, or None for empty/non-positive."""
    try:
        days = float(days)
    except (TypeError, ValueError):
        return None
    if days <= 0:
        return None
    return days * HOURS_PER_DAY


def parse_datetime(value):
    """
    Parse a legacy date or datetime value.

    Accepts date/datetime objects as returned by the database driver and the
    string forms ``YYYY-MM-DD HH:MM:SS``, ``YYYY-MM-DD`` and RFC3339.
    Zero dates and unparsable values return None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value).strip()
    if text in EMPTY_DATES:
        return None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return dateparse.parse_datetime(text)
    except ValueError:
        return None


def parse_date(value):
    parsed = parse_datetime(value)
    return parsed.date() if parsed is not None else None


def slugify_code(name):
    """Lower-case, turn space/hyphen/dot into underscores, keep only [a-z0-9_]."""
    code = str(name or '').lower()
    for char in (' ', '-', '.'):
        code = code.replace(char, '_')
    return re.sub(r'[^a-z0-9_]', '', code)


def generate_role_code(name):
    return slugify_code(name) or 'role'


def _generate_code(kind, name, legacy_id):
    code = slugify_code(name)
    if len(code) < 2:
        return f"{kind}_{legacy_id}"
    return f"{code[:30]}_{legacy_id}"


def generate_project_code(name, legacy_id):
    return _generate_code('project', name, legacy_id)


def generate_module_code(name, legacy_id):
    return _generate_code('module', name, legacy_id)


def generate_dept_code(legacy_id):
    return f"dept_{legacy_id}"


def compute_end_date(start_date, due_date, estimate_days):
    """Due date when set, else start date plus the whole estimated days."""
    if due_date is not None:
        return due_date
    try:
        days = int(float(estimate_days))
    except (TypeError, ValueError):
        days = 0
    if start_date is not None and days > 0:
        return start_date + timedelta(days=days)
    return None
