"""
Human-readable rendering of raw history values.

Raw values are the strings the recorder compared; display values resolve ids
to names and codes to labels. Anything that cannot be resolved is shown raw.
"""
import logging

from django.utils.translation import gettext as _

from tracker.models import Module, Project, Requirement, User, Version

logger = logging.getLogger('tracker')

STATUS_LABELS = {
    'active': 'Active',
    'resolved': 'Resolved',
    'closed': 'Closed',
    'draft': 'Draft',
    'reviewing': 'Reviewing',
    'changing': 'Changing',
    'wait': 'Waiting',
    'doing': 'In Progress',
    'done': 'Done',
    'pause': 'Paused',
    'cancel': 'Cancelled',
    'suspended': 'Suspended',
}
PRIORITY_LABELS = {
    'low': 'Low',
    'medium': 'Medium',
    'high': 'High',
    'urgent': 'Urgent',
}
SEVERITY_LABELS = {
    'low': 'Low',
    'medium': 'Medium',
    'high': 'High',
    'critical': 'Critical',
}

FIELD_DISPLAY_NAMES = {
    'title': 'Bug Title',
    'description': 'Description',
    'status': 'Status',
    'priority': 'Priority',
    'severity': 'Severity',
    'confirmed': 'Confirmed',
    'project_id': 'Project',
    'requirement_id': 'Linked Requirement',
    'module_id': 'Module',
    'assignee_ids': 'Assignees',
    'estimated_hours': 'Estimated Hours',
    'actual_hours': 'Actual Hours',
    'solution': 'Solution',
    'solution_note': 'Solution Note',
    'resolved_version_id': 'Resolved Version',
    'assignee_id': 'Owner',
    'start_date': 'Start Date',
    'end_date': 'End Date',
    'due_date': 'Due Date',
    'progress': 'Progress',
    'dependency_ids': 'Dependencies',
}

# field -> (model, attribute shown)
REFERENCE_FIELDS = {
    'project_id': (Project, 'name'),
    'requirement_id': (Requirement, 'title'),
    'module_id': (Module, 'name'),
    'resolved_version_id': (Version, 'version_number'),
}
USER_FIELDS = ('creator_id', 'assignee_id')
MULTI_USER_FIELDS = ('assignee_ids',)


def field_display_name(field_name):
    """Label for a history field in the audit UI; unknown fields show their wire name."""
    label = FIELD_DISPLAY_NAMES.get(field_name)
    return _(label) if label else field_name


def _parse_id(raw):
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def render_user(raw):
    if raw in ('', '0'):
        return ''
    user_id = _parse_id(raw)
    if user_id is None:
        return raw
    user = User.objects.filter(pk=user_id).only('username', 'nickname').first()
    if user is None:
        return raw
    return user.display_name


def render_users(raw):
    """Render ``[1,2]`` or ``1,2`` as a comma-separated list of user names."""
    text = (raw or '').strip().strip('[]')
    if not text:
        return ''
    ids = [part.strip() for part in text.split(',') if part.strip()]
    return ','.join(render_user(user_id) for user_id in ids)


def render_reference(raw, model, attribute):
    if raw in ('', '0'):
        return ''
    pk = _parse_id(raw)
    if pk is None:
        return raw
    value = model.objects.filter(pk=pk).values_list(attribute, flat=True).first()
    return raw if value is None else value


def _label(table, raw):
    label = table.get(raw)
    return _(label) if label else raw


def render_value(field_name, raw):
    """Return the display string for one raw value of ``field_name``."""
    if field_name in USER_FIELDS:
        return render_user(raw)
    if field_name in MULTI_USER_FIELDS:
        return render_users(raw)
    if field_name in REFERENCE_FIELDS:
        model, attribute = REFERENCE_FIELDS[field_name]
        return render_reference(raw, model, attribute)
    if field_name == 'status':
        return _label(STATUS_LABELS, raw)
    if field_name == 'priority':
        return _label(PRIORITY_LABELS, raw)
    if field_name == 'severity':
        return _label(SEVERITY_LABELS, raw)
    if field_name == 'confirmed':
        return _('Confirmed') if raw in ('true', '1') else _('Unconfirmed')
    return raw
