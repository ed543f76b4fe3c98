"""
Change recorder: diff two snapshots of a tracker object and store the
result as one Action plus one History per changed field.

Snapshots are model instances or plain mappings keyed by wire name. Only
scalar fields are compared (strings, integers, floats, booleans and
nullable foreign keys); identity, timestamps, soft deletion and embedded
relation objects are ignored.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import models, transaction

from tracker.audit.context import actor_context
from tracker.audit.rendering import render_value
from tracker.models import Action, Bug, History

logger = logging.getLogger('tracker')

IGNORED_FIELDS = frozenset({'id', 'legacy_id', 'created_at', 'updated_at', 'deleted_at'})

COMPARABLE_FIELD_TYPES = (
    models.CharField,
    models.TextField,
    models.IntegerField,
    models.FloatField,
    models.DecimalField,
    models.BooleanField,
    models.ForeignKey,
)


@dataclass(frozen=True)
class FieldChange:
    field: str  # wire name
    old: str
    new: str


def stringify(value):
    """Return the comparable string form of ``value``, or None if it is not comparable."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (float, Decimal)):
        return f"{value:.2f}"
    if isinstance(value, str):
        return value
    return None


def _model_values(instance):
    values = {}
    for field in instance._meta.concrete_fields:
        if field.primary_key or not isinstance(field, COMPARABLE_FIELD_TYPES):
            continue
        # attname gives 'project_id' for a ForeignKey named 'project'
        values[field.attname] = getattr(instance, field.attname)
    return values


def snapshot_values(snapshot):
    """Flatten a model instance or mapping into {wire name: comparable string}."""
    if isinstance(snapshot, models.Model):
        raw = _model_values(snapshot)
    else:
        raw = dict(snapshot)
    values = {}
    for name, value in raw.items():
        if name in IGNORED_FIELDS:
            continue
        text = stringify(value)
        if text is not None:
            values[name] = text
    return values


def diff_snapshots(old, new):
    """List the FieldChanges between two snapshots, in the new snapshot's field order."""
    old_values = snapshot_values(old)
    new_values = snapshot_values(new)
    return [
        FieldChange(field=name, old=old_values[name], new=value)
        for name, value in new_values.items()
        if name in old_values and old_values[name] != value
    ]


def _project_id_for(object_type, object_id):
    if object_type != 'bug':
        return None
    return Bug.objects.filter(pk=object_id).values_list('project_id', flat=True).first()


def record_changes(object_type, object_id, old, new, action='edited', actor_id=None,
                   comment='', extra=None, date=None):
    """
    Record the differences between ``old`` and ``new``.

    Returns the Action, or None when nothing audit-worthy changed. The Action
    and its Histories are written in one transaction; a store error
    propagates to the caller with nothing written.
    """
    changes = diff_snapshots(old, new)
    if not changes:
        logger.debug(f"No changes to record for {object_type} {object_id}")
        return None

    context = actor_context()
    with transaction.atomic():
        entry = Action.objects.create(
            object_type=object_type,
            object_id=object_id,
            project_id=_project_id_for(object_type, object_id),
            actor_id=actor_id if actor_id is not None else context.actor_id,
            action=action,
            date=date or context.now(),
            comment=comment,
            extra=extra,
        )
        for change in changes:
            History.objects.create(
                action=entry,
                field_name=change.field,
                old_raw=change.old,
                old_display=render_value(change.field, change.old),
                new_raw=change.new,
                new_display=render_value(change.field, change.new),
            )

    logger.info(f"Recorded {action} on {object_type} {object_id} with {len(changes)} changes")
    return entry


def record_action(object_type, object_id, action, actor_id=None, comment='', extra=None, date=None):
    """Record an event that has no field diff, such as a comment."""
    context = actor_context()
    entry = Action.objects.create(
        object_type=object_type,
        object_id=object_id,
        project_id=_project_id_for(object_type, object_id),
        actor_id=actor_id if actor_id is not None else context.actor_id,
        action=action,
        date=date or context.now(),
        comment=comment,
        extra=extra,
    )
    logger.info(f"Recorded {action} on {object_type} {object_id}")
    return entry
