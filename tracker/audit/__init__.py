from tracker.audit.context import acting_as, actor_context
from tracker.audit.recorder import diff_snapshots, record_action, record_changes
from tracker.audit.rendering import field_display_name, render_value

__all__ = [
    'acting_as',
    'actor_context',
    'diff_snapshots',
    'field_display_name',
    'record_action',
    'record_changes',
    'render_value',
]
