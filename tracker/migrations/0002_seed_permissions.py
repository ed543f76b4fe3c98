# Seed the permission codes that legacy group privileges map onto

from django.db import migrations


PERMISSION_RESOURCES = {
    'project': 'Project',
    'requirement': 'Requirement',
    'task': 'Task',
    'bug': 'Bug',
    'user': 'User',
    'department': 'Department',
}
PERMISSION_ACTIONS = ['create', 'read', 'update', 'delete']


def seed_permissions(apps, schema_editor):
    """Create one Permission per resource:action pair."""
    Permission = apps.get_model('tracker', 'Permission')

    for resource, label in PERMISSION_RESOURCES.items():
        actions = list(PERMISSION_ACTIONS)
        if resource == 'bug':
            actions.append('assign')
        for action in actions:
            Permission.objects.get_or_create(
                code=f'{resource}:{action}',
                defaults={
                    'name': f'{action.capitalize()} {label}',
                    'resource': resource,
                    'action': action,
                },
            )


class Migration(migrations.Migration):

    dependencies = [
        ('tracker', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_permissions, migrations.RunPython.noop),
    ]
