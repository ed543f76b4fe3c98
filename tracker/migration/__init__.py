"""Legacy ZenTao to tracker data migration engine.

Kept free of model imports: ``tracker.migration.config`` is loaded from the
Django settings module before the app registry is ready.
"""
