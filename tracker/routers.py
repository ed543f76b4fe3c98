LEGACY_ALIAS = 'legacy'


class LegacyRouter:
    """Keep the legacy database read-only from Django's point of view.

    The legacy store is only ever queried with raw SQL, so no model reads or
    writes are routed to it and ``migrate`` never touches it.
    """

    def db_for_read(self, model, **hints):
        return None

    def db_for_write(self, model, **hints):
        return None

    def allow_migrate(self, db, app_label, model_name=None, **hints):
        if db == LEGACY_ALIAS:
            return False
        return None
