import logging
from collections import defaultdict

logger = logging.getLogger('tracker')


class IdentityResolver:
    """
    Correspondence tables from (entity kind, legacy id) to target id.

    One resolver lives for one migration run and is handed to every migrator
    by the driver. Entries are never overwritten: the first target id
    recorded for a legacy id stays for the rest of the run.
    """

    def __init__(self, legacy=None):
        self.legacy = legacy
        self._tables = defaultdict(dict)
        self._accounts = {}

    def record(self, kind, legacy_id, target_id):
        """Record a correspondence and return the target id that is kept."""
        table = self._tables[kind]
        existing = table.get(legacy_id)
        if existing is not None:
            if existing != target_id:
                logger.debug(
                    f"Ignoring {kind} {legacy_id} -> {target_id}; already mapped to {existing}"
                )
            return existing
        table[legacy_id] = target_id
        return target_id

    def resolve(self, kind, legacy_id):
        if not legacy_id:
            return None
        return self._tables[kind].get(legacy_id)

    def resolve_by_account(self, account):
        """Resolve a legacy account name to a target user id via the legacy user row."""
        account = (account or '').strip()
        if not account or self.legacy is None:
            return None
        if account not in self._accounts:
            self._accounts[account] = self.legacy.user_id_by_account(account)
        return self.resolve('user', self._accounts[account])

    def table(self, kind):
        return dict(self._tables[kind])

    def tables(self):
        return {kind: dict(table) for kind, table in self._tables.items()}

    def count(self, kind):
        return len(self._tables[kind])
