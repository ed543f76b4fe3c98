"""
Acting-user context for the change recorder.

Request handlers bind the current user once (``acting_as``); the recorder
reads it whenever a caller does not pass an explicit actor or date.
"""
import contextvars
from contextlib import contextmanager
from dataclasses import dataclass, field

from django.utils import timezone


@dataclass(frozen=True)
class ActorContext:
    actor_id: int = None
    clock: object = field(default=timezone.now)

    def now(self):
        return self.clock()


_actor_ctx = contextvars.ContextVar('tracker_actor_context', default=ActorContext())


def actor_context():
    """Return the ActorContext bound to the current execution context."""
    return _actor_ctx.get()


@contextmanager
def acting_as(actor_id, clock=None):
    """Bind ``actor_id`` (and optionally a clock) for the duration of the block."""
    token = _actor_ctx.set(ActorContext(actor_id=actor_id, clock=clock or timezone.now))
    try:
        yield _actor_ctx.get()
    finally:
        _actor_ctx.reset(token)
