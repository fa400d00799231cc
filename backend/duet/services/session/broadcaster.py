import logging
from enum import Enum

from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """Outbound events, valued by their wire names."""

    JOIN_ACCEPTED = 'join_success'
    JOIN_REJECTED = 'join_fail'
    TURN_POINTER_CHANGED = 'turn_update'
    STATUS_TEXT = 'server_message'


class SessionBroadcaster:
    """Fan out session events to seated connections.

    ``emitter`` is anything with a Flask-SocketIO style
    ``emit(event, data, to=..., namespace=...)``. Delivery is fire-and-forget.
    """

    def __init__(self, emitter, registry: ConnectionRegistry, namespace: str = '/') -> None:
        self.emitter = emitter
        self.registry = registry
        self.namespace = namespace

    def notify_one(self, sid: str, kind: EventKind, payload) -> None:
        self.emitter.emit(kind.value, payload, to=sid, namespace=self.namespace)

    def notify_all(self, kind: EventKind, payload) -> None:
        for sid in self.registry.connections():
            self.notify_one(sid, kind, payload)

    def status(self, message: str, sid: str = None) -> None:
        if sid is None:
            logger.debug(f"[broadcast] {message}")
            self.notify_all(EventKind.STATUS_TEXT, message)
        else:
            self.notify_one(sid, EventKind.STATUS_TEXT, message)
