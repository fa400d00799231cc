import logging
import threading
from typing import Optional

from .broadcaster import EventKind, SessionBroadcaster
from .errors import JoinRejected, JoinRejection, PersistenceFailed, TurnRejected
from .registry import ConnectionRegistry, MembershipRecord
from .seats import SeatAllocator, normalize_identity
from .turns import FIRST_SEAT, TurnCoordinator, TurnStatus

logger = logging.getLogger(__name__)


def _run_inline(fn, *args):
    fn(*args)


def extract_identity(payload):
    """The browser client sends the bare user id; API callers may send an object."""
    if isinstance(payload, dict):
        return payload.get('user_id', payload.get('identity'))
    return payload


class GameSession:
    """One two-seat session and everything that mutates it.

    Every event goes through ``_lock`` so handlers running on concurrent
    Socket.IO workers are applied one at a time. Turn recording is handed to
    ``spawn`` and only ever reports back through the broadcaster.
    """

    def __init__(self, emitter, gateway, spawn=None, namespace: str = '/') -> None:
        self.registry = ConnectionRegistry()
        self.allocator = SeatAllocator()
        self.turns = TurnCoordinator()
        self.broadcaster = SessionBroadcaster(emitter, self.registry, namespace=namespace)
        self.gateway = gateway
        self.spawn = spawn or _run_inline
        self._lock = threading.RLock()

    def _label(self, seat: int) -> str:
        record = self.registry.find_by_seat(seat)
        return record.identity if record else f'P{seat}'

    def connect(self, sid: str) -> None:
        logger.info(f"[connect] sid={sid} awaiting join")

    def join(self, sid: str, payload) -> MembershipRecord:
        identity = extract_identity(payload)
        with self._lock:
            existing = self.registry.find_by_connection(sid)
            try:
                if existing:
                    # Same checks as any join; a seated connection never gets a second seat
                    self.allocator.validate(identity)
                    raise JoinRejected(JoinRejection.ALREADY_SEATED)
                seat = self.allocator.try_assign(identity)
            except JoinRejected as exc:
                logger.info(f"[join-reject] sid={sid} user={identity!r} reason={exc.reason.name}")
                self.broadcaster.notify_one(sid, EventKind.JOIN_REJECTED, exc.reason.message)
                raise

            record = self.registry.register(sid, seat, normalize_identity(identity))
            logger.info(f"[join] sid={sid} user={record.identity!r} seat={seat}")
            self.broadcaster.notify_one(sid, EventKind.JOIN_ACCEPTED, seat)
            self.broadcaster.status(f'Player {seat} (User: "{record.identity}") has joined the game.')

            if self.turns.membership_changed(self.registry.count()):
                logger.info("[ready] two players seated, player 1 starts")
                self.broadcaster.status(
                    f'Two players are connected! Game ready. '
                    f'Player {FIRST_SEAT} (User: "{self._label(FIRST_SEAT)}") it is your turn.'
                )
                self.broadcaster.notify_all(EventKind.TURN_POINTER_CHANGED, self.turns.current_turn)
            else:
                self.broadcaster.status('Waiting for another player to join...')
            return record

    def take_turn(self, sid: str) -> TurnStatus:
        with self._lock:
            record = self.registry.find_by_connection(sid)
            try:
                self.turns.check_turn(record.seat if record else None)
            except TurnRejected as exc:
                logger.info(f"[turn-reject] sid={sid} reason={exc.reason.name}")
                self.broadcaster.status(exc.reason.message, sid=sid)
                raise

            logger.info(f"[turn] seat={record.seat} user={record.identity!r}")
            self.spawn(self._record_turn, record.seat, record.identity)

            next_seat = self.turns.advance()
            self.broadcaster.notify_all(EventKind.TURN_POINTER_CHANGED, next_seat)
            self.broadcaster.status(f'It is now Player {next_seat} (User: "{self._label(next_seat)}")\'s turn.')
            return self.turns.status()

    def _record_turn(self, seat: int, identity: str) -> None:
        reason = None
        try:
            self.gateway.record_turn(identity)
        except PersistenceFailed as exc:
            reason = exc.reason
            logger.error(f"[record-fail] user={identity!r} reason={reason}")
        except Exception as exc:
            reason = str(exc) or exc.__class__.__name__
            logger.exception(f"[record-error] user={identity!r}")
        else:
            logger.info(f"[record] user={identity!r} turn recorded")

        if reason is None:
            message = f'Player {seat} (User: "{identity}") finished their turn. Turn recorded.'
        else:
            message = f'Player {seat} (User: "{identity}") took turn. (DB update issue: {reason})'
        try:
            with self._lock:
                self.broadcaster.status(message)
        except Exception:
            logger.exception(f"[record-notify-error] user={identity!r}")

    def leave(self, sid: str) -> Optional[MembershipRecord]:
        with self._lock:
            record = self.registry.unregister(sid)
            if record is None:
                logger.info(f"[leave] sid={sid} was not seated")
                return None

            self.allocator.release(record.seat)
            logger.info(f"[leave] sid={sid} user={record.identity!r} seat={record.seat}")
            self.broadcaster.status(f'Player {record.seat} (User: "{record.identity}") has disconnected.')

            remaining = self.registry.records()
            if len(remaining) == 1:
                survivor = remaining[0]
                previous = survivor.seat
                if previous != FIRST_SEAT:
                    self.allocator.renumber(previous, FIRST_SEAT)
                    self.registry.reseat(survivor.sid, FIRST_SEAT)
                logger.info(f"[renumber] user={survivor.identity!r} seat {previous} -> {FIRST_SEAT}")
                self.broadcaster.notify_one(survivor.sid, EventKind.JOIN_ACCEPTED, FIRST_SEAT)
                self.broadcaster.status(
                    f'Previous Player {previous} (User: "{survivor.identity}") is now Player {FIRST_SEAT}. '
                    f'Waiting for a new Player 2.'
                )
            else:
                logger.info("[reset] no players left")

            self.turns.membership_changed(self.registry.count())
            self.broadcaster.notify_all(EventKind.TURN_POINTER_CHANGED, self.turns.current_turn)
            self.broadcaster.status('Waiting for players...')
            return record

    def status(self) -> TurnStatus:
        with self._lock:
            return self.turns.status()

    def snapshot(self):
        with self._lock:
            status = self.turns.status()
            return {
                'ready': status.ready,
                'current_turn': status.current_turn,
                'players': [r.to_dict() for r in self.registry.records()],
            }
