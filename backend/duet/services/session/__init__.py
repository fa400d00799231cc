"""Two-seat session coordination.

Seat allocation, the turn pointer and fan-out of session events. Nothing in
here knows about Flask; the Socket.IO layer feeds events into ``GameSession``
and hands it an emitter.
"""

from .broadcaster import EventKind, SessionBroadcaster
from .errors import (
    JoinRejected,
    JoinRejection,
    PersistenceFailed,
    SessionError,
    TurnRejected,
    TurnRejection,
)
from .game import GameSession
from .registry import ConnectionRegistry, MembershipRecord
from .seats import SeatAllocator
from .turns import TurnCoordinator, TurnStatus
