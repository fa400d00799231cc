from typing import NamedTuple, Optional

from .errors import TurnRejected, TurnRejection
from .seats import SEATS

FIRST_SEAT = 1


class TurnStatus(NamedTuple):
    current_turn: int
    ready: bool


class TurnCoordinator:
    """Turn pointer plus the session-ready flag.

    Waiting (not ready) until both seats are taken, then Active with seat 1
    to move. Any membership change below two seats drops back to Waiting and
    rewinds the pointer to seat 1, so the next game always opens from seat 1
    whichever player stayed.
    """

    def __init__(self) -> None:
        self.current_turn = FIRST_SEAT
        self.ready = False

    def membership_changed(self, occupied: int) -> bool:
        """Re-evaluate readiness for ``occupied`` seats. Returns the new flag."""
        self.current_turn = FIRST_SEAT
        self.ready = occupied == len(SEATS)
        return self.ready

    def check_turn(self, seat: Optional[int]) -> None:
        if seat is None:
            raise TurnRejected(TurnRejection.NOT_REGISTERED)
        if not self.ready:
            raise TurnRejected(TurnRejection.SESSION_NOT_READY)
        if seat != self.current_turn:
            raise TurnRejected(TurnRejection.NOT_YOUR_TURN)

    def advance(self) -> int:
        self.current_turn = 2 if self.current_turn == 1 else 1
        return self.current_turn

    def status(self) -> TurnStatus:
        return TurnStatus(self.current_turn, self.ready)
