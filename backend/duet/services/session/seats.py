from typing import Dict, Optional

from .errors import JoinRejected, JoinRejection

SEATS = (1, 2)


def normalize_identity(identity) -> Optional[str]:
    """Return the trimmed identity, or None if it is not a usable string."""
    if not isinstance(identity, str):
        return None
    trimmed = identity.strip()
    return trimmed or None


class SeatAllocator:
    """Hands out seat 1 then seat 2 and tracks who sits where."""

    def __init__(self) -> None:
        self._occupants: Dict[int, str] = {}

    def validate(self, identity) -> str:
        """Check ``identity`` could take a seat and return it trimmed.

        Checks, in order: the identity is a non-blank string, nobody seated
        already uses it, and a seat is free. Raises ``JoinRejected`` with the
        first failing reason.
        """
        trimmed = normalize_identity(identity)
        if trimmed is None:
            raise JoinRejected(JoinRejection.INVALID_IDENTITY)
        if trimmed in self._occupants.values():
            raise JoinRejected(JoinRejection.DUPLICATE_IDENTITY)
        if not self.free_seats():
            raise JoinRejected(JoinRejection.SESSION_FULL)
        return trimmed

    def try_assign(self, identity) -> int:
        """Assign the lowest free seat to ``identity``; nothing changes on rejection."""
        trimmed = self.validate(identity)
        seat = self.free_seats()[0]
        self._occupants[seat] = trimmed
        return seat

    def release(self, seat: int) -> None:
        self._occupants.pop(seat, None)

    def renumber(self, from_seat: int, to_seat: int) -> None:
        if from_seat not in self._occupants:
            raise ValueError(f'seat {from_seat} is not occupied')
        if to_seat not in SEATS or to_seat in self._occupants:
            raise ValueError(f'seat {to_seat} is not free')
        self._occupants[to_seat] = self._occupants.pop(from_seat)

    def free_seats(self):
        return [seat for seat in SEATS if seat not in self._occupants]

    def occupied_seats(self):
        return sorted(self._occupants)

    def occupant(self, seat: int) -> Optional[str]:
        return self._occupants.get(seat)
