from dataclasses import dataclass
from typing import Dict, List, Optional

from .errors import AlreadyRegistered


@dataclass
class MembershipRecord:
    seat: int
    identity: str
    sid: str

    def to_dict(self):
        return {'seat': self.seat, 'user_id': self.identity}


class ConnectionRegistry:
    """In-memory map of connection sid -> seated player."""

    def __init__(self) -> None:
        self._records: Dict[str, MembershipRecord] = {}

    def register(self, sid: str, seat: int, identity: str) -> MembershipRecord:
        if sid in self._records:
            raise AlreadyRegistered(sid)
        record = MembershipRecord(seat=seat, identity=identity, sid=sid)
        self._records[sid] = record
        return record

    def unregister(self, sid: str) -> Optional[MembershipRecord]:
        return self._records.pop(sid, None)

    def reseat(self, sid: str, seat: int) -> MembershipRecord:
        record = self._records[sid]
        record.seat = seat
        return record

    def find_by_connection(self, sid: str) -> Optional[MembershipRecord]:
        return self._records.get(sid)

    def find_by_seat(self, seat: int) -> Optional[MembershipRecord]:
        for record in self._records.values():
            if record.seat == seat:
                return record
        return None

    def count(self) -> int:
        return len(self._records)

    def all_identities(self) -> List[str]:
        return [record.identity for record in self._records.values()]

    def connections(self) -> List[str]:
        # Snapshot so callers can iterate while membership changes
        return list(self._records)

    def records(self) -> List[MembershipRecord]:
        return sorted(self._records.values(), key=lambda r: r.seat)
