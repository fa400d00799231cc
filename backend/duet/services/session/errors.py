from enum import Enum


class JoinRejection(Enum):
    """Why a join request was refused. The connection is closed afterwards."""

    INVALID_IDENTITY = 'Invalid User ID provided.'
    DUPLICATE_IDENTITY = 'This User ID is already in the game. Try a different ID or wait.'
    SESSION_FULL = 'Sorry, the game is currently full.'
    ALREADY_SEATED = 'This connection already has a seat. Reconnect to join under another User ID.'

    @property
    def message(self) -> str:
        return self.value


class TurnRejection(Enum):
    """Why a turn action was refused. The connection stays open."""

    NOT_REGISTERED = "Error: You don't seem to be registered in the game. Please rejoin."
    SESSION_NOT_READY = 'Cannot take turn: The game is not ready (waiting for opponent).'
    NOT_YOUR_TURN = 'It is not your turn!'

    @property
    def message(self) -> str:
        return self.value


class SessionError(Exception):
    pass


class JoinRejected(SessionError):
    def __init__(self, reason: JoinRejection):
        super().__init__(reason.message)
        self.reason = reason


class TurnRejected(SessionError):
    def __init__(self, reason: TurnRejection):
        super().__init__(reason.message)
        self.reason = reason


class PersistenceFailed(SessionError):
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class AlreadyRegistered(SessionError):
    def __init__(self, sid: str):
        super().__init__(f'connection {sid} already has a seat')
        self.sid = sid
