from flask import request
from flask_socketio import disconnect
from duet import socketio, get_session
from duet.services.session import JoinRejected, TurnRejected


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    get_session().connect(_get_sid())


def handle_disconnect(reason=None):
    get_session().leave(_get_sid())


def handle_join_game(data=None):
    try:
        get_session().join(_get_sid(), data)
    except JoinRejected:
        # Join failures are final for this connection; the client must reconnect
        disconnect()


def handle_take_turn(data=None):
    try:
        get_session().take_turn(_get_sid())
    except TurnRejected:
        # Requester was already told why; nothing else changes
        return


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``.

    Event names match the browser client: ``joinGame`` carries the user id,
    ``takeTurn`` carries nothing.
    """
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('joinGame', handle_join_game, namespace=namespace)
    socketio.on_event('takeTurn', handle_take_turn, namespace=namespace)
