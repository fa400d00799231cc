from flask import Blueprint, jsonify
from duet import get_session

session_api = Blueprint('session_api', __name__)


@session_api.route('/session/state', methods=['GET'])
def session_state():
    """Seats, readiness and whose turn it is."""
    return jsonify(get_session().snapshot())


@session_api.route('/turns/<string:user_id>', methods=['GET'])
def turn_count(user_id):
    """Completed turns recorded for a user id (0 if none)."""
    user_id = user_id.strip()
    if not user_id:
        return jsonify({'error': 'user_id is required'}), 400
    count = get_session().gateway.turn_count(user_id)
    return jsonify({'user_id': user_id, 'turn_count': count})
