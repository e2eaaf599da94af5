from flask_socketio import emit
from flask import current_app, request
from namegame import socketio
from namegame.models import Student, Group, GameSession
from namegame.services.verification.constraints import LETTER_PAIRS


def _initial_state():
    return {
        'students': [s.to_dict() for s in Student.query.order_by(Student.id).all()],
        'groups': [g.to_dict() for g in Group.query.order_by(Group.id).all()],
        'active_sessions': [s.to_dict() for s in GameSession.query.filter_by(completed=False).order_by(GameSession.id).all()],
        'letter_pairs': list(LETTER_PAIRS),
    }


def handle_connect():
    current_app.logger.info(f"[ws] client connected sid={request.sid}")  # type: ignore[attr-defined]
    emit('initial_state', _initial_state())


def handle_disconnect(*args):
    current_app.logger.info(f"[ws] client disconnected sid={request.sid}")  # type: ignore[attr-defined]


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the '/ws' namespace."""
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('disconnect', handle_disconnect, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')
