from flask_socketio import join_room, leave_room, emit
from obs_timer import socketio


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_session(data):
    session_id = (data or {}).get('id')
    if not session_id:
        emit('error', {'message': 'id is required'})
        return
    room = f"session:{session_id}"
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_session(data):
    session_id = (data or {}).get('id')
    if not session_id:
        emit('error', {'message': 'id is required'})
        return
    room = f"session:{session_id}"
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'.

    Clients in room ``session:<id>`` receive ``session_update`` whenever the
    session changes and should re-fetch it over HTTP.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('join_session', handle_join_session, namespace='/ws')
    socketio.on_event('leave_session', handle_leave_session, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')
