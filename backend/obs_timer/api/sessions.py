from flask import Blueprint, jsonify, request, current_app
from obs_timer import db
from obs_timer.services.sessions import apply_command, create_session, get_session, patch_session
from obs_timer.services.sessions.links import control_url, obs_instructions, view_url
from obs_timer.services.timer import TimerError, format_time, now_ms, sample


sessions = Blueprint('sessions', __name__)

NOT_FOUND = 'Timer session not found'


def _fail(action: str, exc: Exception):
    db.session.rollback()
    current_app.logger.error(f"[session-{action}-error] {exc}")
    return jsonify({'error': f'Failed to {action} timer session'}), 500


@sessions.route('', methods=['POST'])
def create():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be an object'}), 400
    try:
        session = create_session(data.get('mode'))
    except TimerError as exc:
        return jsonify({'error': exc.message}), 400
    except Exception as exc:
        return _fail('create', exc)
    return jsonify({'session': session.to_dict()})


@sessions.route('/<string:session_id>', methods=['GET'])
def fetch(session_id):
    session = get_session(session_id)
    if not session:
        return jsonify({'error': NOT_FOUND}), 404
    return jsonify({'session': session.to_dict()})


@sessions.route('/<string:session_id>', methods=['PATCH'])
def update(session_id):
    updates = request.get_json(silent=True)
    try:
        session = patch_session(session_id, updates)
    except TimerError as exc:
        return jsonify({'error': exc.message}), 400
    except Exception as exc:
        return _fail('update', exc)
    if not session:
        return jsonify({'error': NOT_FOUND}), 404
    return jsonify({'session': session.to_dict()})


@sessions.route('/<string:session_id>/commands', methods=['POST'])
def command(session_id):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be an object'}), 400
    try:
        session = apply_command(session_id, data, data.get('now'))
    except TimerError as exc:
        return jsonify({'error': exc.message}), 400
    except Exception as exc:
        return _fail('update', exc)
    if not session:
        return jsonify({'error': NOT_FOUND}), 404
    return jsonify({'session': session.to_dict()})


@sessions.route('/<string:session_id>/display', methods=['GET'])
def display(session_id):
    session = get_session(session_id)
    if not session:
        return jsonify({'error': NOT_FOUND}), 404
    snapshot = session.to_dict()
    result = sample(snapshot, now_ms())
    payload = result.to_dict()
    payload.update({
        'text': format_time(snapshot['mode'], result.display_ms, snapshot['showMilliseconds']),
        'mode': snapshot['mode'],
        'fontSize': snapshot['fontSize'],
        'theme': snapshot['theme'],
    })
    return jsonify(payload)


@sessions.route('/<string:session_id>/embed', methods=['GET'])
def embed(session_id):
    session = get_session(session_id)
    if not session:
        return jsonify({'error': NOT_FOUND}), 404
    base = request.host_url
    return jsonify({
        'viewUrl': view_url(base, session.public_id),
        'controlUrl': control_url(base, session.public_id),
        'instructions': obs_instructions(base, session.public_id),
    })
