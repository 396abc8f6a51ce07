from typing import Any, Mapping, Optional

from flask import current_app

from obs_timer import db, socketio
from obs_timer.models import TimerSession
from obs_timer.services.timer import SessionStateMachine, now_ms
from obs_timer.services.timer.validation import optional_instant, validate_mode, validate_patch


def state_machine() -> SessionStateMachine:
    return SessionStateMachine.from_config(current_app.config)


def broadcast_update(session: TimerSession) -> None:
    """Nudge subscribed clients to re-fetch; polling remains the baseline."""
    socketio.emit('session_update', {'id': session.public_id},
                  to=f"session:{session.public_id}", namespace='/ws')


def create_session(mode: Any) -> TimerSession:
    mode = validate_mode(mode)
    cfg = current_app.config
    session = TimerSession(
        id_length=int(cfg.get('SESSION_ID_LENGTH', 10)),
        mode=mode,
        is_running=False,
        show_milliseconds=bool(cfg.get('DEFAULT_SHOW_MILLISECONDS', True)),
        font_size=int(cfg.get('DEFAULT_FONT_SIZE', 48)),
        theme=cfg.get('DEFAULT_THEME', 'dark'),
        duration=int(cfg.get('DEFAULT_COUNTDOWN_MS', 5 * 60 * 1000)) if mode == 'countdown' else None,
    )
    db.session.add(session)
    db.session.commit()
    current_app.logger.info(f"[session-create] id={session.public_id} mode={mode}")
    return session


def get_session(session_id: str) -> Optional[TimerSession]:
    return TimerSession.query.filter_by(public_id=session_id).first()


def _persist(session: TimerSession, fields: Mapping[str, Any]) -> TimerSession:
    session.apply_patch(fields)
    db.session.add(session)
    db.session.commit()
    broadcast_update(session)
    return session


def patch_session(session_id: str, fields: Any) -> Optional[TimerSession]:
    """Merge only the supplied fields. Concurrent writers: last write wins.

    Unknown ids return None before the body is looked at.
    """
    session = get_session(session_id)
    if not session:
        return None
    cfg = current_app.config
    clean = validate_patch(fields, int(cfg.get('FONT_SIZE_MIN', 24)), int(cfg.get('FONT_SIZE_MAX', 120)))
    current_app.logger.info(f"[session-patch] id={session_id} fields={sorted(clean)}")
    return _persist(session, clean)


def apply_command(session_id: str, command: Mapping[str, Any], now: Optional[int] = None) -> Optional[TimerSession]:
    """Run a tagged command through the state machine and persist its patch."""
    session = get_session(session_id)
    if not session:
        return None
    now = optional_instant('now', now)
    if now is None:
        now = now_ms()
    patch = state_machine().apply(session.to_dict(), command, now)
    current_app.logger.info(
        f"[session-command] id={session_id} action={command.get('action')} fields={sorted(patch)}"
    )
    if not patch:
        return session
    return _persist(session, patch)
