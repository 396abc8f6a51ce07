from obs_timer import db
from datetime import datetime, timezone
import string
import random

SESSION_ID_ALPHABET = string.ascii_letters + string.digits


def _utcnow():
    return datetime.now(timezone.utc)


def generate_session_id(length=10):
    """Generate a unique, URL-safe session id."""
    while True:
        sid = ''.join(random.choices(SESSION_ID_ALPHABET, k=length))
        if not TimerSession.query.filter_by(public_id=sid).first():
            return sid


def _iso(value):
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class TimerSession(db.Model):
    __tablename__ = 'timer_session'
    pk = db.Column(db.Integer, primary_key=True)
    public_id = db.Column(db.String(32), unique=True, nullable=False, index=True)
    mode = db.Column(db.String(16), nullable=False)  # clock, stopwatch, countdown
    is_running = db.Column(db.Boolean, default=False, nullable=False)
    # Anchors, epoch milliseconds
    start_time = db.Column(db.BigInteger, nullable=True)
    paused_at = db.Column(db.BigInteger, nullable=True)
    duration = db.Column(db.BigInteger, nullable=True)  # countdown only
    show_milliseconds = db.Column(db.Boolean, default=True, nullable=False)
    font_size = db.Column(db.Integer, default=48, nullable=False)
    theme = db.Column(db.JSON, nullable=False, default='dark')  # name or palette object
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)

    # wire name -> column attribute
    FIELD_MAP = {
        'mode': 'mode',
        'isRunning': 'is_running',
        'startTime': 'start_time',
        'pausedAt': 'paused_at',
        'duration': 'duration',
        'showMilliseconds': 'show_milliseconds',
        'fontSize': 'font_size',
        'theme': 'theme',
    }

    def __init__(self, id_length=10, **kwargs):
        super(TimerSession, self).__init__(**kwargs)
        if not self.public_id:
            self.public_id = generate_session_id(id_length)

    def apply_patch(self, fields):
        for key, value in fields.items():
            setattr(self, self.FIELD_MAP[key], value)
        self.updated_at = _utcnow()

    def to_dict(self):
        return {
            'id': self.public_id,
            'mode': self.mode,
            'isRunning': self.is_running,
            'startTime': self.start_time,
            'pausedAt': self.paused_at,
            'duration': self.duration,
            'showMilliseconds': self.show_milliseconds,
            'fontSize': self.font_size,
            'theme': self.theme,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }
