from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from obs_timer.api.sessions import sessions
    flask_app.register_blueprint(sessions, url_prefix='/api/sessions')

    from obs_timer.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    from obs_timer.cli import timer_cli
    flask_app.cli.add_command(timer_cli)

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates all tables."""
        import obs_timer.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            click.echo('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
