from flask import Flask, current_app
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

SESSION_EXTENSION = 'duet'


def get_session():
    """The GameSession bound to the current app."""
    return current_app.extensions[SESSION_EXTENSION]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from duet.services.recording import SqlTurnRecorder
    from duet.services.session import GameSession

    # Tests record turns on the handler thread so results are deterministic
    if flask_app.config.get('TESTING') or flask_app.config.get('RECORD_TURNS_INLINE'):
        spawn = None
    else:
        spawn = socketio.start_background_task

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    flask_app.extensions[SESSION_EXTENSION] = GameSession(
        socketio,
        SqlTurnRecorder(flask_app),
        spawn=spawn,
        namespace=namespace,
    )

    from duet.routes import main
    flask_app.register_blueprint(main)

    from duet.api.session import session_api
    flask_app.register_blueprint(session_api, url_prefix='/api')

    from duet.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the turn tally table."""
        import duet.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    flask_app.logger.info(f"[startup] socket.io namespace={namespace} inline_recording={spawn is None}")
    return flask_app
