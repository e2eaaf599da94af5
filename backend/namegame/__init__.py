from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
import json
from namegame.config import Config
from namegame.services.verification.overrides import OverrideStore

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
# Lecturer verdicts; process memory only, wiped by the reset action
override_store = OverrideStore()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from namegame.main import main
    flask_app.register_blueprint(main)

    from namegame.api.roster import roster
    from namegame.api.sessions import sessions
    from namegame.api.results import results
    flask_app.register_blueprint(roster, url_prefix='/api')
    flask_app.register_blueprint(sessions, url_prefix='/api')
    flask_app.register_blueprint(results, url_prefix='/api')

    from namegame.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    from namegame.models import Lecturer

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(Lecturer, int(user_id))

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the database, seeding the lecturer account if configured."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            password = flask_app.config.get('LECTURER_PASSWORD')
            if password:
                lecturer = Lecturer(username=flask_app.config.get('LECTURER_USERNAME') or 'lecturer')
                lecturer.set_password(password)
                db.session.add(lecturer)
                db.session.commit()
            print('Database has been reset!')

    @click.command('check-name')
    @click.argument('name')
    @click.argument('pair')
    def check_name_command(name, pair):
        """Verifies NAME against letter PAIR and prints the result."""
        from namegame.services.verification import get_classifier
        with flask_app.app_context():
            result = get_classifier().classify(name, pair)
            print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(check_name_command)

    return flask_app
