from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import json
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
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from flagstats.main import main
    flask_app.register_blueprint(main)

    from flagstats.api.players import players
    flask_app.register_blueprint(players, url_prefix='/api/players')

    from flagstats.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    from flagstats.api.backup import backup
    flask_app.register_blueprint(backup, url_prefix='/api/store')

    from flagstats.services.stats.exceptions import StatTrackerError

    @flask_app.errorhandler(StatTrackerError)
    def handle_tracker_error(exc):
        flask_app.logger.info(f"[rejected] {type(exc).__name__}: {exc}")
        return jsonify({'error': str(exc)}), exc.status_code

    from flagstats.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('store-reset')
    def store_reset_command():
        """Drops and recreates the tables, leaving an empty tracker."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Tracker store has been reset!')

    @click.command('store-export')
    @click.argument('path', type=click.Path(dir_okay=False, writable=True))
    def store_export_command(path):
        """Writes the tracker document to PATH."""
        from flagstats.store import export_document
        with flask_app.app_context():
            with open(path, 'w', encoding='utf-8') as fh:
                json.dump(export_document(), fh, indent=2)
        print(f'Exported tracker to {path}')

    @click.command('store-import')
    @click.argument('path', type=click.Path(exists=True, dir_okay=False))
    def store_import_command(path):
        """Replaces the tracker with the document in PATH."""
        from flagstats.store import import_document
        with open(path, encoding='utf-8') as fh:
            raw = json.load(fh)
        with flask_app.app_context():
            db.create_all()
            result = import_document(raw)
        for issue in result.issues:
            print(f'  - {issue}')
        print(f'Imported {len(result.state.players)} players and {len(result.state.games)} games')

    flask_app.cli.add_command(store_reset_command)
    flask_app.cli.add_command(store_export_command)
    flask_app.cli.add_command(store_import_command)

    return flask_app
