import logging

from flask import Flask, jsonify
from flask_cors import CORS
from flask_socketio import SocketIO
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from werkzeug.exceptions import HTTPException

from tracket.config import config

db = SQLAlchemy()
socketio = SocketIO()


def _parse_allowed_origins(raw_origins):
    if not raw_origins:
        return '*'

    if isinstance(raw_origins, (list, tuple, set)):
        cleaned = [origin for origin in raw_origins if origin]
        return cleaned or '*'

    raw_text = str(raw_origins).strip()
    if not raw_text or raw_text == '*':
        return '*'

    origins = [origin.strip() for origin in raw_text.split(',') if origin.strip()]
    return origins or '*'


def _configure_logging(app):
    level_name = str(app.config.get('LOG_LEVEL') or 'INFO').strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    app.logger.setLevel(level)


def _enable_sqlite_savepoints(engine):
    """Have SQLAlchemy emit BEGIN itself so SAVEPOINTs nest in the transaction.

    pysqlite otherwise defers BEGIN until the first write, and releasing an
    outermost SAVEPOINT then commits it.
    """
    if engine.dialect.name != 'sqlite':
        return

    @event.listens_for(engine, 'connect')
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, 'begin')
    def _emit_begin(conn):
        conn.exec_driver_sql('BEGIN')


def _register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def _http_error(exc):
        return jsonify({'error': exc.description or exc.name}), exc.code

    @app.errorhandler(Exception)
    def _unexpected_error(exc):
        db.session.rollback()
        app.logger.exception('Unhandled error while processing request')
        return jsonify({'error': 'Internal server error'}), 500


def create_app(config_name='development'):
    app = Flask(__name__)
    app.config.from_object(config[config_name])
    app.json.sort_keys = False

    _configure_logging(app)
    allowed_origins = _parse_allowed_origins(app.config.get('CORS_ALLOWED_ORIGINS', '*'))

    db.init_app(app)
    socketio.init_app(
        app,
        cors_allowed_origins=allowed_origins,
        async_mode=app.config.get('SOCKETIO_ASYNC_MODE', 'threading'),
    )
    CORS(app, resources={r'/api/*': {'origins': allowed_origins}})
    _register_error_handlers(app)

    from tracket.routes.activities import activities_bp
    from tracket.routes.courts import courts_bp
    from tracket.routes.equipment import equipment_bp

    app.register_blueprint(activities_bp, url_prefix='/api/activities')
    app.register_blueprint(courts_bp, url_prefix='/api/courts')
    app.register_blueprint(equipment_bp, url_prefix='/api/equipment')

    with app.app_context():
        from tracket import models  # noqa: F401
        _enable_sqlite_savepoints(db.engine)
        db.create_all()

    return app
