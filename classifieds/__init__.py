from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_socketio import SocketIO
from flask_cors import CORS
from flask_restx import Api
import logging
import os
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()
socketio = SocketIO()


def _split_ids(value):
    return [item.strip() for item in (value or '').split(',') if item.strip()]


def create_app(config_name='development', overrides=None):
    app = Flask(__name__)

    # Config
    app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv(
        'DATABASE_URL',
        'sqlite:///classifieds.db'
    )
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['ADMIN_SECRET'] = os.getenv('ADMIN_SECRET')
    app.config['ADMIN_USER_IDS'] = _split_ids(os.getenv('ADMIN_USER_IDS'))
    app.config['DEFAULT_LOCALE'] = os.getenv('DEFAULT_LOCALE', 'ru')
    app.config['PLACEHOLDER_IMAGE_URL'] = os.getenv(
        'PLACEHOLDER_IMAGE_URL',
        'https://picsum.photos/seed/'
    )
    app.config['CURRENCY_SYMBOL'] = os.getenv('CURRENCY_SYMBOL', '₴')
    app.config['REDIS_URL'] = os.getenv('REDIS_URL')
    app.config['SOCKETIO_ASYNC_MODE'] = os.getenv('SOCKETIO_ASYNC_MODE') or None
    app.config['CORS_ORIGINS'] = os.getenv('CORS_ORIGINS', '*')
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')

    if config_name == 'testing':
        app.config['TESTING'] = True
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite:///:memory:'
        app.config['SOCKETIO_ASYNC_MODE'] = 'threading'
        app.config['REDIS_URL'] = None

    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(app.config['LOG_LEVEL'])
    logging.getLogger('classifieds').setLevel(app.config['LOG_LEVEL'])

    # Initialize extensions
    db.init_app(app)
    CORS(app, origins=app.config['CORS_ORIGINS'])
    socketio.init_app(
        app,
        cors_allowed_origins=app.config['CORS_ORIGINS'],
        async_mode=app.config['SOCKETIO_ASYNC_MODE'],
        message_queue=app.config['REDIS_URL'],
    )

    # API docs
    Api(app, version='1.0', title='Classifieds API', doc='/api/docs')

    # Import models so their collections are registered before create_all
    from classifieds import models  # noqa: F401

    with app.app_context():
        try:
            db.create_all()
        except Exception as e:
            app.logger.warning(f"Could not create database tables: {e}")

    from classifieds.services.change_feed import feed
    feed.init_app(app)

    from classifieds.routes import register_routes
    register_routes(app)

    from classifieds.socket_events import register_socket_events
    register_socket_events(socketio)

    # Health check
    @app.route('/health', methods=['GET'])
    def health():
        return {'status': 'ok'}, 200

    return app
