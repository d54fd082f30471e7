from __future__ import annotations

import os
import sys

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .routes.health import bp as health_bp
from .routes.rooms import bp as rooms_bp
from .routes.wordlists import bp as wordlists_bp
from .realtime.handlers import register_socketio_handlers
from .realtime.timers import DisconnectTimers
from .storage.wordlists import WordListStore


def create_app(config_class=Config) -> tuple[Flask, SocketIO]:
    app = Flask(__name__)
    app.config.from_object(config_class)

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    env_async_mode = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()
    if env_async_mode:
        async_mode = env_async_mode
    else:
        # Default choice:
        # - Windows: threading (eventlet has known compatibility issues on newer Python)
        # - Python >= 3.13: threading (safer default)
        # - Otherwise: eventlet
        if sys.platform.startswith("win") or sys.version_info >= (3, 13):
            async_mode = "threading"
        else:
            async_mode = "eventlet"

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=async_mode,
    )

    word_lists = WordListStore(
        app.config["WORDLISTS_FILE"],
        default_name=app.config.get("DEFAULT_LIST_NAME", "default"),
    )
    app.extensions["wordlists"] = word_lists

    timers = DisconnectTimers(
        socketio.start_background_task,
        socketio.sleep,
        grace_sec=app.config.get("DISCONNECT_GRACE_SEC", 30),
    )
    app.extensions["disconnect_timers"] = timers

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(rooms_bp, url_prefix="/api")
    app.register_blueprint(wordlists_bp, url_prefix="/api")

    register_socketio_handlers(socketio, word_lists, timers)

    return app, socketio
