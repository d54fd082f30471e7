try:
    from backend.undercover.server import create_app
except ImportError:  # pragma: no cover
    from undercover.server import create_app

app, socketio = create_app()
