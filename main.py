"""
EcoWander – main application entry point

* Flask app + Socket.IO serving the itinerary API under `/travel`.
* Socket.IO runs in threading mode; no eventlet/gevent required.
* The Socket.IO namespace is `/travel/ws`; planning progress is streamed there.
"""

import os
import logging

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from dotenv import load_dotenv

from ecowander.api.config import get_port
from ecowander.api.pipeline import create_pipeline
from ecowander.api.services.itinerary_service import ItineraryService
from ecowander.api.storage import create_store
from ecowander.routes import create_itinerary_blueprint, register_websocket_handlers

# --------------------------------------------------------------------------- #
# Environment & logging
# --------------------------------------------------------------------------- #
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(service=None):
    """Build the Flask app and its SocketIO server.

    Args:
        service: Optional ItineraryService; built from configuration if omitted

    Returns:
        Tuple of (app, socketio)
    """
    app = Flask(__name__)

    flask_secret_key = os.getenv("FLASK_SECRET_KEY") or os.urandom(32).hex()
    if "FLASK_SECRET_KEY" not in os.environ:
        logger.warning("No FLASK_SECRET_KEY found. Generated a temporary key.")
    app.secret_key = flask_secret_key

    app.config.update(
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        PERMANENT_SESSION_LIFETIME=86400,
    )

    # CORS for local dev / cross‑origin front‑end requests
    CORS(app, origins="*", supports_credentials=True)

    if service is None:
        store = create_store()
        service = ItineraryService(create_pipeline(store), store)

    socketio = SocketIO(
        app,
        cors_allowed_origins="*",
        async_mode="threading",
        logger=False,
        engineio_logger=False,
    )
    logger.info("Socket.IO initialised (async_mode=threading)")

    app.register_blueprint(create_itinerary_blueprint(service))
    register_websocket_handlers(socketio, service)
    return app, socketio


# --------------------------------------------------------------------------- #
# Local development runner ( `python main.py` )
# --------------------------------------------------------------------------- #
if __name__ == "__main__":
    app, socketio = create_app()
    port = get_port()
    logger.info(f"Starting itinerary service on http://localhost:{port}")
    socketio.run(app, host="0.0.0.0", port=port, debug=False, allow_unsafe_werkzeug=True)
