# ecowander/routes/websocket/__init__.py
"""WebSocket route handlers initialization."""

import logging

from .base import NAMESPACE
from .connection import ConnectionHandler
from .planner import PlannerHandler

logger = logging.getLogger(__name__)


def register_websocket_handlers(socketio, service):
    """Register all WebSocket event handlers with SocketIO.

    Args:
        socketio: Flask-SocketIO instance
        service: ItineraryService used by the planning events
    """
    logger.info(f"Registering WebSocket handlers for namespace: {NAMESPACE}")
    ConnectionHandler(socketio, NAMESPACE).register_handlers()
    PlannerHandler(socketio, service, NAMESPACE).register_handlers()


__all__ = ["register_websocket_handlers", "NAMESPACE"]
