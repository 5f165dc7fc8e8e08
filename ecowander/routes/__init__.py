# ecowander/routes/__init__.py
from ecowander.routes.travel import create_itinerary_blueprint
from ecowander.routes.websocket import NAMESPACE, register_websocket_handlers

__all__ = ["create_itinerary_blueprint", "register_websocket_handlers", "NAMESPACE"]
