# ecowander/routes/websocket/planner.py
"""WebSocket handlers that stream itinerary generation day by day."""

import logging

from ecowander.api.errors import InvalidInput, PersistenceFailure

from .base import BaseWebSocketHandler, NAMESPACE

logger = logging.getLogger(__name__)


class PlannerHandler(BaseWebSocketHandler):
    """Runs the itinerary pipeline and reports progress to the client."""

    def __init__(self, socketio, service, namespace=NAMESPACE):
        super().__init__(socketio, namespace)
        self.service = service

    def register_handlers(self):
        """Register planning event handlers."""

        @self.socketio.on("plan_itinerary", namespace=self.namespace)
        def handle_plan_itinerary(data=None):
            """Generate an itinerary, emitting one event per planned day."""
            self.log_event("plan_itinerary", data)

            def _on_day(day):
                self.emit_to_client("day_planned", day.to_dict())

            try:
                params = self.service.parse_request(data)
                self.emit_to_client("itinerary_started", {
                    "sourceCity": params["source_city"],
                    "destinationCity": params["destination_city"],
                    "numberOfDays": params["number_of_days"],
                })
                saved = self.service.create_itinerary(data, on_day=_on_day)
            except InvalidInput as exc:
                self.handle_error(exc, "plan_itinerary")
                return
            except PersistenceFailure as exc:
                logger.error(f"[WS] Itinerary generated but not saved: {exc}")
                self.emit_to_client("error", {
                    "message": "Failed to save itinerary",
                    "event": "plan_itinerary",
                    "itinerary": exc.itinerary.to_dict() if exc.itinerary is not None else None,
                })
                return
            except Exception as exc:
                logger.exception("[WS] Itinerary generation failed")
                self.handle_error(exc, "plan_itinerary")
                return

            self.emit_to_client("itinerary_ready", {
                "id": saved.id,
                "itinerary": saved.itinerary.to_dict(),
                "summary": self.service.summarize(saved.itinerary),
            })
