# ecowander/routes/travel.py
"""Itinerary routes and blueprint configuration."""

import logging

from flask import Blueprint, jsonify, request

from ecowander.api.errors import InvalidInput, PersistenceFailure
from ecowander.api.services.itinerary_service import ItineraryService

logger = logging.getLogger(__name__)


def create_itinerary_blueprint(service: ItineraryService):
    """Create and configure the itinerary blueprint.

    Args:
        service: Service used to generate and look up itineraries

    Returns:
        Configured Flask Blueprint
    """
    itinerary_bp = Blueprint("itinerary", __name__, url_prefix="/travel")

    @itinerary_bp.route("/api/itinerary", methods=["POST"])
    def create_itinerary():
        """Generate, persist and return a new itinerary."""
        payload = request.get_json(silent=True)
        logger.info(f"Received itinerary request: {payload}")

        try:
            saved = service.create_itinerary(payload)
        except InvalidInput as e:
            return jsonify({"error": str(e)}), 400
        except PersistenceFailure as e:
            logger.error(f"Itinerary generated but not saved: {e}")
            body = {"error": "Failed to save itinerary"}
            if e.itinerary is not None:
                body["itinerary"] = e.itinerary.to_dict()
            return jsonify(body), 500
        except Exception as e:
            logger.exception("Failed to generate itinerary")
            return jsonify({"error": f"Failed to generate itinerary: {e}"}), 500

        service.store_in_session(saved.id)
        return jsonify(saved.to_dict())

    @itinerary_bp.route("/api/itinerary", methods=["GET"])
    def list_itineraries():
        """Return every saved itinerary, newest first."""
        try:
            items = service.list_itineraries()
        except Exception as e:
            logger.exception("Failed to fetch itineraries")
            return jsonify({"error": f"Failed to fetch itineraries: {e}"}), 500
        return jsonify([item.to_dict() for item in items])

    @itinerary_bp.route("/api/itinerary/current", methods=["GET"])
    def current_itinerary():
        """Return the itinerary generated last in this session."""
        saved = service.get_from_session()
        if saved is None:
            return jsonify({"error": "No itinerary in session"}), 404
        return jsonify(saved.to_dict())

    @itinerary_bp.route("/api/itinerary/<itinerary_id>", methods=["GET"])
    def get_itinerary(itinerary_id):
        """Return one saved itinerary."""
        try:
            saved = service.get_itinerary(itinerary_id)
        except Exception as e:
            logger.exception(f"Failed to fetch itinerary {itinerary_id}")
            return jsonify({"error": f"Failed to fetch itinerary: {e}"}), 500
        if saved is None:
            return jsonify({"error": "Itinerary not found"}), 404
        return jsonify(saved.to_dict())

    @itinerary_bp.route("/health")
    def health():
        """Health check endpoint."""
        return jsonify({"status": "ok", "service": "itinerary"})

    return itinerary_bp


__all__ = ["create_itinerary_blueprint"]
