# api/config.py
"""Configuration management for the itinerary API."""
import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_OVERPASS_URL = "https://overpass-api.de/api/interpreter"


def _get_bool(name, default):
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_geocoding_config():
    """Get Google Maps geocoding configuration."""
    return {
        "api_key": os.getenv("GOOGLE_MAPS_API_KEY", ""),
        "timeout": float(os.getenv("GEOCODING_TIMEOUT_SECONDS", "10")),
        "language": os.getenv("GEOCODING_LANGUAGE", "en"),
    }


def get_overpass_config():
    """Get Overpass (OpenStreetMap POI) configuration."""
    return {
        "url": os.getenv("OVERPASS_URL", DEFAULT_OVERPASS_URL),
        "timeout": float(os.getenv("OVERPASS_TIMEOUT_SECONDS", "25")),
        "radius_meters": int(os.getenv("POI_RADIUS_METERS", "20000")),
        "user_agent": os.getenv("POI_USER_AGENT", "EcoWander/1.0"),
    }


def get_itinerary_config():
    """Get itinerary generation limits and policies."""
    return {
        "max_days": int(os.getenv("MAX_TRIP_DAYS", "14")),
        "degrade_unresolved": _get_bool("DEGRADE_UNRESOLVED_CITIES", True),
        "prefetch_workers": int(os.getenv("POI_PREFETCH_WORKERS", "1")),
    }


def get_storage_config():
    """Get itinerary storage configuration.

    An empty ``uri`` selects the in-memory store.
    """
    return {
        "uri": os.getenv("MONGODB_URI", ""),
        "database": os.getenv("MONGODB_DATABASE", "ecowander"),
        "collection": os.getenv("MONGODB_COLLECTION", "itineraries"),
    }


def get_port():
    """Get port configuration."""
    return int(os.getenv("PORT", 5000))
