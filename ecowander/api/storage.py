# ecowander/api/storage.py
"""Itinerary persistence backends."""

from __future__ import annotations

import copy
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from bson import ObjectId
from bson.errors import InvalidDocument, InvalidId
from pymongo import DESCENDING, MongoClient
from pymongo.errors import PyMongoError

from ecowander.api.config import get_storage_config
from ecowander.api.errors import PersistenceFailure
from ecowander.api.models import Itinerary, SavedItinerary

logger = logging.getLogger(__name__)


class ItineraryStore(ABC):
    """Interface the pipeline and routes use for saved itineraries."""

    @abstractmethod
    def save(self, itinerary: Itinerary) -> str:
        """Persist ``itinerary`` and return its id.

        Raises:
            PersistenceFailure: if the backend rejects the write.
        """

    @abstractmethod
    def list_all(self) -> List[SavedItinerary]:
        """Return every saved itinerary, newest first."""

    @abstractmethod
    def get_by_id(self, itinerary_id: str) -> Optional[SavedItinerary]:
        """Return one itinerary, or None if the id is unknown."""


class InMemoryItineraryStore(ItineraryStore):
    """Process-local store, used when no database is configured."""

    def __init__(self):
        self._items: List[SavedItinerary] = []
        self._lock = threading.Lock()

    def save(self, itinerary: Itinerary) -> str:
        itinerary_id = uuid.uuid4().hex
        with self._lock:
            self._items.append(SavedItinerary(itinerary_id, itinerary))
        logger.debug(f"Stored itinerary {itinerary_id} in memory")
        return itinerary_id

    def list_all(self) -> List[SavedItinerary]:
        with self._lock:
            return list(reversed(self._items))

    def get_by_id(self, itinerary_id: str) -> Optional[SavedItinerary]:
        with self._lock:
            for item in self._items:
                if item.id == itinerary_id:
                    return item
        return None


class MongoItineraryStore(ItineraryStore):
    """MongoDB-backed store; one document per itinerary."""

    def __init__(self, collection):
        self.collection = collection

    @classmethod
    def from_uri(cls, uri: str, database: str, collection: str) -> "MongoItineraryStore":
        client = MongoClient(uri)
        return cls(client[database][collection])

    @staticmethod
    def _to_saved(document: dict) -> SavedItinerary:
        data = copy.deepcopy(document)
        itinerary_id = str(data.pop("_id"))
        return SavedItinerary(itinerary_id, Itinerary.from_dict(data))

    def save(self, itinerary: Itinerary) -> str:
        document = itinerary.to_dict()
        # Keep a real date so the collection sorts chronologically.
        document["createdAt"] = itinerary.created_at
        try:
            result = self.collection.insert_one(document)
        except (PyMongoError, InvalidDocument) as exc:
            logger.error(f"Failed to insert itinerary into MongoDB: {exc}")
            raise PersistenceFailure(f"Could not save itinerary: {exc}") from exc
        itinerary_id = str(result.inserted_id)
        logger.info(f"Inserted itinerary {itinerary_id} into MongoDB")
        return itinerary_id

    def list_all(self) -> List[SavedItinerary]:
        cursor = self.collection.find().sort("createdAt", DESCENDING)
        return [self._to_saved(document) for document in cursor]

    def get_by_id(self, itinerary_id: str) -> Optional[SavedItinerary]:
        try:
            object_id = ObjectId(itinerary_id)
        except (InvalidId, TypeError):
            return None
        document = self.collection.find_one({"_id": object_id})
        if document is None:
            return None
        return self._to_saved(document)


def create_store() -> ItineraryStore:
    """Build the store selected by configuration."""
    cfg = get_storage_config()
    if cfg["uri"]:
        logger.info(f"Using MongoDB itinerary store ({cfg['database']}.{cfg['collection']})")
        return MongoItineraryStore.from_uri(cfg["uri"], cfg["database"], cfg["collection"])
    logger.info("Using in-memory itinerary store")
    return InMemoryItineraryStore()


__all__ = [
    "ItineraryStore",
    "InMemoryItineraryStore",
    "MongoItineraryStore",
    "create_store",
]
