"""
Place Search Client: nearby search that always has something to show.
"""
import logging
from typing import List

import config
import local_database as local_db
from gemini_service import GeminiService
from models import Coordinate, Place

logger = logging.getLogger(__name__)

SOS_QUERY = "Hospital Maternidade Emergência"


class PlaceSearchClient:
    def __init__(self, service: GeminiService, max_results: int = config.MAX_PLACE_RESULTS):
        self.service = service
        self.max_results = max_results

    def search(self, query: str, origin: Coordinate) -> List[Place]:
        """
        One request per call, no retries or caching. Blank queries return [] without
        contacting the service; any failure returns the offline list.
        """
        query = (query or "").strip()
        if not query:
            return []

        try:
            outcome = self.service.find_nearby_places(query, origin, limit=self.max_results)
        except Exception as e:
            logger.warning("Place search crashed, using offline list: %s", e)
            return local_db.fallback_places()

        places = list(outcome.value)[: self.max_results]
        if not places:
            return local_db.fallback_places()
        logger.info("Search %r near (%.4f, %.4f): %d places%s", query, origin.latitude,
                    origin.longitude, len(places), " (offline)" if outcome.fallback else "")
        return places

    def sos(self, origin: Coordinate) -> List[Place]:
        return self.search(SOS_QUERY, origin)
