import logging

from ..errors import LocationLookupError, PropertyHistoryError
from ..search import build_search_url
from ..state import TransactionHistoryState
from ..zip_directory import ZipDirectory

logger = logging.getLogger(__name__)


class LocationNode:
    """Node for resolving the ZIP code to its city, county and state."""

    def __init__(self, directory: ZipDirectory):
        self.directory = directory

    def run(self, state: TransactionHistoryState) -> dict:
        logger.info(f"🗺️ Looking up location for ZIP {state['zipcode']}")

        try:
            location = self.directory.lookup(state["zipcode"])
            if location is None:
                raise LocationLookupError()
        except PropertyHistoryError as e:
            logger.error(f"Location lookup error: {e.message}")
            return {"failure": e, "current_step": "Location lookup failed"}

        search_url = build_search_url(location)
        logger.info(
            f"Resolved {location.zip} to {location.city}, {location.county_name} "
            f"County, {location.state_id} ({search_url})"
        )
        return {
            "location": location,
            "search_url": search_url,
            "current_step": "Location resolved",
        }
