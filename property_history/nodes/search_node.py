import logging

from ..errors import PropertyHistoryError
from ..search import SearchClient, build_query, select_candidate
from ..state import TransactionHistoryState

logger = logging.getLogger(__name__)


class SearchNode:
    """Node for finding the assessor page that best matches the address."""

    def __init__(self, search_client: SearchClient):
        self.search_client = search_client

    def run(self, state: TransactionHistoryState) -> dict:
        search_address = state["search_address"]
        logger.info(f"🌐 Searching property records for: {search_address}")

        try:
            candidates = self.search_client.search(build_query(search_address))
            candidate = select_candidate(candidates, search_address)
        except PropertyHistoryError as e:
            logger.error(f"Property search error: {e.message}")
            return {"failure": e, "current_step": "Property search failed"}

        logger.info(f"Using result URL: {candidate.url} (score {candidate.score})")
        return {"candidate": candidate, "current_step": "Candidate found"}
