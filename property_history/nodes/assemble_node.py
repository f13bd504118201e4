import logging

from ..models import SearchResult
from ..state import TransactionHistoryState

logger = logging.getLogger(__name__)


class AssembleNode:
    """Node for building the response payload from the location and transactions."""

    def run(self, state: TransactionHistoryState) -> dict:
        transactions = state.get("transactions") or []
        logger.info(f"🏁 Assembling result with {len(transactions)} transactions")

        result = SearchResult.from_record(
            zipcode=state["zipcode"],
            record=state["location"],
            search_url=state["search_url"],
            transactions=transactions,
        )
        return {"result": result, "current_step": "Result assembled"}
