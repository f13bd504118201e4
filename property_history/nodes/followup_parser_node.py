import logging

from ..completion import CompletionClient
from ..errors import PropertyHistoryError
from ..state import TransactionHistoryState

logger = logging.getLogger(__name__)


class FollowupParserNode:
    """Node for the second completion pass over the record page content."""

    def __init__(self, completion_client: CompletionClient):
        self.completion_client = completion_client

    def run(self, state: TransactionHistoryState) -> dict:
        logger.info("🧾 Extracting ownership history from record page")

        try:
            transactions = self.completion_client.extract_transactions(state["followup_content"])
        except PropertyHistoryError as e:
            logger.error(f"Ownership history error: {e.message}")
            return {"failure": e, "current_step": "Ownership history parsing failed"}

        if not transactions:
            logger.info("No valid transactions found")
        return {"transactions": transactions, "current_step": "Ownership history parsed"}
