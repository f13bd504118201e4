import logging

from ..completion import CompletionClient, InlineTransactions
from ..errors import PropertyHistoryError
from ..state import TransactionHistoryState

logger = logging.getLogger(__name__)


class ClassifierNode:
    """Node for the first completion pass over the chosen search result."""

    def __init__(self, completion_client: CompletionClient):
        self.completion_client = completion_client

    def run(self, state: TransactionHistoryState) -> dict:
        logger.info("🧠 Analyzing search result with AI model")

        try:
            classification = self.completion_client.classify(
                state["candidate"], state["search_address"]
            )
        except PropertyHistoryError as e:
            logger.error(f"Analysis error: {e.message}")
            return {"failure": e, "current_step": "Analysis failed"}

        logger.info(f"Analysis result: {type(classification).__name__}")
        update = {"classification": classification, "current_step": "Candidate analyzed"}
        if isinstance(classification, InlineTransactions):
            update["transactions"] = classification.transactions
        return update
