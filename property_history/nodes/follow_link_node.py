import logging

from ..address import addresses_match
from ..completion import FollowContent, FollowLink
from ..errors import NoMatchingLinkError, PropertyHistoryError
from ..search import SearchClient
from ..state import TransactionHistoryState

logger = logging.getLogger(__name__)


class FollowLinkNode:
    """Node for fetching the content the second completion pass will read.

    A record link is fetched with a Tavily extract call. When the first pass
    only found the address in the page text, the page itself is the record,
    so its content is reused as is.
    """

    def __init__(self, search_client: SearchClient):
        self.search_client = search_client

    def run(self, state: TransactionHistoryState) -> dict:
        classification = state["classification"]
        candidate = state["candidate"]

        if isinstance(classification, FollowContent):
            logger.info(f"📄 Reusing search result content from {candidate.url}")
            return {
                "followup_content": candidate.best_content,
                "current_step": "Follow-up content ready",
            }

        logger.info(f"🔗 Following record link: {classification.link}")
        try:
            if not isinstance(classification, FollowLink) or not addresses_match(
                classification.address, state["search_address"]
            ):
                raise NoMatchingLinkError()
            content = self.search_client.extract(classification.link)
        except PropertyHistoryError as e:
            logger.error(f"Follow-up error: {e.message}")
            return {"failure": e, "current_step": "Follow-up fetch failed"}

        return {"followup_content": content, "current_step": "Follow-up content ready"}
