import logging

from ..address import extract_zip, strip_zip
from ..errors import InputError
from ..state import TransactionHistoryState

logger = logging.getLogger(__name__)


class ZipNode:
    """Node for pulling the ZIP code out of the free-text address."""

    def run(self, state: TransactionHistoryState) -> dict:
        """Extract the ZIP code and the street address without it."""
        address = state["address"]
        logger.info(f"🔍 Starting transaction lookup for: {address}")

        zipcode = extract_zip(address)
        if not zipcode:
            error = InputError()
            logger.error(f"{error.message}: {address}")
            return {"failure": error, "current_step": "ZIP extraction failed"}

        search_address = strip_zip(address)
        logger.info(f"Extracted zipcode {zipcode}, search address: {search_address}")
        return {
            "zipcode": zipcode,
            "search_address": search_address,
            "current_step": "ZIP extracted",
        }
