from typing import List, Optional, TypedDict
from typing_extensions import Required

from .completion import CompletionResult
from .errors import PropertyHistoryError
from .models import SearchCandidate, SearchResult, TransactionRecord, ZipRecord


class InputState(TypedDict, total=False):
    """
    Input state for a transaction history lookup.

    Attributes:
        address: Required free-text property address, including its ZIP code
    """

    address: Required[str]


class TransactionHistoryState(InputState):
    """
    Complete state of one lookup, filled in step by step by the graph nodes.
    """

    zipcode: Optional[str]
    """ZIP code found in the address (5 digits or ZIP+4)"""

    search_address: Optional[str]
    """The address with its ZIP code removed, used for searching and matching"""

    location: Optional[ZipRecord]
    """City, county and state of the ZIP code"""

    search_url: Optional[str]
    """Assessor search page for the town"""

    candidate: Optional[SearchCandidate]
    """Search result page chosen for analysis"""

    classification: Optional[CompletionResult]
    """
    What the first completion pass found on the candidate page:
    - InlineTransactions: the Ownership History table itself
    - FollowLink: a link to the record page of the address
    - FollowContent: the address in the page text, no raw content
    - Empty: nothing usable
    """

    followup_content: Optional[str]
    """Content handed to the second completion pass"""

    transactions: Optional[List[TransactionRecord]]
    """Sale transactions found for the property"""

    result: Optional[SearchResult]
    """Assembled response payload"""

    failure: Optional[PropertyHistoryError]
    """The error that ended the lookup, if any"""

    current_step: str
    """Current step in the lookup"""
