import json
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_core.utils.json import parse_json_markdown
from langchain_openai import ChatOpenAI
from pydantic import ValidationError

from .config import DEFAULT_COMPLETION_BASE_URL, DEFAULT_COMPLETION_MODEL
from .errors import CompletionParseError, CompletionRequestError, UnknownResponseShapeError
from .links import find_record_link
from .models import SearchCandidate, TransactionRecord
from .prompts import (
    CLASSIFY_SYSTEM_PROMPT,
    TRANSACTIONS_SYSTEM_PROMPT,
    TYPE_FOLLOW_CONTENT,
    TYPE_FOLLOW_LINK,
    TYPE_INLINE,
    build_classify_prompt,
    build_transactions_prompt,
)

logger = logging.getLogger(__name__)


@dataclass
class InlineTransactions:
    """The page already holds the Ownership History table."""

    transactions: List[TransactionRecord] = field(default_factory=list)


@dataclass
class FollowLink:
    """The page links to the record page of the address; fetch it next."""

    address: str
    link: str


@dataclass
class FollowContent:
    """No raw page content, but the page text mentions the address."""

    address: str
    link: str


@dataclass
class Empty:
    """Nothing usable on the page."""


CompletionResult = Union[InlineTransactions, FollowLink, FollowContent, Empty]


def parse_json_array(text: Optional[str]) -> List[Any]:
    """Decode a completion that must be a JSON array."""
    if not text or not text.strip():
        raise CompletionParseError("No content received from AI model")
    try:
        data = parse_json_markdown(text, parser=json.loads)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse AI response as JSON: {text[:500]}")
        raise CompletionParseError() from e

    if not isinstance(data, list):
        logger.error(f"AI response is not a JSON array: {text[:500]}")
        raise CompletionParseError()
    return data


def parse_transactions(rows: List[Any]) -> List[TransactionRecord]:
    if not all(isinstance(row, dict) for row in rows):
        raise CompletionParseError()
    try:
        return [TransactionRecord.model_validate(row) for row in rows]
    except ValidationError as e:
        logger.error(f"Malformed transaction rows in AI response: {e}")
        raise CompletionParseError() from e


def _address_link(items: List[Any]) -> dict:
    for item in items:
        if isinstance(item, dict) and item.get("address") and item.get("link"):
            return item
    raise CompletionParseError("AI response did not include an address and link")


def parse_classification(data: List[Any]) -> CompletionResult:
    """Turn the tagged first-pass array into a CompletionResult."""
    if not data:
        return Empty()

    head = data[0]
    response_type = head.get("type") if isinstance(head, dict) else None
    logger.info(f"Detected response type: {response_type}")

    if response_type == TYPE_INLINE:
        return InlineTransactions(parse_transactions(data[1:]))
    if response_type == TYPE_FOLLOW_LINK:
        item = _address_link(data[1:])
        return FollowLink(address=item["address"], link=item["link"])
    if response_type == TYPE_FOLLOW_CONTENT:
        item = _address_link(data[1:])
        return FollowContent(address=item["address"], link=item["link"])

    raise UnknownResponseShapeError(f"Unrecognized AI response type: {response_type!r}")


class CompletionClient:
    """Chat completion calls that turn page content into transactions."""

    def __init__(
        self,
        llm=None,
        model: str = DEFAULT_COMPLETION_MODEL,
        base_url: str = DEFAULT_COMPLETION_BASE_URL,
        api_key: Optional[str] = None,
    ):
        self.llm = llm or ChatOpenAI(
            model=model,
            base_url=base_url,
            api_key=api_key,
            temperature=0,
            top_p=1,
        )

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        try:
            response = self.llm.invoke(
                [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]
            )
        except Exception as e:
            logger.error(f"AI model request failed: {e}")
            raise CompletionRequestError(f"AI model request failed: {e}") from e

        content = response.content if isinstance(response.content, str) else ""
        logger.debug(f"Raw AI response: {content}")
        return content

    def classify(self, candidate: SearchCandidate, search_address: str) -> CompletionResult:
        """First pass: decide what the search result page offers."""
        prompt = build_classify_prompt(
            search_address, candidate.url, candidate.raw_content, candidate.content
        )
        result = parse_classification(parse_json_array(self._complete(CLASSIFY_SYSTEM_PROMPT, prompt)))

        if isinstance(result, Empty) and candidate.raw_content:
            # The model sometimes misses a record link that is plainly in the page
            found = find_record_link(search_address, candidate.raw_content)
            if found:
                anchor, link = found
                logger.info(f"Direct link detection found: {link}")
                return FollowLink(address=anchor, link=link)
        return result

    def extract_transactions(self, content: str) -> List[TransactionRecord]:
        """Second pass: parse the Ownership History table of a record page."""
        prompt = build_transactions_prompt(content)
        rows = parse_json_array(self._complete(TRANSACTIONS_SYSTEM_PROMPT, prompt))
        transactions = parse_transactions(rows)
        logger.info(f"Parsed {len(transactions)} transactions")
        return transactions
