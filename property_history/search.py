import logging
import re
from typing import Any, Dict, List, Optional

from langchain_core.tools import ToolException
from langchain_tavily import TavilyExtract, TavilySearch

from .address import content_mentions
from .config import DEFAULT_SEARCH_DOMAIN
from .errors import NoCandidateError, UpstreamExtractError, UpstreamSearchError
from .models import SearchCandidate, ZipRecord

logger = logging.getLogger(__name__)

ASSESSOR_SEARCH_URL = "https://gis.vgsi.com/{town}{state}/search.aspx"


def build_query(search_address: str) -> str:
    return f"{search_address} property sale history transactions"


def build_search_url(record: ZipRecord) -> str:
    """Assessor search page for the town of a ZIP code."""
    town = re.sub(r"\s+", "", record.city.lower())
    return ASSESSOR_SEARCH_URL.format(town=town, state=record.state_id.lower())


def select_candidate(candidates: List[SearchCandidate], search_address: str) -> SearchCandidate:
    """Pick the page to analyze.

    The highest-scoring result that mentions the address wins; without one,
    the highest-scoring result overall is used.
    """
    if not candidates:
        raise NoCandidateError()

    ranked = sorted(candidates, key=lambda candidate: candidate.score, reverse=True)
    for candidate in ranked:
        if content_mentions(candidate.content, search_address):
            return candidate
    return ranked[0]


class SearchClient:
    """Tavily web search and page extraction, restricted to one domain."""

    def __init__(
        self,
        search_tool=None,
        extract_tool=None,
        domain: str = DEFAULT_SEARCH_DOMAIN,
        max_results: int = 5,
    ):
        self.domain = domain
        self.search_tool = search_tool or TavilySearch(
            max_results=max_results,
            include_raw_content=True,
            include_domains=[domain],
        )
        self.extract_tool = extract_tool or TavilyExtract(extract_depth="advanced")

    def search(self, query: str) -> List[SearchCandidate]:
        """Run one search and return the candidates, best score first."""
        logger.info(f"Searching {self.domain} for: {query}")
        try:
            response = self.search_tool.invoke({"query": query})
        except ToolException as e:
            # The Tavily tool raises when the search came back empty
            logger.warning(f"Search returned no results: {e}")
            raise NoCandidateError() from e
        except Exception as e:
            logger.error(f"Search request failed: {e}")
            raise UpstreamSearchError(f"Property search request failed: {e}") from e

        if not isinstance(response, dict):
            raise UpstreamSearchError(f"Property search request failed: {response}")
        if response.get("error"):
            raise UpstreamSearchError(f"Property search request failed: {response['error']}")

        candidates = [
            self._to_candidate(result)
            for result in response.get("results") or []
            if result.get("url")
        ]
        logger.info(f"Search returned {len(candidates)} candidates")
        if not candidates:
            raise NoCandidateError()

        return sorted(candidates, key=lambda candidate: candidate.score, reverse=True)

    def extract(self, url: str) -> str:
        """Fetch the raw content of one page."""
        logger.info(f"Extracting content from: {url}")
        try:
            response = self.extract_tool.invoke({"urls": [url]})
        except Exception as e:
            logger.error(f"Extract request failed for {url}: {e}")
            raise UpstreamExtractError() from e

        if not isinstance(response, dict) or response.get("error"):
            logger.error(f"Extract request failed for {url}: {response}")
            raise UpstreamExtractError()

        results = response.get("results") or []
        raw_content = results[0].get("raw_content") if results else None
        if not raw_content:
            failed = response.get("failed_results") or []
            logger.warning(f"No content extracted from {url} (failed: {failed})")
            raise UpstreamExtractError()

        logger.info(f"Extracted {len(raw_content)} characters from {url}")
        return raw_content

    @staticmethod
    def _to_candidate(result: Dict[str, Any]) -> SearchCandidate:
        raw_content: Optional[str] = result.get("raw_content") or None
        return SearchCandidate(
            url=result["url"],
            title=result.get("title") or "",
            content=result.get("content") or "",
            raw_content=raw_content,
            score=float(result.get("score") or 0.0),
        )
