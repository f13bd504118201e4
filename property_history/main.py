import logging

from langgraph.graph import START, StateGraph, END

from .completion import CompletionClient, Empty, FollowContent, FollowLink, InlineTransactions
from .config import Settings
from .models import SearchResult
from .nodes import (
    ZipNode,
    LocationNode,
    SearchNode,
    ClassifierNode,
    FollowLinkNode,
    FollowupParserNode,
    AssembleNode,
)
from .search import SearchClient
from .state import TransactionHistoryState
from .zip_directory import ZipDirectory

logger = logging.getLogger(__name__)


def _continue_to(target: str):
    """Route to the next step, or end the run if the last step failed."""

    def route(state: TransactionHistoryState) -> str:
        return END if state.get("failure") else target

    return route


class TransactionHistoryGraph:
    def __init__(
        self,
        directory: ZipDirectory,
        search_client: SearchClient,
        completion_client: CompletionClient,
    ):
        """Initialize the transaction history graph.

        Args:
            directory: Loaded ZIP code table
            search_client: Web search and page extraction client
            completion_client: Chat completion client used to parse pages
        """
        self.directory = directory
        self.search_client = search_client
        self.completion_client = completion_client
        self._init_nodes()
        self._build_workflow()
        self.compiled_app = None

    @classmethod
    def from_settings(cls, settings: Settings, directory: ZipDirectory) -> "TransactionHistoryGraph":
        """Build the graph with live Tavily and chat completion clients."""
        return cls(
            directory=directory,
            search_client=SearchClient(
                domain=settings.search_domain,
                max_results=settings.search_max_results,
            ),
            completion_client=CompletionClient(
                model=settings.completion_model,
                base_url=settings.completion_base_url,
                api_key=settings.completion_api_key,
            ),
        )

    def _init_nodes(self):
        """Initialize all workflow nodes"""
        self.zip_node = ZipNode()
        self.location_node = LocationNode(self.directory)
        self.search_node = SearchNode(self.search_client)
        self.classifier = ClassifierNode(self.completion_client)
        self.follow_link_node = FollowLinkNode(self.search_client)
        self.followup_parser = FollowupParserNode(self.completion_client)
        self.assembler = AssembleNode()

    def _build_workflow(self):
        """Configure the state graph workflow"""
        self.workflow = StateGraph(TransactionHistoryState)

        self.workflow.add_node("extract_zip", self.zip_node.run)
        self.workflow.add_node("resolve_location", self.location_node.run)
        self.workflow.add_node("search_candidates", self.search_node.run)
        self.workflow.add_node("classify_candidate", self.classifier.run)
        self.workflow.add_node("follow_link", self.follow_link_node.run)
        self.workflow.add_node("parse_followup", self.followup_parser.run)
        self.workflow.add_node("assemble", self.assembler.run)

        self.workflow.add_edge(START, "extract_zip")

        # Every step ends the run as soon as it records a failure
        for source, target in (
            ("extract_zip", "resolve_location"),
            ("resolve_location", "search_candidates"),
            ("search_candidates", "classify_candidate"),
            ("follow_link", "parse_followup"),
            ("parse_followup", "assemble"),
        ):
            self.workflow.add_conditional_edges(
                source,
                _continue_to(target),
                {target: target, END: END},
            )

        # Branch on what the first completion pass found
        self.workflow.add_conditional_edges(
            "classify_candidate",
            self._route_classification,
            {"assemble": "assemble", "follow_link": "follow_link", END: END},
        )

        self.workflow.add_edge("assemble", END)

    @staticmethod
    def _route_classification(state: TransactionHistoryState) -> str:
        if state.get("failure"):
            return END

        classification = state["classification"]
        if isinstance(classification, (InlineTransactions, Empty)):
            return "assemble"
        if isinstance(classification, (FollowLink, FollowContent)):
            return "follow_link"
        raise TypeError(f"Unhandled completion result: {classification!r}")

    def compile(self):
        """Compile the workflow and cache the compiled app.

        Returns:
            The compiled workflow app
        """
        if self.compiled_app is None:
            logger.info("Compiling transaction history workflow")
            self.compiled_app = self.workflow.compile()
        return self.compiled_app

    def create_initial_state(self, address: str) -> TransactionHistoryState:
        """Create an initial state for the workflow.

        Returns:
            TransactionHistoryState: The initial state for the workflow
        """
        return TransactionHistoryState(
            address=address,
            zipcode=None,
            search_address=None,
            location=None,
            search_url=None,
            candidate=None,
            classification=None,
            followup_content=None,
            transactions=None,
            result=None,
            failure=None,
            current_step="starting workflow",
        )

    def invoke(self, address: str) -> TransactionHistoryState:
        """Run the workflow and return its final state, failures included."""
        app = self.compile()
        state = self.create_initial_state(address)

        logger.info(f"Starting transaction history workflow for {address}")
        result = app.invoke(state)
        logger.info(f"Transaction history workflow finished: {result.get('current_step')}")
        return result

    def run(self, address: str) -> SearchResult:
        """Run the workflow for one address.

        Args:
            address: Free-text property address including its ZIP code

        Returns:
            The assembled SearchResult

        Raises:
            PropertyHistoryError: The failure that ended the lookup
        """
        if not address or not address.strip():
            raise ValueError("Address must be set before running the workflow")

        result = self.invoke(address)
        if result.get("failure"):
            raise result["failure"]
        return result["result"]
