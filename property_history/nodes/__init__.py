from .zip_node import ZipNode
from .location_node import LocationNode
from .search_node import SearchNode
from .classifier_node import ClassifierNode
from .follow_link_node import FollowLinkNode
from .followup_parser_node import FollowupParserNode
from .assemble_node import AssembleNode

__all__ = [
    "ZipNode",
    "LocationNode",
    "SearchNode",
    "ClassifierNode",
    "FollowLinkNode",
    "FollowupParserNode",
    "AssembleNode",
]
