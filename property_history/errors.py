"""Exceptions raised along the transaction history pipeline.

Every pipeline failure carries the HTTP status it maps to, so the web layer
can turn it into an error response without knowing where it came from.
"""

from typing import Optional


class PropertyHistoryError(Exception):
    """Base class for all pipeline failures."""

    status_code = 500
    default_message = "Failed to process transactions"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(PropertyHistoryError):
    """Required configuration is missing."""

    default_message = "Missing required configuration"


class InputError(PropertyHistoryError):
    status_code = 400
    default_message = "Could not extract zipcode from address"


class LocationLookupError(PropertyHistoryError):
    status_code = 404
    default_message = "County information not found for this zipcode"


class DirectoryUnavailableError(PropertyHistoryError):
    default_message = "Failed to load ZIP code database"


class DirectoryNotLoadedError(PropertyHistoryError):
    default_message = "ZIP database not initialized"


class UpstreamSearchError(PropertyHistoryError):
    default_message = "Property search request failed"


class NoCandidateError(UpstreamSearchError):
    status_code = 404
    default_message = "No property records found for this address"


class UpstreamExtractError(PropertyHistoryError):
    default_message = "No content extracted from the link"


class NoMatchingLinkError(PropertyHistoryError):
    default_message = "No matching link found for the search address"


class CompletionRequestError(PropertyHistoryError):
    default_message = "AI model request failed"


class CompletionParseError(PropertyHistoryError):
    default_message = "Failed to parse AI response as JSON"


class UnknownResponseShapeError(PropertyHistoryError):
    default_message = "Unrecognized AI response type"
