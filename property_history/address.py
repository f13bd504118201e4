"""Address helpers: ZIP extraction and a single canonical form for comparisons.

Every comparison between a searched address and text found upstream (search
snippets, link anchors, completion output) goes through the same
canonicalization, so spelling variants such as "Road"/"RD" or "8+LYNNBROOK"
only have to be handled here.
"""
import re
from typing import Optional
from urllib.parse import unquote_plus

ZIP_PATTERN = re.compile(r"\b\d{5}(?:-\d{4})?\b")
# The ZIP together with the comma and spacing that separate it from the street
ZIP_WITH_SEPARATOR = re.compile(r",?\s*\b\d{5}(?:-\d{4})?\b")

_WHITESPACE = re.compile(r"\s+")
_TRAILING_ROAD = re.compile(r"\s+road$")
_ROAD_WORD = re.compile(r"\broad\b")


def extract_zip(address: str) -> Optional[str]:
    """Return the first 5-digit (or ZIP+4) code in the address, or None."""
    match = ZIP_PATTERN.search(address or "")
    return match.group(0) if match else None


def strip_zip(address: str) -> str:
    """Remove the ZIP code (and a preceding comma) from the address."""
    return ZIP_WITH_SEPARATOR.sub("", address or "", count=1).strip()


def normalize_for_comparison(address: str) -> str:
    """Canonical form of a street address, for equality checks only.

    Lower-cased, whitespace collapsed, cut at the first comma and with a
    trailing "road" spelled "rd".
    """
    text = _WHITESPACE.sub(" ", (address or "").lower())
    text = text.split(",", 1)[0].strip()
    return _TRAILING_ROAD.sub(" rd", text)


def normalize_link_text(text: str) -> str:
    """Canonical form of a hyperlink anchor, which may be URL-encoded."""
    return normalize_for_comparison(unquote_plus(text or ""))


def canonical_text(text: str) -> str:
    """Apply the address spelling rules to free page text."""
    text = _WHITESPACE.sub(" ", (text or "").lower())
    return _ROAD_WORD.sub("rd", text)


def addresses_match(first: str, second: str) -> bool:
    return normalize_for_comparison(first) == normalize_for_comparison(second)


def content_mentions(content: str, address: str) -> bool:
    """True when the page text contains the address in any spelling variant."""
    needle = canonical_text(normalize_for_comparison(address))
    if not needle:
        return False
    return needle in canonical_text(content)


def zip5(zipcode: str) -> str:
    """The 5-digit prefix of a ZIP or ZIP+4 code."""
    return zipcode.split("-", 1)[0]
