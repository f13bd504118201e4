import logging
import re
from typing import Iterator, Optional, Tuple
from urllib.parse import unquote_plus

from .address import normalize_for_comparison, normalize_link_text

logger = logging.getLogger(__name__)

# Markdown hyperlink pointing at an assessor record page, e.g.
# [8 LYNNBROOK ROAD](https://gis.vgsi.com/fairfieldct/Parcel.aspx?pid=2271)
RECORD_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)\s]*parcel\.aspx[^)\s]*)\)", re.IGNORECASE)

# House number followed by the street name, with an optional road suffix
_HOUSE_AND_STREET = re.compile(r"^(\d+)\s+(.+?)(?:\s+(?:road|rd))?$")


def iter_record_links(markup: str) -> Iterator[Tuple[str, str]]:
    """Yield (anchor text, url) for every record-detail link in the markup."""
    for match in RECORD_LINK_PATTERN.finditer(markup or ""):
        yield match.group(1), match.group(2)


def find_record_link(search_address: str, markup: str) -> Optional[Tuple[str, str]]:
    """Find the record-detail link whose anchor text is the searched address.

    Returns (anchor text, url), with the anchor text URL-decoded, or None.

    Anchors are compared in canonical form, which absorbs case, "+" and "%20"
    encodings and the Road/Rd spelling. When no anchor matches exactly, the
    first link whose anchor starts with the same house number and street
    name is returned instead.
    """
    target = normalize_for_comparison(search_address)
    if not target or not markup:
        return None

    for text, url in iter_record_links(markup):
        if normalize_link_text(text) == target:
            logger.info(f"Found record link for '{text}': {url}")
            return unquote_plus(text).strip(), url

    parts = _HOUSE_AND_STREET.match(target)
    if not parts:
        return None

    house_number, street_name = parts.groups()
    street = r"\s+".join(re.escape(word) for word in street_name.split())
    loose_pattern = re.compile(
        rf"\[({house_number}\s+{street}[^\]]*)\]\(([^)\s]*parcel\.aspx[^)\s]*)\)",
        re.IGNORECASE,
    )
    match = loose_pattern.search(markup)
    if match:
        logger.info(f"Found record link by house number and street: {match.group(2)}")
        return unquote_plus(match.group(1)).strip(), match.group(2)
    return None
