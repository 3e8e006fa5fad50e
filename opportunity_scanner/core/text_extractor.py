"""
Text Extractor component for the Opportunity Scanner service.

Turns fetched HTML into the plain visible text that is handed to the model.
"""
import logging
from typing import Union

from bs4 import BeautifulSoup

from opportunity_scanner.core.exceptions import ParseError

logger = logging.getLogger(__name__)

NON_VISIBLE_TAGS = ["script", "style", "noscript", "template"]


def extract_visible_text(markup: Union[str, bytes]) -> str:
    """
    Returns the visible text of the document body with whitespace collapsed.

    Falls back to the whole document when the markup has no ``<body>``.
    No length cap is applied.

    Raises:
        ParseError: If the markup is not text or cannot be parsed.
    """
    if not isinstance(markup, (str, bytes)):
        raise ParseError(f"Cannot parse markup of type {type(markup).__name__}")

    try:
        soup = BeautifulSoup(markup, "html.parser")
        for tag in soup(NON_VISIBLE_TAGS):
            tag.decompose()
        root = soup.body if soup.body is not None else soup
        text = root.get_text(separator=" ")
    except Exception as e:
        logger.error(f"Failed to parse markup: {e}")
        raise ParseError(f"Failed to parse markup: {e}", original_error=e) from e

    normalized = " ".join(text.split())
    logger.debug(f"Extracted {len(normalized)} chars of visible text")
    return normalized
