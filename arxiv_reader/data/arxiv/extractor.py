"""Split raw Atom feed bytes into per-entry markup fragments."""

import re
from collections.abc import Iterator

from arxiv_reader.common.logging import get_logger
from arxiv_reader.data.arxiv.errors import DecodingError

logger = get_logger(__name__)

# Shortest span from an entry start tag to the next closing tag, across lines.
_ENTRY_RE = re.compile(r"<entry(?:\s[^>]*)?>.*?</entry>", re.DOTALL)
_TOTAL_RESULTS_RE = re.compile(
    r"<opensearch:totalResults(?:\s[^>]*)?>\s*(\d+)\s*</opensearch:totalResults>"
)


def decode_feed(data: bytes | str) -> str:
    """
    Decode feed bytes as UTF-8 text.

    Raises:
        DecodingError: If the buffer is not valid UTF-8.
    """
    if isinstance(data, str):
        return data

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodingError(f"Feed is not valid UTF-8: {e}") from e


def iter_entry_fragments(data: bytes | str) -> Iterator[str]:
    """
    Yield every ``<entry>...</entry>`` fragment of a feed in document order.

    Decoding happens eagerly so that undecodable input fails on call rather
    than on first iteration. A feed without entries yields nothing.

    Raises:
        DecodingError: If the buffer is not valid UTF-8.
    """
    text = decode_feed(data)
    return (match.group(0) for match in _ENTRY_RE.finditer(text))


def extract_total_results(data: bytes | str) -> int | None:
    """Return the feed's opensearch total, or None when the feed omits it."""
    match = _TOTAL_RESULTS_RE.search(decode_feed(data))
    if match is None:
        return None
    return int(match.group(1))
