"""Field extraction for a single Atom entry fragment.

Every field is extracted independently and tolerates absence: a missing or
malformed field yields its empty value instead of raising. Functions here are
pure; no state survives between calls.
"""

import re
import xml.etree.ElementTree as ET
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from urllib.parse import urlsplit

from arxiv_reader.common.logging import get_logger
from arxiv_reader.common.settings import ArxivSettings
from arxiv_reader.data.arxiv.constants import (
    ALTERNATE_REL,
    HTML_MIME_TYPE,
    PDF_MIME_TYPE,
    LinkKind,
)
from arxiv_reader.data.arxiv.errors import ParsingError
from arxiv_reader.data.arxiv.schemas import EntryFields

logger = get_logger(__name__)

# XML namespaces for Atom feed parsing
_ATOM_NS = {
    "atom": "http://www.w3.org/2005/Atom",
    "arxiv": "http://arxiv.org/schemas/atom",
    "opensearch": "http://a9.com/-/spec/opensearch/1.1/",
}

# Fragments are cut out of the feed, so they lose the namespace declarations
# made on <feed>; they are re-parsed inside an equivalent root.
_FRAGMENT_ROOT = (
    '<feed xmlns="{atom}" xmlns:arxiv="{arxiv}" xmlns:opensearch="{opensearch}">'.format(
        **_ATOM_NS
    )
)

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class ParserOptions:
    """
    Normalization switches.

    Attributes:
        normalize_whitespace: Collapse internal whitespace runs in title and
            summary. When False, only leading/trailing whitespace is trimmed.
        empty_authors_placeholder: Value used when an entry has no author
            names. Use "" to keep the author field empty.
    """

    normalize_whitespace: bool = True
    empty_authors_placeholder: str = "Unknown"

    @classmethod
    def from_settings(cls, settings: ArxivSettings) -> "ParserOptions":
        return cls(
            normalize_whitespace=settings.normalize_whitespace,
            empty_authors_placeholder=settings.empty_authors_placeholder,
        )


def parse_entry(fragment: str | bytes, options: ParserOptions | None = None) -> EntryFields:
    """
    Extract typed fields from one ``<entry>`` fragment.

    A fragment that is not well-formed XML yields all-empty fields, which the
    assembler then drops.

    Args:
        fragment: Entry markup as produced by the extractor.
        options: Normalization options; defaults to ``ParserOptions()``.

    Returns:
        EntryFields with empty defaults for every absent field.

    Raises:
        ParsingError: If a bytes fragment is not valid UTF-8.
    """
    options = options or ParserOptions()
    entry_el = _parse_fragment(_decode_fragment(fragment))

    pdf_url, web_url = _extract_links(entry_el)

    return EntryFields(
        identifier=parse_identifier(_find_text(entry_el, "atom:id")),
        title=normalize_text(_find_text(entry_el, "atom:title"), options.normalize_whitespace),
        summary=normalize_text(_find_text(entry_el, "atom:summary"), options.normalize_whitespace),
        authors=_extract_authors(entry_el) or options.empty_authors_placeholder,
        published=parse_datetime(_find_text(entry_el, "atom:published")) or datetime.now(UTC),
        updated=parse_datetime(_find_text(entry_el, "atom:updated")),
        pdf_url=pdf_url,
        web_url=web_url,
        categories=", ".join(_extract_category_terms(entry_el)),
        primary_category=_primary_category(entry_el),
        doi=_find_text(entry_el, "arxiv:doi") or None,
        journal_ref=normalize_text(_find_text(entry_el, "arxiv:journal_ref"), True) or None,
        comment=normalize_text(_find_text(entry_el, "arxiv:comment"), True) or None,
    )


def parse_identifier(raw_id: str) -> str:
    """Drop everything up to and including the last '/' of an entry id."""
    return raw_id.rsplit("/", 1)[-1].strip()


def normalize_text(value: str, collapse_whitespace: bool) -> str:
    if collapse_whitespace:
        return _WHITESPACE_RE.sub(" ", value).strip()
    return value.strip()


def parse_datetime(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp (``Z`` or offset suffix) to UTC, or None."""
    value = value.strip()
    if not value:
        return None

    try:
        if value.endswith("Z"):
            dt = datetime.fromisoformat(value[:-1]).replace(tzinfo=UTC)
        else:
            dt = datetime.fromisoformat(value)
    except ValueError:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


# Link kind detection: the explicit type attribute is checked first, then the
# kind is inferred from rel/address.


def _kind_from_type_attribute(attrs: dict[str, str]) -> LinkKind | None:
    link_type = attrs.get("type", "").strip().lower()
    if link_type == PDF_MIME_TYPE:
        return LinkKind.PDF
    if link_type == HTML_MIME_TYPE:
        return LinkKind.HTML
    return None


def _kind_from_address(attrs: dict[str, str]) -> LinkKind | None:
    href = attrs.get("href", "")
    path = urlsplit(href).path.lower()
    if path.endswith(".pdf") or "/pdf/" in path:
        return LinkKind.PDF
    if attrs.get("rel", "").strip().lower() == ALTERNATE_REL:
        return LinkKind.HTML
    return None


_LINK_KIND_STRATEGIES: tuple[Callable[[dict[str, str]], LinkKind | None], ...] = (
    _kind_from_type_attribute,
    _kind_from_address,
)


def resolve_link_kind(attrs: dict[str, str]) -> LinkKind:
    for strategy in _LINK_KIND_STRATEGIES:
        kind = strategy(attrs)
        if kind is not None:
            return kind
    return LinkKind.OTHER


def _extract_links(entry_el: ET.Element | None) -> tuple[str, str]:
    """Return (pdf_url, web_url); later links of the same kind overwrite earlier ones."""
    pdf_url = ""
    web_url = ""
    if entry_el is None:
        return pdf_url, web_url

    for link in entry_el.findall("atom:link", _ATOM_NS):
        href = link.attrib.get("href", "").strip()
        if not href:
            continue

        kind = resolve_link_kind(dict(link.attrib))
        if kind is LinkKind.PDF:
            pdf_url = href
        elif kind is LinkKind.HTML:
            web_url = href

    return pdf_url, web_url


def _extract_authors(entry_el: ET.Element | None) -> str:
    if entry_el is None:
        return ""

    names = [
        _text(name)
        for author in entry_el.findall("atom:author", _ATOM_NS)
        for name in author.findall("atom:name", _ATOM_NS)
        if _text(name)
    ]
    return ", ".join(names)


def _extract_category_terms(entry_el: ET.Element | None) -> list[str]:
    if entry_el is None:
        return []

    return [
        c.attrib["term"].strip()
        for c in entry_el.findall("atom:category", _ATOM_NS)
        if c.attrib.get("term", "").strip()
    ]


def _primary_category(entry_el: ET.Element | None) -> str | None:
    if entry_el is None:
        return None

    primary_el = entry_el.find("arxiv:primary_category", _ATOM_NS)
    if primary_el is None:
        return None
    return primary_el.attrib.get("term", "").strip() or None


def _parse_fragment(text: str) -> ET.Element | None:
    try:
        root = ET.fromstring(f"{_FRAGMENT_ROOT}{text}</feed>")
    except ET.ParseError as e:
        logger.debug("Entry fragment is not well-formed XML: %s", e)
        return None
    return root.find("atom:entry", _ATOM_NS)


def _find_text(entry_el: ET.Element | None, path: str) -> str:
    if entry_el is None:
        return ""
    return _text(entry_el.find(path, _ATOM_NS))


def _text(element: ET.Element | None) -> str:
    """Extract text content from XML element."""
    return "".join(element.itertext()).strip() if element is not None else ""


def _decode_fragment(fragment: str | bytes) -> str:
    if isinstance(fragment, str):
        return fragment
    try:
        return fragment.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ParsingError(f"Entry fragment is not valid UTF-8: {e}") from e
