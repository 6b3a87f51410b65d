from collections.abc import Iterable
from dataclasses import dataclass, field

from arxiv_reader.common.logging import get_logger
from arxiv_reader.data.arxiv.extractor import iter_entry_fragments
from arxiv_reader.data.arxiv.parser import ParserOptions, parse_entry
from arxiv_reader.data.arxiv.schemas import EntryFields, PaperRecord

logger = get_logger(__name__)


@dataclass
class AssemblyResult:
    records: list[PaperRecord] = field(default_factory=list)
    dropped: int = 0

    @property
    def fragments(self) -> int:
        return len(self.records) + self.dropped


def assemble_record(fields: EntryFields) -> PaperRecord | None:
    """Build a record, or return None when identifier or title is empty."""
    if not fields.identifier.strip() or not fields.title.strip():
        return None

    return PaperRecord(
        identifier=fields.identifier,
        title=fields.title,
        summary=fields.summary,
        authors=fields.authors,
        published_at=fields.published,
        updated_at=fields.updated,
        pdf_url=fields.pdf_url,
        web_url=fields.web_url,
        categories=fields.categories,
        primary_category=fields.primary_category,
        doi=fields.doi,
        journal_ref=fields.journal_ref,
        comment=fields.comment,
    )


def assemble_records(entries: Iterable[EntryFields]) -> AssemblyResult:
    """Assemble records in source order, counting entries that fail validation."""
    result = AssemblyResult()

    for fields in entries:
        record = assemble_record(fields)
        if record is None:
            result.dropped += 1
            logger.debug(
                "Dropped entry missing required fields: id=%r title=%r",
                fields.identifier,
                fields.title[:60],
            )
            continue
        result.records.append(record)

    return result


def parse_feed(data: bytes | str, options: ParserOptions | None = None) -> AssemblyResult:
    """
    Run extraction, field parsing and assembly over a whole feed body.

    Raises:
        DecodingError: If the body is not valid UTF-8.
    """
    options = options or ParserOptions()
    fragments = iter_entry_fragments(data)
    return assemble_records(parse_entry(fragment, options) for fragment in fragments)
