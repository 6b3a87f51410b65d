from datetime import UTC, datetime

from feed_builders import make_entry, make_feed

from arxiv_reader.data.arxiv.assembler import assemble_record, assemble_records, parse_feed
from arxiv_reader.data.arxiv.parser import parse_entry


def test_example_record() -> None:
    entry = make_entry(
        arxiv_id="2310.00001v1",
        title="Example Title",
        authors=["A. Researcher"],
        published="2023-10-01T00:00:00Z",
        links=['<link type="application/pdf" href="http://example.org/pdf/2310.00001"/>'],
    ).replace("http://arxiv.org/abs/2310.00001v1", "http://example.org/abs/2310.00001v1")

    result = parse_feed(make_feed(entry))

    assert result.dropped == 0
    assert len(result.records) == 1
    record = result.records[0]
    assert record.identifier == "2310.00001v1"
    assert record.title == "Example Title"
    assert record.authors == "A. Researcher"
    assert record.published_at == datetime(2023, 10, 1, tzinfo=UTC)
    assert record.pdf_url == "http://example.org/pdf/2310.00001"
    assert record.web_url == ""
    assert record.is_favorite is False
    assert record.favorited_at is None


def test_entry_missing_identifier_is_dropped() -> None:
    assert assemble_record(parse_entry(make_entry(arxiv_id=None))) is None


def test_entry_missing_title_is_dropped() -> None:
    assert assemble_record(parse_entry(make_entry(title=None))) is None
    assert assemble_record(parse_entry(make_entry(title="  \n  "))) is None


def test_dropped_entries_are_counted_and_order_kept() -> None:
    feed = make_feed(
        make_entry("2310.00001v1", title="One"),
        make_entry(None, title="No id"),
        make_entry("2310.00003v1", title="Three"),
        make_entry("2310.00004v1", title=None),
        make_entry("2310.00005v1", title="Five"),
    )

    result = parse_feed(feed)

    assert [r.identifier for r in result.records] == [
        "2310.00001v1",
        "2310.00003v1",
        "2310.00005v1",
    ]
    assert result.dropped == 2
    assert result.fragments == 5


def test_each_invalid_entry_adds_exactly_one_drop() -> None:
    valid = parse_entry(make_entry())
    invalid = parse_entry(make_entry(title=None))

    assert assemble_records([valid]).dropped == 0
    assert assemble_records([valid, invalid]).dropped == 1
    assert assemble_records([invalid, valid, invalid]).dropped == 2


def test_empty_feed_is_not_an_error() -> None:
    result = parse_feed(make_feed())

    assert result.records == []
    assert result.dropped == 0


def test_malformed_entry_is_dropped_and_counted() -> None:
    broken = "  <entry>\n    <id>http://arxiv.org/abs/2310.00009v1</id>\n    <title>Oops</entry>"
    feed = make_feed(make_entry("2310.00001v1"), broken, make_entry("2310.00002v1"))

    result = parse_feed(feed)

    assert [r.identifier for r in result.records] == ["2310.00001v1", "2310.00002v1"]
    assert result.dropped == 1
