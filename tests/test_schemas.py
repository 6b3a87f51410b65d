from datetime import UTC, datetime

from feed_builders import make_entry

from arxiv_reader.data.arxiv.assembler import assemble_record
from arxiv_reader.data.arxiv.parser import parse_entry
from arxiv_reader.data.arxiv.schemas import PaperRecord


def _record() -> PaperRecord:
    record = assemble_record(parse_entry(make_entry()))
    assert record is not None
    return record


def test_set_favorite_sets_and_clears_timestamp() -> None:
    record = _record()
    marked_at = datetime(2024, 1, 2, 3, 4, tzinfo=UTC)

    record.set_favorite(True, at=marked_at)
    assert record.is_favorite is True
    assert record.favorited_at == marked_at

    record.set_favorite(False)
    assert record.is_favorite is False
    assert record.favorited_at is None


def test_set_favorite_defaults_to_now() -> None:
    record = _record()
    before = datetime.now(UTC)

    record.set_favorite(True)

    assert record.favorited_at is not None
    assert record.favorited_at >= before


def test_to_dict() -> None:
    record = _record()
    record.set_favorite(True, at=datetime(2024, 1, 1, tzinfo=UTC))

    data = record.to_dict()

    assert data["identifier"] == "2310.00001v1"
    assert data["published_at"] == "2023-10-01T00:00:00+00:00"
    assert data["updated_at"] == "2023-10-02T12:30:00+00:00"
    assert data["is_favorite"] is True
    assert data["favorited_at"] == "2024-01-01T00:00:00+00:00"


def test_marking_an_existing_favorite_keeps_first_timestamp() -> None:
    record = _record()
    first = datetime(2024, 1, 1, tzinfo=UTC)

    record.set_favorite(True, at=first)
    record.set_favorite(True, at=datetime(2025, 1, 1, tzinfo=UTC))

    assert record.favorited_at == first

    record.set_favorite(False)
    record.set_favorite(True, at=datetime(2025, 6, 1, tzinfo=UTC))

    assert record.favorited_at == datetime(2025, 6, 1, tzinfo=UTC)
