from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class EntryFields:
    """Fields extracted from one feed entry, before validation."""

    identifier: str
    title: str
    summary: str
    authors: str
    published: datetime
    updated: datetime | None
    pdf_url: str
    web_url: str
    categories: str
    primary_category: str | None = None
    doi: str | None = None
    journal_ref: str | None = None
    comment: str | None = None


@dataclass(slots=True)
class PaperRecord:
    """Assembled paper, the unit handed to downstream collaborators.

    Favorite state is changed only through ``set_favorite`` so that
    ``favorited_at`` is set exactly when ``is_favorite`` is true.
    """

    identifier: str
    title: str
    summary: str
    authors: str
    published_at: datetime
    updated_at: datetime | None
    pdf_url: str
    web_url: str
    categories: str
    primary_category: str | None = None
    doi: str | None = None
    journal_ref: str | None = None
    comment: str | None = None
    _favorited_at: datetime | None = field(default=None, init=False, repr=False)

    @property
    def is_favorite(self) -> bool:
        return self._favorited_at is not None

    @property
    def favorited_at(self) -> datetime | None:
        return self._favorited_at

    def set_favorite(self, favorite: bool, at: datetime | None = None) -> None:
        """Mark or unmark as favorite; an existing favorite keeps its original timestamp."""
        if not favorite:
            self._favorited_at = None
        elif self._favorited_at is None:
            self._favorited_at = at or datetime.now(UTC)

    def to_dict(self) -> dict[str, Any]:
        return {
            "identifier": self.identifier,
            "title": self.title,
            "summary": self.summary,
            "authors": self.authors,
            "published_at": self.published_at.isoformat(),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "pdf_url": self.pdf_url,
            "web_url": self.web_url,
            "categories": self.categories,
            "primary_category": self.primary_category,
            "doi": self.doi,
            "journal_ref": self.journal_ref,
            "comment": self.comment,
            "is_favorite": self.is_favorite,
            "favorited_at": self.favorited_at.isoformat() if self.favorited_at else None,
        }
