from enum import StrEnum


class Category(StrEnum):
    LATEST = "latest"
    CS = "cs"
    MATH = "math"
    PHYSICS = "physics"
    Q_BIO = "q-bio"
    Q_FIN = "q-fin"
    STAT = "stat"
    EESS = "eess"
    ECON = "econ"
    SEARCH = "search"

    @property
    def is_subject(self) -> bool:
        return self not in (Category.LATEST, Category.SEARCH)


class SortBy(StrEnum):
    SUBMITTED_DATE = "submittedDate"
    LAST_UPDATED_DATE = "lastUpdatedDate"


class LinkKind(StrEnum):
    PDF = "pdf"
    HTML = "html"
    OTHER = "other"


SUBJECT_CATEGORIES: tuple[Category, ...] = tuple(c for c in Category if c.is_subject)

# Upstream per-request maximum for max_results.
MAX_RESULTS_LIMIT = 2000

SORT_ORDER = "descending"

# "latest" cascade: broad multi-archive query, then high-traffic ML subjects,
# then a single subject as last resort.
LATEST_PRIMARY_PREFIXES: tuple[str, ...] = ("cs.*", "stat.*", "math.*")
LATEST_SECONDARY_PREFIXES: tuple[str, ...] = ("cs.LG", "cs.AI", "cs.CV")
LATEST_TERTIARY_PREFIXES: tuple[str, ...] = ("cs.LG",)

PDF_MIME_TYPE = "application/pdf"
HTML_MIME_TYPE = "text/html"
ALTERNATE_REL = "alternate"
