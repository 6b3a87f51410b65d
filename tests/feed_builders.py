"""Builders for Atom feed markup shaped like arXiv API responses."""

FEED_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<feed xmlns="http://www.w3.org/2005/Atom" '
    'xmlns:opensearch="http://a9.com/-/spec/opensearch/1.1/" '
    'xmlns:arxiv="http://arxiv.org/schemas/atom">\n'
    "  <title>arXiv Query</title>\n"
    "  <id>https://arxiv.org/api/abc123</id>\n"
    "  <updated>2023-10-02T00:00:00Z</updated>\n"
)


def make_entry(
    arxiv_id: str | None = "2310.00001v1",
    title: str | None = "Example Title",
    summary: str | None = "An example abstract.",
    authors: list[str] | None = None,
    published: str | None = "2023-10-01T00:00:00Z",
    updated: str | None = "2023-10-02T12:30:00Z",
    links: list[str] | None = None,
    categories: list[str] | None = None,
    extra: str = "",
) -> str:
    parts = ["  <entry>"]
    if arxiv_id is not None:
        parts.append(f"    <id>http://arxiv.org/abs/{arxiv_id}</id>")
    if updated is not None:
        parts.append(f"    <updated>{updated}</updated>")
    if published is not None:
        parts.append(f"    <published>{published}</published>")
    if title is not None:
        parts.append(f"    <title>{title}</title>")
    if summary is not None:
        parts.append(f"    <summary>{summary}</summary>")
    for name in ["A. Researcher"] if authors is None else authors:
        parts.append(f"    <author>\n      <name>{name}</name>\n    </author>")
    if links is None:
        links = [
            f'<link href="http://arxiv.org/abs/{arxiv_id}" rel="alternate" type="text/html"/>',
            f'<link title="pdf" href="http://arxiv.org/pdf/{arxiv_id}" rel="related" type="application/pdf"/>',
        ]
    parts.extend(f"    {link}" for link in links)
    for term in ["cs.LG"] if categories is None else categories:
        parts.append(f'    <category term="{term}" scheme="http://arxiv.org/schemas/atom"/>')
    if extra:
        parts.append(f"    {extra}")
    parts.append("  </entry>")
    return "\n".join(parts)


def make_feed(*entries: str, total_results: int | None = None) -> bytes:
    total = len(entries) if total_results is None else total_results
    body = (
        FEED_HEADER
        + f"  <opensearch:totalResults>{total}</opensearch:totalResults>\n"
        + "  <opensearch:startIndex>0</opensearch:startIndex>\n"
        + "\n".join(entries)
        + "\n</feed>\n"
    )
    return body.encode("utf-8")


EMPTY_FEED = make_feed()
