import fire

from arxiv_reader.cli.feed import fetch_papers, search_papers, watch_papers
from arxiv_reader.common.logging import setup_logging
from arxiv_reader.common.settings import get_settings


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_json)
    fire.Fire(
        {
            "fetch": fetch_papers,
            "search": search_papers,
            "watch": watch_papers,
        }
    )
