from __future__ import annotations

import logging
from pathlib import Path

from .config import SiteConfig
from .content import ContentRecord, PageSummary
from .render import TemplateRenderer, write_text
from .utils import join_url

logger = logging.getLogger(__name__)

PAGE_SUFFIX = ".html"
INDEX_FILE = "index.html"


def output_name(source: Path) -> str:
    """Output file name for ``source``: its base name with ``.html``."""
    return f"{source.stem}{PAGE_SUFFIX}"


def page_context(record: ContentRecord, html_fragment: str, title: str, config: SiteConfig, name: str) -> dict:
    return {
        "title": title,
        "site_title": config.site_title,
        "content": html_fragment,
        "base_url": config.base_url,
        "theme": config.theme,
        "url": join_url(config.base_url, name),
        "page": record.metadata(),
    }


def build_page(
    source: Path,
    record: ContentRecord,
    html_fragment: str,
    title: str,
    config: SiteConfig,
    engine: TemplateRenderer,
    output_dir: Path,
) -> tuple[str, PageSummary]:
    """Render one page, write it to ``output_dir`` and summarize it.

    The summary's ``path`` is only assigned once the file is on disk.
    """
    name = output_name(source)
    context = page_context(record, html_fragment, title, config, name)
    rendered = engine.render(config.page_template, context)
    write_text(output_dir / name, rendered)
    logger.info("Wrote %s", output_dir / name)
    return rendered, record.summarize(name)


def index_context(config: SiteConfig, summaries: list[PageSummary]) -> dict:
    pages = []
    for summary in summaries:
        entry = summary.as_dict()
        entry["url"] = join_url(config.base_url, summary.path)
        pages.append(entry)
    return {
        "site_title": config.site_title,
        "base_url": config.base_url,
        "theme": config.theme,
        "pages": pages,
    }


def build_index(output_dir: Path, config: SiteConfig, summaries: list[PageSummary], engine: TemplateRenderer) -> str:
    rendered = engine.render(config.index_template, index_context(config, summaries))
    write_text(output_dir / INDEX_FILE, rendered)
    logger.info("Wrote %s with %d page(s)", output_dir / INDEX_FILE, len(summaries))
    return rendered
