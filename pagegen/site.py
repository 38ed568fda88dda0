from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from .config import SiteConfig
from .content import PageSummary, extract
from .errors import IoError, SiteError
from .pages import INDEX_FILE, build_index, build_page, output_name
from .render import TemplateRenderer, ensure_dir, read_text, render_markdown

logger = logging.getLogger(__name__)


def list_content_files(content_dir: Path) -> list[Path]:
    """Regular files directly under ``content_dir``, sorted by name.

    Subdirectories are skipped, not descended into.
    """
    try:
        entries = list(content_dir.iterdir())
    except OSError as exc:
        raise IoError(f"Cannot list content directory {content_dir}: {exc}") from exc
    return sorted((path for path in entries if path.is_file()), key=lambda p: p.name)


def check_output_names(files: list[Path]) -> None:
    """Fail before writing anything if two files would produce one page."""
    claimed: dict[str, str] = {INDEX_FILE: "the site index"}
    for path in files:
        name = output_name(path)
        if name in claimed:
            raise IoError(f"Output file {name} would overwrite {claimed[name]}", source=path)
        claimed[name] = path.name


def process_file(
    path: Path,
    output_dir: Path,
    config: SiteConfig,
    engine: TemplateRenderer,
    markdown_renderer: Callable[[str], str] = render_markdown,
) -> PageSummary:
    try:
        record = extract(read_text(path))
        logger.debug("Parsed front matter of %s", path)
        html_fragment = markdown_renderer(record.body)
        _, summary = build_page(path, record, html_fragment, record.title, config, engine, output_dir)
    except SiteError as exc:
        if exc.source is None:
            exc.source = path
        raise
    return summary


def run(
    content_dir: Path,
    output_dir: Path,
    config: SiteConfig,
    engine: TemplateRenderer,
    markdown_renderer: Callable[[str], str] = render_markdown,
) -> list[PageSummary]:
    """Build every page in ``content_dir`` and then the index.

    The first failing file stops the run. Pages written before the failure
    stay in ``output_dir``; the index is only written when every page built.
    """
    ensure_dir(output_dir)
    files = list_content_files(content_dir)
    logger.debug("Found %d content file(s) in %s", len(files), content_dir)
    check_output_names(files)
    summaries = [process_file(path, output_dir, config, engine, markdown_renderer) for path in files]
    build_index(output_dir, config, summaries, engine)
    return summaries
