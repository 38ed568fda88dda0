from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from .config import SiteConfig, load_config
from .content import PageSummary
from .errors import SiteError
from .render import TemplateEngine
from .site import run

logger = logging.getLogger(__name__)


def optional_path(value: Optional[str]) -> Optional[Path]:
    if not value:
        return None
    return Path(value).expanduser().resolve()


def build_site(args: argparse.Namespace) -> tuple[SiteConfig, list[PageSummary]]:
    config = load_config(Path(args.config)).with_overrides(
        content=optional_path(args.content),
        output=optional_path(args.output),
        templates=optional_path(args.templates),
    )
    engine = TemplateEngine(
        config.templates_location,
        theme=config.theme,
        required=(config.page_template, config.index_template),
    )
    summaries = run(config.content_location, config.output_location, config, engine)
    return config, summaries


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build static HTML pages and an index from Markdown files.")
    parser.add_argument("--config", default="site.toml", help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("--content", default="", help="Directory containing Markdown content (overrides config).")
    parser.add_argument("--output", default="", help="Output directory for the site (overrides config).")
    parser.add_argument("--templates", default="", help="Directory containing Jinja2 templates (overrides config).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every build step.")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    start = time.perf_counter()
    try:
        config, summaries = build_site(args)
    except SiteError as exc:
        logger.debug("Build failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    elapsed = time.perf_counter() - start
    print(f"Build completed in {elapsed:.2f}s.")
    print(f"Site generated in: {config.output_location} ({len(summaries)} page(s))")


if __name__ == "__main__":
    main()
