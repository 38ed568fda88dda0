from __future__ import annotations

import html
import logging
from pathlib import Path
from typing import Iterable, Protocol

import markdown
from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError, select_autoescape

from .errors import IoError, RenderError, TemplateInitError

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "codehilite"]
MARKDOWN_EXTENSION_CONFIGS = {"codehilite": {"guess_lang": False}}
TEMPLATE_EXTENSIONS = ("html", "htm", "xml", "j2", "jinja")


def render_markdown(text: str) -> str:
    """Convert a Markdown body into an HTML fragment.

    Never raises for string input: anything the parser does not recognise
    is emitted as text, and input nested too deeply for the parser is
    emitted as one escaped paragraph. Non-empty output ends with a single
    newline.
    """
    md = markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs=MARKDOWN_EXTENSION_CONFIGS,
    )
    try:
        html_text = md.convert(text)
    except RecursionError:
        logger.warning("Markdown nested too deeply, rendering it as plain text")
        html_text = f"<p>{html.escape(text)}</p>" if text.strip() else ""
    if not html_text:
        return ""
    return html_text.rstrip("\n") + "\n"


class TemplateRenderer(Protocol):
    def render(self, name: str, context: dict) -> str: ...


def template_search_path(templates_dir: Path, theme: str = "") -> list[Path]:
    if not templates_dir.is_dir():
        raise TemplateInitError(f"Templates directory not found: {templates_dir}")
    if not theme:
        return [templates_dir]
    theme_dir = templates_dir / theme
    if not theme_dir.is_dir():
        raise TemplateInitError(f"Theme '{theme}' not found in {templates_dir}")
    return [theme_dir, templates_dir]


class TemplateEngine:
    """Jinja2 environment with every template compiled up front.

    Construction fails with ``TemplateInitError`` when the templates
    directory or theme is missing, a template does not compile, or one of
    the ``required`` names cannot be found.
    """

    def __init__(self, templates_dir: Path, theme: str = "", required: Iterable[str] = ()) -> None:
        self.search_path = template_search_path(templates_dir, theme)
        self.env = Environment(
            loader=FileSystemLoader([str(path) for path in self.search_path]),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        names = self.env.list_templates(extensions=TEMPLATE_EXTENSIONS)
        for name in [*names, *required]:
            self.load(name)
        logger.debug("Compiled %d template(s) from %s", len(names), templates_dir)

    def load(self, name: str):
        try:
            return self.env.get_template(name)
        except (TemplateError, OSError, UnicodeDecodeError) as exc:
            raise TemplateInitError(f"Cannot load template '{name}': {exc}") from exc

    def render(self, name: str, context: dict) -> str:
        try:
            return self.env.get_template(name).render(context)
        except Exception as exc:  # template code can raise arbitrary errors
            raise RenderError(f"Template '{name}' failed to render: {exc}") from exc


def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise IoError(f"Cannot read {path}: {exc}") from exc


def write_text(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise IoError(f"Cannot write {path}: {exc}") from exc


def ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IoError(f"Cannot create output directory {path}: {exc}") from exc
