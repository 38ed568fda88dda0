from __future__ import annotations

import json
import logging
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("site_title", "base_url", "theme", "content_location", "output_location")
OPTIONAL_KEYS = {
    "templates_location": "templates",
    "page_template": "template.html",
    "index_template": "index.html",
}
NON_EMPTY_KEYS = {"site_title", "content_location", "output_location", "page_template", "index_template"}


@dataclass(frozen=True)
class SiteConfig:
    """Site-wide settings, loaded once and passed to every build step."""

    site_title: str
    base_url: str
    theme: str
    content_location: Path
    output_location: Path
    templates_location: Path = Path("templates")
    page_template: str = "template.html"
    index_template: str = "index.html"

    def with_overrides(
        self,
        content: Optional[Path] = None,
        output: Optional[Path] = None,
        templates: Optional[Path] = None,
    ) -> SiteConfig:
        changes = {}
        if content is not None:
            changes["content_location"] = content
        if output is not None:
            changes["output_location"] = output
        if templates is not None:
            changes["templates_location"] = templates
        return replace(self, **changes) if changes else self


def read_config_data(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    suffix = path.suffix.lower()
    if suffix == ".toml":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping: {path}")
    return data


def config_str(data: dict, key: str, path: Path) -> str:
    value = data.get(key, OPTIONAL_KEYS.get(key))
    if value is None:
        raise ConfigError(f"Missing required setting '{key}' in {path}")
    if not isinstance(value, str):
        raise ConfigError(f"Setting '{key}' must be a string in {path}, got {type(value).__name__}")
    if key in NON_EMPTY_KEYS and not value.strip():
        raise ConfigError(f"Setting '{key}' must not be empty in {path}")
    return value


def resolve_location(value: str, base_dir: Path) -> Path:
    location = Path(value).expanduser()
    if not location.is_absolute():
        location = base_dir / location
    return location


def load_config(path: Path) -> SiteConfig:
    """Load and validate the settings file at ``path``.

    Locations in the file are resolved against the directory that holds it.
    Any problem with the file raises ``ConfigError``.
    """
    data = read_config_data(path)
    values = {key: config_str(data, key, path) for key in (*REQUIRED_KEYS, *OPTIONAL_KEYS)}
    base_dir = path.resolve().parent
    config = SiteConfig(
        site_title=values["site_title"],
        base_url=values["base_url"],
        theme=values["theme"].strip(),
        content_location=resolve_location(values["content_location"], base_dir),
        output_location=resolve_location(values["output_location"], base_dir),
        templates_location=resolve_location(values["templates_location"], base_dir),
        page_template=values["page_template"],
        index_template=values["index_template"],
    )
    logger.debug("Loaded config from %s", path)
    return config
