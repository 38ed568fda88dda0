from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import yaml

from .errors import MetadataError

DELIMITER = "---"
RECORD_FIELDS = ("title", "description", "tags", "related", "publish_date", "numeric_attributes")
FIELD_ALIASES = {
    "similar_posts": "related",
    "date": "publish_date",
    "favorite_numbers": "numeric_attributes",
}
TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class FrontMatterLoader(yaml.SafeLoader):
    """Safe loader that leaves timestamps as plain strings."""


FrontMatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


@dataclass(frozen=True)
class PageSummary:
    title: str
    description: str
    tags: tuple[str, ...]
    related: tuple[str, ...]
    publish_date: str
    numeric_attributes: tuple[float, ...]
    path: str

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("PageSummary requires the path of a written page")

    def as_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
            "related": list(self.related),
            "publish_date": self.publish_date,
            "numeric_attributes": list(self.numeric_attributes),
            "path": self.path,
        }


@dataclass(frozen=True)
class ContentRecord:
    """Metadata and Markdown body of one content file.

    ``path`` stays empty until the page is written; the written page is
    represented by the ``PageSummary`` returned from ``summarize``.
    """

    title: str
    description: str
    tags: tuple[str, ...]
    related: tuple[str, ...]
    publish_date: str
    numeric_attributes: tuple[float, ...]
    body: str = ""
    path: str = ""

    def metadata(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
            "related": list(self.related),
            "publish_date": self.publish_date,
            "numeric_attributes": list(self.numeric_attributes),
            "path": self.path,
        }

    def summarize(self, path: str) -> PageSummary:
        return PageSummary(
            title=self.title,
            description=self.description,
            tags=self.tags,
            related=self.related,
            publish_date=self.publish_date,
            numeric_attributes=self.numeric_attributes,
            path=path,
        )


def split_front_matter(text: str) -> tuple[str, str]:
    """Split ``text`` into the raw metadata block and the untouched body."""
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines(keepends=True)
    if not lines or lines[0].strip() != DELIMITER:
        raise MetadataError(f"Missing front matter: the first line must be '{DELIMITER}'")
    for i in range(1, len(lines)):
        if lines[i].strip() == DELIMITER:
            return "".join(lines[1:i]), "".join(lines[i + 1 :])
    raise MetadataError(f"Unterminated front matter: no closing '{DELIMITER}' line")


def parse_metadata(block: str) -> dict:
    try:
        meta = yaml.load(block, Loader=FrontMatterLoader)
    except yaml.YAMLError as exc:
        raise MetadataError(f"Invalid YAML front matter: {exc}") from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise MetadataError(f"Front matter must be a mapping, got {type(meta).__name__}")
    normalized = {}
    for key, value in meta.items():
        name = FIELD_ALIASES.get(key, key)
        if name not in RECORD_FIELDS:
            continue
        if name in normalized:
            raise MetadataError(f"Field '{name}' is given more than once (check aliases)")
        normalized[name] = value
    missing = [name for name in RECORD_FIELDS if name not in normalized]
    if missing:
        raise MetadataError(f"Missing required field(s): {', '.join(missing)}")
    return normalized


def require_str(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise MetadataError(f"Field '{name}' must be a string, got {type(value).__name__}")
    return value


def require_str_list(name: str, value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise MetadataError(f"Field '{name}' must be a list of strings, got {type(value).__name__}")
    for item in value:
        if not isinstance(item, str):
            raise MetadataError(f"Field '{name}' must contain only strings, got {type(item).__name__}")
    return tuple(value)


def require_number_list(name: str, value: Any) -> tuple[float, ...]:
    if not isinstance(value, list):
        raise MetadataError(f"Field '{name}' must be a list of numbers, got {type(value).__name__}")
    numbers = []
    for item in value:
        # bool is an int subclass
        if isinstance(item, bool) or not isinstance(item, (int, float)):
            raise MetadataError(f"Field '{name}' must contain only numbers, got {type(item).__name__}")
        try:
            numbers.append(float(item))
        except OverflowError as exc:
            raise MetadataError(f"Field '{name}' holds a number too large for a float") from exc
    return tuple(numbers)


def extract(raw_text: str) -> ContentRecord:
    """Parse one content file into a ``ContentRecord``.

    Raises ``MetadataError`` when the front matter is missing, is not valid
    YAML, or does not have the expected field set and shapes.
    """
    block, body = split_front_matter(raw_text)
    meta = parse_metadata(block)
    title = require_str("title", meta["title"])
    if not title.strip():
        raise MetadataError("Field 'title' must not be empty")
    # a bare "description:" line is YAML null
    description = meta["description"] if meta["description"] is not None else ""
    return ContentRecord(
        title=title,
        description=require_str("description", description),
        tags=require_str_list("tags", meta["tags"]),
        related=require_str_list("related", meta["related"]),
        publish_date=require_str("publish_date", meta["publish_date"]),
        numeric_attributes=require_number_list("numeric_attributes", meta["numeric_attributes"]),
        body=body,
    )
