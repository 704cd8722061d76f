"""
Notebook resources and blog-post front matter.

Models
- Resource: a catalogued notebook (id, title, url, format, topics, level).
- BlogPostFrontmatter: the closed set of keys a post's YAML front matter may
  carry; unknown keys fail validation.

Front matter
- parse_front_matter() reads the leading ``---`` YAML block of a document.
- front_matter() / front_matters() read one file or every ``**/*.qmd`` under a
  site directory, logging a warning per problem key.
- warnings() explains problems: the key's description when the key is known
  but its value is invalid, or "did you mean ..." when the key is unknown but
  close to a known one. Keys with neither are not reported.

Style
- Pydantic v2 models with ``extra="forbid"``; enum-like strings are normalized
  in ``mode="before"`` validators.
- YAML via PyYAML (safe_load / safe_dump only).

Examples:
    >>> from civitas.site.metadata import warnings
    >>> warnings({"title": "Hello", "tilte": "typo"})
    [('tilte', 'did you mean title')]
"""

from __future__ import annotations

import difflib
import logging
import os
from collections.abc import Mapping
from datetime import date, datetime
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from civitas.io.errors import IoReadError
from civitas.io.write import write_text_atomic

__all__ = [
    "FORMATS",
    "TOPICS",
    "LEVELS",
    "KEY_DESCRIPTIONS",
    "Author",
    "Resource",
    "BlogPostFrontmatter",
    "parse_front_matter",
    "did_you_mean",
    "warnings",
    "front_matter",
    "front_matters",
    "source_path_for",
    "render_front_matter",
    "write_notebook_stub",
]

logger = logging.getLogger(__name__)

Format = Literal["reference", "interactive-book", "video", "library-docs", "problem-set", "community"]
Topic = Literal["core", "web", "data-sci", "concurrency", "tooling", "testing", "performance"]

FORMATS: tuple[str, ...] = ("reference", "interactive-book", "video", "library-docs", "problem-set", "community")
TOPICS: tuple[str, ...] = ("core", "web", "data-sci", "concurrency", "tooling", "testing", "performance")
LEVELS: tuple[int, ...] = (0, 1, 2, 3)

KEY_DESCRIPTIONS: dict[str, str] = {
    "title": "The title of the blog post. Essential for SEO and user understanding.",
    "authors": "A list of authors for the post. If multiple authors, this is necessary for proper attribution.",
    "author": "The author information. Required for attribution.",
    "image": "The URL to the featured image. Will be shown as your post preview.",
    "draft": (
        "Indicates whether the post is a draft. "
        "Should be set to true to prevent accidental publishing of incomplete posts."
    ),
    "publish-date": "The date and time the post should be published. Important for chronological ordering.",
    "last-modified-date": (
        "The date and time the post was last modified. Important for knowing when an article was updated."
    ),
    "tags": "Keywords to categorize the content. Helps readers find relevant posts.",
    "categories": "Broad categories to group content. Helps readers navigate a website by content.",
    "description": "A brief description of the post, used for SEO.",
    "slug": "The URL slug for the post. Important for URL structure and SEO.",
    "canonical-url": "The canonical URL of the post. Prevents duplicate content issues.",
    "keywords": "Additional keywords for SEO purposes.",
    "layout": "The layout to use for this post, helps organize content with different visual layouts.",
}

# Similarity cutoff for "did you mean" suggestions (difflib ratio).
SUGGEST_CUTOFF = 0.75


def _kebab(v: Any) -> Any:
    if isinstance(v, str):
        return v.strip().lower().lstrip(":").replace("_", "-")
    return v


class Author(BaseModel):
    """A post author: display name and optional home page."""

    model_config = ConfigDict(extra="forbid")

    name: str
    url: str | None = None


class Resource(BaseModel):
    """
    A catalogued learning resource (usually a notebook).

    Attributes:
        id (str): Stable identifier; also the notebook's file stem.
        title (str): Display title.
        url (str): Where the resource lives.
        format (str): One of FORMATS.
        topics (list[str]): One or more of TOPICS; the first is the primary topic.
        level (int): Difficulty 0 (intro) to 3 (advanced).
        depends_on (list[str] | None): Ids of prerequisite resources.
        description (str | None): Short summary.

    Raises:
        pydantic.ValidationError: Unknown format/topic, level outside 0..3,
            empty topics, or unknown keys.

    Examples:
        >>> Resource(id="nb", title="T", url="/nb", format="video", topics=["data_sci"], level=1).topics
        ['data-sci']
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: str = Field(min_length=1)
    title: str
    url: str
    format: Format
    topics: list[Topic] = Field(min_length=1)
    level: int = Field(ge=0, le=3)
    depends_on: list[str] | None = Field(default=None, alias="depends-on")
    description: str | None = None

    @field_validator("format", mode="before")
    @classmethod
    def _normalize_format(cls, v: Any) -> Any:
        return _kebab(v)

    @field_validator("topics", mode="before")
    @classmethod
    def _normalize_topics(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple)):
            return [_kebab(t) for t in v]
        return v


class BlogPostFrontmatter(BaseModel):
    """
    The closed schema of blog-post front matter.

    Keys are kebab-case in YAML (``publish-date``); Python attributes use
    snake_case. Any key outside KEY_DESCRIPTIONS is a validation error.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    title: str
    authors: list[Author] | None = None
    author: Author | None = None
    image: str | None = None
    draft: bool | None = None
    publish_date: datetime | date | None = Field(default=None, alias="publish-date")
    last_modified_date: datetime | date | None = Field(default=None, alias="last-modified-date")
    tags: list[str] | None = None
    categories: list[str] | None = None
    description: str | None = None
    slug: str | None = None
    canonical_url: str | None = Field(default=None, alias="canonical-url")
    keywords: list[str] | None = None
    layout: str | None = None


def parse_front_matter(text: str) -> dict[str, Any]:
    """
    Parse the YAML block between a leading ``---`` line and the next ``---``.

    Returns:
        dict[str, Any]: The front matter; empty when the document has none.

    Raises:
        ValueError: The block is not valid YAML or not a mapping.
    """
    lines = text.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}
    try:
        end = next(i for i in range(1, len(lines)) if lines[i].strip() in ("---", "..."))
    except StopIteration:
        raise ValueError("front matter is not closed by '---'") from None
    try:
        data = yaml.safe_load("\n".join(lines[1:end]))
    except yaml.YAMLError as e:
        raise ValueError(f"invalid front matter YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"front matter must be a mapping, got {type(data).__name__}")
    return data


def did_you_mean(key: str, known: Any = None) -> str | None:
    """Suggest known keys close to `key`, or None."""
    matches = difflib.get_close_matches(str(key), list(known or KEY_DESCRIPTIONS), n=3, cutoff=SUGGEST_CUTOFF)
    if not matches:
        return None
    return "did you mean " + " or ".join(matches)


def warnings(front: Mapping[str, Any]) -> list[tuple[str, str]]:
    """
    Explain why front matter fails BlogPostFrontmatter, one entry per key.

    Returns:
        list[tuple[str, str]]: (key, explanation) in error order; empty when valid.
    """
    try:
        BlogPostFrontmatter.model_validate(dict(front))
    except ValidationError as e:
        out: list[tuple[str, str]] = []
        seen: set[str] = set()
        for err in e.errors():
            if not err["loc"]:
                continue
            key = str(err["loc"][0])
            if key in seen:
                continue
            seen.add(key)
            message = KEY_DESCRIPTIONS.get(key) or did_you_mean(key)
            if message is not None:
                out.append((key, message))
        return out
    return []


def front_matter(path: str | os.PathLike[str]) -> dict[str, Any]:
    """
    Read one document's front matter, logging any warnings.

    Returns:
        dict[str, Any]: Front matter plus ``source_path``.

    Raises:
        IoReadError: The file cannot be read or its front matter cannot be parsed.
    """
    p = Path(path)
    try:
        data = parse_front_matter(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise IoReadError(f"cannot read front matter from {p}: {e}") from e
    for key, message in warnings(data):
        logger.warning("front matter %s: %s: %s", p, key, message)
    return {**data, "source_path": str(p)}


def front_matters(site_dir: str | os.PathLike[str]) -> list[dict[str, Any]]:
    """Front matter of every ``.qmd`` file under `site_dir`, in path order."""
    return [front_matter(p) for p in sorted(Path(site_dir).glob("**/*.qmd"))]


def _topics_of(notebook: Mapping[str, Any] | Resource) -> list[str]:
    if isinstance(notebook, Resource):
        return list(notebook.topics)
    topics = notebook.get("topics", notebook.get("topic"))
    if isinstance(topics, str):
        return [topics]
    return list(topics or [])


def source_path_for(notebook: Mapping[str, Any] | Resource, root: str = "notebooks") -> str:
    """
    Conventional source path ``<root>/<primary topic>/<id>.md``.

    Raises:
        ValueError: The notebook has no id or no topics.
    """
    nb_id = notebook.id if isinstance(notebook, Resource) else notebook.get("id")
    topics = _topics_of(notebook)
    if not nb_id or not topics:
        raise ValueError("notebook needs an id and at least one topic")
    return str(Path(root) / str(topics[0]).lstrip(":") / f"{nb_id}.md")


def render_front_matter(notebook: Mapping[str, Any] | Resource) -> str:
    """A YAML front-matter block (``---`` delimited) for a notebook."""
    data = notebook.model_dump(by_alias=True, exclude_none=True) if isinstance(notebook, Resource) else dict(notebook)
    return "---\n" + yaml.safe_dump(data, sort_keys=False, allow_unicode=True) + "---\n"


def write_notebook_stub(notebook: Mapping[str, Any] | Resource, root: str = "notebooks") -> bool:
    """
    Create a notebook file holding only its front matter, unless it exists.

    Returns:
        bool: True if the file was created, False if it already existed.

    Raises:
        IoWriteError: The file cannot be written.
    """
    explicit = None if isinstance(notebook, Resource) else notebook.get("source_path")
    path = Path(explicit or source_path_for(notebook, root))
    if path.exists():
        logger.info("%s exists", path)
        return False
    write_text_atomic(path, render_front_matter(notebook))
    logger.info("%s created", path)
    return True
