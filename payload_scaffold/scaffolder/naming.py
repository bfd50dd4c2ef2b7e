"""Case conversions and export names derived from slugs.

Shared by the entity renderers, the tree validator (export collisions) and
the Jinja2 filter registered on :class:`.templates.TemplateRenderer`.
"""

from __future__ import annotations

import re


def words(value: str) -> list[str]:
    """Split kebab, snake, dotted and camelCase input into words."""
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", value)
    return [word for word in re.split(r"[^A-Za-z0-9]+", spaced) if word]


def pascal_name(value: str) -> str:
    """``blog-posts`` -> ``BlogPosts``; a leading digit gets a ``_`` prefix."""
    name = "".join(word[:1].upper() + word[1:] for word in words(value))
    if name[:1].isdigit():
        name = f"_{name}"
    return name


def camel_name(value: str) -> str:
    """``blog-posts`` -> ``blogPosts``."""
    name = pascal_name(value)
    if name.startswith("_"):
        return name
    return name[:1].lower() + name[1:]


def kebab_name(value: str) -> str:
    """``BlogPosts`` -> ``blog-posts``."""
    return "-".join(word.lower() for word in words(value))


def title_words(value: str) -> str:
    """``blog-posts`` -> ``Blog Posts``."""
    return " ".join(word[:1].upper() + word[1:] for word in words(value))


def collection_export(slug: str) -> str:
    return pascal_name(slug)


def global_export(slug: str) -> str:
    return f"{pascal_name(slug)}Global"


def block_export(slug: str) -> str:
    return f"{pascal_name(slug)}Block"


def default_labels(slug: str) -> dict[str, str]:
    """Singular / plural labels derived from a slug.

    ``posts`` -> ``Post`` / ``Posts``; ``team`` -> ``Team`` / ``Teams``.
    """
    title = title_words(slug)
    if title.endswith("s") and not title.endswith("ss"):
        singular, plural = title[:-1], title
    else:
        singular, plural = title, f"{title}s"
    return {"singular": singular, "plural": plural}
