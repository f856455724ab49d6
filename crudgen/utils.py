# File: crudgen/utils.py
"""
NexaFlow CrudGen - Utility Functions & Helpers
================================================
String transformation, PHP literal formatting, and timing helpers used
throughout the generation pipeline.

Every derived name in a generated artifact (class names, variables, table
names, route names, view folders) flows through the cached converters in
this module, so the same model name always yields the same identifiers.

- String-conversion functions are decorated with ``@lru_cache(maxsize=None)``
  because generators call them repeatedly with the same handful of inputs.
- PHP literal helpers escape values for single-quoted PHP strings.
"""

from __future__ import annotations

import functools
import logging
import re
import time
from datetime import datetime, timedelta
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.utils")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns
# ---------------------------------------------------------------------------

_CAMEL_TO_SNAKE_RE1: re.Pattern[str] = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_TO_SNAKE_RE2: re.Pattern[str] = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALPHANUM_RE: re.Pattern[str] = re.compile(r"[^a-zA-Z0-9]")
_MULTI_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"_{2,}")
_LEADING_TRAILING_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"^_+|_+$")
_SPLIT_WORDS_RE: re.Pattern[str] = re.compile(
    r"[A-Z]?[a-z]+|[A-Z]+(?=[A-Z][a-z]|\d|\b)|[A-Z]|\d+"
)

# Irregular English nouns common in application schemas
_IRREGULAR_PLURALS: Dict[str, str] = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "mouse": "mice",
    "goose": "geese",
    "tooth": "teeth",
    "foot": "feet",
    "datum": "data",
    "index": "indices",
    "matrix": "matrices",
    "vertex": "vertices",
    "axis": "axes",
    "crisis": "crises",
    "analysis": "analyses",
    "status": "statuses",
    "address": "addresses",
    "bus": "buses",
    "campus": "campuses",
    "alias": "aliases",
    "atlas": "atlases",
    "bias": "biases",
    "canvas": "canvases",
    "gas": "gases",
    "lens": "lenses",
    "hero": "heroes",
    "potato": "potatoes",
    "tomato": "tomatoes",
    "echo": "echoes",
    "quiz": "quizzes",
    "leaf": "leaves",
    "half": "halves",
    "shelf": "shelves",
    "wolf": "wolves",
    "knife": "knives",
    "life": "lives",
    "wife": "wives",
}

_IRREGULAR_SINGULARS: Dict[str, str] = {v: k for k, v in _IRREGULAR_PLURALS.items()}

_UNCOUNTABLE: FrozenSet[str] = frozenset({
    "equipment", "information", "series", "species", "news",
    "fish", "sheep", "metadata", "feedback", "software",
})


# ---------------------------------------------------------------------------
# Cached string transformation functions
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def to_snake_case(name: str) -> str:
    """
    Convert any string to snake_case.

    Examples:
        >>> to_snake_case("BlogPost")
        'blog_post'
        >>> to_snake_case("getHTTPResponse")
        'get_http_response'
        >>> to_snake_case("already_snake")
        'already_snake'
    """
    if not name:
        return ""
    s: str = _CAMEL_TO_SNAKE_RE1.sub(r"\1_\2", name)
    s = _CAMEL_TO_SNAKE_RE2.sub(r"\1_\2", s)
    s = _NON_ALPHANUM_RE.sub("_", s)
    s = _MULTI_UNDERSCORE_RE.sub("_", s)
    s = _LEADING_TRAILING_UNDERSCORE_RE.sub("", s)
    return s.lower()


@functools.lru_cache(maxsize=None)
def to_pascal_case(name: str) -> str:
    """
    Convert any string to PascalCase (Laravel's ``Str::studly``).

    Examples:
        >>> to_pascal_case("blog_category")
        'BlogCategory'
        >>> to_pascal_case("BlogPost")
        'BlogPost'
    """
    if not name:
        return ""
    words: Tuple[str, ...] = _extract_words(name)
    return "".join(word.capitalize() for word in words)


@functools.lru_cache(maxsize=None)
def to_camel_case(name: str) -> str:
    """
    Convert any string to camelCase.

    Examples:
        >>> to_camel_case("blog_category")
        'blogCategory'
        >>> to_camel_case("BlogPosts")
        'blogPosts'
    """
    if not name:
        return ""
    words: Tuple[str, ...] = _extract_words(name)
    if not words:
        return ""
    first: str = words[0].lower()
    rest: str = "".join(w.capitalize() for w in words[1:])
    return first + rest


@functools.lru_cache(maxsize=None)
def to_kebab_case(name: str) -> str:
    """Convert any string to kebab-case (route names, view folders)."""
    if not name:
        return ""
    words: Tuple[str, ...] = _extract_words(name)
    return "-".join(w.lower() for w in words)


@functools.lru_cache(maxsize=None)
def to_title_human(name: str) -> str:
    """
    Convert identifier to human-readable title.

    Examples:
        >>> to_title_human("first_name")
        'First Name'
        >>> to_title_human("is-active")
        'Is Active'
    """
    if not name:
        return ""
    words: Tuple[str, ...] = _extract_words(name)
    return " ".join(w.capitalize() for w in words)


def _split_last_word(name: str) -> Tuple[str, str]:
    """Split *name* into (prefix, last word) on a case or underscore boundary."""
    words: Tuple[str, ...] = _extract_words(name)
    if not words:
        return "", name
    last: str = words[-1]
    cut: int = len(name) - len(last)
    if name[cut:].lower() != last:
        return "", name
    return name[:cut], name[cut:]


def _match_case(template: str, word: str) -> str:
    if template.isupper() and len(template) > 1:
        return word.upper()
    if template[:1].isupper():
        return word[:1].upper() + word[1:]
    return word


@functools.lru_cache(maxsize=None)
def to_plural(name: str) -> str:
    """
    English pluralisation sufficient for code generation.

    Only the last word of a compound name is inflected, so ``BlogPerson``
    becomes ``BlogPeople`` and ``order_item`` becomes ``order_items``.
    """
    if not name:
        return ""

    prefix, last = _split_last_word(name)
    lower: str = last.lower()

    if lower in _UNCOUNTABLE:
        return name
    if lower in _IRREGULAR_PLURALS:
        return prefix + _match_case(last, _IRREGULAR_PLURALS[lower])
    if lower in _IRREGULAR_SINGULARS:
        return name

    if lower.endswith("is") and len(lower) > 2:
        return name[:-2] + "es"
    if lower.endswith("s") and not lower.endswith(("ss", "us")):
        return name
    if lower.endswith(("sh", "ch", "x", "z", "ss", "us")):
        return name + "es"
    if lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        return name[:-1] + "ies"

    return name + "s"


@functools.lru_cache(maxsize=None)
def _extract_words(name: str) -> Tuple[str, ...]:
    """
    Extract individual words from any casing style.

    Returns a tuple (hashable for LRU cache) of lowercase word strings.
    """
    cleaned: str = _NON_ALPHANUM_RE.sub(" ", name)
    words: List[str] = _SPLIT_WORDS_RE.findall(cleaned)
    return tuple(w.lower() for w in words if w)


@functools.lru_cache(maxsize=None)
def strip_foreign_key_suffix(column_name: str) -> str:
    """``author_id`` -> ``author``.  Names without the suffix are returned as-is."""
    if column_name.endswith("_id") and len(column_name) > 3:
        return column_name[:-3]
    return column_name


# ---------------------------------------------------------------------------
# PHP literal helpers
# ---------------------------------------------------------------------------


def php_string(value: str) -> str:
    """Render *value* as a single-quoted PHP string literal."""
    escaped: str = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def php_literal(value: Any) -> str:
    """
    Render a Python scalar as a PHP literal.

    ``True`` -> ``true``, ``None`` -> ``null``, numbers stay bare and
    everything else becomes a quoted string.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    return php_string(str(value))


def php_list(items: Sequence[str]) -> str:
    """Render a flat PHP array of quoted strings: ``['a', 'b']``."""
    return "[" + ", ".join(php_string(item) for item in items) + "]"


def indent_lines(lines: Sequence[str], level: int = 1, size: int = 4) -> List[str]:
    """Indent a list of lines, returning a new list."""
    prefix: str = " " * (level * size)
    return [prefix + line if line.strip() else line for line in lines]


def count_lines(content: str) -> int:
    """Count the number of lines in a string."""
    if not content:
        return 0
    return content.count("\n") + (1 if not content.endswith("\n") else 0)


# ---------------------------------------------------------------------------
# Migration clock
# ---------------------------------------------------------------------------

MIGRATION_TIMESTAMP_FORMAT: str = "%Y_%m_%d_%H%M%S_%f"

_last_migration_instant: Optional[datetime] = None


def next_migration_timestamp(now: Optional[datetime] = None) -> str:
    """
    Return a migration filename prefix that is strictly increasing within
    this process.

    The stamp has microsecond resolution; when two calls land on the same
    (or an earlier) instant the previous value is bumped by one microsecond.
    """
    global _last_migration_instant

    instant: datetime = now or datetime.now()
    if _last_migration_instant is not None and instant <= _last_migration_instant:
        instant = _last_migration_instant + timedelta(microseconds=1)
    _last_migration_instant = instant
    return instant.strftime(MIGRATION_TIMESTAMP_FORMAT)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Simple context-manager timer for profiling generation steps.

    Usage:
        with Timer("model") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "to_snake_case",
    "to_pascal_case",
    "to_camel_case",
    "to_kebab_case",
    "to_title_human",
    "to_plural",
    "strip_foreign_key_suffix",
    "php_string",
    "php_literal",
    "php_list",
    "indent_lines",
    "count_lines",
    "MIGRATION_TIMESTAMP_FORMAT",
    "next_migration_timestamp",
    "Timer",
]

logger.debug("crudgen.utils loaded, %d public symbols.", len(__all__))
