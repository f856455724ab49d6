# File: crudgen/parser.py
"""
NexaFlow CrudGen - Field Spec Parser
======================================
Turns the compact inline field syntax into ``Column`` entries::

    title:string:100,body:text:nullable,email:string:unique,user_id:foreignId

Grammar:
    - entries are comma-separated; each is ``name[:type[:modifier...]]``;
    - ``type`` defaults to ``string`` and is resolved through an alias table;
    - every token after the type is a modifier: ``nullable``, ``unique``, or
      a purely numeric length.  Anything else is ignored;
    - whitespace around entries and parts is trimmed.

Every foreign-key column (``*_id`` or declared ``foreignId``/``foreign``)
also yields a synthetic ``belongsTo`` relationship.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from crudgen.exceptions import MalformedFieldSpec
from crudgen.models import Column, Relationship, SemanticType

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.parser")

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

TYPE_ALIASES: Dict[str, str] = {
    "str": "string",
    "int": "integer",
    "bool": "boolean",
    "txt": "text",
    "foreignId": "bigInteger",
    "foreign": "bigInteger",
    "bigint": "bigInteger",
    "datetime": "dateTime",
    "datetimetz": "dateTimeTz",
    "double": "float",
    "blob": "binary",
}

_ALIASES_BY_LOWER: Dict[str, str] = {k.lower(): v for k, v in TYPE_ALIASES.items()}

FOREIGN_KEY_TYPE_TOKENS: Tuple[str, ...] = ("foreignid", "foreign")

MODIFIER_NULLABLE: str = "nullable"
MODIFIER_UNIQUE: str = "unique"


@dataclass(slots=True)
class ParsedFields:
    """Columns in declaration order plus the belongsTo relationships they imply."""

    columns: List[Column] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.columns)


def resolve_type_token(token: str) -> Tuple[SemanticType, bool]:
    """
    Map a raw type token to a semantic type.

    Returns ``(semantic_type, recognized)``.  Aliases are applied first and
    the result is matched against ``SemanticType``, both case-insensitively.
    Tokens that still don't match fall back to ``string`` with
    ``recognized=False``.
    """
    aliased: str = _ALIASES_BY_LOWER.get(token.lower(), token)
    semantic: Optional[SemanticType] = SemanticType.lookup(aliased)
    if semantic is None:
        return SemanticType.STRING, False
    return semantic, True


class FieldSpecParser:
    """Stateless parser for inline field specs."""

    def parse(self, spec: Optional[str]) -> ParsedFields:
        result: ParsedFields = ParsedFields()
        if spec is None or not spec.strip():
            return result

        for position, raw_entry in enumerate(spec.split(",")):
            column: Column = self.parse_entry(raw_entry, position)
            result.columns.append(column)
            if column.is_foreign_key:
                result.relationships.append(self.infer_relationship(column, raw_entry))

        logger.debug(
            "Parsed %d column(s) and %d inferred relationship(s) from field spec.",
            len(result.columns),
            len(result.relationships),
        )
        return result

    @staticmethod
    def infer_relationship(column: Column, raw_entry: str) -> Relationship:
        """belongsTo implied by a foreign-key column; its stem must name a model."""
        try:
            return Relationship.for_foreign_key(column)
        except ValidationError as exc:
            raise MalformedFieldSpec(
                f"Foreign key '{column.name}' does not name a model: "
                f"'{column.related_model}' is not a valid class name.",
                entry=raw_entry,
            ) from exc

    def parse_entry(self, raw_entry: str, position: int = 0) -> Column:
        parts: List[str] = [part.strip() for part in raw_entry.strip().split(":")]
        name: str = parts[0]
        if not name:
            raise MalformedFieldSpec(
                f"Field entry #{position + 1} ('{raw_entry.strip()}') has an empty name.",
                entry=raw_entry,
            )

        type_token: str = parts[1] if len(parts) > 1 and parts[1] else "string"
        semantic_type, recognized = resolve_type_token(type_token)
        if not recognized:
            logger.warning(
                "Unknown type '%s' for field '%s'; treating it as string.",
                type_token,
                name,
            )

        nullable: bool = False
        unique: bool = False
        length: Optional[int] = None
        for modifier in parts[2:]:
            token: str = modifier.lower()
            if token == MODIFIER_NULLABLE:
                nullable = True
            elif token == MODIFIER_UNIQUE:
                unique = True
            elif token.isdigit():
                length = int(token)
            elif token:
                logger.debug("Ignoring unknown modifier '%s' on field '%s'.", modifier, name)

        is_foreign: bool = name.endswith("_id") or type_token.lower() in FOREIGN_KEY_TYPE_TOKENS

        return Column(
            name=name,
            semantic_type=semantic_type,
            length=length if length else None,
            nullable=nullable,
            unsigned=is_foreign,
            is_foreign_key=is_foreign,
            is_unique=unique,
            declared_type=type_token,
        )


def parse_fields(spec: Optional[str]) -> ParsedFields:
    """Convenience wrapper around ``FieldSpecParser().parse``."""
    return FieldSpecParser().parse(spec)


__all__: List[str] = [
    "TYPE_ALIASES",
    "FOREIGN_KEY_TYPE_TOKENS",
    "ParsedFields",
    "resolve_type_token",
    "FieldSpecParser",
    "parse_fields",
]
