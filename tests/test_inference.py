"""
tests/test_inference.py
Unit tests for crudgen.inference, the single rule table that maps a column
to validation rules, fake data, migration lines, widgets and casts.
"""

from __future__ import annotations

from typing import List

import pytest

from crudgen.inference import (
    InputWidget,
    cast_type,
    faker_expression,
    field_label,
    input_widget,
    migration_column,
    php_default,
    php_type,
    rules_php_array,
    sample_value,
    serialized_value,
    updated_sample_value,
    validation_rules,
)
from crudgen.models import Column, SemanticType


def _tokens(column: Column, update: bool = False) -> List[str]:
    return [str(rule) for rule in validation_rules(column, "posts", "post", update=update)]


# ===========================================================================
# Validation rules
# ===========================================================================


class TestValidationRules:
    """Presence, type, length, name heuristics, foreign keys and uniqueness."""

    def test_required_string_with_length(self) -> None:
        column = Column(name="title", length=100)
        assert _tokens(column) == ["required", "string", "max:100"]

    def test_nullable_or_default_is_nullable(self) -> None:
        assert _tokens(Column(name="subtitle", nullable=True))[0] == "nullable"
        assert _tokens(Column(name="status", default="draft"))[0] == "nullable"

    def test_update_uses_sometimes(self) -> None:
        assert _tokens(Column(name="title"), update=True)[0] == "sometimes"

    @pytest.mark.parametrize(
        "semantic_type, token",
        [
            (SemanticType.INTEGER, "integer"),
            (SemanticType.DECIMAL, "numeric"),
            (SemanticType.BOOLEAN, "boolean"),
            (SemanticType.DATE, "date"),
            (SemanticType.TIME, "date_format:H:i:s"),
            (SemanticType.JSON, "array"),
            (SemanticType.UUID, "uuid"),
        ],
    )
    def test_type_rules(self, semantic_type: SemanticType, token: str) -> None:
        assert token in _tokens(Column(name="value", semantic_type=semantic_type))

    def test_binary_is_validated_as_string(self) -> None:
        assert _tokens(Column(name="payload", semantic_type=SemanticType.BINARY)) == ["required", "string"]

    @pytest.mark.parametrize(
        "semantic_type",
        [SemanticType.INTEGER, SemanticType.BIG_INTEGER, SemanticType.DECIMAL, SemanticType.FLOAT],
    )
    def test_unsigned_numbers_get_min_zero(self, semantic_type: SemanticType) -> None:
        column = Column(name="stock", semantic_type=semantic_type, unsigned=True)
        assert _tokens(column)[-1] == "min:0"

    def test_signed_numbers_have_no_lower_bound(self) -> None:
        assert "min:0" not in _tokens(Column(name="balance", semantic_type=SemanticType.DECIMAL))

    def test_name_heuristics_on_text_columns(self) -> None:
        assert "email" in _tokens(Column(name="contact_email"))
        assert "url" in _tokens(Column(name="website"))
        assert "min:8" in _tokens(Column(name="password"))
        assert "alpha_dash" in _tokens(Column(name="slug"))
        assert any(t.startswith("regex:") for t in _tokens(Column(name="phone")))
        assert ["image", "max:2048"] == _tokens(Column(name="avatar"))[-2:]

    def test_word_heuristics_do_not_match_substrings(self) -> None:
        assert "file" not in _tokens(Column(name="profile_url"))
        assert "file" in _tokens(Column(name="attachment"))

    def test_format_heuristics_skip_non_text_columns(self) -> None:
        assert "email" not in _tokens(Column(name="email_count", semantic_type=SemanticType.INTEGER))
        assert "url" not in _tokens(Column(name="link_clicks", semantic_type=SemanticType.INTEGER))

    def test_name_heuristics_apply_to_every_type(self) -> None:
        avatar = Column(name="avatar", semantic_type=SemanticType.BINARY)
        assert _tokens(avatar) == ["required", "string", "image", "max:2048"]
        phone = _tokens(Column(name="phone", semantic_type=SemanticType.INTEGER))
        assert phone[:2] == ["required", "integer"]
        assert phone[2].startswith("regex:")

    def test_foreign_keys_only_get_the_exists_rule(self) -> None:
        column = Column(
            name="photo_id",
            semantic_type=SemanticType.BIG_INTEGER,
            unsigned=True,
            is_foreign_key=True,
        )
        assert _tokens(column) == ["required", "integer", "min:0", "exists:photos,id"]

    def test_foreign_key_exists_rule(self) -> None:
        column = Column(
            name="category_id",
            semantic_type=SemanticType.BIG_INTEGER,
            unsigned=True,
            is_foreign_key=True,
        )
        assert _tokens(column)[-1] == "exists:categories,id"

    def test_unique_store_and_update(self) -> None:
        column = Column(name="slug", is_unique=True)
        store = validation_rules(column, "posts", "post")
        update = validation_rules(column, "posts", "post", update=True)
        assert store[-1].php() == "'unique:posts,slug'"
        assert update[-1].php() == "'unique:posts,slug,' . $this->route('post')?->id"

    def test_unique_with_ignore_expression(self) -> None:
        column = Column(name="slug", is_unique=True)
        rules = validation_rules(column, "posts", "post", ignore_expression="$this->record?->id")
        assert rules[-1].php() == "'unique:posts,slug,' . $this->record?->id"

    def test_rules_php_array(self) -> None:
        rules = validation_rules(Column(name="title", length=20), "posts", "post")
        assert rules_php_array(rules) == "['required', 'string', 'max:20']"


# ===========================================================================
# Fake data
# ===========================================================================


class TestFakerExpression:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("email", "fake()->unique()->safeEmail()"),
            ("first_name", "fake()->firstName()"),
            ("last_name", "fake()->lastName()"),
            ("company_name", "fake()->company()"),
            ("name", "fake()->name()"),
            ("phone", "fake()->phoneNumber()"),
            ("title", "fake()->sentence(3)"),
            ("price", "fake()->randomFloat(2, 0, 1000)"),
            ("password", "bcrypt('password')"),
        ],
    )
    def test_name_patterns(self, name: str, expected: str) -> None:
        assert faker_expression(Column(name=name)) == expected

    def test_foreign_key_uses_related_factory(self) -> None:
        column = Column(name="author_id", is_foreign_key=True, unsigned=True)
        assert faker_expression(column) == "\\App\\Models\\Author::factory()"

    def test_string_length_decides_words_or_sentence(self) -> None:
        assert faker_expression(Column(name="code", length=20)) == "fake()->words(3, true)"
        assert faker_expression(Column(name="headline")) == "fake()->sentence()"

    def test_type_fallbacks(self) -> None:
        assert faker_expression(Column(name="flag", semantic_type=SemanticType.BOOLEAN)) == "fake()->boolean()"
        assert faker_expression(Column(name="born_on", semantic_type=SemanticType.DATE)) == "fake()->date()"
        assert faker_expression(Column(name="meta", semantic_type=SemanticType.JSON)) == "[]"
        assert (
            faker_expression(Column(name="rank", semantic_type=SemanticType.INTEGER, unsigned=True))
            == "fake()->numberBetween(1, 1000)"
        )
        assert faker_expression(Column(name="blob", semantic_type=SemanticType.BINARY)) == "fake()->word()"


# ===========================================================================
# Migration lines
# ===========================================================================


class TestMigrationColumn:
    def test_string_with_length_and_modifiers(self) -> None:
        column = Column(name="slug", length=120, nullable=True, is_unique=True)
        assert migration_column(column) == "$table->string('slug', 120)->nullable()->unique();"

    def test_default_value(self) -> None:
        column = Column(name="status", default="draft")
        assert migration_column(column) == "$table->string('status', 255)->default('draft');"

    def test_decimal_precision(self) -> None:
        column = Column(name="price", semantic_type=SemanticType.DECIMAL)
        assert migration_column(column) == "$table->decimal('price', 10, 2);"

    def test_unsigned_integers(self) -> None:
        small = Column(name="stock", semantic_type=SemanticType.INTEGER, unsigned=True)
        big = Column(name="views", semantic_type=SemanticType.BIG_INTEGER, unsigned=True)
        assert migration_column(small) == "$table->unsignedInteger('stock');"
        assert migration_column(big) == "$table->unsignedBigInteger('views');"

    def test_plain_types_use_type_name(self) -> None:
        column = Column(name="published_at", semantic_type=SemanticType.DATE_TIME_TZ)
        assert migration_column(column) == "$table->dateTimeTz('published_at');"

    def test_foreign_key(self) -> None:
        column = Column(
            name="category_id",
            semantic_type=SemanticType.BIG_INTEGER,
            is_foreign_key=True,
            nullable=True,
        )
        assert migration_column(column) == (
            "$table->foreignId('category_id')->nullable()"
            "->constrained('categories')->cascadeOnDelete();"
        )


# ===========================================================================
# Widgets, casts, PHP types
# ===========================================================================


class TestWidgetsAndCasts:
    @pytest.mark.parametrize(
        "column, widget",
        [
            (Column(name="user_id", is_foreign_key=True), InputWidget.SELECT),
            (Column(name="email"), InputWidget.EMAIL),
            (Column(name="password"), InputWidget.PASSWORD),
            (Column(name="homepage_url"), InputWidget.URL),
            (Column(name="phone"), InputWidget.TEL),
            (Column(name="color"), InputWidget.COLOR),
            (Column(name="body", semantic_type=SemanticType.TEXT), InputWidget.TEXTAREA),
            (Column(name="active", semantic_type=SemanticType.BOOLEAN), InputWidget.CHECKBOX),
            (Column(name="starts_at", semantic_type=SemanticType.DATE_TIME), InputWidget.DATETIME),
            (Column(name="qty", semantic_type=SemanticType.INTEGER), InputWidget.NUMBER),
            (Column(name="title"), InputWidget.TEXT),
        ],
    )
    def test_input_widget(self, column: Column, widget: InputWidget) -> None:
        assert input_widget(column) is widget

    def test_field_label(self) -> None:
        assert field_label(Column(name="first_name")) == "First Name"

    def test_cast_type(self) -> None:
        assert cast_type(Column(name="active", semantic_type=SemanticType.BOOLEAN)) == "boolean"
        assert cast_type(Column(name="price", semantic_type=SemanticType.DECIMAL)) == "decimal:2"
        assert cast_type(Column(name="title")) is None
        assert cast_type(Column(name="created_at", semantic_type=SemanticType.DATE_TIME)) is None

    def test_php_type_and_default(self) -> None:
        flag = Column(name="active", semantic_type=SemanticType.BOOLEAN, default="1")
        count = Column(name="qty", semantic_type=SemanticType.INTEGER)
        meta = Column(name="meta", semantic_type=SemanticType.JSON)
        title = Column(name="title", default="Untitled")
        assert (php_type(flag), php_default(flag)) == ("bool", "true")
        assert (php_type(count), php_default(count)) == ("?int", "null")
        assert (php_type(meta), php_default(meta)) == ("array", "[]")
        assert (php_type(title), php_default(title)) == ("string", "'Untitled'")

    def test_serialized_value(self) -> None:
        assert serialized_value(Column(name="born_on", semantic_type=SemanticType.DATE)) == (
            "$this->born_on?->toDateString()"
        )
        assert serialized_value(Column(name="active", semantic_type=SemanticType.BOOLEAN)) == (
            "(bool) $this->active"
        )
        assert serialized_value(Column(name="title")) == "$this->title"


# ===========================================================================
# Test sample values
# ===========================================================================


class TestSampleValues:
    def test_store_and_update_differ(self) -> None:
        column = Column(name="title", length=255)
        assert sample_value(column) == "'Test Title'"
        assert updated_sample_value(column, "post") == "'Updated Title'"

    def test_sample_is_truncated_to_length(self) -> None:
        column = Column(name="code", length=4)
        assert sample_value(column) == "'Test'"

    def test_name_patterns(self) -> None:
        assert sample_value(Column(name="email")) == "'test@example.com'"
        assert updated_sample_value(Column(name="email"), "user") == "'updated@example.com'"

    def test_foreign_keys(self) -> None:
        column = Column(name="author_id", is_foreign_key=True)
        assert sample_value(column) == "\\App\\Models\\Author::factory()->create()->id"
        assert updated_sample_value(column, "post") == "$post->author_id"
