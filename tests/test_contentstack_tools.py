"""
Test Suite for contentstack-tools
==================================
Tests for the content type models, block dispatch and the entry validator
(per-type rules, draft relaxation, missing-field extraction, idempotence).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pytest
from pydantic import create_model

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from contentstack_tools import (
    BlockDefinition,
    ContentstackToolsError,
    ContentType,
    ContentTypeError,
    EntryValidationError,
    FieldDefinition,
    FieldType,
    IssueKind,
    MatchedBlock,
    UnknownBlock,
    ValidationResult,
    ValidatorBuilder,
    ValidatorMode,
    build_validator,
    extract_missing_fields,
    field_annotation,
    is_system_field,
    match_block,
    validate_draft,
    validate_entry,
    variant_key,
)


# ===========================================================================
# Fixtures
# ===========================================================================


@pytest.fixture
def blog_post() -> dict[str, Any]:
    """A content type exercising every field type."""
    return {
        "uid": "blog_post",
        "title": "Blog Post",
        "schema": [
            {"uid": "title", "data_type": "text", "display_name": "Title", "mandatory": True},
            {"uid": "url", "data_type": "text", "display_name": "URL", "format": "^/"},
            {
                "uid": "category",
                "data_type": "text",
                "display_name": "Category",
                "enum": {"advanced": False, "choices": [{"value": "news"}, {"value": "sports"}]},
            },
            {"uid": "views", "data_type": "number", "display_name": "Views"},
            {"uid": "featured", "data_type": "boolean", "display_name": "Featured"},
            {"uid": "published_on", "data_type": "isodate", "display_name": "Published On"},
            {"uid": "hero_image", "data_type": "file", "display_name": "Hero Image"},
            {"uid": "cta", "data_type": "link", "display_name": "Call to Action"},
            {"uid": "author", "data_type": "reference", "reference_to": ["author"]},
            {"uid": "keywords", "data_type": "text", "multiple": True},
            {
                "uid": "taxonomies",
                "data_type": "taxonomy",
                "multiple": True,
                "taxonomies": [{"taxonomy_uid": "topics", "max_terms": 5}],
            },
            {"uid": "body", "data_type": "json", "field_metadata": {"allow_json_rte": True}},
            {"uid": "extra", "data_type": "json"},
            {
                "uid": "seo",
                "data_type": "group",
                "display_name": "SEO",
                "schema": [
                    {"uid": "meta_title", "data_type": "text", "mandatory": True},
                    {"uid": "meta_description", "data_type": "text"},
                ],
            },
            {
                "uid": "members",
                "data_type": "group",
                "display_name": "Members",
                "multiple": True,
                "max_instance": 2,
                "schema": [
                    {"uid": "name", "data_type": "text", "display_name": "Name", "mandatory": True},
                    {"uid": "role", "data_type": "text", "display_name": "Role"},
                ],
            },
            {
                "uid": "sections",
                "data_type": "blocks",
                "display_name": "Sections",
                "blocks": [
                    {
                        "uid": "hero",
                        "title": "Hero",
                        "schema": [
                            {"uid": "headline", "data_type": "text", "mandatory": True},
                            {"uid": "image", "data_type": "file"},
                        ],
                    },
                    {
                        "uid": "quote",
                        "title": "Quote",
                        "schema": [
                            {"uid": "quote_text", "data_type": "text", "mandatory": True},
                            {"uid": "attribution", "data_type": "text"},
                        ],
                    },
                    {"uid": "author_ref", "title": "Author", "reference_to": "author_global_field"},
                ],
            },
        ],
    }


@pytest.fixture
def valid_post() -> dict[str, Any]:
    return {
        "title": "Hello",
        "url": "/hello",
        "category": "news",
        "views": 10,
        "featured": True,
        "published_on": "2024-01-31",
        "hero_image": {"uid": "blt1", "url": "https://images.example.com/y.png", "filename": "y.png"},
        "cta": {"title": "Go", "href": "https://example.com"},
        "author": {"uid": "blt2", "_content_type_uid": "author"},
        "keywords": ["a", "b"],
        "taxonomies": [{"taxonomy_uid": "topics", "term_uid": "cricket"}],
        "body": {
            "type": "doc",
            "children": [{"type": "p", "children": [{"text": "hi", "bold": True}]}],
        },
        "extra": {"anything": [1, 2]},
        "seo": {"meta_title": "T"},
        "members": [{"name": "Alice", "role": "Dev", "_metadata": {"uid": "cs1"}}],
        "sections": [
            {"hero": {"headline": "H"}},
            {"quote": {"quote_text": "Q"}, "_metadata": {"uid": "cs2"}},
            {"author_ref": {"uid": "blt3"}},
        ],
    }


def _kinds(result: ValidationResult) -> dict[str, IssueKind]:
    return {issue.path: issue.kind for issue in result.issues}


# ===========================================================================
# Model Tests
# ===========================================================================


class TestContentTypeModel:
    """Tests for ContentType / FieldDefinition parsing."""

    def test_coerce_mapping(self, blog_post: dict) -> None:
        ct = ContentType.coerce(blog_post)
        assert ct.uid == "blog_post"
        assert [f.uid for f in ct.fields][:3] == ["title", "url", "category"]
        assert ContentType.coerce(ct) is ct

    def test_coerce_missing_schema_raises(self) -> None:
        with pytest.raises(ContentTypeError):
            ContentType.coerce({"uid": "broken"})
        with pytest.raises(ContentTypeError):
            ContentType.coerce(["not", "a", "mapping"])

    def test_coerce_malformed_field_raises(self) -> None:
        with pytest.raises(ContentTypeError):
            ContentType.coerce({"schema": [{"display_name": "no uid or type"}]})

    def test_content_type_error_is_value_error(self) -> None:
        assert issubclass(ContentTypeError, ValueError)
        assert issubclass(ContentTypeError, ContentstackToolsError)

    def test_field_aliases(self, blog_post: dict) -> None:
        ct = ContentType.coerce(blog_post)
        seo = ct.field("seo")
        assert seo is not None and seo.is_group
        assert [f.uid for f in seo.children] == ["meta_title", "meta_description"]
        body = ct.field("body")
        assert body.is_json_rte
        assert body.kind is FieldType.JSON

    def test_unknown_attributes_are_kept(self) -> None:
        f = FieldDefinition.model_validate({
            "uid": "x",
            "data_type": "text",
            "non_localizable": True,
            "extensions": [],
        })
        assert f.model_extra["non_localizable"] is True

    def test_null_flags_default(self) -> None:
        f = FieldDefinition.model_validate({
            "uid": "x",
            "data_type": "text",
            "mandatory": None,
            "multiple": None,
            "field_metadata": None,
        })
        assert f.mandatory is False
        assert f.multiple is False
        assert f.field_metadata.allow_rich_text is False

    def test_null_attributes_read_as_absent(self) -> None:
        f = FieldDefinition.model_validate({
            "uid": "x",
            "data_type": "text",
            "enum": {"choices": None, "advanced": None},
            "field_metadata": {"multiline": None, "allow_json_rte": None},
        })
        assert f.enum_values() == []
        assert not f.is_multiline
        block = BlockDefinition.model_validate({"uid": "hero", "title": "Hero", "schema": None})
        assert block.fields == []
        assert block.title_field() is None

    def test_missing_data_type_is_unknown(self) -> None:
        f = FieldDefinition.model_validate({"uid": "x", "display_name": "X"})
        assert f.data_type is None
        assert f.kind is None

    def test_unknown_data_type(self) -> None:
        f = FieldDefinition(uid="x", data_type="custom_widget")
        assert f.kind is None
        assert f.label == "x"

    def test_label_and_description(self) -> None:
        f = FieldDefinition.model_validate({
            "uid": "dob",
            "data_type": "isodate",
            "display_name": "Date of Birth",
            "startDate": "2000-01-01",
        })
        assert f.label == "Date of Birth"
        assert f.description_text == "Date of Birth"
        assert f.start_date == "2000-01-01"

    def test_has_nested_groups(self) -> None:
        flat = FieldDefinition.model_validate({
            "uid": "g", "data_type": "group",
            "schema": [{"uid": "a", "data_type": "text"}],
        })
        nested = FieldDefinition.model_validate({
            "uid": "g", "data_type": "group",
            "schema": [{"uid": "inner", "data_type": "group", "schema": []}],
        })
        assert not flat.has_nested_groups()
        assert nested.has_nested_groups()

    def test_block_title_field(self) -> None:
        block = BlockDefinition.model_validate({
            "uid": "hero",
            "schema": [
                {"uid": "image", "data_type": "file", "mandatory": True},
                {"uid": "headline", "data_type": "text", "mandatory": True},
            ],
        })
        assert block.label == "hero"
        assert block.title_field().uid == "headline"
        assert not block.is_reference

    def test_system_fields(self) -> None:
        for uid in ("uid", "created_at", "updated_by", "_version", "publish_details", "tags"):
            assert is_system_field(uid)
        assert not is_system_field("title")


class TestBlockDispatch:
    """Tests for the tagged-variant block dispatch."""

    @pytest.fixture
    def definitions(self) -> list[BlockDefinition]:
        return [
            BlockDefinition(uid="hero", title="Hero"),
            BlockDefinition(uid="quote", title="Quote"),
        ]

    def test_variant_key_skips_underscore_keys(self) -> None:
        assert variant_key({"_metadata": {"uid": "cs1"}, "quote": {}}) == "quote"
        assert variant_key({"_metadata": {}}) is None
        assert variant_key("hero") is None

    def test_match_known_variant(self, definitions: list[BlockDefinition]) -> None:
        match = match_block({"quote": {"quote_text": "Q"}}, definitions)
        assert isinstance(match, MatchedBlock)
        assert match.definition.title == "Quote"
        assert match.fields == {"quote_text": "Q"}

    def test_match_unknown_variant(self, definitions: list[BlockDefinition]) -> None:
        match = match_block({"carousel": {}}, definitions)
        assert isinstance(match, UnknownBlock)
        assert match.key == "carousel"

    def test_non_mapping_payload_reads_empty(self, definitions: list[BlockDefinition]) -> None:
        match = match_block({"hero": "oops"}, definitions)
        assert isinstance(match, MatchedBlock)
        assert match.fields == {}


# ===========================================================================
# Validator Tests
# ===========================================================================


class TestEntryValidator:
    """Per-type validation rules in read mode."""

    def test_valid_entry(self, blog_post: dict, valid_post: dict) -> None:
        result = build_validator(blog_post).check(valid_post)
        assert result.ok, result.issues
        assert result.issues == []
        assert result.value == valid_post

    def test_success_value_revalidates(self, blog_post: dict, valid_post: dict) -> None:
        validator = build_validator(blog_post)
        first = validator.check(valid_post)
        second = validator.check(first.value)
        assert second.ok
        assert second.value == first.value

    def test_undeclared_top_level_keys_dropped(self, blog_post: dict) -> None:
        result = build_validator(blog_post).check({"title": "x", "not_in_schema": 1})
        assert result.ok
        assert result.value == {"title": "x"}

    def test_nested_extras_preserved(self, blog_post: dict) -> None:
        entry = {"title": "x", "seo": {"meta_title": "T", "canonical": "/x"}}
        result = build_validator(blog_post).check(entry)
        assert result.ok
        assert result.value["seo"] == {"meta_title": "T", "canonical": "/x"}

    def test_missing_required(self, blog_post: dict) -> None:
        result = build_validator(blog_post).check({})
        assert not result.ok
        assert _kinds(result) == {"title": IssueKind.MISSING_REQUIRED}

    def test_optional_field_accepts_null(self, blog_post: dict) -> None:
        result = build_validator(blog_post).check({"title": "x", "url": None, "seo": None})
        assert result.ok
        assert result.value == {"title": "x", "url": None, "seo": None}

    def test_mandatory_field_rejects_null(self, blog_post: dict) -> None:
        result = build_validator(blog_post).check({"title": None})
        assert _kinds(result) == {"title": IssueKind.TYPE_MISMATCH}

    def test_entry_must_be_object(self, blog_post: dict) -> None:
        result = build_validator(blog_post).check(["not", "an", "entry"])
        assert not result.ok
        assert result.issues[0].path == ""
        assert result.issues[0].kind is IssueKind.TYPE_MISMATCH

    def test_text_type(self, blog_post: dict) -> None:
        result = build_validator(blog_post).check({"title": 123})
        assert _kinds(result) == {"title": IssueKind.TYPE_MISMATCH}

    def test_text_format(self, blog_post: dict) -> None:
        validator = build_validator(blog_post)
        assert validator.check({"title": "x", "url": "/ok"}).ok
        result = validator.check({"title": "x", "url": "no-slash"})
        assert _kinds(result) == {"url": IssueKind.PATTERN_MISMATCH}

    def test_text_format_uses_search(self) -> None:
        ct = {"schema": [{"uid": "code", "data_type": "text", "format": "[0-9]+"}]}
        assert validate_entry(ct, {"code": "abc123"}).ok
        assert not validate_entry(ct, {"code": "abc"}).ok

    def test_invalid_format_is_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        ct = {"schema": [{"uid": "code", "data_type": "text", "format": "[unclosed"}]}
        with caplog.at_level(logging.WARNING):
            validator = build_validator(ct)
        assert validator.check({"code": "anything at all"}).ok
        assert "Ignoring invalid format" in caplog.text

    def test_enum_choices(self, blog_post: dict) -> None:
        validator = build_validator(blog_post)
        assert validator.check({"title": "x", "category": "sports"}).ok
        result = validator.check({"title": "x", "category": "weather"})
        assert _kinds(result) == {"category": IssueKind.INVALID_CHOICE}

    def test_enum_choices_compare_by_value(self) -> None:
        ct = {"schema": [{
            "uid": "size",
            "data_type": "text",
            "enum": {"choices": [{"value": 1}, {"value": {"w": 2}}, {"value": [3]}]},
        }]}
        validator = build_validator(ct)
        for value in (1, {"w": 2}, [3]):
            assert validator.check({"size": value}).ok
        for value in (True, 2, {"w": 3}):
            assert _kinds(validator.check({"size": value})) == {"size": IssueKind.INVALID_CHOICE}

    def test_format_with_javascript_named_groups(self) -> None:
        ct = {"schema": [
            {"uid": "year", "data_type": "text", "format": r"^(?<y>\d+)$"},
            {"uid": "pair", "data_type": "text", "format": r"^(?<c>[a-z])\k<c>$"},
        ]}
        validator = build_validator(ct)
        assert validator.check({"year": "2024", "pair": "aa"}).ok
        result = validator.check({"year": "ab", "pair": "ab"})
        assert _kinds(result) == {"year": IssueKind.PATTERN_MISMATCH, "pair": IssueKind.PATTERN_MISMATCH}

    def test_null_schema_attributes(self) -> None:
        ct = {"schema": [
            {"uid": "title", "data_type": "text", "mandatory": True, "enum": {"choices": None}},
            {"uid": "notes", "data_type": "text", "field_metadata": {"multiline": None}},
            {"uid": "extra", "mandatory": True},
            {"uid": "b", "data_type": "blocks", "blocks": [{"uid": "x", "title": "X", "schema": None}]},
        ]}
        validator = build_validator(ct)
        assert validator.check({"title": "free text", "notes": "n", "extra": 5, "b": [{"x": {"any": 1}}]}).ok
        assert _kinds(validator.check({"title": "t"})) == {"extra": IssueKind.MISSING_REQUIRED}

    def test_rich_text_skips_enum_and_format(self) -> None:
        ct = {"schema": [{
            "uid": "html",
            "data_type": "text",
            "format": "^plain$",
            "enum": {"choices": [{"value": "a"}]},
            "field_metadata": {"allow_rich_text": True},
        }]}
        assert validate_entry(ct, {"html": "<p>free <b>markup</b></p>"}).ok
        assert not validate_entry(ct, {"html": 5}).ok

    @pytest.mark.parametrize("value", [0, 10, 1.5, -3])
    def test_number_accepts(self, blog_post: dict, value: Any) -> None:
        assert build_validator(blog_post).check({"title": "x", "views": value}).ok

    @pytest.mark.parametrize("value", ["10", True, [1], {"n": 1}])
    def test_number_rejects(self, blog_post: dict, value: Any) -> None:
        result = build_validator(blog_post).check({"title": "x", "views": value})
        assert _kinds(result) == {"views": IssueKind.TYPE_MISMATCH}

    @pytest.mark.parametrize("value", ["yes", 1, 0])
    def test_boolean_is_strict(self, blog_post: dict, value: Any) -> None:
        result = build_validator(blog_post).check({"title": "x", "featured": value})
        assert _kinds(result) == {"featured": IssueKind.TYPE_MISMATCH}

    @pytest.mark.parametrize("value", [
        "2024-01-31",
        "2024-01-31T10:00:00",
        "2024-01-31T10:00:00Z",
        "2024-01-31T10:00:00.123Z",
    ])
    def test_isodate_accepts(self, blog_post: dict, value: str) -> None:
        assert build_validator(blog_post).check({"title": "x", "published_on": value}).ok

    @pytest.mark.parametrize("value", ["31/01/2024", "2024-1-31", "2024-01-31T10:00:00+02:00", "tomorrow"])
    def test_isodate_rejects(self, blog_post: dict, value: str) -> None:
        result = build_validator(blog_post).check({"title": "x", "published_on": value})
        assert _kinds(result) == {"published_on": IssueKind.PATTERN_MISMATCH}

    def test_file_read_mode(self, blog_post: dict) -> None:
        validator = build_validator(blog_post)
        assert _kinds(validator.check({"title": "x", "hero_image": "blt1"})) == {
            "hero_image": IssueKind.TYPE_MISMATCH,
        }
        assert _kinds(validator.check({"title": "x", "hero_image": {"url": "https://x"}})) == {
            "hero_image.uid": IssueKind.MISSING_REQUIRED,
        }
        assert _kinds(validator.check({"title": "x", "hero_image": {"uid": ""}})) == {
            "hero_image.uid": IssueKind.TYPE_MISMATCH,
        }

    def test_reference(self, blog_post: dict) -> None:
        validator = build_validator(blog_post)
        assert validator.check({"title": "x", "author": {"uid": "blt9"}}).ok
        result = validator.check({"title": "x", "author": {"_content_type_uid": "author"}})
        assert _kinds(result) == {"author.uid": IssueKind.MISSING_REQUIRED}

    def test_link_is_open_record(self, blog_post: dict) -> None:
        entry = {"title": "x", "cta": {"href": "https://x", "target": "_blank"}}
        result = build_validator(blog_post).check(entry)
        assert result.ok
        assert result.value["cta"] == {"href": "https://x", "target": "_blank"}

    def test_multiple_text(self, blog_post: dict) -> None:
        result = build_validator(blog_post).check({"title": "x", "keywords": ["a", 1]})
        assert _kinds(result) == {"keywords[1]": IssueKind.TYPE_MISMATCH}

    def test_taxonomy_terms(self, blog_post: dict) -> None:
        validator = build_validator(blog_post)
        result = validator.check({"title": "x", "taxonomies": [{"taxonomy_uid": "topics"}]})
        assert _kinds(result) == {"taxonomies[0].term_uid": IssueKind.MISSING_REQUIRED}
        result = validator.check({"title": "x", "taxonomies": [{"taxonomy_uid": "topics", "term_uid": ""}]})
        assert _kinds(result) == {"taxonomies[0].term_uid": IssueKind.TYPE_MISMATCH}

    def test_json_rte_shape(self, blog_post: dict) -> None:
        validator = build_validator(blog_post)
        assert _kinds(validator.check({"title": "x", "body": {"type": "p", "children": []}})) == {
            "body.type": IssueKind.TYPE_MISMATCH,
        }
        assert _kinds(validator.check({"title": "x", "body": {"type": "doc"}})) == {
            "body.children": IssueKind.MISSING_REQUIRED,
        }
        bad_leaf = {"type": "doc", "children": [{"type": "p", "children": [{"text": "a", "bold": "yes"}]}]}
        assert _kinds(validator.check({"title": "x", "body": bad_leaf})) == {
            "body.children[0].children[0].bold": IssueKind.TYPE_MISMATCH,
        }

    def test_plain_json_is_unconstrained(self, blog_post: dict) -> None:
        validator = build_validator(blog_post)
        for value in (42, "text", [1, {"a": None}], {"nested": {"deep": True}}):
            assert validator.check({"title": "x", "extra": value}).ok

    def test_group_required_child(self, blog_post: dict) -> None:
        result = build_validator(blog_post).check({"title": "x", "seo": {}})
        assert _kinds(result) == {"seo.meta_title": IssueKind.MISSING_REQUIRED}

    def test_repeatable_group_paths(self, blog_post: dict) -> None:
        result = build_validator(blog_post).check({
            "title": "x",
            "members": [{"name": "A"}, {"role": "Dev"}],
        })
        assert _kinds(result) == {"members[1].name": IssueKind.MISSING_REQUIRED}

    def test_repeatable_group_max_instance(self, blog_post: dict) -> None:
        members = [{"name": n} for n in ("A", "B", "C")]
        result = build_validator(blog_post).check({"title": "x", "members": members})
        assert _kinds(result) == {"members": IssueKind.RANGE_VIOLATION}

    def test_blocks_unknown_variant(self, blog_post: dict) -> None:
        validator = build_validator(blog_post)
        result = validator.check({"title": "x", "sections": [{"hero": {"headline": "H"}}, {"carousel": {}}]})
        assert _kinds(result) == {"sections[1]": IssueKind.NO_MATCHING_VARIANT}
        result = validator.check({"title": "x", "sections": [{"_metadata": {"uid": "cs1"}}]})
        assert _kinds(result) == {"sections[0]": IssueKind.NO_MATCHING_VARIANT}

    def test_blocks_payload_rules(self, blog_post: dict) -> None:
        validator = build_validator(blog_post)
        result = validator.check({"title": "x", "sections": [{"hero": {}}]})
        assert _kinds(result) == {"sections[0].hero.headline": IssueKind.MISSING_REQUIRED}
        result = validator.check({"title": "x", "sections": [{"author_ref": {"title": "no uid"}}]})
        assert _kinds(result) == {"sections[0].author_ref.uid": IssueKind.MISSING_REQUIRED}
        result = validator.check({"title": "x", "sections": ["hero"]})
        assert _kinds(result) == {"sections[0]": IssueKind.TYPE_MISMATCH}

    def test_blocks_without_definitions(self) -> None:
        ct = {"schema": [{"uid": "sections", "data_type": "blocks", "blocks": []}]}
        assert validate_entry(ct, {"sections": [{"whatever": 1}, 2]}).ok

    def test_unknown_type_mandatory_requires_presence(self) -> None:
        ct = {"schema": [{"uid": "widget", "data_type": "custom_widget", "mandatory": True}]}
        assert _kinds(validate_entry(ct, {})) == {"widget": IssueKind.MISSING_REQUIRED}
        assert validate_entry(ct, {"widget": None}).ok
        assert validate_entry(ct, {"widget": {"any": "shape"}}).ok

    def test_uids_that_look_like_attributes(self) -> None:
        ct = {"schema": [
            {"uid": "schema", "data_type": "text"},
            {"uid": "model_config", "data_type": "number"},
            {"uid": "_private", "data_type": "boolean", "mandatory": True},
        ]}
        entry = {"schema": "s", "model_config": 1, "_private": False}
        result = validate_entry(ct, entry)
        assert result.ok
        assert result.value == entry


class TestDateRanges:
    """isodate fields with startDate/endDate."""

    @pytest.fixture
    def event(self) -> dict[str, Any]:
        return {"uid": "event", "schema": [{
            "uid": "starts_at",
            "data_type": "isodate",
            "startDate": "2024-01-01T00:00:00.000Z",
            "endDate": "2024-12-31T23:59:59.999Z",
        }]}

    @pytest.mark.parametrize("value", [
        "2024-06-01T12:00:00Z",
        "2024-01-01T00:00:00.000Z",
        "2024-12-31T23:59:59.999Z",
    ])
    def test_in_range(self, event: dict, value: str) -> None:
        assert validate_entry(event, {"starts_at": value}).ok

    @pytest.mark.parametrize("value", ["2023-12-31T23:59:59Z", "2025-01-01T00:00:00Z"])
    def test_out_of_range(self, event: dict, value: str) -> None:
        result = validate_entry(event, {"starts_at": value})
        assert _kinds(result) == {"starts_at": IssueKind.RANGE_VIOLATION}

    @pytest.mark.parametrize("value", ["2024-06-01", "2024-06-01T12:00:00"])
    def test_full_timestamp_required(self, event: dict, value: str) -> None:
        result = validate_entry(event, {"starts_at": value})
        assert _kinds(result) == {"starts_at": IssueKind.PATTERN_MISMATCH}

    def test_unparseable_bound_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        ct = {"schema": [{"uid": "d", "data_type": "isodate", "endDate": "whenever"}]}
        with caplog.at_level(logging.WARNING):
            validator = build_validator(ct)
        assert validator.check({"d": "2999-01-01T00:00:00Z"}).ok
        assert "whenever" in caplog.text


class TestUpsertMode:
    """Management API payload shapes."""

    def test_file_is_uid_string(self, blog_post: dict) -> None:
        validator = ValidatorBuilder(blog_post).upsert().build()
        assert validator.mode is ValidatorMode.UPSERT
        assert validator.check({"title": "x", "hero_image": "blt1"}).ok
        assert _kinds(validator.check({"title": "x", "hero_image": ""})) == {
            "hero_image": IssueKind.TYPE_MISMATCH,
        }
        assert _kinds(validator.check({"title": "x", "hero_image": {"uid": "blt1"}})) == {
            "hero_image": IssueKind.TYPE_MISMATCH,
        }

    def test_nested_files_follow_mode(self, blog_post: dict) -> None:
        entry = {"title": "x", "sections": [{"hero": {"headline": "H", "image": "blt5"}}]}
        assert validate_entry(blog_post, entry, mode="upsert").ok
        assert not validate_entry(blog_post, entry, mode="read").ok


class TestDraftValidation:
    """Draft mode: every field optional, supplied values still checked."""

    def test_empty_entry_accepted(self, blog_post: dict) -> None:
        result = validate_draft(blog_post, {})
        assert result.ok
        assert result.value == {}

    def test_nested_required_relaxed(self, blog_post: dict) -> None:
        entry = {"seo": {}, "members": [{}], "sections": [{"hero": {}}]}
        assert not validate_entry(blog_post, entry).ok
        assert validate_draft(blog_post, entry).ok

    def test_type_mismatch_still_reported(self, blog_post: dict) -> None:
        result = validate_draft(blog_post, {"views": "many"})
        assert _kinds(result) == {"views": IssueKind.TYPE_MISMATCH}

    def test_null_for_mandatory_still_rejected(self, blog_post: dict) -> None:
        result = validate_draft(blog_post, {"title": None})
        assert _kinds(result) == {"title": IssueKind.TYPE_MISMATCH}
        assert extract_missing_fields(result) == []

    def test_unknown_variant_still_rejected(self, blog_post: dict) -> None:
        result = validate_draft(blog_post, {"sections": [{"carousel": {}}]})
        assert _kinds(result) == {"sections[0]": IssueKind.NO_MATCHING_VARIANT}

    @pytest.mark.parametrize("entry", [
        {"title": "x"},
        {"title": "x", "seo": {"meta_title": "T"}, "members": [{"name": "A"}]},
        {"title": "x", "views": 3, "sections": [{"quote": {"quote_text": "Q"}}]},
        {"title": 5},
        {},
        {"seo": {}},
    ])
    def test_relaxation_is_monotonic(self, blog_post: dict, entry: dict) -> None:
        full = build_validator(blog_post)
        draft = full.partial()
        if full.check(entry).ok:
            assert draft.check(entry).ok
        missing_only = all(i.kind is IssueKind.MISSING_REQUIRED for i in full.check(entry).issues)
        if missing_only:
            assert draft.check(entry).ok

    def test_partial(self, blog_post: dict) -> None:
        validator = build_validator(blog_post, "upsert")
        draft = validator.partial()
        assert draft.draft
        assert draft.mode is ValidatorMode.UPSERT
        assert draft.partial() is draft

    def test_builder_draft(self, blog_post: dict) -> None:
        validator = ValidatorBuilder(blog_post).upsert().draft().build()
        assert validator.draft
        assert validator.check({}).ok


class TestValidatorApi:
    """Result helpers, parse, batch and the field-level compiler."""

    def test_extract_missing_fields(self, blog_post: dict, valid_post: dict) -> None:
        missing = build_validator(blog_post).check({"url": "/x"})
        assert "title" in extract_missing_fields(missing)
        assert missing.missing_fields == ["title"]
        assert extract_missing_fields(build_validator(blog_post).check(valid_post)) == []

    def test_extract_missing_fields_ignores_wrong_types(self, blog_post: dict) -> None:
        result = build_validator(blog_post).check({"title": 3, "seo": {}})
        assert extract_missing_fields(result) == ["seo.meta_title"]
        assert extract_missing_fields(result.issues) == ["seo.meta_title"]

    def test_missing_fields_in_encounter_order(self, blog_post: dict) -> None:
        result = build_validator(blog_post).check({"members": [{}, {}]})
        assert extract_missing_fields(result) == ["title", "members[0].name", "members[1].name"]

    def test_parse(self, blog_post: dict, valid_post: dict) -> None:
        validator = build_validator(blog_post)
        assert validator.parse(valid_post) == valid_post
        with pytest.raises(EntryValidationError) as exc_info:
            validator.parse({})
        assert exc_info.value.issues[0].path == "title"
        assert "title: missing_required" in str(exc_info.value)

    def test_safe_parse_alias(self, blog_post: dict) -> None:
        validator = build_validator(blog_post)
        assert validator.safe_parse({"title": "x"}).ok

    def test_check_batch(self, blog_post: dict) -> None:
        results = build_validator(blog_post).check_batch([{"title": "a"}, {}, {"title": "b"}])
        assert [r.ok for r in results] == [True, False, True]

    def test_result_str(self, blog_post: dict) -> None:
        result = build_validator(blog_post).check({})
        assert str(result) == "[FAIL] 1 issue(s), 1 missing field(s)"
        assert str(result.issues[0]).startswith("title: [missing_required]")

    def test_of_kind(self, blog_post: dict) -> None:
        result = build_validator(blog_post).check({"views": "x"})
        assert [i.path for i in result.of_kind("type_mismatch")] == ["views"]
        assert [i.path for i in result.of_kind(IssueKind.MISSING_REQUIRED)] == ["title"]

    def test_build_without_schema_fails(self) -> None:
        with pytest.raises(ContentTypeError):
            build_validator({"uid": "broken"})
        with pytest.raises(ContentTypeError):
            ValidatorBuilder({"uid": "broken"})

    def test_invalid_mode(self, blog_post: dict) -> None:
        with pytest.raises(ValueError):
            build_validator(blog_post, "delete")

    def test_builder_with_mode(self, blog_post: dict) -> None:
        validator = ValidatorBuilder(blog_post).with_mode("upsert").build()
        assert validator.mode is ValidatorMode.UPSERT
        assert validator.check({"title": "x", "hero_image": "blt1"}).ok
        with pytest.raises(ValueError):
            ValidatorBuilder(blog_post).with_mode("delete")

    def test_field_annotation(self) -> None:
        annotation, info = field_annotation({"uid": "score", "data_type": "number", "mandatory": True})
        assert info.alias == "score"
        assert info.is_required()
        Model = create_model("Model", score=(annotation, info))
        assert Model.model_validate({"score": 3}).score == 3
        with pytest.raises(Exception):
            Model.model_validate({"score": "3"})

    def test_field_annotation_draft(self) -> None:
        _, info = field_annotation(
            FieldDefinition(uid="title", data_type="text", mandatory=True),
            draft=True,
        )
        assert not info.is_required()


# ===========================================================================
# Entry point
# ===========================================================================

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
