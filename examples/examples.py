"""
Examples for contentstack-tools
================================
Three complete examples: rendering a profile entry, validating an editor's
draft, and turning a JSON RTE document with modular blocks into Markdown.

Run:
    python examples/examples.py
"""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from contentstack_tools import (
    RenderOptions,
    ValidatorBuilder,
    extract_missing_fields,
    render_entry,
    render_rich_text,
    validate_draft,
)


CRICKETER = {
    "uid": "cricketer_profile",
    "title": "Cricketer Profile",
    "schema": [
        {"uid": "title", "data_type": "text", "display_name": "Title", "mandatory": True},
        {"uid": "url", "data_type": "text", "display_name": "URL", "mandatory": True, "format": "^/"},
        {"uid": "meta_description", "data_type": "text", "display_name": "Meta Description"},
        {
            "uid": "personal_information",
            "data_type": "group",
            "display_name": "Personal Information",
            "schema": [
                {"uid": "full_name", "data_type": "text", "display_name": "Full Name", "mandatory": True},
                {"uid": "date_of_birth", "data_type": "isodate", "display_name": "Date of Birth"},
                {"uid": "height", "data_type": "number", "display_name": "Height"},
            ],
        },
        {
            "uid": "teams",
            "data_type": "group",
            "display_name": "Teams",
            "multiple": True,
            "max_instance": 10,
            "schema": [
                {"uid": "team_name", "data_type": "text", "display_name": "Team Name", "mandatory": True},
                {"uid": "current_team", "data_type": "boolean", "display_name": "Current Team"},
            ],
        },
        {"uid": "keywords", "data_type": "text", "display_name": "Keywords", "multiple": True},
    ],
}


# ---------------------------------------------------------------------------
# Example 1: Profile page
# ---------------------------------------------------------------------------


def example_profile_markdown() -> None:
    """
    Example 1: Rendering a profile entry.

    Simple groups become Field | Value tables, repeatable groups become one
    table with a row per instance, multiple text fields become inline tags.
    """
    print("\n" + "="*60)
    print("EXAMPLE 1: Cricketer profile as Markdown")
    print("="*60)

    entry = {
        "uid": "blt0001",
        "title": "Sachin Tendulkar",
        "url": "/sachin-tendulkar",
        "meta_description": "Profile of Sachin Tendulkar, legendary Indian cricketer.",
        "personal_information": {
            "full_name": "Sachin Ramesh Tendulkar",
            "date_of_birth": "1973-04-24",
            "height": 165,
        },
        "teams": [
            {"team_name": "India", "current_team": False},
            {"team_name": "Mumbai Indians", "current_team": False},
        ],
        "keywords": ["Sachin Tendulkar", "cricket", "India"],
    }

    result = ValidatorBuilder(CRICKETER).build().check(entry)
    print(f"  Validation: {result}")

    print()
    print(render_entry(entry, CRICKETER))
    print("\n  ✓ Example 1 complete")


# ---------------------------------------------------------------------------
# Example 2: Draft workflow
# ---------------------------------------------------------------------------


def example_draft_validation() -> None:
    """
    Example 2: Validating an in-progress draft.

    The full validator reports what is still missing; the draft validator
    accepts the partial entry but still rejects wrongly typed values.
    """
    print("\n" + "="*60)
    print("EXAMPLE 2: Draft validation")
    print("="*60)

    draft = {
        "title": "Rahul Dravid",
        "personal_information": {"height": 180},
    }

    full = ValidatorBuilder(CRICKETER).upsert().build()
    result = full.check(draft)
    print(f"  Full validation:  {result}")
    print(f"  Still needed:     {extract_missing_fields(result)}")

    relaxed = full.partial().check(draft)
    print(f"  Draft validation: {relaxed}")

    broken = validate_draft(CRICKETER, {"url": "rahul-dravid"})
    for issue in broken.issues:
        print(f"  ✗ {issue}")
    print("  ✓ Example 2 complete")


# ---------------------------------------------------------------------------
# Example 3: Rich text and modular blocks
# ---------------------------------------------------------------------------


def example_rich_text_blocks() -> None:
    """
    Example 3: A page built from modular blocks.

    Each block instance gets its own sub-heading; quote blocks render as
    attributed blockquotes; JSON RTE fields are converted to Markdown.
    """
    print("\n" + "="*60)
    print("EXAMPLE 3: Modular blocks and JSON RTE")
    print("="*60)

    page = {
        "uid": "landing_page",
        "schema": [
            {"uid": "title", "data_type": "text", "mandatory": True},
            {
                "uid": "sections",
                "data_type": "blocks",
                "display_name": "Sections",
                "blocks": [
                    {
                        "uid": "text_block",
                        "title": "Text Block",
                        "schema": [
                            {"uid": "heading", "data_type": "text", "display_name": "Heading", "mandatory": True},
                            {
                                "uid": "body",
                                "data_type": "json",
                                "display_name": "Body",
                                "field_metadata": {"allow_json_rte": True},
                            },
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
                ],
            },
        ],
    }

    body = {
        "type": "doc",
        "children": [
            {"type": "p", "children": [{"text": "Built with "}, {"text": "modular blocks", "bold": True}, {"text": "."}]},
            {"type": "ul", "children": [
                {"type": "li", "children": [{"text": "fast"}]},
                {"type": "li", "children": [{"text": "structured"}]},
            ]},
        ],
    }
    entry = {
        "title": "Welcome",
        "sections": [
            {"text_block": {"heading": "Why", "body": body}},
            {"quote": {"quote_text": "Content is king.", "attribution": "Bill Gates"}},
        ],
    }

    print("  Rich text alone:")
    print("  " + render_rich_text(body).replace("\n", "\n  "))
    print()
    print(render_entry(entry, page, RenderOptions(heading_level=2)))
    print("\n  ✓ Example 3 complete")


# ---------------------------------------------------------------------------
# Run all examples
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    example_profile_markdown()
    example_draft_validation()
    example_rich_text_blocks()

    print("\n" + "="*60)
    print("All examples completed successfully.")
    print("="*60 + "\n")
