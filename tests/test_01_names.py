"""Tests for page-name parsing and the name codec."""
from __future__ import annotations

import pytest

from apiwiki.services.names import (
    FILE, MAIN, TEMPLATE, NameCodec, canonicalize, get_namespace, parse_page_name,
)


# ── canonicalize ─────────────────────────────────────────────────────────────

def test_canonicalize_joins_with_colon():
    assert canonicalize("Template", "Foo") == "Template:Foo"


def test_canonicalize_empty_namespace_returns_title():
    assert canonicalize("", "Foo bar") == "Foo bar"


def test_canonicalize_normalizes_title():
    assert canonicalize("Template", "  infobox_person ") == "Template:Infobox person"


# ── namespaces ───────────────────────────────────────────────────────────────

def test_namespace_lookup_case_insensitive():
    assert get_namespace("template") is TEMPLATE
    assert get_namespace("TEMPLATE") is TEMPLATE


def test_image_is_alias_of_file():
    assert get_namespace("Image") is FILE


def test_unknown_namespace():
    assert get_namespace("Nonsense") is None


# ── parse_page_name ──────────────────────────────────────────────────────────

def test_parse_uses_default_namespace():
    parsed = parse_page_name("Foo", TEMPLATE)
    assert parsed.namespace is TEMPLATE
    assert parsed.full_name == "Template:Foo"
    assert parsed.valid


def test_parse_explicit_prefix_wins():
    parsed = parse_page_name("Help:Contents", TEMPLATE)
    assert parsed.namespace.name == "Help"
    assert parsed.title == "Contents"


def test_parse_leading_colon_selects_main():
    parsed = parse_page_name(":Main Page", TEMPLATE)
    assert parsed.namespace is MAIN
    assert parsed.full_name == "Main Page"


def test_parse_leading_colon_with_known_prefix():
    parsed = parse_page_name(":Template:Foo", MAIN)
    assert parsed.namespace is TEMPLATE


def test_parse_unknown_prefix_stays_in_title():
    parsed = parse_page_name("Star Wars: Episode IV", TEMPLATE)
    assert parsed.namespace is TEMPLATE
    assert parsed.title == "Star Wars: Episode IV"


def test_parse_drops_fragment():
    parsed = parse_page_name("Foo#History", TEMPLATE)
    assert parsed.title == "Foo"
    assert parsed.valid


@pytest.mark.parametrize("text", ["", "#Section", "Foo{{bar}}", "A|B", "Foo<br>", "Template:"])
def test_parse_invalid_titles(text):
    assert not parse_page_name(text, TEMPLATE).valid


# ── tokens ───────────────────────────────────────────────────────────────────

def test_url_token_keeps_colon_and_underscores_spaces():
    assert NameCodec.to_url_token("File:My photo.png") == "File:My_photo.png"


def test_url_token_escapes_unsafe_characters():
    assert NameCodec.to_url_token("A&B?.png") == "A%26B%3F.png"
    assert NameCodec.to_url_token("Café.jpg") == "Caf%C3%A9.jpg"


def test_file_token_is_a_single_flat_name():
    token = NameCodec.to_file_token("a/b\\c:d.png")
    assert "/" not in token
    assert "\\" not in token
    assert ":" not in token
    assert token == "a%2Fb%5Cc%3Ad.png"


def test_file_token_plain_name_unchanged():
    assert NameCodec.to_file_token("Logo123.png") == "Logo123.png"


# ── separator policy ─────────────────────────────────────────────────────────

def test_join_with_colon_by_default():
    assert NameCodec().join("File", "Logo.png") == "File:Logo.png"


def test_join_with_slash_when_replacing_colon():
    assert NameCodec(replace_colon=True).join("File", "Logo.png") == "File/Logo.png"


def test_join_empty_prefix():
    assert NameCodec(replace_colon=True).join("", "Logo.png") == "Logo.png"
