"""Tests for the insert-once cache store."""
from __future__ import annotations

import asyncio

import pytest

from apiwiki.core.database import engine_options


@pytest.mark.asyncio
async def test_missing_topic_is_none(store):
    assert await store.get_topic("Template:Nope") is None


@pytest.mark.asyncio
async def test_put_then_get_topic(store):
    assert await store.put_topic_if_absent("Template:Foo", "Hello") is True
    record = await store.get_topic("Template:Foo")
    assert record is not None
    assert record.content == "Hello"


@pytest.mark.asyncio
async def test_empty_topic_is_stored_and_distinct_from_missing(store):
    await store.put_topic_if_absent("Template:Empty", "")
    record = await store.get_topic("Template:Empty")
    assert record is not None
    assert record.content == ""


@pytest.mark.asyncio
async def test_first_writer_wins(store):
    assert await store.put_topic_if_absent("Template:Foo", "first") is True
    assert await store.put_topic_if_absent("Template:Foo", "second") is False
    record = await store.get_topic("Template:Foo")
    assert record.content == "first"


@pytest.mark.asyncio
async def test_concurrent_writers_do_not_fail(store):
    results = await asyncio.gather(*[
        store.put_topic_if_absent("Template:Race", f"writer {i}") for i in range(5)
    ])
    assert results.count(True) == 1
    record = await store.get_topic("Template:Race")
    assert record.content.startswith("writer ")


@pytest.mark.asyncio
async def test_put_then_get_image(store):
    await store.put_image_if_absent("Logo.png", "https://up.test/Logo.png", "/tmp/Logo.png")
    record = await store.get_image("Logo.png")
    assert record.url == "https://up.test/Logo.png"
    assert record.filename == "/tmp/Logo.png"


@pytest.mark.asyncio
async def test_image_insert_does_not_overwrite(store):
    await store.put_image_if_absent("Logo.png", "https://up.test/a.png", "/tmp/a.png")
    await store.put_image_if_absent("Logo.png", "https://up.test/b.png", "/tmp/b.png")
    record = await store.get_image("Logo.png")
    assert record.filename == "/tmp/a.png"


@pytest.mark.asyncio
async def test_repoint_image_moves_stale_row(store):
    await store.put_image_if_absent("Logo.png", "https://up.test/a.png", "/tmp/a.png")
    assert await store.repoint_image("Logo.png", "/tmp/a.png", "https://up.test/b.png", "/tmp/b.png") is True
    record = await store.get_image("Logo.png")
    assert record.url == "https://up.test/b.png"
    assert record.filename == "/tmp/b.png"


@pytest.mark.asyncio
async def test_repoint_image_only_from_expected_filename(store):
    await store.put_image_if_absent("Logo.png", "https://up.test/a.png", "/tmp/a.png")
    assert await store.repoint_image("Logo.png", "/tmp/other.png", None, "/tmp/c.png") is False
    assert await store.repoint_image("Nope.png", "/tmp/a.png", None, "/tmp/c.png") is False
    assert (await store.get_image("Logo.png")).filename == "/tmp/a.png"


# ── engine setup ─────────────────────────────────────────────────────────────

def test_engine_options_per_backend():
    assert engine_options("sqlite+aiosqlite:///./apiwiki.db") == {
        "connect_args": {"check_same_thread": False},
    }
    pooled = engine_options("postgresql+asyncpg://wiki:secret@db/apiwiki")
    assert pooled["pool_pre_ping"] is True
    assert "connect_args" not in pooled
