"""Tests for the cache warm-up script."""
from __future__ import annotations

import importlib.util
from pathlib import Path

import pytest


_SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "prefetch.py"
_spec = importlib.util.spec_from_file_location("prefetch", _SCRIPT)
prefetch = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(prefetch)


def test_file_names_are_images():
    assert prefetch._is_image("File:Logo.png")
    assert prefetch._is_image("Image:Logo.png|thumb")


def test_other_names_are_templates():
    assert not prefetch._is_image("Infobox")
    assert not prefetch._is_image("Template:Infobox")
    assert not prefetch._is_image("Star Wars: A New Hope")


@pytest.mark.asyncio
async def test_dry_run_fetches_nothing(capsys):
    assert await prefetch.prefetch(["Infobox", "File:Logo.png"], dry_run=True) == 0
    out = capsys.readouterr().out
    assert "[template] Infobox" in out
    assert "[image] File:Logo.png" in out
