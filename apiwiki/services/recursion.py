#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Redirect depth accounting.

A ResolutionContext belongs to exactly one top-level request.  Every nested
lookup triggered by that request receives the same context object, so the
depth counter covers the whole redirect chain and is invisible to other
requests running at the same time.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass


# -----------------------------------------------------------------------------

@dataclass
class ResolutionContext:
    limit: int
    depth: int = 0

    @property
    def exceeded(self) -> bool:
        return self.depth > self.limit


# -----------------------------------------------------------------------------

class RecursionGuard:

    @staticmethod
    def enter(context: ResolutionContext) -> int:
        context.depth += 1
        return context.depth

    @staticmethod
    def exit(context: ResolutionContext) -> None:
        if context.depth > 0:
            context.depth -= 1

    @classmethod
    @contextmanager
    def scope(cls, context: ResolutionContext) -> Iterator[int]:
        """Enter for the duration of the ``with`` block; exit on every path."""
        depth = cls.enter(context)
        try:
            yield depth
        finally:
            cls.exit(context)


# -----------------------------------------------------------------------------
