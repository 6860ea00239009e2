#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Results of remote calls.

``Found`` carries a value, ``NotFound`` means the remote wiki answered and has
no such page or image, ``Failed`` means the call itself went wrong (network,
timeout, malformed response).  Callers treat the last two the same way for
rendering but can tell them apart for logging and caching.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union


T = TypeVar("T")


# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class Failed:
    error: BaseException | str

    @property
    def message(self) -> str:
        return str(self.error) or type(self.error).__name__


Outcome = Union[Found[T], NotFound, Failed]


# -----------------------------------------------------------------------------
