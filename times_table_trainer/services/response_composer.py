"""Assemble spoken responses from phrase fragments."""

from __future__ import annotations

from typing import Iterable


def compose(fragments: Iterable[str]) -> str:
    """Trim each fragment and join the non-empty ones with single spaces."""
    return " ".join(part for part in (fragment.strip() for fragment in fragments) if part)


__all__ = ["compose"]
