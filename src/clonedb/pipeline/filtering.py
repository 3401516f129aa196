"""Suppression of known-benign warnings in process error output."""

from __future__ import annotations

from collections.abc import Sequence


def filter_warnings(text: str, skip_warnings: Sequence[str] | None = None) -> str:
    """Drop every line of ``text`` that contains one of ``skip_warnings``.

    Matching is a case-sensitive substring test.  Surviving lines keep their
    order and line endings; with no substrings ``text`` is returned as is.
    """

    if not skip_warnings:
        return text
    kept = [
        line
        for line in text.splitlines(keepends=True)
        if not any(warning in line for warning in skip_warnings)
    ]
    return "".join(kept)


__all__ = ["filter_warnings"]
