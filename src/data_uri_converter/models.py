"""Domain models for data URI conversion."""

from __future__ import annotations

from dataclasses import dataclass, field

from bs4 import Tag


@dataclass(slots=True)
class ImageReference:
    """An ``img``/``embed`` element and the source it points at."""

    element: Tag
    source: str


@dataclass(slots=True)
class HtmlConversionResult:
    """Serialized document plus the file-name-safe title."""

    html: str
    title: str
    inlined: list[str] = field(default_factory=list)
    kept: list[str] = field(default_factory=list)


__all__ = ["HtmlConversionResult", "ImageReference"]
