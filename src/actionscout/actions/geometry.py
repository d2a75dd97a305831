"""Spatial helpers shared by the heuristic detectors."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from actionscout.crawler.models import Element, Position


def distance(a: Position, b: Position) -> float:
    """Euclidean distance between two positions."""
    return math.hypot(b.x - a.x, b.y - a.y)


def rank_by_distance(reference: Element, candidates: Iterable[Element]) -> list[Element]:
    """Candidates ordered by ascending distance to ``reference``.

    The sort is stable, so equidistant candidates keep document order. The
    reference element is never its own neighbour.
    """
    others = [candidate for candidate in candidates if candidate is not reference]
    return sorted(others, key=lambda candidate: distance(reference.position, candidate.position))


def nearest(reference: Element, candidates: Iterable[Element]) -> Element | None:
    """The candidate closest to ``reference``, or None."""
    ranked = rank_by_distance(reference, candidates)
    return ranked[0] if ranked else None


@dataclass(frozen=True)
class Box:
    """Axis-aligned box used to approximate containment (bounds inclusive)."""

    left: float
    top: float
    width: float
    height: float

    @classmethod
    def below(cls, origin: Position, width: float, height: float) -> Box:
        """A box whose top-left corner is ``origin``."""
        return cls(left=origin.x, top=origin.y, width=width, height=height)

    def contains(self, position: Position) -> bool:
        return (
            self.left <= position.x <= self.left + self.width
            and self.top <= position.y <= self.top + self.height
        )

    def select(self, elements: Iterable[Element]) -> list[Element]:
        """Elements positioned inside the box, in their original order."""
        return [element for element in elements if self.contains(element.position)]
